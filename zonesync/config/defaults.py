# ZoneSync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "storage": {
        "path": "~/.config/zonesync/store.yaml",
    },
    "remote": {
        "path": "~/.config/zonesync/remote",
        "page_size": 100,
    },
    "zone": {
        "zone_name": "Contacts",
        "subscription_id": "changes-subscription-id",
        "name_field": "name",
    },
    "output": {
        "verbose": False,
        "colored": True,
        "sync_history": "~/.config/zonesync/history.yaml",
        "history_limit": 200,
    },
}


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """
    Generate default configuration as YAML string.

    Returns:
        YAML formatted configuration with comments.
    """
    header = """# ZoneSync Configuration
# Incremental sync of a local record cache with a remote zone
#
# storage: where the local cache, change token and bootstrap flags live
# remote:  directory shared by every client of the same remote store
# zone:    fixed zone and subscription identities (do not change after init)
#
"""
    body = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return header + body
