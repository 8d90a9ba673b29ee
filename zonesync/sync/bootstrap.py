# ZoneSync Bootstrap Coordinator
# One-time provisioning of the remote zone and change subscription

from dataclasses import dataclass

from zonesync.remote.base import RemoteStore
from zonesync.sync.state import SUBSCRIPTION_CREATED_FLAG, ZONE_CREATED_FLAG, CursorStore


@dataclass
class BootstrapResult:
    """Outcome of a bootstrap run."""

    zone_created: bool = False
    subscription_created: bool = False
    subscription_found: bool = False

    @property
    def remote_calls_made(self) -> bool:
        """Check if any provisioning reached the remote store."""
        return self.zone_created or self.subscription_created or self.subscription_found


class BootstrapCoordinator:
    """
    Idempotently ensures the zone and subscription exist.

    Progress is tracked through durable flags so every process start can
    call ensure() again; a flag is only set after the remote call succeeded.
    """

    def __init__(self, remote: RemoteStore, cursor_store: CursorStore, *, zone: str, subscription_id: str):
        """
        Initialize bootstrap coordinator.

        Args:
            remote: Remote store to provision.
            cursor_store: Store holding the bootstrap flags.
            zone: Fixed zone name.
            subscription_id: Fixed subscription identity.
        """
        self.remote = remote
        self.cursor_store = cursor_store
        self.zone = zone
        self.subscription_id = subscription_id

    @property
    def is_zone_created(self) -> bool:
        return self.cursor_store.load_flag(ZONE_CREATED_FLAG)

    @property
    def is_subscription_created(self) -> bool:
        return self.cursor_store.load_flag(SUBSCRIPTION_CREATED_FLAG)

    @property
    def is_initialized(self) -> bool:
        """Check if both the zone and the subscription are in place."""
        return self.is_zone_created and self.is_subscription_created

    def ensure_zone(self) -> bool:
        """
        Create the zone unless already done.

        Returns:
            True if a remote creation call was made.

        Raises:
            TransportError: If the remote call fails. The flag stays unset.
        """
        if self.is_zone_created:
            return False

        self.remote.create_zone(self.zone)
        self.cursor_store.save_flag(ZONE_CREATED_FLAG, True)
        return True

    def ensure_subscription(self) -> BootstrapResult:
        """
        Create the change subscription unless already done.

        An existing remote subscription only needs the local flag, which
        heals a run where creation succeeded but the flag write did not.

        Raises:
            TransportError: If a remote call fails. The flag stays unset.
        """
        result = BootstrapResult()
        if self.is_subscription_created:
            return result

        existing = self.remote.fetch_subscription(self.subscription_id)
        if existing is not None:
            result.subscription_found = True
        else:
            self.remote.create_subscription(self.zone, self.subscription_id, wants_content_wake=True)
            result.subscription_created = True

        self.cursor_store.save_flag(SUBSCRIPTION_CREATED_FLAG, True)
        return result

    def ensure(self) -> BootstrapResult:
        """
        Ensure zone then subscription.

        The subscription references the zone, so a zone failure propagates
        before the subscription is attempted.
        """
        zone_created = self.ensure_zone()
        result = self.ensure_subscription()
        result.zone_created = zone_created
        return result
