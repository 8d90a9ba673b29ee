# Tests for zonesync.cli
# CLI commands using Click testing

from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from zonesync.cli import cli
from zonesync.errors import TransportError
from zonesync.sync.history import SyncHistory


def invoke(*args: str, input: str | None = None):
    return CliRunner().invoke(cli, list(args), input=input)


class TestCliGroup:
    """Tests for main CLI group."""

    def test_help(self):
        result = invoke("--help")
        assert result.exit_code == 0
        assert "ZoneSync" in result.output
        assert "Workflow" in result.output

    def test_version(self):
        result = invoke("--version")
        assert result.exit_code == 0
        assert "zonesync" in result.output


class TestMissingConfig:
    """Commands fail cleanly without a configuration file."""

    @patch("zonesync.cli.load_config", side_effect=FileNotFoundError("No config"))
    def test_pull(self, mock_load):
        result = invoke("pull")
        assert result.exit_code == 1
        assert "No config" in result.output

    def test_invalid_config(self, config_file: Path):
        config_file.write_text("remote:\n  page_size: 0\n", encoding="utf-8")

        result = invoke("list")

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestSyncCommands:
    """End-to-end command tests against a directory remote."""

    def test_init(self, config_file: Path):
        result = invoke("init")

        assert result.exit_code == 0, result.output
        assert "Created zone" in result.output
        assert "Created change subscription" in result.output
        assert "Zone 'Contacts' is ready" in result.output

    def test_init_twice(self, config_file: Path):
        invoke("init")
        result = invoke("init")

        assert result.exit_code == 0
        assert "Created zone" not in result.output

    def test_pull_requires_init(self, config_file: Path):
        result = invoke("pull")

        assert result.exit_code == 1
        assert "zonesync init" in result.output

    def test_add_list_delete(self, config_file: Path):
        invoke("init")

        assert invoke("add", "Bob").exit_code == 0
        result = invoke("add", "Alice")
        assert result.exit_code == 0
        assert "Added 'Alice'" in result.output

        result = invoke("list")
        assert result.exit_code == 0
        assert result.output.index("Alice") < result.output.index("Bob")

        result = invoke("delete", "Bob")
        assert result.exit_code == 0
        assert "Deleted 'Bob'" in result.output
        assert "Bob" not in invoke("list").output

    def test_delete_unknown(self, config_file: Path):
        invoke("init")

        result = invoke("delete", "Nobody")

        assert result.exit_code == 1
        assert "No record named 'Nobody'" in result.output

    def test_add_remote_failure(self, config_file: Path):
        invoke("init")

        with patch("zonesync.remote.directory.DirectoryRemoteStore.save", side_effect=TransportError("quota exceeded")):
            result = invoke("add", "Alice")

        assert result.exit_code == 1
        assert "quota exceeded" in result.output
        assert "No records" in invoke("list").output

    def test_pull(self, config_file: Path):
        invoke("init")
        invoke("add", "Alice")

        result = invoke("pull")

        assert result.exit_code == 0
        assert "Already up to date" in result.output

    def test_list_empty(self, config_file: Path):
        result = invoke("list")
        assert result.exit_code == 0
        assert "No records" in result.output


class TestSignalCommand:
    """Tests for signal command."""

    def test_signal_no_data(self, config_file: Path):
        invoke("init")

        result = invoke("signal")

        assert result.exit_code == 0
        assert "no new data" in result.output

    def test_signal_failure_is_not_fatal(self, config_file: Path):
        invoke("init")

        with patch(
            "zonesync.remote.directory.DirectoryRemoteStore.fetch_changes", side_effect=TransportError("offline")
        ):
            result = invoke("signal")

        assert result.exit_code == 0
        assert "will retry" in result.output
        assert "offline" in result.output


class TestStatusCommand:
    """Tests for status command."""

    def test_status_before_init(self, config_file: Path):
        result = invoke("status")

        assert result.exit_code == 0
        assert "Zone: Contacts" in result.output
        assert "Change token" in result.output

    def test_status_after_init(self, config_file: Path):
        invoke("init")
        invoke("add", "Alice")

        result = invoke("status")

        assert result.exit_code == 0
        assert "1 zone(s)" in result.output


class TestResetCommand:
    """Tests for reset command."""

    def test_reset_cancelled(self, config_file: Path):
        invoke("init")
        invoke("add", "Alice")

        result = invoke("reset", input="n\n")

        assert "Reset cancelled" in result.output
        assert "Alice" in invoke("list").output

    def test_reset_then_pull(self, config_file: Path):
        invoke("init")
        invoke("add", "Alice")

        result = invoke("reset", "--yes")
        assert result.exit_code == 0
        assert "No records" in invoke("list").output

        invoke("pull")
        assert "Alice" in invoke("list").output


class TestLogCommand:
    """Tests for log command and history recording."""

    def test_operations_are_logged(self, config_file: Path, sample_config: dict):
        invoke("init")
        invoke("add", "Alice")
        invoke("delete", "Nobody")

        history = SyncHistory(Path(sample_config["output"]["sync_history"]))
        entries = history.entries()
        assert [e.operation for e in entries] == ["init", "add", "delete"]
        assert entries[1].detail["name"] == "Alice"
        assert entries[2].success is False

        result = invoke("log", "-n", "1")
        assert result.exit_code == 0
        assert "delete" in result.output

    def test_log_disabled(self, config_file: Path, sample_config: dict):
        sample_config["output"]["sync_history"] = None
        config_file.write_text(yaml.dump(sample_config), encoding="utf-8")

        result = invoke("log")

        assert result.exit_code == 0
        assert "disabled" in result.output


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_init(self, temp_dir: Path, monkeypatch):
        path = temp_dir / "fresh" / "config.yaml"
        monkeypatch.setenv("ZONESYNC_CONFIG", str(path))

        result = invoke("config", "init")
        assert result.exit_code == 0
        assert "Created configuration" in result.output
        assert path.exists()

        result = invoke("config", "init")
        assert "already exists" in result.output

    def test_config_show(self, config_file: Path):
        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "Contacts" in result.output
        assert "page size 2" in result.output

    def test_config_check_valid(self, config_file: Path):
        result = invoke("config", "check")
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_config_check_invalid(self, temp_dir: Path):
        path = temp_dir / "bad.yaml"
        path.write_text("zone:\n  zone_name: ''\n", encoding="utf-8")

        result = invoke("config", "check", str(path))

        assert result.exit_code == 1
        assert "zone -> zone_name" in result.output
