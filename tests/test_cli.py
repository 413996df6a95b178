"""Tests for the command line entry point."""

import json

import pytest

from shardmigrate import cli
from shardmigrate.models.migration import MigrationMode
from shardmigrate.orchestrator import MigrationOrchestrator
from shardmigrate.transformers import NumbersTransformer

from .conftest import FakeDestination, FakeSourceStore


@pytest.fixture
def fake_stores(monkeypatch):
    """Route MigrationOrchestrator.from_config to in-memory stores."""
    source = FakeSourceStore({
        "numbers:1": (b"\x00one", -1),
        "numbers:2": (b"\x00two", 1000),
        "numbers:": (b"\x00bad", -1),
    })
    destination = FakeDestination()

    def from_config(cls, config, registry=None):
        config.validate()
        return cls(config, source, destination, NumbersTransformer())

    monkeypatch.setattr(MigrationOrchestrator, "from_config", classmethod(from_config))
    monkeypatch.setattr(cli, "install_interrupt_handler", lambda orchestrator: None)
    return source, destination


class TestParser:
    """Test flag parsing and config merging."""

    def test_go_style_flags(self):
        args = cli.build_parser().parse_args(["-src", "a:1", "-dst", "b:2", "-verify"])
        config = cli.build_config(args)

        assert config.src == "a:1"
        assert config.dst == "b:2"
        assert config.mode == MigrationMode.VERIFY

    def test_verify_explicit_false(self):
        args = cli.build_parser().parse_args(["--verify", "false"])
        assert cli.build_config(args).mode == MigrationMode.MIGRATE

    def test_flags_override_config_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "src": "file-src:6379",
            "dst": "file-dst:7000",
            "transformer": "senderid",
            "pool_size": 10,
        }))

        args = cli.build_parser().parse_args([
            "--config", str(path), "--dst", "flag-dst:7000", "--no-ttl", "--read-only",
        ])
        config = cli.build_config(args)

        assert config.src == "file-src:6379"
        assert config.dst == "flag-dst:7000"
        assert config.transformer == "senderid"
        assert config.pool_size == 10
        assert not config.restore_ttl
        assert config.read_only

    def test_parse_bool(self):
        assert cli.parse_bool("Yes") is True
        assert cli.parse_bool("0") is False
        with pytest.raises(Exception):
            cli.parse_bool("maybe")


class TestMain:
    """Test complete command line runs."""

    def test_missing_addresses(self, capsys):
        assert cli.main([]) == 1

    def test_list_transformers(self, capsys):
        assert cli.main(["--list-transformers"]) == 0

        out = capsys.readouterr().out
        assert "senderid" in out
        assert "sms_rate_limit:*" in out

    def test_preview(self, capsys):
        code = cli.main(["--transformer", "numbers", "--preview", "numbers:1", "numbers:"])

        out = capsys.readouterr().out
        assert "numbers:1 -> numbers:{1}" in out
        assert "numbers: -> ERROR: malformed key numbers:" in out
        assert code == 1

    def test_preview_unknown_transformer(self):
        assert cli.main(["--transformer", "nope", "--preview", "k"]) == 1

    def test_migrate_run(self, fake_stores, tmp_path, capsys):
        source, destination = fake_stores
        failed = tmp_path / "failed.keys"

        code = cli.main([
            "-src", "a:1", "-dst", "b:2", "--transformer", "numbers",
            "--no-progress", "--failed-keys-file", str(failed),
        ])

        out = capsys.readouterr().out
        assert code == 0
        assert "Done; successCount = 2; failureCount = 1;" in out
        assert f"Failed keys written to {failed} file" in out
        assert failed.read_text() == "numbers:\n"
        assert sorted(destination.data) == ["numbers:{1}", "numbers:{2}"]
        assert source.closed and destination.closed

    def test_report_written(self, fake_stores, tmp_path):
        report = tmp_path / "report.json"

        cli.main([
            "-src", "a:1", "-dst", "b:2", "--transformer", "numbers", "--no-progress",
            "--failed-keys-file", str(tmp_path / "failed.keys"), "--report", str(report),
        ])

        data = json.loads(report.read_text())
        assert data["success_count"] == 2
        assert data["failed_keys_file"] == str(tmp_path / "failed.keys")

    def test_unwritable_failed_keys_file(self, fake_stores, tmp_path, capsys):
        code = cli.main([
            "-src", "a:1", "-dst", "b:2", "--transformer", "numbers", "--no-progress",
            "--failed-keys-file", str(tmp_path / "missing" / "failed.keys"),
        ])

        assert code == 1
        assert "Done; successCount = 2; failureCount = 1;" in capsys.readouterr().out
