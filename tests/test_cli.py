from __future__ import annotations

import pytest

from portal_sync import cli
from portal_sync.config import ConfigError, settings_from_env


def test_env_then_flags_precedence():
    base = settings_from_env({"PORTAL_SYNC_USERNAME": "env@x.com", "PORTAL_SYNC_PASSWORD": "envpw"})
    assert base.credentials.username == "env@x.com"
    assert base.host == "challenge.sunvoy.com"

    args = cli.build_parser().parse_args(["--password", "flagpw", "--out", "o.json", "--parser", "html"])
    s = cli.settings_from_args(args, base=base)
    assert s.credentials.username == "env@x.com"
    assert s.credentials.password == "flagpw"
    assert s.output_path == "o.json"
    assert s.parser == "html"
    assert s.session_path == ".credentials.json"


def test_invalid_settings_raise_config_error():
    args = cli.build_parser().parse_args(["--timeout", "0"])
    with pytest.raises(ConfigError):
        cli.settings_from_args(args, base=settings_from_env({}))


def test_main_exit_codes(monkeypatch, capsys):
    assert cli.main(["--host", "bad/host"]) == 2
    assert "Invalid host" in capsys.readouterr().err

    class _Boom:
        def __init__(self, settings):
            pass

        def run(self):
            raise RuntimeError("kaput")

    monkeypatch.setattr(cli, "SyncRunner", _Boom)
    assert cli.main([]) == 1
    assert capsys.readouterr().err.strip() == "Error: kaput"


def test_main_prints_report_json(monkeypatch, capsys):
    from portal_sync.runner import RunReport

    class _Ok:
        def __init__(self, settings):
            pass

        def run(self):
            return RunReport(states=["done"], records_written=3)

    monkeypatch.setattr(cli, "SyncRunner", _Ok)
    assert cli.main(["--json"]) == 0
    assert '"records_written": 3' in capsys.readouterr().out
