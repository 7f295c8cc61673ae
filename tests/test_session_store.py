from __future__ import annotations

import json
from pathlib import Path

from portal_sync.session import Session
from portal_sync.session_store import SessionStore


def test_missing_file_means_no_session(tmp_path: Path):
    assert SessionStore(str(tmp_path / "nope.json")).load() is None


def test_file_without_cookies_field_means_no_session(tmp_path: Path):
    p = tmp_path / "creds.json"
    p.write_text('{"token": "x"}', encoding="utf-8")
    assert SessionStore(str(p)).load() is None


def test_corrupt_file_means_no_session(tmp_path: Path):
    p = tmp_path / "creds.json"
    p.write_text("{not json", encoding="utf-8")
    assert SessionStore(str(p)).load() is None


def test_save_then_load(tmp_path: Path):
    p = tmp_path / "sub" / "creds.json"
    store = SessionStore(str(p))
    store.save(Session.from_mapping({"sid": "abc", "csrf": "x"}))

    assert json.loads(p.read_text(encoding="utf-8")) == {"cookies": {"sid": "abc", "csrf": "x"}}
    loaded = store.load()
    assert loaded is not None
    assert loaded.as_dict() == {"sid": "abc", "csrf": "x"}


def test_save_overwrites_previous_content(tmp_path: Path):
    p = tmp_path / "creds.json"
    p.write_text('{"cookies": {"old": "1"}, "extra": true}', encoding="utf-8")
    SessionStore(str(p)).save(Session.from_mapping({"sid": "2"}))
    assert json.loads(p.read_text(encoding="utf-8")) == {"cookies": {"sid": "2"}}


def test_browser_export_list_is_accepted(tmp_path: Path):
    p = tmp_path / "creds.json"
    p.write_text(
        '{"cookies": [{"name": "sid", "value": "S1", "domain": "example.com", "path": "/"}, {"bad": 1}]}',
        encoding="utf-8",
    )
    loaded = SessionStore(str(p)).load()
    assert loaded is not None and loaded.get("sid") == "S1"


def test_clear(tmp_path: Path):
    p = tmp_path / "creds.json"
    store = SessionStore(str(p))
    assert store.clear() is False
    store.save(Session.from_mapping({"a": "1"}))
    assert store.clear() is True
    assert not p.exists()


def test_deeply_nested_file_means_no_session(tmp_path: Path):
    p = tmp_path / "creds.json"
    p.write_text("[" * 200000 + "]" * 200000, encoding="utf-8")
    assert SessionStore(str(p)).load() is None
