from __future__ import annotations

import requests

from portal_sync.directory import fetch_users, parse_users
from portal_sync.http_engine import HttpEngine
from portal_sync.profile import fetch_current_user
from portal_sync.session import Session

from portal_fakes import SETTINGS_HTML, FakeHttp, mk_resp


USERS_JSON = '[{"id":"1","firstName":"A","lastName":"B","email":"a@x.com","role":"admin"}]'


def _engine(http: FakeHttp) -> HttpEngine:
    return HttpEngine("portal.example.com", http_session=http)  # type: ignore[arg-type]


def test_fetch_users_ok():
    http = FakeHttp({("POST", "/api/users"): [mk_resp(200, USERS_JSON, headers={"Content-Type": "application/json"})]})
    res, _ = fetch_users(_engine(http), Session())
    assert res.ok
    assert res.status_code == 200
    assert [u.email for u in res.users] == ["a@x.com"]
    assert res.users[0].extra == {"role": "admin"}


def test_fetch_users_empty_array_is_ok_not_failure():
    http = FakeHttp({("POST", "/api/users"): [mk_resp(200, "[]")]})
    res, _ = fetch_users(_engine(http), Session())
    assert res.ok and res.users == []


def test_fetch_users_failures_are_explicit():
    http = FakeHttp({("POST", "/api/users"): [
        mk_resp(401, "denied"),
        mk_resp(302, headers={"Location": "/login"}),
        mk_resp(200, "<html>login</html>", headers={"Content-Type": "text/html"}),
        requests.ConnectionError("down"),
    ]})
    eng = _engine(http)
    errors = []
    for _ in range(4):
        res, _s = fetch_users(eng, Session())
        assert not res.ok and res.users == []
        errors.append(res.error)
    assert errors[0] == "http_401"
    assert errors[1] == "unexpected_status_302"
    assert errors[2].startswith("not_json")
    assert errors[3] == "network_error:ConnectionError"


def test_parse_users_shape_and_decode_errors():
    assert parse_users('{"users": []}').error.startswith("bad_shape")
    assert parse_users("[1, 2").error.startswith("json_decode_error")
    ok = parse_users('[{"id": 7, "firstName": "X"}, "junk"]')
    assert ok.ok and len(ok.users) == 1
    assert ok.users[0].id == "7" and ok.users[0].lastName == ""


def test_fetch_current_user_ok():
    http = FakeHttp({("GET", "/settings"): [mk_resp(200, SETTINGS_HTML)]})
    profile, err, _ = fetch_current_user(_engine(http), Session())
    assert err is None
    assert profile is not None and profile.email == "carol@example.org"


def test_fetch_current_user_non_200_is_no_profile():
    http = FakeHttp({("GET", "/settings"): [mk_resp(302, headers={"Location": "/login"})]})
    profile, err, _ = fetch_current_user(_engine(http), Session())
    assert profile is None
    assert err == "unexpected_status_302"


def test_fetch_current_user_network_failure_is_no_profile():
    http = FakeHttp({("GET", "/settings"): [requests.ConnectionError("x")]})
    profile, err, _ = fetch_current_user(_engine(http), Session())
    assert profile is None
    assert err == "network_error:ConnectionError"


def test_fetch_current_user_keeps_utf8_names_without_charset():
    html = (
        '<input value="0f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0">'
        '<label>First Name</label><input value="José">'
        '<label>Last Name</label><input value="Ñúñez">'
        '<label>Email</label><input value="jose@example.org">'
    )
    r = requests.Response()
    r.status_code = 200
    r._content = html.encode("utf-8")
    r.headers["Content-Type"] = "text/html"
    r.encoding = requests.utils.get_encoding_from_headers(r.headers)

    http = FakeHttp({("GET", "/settings"): [r]})
    profile, err, _ = fetch_current_user(_engine(http), Session())
    assert err is None
    assert profile is not None
    assert profile.firstName == "José"
    assert profile.lastName == "Ñúñez"
