from __future__ import annotations

"""
auth.py - вход по форме с одноразовым nonce.

Шаги:
1) GET /login -> достать hidden nonce (нет -> "", сервер скорее всего откажет, это ок)
2) POST /login username/password/nonce (form-urlencoded)
3) успех ТОЛЬКО если 302; тогда сохраняем Session в SessionStore

Никаких повторов: одна попытка на вызов.
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from .config import Credentials
from .html_extract import extract_nonce
from .http_engine import HttpEngine
from .session import Session
from .session_store import SessionStore


LOGIN_PATH = "/login"
LOGIN_OK_STATUS = 302


@dataclass
class LoginResult:
    ok: bool
    session: Session
    status_code: Optional[int] = None
    error: Optional[str] = None
    location: Optional[str] = None
    nonce_found: bool = False


def login_form_body(creds: Credentials, nonce: str) -> str:
    # '@' оставляем как есть: username=demo@example.org
    return urlencode(
        [("username", creds.username), ("password", creds.password), ("nonce", nonce)],
        safe="@",
    )


def login(
    engine: HttpEngine,
    session: Session,
    creds: Credentials,
    store: Optional[SessionStore] = None,
) -> LoginResult:
    page, session = engine.get(LOGIN_PATH, session=session)
    if page.network_failed:
        return LoginResult(ok=False, session=session, error=page.error)

    nonce = extract_nonce(page.body)
    resp, session = engine.post_form(LOGIN_PATH, session=session, body=login_form_body(creds, nonce))

    if resp.status_code != LOGIN_OK_STATUS:
        return LoginResult(
            ok=False,
            session=session,
            status_code=resp.status_code,
            error=resp.error or f"unexpected_status_{resp.status_code}",
            location=resp.location,
            nonce_found=bool(nonce),
        )

    if store is not None:
        store.save(session)
    return LoginResult(
        ok=True,
        session=session,
        status_code=resp.status_code,
        location=resp.location,
        nonce_found=bool(nonce),
    )
