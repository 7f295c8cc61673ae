from __future__ import annotations

"""directory.py - справочник пользователей: POST /api/users (пустое тело) -> JSON-массив."""

from dataclasses import dataclass, field
from typing import Optional

from .http_engine import HttpEngine
from .models import UserRecord
from .resp_read import safe_read_json
from .session import Session


USERS_PATH = "/api/users"


@dataclass
class DirectoryResult:
    """
    ok=False всегда означает users=[] и непустой error.

    ok=True и users=[] - это “справочник действительно пуст”, а не сбой.
    """
    ok: bool
    users: list[UserRecord] = field(default_factory=list)
    error: Optional[str] = None
    status_code: Optional[int] = None


def parse_users(text: str, *, content_type: str = "") -> DirectoryResult:
    jr = safe_read_json(text, content_type=content_type, expect=list)
    if not jr.ok:
        msg = jr.error or "json_read_error"
        if jr.details:
            msg += f":{jr.details}"
        return DirectoryResult(ok=False, error=msg)
    users = [UserRecord.from_api(x) for x in (jr.data or []) if isinstance(x, dict)]
    return DirectoryResult(ok=True, users=users)


def fetch_users(engine: HttpEngine, session: Session) -> tuple[DirectoryResult, Session]:
    resp, session = engine.post_form(USERS_PATH, session=session, body="")
    if resp.status_code != 200:
        err = resp.error or f"unexpected_status_{resp.status_code}"
        return DirectoryResult(ok=False, error=err, status_code=resp.status_code), session

    out = parse_users(resp.body, content_type=resp.content_type)
    out.status_code = resp.status_code
    return out, session
