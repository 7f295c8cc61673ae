from __future__ import annotations

"""
runner.py - один прогон: сессия -> (логин) -> справочник -> профиль -> merge -> users.json.

Состояния (RunReport.states, по порядку прохождения):
  no_session | testing_session -> session_valid | session_expired
  -> logging_in -> fetching_data -> merging -> done

Правила:
- сохранённой сессии нет -> сразу логин
- сессия есть -> проба справочником; ошибка ИЛИ пустой список -> “истекла” -> ровно один логин
- логин не удался -> сообщаем и едем дальше (без повторов)
- справочник запрашиваем ещё раз уже после проверки сессии
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import requests

from .auth import login
from .config import Settings
from .directory import fetch_users
from .html_extract import ProfileParser, make_profile_parser
from .http_engine import HttpEngine
from .merge import merge_records, records_to_json
from .profile import fetch_current_user
from .session import Session
from .session_store import SessionStore


class RunState:
    NO_SESSION = "no_session"
    TESTING_SESSION = "testing_session"
    SESSION_VALID = "session_valid"
    SESSION_EXPIRED = "session_expired"
    LOGGING_IN = "logging_in"
    FETCHING_DATA = "fetching_data"
    MERGING = "merging"
    DONE = "done"


@dataclass
class RunReport:
    states: list[str] = field(default_factory=list)
    login_attempts: int = 0
    login_ok: Optional[bool] = None
    users_found: int = 0
    records_written: int = 0
    current_user_found: bool = False
    output_path: Optional[str] = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "states": list(self.states),
            "login_attempts": self.login_attempts,
            "login_ok": self.login_ok,
            "users_found": self.users_found,
            "records_written": self.records_written,
            "current_user_found": self.current_user_found,
            "output_path": self.output_path,
            "errors": list(self.errors),
        }


def write_output(path: str, rows: list[dict[str, Any]]) -> None:
    p = Path(path)
    if p.parent and not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=2)


def build_engine(settings: Settings, http_session: Optional[requests.Session] = None) -> HttpEngine:
    return HttpEngine(
        settings.host,
        scheme=settings.scheme,
        default_timeout=settings.timeout,
        default_headers={"User-Agent": settings.user_agent},
        diag_http=settings.diag_http,
        http_session=http_session,
    )


class SyncRunner:
    """Orchestrates one sync run over an HttpEngine and a SessionStore."""

    def __init__(
        self,
        settings: Settings,
        *,
        engine: Optional[HttpEngine] = None,
        store: Optional[SessionStore] = None,
        parser: Optional[ProfileParser] = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.settings = settings
        self.engine = engine or build_engine(settings)
        self.store = store or SessionStore(settings.session_path)
        self.parser = parser or make_profile_parser(settings.parser)
        self.echo = echo
        self.report = RunReport()

    def _enter(self, state: str) -> None:
        self.report.states.append(state)

    def _login(self, session: Session) -> Session:
        self._enter(RunState.LOGGING_IN)
        self.echo("Logging in...")
        self.report.login_attempts += 1
        res = login(self.engine, session, self.settings.credentials, self.store)
        self.report.login_ok = res.ok
        if res.ok:
            self.echo("Login successful!")
        else:
            self.echo(f"Login failed ({res.error})")
            self.report.errors.append(f"login:{res.error}")
        return res.session

    def _restore_session(self) -> Session:
        if self.settings.fresh_login:
            self.store.clear()

        saved = self.store.load()
        if saved is None:
            self._enter(RunState.NO_SESSION)
            self.echo("No saved session found")
            return self._login(Session())

        self._enter(RunState.TESTING_SESSION)
        self.echo("Testing saved session...")
        probe, session = fetch_users(self.engine, saved)
        if not probe.ok or not probe.users:
            self._enter(RunState.SESSION_EXPIRED)
            self.echo("Session expired")
            return self._login(session)

        self._enter(RunState.SESSION_VALID)
        self.echo("Session is valid!")
        return session

    def run(self) -> RunReport:
        session = self._restore_session()

        self._enter(RunState.FETCHING_DATA)
        self.echo("Fetching users...")
        directory, session = fetch_users(self.engine, session)
        if not directory.ok:
            self.report.errors.append(f"users:{directory.error}")
        self.report.users_found = len(directory.users)
        self.echo(f"Found {len(directory.users)} users")

        self.echo("Fetching current user details...")
        current, err, session = fetch_current_user(self.engine, session, self.parser)
        if current is None:
            self.report.errors.append(f"settings:{err}")
        self.report.current_user_found = current is not None

        self._enter(RunState.MERGING)
        rows = records_to_json(merge_records(directory.users, current))
        write_output(self.settings.output_path, rows)
        self.report.records_written = len(rows)
        self.report.output_path = self.settings.output_path

        self._enter(RunState.DONE)
        self.echo(f"\nSuccess! Saved {len(rows)} users to {self.settings.output_path}")
        return self.report
