"""Runtime settings for a portal-sync run.

Defaults are the fixed constants of the portal; environment variables and CLI
flags may override them (CLI wins over ENV, ENV wins over defaults).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_HOST = "challenge.sunvoy.com"
DEFAULT_USERNAME = "demo@example.org"
DEFAULT_PASSWORD = "test"
DEFAULT_SESSION_PATH = ".credentials.json"
DEFAULT_OUTPUT_PATH = "users.json"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_USER_AGENT = "portal-sync/0.1 (+requests)"

PARSERS = ("regex", "html")

ENV_USERNAME = "PORTAL_SYNC_USERNAME"
ENV_PASSWORD = "PORTAL_SYNC_PASSWORD"
ENV_SESSION_PATH = "PORTAL_SYNC_SESSION_PATH"


class CliError(RuntimeError):
    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = int(exit_code)


class ConfigError(CliError):
    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=2)


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    scheme: str = "https"
    credentials: Credentials = field(default_factory=lambda: Credentials(DEFAULT_USERNAME, DEFAULT_PASSWORD))
    session_path: str = DEFAULT_SESSION_PATH
    output_path: str = DEFAULT_OUTPUT_PATH
    timeout: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    parser: str = "regex"  # "regex" | "html"
    diag_http: bool = False
    fresh_login: bool = False

    def validate(self) -> "Settings":
        if not self.host or "/" in self.host:
            raise ConfigError(f"Invalid host: {self.host!r} (expected a bare hostname, e.g. {DEFAULT_HOST})")
        if self.scheme not in ("https", "http"):
            raise ConfigError(f"Invalid scheme: {self.scheme!r}")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        if self.parser not in PARSERS:
            raise ConfigError(f"Unknown parser: {self.parser!r}. Expected one of: {', '.join(PARSERS)}.")
        if not self.session_path:
            raise ConfigError("Session file path is empty")
        if not self.output_path:
            raise ConfigError("Output file path is empty")
        return self


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    username = (env.get(ENV_USERNAME) or "").strip() or DEFAULT_USERNAME
    # пароль не тримим
    password = env.get(ENV_PASSWORD) or DEFAULT_PASSWORD
    session_path = (env.get(ENV_SESSION_PATH) or "").strip() or DEFAULT_SESSION_PATH
    return Settings(
        credentials=Credentials(username=username, password=password),
        session_path=session_path,
    )
