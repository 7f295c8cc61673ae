from __future__ import annotations

"""models.py - записи пользователей: из API, со страницы настроек и итоговые (для users.json)."""

from dataclasses import dataclass, field
from typing import Any, Optional


UNKNOWN_ID = "unknown"
DEFAULT_FIRST_NAME = "John"
DEFAULT_LAST_NAME = "Doe"
DEFAULT_EMAIL = "demo@example.org"


def _str_or_empty(v: Any) -> str:
    return "" if v is None else str(v)


@dataclass(frozen=True)
class UserRecord:
    """Запись справочника (POST /api/users) как её вернул API."""
    id: str
    firstName: str
    lastName: str
    email: str
    extra: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "UserRecord":
        known = ("id", "firstName", "lastName", "email")
        return cls(
            id=_str_or_empty(raw.get("id")),
            firstName=_str_or_empty(raw.get("firstName")),
            lastName=_str_or_empty(raw.get("lastName")),
            email=_str_or_empty(raw.get("email")),
            extra={k: v for k, v in raw.items() if k not in known},
        )

    @property
    def name(self) -> str:
        return f"{self.firstName} {self.lastName}"


@dataclass(frozen=True)
class CurrentUserProfile:
    """
    Профиль текущего пользователя со страницы /settings.

    Не нашли поле -> плейсхолдер (а не None). Вызывающий код должен это терпеть.
    """
    id: str = UNKNOWN_ID
    firstName: str = DEFAULT_FIRST_NAME
    lastName: str = DEFAULT_LAST_NAME
    email: str = DEFAULT_EMAIL

    @property
    def name(self) -> str:
        return f"{self.firstName} {self.lastName}"


@dataclass
class OutputRecord:
    id: str
    name: str
    email: str
    isCurrent: bool = False

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "name": self.name, "email": self.email}
        if self.isCurrent:
            out["isCurrent"] = True
        return out


def profile_from_fields(
    *,
    id: Optional[str] = None,
    firstName: Optional[str] = None,
    lastName: Optional[str] = None,
    email: Optional[str] = None,
) -> CurrentUserProfile:
    """Собрать профиль, подставив плейсхолдеры вместо None."""
    return CurrentUserProfile(
        id=UNKNOWN_ID if id is None else id,
        firstName=DEFAULT_FIRST_NAME if firstName is None else firstName,
        lastName=DEFAULT_LAST_NAME if lastName is None else lastName,
        email=DEFAULT_EMAIL if email is None else email,
    )
