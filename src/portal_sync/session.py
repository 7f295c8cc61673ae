from __future__ import annotations

"""
session.py - явная “сессия” (набор cookies), которую передают в запрос и получают обратно.

Идея:
- Никакого глобального словаря cookies: HttpEngine.request(...) принимает Session
  и возвращает новую Session.
- Set-Cookie: берём часть до первого ';',
  делим по первому '=', перезаписываем значение по имени. Ничего не удаляем.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional


def parse_set_cookie(header: str) -> Optional[tuple[str, str]]:
    """'sid=abc; Path=/; HttpOnly' -> ('sid', 'abc'). Пустое имя -> None."""
    pair = str(header or "").split(";", 1)[0]
    if not pair.strip():
        return None
    name, _, value = pair.partition("=")
    name = name.strip()
    if not name:
        return None
    return name, value


@dataclass(frozen=True)
class Session:
    """Неизменяемый набор cookies (name -> value)."""
    cookies: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Any) -> "Session":
        if not isinstance(raw, dict):
            return cls()
        out: dict[str, str] = {}
        for k, v in raw.items():
            if isinstance(k, str) and k and v is not None:
                out[k] = str(v)
        return cls(cookies=out)

    def __bool__(self) -> bool:
        return bool(self.cookies)

    def __len__(self) -> int:
        return len(self.cookies)

    def get(self, name: str) -> Optional[str]:
        return self.cookies.get(name)

    def as_dict(self) -> dict[str, str]:
        return dict(self.cookies)

    def cookie_header(self) -> Optional[str]:
        """Значение заголовка Cookie или None, если cookies нет вовсе."""
        if not self.cookies:
            return None
        return "; ".join(f"{k}={v}" for k, v in self.cookies.items())

    def with_set_cookies(self, headers: Iterable[str]) -> "Session":
        """Применить Set-Cookie заголовки по порядку (последнее значение побеждает)."""
        merged = dict(self.cookies)
        changed = False
        for h in headers or ():
            parsed = parse_set_cookie(h)
            if parsed is None:
                continue
            name, value = parsed
            merged[name] = value
            changed = True
        if not changed:
            return self
        return Session(cookies=merged)
