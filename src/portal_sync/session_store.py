from __future__ import annotations

"""
session_store.py - локальный файл с cookies сессии (НЕ коммитится в репозиторий).

Формат (.credentials.json):
{
  "cookies": {"sid": "...", "csrf": "..."}
}

При чтении дополнительно понимаем экспорт из браузера:
  {"cookies": [{"name": "sid", "value": "...", "domain": "...", "path": "/"}]}

Правило: load() никогда не падает. Нет файла / битый JSON / нет поля cookies -> None
(“сохранённой сессии нет”). save() перезаписывает файл целиком.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from .config import DEFAULT_SESSION_PATH
from .session import Session


def _cookies_from_json(raw: Any) -> Optional[dict[str, str]]:
    # {"name": "value"} - наш формат
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items() if isinstance(k, str) and k and v is not None}
    # Chrome export: list[dict] with name/value
    if isinstance(raw, list):
        return {
            str(x["name"]): str(x["value"])
            for x in raw
            if isinstance(x, dict) and x.get("name") and "value" in x
        }
    return None


class SessionStore:
    """Load/save Session в один фиксированный файл."""

    def __init__(self, path: str = DEFAULT_SESSION_PATH) -> None:
        self.path = str(Path(path).expanduser())

    def load(self) -> Optional[Session]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                saved = json.load(f)
        except (OSError, ValueError, RecursionError):
            return None
        if not isinstance(saved, dict) or "cookies" not in saved:
            return None
        cookies = _cookies_from_json(saved.get("cookies"))
        if cookies is None:
            return None
        return Session(cookies=cookies)

    def save(self, session: Session) -> None:
        p = Path(self.path)
        if p.parent and not p.parent.exists():
            p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump({"cookies": session.as_dict()}, f, ensure_ascii=False)

    def clear(self) -> bool:
        """Удалить файл сессии. True, если файл был."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            return False
        return True
