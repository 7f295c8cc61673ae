from __future__ import annotations

"""profile.py - текущий пользователь со страницы GET /settings."""

from typing import Optional

from .html_extract import ProfileParser, RegexProfileParser
from .http_engine import HttpEngine
from .models import CurrentUserProfile
from .session import Session


SETTINGS_PATH = "/settings"


def fetch_current_user(
    engine: HttpEngine,
    session: Session,
    parser: Optional[ProfileParser] = None,
) -> tuple[Optional[CurrentUserProfile], Optional[str], Session]:
    """
    (profile, error, session).

    Не 200 или сеть упала -> profile=None и код ошибки. Это НЕ то же самое,
    что профиль с плейсхолдерами (страница есть, но поля не нашлись).
    """
    resp, session = engine.get(SETTINGS_PATH, session=session)
    if resp.status_code != 200:
        return None, resp.error or f"unexpected_status_{resp.status_code}", session
    p = parser or RegexProfileParser()
    return p.parse(resp.body), None, session
