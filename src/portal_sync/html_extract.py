from __future__ import annotations

"""
html_extract.py - разбор HTML портала: nonce формы логина и поля профиля на /settings.

Вызывающий код видит только ProfileParser.parse(html) -> CurrentUserProfile:
- RegexProfileParser (по умолчанию): регулярки по сырым атрибутам value="..."
- FormFieldsParser: html.parser, текстовые узлы + <input> по порядку документа

Не нашли поле -> плейсхолдер из models.py, а не None.
"""

from html.parser import HTMLParser
import re
from typing import Optional, Protocol, Sequence

from .models import CurrentUserProfile, profile_from_fields


NONCE_RE = re.compile(r'name="nonce" value="([^"]+)"')

PROFILE_ID_RE = re.compile(r'value="([a-f0-9-]{36})"')
_ID_FULL_RE = re.compile(r"^[a-f0-9-]{36}$")

FIELD_LABELS: dict[str, str] = {
    "firstName": "First Name",
    "lastName": "Last Name",
    "email": "Email",
}


def _label_value_re(label: str) -> re.Pattern[str]:
    # label, затем сколько угодно любого текста (нежадно), затем ближайший value="..."
    return re.compile(re.escape(label) + r'[\s\S]*?value="([^"]*)"')


_FIELD_RES: dict[str, re.Pattern[str]] = {k: _label_value_re(v) for k, v in FIELD_LABELS.items()}


def extract_nonce(html: str) -> str:
    """Hidden nonce формы логина или "", если на странице его нет."""
    m = NONCE_RE.search(html or "")
    return m.group(1) if m else ""


class ProfileParser(Protocol):
    def parse(self, html: str) -> CurrentUserProfile: ...


class RegexProfileParser:
    """Регулярки по сырым атрибутам; каждое поле ищется независимо."""

    def parse(self, html: str) -> CurrentUserProfile:
        text = html or ""
        m_id = PROFILE_ID_RE.search(text)
        found: dict[str, Optional[str]] = {}
        for key, rx in _FIELD_RES.items():
            m = rx.search(text)
            found[key] = m.group(1) if m else None
        return profile_from_fields(id=m_id.group(1) if m_id else None, **found)


class _FormEventBuilder(HTMLParser):
    """Плоский поток событий документа: текстовые куски и <input> в порядке появления."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.events: list[tuple[str, object]] = []

    def _push_input(self, attrs: Sequence[tuple[str, Optional[str]]]) -> None:
        clean_attrs: dict[str, str] = {}
        for k, v in attrs:
            if not k:
                continue
            clean_attrs[str(k).strip().lower()] = "" if v is None else str(v)
        self.events.append(("input", clean_attrs))

    def handle_starttag(self, tag: str, attrs: Sequence[tuple[str, Optional[str]]]) -> None:
        if str(tag or "").lower() == "input":
            self._push_input(attrs)

    def handle_startendtag(self, tag: str, attrs: Sequence[tuple[str, Optional[str]]]) -> None:
        self.handle_starttag(tag, attrs)

    def handle_data(self, data: str) -> None:
        if data and data.strip():
            self.events.append(("text", data))


def _parse_events(html: str) -> list[tuple[str, object]]:
    p = _FormEventBuilder()
    p.feed(html or "")
    p.close()
    return p.events


class FormFieldsParser:
    """
    Структурный вариант: html.parser, текстовые узлы и <input> по порядку.

    Поле = первый <input value=...> после первого текстового узла с его label.
    id = первый input, у которого value целиком похож на uuid (36 символов).
    """

    def parse(self, html: str) -> CurrentUserProfile:
        events = _parse_events(html)

        profile_id: Optional[str] = None
        for kind, payload in events:
            if kind != "input":
                continue
            value = payload.get("value")  # type: ignore[attr-defined]
            if isinstance(value, str) and _ID_FULL_RE.match(value):
                profile_id = value
                break

        found: dict[str, Optional[str]] = {}
        for key, label in FIELD_LABELS.items():
            found[key] = self._value_after_label(events, label)
        return profile_from_fields(id=profile_id, **found)

    @staticmethod
    def _value_after_label(events: list[tuple[str, object]], label: str) -> Optional[str]:
        seen_label = False
        for kind, payload in events:
            if kind == "text":
                if not seen_label and label in str(payload):
                    seen_label = True
                continue
            if seen_label and isinstance(payload, dict) and "value" in payload:
                return payload["value"]
        return None


def make_profile_parser(kind: str = "regex") -> ProfileParser:
    k = str(kind or "regex").lower()
    if k == "html":
        return FormFieldsParser()
    if k == "regex":
        return RegexProfileParser()
    raise ValueError(f"Unknown profile parser: {kind!r}")
