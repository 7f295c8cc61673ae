from __future__ import annotations

"""
resp_read.py - аккуратно достать текст/JSON из ответа и не упасть.

Этот модуль НЕ делает HTTP. Он получает уже прочитанный ответ (requests.Response
или текст + Content-Type) и возвращает результат с кодом ошибки вместо исключения:
- not_json          - тело явно не JSON (например, HTML страницы логина)
- json_decode_error - похоже на JSON, но не парсится
- bad_shape         - JSON есть, но не той формы (ждали список, пришёл объект)
"""

from dataclasses import dataclass
from typing import Any, Optional, Union
import json
import re

import requests


JSONType = Union[dict[str, Any], list[Any]]


@dataclass
class JsonReadResult:
    ok: bool
    data: Optional[JSONType] = None
    error: Optional[str] = None          # not_json | json_decode_error | bad_shape
    details: Optional[str] = None
    preview: Optional[str] = None        # первые N символов тела


def _extract_charset(content_type: str) -> Optional[str]:
    m = re.search(r"charset=([^\s;]+)", content_type or "", flags=re.IGNORECASE)
    return m.group(1).strip("\"'") if m else None


def read_text(resp: requests.Response, *, fallback: str = "utf-8") -> str:
    """
    Текст тела ответа.

    Порядок: charset из Content-Type -> fallback (utf-8, replace).
    resp.encoding не берём: без charset requests ставит для text/* ISO-8859-1.
    """
    raw = resp.content or b""
    for enc in (_extract_charset(resp.headers.get("Content-Type", "")), fallback):
        if not enc:
            continue
        try:
            return raw.decode(enc, errors="replace")
        except LookupError:
            continue
    return raw.decode("utf-8", errors="replace")


def _strip_bom(text: str) -> str:
    if text.startswith("\ufeff"):
        return text.lstrip("\ufeff")
    return text


def looks_like_json(content_type: str, text: str) -> bool:
    ct = (content_type or "").lower()
    if "json" in ct:
        return True
    s = _strip_bom(text).lstrip()
    return s[:1] in ("{", "[")


def safe_read_json(
    text: str,
    *,
    content_type: str = "",
    expect: Optional[type] = None,
    preview_len: int = 220,
) -> JsonReadResult:
    """
    Безопасно распарсить JSON из текста.

    expect=list - результат должен быть массивом, иначе bad_shape.
    """
    raw_text = text or ""
    preview = raw_text[:preview_len].replace("\n", " ")

    if not looks_like_json(content_type, raw_text):
        # HTML под видом успеха (редирект на логин и т.п.) - не пытаемся парсить
        return JsonReadResult(ok=False, error="not_json", details=content_type or None, preview=preview)

    try:
        data: JSONType = json.loads(_strip_bom(raw_text).lstrip())
    except ValueError as e:
        return JsonReadResult(ok=False, error="json_decode_error", details=str(e), preview=preview)

    if expect is not None and not isinstance(data, expect):
        return JsonReadResult(
            ok=False,
            error="bad_shape",
            details=f"expected {expect.__name__}, got {type(data).__name__}",
            preview=preview,
            data=data,
        )

    return JsonReadResult(ok=True, data=data, preview=preview)
