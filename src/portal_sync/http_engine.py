from __future__ import annotations

"""
http_engine.py - единый “двигатель” HTTP для одного хоста портала.

requests.Session используется только как транспорт (keep-alive, TLS).
Cookies живут в явной Session (session.py): передаём в request(...) и получаем обратно.

Ключевые правила:
- URL = <scheme>://<host><path>, хост фиксирован на весь прогон
- Cookie: "k=v; k2=v2" из Session, заголовок не ставим, если cookies нет
- POST: всегда form Content-Type + Content-Length (байты тела, 0 если тела нет)
- редиректы НЕ следуем: Location отдаём наружу (логин = 302)
- сеть упала -> HttpResult с error="network_error:<Тип>" (без исключений)
- ответ вне 200..399 -> HttpResult с error="http_<код>"
- никаких retry и rate limit: один запрос = одна попытка
"""

import sys
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .resp_read import read_text
from .session import Session


DEFAULT_HTML_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

DEFAULT_JSON_HEADERS: dict[str, str] = {
    "Accept": "application/json, text/plain, */*",
}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _looks_like_api_path(path: str) -> bool:
    p = path.lower()
    return "/api/" in p or p.endswith(".json")


def set_cookie_headers(resp: requests.Response) -> list[str]:
    """
    Все Set-Cookie заголовки ответа по отдельности.

    requests склеивает повторяющиеся заголовки через ", ", а в Expires тоже есть запятая,
    поэтому сначала читаем сырые заголовки urllib3 (getlist), и только потом resp.headers.
    """
    raw_headers = getattr(getattr(resp, "raw", None), "headers", None)
    getlist = getattr(raw_headers, "getlist", None)
    if callable(getlist):
        values = getlist("Set-Cookie")
        if values:
            return [str(v) for v in values]
    one = resp.headers.get("Set-Cookie")
    return [one] if one else []


@dataclass
class HttpResult:
    """Итог одного запроса: успех / HTTP-ошибка / сетевая ошибка."""
    path: str
    method: str
    status_code: Optional[int]
    body: str = ""
    location: Optional[str] = None
    content_type: str = ""
    error: Optional[str] = None        # None | http_<sc> | timeout | network_error:<Type>
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def network_failed(self) -> bool:
        return self.status_code is None


class HttpEngine:
    """Единая точка выполнения HTTP-запросов к порталу."""

    def __init__(
        self,
        host: str,
        *,
        scheme: str = "https",
        default_timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
        diag_http: bool = False,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        self.host = str(host).strip().rstrip("/")
        self.scheme = str(scheme or "https").lower()
        self.default_timeout = float(default_timeout)
        self.default_headers = dict(default_headers or {})
        self.diag_http = bool(diag_http)
        self.last_diag: Optional[dict[str, Any]] = None
        self.http = http_session or requests.Session()

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def url_for(self, path: str) -> str:
        p = str(path or "/")
        if not p.startswith("/"):
            p = "/" + p
        return self.base_url + p

    def _emit_diag(self, d: dict[str, Any]) -> None:
        self.last_diag = d
        if not self.diag_http:
            return
        parts = [
            f"[HTTP] {d.get('method')} {d.get('path')} sc={d.get('status')} err={d.get('err')}",
            f"cookies={d.get('cookies')} elapsed={d.get('elapsed_ms')}ms",
        ]
        if d.get("location"):
            parts.append(f"location={d['location']}")
        sys.stderr.write(" ".join(parts) + "\n")

    def build_headers(self, path: str, *, method: str, session: Session, body: Optional[bytes]) -> dict[str, str]:
        # порядок важен: default_headers -> accept по типу пути -> cookie/form
        headers = dict(self.default_headers)
        headers.update(DEFAULT_JSON_HEADERS if _looks_like_api_path(path) else DEFAULT_HTML_HEADERS)

        cookie = session.cookie_header()
        if cookie is not None:
            headers["Cookie"] = cookie

        if method == "POST":
            headers["Content-Type"] = FORM_CONTENT_TYPE
            headers["Content-Length"] = str(len(body) if body else 0)
        return headers

    def request(
        self,
        path: str,
        *,
        session: Session,
        method: str = "GET",
        body: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> tuple[HttpResult, Session]:
        """
        Один запрос к порталу.

        Возвращает (HttpResult, новая Session). Session меняется только по Set-Cookie.
        """
        method = str(method or "GET").upper()
        payload = body.encode("utf-8") if body else None
        headers = self.build_headers(path, method=method, session=session, body=payload)
        err: Optional[str] = None

        t0 = time.monotonic()
        try:
            resp = self.http.request(
                method=method,
                url=self.url_for(path),
                headers=headers,
                data=payload,
                timeout=float(timeout or self.default_timeout),
                allow_redirects=False,
            )
        except requests.Timeout:
            resp = None
            err = "timeout"
        except requests.RequestException as e:
            resp = None
            err = f"network_error:{type(e).__name__}"
        finally:
            # единственный источник cookies - Session; jar транспорта не копим
            self.http.cookies.clear()
        elapsed_ms = int((time.monotonic() - t0) * 1000)

        if resp is None:
            result = HttpResult(path=path, method=method, status_code=None, error=err, elapsed_ms=elapsed_ms)
            self._emit_diag({
                "method": method,
                "path": path,
                "status": None,
                "err": err,
                "cookies": len(session),
                "elapsed_ms": elapsed_ms,
            })
            return result, session

        new_session = session.with_set_cookies(set_cookie_headers(resp))
        sc = int(resp.status_code)
        result = HttpResult(
            path=path,
            method=method,
            status_code=sc,
            body=read_text(resp),
            location=resp.headers.get("Location"),
            content_type=resp.headers.get("Content-Type", ""),
            error=None if 200 <= sc < 400 else f"http_{sc}",
            elapsed_ms=elapsed_ms,
        )
        if result.error is not None:
            self._emit_diag({
                "method": method,
                "path": path,
                "status": sc,
                "err": result.error,
                "cookies": len(new_session),
                "elapsed_ms": elapsed_ms,
                "location": result.location,
            })
        return result, new_session

    def get(self, path: str, *, session: Session) -> tuple[HttpResult, Session]:
        return self.request(path, session=session, method="GET")

    def post_form(self, path: str, *, session: Session, body: Optional[str] = None) -> tuple[HttpResult, Session]:
        return self.request(path, session=session, method="POST", body=body)
