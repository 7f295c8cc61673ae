from __future__ import annotations

"""
cli.py - точка входа `portal-sync` (и `python -m portal_sync`).

Приоритет настроек: флаги CLI -> ENV (PORTAL_SYNC_*) -> константы портала.

Коды выхода:
- 0 - прогон завершён (даже если логин не удался и список пуст)
- 1 - любая непойманная ошибка (сообщение в stderr)
- 2 - неверная конфигурация
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import Optional, Sequence

from .config import PARSERS, CliError, Credentials, Settings, settings_from_env
from .runner import SyncRunner


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="portal-sync", description="Log in, fetch users + current profile, write users.json")
    p.add_argument("--host", default=None, help="portal hostname (default: challenge.sunvoy.com)")
    p.add_argument("--scheme", default=None, choices=("https", "http"), help="URL scheme (default: https)")
    p.add_argument("--username", default=None, help="login (overrides ENV PORTAL_SYNC_USERNAME)")
    p.add_argument("--password", default=None, help="password (overrides ENV PORTAL_SYNC_PASSWORD)")
    p.add_argument("--session-file", default=None, help="saved cookies file (default: .credentials.json)")
    p.add_argument("--out", default=None, help="output JSON file (default: users.json)")
    p.add_argument("--timeout", type=float, default=None, help="per-request timeout, seconds")
    p.add_argument("--parser", default=None, choices=PARSERS, help="settings page parser")
    p.add_argument("--fresh-login", action="store_true", help="ignore and delete the saved session")
    p.add_argument("--diag-http", action="store_true", help="print short HTTP diagnostics on errors")
    p.add_argument("--json", action="store_true", help="print the run report as JSON at the end")
    return p


def settings_from_args(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    s = base or settings_from_env()
    creds = Credentials(
        username=args.username if args.username is not None else s.credentials.username,
        password=args.password if args.password is not None else s.credentials.password,
    )
    s = replace(
        s,
        host=args.host if args.host is not None else s.host,
        scheme=args.scheme or s.scheme,
        credentials=creds,
        session_path=args.session_file or s.session_path,
        output_path=args.out or s.output_path,
        timeout=args.timeout if args.timeout is not None else s.timeout,
        parser=args.parser or s.parser,
        diag_http=bool(args.diag_http) or s.diag_http,
        fresh_login=bool(args.fresh_login) or s.fresh_login,
    )
    return s.validate()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
        report = SyncRunner(settings).run()
    except CliError as e:
        print(str(e), file=sys.stderr)
        return int(e.exit_code)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
