"""portal_sync package.

Login + scrape for a single web portal: saved/fresh session, user directory
(JSON API), current user profile (HTML settings page), merged JSON export.

Entry point: `portal-sync` (console script).
"""

__all__ = [
    "cli",
    "runner",
]
