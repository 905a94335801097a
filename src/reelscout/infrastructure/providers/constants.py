"""Shared constants and helpers for provider adapters."""

from __future__ import annotations

from urllib.parse import quote

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

DEFAULT_MAX_RESULTS = 10
DEFAULT_CLIENT_TIMEOUT = 15.0
DEFAULT_RETRY_DELAY = 1.0

MAGNET_TRACKERS: tuple[str, ...] = (
    "udp://open.demonii.com:1337/announce",
    "udp://tracker.openbittorrent.com:80",
    "udp://tracker.coppersurfer.tk:6969",
    "udp://tracker.opentrackr.org:1337/announce",
    "udp://p4p.arenabg.com:1337",
    "udp://tracker.leechers-paradise.org:6969",
)


def build_magnet(info_hash: str, display_name: str, *, with_trackers: bool = True) -> str:
    """Build a magnet URI from an info hash."""
    uri = f"magnet:?xt=urn:btih:{info_hash}&dn={quote(display_name, safe='')}"
    if with_trackers:
        uri += "".join(f"&tr={quote(t, safe='')}" for t in MAGNET_TRACKERS)
    return uri
