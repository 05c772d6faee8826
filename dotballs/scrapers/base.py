"""
Base fetching utilities for the scorecard feeds.

Provides common functionality for the feed scrapers:
- HTTP fetching with static browser-like headers
- Match URL parsing and feed URL construction
"""
import aiohttp

from ..config import FEED_BASE_URL, FEED_HEADERS, FEED_TIMEOUT, INNINGS_PER_MATCH
from ..errors import FeedError


def match_id_from_url(url: str) -> str:
    """
    Extract the match identifier from a match page URL.

    Args:
        url: Match URL (e.g., "https://www.iplt20.com/match/2025/1832")

    Returns:
        The final path segment of the URL ("1832")
    """
    path = url.split('?', 1)[0].split('#', 1)[0]
    return path.rstrip('/').split('/')[-1]


def build_feed_urls(match_id: str, base_url: str | None = None) -> list[str]:
    """
    Build the per-innings feed URLs for a match, in innings order.

    Args:
        match_id: Match identifier
        base_url: Optional feed base URL. If None, uses FEED_BASE_URL from config.

    Returns:
        One URL per innings, e.g. [".../1832-Innings1.js", ".../1832-Innings2.js"]
    """
    base = (base_url or FEED_BASE_URL).rstrip('/')
    return [f"{base}/{match_id}-Innings{n}.js" for n in range(1, INNINGS_PER_MATCH + 1)]


async def fetch_text(session: aiohttp.ClientSession, url: str, headers: dict | None = None) -> str:
    """
    Fetch a URL with headers that mimic a browser request.

    Args:
        session: aiohttp client session
        url: URL to fetch
        headers: Optional headers. If None, uses FEED_HEADERS from config.

    Returns:
        Response body as text

    Raises:
        FeedError: If the server answers with a non-2xx status
        aiohttp.ClientError: On network-level failures
        asyncio.TimeoutError: If the request exceeds FEED_TIMEOUT
    """
    async with session.get(
        url,
        headers=headers or FEED_HEADERS,
        timeout=aiohttp.ClientTimeout(total=FEED_TIMEOUT),
    ) as resp:
        if not 200 <= resp.status < 300:
            raise FeedError(f"HTTP {resp.status} {resp.reason or ''}".strip())
        return await resp.text()
