"""
Innings feed fetching and decoding.

Each match has one feed per innings. A feed body is a JSONP-style envelope,
`callbackName(<json>);`, so the JSON has to be cut out of it before parsing.
A single innings that cannot be fetched or decoded is logged and yields no
data; only a match where every innings fails is treated as fatal.
"""
import asyncio
import json
import logging
import re

import aiohttp

from ..errors import FeedDecodeError, FeedError, UnrecoverableFetchError
from ..results import StageResult
from .base import build_feed_urls, fetch_text

logger = logging.getLogger(__name__)

# Everything between the first "(" and the last ")", before an optional ";"
JSONP_PATTERN = re.compile(r'^.*?\((.*)\);?\s*$', re.DOTALL)


def decode_feed(text: str, url: str = "") -> StageResult:
    """
    Strip the callback envelope from a feed body and parse the JSON inside.

    Args:
        text: Raw response body, expected as `token(<json>);`
        url: Source URL, used in log messages only

    Returns:
        StageResult with the parsed value, or a failure carrying FeedDecodeError
    """
    body = (text or "").rstrip()
    # Bodies that cannot end in ")" or ");" never reach the pattern
    match = JSONP_PATTERN.match(body) if body.rstrip(';').endswith(')') else None
    if not match or not match.group(1):
        logger.warning(f"Invalid JSONP format for {url}")
        return StageResult.failure("decode", FeedDecodeError(f"Invalid JSONP format for {url}"))

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error for {url}: {e}")
        return StageResult.failure("decode", FeedDecodeError(f"JSON parse error for {url}: {e}"))

    return StageResult.success("decode", payload)


async def fetch_feed(session: aiohttp.ClientSession, url: str) -> StageResult:
    """
    Fetch and decode one innings feed.

    Non-2xx responses, network errors and undecodable bodies are soft failures:
    they are logged and returned as a failed StageResult, never raised.
    """
    logger.debug(f"Fetching {url}...")
    try:
        text = await fetch_text(session, url)
    except FeedError as e:
        logger.warning(f"Failed to fetch {url}: {e}")
        return StageResult.failure("fetch", e)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"Error fetching {url}: {e!r}")
        return StageResult.failure("fetch", e)

    return decode_feed(text, url)


async def fetch_match_feeds(session: aiohttp.ClientSession, match_id: str, base_url: str | None = None) -> StageResult:
    """
    Fetch every innings feed of a match concurrently.

    Args:
        session: aiohttp client session
        match_id: Match identifier
        base_url: Optional feed base URL override

    Returns:
        StageResult whose value is a list aligned with innings order, holding the
        decoded payload of each innings or None where that innings failed. If no
        innings produced data, a failure carrying UnrecoverableFetchError.
    """
    urls = build_feed_urls(match_id, base_url)
    logger.info(f"Fetching match data from: {urls}")

    results = await asyncio.gather(*(fetch_feed(session, url) for url in urls), return_exceptions=True)

    payloads = []
    failures = []
    for url, result in zip(urls, results):
        if isinstance(result, BaseException):
            # fetch_feed only raises on programming errors; keep the sibling's data
            logger.error(f"Unexpected error fetching {url}: {result!r}")
            failures.append(f"{url}: {result!r}")
            payloads.append(None)
        elif not result.ok:
            failures.append(f"{url}: {result.error}")
            payloads.append(None)
        else:
            payloads.append(result.value)

    if all(p is None for p in payloads):
        return StageResult.failure("fetch", UnrecoverableFetchError(match_id, failures), warnings=failures)

    return StageResult.success("fetch", payloads, warnings=failures)
