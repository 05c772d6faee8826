"""
Scraper modules for the per-innings scorecard feeds.

- base: Common utilities (HTTP fetching, URL parsing)
- feeds: Innings feed fetching and JSONP decoding
"""
from .base import build_feed_urls, fetch_text, match_id_from_url
from .feeds import decode_feed, fetch_feed, fetch_match_feeds

__all__ = [
    "build_feed_urls",
    "fetch_text",
    "match_id_from_url",
    "decode_feed",
    "fetch_feed",
    "fetch_match_feeds",
]
