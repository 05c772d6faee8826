"""
URL processing utilities for ingestion.

Handles loading match URLs from files and validating them.
"""
from typing import List

from ..config import MATCH_URL_BASE
from ..scrapers.base import match_id_from_url


def normalize_match_url(item) -> str:
    """
    Turn a bare match ID into a match URL; URLs pass through unchanged.

    Args:
        item: Match URL, or a match ID as int or digit string

    Returns:
        Match URL
    """
    text = str(item).strip()
    if text.isdigit():
        return f"{MATCH_URL_BASE}/{text}"
    return text


def load_urls_from_file(filepath: str) -> List[str]:
    """
    Load match URLs from a text file (one per line).

    Blank lines and lines starting with '#' are skipped, as is anything after
    a '#' on a line. Bare match IDs are expanded to match URLs.

    Args:
        filepath: Path to the text file

    Returns:
        List of match URLs in file order

    Raises:
        FileNotFoundError: If the file does not exist
    """
    urls = []
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.split('#', 1)[0].strip()
                if not line:
                    continue
                urls.append(normalize_match_url(line))
    except FileNotFoundError:
        raise FileNotFoundError(f"URL file not found: {filepath}")
    return urls


def validate_url(url: str) -> bool:
    """
    Check if a URL looks like a match page URL.

    Args:
        url: URL to validate

    Returns:
        True if the URL is http(s) and ends in a numeric match ID
    """
    if not url:
        return False
    if not url.lower().startswith(('http://', 'https://')):
        return False
    return match_id_from_url(url).isdigit()
