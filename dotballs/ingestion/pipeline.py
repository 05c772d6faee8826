"""
Main ingestion pipeline.

Orchestrates the scheduled run, one match at a time:
1. Skips matches already recorded today (IST)
2. Fetches both innings feeds of the match concurrently
3. Aggregates dot balls and trees per team and player
4. Validates the aggregate
5. Stores it in the database

Every stage hands back a StageResult; a failed stage ends that match only,
and the run carries on with the next URL.
"""
import asyncio
import logging
import sqlite3
from datetime import datetime
from typing import Dict, List, Mapping, Optional

import aiohttp

from ..aggregator import MatchData, aggregate_innings
from ..clock import readable_ist_time, today_ist
from ..config import MATCH_URLS, PROCESS_ONLY_TODAYS_MATCHES, TEAM_NAMES
from ..db_init import create_schema
from ..db_utils import count_matches_on_date, get_conn, match_processed_on_date, store_match_data, team_display_name
from ..display import format_match_summary, format_tree_leaderboard, tree_leaderboard
from ..results import IngestionResult, StageResult
from ..scrapers.base import match_id_from_url
from ..scrapers.feeds import fetch_match_feeds
from .validator import validate_match_data

logger = logging.getLogger(__name__)


def aggregate_stage(payloads: list, now: Optional[datetime] = None) -> StageResult:
    try:
        return StageResult.success("aggregate", aggregate_innings(payloads, now=now))
    except Exception as e:
        logger.exception("Aggregation failed")
        return StageResult.failure("aggregate", e)


def validate_stage(match_data: MatchData, team_names: Optional[Mapping[str, str]] = None) -> StageResult:
    is_valid, warnings = validate_match_data(match_data, team_names)
    if not is_valid:
        return StageResult.failure("validate", ValueError("; ".join(warnings)), warnings=warnings)
    return StageResult.success("validate", match_data, warnings=warnings)


def store_stage(
    conn: sqlite3.Connection,
    match_data: MatchData,
    match_url: str,
    team_names: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> StageResult:
    try:
        match_id = store_match_data(conn, match_data, match_url, team_names=team_names, now=now)
        conn.commit()
    except Exception as e:
        # Nothing of a failed match may stay pending on the shared connection
        conn.rollback()
        logger.error(f"Error storing {match_url}: {e}")
        return StageResult.failure("store", e)
    return StageResult.success("store", match_id)


async def process_match_url(
    session: aiohttp.ClientSession,
    conn: sqlite3.Connection,
    url: str,
    team_names: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
    feed_base_url: Optional[str] = None,
) -> StageResult:
    """
    Run fetch -> aggregate -> validate -> store for one match URL.

    Args:
        session: aiohttp client session
        conn: Database connection
        url: Match page URL
        team_names: Team ID -> display name mapping. If None, uses TEAM_NAMES from config.
        now: Optional time used for timestamps
        feed_base_url: Optional feed base URL override

    Returns:
        StageResult of the last stage reached; on success its value is the MatchData.
        Warnings from every stage are collected on the returned result.
    """
    match_id = match_id_from_url(url)
    warnings: List[str] = []

    fetched = await fetch_match_feeds(session, match_id, feed_base_url)
    warnings.extend(fetched.warnings)
    if not fetched.ok:
        fetched.warnings = warnings
        return fetched

    aggregated = aggregate_stage(fetched.value, now)
    if not aggregated.ok:
        aggregated.warnings = warnings
        return aggregated
    match_data = aggregated.value

    validated = validate_stage(match_data, team_names)
    warnings.extend(validated.warnings)
    if not validated.ok:
        validated.warnings = warnings
        return validated

    for line in format_match_summary(url, match_data, team_names):
        logger.info(line)

    stored = store_stage(conn, match_data, url, team_names, now)
    if not stored.ok:
        stored.warnings = warnings
        return stored

    return StageResult.success("store", match_data, warnings=warnings)


async def ingest_from_urls(
    urls: Optional[List[str]] = None,
    db_path: Optional[str] = None,
    only_new_today: Optional[bool] = None,
    team_names: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
    session: Optional[aiohttp.ClientSession] = None,
    feed_base_url: Optional[str] = None,
) -> IngestionResult:
    """
    Process a list of match URLs, one match at a time.

    Args:
        urls: Match page URLs. If None, uses MATCH_URLS from config.
        db_path: Optional path to database file
        only_new_today: Skip matches already recorded today (IST).
            If None, uses PROCESS_ONLY_TODAYS_MATCHES from config.
        team_names: Team ID -> display name mapping. If None, uses TEAM_NAMES from config.
        now: Optional reference time (used for "today" and all timestamps)
        session: Optional aiohttp session; one is created (and closed) if not given
        feed_base_url: Optional feed base URL override

    Returns:
        IngestionResult with success/skip/error counts, warnings and errors
    """
    urls = list(MATCH_URLS if urls is None else urls)
    if only_new_today is None:
        only_new_today = PROCESS_ONLY_TODAYS_MATCHES
    names = TEAM_NAMES if team_names is None else team_names

    result = IngestionResult()
    run_trees: Dict[str, int] = {}

    conn = get_conn(db_path)
    create_schema(conn)

    today = today_ist(now)
    logger.info(f"Today's date (IST): {today}")
    if only_new_today:
        already = count_matches_on_date(conn, today)
        logger.info(f"Already processed {already} matches today (IST)")

    own_session = session is None
    if own_session:
        session = aiohttp.ClientSession()

    try:
        for url in urls:
            match_id = match_id_from_url(url)

            if only_new_today and match_processed_on_date(conn, match_id, today):
                logger.info(f"Match {match_id} was already processed today (IST), skipping...")
                result.skipped_count += 1
                continue

            logger.info(f"Processing match: {url}")
            try:
                outcome = await process_match_url(session, conn, url, team_names=names, now=now, feed_base_url=feed_base_url)
            except Exception as e:
                logger.exception(f"Unexpected error processing {url}")
                outcome = StageResult.failure("process", e)
            result.warnings.extend(f"Match {match_id}: {w}" for w in outcome.warnings)

            if not outcome.ok:
                result.error_count += 1
                error_msg = f"Error processing match URL {url}: {outcome.describe_error()}"
                result.errors.append(error_msg)
                logger.error(error_msg)
                continue

            result.success_count += 1
            result.processed_match_ids.append(match_id)
            for team in outcome.value.teams:
                run_trees[team.name] = run_trees.get(team.name, 0) + team.total_trees_planted

            running = ", ".join(
                f"{team_display_name(team_id, names)}: {trees}"
                for team_id, trees in sorted(run_trees.items(), key=lambda kv: (-kv[1], kv[0]))
            )
            logger.info(
                f"Run so far: {result.success_count} stored, {result.skipped_count} skipped, "
                f"{result.error_count} failed of {len(urls)} | trees this run: {running}"
            )
    finally:
        if own_session:
            await session.close()

    try:
        for line in format_tree_leaderboard(tree_leaderboard(conn)):
            logger.info(line)
    finally:
        conn.close()

    return result


def run_scheduled(
    urls: Optional[List[str]] = None,
    db_path: Optional[str] = None,
    only_new_today: Optional[bool] = None,
) -> Optional[IngestionResult]:
    """
    Entry point for the time-triggered run.

    Never raises: anything that escapes the per-match handling is logged and
    the invocation still completes.

    Returns:
        IngestionResult, or None if the run failed before finishing
    """
    logger.info(f"Running scheduled task at: {readable_ist_time()}")
    try:
        result = asyncio.run(ingest_from_urls(urls, db_path=db_path, only_new_today=only_new_today))
    except Exception:
        logger.exception("Error processing match data")
        return None

    logger.info(
        f"Scheduled run finished: {result.success_count} stored, "
        f"{result.skipped_count} skipped, {result.error_count} failed"
    )
    return result
