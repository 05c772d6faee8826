import logging
import re
import sqlite3
from datetime import datetime
from typing import Mapping, Optional

from .aggregator import MatchData, PlayerStat, TeamStat
from .clock import format_ist_datetime
from .config import DB_PATH, TEAM_NAMES
from .scrapers.base import match_id_from_url

logger = logging.getLogger(__name__)


def get_conn(db_path: str | None = None) -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Optional path to database file. If None, uses default from config.

    Returns:
        SQLite connection object
    """
    return sqlite3.connect(db_path or DB_PATH)


def team_display_name(team_id: str, team_names: Optional[Mapping[str, str]] = None) -> str:
    """Display name for a team ID, falling back to the ID itself."""
    names = TEAM_NAMES if team_names is None else team_names
    return names.get(team_id, team_id)


def player_id_for(team_id: str, player_name: str) -> str:
    """Composite player key: team ID plus the name with whitespace runs turned into '_'."""
    sanitized = re.sub(r'\s+', '_', player_name)
    return f"{team_id}_{sanitized}"


def upsert_match(conn: sqlite3.Connection, match_id: str, match_url: str, match_date: str, timestamp: str) -> None:
    """Insert the match row, replacing any earlier row for the same match_id."""
    conn.execute(
        """
        INSERT OR REPLACE INTO Matches (match_id, match_url, match_date, timestamp)
        VALUES (?, ?, ?, ?)
        """,
        (match_id, match_url, match_date, timestamp),
    )


def upsert_team(conn: sqlite3.Connection, team_id: str, team_name: str) -> None:
    """Insert the team if unseen; an existing name is left untouched."""
    conn.execute(
        "INSERT OR IGNORE INTO Teams (team_id, team_name) VALUES (?, ?)",
        (team_id, team_name),
    )


def upsert_team_performance(conn: sqlite3.Connection, match_id: str, team: TeamStat) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO TeamMatchPerformance
            (match_id, team_id, total_dot_balls_bowled, total_trees_planted)
        VALUES (?, ?, ?, ?)
        """,
        (match_id, team.name, team.total_dot_balls_bowled, team.total_trees_planted),
    )


def add_to_tree_summary(conn: sqlite3.Connection, team_id: str, trees: int, timestamp: str) -> None:
    """
    Add trees to a team's running total.

    The total is incremented, never replaced: calling this twice for the same
    match counts that match twice.
    """
    conn.execute(
        """
        INSERT INTO TreePlantingSummary (team_id, total_trees_planted, last_updated)
        VALUES (?, ?, ?)
        ON CONFLICT(team_id) DO UPDATE SET
            total_trees_planted = total_trees_planted + excluded.total_trees_planted,
            last_updated = excluded.last_updated
        """,
        (team_id, trees, timestamp),
    )


def upsert_player(conn: sqlite3.Connection, player_id: str, player_name: str, team_id: str) -> None:
    conn.execute(
        "INSERT OR IGNORE INTO Players (player_id, player_name, team_id) VALUES (?, ?, ?)",
        (player_id, player_name, team_id),
    )


def upsert_player_performance(conn: sqlite3.Connection, match_id: str, player_id: str, team_id: str, player: PlayerStat) -> None:
    conn.execute(
        """
        INSERT OR REPLACE INTO PlayerMatchPerformance
            (match_id, player_id, team_id, dot_balls_bowled, trees_planted)
        VALUES (?, ?, ?, ?, ?)
        """,
        (match_id, player_id, team_id, player.dot_balls_bowled, player.trees_bowling),
    )


def store_match_data(
    conn: sqlite3.Connection,
    match_data: MatchData,
    match_url: str,
    team_names: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Write one aggregated match to the database.

    Statements are issued one at a time and not committed here; the caller
    commits. TreePlantingSummary is incremented, so storing the same match
    twice double-counts its trees.

    Args:
        conn: Database connection
        match_data: Aggregated match
        match_url: Match page URL the data was derived from
        team_names: Team ID -> display name mapping. If None, uses TEAM_NAMES from config.
        now: Optional time used for match_date and timestamps

    Returns:
        The match ID the data was stored under
    """
    match_id = match_id_from_url(match_url)
    timestamp = format_ist_datetime(now)
    match_date = timestamp

    upsert_match(conn, match_id, match_url, match_date, timestamp)

    for team in match_data.teams:
        team_id = team.name
        upsert_team(conn, team_id, team_display_name(team_id, team_names))
        upsert_team_performance(conn, match_id, team)
        add_to_tree_summary(conn, team_id, team.total_trees_planted, timestamp)

        for player in team.players:
            player_id = player_id_for(team_id, player.name)
            upsert_player(conn, player_id, player.name, team_id)
            upsert_player_performance(conn, match_id, player_id, team_id, player)

    logger.info(f"Data for match {match_id} stored in database")
    return match_id


def count_matches_on_date(conn: sqlite3.Connection, day: str) -> int:
    """Number of matches whose match_date falls on the given 'YYYY-MM-DD' day."""
    cur = conn.cursor()
    cur.execute("SELECT COUNT(*) FROM Matches WHERE date(match_date) = date(?)", (day,))
    row = cur.fetchone()
    return int(row[0] or 0) if row else 0


def match_processed_on_date(conn: sqlite3.Connection, match_id: str, day: str) -> bool:
    """True if the match was recorded with a match_date on the given day."""
    cur = conn.cursor()
    cur.execute(
        "SELECT match_id FROM Matches WHERE match_id = ? AND date(match_date) = date(?)",
        (match_id, day),
    )
    return cur.fetchone() is not None
