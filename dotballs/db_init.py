import logging
import sqlite3

from .config import DB_PATH
from .db_utils import get_conn

logger = logging.getLogger(__name__)

TABLES = [
    'Matches', 'Teams', 'TeamMatchPerformance',
    'Players', 'PlayerMatchPerformance', 'TreePlantingSummary',
]

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS Matches (
        match_id TEXT PRIMARY KEY,
        match_url TEXT,
        match_date TEXT,
        timestamp TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS Teams (
        team_id TEXT PRIMARY KEY,
        team_name TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS TeamMatchPerformance (
        id INTEGER PRIMARY KEY,
        match_id TEXT,
        team_id TEXT,
        total_dot_balls_bowled INTEGER,
        total_trees_planted INTEGER,
        UNIQUE(match_id, team_id)
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS Players (
        player_id TEXT PRIMARY KEY,
        player_name TEXT,
        team_id TEXT
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS PlayerMatchPerformance (
        id INTEGER PRIMARY KEY,
        match_id TEXT,
        player_id TEXT,
        team_id TEXT,
        dot_balls_bowled INTEGER,
        trees_planted INTEGER,
        UNIQUE(match_id, player_id)
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS TreePlantingSummary (
        team_id TEXT PRIMARY KEY,
        total_trees_planted INTEGER,
        last_updated TEXT
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_matches_match_date ON Matches(match_date)',
]


def create_schema(conn: sqlite3.Connection) -> None:
    """Create any missing tables on an open connection."""
    cursor = conn.cursor()
    for statement in SCHEMA:
        cursor.execute(statement)
    conn.commit()


def setup_database(db_path: str | None = None, force_recreate: bool = False) -> sqlite3.Connection:
    """
    Create the dot ball schema, optionally dropping existing tables first.

    Args:
        db_path: Optional path to database file. If None, uses default from config.
        force_recreate: If True, drop all tables (and their data) before creating them.

    Returns:
        Open connection to the initialised database
    """
    conn = get_conn(db_path)
    if force_recreate:
        logger.warning("Recreating database - all existing data will be lost!")
        cursor = conn.cursor()
        for table in TABLES:
            cursor.execute(f'DROP TABLE IF EXISTS {table}')
        conn.commit()

    create_schema(conn)
    logger.info(f"Database ready at {db_path or DB_PATH}")
    return conn


if __name__ == "__main__":
    conn = setup_database()
    conn.close()
