import sqlite3
from typing import List, Mapping, Optional

from .aggregator import MatchData
from .config import DB_PATH, TEAM_NAMES, TREES_PER_DOT_BALL


def _conn(db_path: str | None = None) -> sqlite3.Connection:
    """Get database connection."""
    return sqlite3.connect(db_path or DB_PATH)


def _run(query: str, params: tuple, conn: sqlite3.Connection | None, db_path: str | None) -> list:
    own = conn is None
    if own:
        conn = _conn(db_path)
    try:
        cur = conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()
    finally:
        if own:
            conn.close()


def tree_leaderboard(conn: sqlite3.Connection | None = None, db_path: str | None = None):
    """
    Get every team's running tree total, highest first.

    Returns:
        List of tuples (team_id, team_name, total_trees_planted, last_updated).
        team_name is None for teams that were never written to Teams.
    """
    return _run(
        """
        SELECT s.team_id, t.team_name, s.total_trees_planted, s.last_updated
        FROM TreePlantingSummary s LEFT JOIN Teams t ON t.team_id = s.team_id
        ORDER BY s.total_trees_planted DESC, s.team_id ASC
        """,
        (),
        conn,
        db_path,
    )


def match_performance(match_id: str, conn: sqlite3.Connection | None = None, db_path: str | None = None):
    """
    Get the stored figures of one match.

    Returns:
        Tuple (team_rows, player_rows):
        team_rows are (team_id, team_name, total_dot_balls_bowled, total_trees_planted),
        player_rows are (team_id, player_name, dot_balls_bowled, trees_planted)
    """
    team_rows = _run(
        """
        SELECT p.team_id, t.team_name, p.total_dot_balls_bowled, p.total_trees_planted
        FROM TeamMatchPerformance p LEFT JOIN Teams t ON t.team_id = p.team_id
        WHERE p.match_id = ? ORDER BY p.total_trees_planted DESC, p.team_id ASC
        """,
        (match_id,),
        conn,
        db_path,
    )
    player_rows = _run(
        """
        SELECT p.team_id, pl.player_name, p.dot_balls_bowled, p.trees_planted
        FROM PlayerMatchPerformance p LEFT JOIN Players pl ON pl.player_id = p.player_id
        WHERE p.match_id = ? ORDER BY p.team_id ASC, p.dot_balls_bowled DESC, pl.player_name ASC
        """,
        (match_id,),
        conn,
        db_path,
    )
    return team_rows, player_rows


def top_bowlers(n: int = 20, conn: sqlite3.Connection | None = None, db_path: str | None = None):
    """
    Get the players with the most dot balls bowled across all stored matches.

    Returns:
        List of tuples (player_name, team_id, dot_balls_bowled, trees_planted, matches)
    """
    return _run(
        """
        SELECT pl.player_name, p.team_id, SUM(p.dot_balls_bowled), SUM(p.trees_planted), COUNT(*)
        FROM PlayerMatchPerformance p LEFT JOIN Players pl ON pl.player_id = p.player_id
        GROUP BY p.player_id
        ORDER BY SUM(p.dot_balls_bowled) DESC, pl.player_name ASC
        LIMIT ?
        """,
        (n,),
        conn,
        db_path,
    )


def format_match_summary(match_url: str, match_data: MatchData, team_names: Optional[Mapping[str, str]] = None) -> List[str]:
    """Lines of the per-match summary logged after aggregation."""
    names = TEAM_NAMES if team_names is None else team_names
    lines = [f"----- Match: {match_url} -----", "Match Summary:"]
    for team in match_data.teams:
        lines.append(f"{names.get(team.name, team.name)}:")
        lines.append(f"  Total Dot Balls Bowled: {team.total_dot_balls_bowled}")
        lines.append(f"  Total Trees Planted: {team.total_trees_planted} ({TREES_PER_DOT_BALL} trees per dot ball)")
        if team.players:
            lines.append("  Player Statistics:")
        for player in team.players:
            lines.append(f"    {player.name}: {player.dot_balls_bowled} dot balls, {player.trees_bowling} trees")
    return lines


def format_tree_leaderboard(rows) -> List[str]:
    lines = ["===== TOTAL TREES PLANTED ====="]
    for team_id, team_name, total, _last_updated in rows:
        lines.append(f"{team_name or team_id}: {total} trees")
    return lines
