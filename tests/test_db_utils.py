from datetime import datetime, timezone
from types import MappingProxyType

from dotballs.aggregator import MatchData, PlayerStat, TeamStat, aggregate_innings
from dotballs.db_init import setup_database
from dotballs.db_utils import (
    count_matches_on_date,
    match_processed_on_date,
    player_id_for,
    store_match_data,
    team_display_name,
)

from conftest import NOW

URL = "https://www.iplt20.com/match/2025/1832"


def _match(trees_17: int = 90, trees_99: int = 36) -> MatchData:
    return MatchData(
        timestamp="2025-05-01T14:00:00Z",
        teams=[
            TeamStat("17", trees_17 // 18, trees_17, [PlayerStat("J Bumrah", trees_17 // 18, trees_17)]),
            TeamStat("99", trees_99 // 18, trees_99, [PlayerStat("Some  New Guy", trees_99 // 18, trees_99)]),
        ],
    )


def test_player_id_replaces_whitespace_runs():
    assert player_id_for("17", "J Bumrah") == "17_J_Bumrah"
    assert player_id_for("17", "Some  New\tGuy") == "17_Some_New_Guy"


def test_team_display_name_falls_back_to_id():
    assert team_display_name("17") == "Mumbai Indians"
    assert team_display_name("99") == "99"
    assert team_display_name("17", {"17": "MI"}) == "MI"


def test_store_match_data_writes_all_tables(conn):
    match_id = store_match_data(conn, _match(), URL, now=NOW)
    conn.commit()

    assert match_id == "1832"
    assert conn.execute("SELECT match_id, match_url, match_date, timestamp FROM Matches").fetchall() == [
        ("1832", URL, "2025-05-01 19:30:00", "2025-05-01 19:30:00"),
    ]
    assert sorted(conn.execute("SELECT team_id, team_name FROM Teams").fetchall()) == [
        ("17", "Mumbai Indians"), ("99", "99"),
    ]
    assert sorted(conn.execute(
        "SELECT match_id, team_id, total_dot_balls_bowled, total_trees_planted FROM TeamMatchPerformance"
    ).fetchall()) == [("1832", "17", 5, 90), ("1832", "99", 2, 36)]
    assert sorted(conn.execute("SELECT player_id, player_name, team_id FROM Players").fetchall()) == [
        ("17_J_Bumrah", "J Bumrah", "17"), ("99_Some_New_Guy", "Some  New Guy", "99"),
    ]
    assert sorted(conn.execute(
        "SELECT match_id, player_id, team_id, dot_balls_bowled, trees_planted FROM PlayerMatchPerformance"
    ).fetchall()) == [("1832", "17_J_Bumrah", "17", 5, 90), ("1832", "99_Some_New_Guy", "99", 2, 36)]
    assert sorted(conn.execute("SELECT team_id, total_trees_planted FROM TreePlantingSummary").fetchall()) == [
        ("17", 90), ("99", 36),
    ]


def test_injected_team_names_are_used(conn):
    names = MappingProxyType({"17": "MI", "99": "Expansion XI"})
    store_match_data(conn, _match(), URL, team_names=names, now=NOW)
    assert sorted(conn.execute("SELECT team_id, team_name FROM Teams").fetchall()) == [
        ("17", "MI"), ("99", "Expansion XI"),
    ]


def test_storing_same_match_twice_adds_to_tree_summary(conn):
    store_match_data(conn, _match(), URL, now=NOW)
    store_match_data(conn, _match(), URL, now=NOW)
    conn.commit()

    # Running totals are incremented on every write, not replaced
    assert sorted(conn.execute("SELECT team_id, total_trees_planted FROM TreePlantingSummary").fetchall()) == [
        ("17", 180), ("99", 72),
    ]
    # Per-match rows are replaced, so they are not duplicated
    assert conn.execute("SELECT COUNT(*) FROM Matches").fetchone()[0] == 1
    assert conn.execute("SELECT COUNT(*) FROM TeamMatchPerformance").fetchone()[0] == 2
    assert conn.execute("SELECT COUNT(*) FROM PlayerMatchPerformance").fetchone()[0] == 2
    assert conn.execute("SELECT COUNT(*) FROM Players").fetchone()[0] == 2


def test_replaced_performance_keeps_latest_figures(conn):
    store_match_data(conn, _match(trees_17=90), URL, now=NOW)
    store_match_data(conn, _match(trees_17=180), URL, now=NOW)
    assert conn.execute(
        "SELECT total_trees_planted FROM TeamMatchPerformance WHERE match_id = '1832' AND team_id = '17'"
    ).fetchone()[0] == 180
    assert conn.execute(
        "SELECT total_trees_planted FROM TreePlantingSummary WHERE team_id = '17'"
    ).fetchone()[0] == 270


def test_team_name_is_not_overwritten(conn):
    store_match_data(conn, _match(), URL, team_names={"17": "First Name"}, now=NOW)
    store_match_data(conn, _match(), URL, team_names={"17": "Second Name"}, now=NOW)
    assert conn.execute("SELECT team_name FROM Teams WHERE team_id = '17'").fetchone()[0] == "First Name"


def test_summary_last_updated_moves_forward(conn):
    later = datetime(2025, 5, 2, 14, 0, 0, tzinfo=timezone.utc)
    store_match_data(conn, _match(), URL, now=NOW)
    store_match_data(conn, _match(), "https://www.iplt20.com/match/2025/1833", now=later)
    assert conn.execute(
        "SELECT last_updated FROM TreePlantingSummary WHERE team_id = '17'"
    ).fetchone()[0] == "2025-05-02 19:30:00"


def test_daily_checks_use_ist_date(conn):
    store_match_data(conn, _match(), URL, now=NOW)

    assert count_matches_on_date(conn, "2025-05-01") == 1
    assert count_matches_on_date(conn, "2025-05-02") == 0
    assert match_processed_on_date(conn, "1832", "2025-05-01")
    assert not match_processed_on_date(conn, "1833", "2025-05-01")
    assert not match_processed_on_date(conn, "1832", "2025-05-02")


def test_late_utc_evening_is_next_ist_day(conn):
    late = datetime(2025, 5, 1, 20, 0, 0, tzinfo=timezone.utc)
    store_match_data(conn, _match(), URL, now=late)
    assert match_processed_on_date(conn, "1832", "2025-05-02")


def test_aggregated_match_round_trips_through_store(conn, two_innings):
    store_match_data(conn, aggregate_innings(two_innings, now=NOW), URL, now=NOW)
    rows = dict(conn.execute("SELECT team_id, total_trees_planted FROM TreePlantingSummary").fetchall())
    assert rows == {"17": 378, "13": 306}


def test_setup_database_force_recreate_clears_data(db_path):
    conn = setup_database(db_path)
    store_match_data(conn, _match(), URL, now=NOW)
    conn.commit()
    conn.close()

    conn = setup_database(db_path, force_recreate=True)
    try:
        assert conn.execute("SELECT COUNT(*) FROM Matches").fetchone()[0] == 0
        assert conn.execute("SELECT COUNT(*) FROM TreePlantingSummary").fetchone()[0] == 0
    finally:
        conn.close()
