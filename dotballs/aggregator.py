"""
Fold decoded innings feeds into per-team and per-player dot ball totals.

Only the bowling card is consumed: every dot ball a bowler delivers is
credited to the bowler and to the bowling team, together with the trees it
plants (TREES_PER_DOT_BALL per dot ball).
"""
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from .clock import utc_timestamp
from .config import TREES_PER_DOT_BALL

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


@dataclass
class PlayerStat:
    name: str
    dot_balls_bowled: int = 0
    trees_bowling: int = 0


@dataclass
class TeamStat:
    name: str
    total_dot_balls_bowled: int = 0
    total_trees_planted: int = 0
    players: List[PlayerStat] = field(default_factory=list)

    def find_player(self, name: str) -> Optional[PlayerStat]:
        for player in self.players:
            if player.name == name:
                return player
        return None


@dataclass
class MatchData:
    timestamp: str
    teams: List[TeamStat] = field(default_factory=list)

    def team(self, name: str) -> Optional[TeamStat]:
        for team in self.teams:
            if team.name == name:
                return team
        return None


def parse_count_or_zero(value: Any) -> int:
    """
    Parse a feed count the way the feed's own pages do (integer prefix of the text).

    "5" -> 5, " 7 " -> 7, "3.9" -> 3, "4abc" -> 4. Anything without a leading
    integer (None, "", "-", "abc", a list) counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if not isinstance(value, str):
        return 0
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else 0


def resolve_player_name(entry: Dict[str, Any]) -> str:
    """Short name, else full name, else a `Player<id>` placeholder."""
    return str(entry.get('PlayerShortName') or entry.get('PlayerName') or f"Player{entry.get('PlayerID', '')}")


def _card_team_id(card: Any, placeholder: str) -> str:
    """Team ID of the first card entry, or the placeholder when the card is empty."""
    if isinstance(card, list) and card and isinstance(card[0], dict):
        team_id = card[0].get('TeamID')
        if team_id not in (None, '', 0):
            return str(team_id)
    return placeholder


def _ensure_team(teams: Dict[str, TeamStat], team_id: str) -> TeamStat:
    if team_id not in teams:
        teams[team_id] = TeamStat(name=team_id)
    return teams[team_id]


def add_bowler(team: TeamStat, bowler: Dict[str, Any], trees_per_dot_ball: int = TREES_PER_DOT_BALL) -> PlayerStat:
    """Credit one bowling card entry to its team, merging by resolved player name."""
    name = resolve_player_name(bowler)
    dot_balls = parse_count_or_zero(bowler.get('DotBalls'))
    trees = dot_balls * trees_per_dot_ball

    team.total_dot_balls_bowled += dot_balls
    team.total_trees_planted += trees

    player = team.find_player(name)
    if player:
        player.dot_balls_bowled += dot_balls
        player.trees_bowling += trees
    else:
        player = PlayerStat(name=name, dot_balls_bowled=dot_balls, trees_bowling=trees)
        team.players.append(player)
    return player


def aggregate_innings(
    payloads: Sequence[Optional[Dict[str, Any]]],
    now: Optional[datetime] = None,
    trees_per_dot_ball: int = TREES_PER_DOT_BALL,
) -> MatchData:
    """
    Aggregate decoded innings feeds into a MatchData.

    Args:
        payloads: Decoded feeds in innings order. The payload at position i is
            read from its "Innings{i+1}" section; a None payload or a missing
            section is skipped.
        now: Optional time used for the MatchData timestamp
        trees_per_dot_ball: Trees planted per dot ball

    Returns:
        MatchData with one TeamStat per team seen in any innings
    """
    teams: Dict[str, TeamStat] = {}

    for index, data in enumerate(payloads):
        section_key = f"Innings{index + 1}"
        innings = data.get(section_key) if isinstance(data, dict) else None
        if not isinstance(innings, dict):
            logger.info(f"No data found for innings {index + 1}")
            continue

        batting_card = innings.get('BattingCard') or []
        bowling_card = innings.get('BowlingCard') or []

        batting_team = _card_team_id(batting_card, f"Team{index * 2 + 1}")
        bowling_team = _card_team_id(bowling_card, f"Team{index * 2 + 2}")

        _ensure_team(teams, batting_team)
        team = _ensure_team(teams, bowling_team)

        if not isinstance(bowling_card, list):
            logger.warning(f"Bowling card of innings {index + 1} is not a list, skipping bowlers")
            continue

        for bowler in bowling_card:
            if not isinstance(bowler, dict):
                continue
            add_bowler(team, bowler, trees_per_dot_ball)

    return MatchData(timestamp=utc_timestamp(now), teams=list(teams.values()))
