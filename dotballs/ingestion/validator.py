"""
Data validation for aggregated matches.

Validates match data for consistency before database insertion.
"""
import re
from typing import List, Mapping, Optional, Tuple

from ..aggregator import MatchData
from ..config import TEAM_NAMES

_PLACEHOLDER_TEAM = re.compile(r'^Team\d+$')


def validate_match_data(
    match_data: MatchData,
    team_names: Optional[Mapping[str, str]] = None,
) -> Tuple[bool, List[str]]:
    """
    Validate aggregated match data for consistency and completeness.

    Duplicate team or player names and team totals that disagree with their
    players make the data invalid. Unknown or placeholder teams and teams
    without bowlers only produce warnings.

    Args:
        match_data: Aggregated match
        team_names: Team ID -> display name mapping. If None, uses TEAM_NAMES from config.

    Returns:
        Tuple of (is_valid, list_of_warnings)
    """
    names = TEAM_NAMES if team_names is None else team_names
    warnings = []
    is_valid = True

    if not match_data.teams:
        warnings.append("No teams found for match")
        return is_valid, warnings

    if len(match_data.teams) > 2:
        warnings.append(f"Expected at most 2 teams, found {len(match_data.teams)}")

    seen_teams = set()
    for team in match_data.teams:
        if team.name in seen_teams:
            warnings.append(f"Duplicate team {team.name}")
            is_valid = False
        seen_teams.add(team.name)

        if _PLACEHOLDER_TEAM.match(team.name):
            warnings.append(f"Placeholder team ID {team.name} (missing card in feed)")
        elif team.name not in names:
            warnings.append(f"Unknown team ID {team.name}, stored under its raw ID")

        if not team.players:
            warnings.append(f"No bowlers found for team {team.name}")
            continue

        seen_players = set()
        for player in team.players:
            if player.name in seen_players:
                warnings.append(f"Duplicate player {player.name} in team {team.name}")
                is_valid = False
            seen_players.add(player.name)
            if player.dot_balls_bowled < 0:
                warnings.append(f"Negative dot balls for {player.name}: {player.dot_balls_bowled}")

        dots = sum(p.dot_balls_bowled for p in team.players)
        trees = sum(p.trees_bowling for p in team.players)
        if dots != team.total_dot_balls_bowled or trees != team.total_trees_planted:
            warnings.append(
                f"Team {team.name} totals ({team.total_dot_balls_bowled} dots, {team.total_trees_planted} trees) "
                f"do not match its players ({dots} dots, {trees} trees)"
            )
            is_valid = False

    return is_valid, warnings
