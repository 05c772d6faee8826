import json
from datetime import datetime, timezone

import pytest

from dotballs.db_init import create_schema
from dotballs.db_utils import get_conn

FEED_BASE = "https://feeds.test/ipl/feeds"

# 19:30 IST on 1 May 2025
NOW = datetime(2025, 5, 1, 14, 0, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, status: int, body: str, reason: str = "OK"):
        self.status = status
        self.reason = reason
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def text(self):
        return self._body


class FakeSession:
    """Stands in for aiohttp.ClientSession: url -> (status, body) or an exception to raise."""

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.requests = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers))
        outcome = self.responses.get(url)
        if outcome is None:
            return FakeResponse(404, "Not Found", reason="Not Found")
        if isinstance(outcome, BaseException):
            raise outcome
        status, body = outcome
        return FakeResponse(status, body)

    async def close(self):
        self.closed = True


def innings_payload(number: int, batting_team, bowling_team, bowlers: list) -> dict:
    """Feed payload for one innings with a one-row batting card and the given bowlers."""
    batting = [{"TeamID": batting_team, "PlayerName": "Opener"}] if batting_team is not None else []
    bowling = [dict({"TeamID": bowling_team}, **b) for b in bowlers]
    return {f"Innings{number}": {"BattingCard": batting, "BowlingCard": bowling}}


def jsonp(payload, callback: str = "onScoring") -> str:
    return f"{callback}({json.dumps(payload)});"


def feed_url(match_id: str, innings: int) -> str:
    return f"{FEED_BASE}/{match_id}-Innings{innings}.js"


@pytest.fixture
def conn():
    connection = get_conn(":memory:")
    create_schema(connection)
    yield connection
    connection.close()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "trees.db")


@pytest.fixture
def two_innings():
    """Match where 13 bats first against 17, then 17 bats against 13."""
    first = innings_payload(1, 13, 17, [
        {"PlayerID": 1, "PlayerName": "Jasprit Bumrah", "PlayerShortName": "J Bumrah", "DotBalls": "12"},
        {"PlayerID": 2, "PlayerName": "Trent Boult", "PlayerShortName": "T Boult", "DotBalls": "9"},
    ])
    second = innings_payload(2, 17, 13, [
        {"PlayerID": 3, "PlayerName": "Matheesha Pathirana", "PlayerShortName": "M Pathirana", "DotBalls": "10"},
        {"PlayerID": 4, "PlayerName": "Ravindra Jadeja", "PlayerShortName": "R Jadeja", "DotBalls": "7"},
    ])
    return [first, second]
