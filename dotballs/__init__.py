# Make dotballs a package and expose key entrypoints
from .config import DB_PATH, TEAM_NAMES
from .aggregator import MatchData, PlayerStat, TeamStat, aggregate_innings, parse_count_or_zero
from .ingestion import ingest_from_urls, run_scheduled
