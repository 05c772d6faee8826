import os
from datetime import timedelta
from types import MappingProxyType

from dotenv import load_dotenv

# Load environment overrides from .env, if present
load_dotenv()

# Base paths
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
DB_PATH = os.getenv('DOTBALLS_DB_PATH', os.path.join(REPO_ROOT, 'dotball_trees.db'))

# --- Feed source ---
# Per-innings scorecard feeds are served as <FEED_BASE_URL>/<match_id>-Innings{1,2}.js
FEED_BASE_URL = os.getenv(
    'DOTBALLS_FEED_BASE_URL',
    'https://ipl-stats-sports-mechanic.s3.ap-south-1.amazonaws.com/ipl/feeds',
)
INNINGS_PER_MATCH = 2

# Total seconds allowed per feed request (aiohttp ClientTimeout.total)
FEED_TIMEOUT = float(os.getenv('DOTBALLS_FEED_TIMEOUT', '30'))

# The origin only serves browser-looking requests
FEED_HEADERS = {
    'Accept': 'application/json,text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/134.0.0.0 Safari/537.36',
    'Referer': 'https://www.iplt20.com/',
    'Connection': 'keep-alive',
    'Cache-Control': 'max-age=0',
    'Sec-Fetch-Dest': 'document',
    'Sec-Fetch-Mode': 'navigate',
    'Sec-Fetch-Site': 'same-origin',
    'Upgrade-Insecure-Requests': '1',
    'Pragma': 'no-cache',
}

# Bare match ids given on the command line are expanded with this prefix
MATCH_URL_BASE = 'https://www.iplt20.com/match/2025'

# --- Derived metrics ---
TREES_PER_DOT_BALL = 18

# All date bucketing happens in IST (UTC+5:30)
IST_OFFSET = timedelta(hours=5, minutes=30)

# Team ID -> display name. Teams missing here are stored under their raw ID.
TEAM_NAMES = MappingProxyType({
    '17': 'Mumbai Indians',
    '13': 'Chennai Super Kings',
    '19': 'Royal Challengers Bangalore',
    '18': 'Rajasthan Royals',
    '16': 'Kolkata Knight Riders',
    '15': 'Kings XI Punjab',
    '14': 'Delhi Capitals',
    '20': 'Sunrisers Hyderabad',
    '35': 'Gujarat Titans',
    '77': 'Lucknow Super Giants',
})

# --- Scheduled run ---
# Matches processed by each scheduled invocation. Earlier fixtures of the season
# (1799-1831) have already been loaded; later ones are added as they are played.
MATCH_URLS = [
    'https://www.iplt20.com/match/2025/1832',
    'https://www.iplt20.com/match/2025/1833',
    'https://www.iplt20.com/match/2025/1834',
    'https://www.iplt20.com/match/2025/1835',
]

# Skip matches that were already recorded today (IST). Turning this off makes
# every run add the match's trees to TreePlantingSummary again.
PROCESS_ONLY_TODAYS_MATCHES = os.getenv('DOTBALLS_ONLY_NEW_TODAY', 'true').lower() == 'true'

# --- Logging ---
LOG_LEVEL = os.getenv('DOTBALLS_LOG_LEVEL', 'INFO').upper()

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": LOG_LEVEL,
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
}
