import argparse
import asyncio
import logging
import logging.config

from .config import LOGGING_CONFIG, MATCH_URLS, TEAM_NAMES
from .db_init import setup_database
from .display import match_performance, top_bowlers, tree_leaderboard
from .ingestion import ingest_from_urls, load_urls_from_file, normalize_match_url, run_scheduled, validate_url

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.config.dictConfig(LOGGING_CONFIG)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dotballs", description="Dot ball tree planting stats")
    parser.add_argument("--db", help="Path to the SQLite database (default: DOTBALLS_DB_PATH or dotball_trees.db)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init-db", help="Create the database schema")
    p_init.add_argument("--force", action="store_true", help="Drop and recreate all tables (deletes data)")

    p_run = sub.add_parser("run", help="Scheduled run over the configured match URLs")
    p_run.add_argument("--all", action="store_true", help="Process matches even if already recorded today")
    p_run.add_argument("--urls-file", help="File with match URLs or IDs (one per line) instead of the built-in list")

    p_ingest = sub.add_parser("ingest", help="Ingest matches by ID or URL")
    p_ingest.add_argument("items", nargs="+", help="Match IDs or URLs")
    p_ingest.add_argument("--force", action="store_true", help="Process matches even if already recorded today")

    p_show = sub.add_parser("show", help="Display stored figures")
    p_show_sub = p_show.add_subparsers(dest="show_cmd", required=True)
    p_show_sub.add_parser("trees", help="Show total trees planted per team")
    p_match = p_show_sub.add_parser("match", help="Show team and player figures of one match")
    p_match.add_argument("match_id")
    p_bowlers = p_show_sub.add_parser("top-bowlers", help="Show players with the most dot balls")
    p_bowlers.add_argument("-n", type=int, default=20, help="Number of players to show")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    if args.cmd == "init-db":
        conn = setup_database(args.db, force_recreate=args.force)
        conn.close()
        return 0

    if args.cmd == "run":
        urls = load_urls_from_file(args.urls_file) if args.urls_file else list(MATCH_URLS)
        only_new_today = False if args.all else None
        # Unattended runs always exit cleanly; failures are in the log
        run_scheduled(urls, db_path=args.db, only_new_today=only_new_today)
        return 0

    if args.cmd == "ingest":
        urls = [normalize_match_url(item) for item in args.items]
        bad = [u for u in urls if not validate_url(u)]
        if bad:
            print(f"Not a match URL or ID: {', '.join(bad)}")
            return 1
        result = asyncio.run(ingest_from_urls(urls, db_path=args.db, only_new_today=not args.force))
        print(f"Stored {result.success_count}, skipped {result.skipped_count}, failed {result.error_count}")
        for error in result.errors:
            print(f"  {error}")
        return 1 if result.error_count else 0

    if args.cmd == "show":
        if args.show_cmd == "trees":
            rows = tree_leaderboard(db_path=args.db)
            print(f"Total trees planted ({len(rows)} teams):")
            for i, (team_id, team_name, total, last_updated) in enumerate(rows, 1):
                print(f"{i:2d}. {team_name or team_id:30s} {total:8d} trees (updated {last_updated})")
        elif args.show_cmd == "match":
            team_rows, player_rows = match_performance(args.match_id, db_path=args.db)
            if not team_rows:
                print(f"No data stored for match {args.match_id}")
                return 1
            for team_id, team_name, dots, trees in team_rows:
                print(f"{team_name or TEAM_NAMES.get(team_id, team_id)}: {dots} dot balls bowled, {trees} trees")
                for p_team, player, p_dots, p_trees in player_rows:
                    if p_team == team_id:
                        print(f"    {player:24s} {p_dots:3d} dot balls {p_trees:5d} trees")
        elif args.show_cmd == "top-bowlers":
            for i, (player, team_id, dots, trees, matches) in enumerate(top_bowlers(args.n, db_path=args.db), 1):
                team_disp = TEAM_NAMES.get(team_id, team_id)
                print(f"{i:2d}. {player:24s} {dots:5d} dot balls {trees:6d} trees ({matches} matches) {team_disp}")
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
