#!/usr/bin/env python3
"""
Frutales Leaderboard CLI

Builds the Frutales leaderboard for a tournament from backend exports or
directly from the backend REST API.

Usage:
    python frutales_leaderboard.py --inscriptions ins.json --scores frutales.json --entries leaderboard.json
    python frutales_leaderboard.py --scorecards scorecards.json --inscriptions ins.json --double-points
    python frutales_leaderboard.py --tournament-id 12 --api-url http://localhost:8080/api --watch
"""

import argparse
import logging
import sys
import threading
from pathlib import Path

import requests

from frutales import (
    InvalidInputError,
    LeaderboardFetcher,
    LeaderboardPoller,
    calculate_frutales_scores,
    export_leaderboard,
    filter_roster,
    leaderboard_rows,
    merge_scores_with_inscriptions,
    render_table,
    validate_leaderboard,
)
from frutales.config import get_config, load_config
from frutales.logging_config import get_logger, setup_logging
from frutales.schemas import InscriptionRecord, LeaderboardEntryRecord, FrutalesScoreRecord, ScorecardRecord
from frutales.utils import load_records, save_json

logger = get_logger('cli')


def build_from_files(args, config) -> list:
    """Merge (and optionally score) from local JSON exports."""
    inscriptions = load_records(args.inscriptions, InscriptionRecord) if args.inscriptions else []
    entries = load_records(args.entries, LeaderboardEntryRecord) if args.entries else []

    if args.scorecards:
        scorecards = load_records(args.scorecards, ScorecardRecord)
        calculated = calculate_frutales_scores(
            scorecards,
            double_points=args.double_points,
            config=config,
            tie_policy=args.tie_policy,
        )
        if not inscriptions:
            return calculated
        scores = [entry.to_dict() for entry in calculated]
    else:
        scores = load_records(args.scores, FrutalesScoreRecord) if args.scores else []

    return merge_scores_with_inscriptions(scores, entries, inscriptions)


def print_leaderboard(roster: list, search: str = '', public: bool = False) -> None:
    shown = filter_roster(roster, search)
    # tie markers are computed on the full roster, not the filtered view
    rows = leaderboard_rows(roster, public=public)
    by_player = {entry.player_id: row for entry, row in zip(roster, rows)}
    print(render_table([by_player[entry.player_id] for entry in shown]))
    print(f'\n{len(shown)} players')


def report_validation(roster: list) -> bool:
    """Print validation findings; returns False when errors were found."""
    errors, warnings = validate_leaderboard(roster)
    for warning in warnings:
        print(f'⚠️  {warning}')
    for error in errors:
        print(f'❌ {error}')
    if not errors and not warnings:
        print('✓ Leaderboard is consistent')
    return not errors


def write_outputs(args, roster: list) -> None:
    if args.output:
        save_json(args.output, roster)
        print(f'Leaderboard saved to {args.output}')
    if args.excel:
        export_leaderboard(args.excel, roster, title=args.title, public=args.public)
        print(f'Leaderboard exported to {args.excel}')


def watch(args, fetcher: LeaderboardFetcher, interval: float) -> None:
    """Poll the backend until interrupted."""

    def on_update(roster):
        print(f'\n{"=" * 60}')
        print_leaderboard(roster, args.search, args.public)
        write_outputs(args, roster)

    poller = LeaderboardPoller(
        lambda: fetcher.fetch_roster(args.tournament_id),
        on_update=on_update,
        interval=interval,
    )
    stop = threading.Event()
    with poller:
        try:
            stop.wait()
        except KeyboardInterrupt:
            print('\nStopped')


def main():
    parser = argparse.ArgumentParser(description="Frutales tournament leaderboard")
    source = parser.add_argument_group('local files')
    source.add_argument("--inscriptions", "-i", help="Inscriptions JSON export")
    source.add_argument("--scores", "-s", help="Calculated Frutales scores JSON export")
    source.add_argument("--entries", "-e", help="Leaderboard entries JSON export")
    source.add_argument("--scorecards", help="Scorecards JSON export; recomputes Frutales points")
    source.add_argument(
        "--double-points",
        action="store_true",
        help="Event awards double points (with --scorecards)",
    )
    source.add_argument(
        "--tie-policy",
        choices=["countback", "shared"],
        default=None,
        help="How tied net scores split position points (default from config)",
    )

    remote = parser.add_argument_group('backend')
    remote.add_argument("--tournament-id", "-t", type=int, help="Tournament id to fetch")
    remote.add_argument("--api-url", default=None, help="Backend base URL (default from config)")
    remote.add_argument("--token", default=None, help="Bearer token for admin endpoints")
    remote.add_argument("--recalculate", action="store_true", help="Run the backend scoring first")
    remote.add_argument("--watch", "-w", action="store_true", help="Keep refreshing the leaderboard")
    remote.add_argument("--interval", type=float, default=None, help="Refresh interval in seconds")

    parser.add_argument("--config", default=None, help="Scoring config JSON (default data/scoring_config.json)")
    parser.add_argument("--output", "-o", default=None, help="Write the leaderboard as JSON")
    parser.add_argument("--excel", default=None, help="Write the leaderboard as .xlsx")
    parser.add_argument("--title", default="Frutales", help="Sheet title for --excel")
    parser.add_argument("--search", default="", help="Only show players matching name/matricula")
    parser.add_argument("--public", action="store_true", help="Use public page status codes")
    parser.add_argument("--validate", action="store_true", help="Check leaderboard invariants")
    parser.add_argument("--log-dir", default=None, help="Also write logs to this directory")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log warnings")

    args = parser.parse_args()

    setup_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        level=logging.WARNING if args.quiet else logging.INFO,
        log_to_file=bool(args.log_dir),
    )

    config = load_config(args.config) if args.config else get_config()

    if args.tournament_id is None and not (args.inscriptions or args.scores or args.scorecards):
        parser.error("provide --tournament-id or at least one of --inscriptions/--scores/--scorecards")

    if args.tournament_id is not None:
        fetcher = LeaderboardFetcher(
            args.api_url or config.api_base_url,
            timeout=config.request_timeout_seconds,
            token=args.token,
        )
        if args.watch:
            watch(args, fetcher, args.interval or config.poll_interval_seconds)
            return
        try:
            roster = fetcher.fetch_roster(args.tournament_id, recalculate=args.recalculate)
        except (requests.RequestException, InvalidInputError) as e:
            print(f"❌ Could not load tournament {args.tournament_id}: {e}")
            sys.exit(1)
    else:
        try:
            roster = build_from_files(args, config)
        except (FileNotFoundError, ValueError, InvalidInputError) as e:
            logger.error(f'Could not build leaderboard: {e}')
            print(f"❌ {e}")
            sys.exit(1)

    logger.info(f'Leaderboard built: {len(roster)} players')
    print_leaderboard(roster, args.search, args.public)
    write_outputs(args, roster)

    if args.validate and not report_validation(roster):
        sys.exit(1)


if __name__ == "__main__":
    main()
