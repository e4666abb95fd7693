#!/usr/bin/env python3
"""
HackJudge scoring CLI

Usage:
    python -m hackjudge.cli <command> [options]

Commands:
    db           Database operations (init)
    leaderboard  Leaderboard inspection (show)
    scores       Stored total checks (verify, recompute)
    judge        Judge progress (progress)

Environment:
    DATABASE_URL    Async SQLAlchemy URL (default sqlite+aiosqlite:///./hackjudge.db)
    LOG_LEVEL       DEBUG|INFO|WARNING|ERROR
"""
import os
import sys
import argparse
import logging
from typing import Optional

from hackjudge.cli.db_commands import DbCommand
from hackjudge.cli.scoring_commands import LeaderboardCommand, ScoresCommand, JudgeCommand


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="hackjudge",
        description="Hackathon judging score and leaderboard CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s db init
  %(prog)s leaderboard show --event spring-hack
  %(prog)s scores verify --event spring-hack
  %(prog)s --dry-run scores recompute --event spring-hack
  %(prog)s judge progress --event spring-hack --judge judge-7
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without executing"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Database commands
    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="db_action")
    db_subparsers.add_parser("init", help="Create missing tables")

    # Leaderboard commands
    lb_parser = subparsers.add_parser("leaderboard", help="Leaderboard inspection")
    lb_subparsers = lb_parser.add_subparsers(dest="leaderboard_action")

    show_parser = lb_subparsers.add_parser("show", help="Print the ranked leaderboard")
    show_parser.add_argument("--event", "-e", required=True, help="Event ID")
    show_parser.add_argument("--limit", type=int, help="Only print the top N entries")

    # Score commands
    scores_parser = subparsers.add_parser("scores", help="Stored total checks")
    scores_subparsers = scores_parser.add_subparsers(dest="scores_action")

    verify_parser = scores_subparsers.add_parser("verify", help="Compare stored totals with their ratings")
    verify_parser.add_argument("--event", "-e", required=True, help="Event ID")

    recompute_parser = scores_subparsers.add_parser("recompute", help="Rewrite drifting totals")
    recompute_parser.add_argument("--event", "-e", required=True, help="Event ID")

    # Judge commands
    judge_parser = subparsers.add_parser("judge", help="Judge progress")
    judge_subparsers = judge_parser.add_subparsers(dest="judge_action")

    progress_parser = judge_subparsers.add_parser("progress", help="Show scored/total projects")
    progress_parser.add_argument("--event", "-e", required=True, help="Event ID")
    progress_parser.add_argument("--judge", "-j", required=True, help="Judge ID")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    setup_logging(parsed.log_level)

    commands = {
        "db": DbCommand,
        "leaderboard": LeaderboardCommand,
        "scores": ScoresCommand,
        "judge": JudgeCommand,
    }
    handler = commands[parsed.command](dry_run=parsed.dry_run)

    try:
        return handler.execute(parsed)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
