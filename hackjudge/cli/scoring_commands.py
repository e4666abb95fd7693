"""
Scoring CLI commands

Leaderboard printout, stored-total verification and recomputation, and
judge progress, all against the configured DATABASE_URL.
"""
import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from hackjudge.database import engine, build_sessionmaker
from hackjudge.services.judge_progress_service import get_judge_progress
from hackjudge.services.leaderboard_service import get_leaderboard
from hackjudge.services.score_integrity_service import recompute_event_totals, verify_event_totals

T = TypeVar("T")


class _SessionCommand:
    """Runs one coroutine per invocation in a fresh session."""

    def __init__(self, dry_run: bool = False, bind=None):
        self.dry_run = dry_run
        self.bind = bind or engine

    def run(self, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async def runner():
            try:
                async with build_sessionmaker(self.bind)() as session:
                    return await fn(session)
            finally:
                await self.bind.dispose()

        return asyncio.run(runner())


class LeaderboardCommand(_SessionCommand):
    """Leaderboard CLI command handler."""

    def execute(self, args) -> int:
        if args.leaderboard_action == "show":
            return self._show(args)
        print("Error: Unknown leaderboard action")
        return 1

    def _show(self, args) -> int:
        entries = self.run(lambda db: get_leaderboard(args.event, db, include_breakdown=False))
        if args.limit:
            entries = entries[:args.limit]

        print(f"=== Leaderboard: {args.event} ===")
        if not entries:
            print("No eligible projects")
            return 0

        print(f"{'RANK':>4}  {'PROJECT':<24} {'AVERAGE':>8} {'JUDGES':>6}")
        for entry in entries:
            average = f"{entry.average_score:.2f}" if entry.average_score is not None else "-"
            print(f"{entry.rank:>4}  {entry.project_id:<24} {average:>8} {entry.judge_count:>6}")
        return 0


class ScoresCommand(_SessionCommand):
    """Stored total CLI command handler."""

    def execute(self, args) -> int:
        if args.scores_action == "verify":
            return self._verify(args)
        elif args.scores_action == "recompute":
            return self._recompute(args)
        print("Error: Unknown scores action")
        return 1

    def _verify(self, args) -> int:
        """Exit code 1 when any stored total drifted."""
        print(f"=== Score Total Verification: {args.event} ===")
        results = self.run(lambda db: verify_event_totals(args.event, db))

        drifted = [r for r in results if not r.matches]
        for r in drifted:
            print(
                f"✗ score {r.score_id} (judge {r.judge_id}, project {r.project_id}): "
                f"stored {r.stored_total:.6f} != derived {r.derived_total:.6f}"
            )

        print(f"Checked {len(results)} scores, {len(drifted)} drifted")
        return 1 if drifted else 0

    def _recompute(self, args) -> int:
        print(f"=== Score Total Recompute: {args.event} ===")
        changed = self.run(lambda db: recompute_event_totals(args.event, db, dry_run=self.dry_run))

        if self.dry_run:
            print(f"[DRY RUN] Would rewrite {changed} totals")
        else:
            print(f"✓ Rewrote {changed} totals")
        return 0


class JudgeCommand(_SessionCommand):
    """Judge progress CLI command handler."""

    def execute(self, args) -> int:
        if args.judge_action == "progress":
            return self._progress(args)
        print("Error: Unknown judge action")
        return 1

    def _progress(self, args) -> int:
        progress = self.run(lambda db: get_judge_progress(args.judge, args.event, db))
        print(f"=== Judge {args.judge} in {args.event} ===")
        print(f"Completed: {progress.completed}/{progress.total} ({progress.percent:.1f}%)")
        print(f"Remaining: {progress.remaining}")
        return 0
