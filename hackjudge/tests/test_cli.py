"""
CLI Test Suite

Parser wiring plus the command handlers run against a temporary SQLite file.
Command handlers drive their own event loop, so these tests are synchronous.
"""
import asyncio
from datetime import datetime

import pytest
from sqlalchemy import update

from hackjudge.cli import main, create_parser
from hackjudge.cli.db_commands import DbCommand
from hackjudge.cli.scoring_commands import JudgeCommand, LeaderboardCommand, ScoresCommand
from hackjudge.database import build_engine, build_sessionmaker, init_db
from hackjudge.orm.criteria import Criterion
from hackjudge.orm.project import ProjectStatus
from hackjudge.services.project_feed_service import upsert_project_status
from hackjudge.services.score_submission import submit_score

from conftest import EVENT_ID


@pytest.fixture
def cli_engine(tmp_path):
    return build_engine(f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")


def seed(engine, drift: bool = False):
    """Two scored projects and one unscored, optionally with a reweighted criterion."""
    async def _seed():
        try:
            await init_db(engine)
            async with build_sessionmaker(engine)() as db:
                db.add(Criterion(id="cl-code", event_id=EVENT_ID, name="Code", weight=1, max_score=10, order=1))
                db.add(Criterion(id="cl-demo", event_id=EVENT_ID, name="Demo", weight=1, max_score=10, order=2))
                await db.commit()
                for minutes, pid in enumerate(("alpha", "bravo", "charlie")):
                    await upsert_project_status(
                        pid, EVENT_ID, ProjectStatus.SUBMITTED, db,
                        submitted_at=datetime(2025, 3, 1, 12, minutes),
                    )
                await submit_score("j1", "alpha", EVENT_ID, {"cl-code": 10, "cl-demo": 0}, None, db)
                await submit_score("j1", "bravo", EVENT_ID, {"cl-code": 9, "cl-demo": 9}, None, db)
                if drift:
                    await db.execute(update(Criterion).where(Criterion.id == "cl-code").values(weight=3))
                    await db.commit()
        finally:
            await engine.dispose()

    asyncio.run(_seed())


# =============================================================================
# CLI Parser Tests
# =============================================================================

class TestCLIParser:

    def test_leaderboard_show_parsing(self):
        args = create_parser().parse_args(["leaderboard", "show", "--event", "e1", "--limit", "3"])
        assert args.command == "leaderboard"
        assert args.leaderboard_action == "show"
        assert args.event == "e1"
        assert args.limit == 3

    def test_judge_progress_parsing(self):
        args = create_parser().parse_args(["judge", "progress", "-e", "e1", "-j", "j9"])
        assert (args.event, args.judge) == ("e1", "j9")

    def test_dry_run_flag(self):
        args = create_parser().parse_args(["--dry-run", "scores", "recompute", "--event", "e1"])
        assert args.dry_run is True
        assert args.scores_action == "recompute"

    def test_event_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["scores", "verify"])

    def test_main_without_command(self):
        assert main([]) == 1

    def test_main_dry_run_db_init(self, capsys):
        assert main(["--dry-run", "db", "init"]) == 0
        out = capsys.readouterr().out
        assert "[DRY RUN]" in out
        assert "scores" in out


# =============================================================================
# Command handlers
# =============================================================================

class TestCommands:

    def test_db_init(self, cli_engine, capsys):
        args = create_parser().parse_args(["db", "init"])
        assert DbCommand(bind=cli_engine).execute(args) == 0
        assert "tables ready" in capsys.readouterr().out

    def test_leaderboard_show(self, cli_engine, capsys):
        seed(cli_engine)
        args = create_parser().parse_args(["leaderboard", "show", "--event", EVENT_ID])

        assert LeaderboardCommand(bind=cli_engine).execute(args) == 0
        lines = [l for l in capsys.readouterr().out.splitlines() if l.strip()[:1].isdigit()]
        assert [l.split()[1] for l in lines] == ["bravo", "alpha", "charlie"]
        assert lines[0].split()[2] == "9.00"
        assert lines[2].split()[2] == "-"

    def test_scores_verify_clean(self, cli_engine, capsys):
        seed(cli_engine)
        args = create_parser().parse_args(["scores", "verify", "--event", EVENT_ID])

        assert ScoresCommand(bind=cli_engine).execute(args) == 0
        assert "Checked 2 scores, 0 drifted" in capsys.readouterr().out

    def test_scores_verify_and_recompute_drift(self, cli_engine, capsys):
        seed(cli_engine, drift=True)
        parser = create_parser()
        verify = parser.parse_args(["scores", "verify", "--event", EVENT_ID])
        recompute = parser.parse_args(["scores", "recompute", "--event", EVENT_ID])

        assert ScoresCommand(bind=cli_engine).execute(verify) == 1
        assert "1 drifted" in capsys.readouterr().out

        assert ScoresCommand(dry_run=True, bind=cli_engine).execute(recompute) == 0
        assert "Would rewrite 1 totals" in capsys.readouterr().out
        assert ScoresCommand(bind=cli_engine).execute(verify) == 1
        capsys.readouterr()

        assert ScoresCommand(bind=cli_engine).execute(recompute) == 0
        assert "Rewrote 1 totals" in capsys.readouterr().out
        assert ScoresCommand(bind=cli_engine).execute(verify) == 0

    def test_judge_progress(self, cli_engine, capsys):
        seed(cli_engine)
        args = create_parser().parse_args(["judge", "progress", "--event", EVENT_ID, "--judge", "j1"])

        assert JudgeCommand(bind=cli_engine).execute(args) == 0
        out = capsys.readouterr().out
        assert "Completed: 2/3" in out
        assert "Remaining: 1" in out
