"""
Judge Progress and Queue Tests
"""
import pytest

from hackjudge.orm.project import ProjectStatus
from hackjudge.services.judge_progress_service import JudgeProgress, get_judge_progress, get_judge_queue
from hackjudge.services.score_submission import submit_score

from conftest import EVENT_ID, uniform_ratings


@pytest.mark.asyncio
async def test_progress_counts_submitted_queue(db, make_project):
    await make_project("a", minutes=0)
    await make_project("b", minutes=1)
    await make_project("c", minutes=2)
    await make_project("draft", status=ProjectStatus.DRAFT, submitted=False)
    await make_project("fin", status=ProjectStatus.FINALIST)
    await submit_score("j1", "a", EVENT_ID, uniform_ratings(5), None, db)
    await submit_score("j1", "a", EVENT_ID, uniform_ratings(6), None, db)
    await submit_score("j2", "b", EVENT_ID, uniform_ratings(6), None, db)

    progress = await get_judge_progress("j1", EVENT_ID, db)
    assert (progress.completed, progress.total, progress.remaining) == (1, 3, 2)
    assert progress.to_dict()["percent"] == pytest.approx(33.3)


@pytest.mark.asyncio
async def test_progress_for_judge_without_scores(db, make_project):
    await make_project("a")
    progress = await get_judge_progress("newbie", EVENT_ID, db)
    assert (progress.completed, progress.total) == (0, 1)


@pytest.mark.asyncio
async def test_progress_of_empty_event(db):
    progress = await get_judge_progress("j1", "empty", db)
    assert (progress.completed, progress.total, progress.remaining) == (0, 0, 0)
    assert progress.percent == 0.0


def test_remaining_never_negative():
    # Projects scored and later moved out of the submitted queue still count as completed
    progress = JudgeProgress("j1", EVENT_ID, completed=4, total=2)
    assert progress.remaining == 0
    assert progress.percent == 100.0


@pytest.mark.asyncio
async def test_queue_in_submission_order_with_own_scores(db, make_project):
    await make_project("late", minutes=30)
    await make_project("early", minutes=0)
    await make_project("mid", minutes=10)
    await make_project("review", status=ProjectStatus.UNDER_REVIEW)
    await submit_score("j1", "early", EVENT_ID, uniform_ratings(7), "nice", db)
    await submit_score("j2", "mid", EVENT_ID, uniform_ratings(9), None, db)

    queue = await get_judge_queue("j1", EVENT_ID, db)

    assert [item.project_id for item in queue.items] == ["early", "mid", "late"]
    assert [item.scored for item in queue.items] == [True, False, False]
    assert queue.items[0].total_score == pytest.approx(7.0)
    assert queue.items[0].comments == "nice"
    assert queue.items[0].ratings["design"] == 7.0
    assert queue.items[1].total_score is None
    assert queue.next_project_id == "mid"


@pytest.mark.asyncio
async def test_queue_done(db, make_project):
    await make_project("a")
    await submit_score("j1", "a", EVENT_ID, uniform_ratings(7), None, db)

    queue = await get_judge_queue("j1", EVENT_ID, db)
    assert queue.next_project_id is None
    assert queue.to_dict()["items"][0]["scored"] is True
