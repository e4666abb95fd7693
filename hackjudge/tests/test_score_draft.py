"""
Score Draft Tests
"""
import pytest

from hackjudge.exceptions import (
    CriterionNotInEventError, EventMismatchError, ProjectNotFoundError, ScoreOutOfRangeError
)
from hackjudge.services.criteria_registry import default_criteria
from hackjudge.services.score_draft import ScoreDraft, default_rating, load_draft
from hackjudge.services.score_store import get_score

from conftest import EVENT_ID, SCENARIO_A


def test_default_rating_rounds_half_up():
    assert default_rating(10) == 5.0
    assert default_rating(5) == 3.0
    assert default_rating(7) == 4.0
    assert default_rating(1) == 1.0


def test_new_draft_seeded_with_midpoints():
    draft = ScoreDraft("j1", "p1", EVENT_ID, default_criteria())
    assert set(draft.ratings.values()) == {5.0}
    assert draft.preview_total() == pytest.approx(5.0)
    assert draft.is_resubmission is False


def test_preview_follows_edits():
    draft = ScoreDraft("j1", "p1", EVENT_ID, default_criteria())
    for criteria_id, value in SCENARIO_A.items():
        draft.set_rating(criteria_id, value)
    assert draft.preview_total() == pytest.approx(8.15)


def test_unknown_criterion_rejected():
    draft = ScoreDraft("j1", "p1", EVENT_ID, default_criteria())
    with pytest.raises(CriterionNotInEventError):
        draft.set_rating("charisma", 5)


@pytest.mark.asyncio
async def test_submit_then_reload(db, make_project):
    await make_project("p1")

    draft = await load_draft("j1", "p1", EVENT_ID, db)
    draft.set_rating("innovation", 9)
    draft.comments = "solid"
    draft.private_notes = "revisit"
    result = await draft.submit(db)

    assert draft.score_id == result.score_id
    assert result.total_score == pytest.approx(draft.preview_total())

    reloaded = await load_draft("j1", "p1", EVENT_ID, db)
    assert reloaded.is_resubmission is True
    assert reloaded.ratings["innovation"] == 9.0
    assert reloaded.ratings["design"] == 5.0
    assert reloaded.comments == "solid"
    assert reloaded.private_notes == "revisit"


@pytest.mark.asyncio
async def test_invalid_draft_writes_nothing(db, make_project):
    await make_project("p1")

    draft = await load_draft("j1", "p1", EVENT_ID, db)
    draft.set_rating("impact", 42)
    with pytest.raises(ScoreOutOfRangeError):
        await draft.submit(db)

    assert await get_score("j1", "p1", db) is None
    assert draft.score_id is None


@pytest.mark.asyncio
async def test_draft_for_unknown_project(db):
    with pytest.raises(ProjectNotFoundError):
        await load_draft("j1", "ghost", EVENT_ID, db)


@pytest.mark.asyncio
async def test_draft_for_other_events_project(db, make_project):
    await make_project("p1", event_id="other-event")

    with pytest.raises(EventMismatchError):
        await load_draft("j1", "p1", EVENT_ID, db)
