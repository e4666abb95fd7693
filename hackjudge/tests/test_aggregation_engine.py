"""
Aggregation Engine Tests

Coverage:
- Judge total formula (default template, custom weights and scales)
- Missing ratings count as zero, foreign ratings ignored
- Degenerate zero-weight configuration
- Project average, judge count, order independence
- Per-criterion breakdown
"""
import itertools
import math
from types import SimpleNamespace

import pytest

from hackjudge.exceptions import ProjectNotFoundError
from hackjudge.services.aggregation_engine import (
    ProjectAggregate, aggregate_project, compute_criteria_breakdown,
    compute_judge_total, get_project_aggregate, get_project_scores, normalize_rating
)
from hackjudge.services.criteria_registry import CriterionSpec, default_criteria
from hackjudge.services.score_submission import submit_score
from hackjudge.orm.project import ProjectStatus

from conftest import EVENT_ID, SCENARIO_A, uniform_ratings


def fake_score(judge_id, total, ratings=None):
    return SimpleNamespace(judge_id=judge_id, total_score=total, ratings=lambda: dict(ratings or {}))


# =============================================================================
# Judge total
# =============================================================================

class TestJudgeTotal:

    def test_default_template_weighted_average(self):
        total = compute_judge_total(default_criteria(), SCENARIO_A)
        assert total == pytest.approx(8.15)

    def test_different_scales_are_normalized(self):
        criteria = [
            CriterionSpec(id="code", name="Code", weight=3, max_score=5, order=1),
            CriterionSpec(id="pitch", name="Pitch", weight=1, max_score=20, order=2),
        ]
        # code 4/5 -> 8.0, pitch 10/20 -> 5.0; (8*3 + 5*1) / 4
        assert compute_judge_total(criteria, {"code": 4, "pitch": 10}) == pytest.approx(7.25)

    def test_missing_ratings_count_as_zero(self):
        ratings = {"innovation": 10, "technical": 10}
        assert compute_judge_total(default_criteria(), ratings) == pytest.approx(5.0)

    def test_foreign_ratings_are_ignored(self):
        ratings = dict(SCENARIO_A, unknown=10)
        assert compute_judge_total(default_criteria(), ratings) == pytest.approx(8.15)

    def test_zero_total_weight_yields_zero(self):
        criteria = [CriterionSpec(id="x", name="X", weight=0, max_score=10, order=1)]
        assert compute_judge_total(criteria, {"x": 10}) == 0.0
        assert compute_judge_total([], {}) == 0.0

    def test_bounds(self):
        assert compute_judge_total(default_criteria(), uniform_ratings(0)) == 0.0
        assert compute_judge_total(default_criteria(), uniform_ratings(10)) == 10.0

    def test_normalize_rating(self):
        assert normalize_rating(5, 10) == 5.0
        assert normalize_rating(3, 4) == 7.5
        assert normalize_rating(3, 0) == 0.0


# =============================================================================
# Project aggregate
# =============================================================================

class TestProjectAggregate:

    def test_two_judges_mean(self):
        aggregate = aggregate_project("p1", [fake_score("j1", 9.0), fake_score("j2", 7.0)])
        assert aggregate.average_score == pytest.approx(8.0)
        assert aggregate.judge_count == 2

    def test_no_judges_is_unscored_not_error(self):
        aggregate = aggregate_project("p1", [])
        assert aggregate.average_score is None
        assert aggregate.judge_count == 0
        assert aggregate.is_scored is False

    def test_mean_independent_of_order(self):
        totals = [9.1, 7.3, 8.35, 6.05, 0.1]
        results = {
            aggregate_project("p", [fake_score(f"j{i}", t) for i, t in enumerate(order)]).average_score
            for order in itertools.permutations(totals)
        }
        assert len(results) == 1
        assert results.pop() == pytest.approx(math.fsum(totals) / len(totals))

    def test_breakdown_averages_normalized_ratings(self):
        criteria = [
            CriterionSpec(id="a", name="A", weight=1, max_score=5, order=1),
            CriterionSpec(id="b", name="B", weight=1, max_score=10, order=2),
        ]
        breakdown = compute_criteria_breakdown(criteria, [{"a": 5, "b": 4}, {"a": 3}])
        assert breakdown["a"] == pytest.approx(8.0)
        assert breakdown["b"] == pytest.approx(4.0)

    def test_breakdown_unrated_criterion_is_none(self):
        criteria = default_criteria()
        breakdown = compute_criteria_breakdown(criteria, [])
        assert list(breakdown) == [c.id for c in criteria]
        assert all(v is None for v in breakdown.values())

    def test_to_dict(self):
        data = ProjectAggregate("p1", 8.0, 2).to_dict()
        assert data == {"project_id": "p1", "average_score": 8.0, "judge_count": 2, "criteria_breakdown": {}}


# =============================================================================
# DB-backed
# =============================================================================

@pytest.mark.asyncio
async def test_get_project_aggregate_from_submissions(db, make_project):
    await make_project("p1")
    await submit_score("j1", "p1", EVENT_ID, uniform_ratings(9), None, db)
    await submit_score("j2", "p1", EVENT_ID, uniform_ratings(7), None, db)

    aggregate = await get_project_aggregate("p1", db)
    assert aggregate.average_score == pytest.approx(8.0)
    assert aggregate.judge_count == 2
    assert aggregate.criteria_breakdown["innovation"] == pytest.approx(8.0)


@pytest.mark.asyncio
async def test_get_project_aggregate_unscored(db, make_project):
    await make_project("p1")
    aggregate = await get_project_aggregate("p1", db)
    assert aggregate.average_score is None
    assert aggregate.judge_count == 0


@pytest.mark.asyncio
async def test_get_project_aggregate_unknown_project(db):
    with pytest.raises(ProjectNotFoundError):
        await get_project_aggregate("nope", db)


@pytest.mark.asyncio
async def test_project_scores_overview_newest_first(db, make_project):
    await make_project("old", minutes=0)
    await make_project("new", minutes=30)
    await make_project("draft", status=ProjectStatus.DRAFT, submitted=False)
    await submit_score("j1", "new", EVENT_ID, uniform_ratings(6), None, db)

    overview = await get_project_scores(EVENT_ID, db)
    assert [p["id"] for p in overview] == ["new", "old", "draft"]
    assert overview[0]["average_score"] == pytest.approx(6.0)
    assert overview[1]["average_score"] is None

    drafts = await get_project_scores(EVENT_ID, db, status=ProjectStatus.DRAFT)
    assert [p["id"] for p in drafts] == ["draft"]
