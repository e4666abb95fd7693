"""
hackjudge/routes/__init__.py
Route registration
"""
from fastapi import APIRouter
from hackjudge.routes import criteria, projects, scoring, leaderboard, judge

router = APIRouter()

router.include_router(criteria.router)
router.include_router(projects.router)
router.include_router(scoring.router)
router.include_router(leaderboard.router)
router.include_router(judge.router)
