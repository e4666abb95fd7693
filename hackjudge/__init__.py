"""
hackjudge
Scoring and leaderboard engine for hackathon judging
"""
__version__ = "1.0.0"
