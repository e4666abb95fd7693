"""
hackjudge/rate_limit.py
Shared slowapi limiter; main.py attaches it to app.state
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from hackjudge.config.feature_flags import feature_flags

limiter = Limiter(
    key_func=get_remote_address,
    enabled=feature_flags.FEATURE_SCORE_RATE_LIMIT,
)
