"""
Feature Flags Configuration

Centralized feature flag and tunable management for the scoring service.
All values are loaded from environment variables.
"""
import os


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on', 'enabled')


class FeatureFlags:
    """
    Feature flags for the application.

    To add a new feature flag:
    1. Add it here as a class property
    2. Load it from environment variable
    3. Use it in your code
    """

    # Per-criterion averages on every leaderboard entry
    FEATURE_LEADERBOARD_BREAKDOWN: bool = get_bool_env('FEATURE_LEADERBOARD_BREAKDOWN', True)

    # slowapi limit on score submission
    FEATURE_SCORE_RATE_LIMIT: bool = get_bool_env('FEATURE_SCORE_RATE_LIMIT', True)

    # Verification endpoint answers 409 on total drift instead of reporting it
    FEATURE_STRICT_SCORE_TOTALS: bool = get_bool_env('FEATURE_STRICT_SCORE_TOTALS', False)

    @classmethod
    def get_all_flags(cls) -> dict:
        """Get all feature flags as a dictionary."""
        return {
            key: value
            for key, value in vars(cls).items()
            if key.startswith('FEATURE_') and isinstance(value, bool)
        }


# Submission limit in slowapi syntax, e.g. "60/minute"
SCORE_SUBMIT_RATE_LIMIT: str = os.getenv('SCORE_SUBMIT_RATE_LIMIT', '60/minute')


# Singleton instance for easy importing
feature_flags = FeatureFlags()
