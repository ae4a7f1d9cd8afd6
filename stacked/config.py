"""
Stacked Configuration - settings read from environment variables
"""

import os

DEFAULT_MAX_STEPS = 1000000
DEFAULT_LOG_LEVEL = 'WARNING'


def max_steps():
    """Runaway-guard ceiling (STACKED_MAX_STEPS)"""
    return int(os.environ.get('STACKED_MAX_STEPS', DEFAULT_MAX_STEPS))


def log_level():
    return os.environ.get('STACKED_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper()


def debug_enabled():
    """Per-term trace logging (STACKED_DEBUG=1/true/yes)"""
    return os.environ.get('STACKED_DEBUG', '').strip().lower() in {'1', 'true', 'yes'}
