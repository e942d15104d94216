"""
Utility functions for the FPL Analyzer.

Provides common utilities used across the codebase.
"""

from .gameweek import (
    get_current_gameweek,
    get_next_gameweek,
    get_target_gameweek,
    get_latest_finished_gameweek,
    is_gameweek_finished,
)

__all__ = [
    'get_current_gameweek',
    'get_next_gameweek',
    'get_target_gameweek',
    'get_latest_finished_gameweek',
    'is_gameweek_finished',
]
