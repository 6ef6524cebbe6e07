"""
Telemetry and Reporting Package.

Centralized logging (Logger), visual style constants (LogStyle) and the
search progress helpers.
"""

from .logger import ColorFormatter, Logger
from .progress import (
    log_final_cv_start,
    log_grid_start,
    log_search_header,
    log_search_summary,
    log_trial_result,
)
from .styles import LogStyle

__all__ = [
    "Logger",
    "ColorFormatter",
    "LogStyle",
    "log_search_header",
    "log_grid_start",
    "log_trial_result",
    "log_search_summary",
    "log_final_cv_start",
]
