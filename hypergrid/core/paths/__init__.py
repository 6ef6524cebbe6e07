"""
Filesystem Authority and Path Orchestration Package.

1. **Static Layer** (constants module): PROJECT_ROOT, OUTPUTS_ROOT, LOGGER_NAME.
2. **Dynamic Layer** (RunPaths class): per-run directory management.
"""

from .constants import (
    LOGGER_NAME,
    OUTPUTS_ROOT,
    PROJECT_ROOT,
    STATIC_DIRS,
    get_project_root,
    setup_static_directories,
)
from .run_paths import RunPaths

__all__ = [
    "PROJECT_ROOT",
    "OUTPUTS_ROOT",
    "LOGGER_NAME",
    "STATIC_DIRS",
    "get_project_root",
    "setup_static_directories",
    "RunPaths",
]
