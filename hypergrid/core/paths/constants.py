"""
Project-wide Path Constants and Static Directory Management.

Single source of truth for the physical filesystem layout and for the
logger identity shared by every module.

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules for log synchronization.
    PROJECT_ROOT: Dynamically resolved absolute path to the project root.
    OUTPUTS_ROOT: Default root directory for all search results.
    STATIC_DIRS: List of directories that must exist at startup.
"""

import os
from pathlib import Path
from typing import Final, List

# GLOBAL CONSTANTS
# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "HyperGrid"


# PATH CALCULATIONS
def get_project_root() -> Path:
    """
    Dynamically locate the project root by searching for anchor files.

    Traverses upward from current file's directory until finding a marker
    file (.git or requirements.txt). Supports Docker environments via
    IN_DOCKER environment variable override.

    Returns:
        Resolved absolute Path to the project root directory.
    """
    if str(os.getenv("IN_DOCKER")).upper() in ("1", "TRUE"):
        return Path("/app").resolve()

    current_path = Path(__file__).resolve().parent
    root_markers = {".git", "requirements.txt"}

    for parent in [current_path] + list(current_path.parents):
        if any((parent / marker).exists() for marker in root_markers):
            return parent

    # Fallback if no markers are found: <root>/hypergrid/core/paths
    return current_path.parents[2]


# Central Filesystem Authority
PROJECT_ROOT: Final[Path] = get_project_root().resolve()

# Output: Default root directory for all search results
OUTPUTS_ROOT: Final[Path] = (PROJECT_ROOT / "outputs").resolve()

# Directories that must exist at startup
STATIC_DIRS: Final[List[Path]] = [OUTPUTS_ROOT]


# INITIAL SETUP
def setup_static_directories() -> None:
    """
    Ensure core project directories exist at startup.

    Uses mkdir(parents=True, exist_ok=True) for idempotent operation.
    """
    for directory in STATIC_DIRS:
        directory.mkdir(parents=True, exist_ok=True)
