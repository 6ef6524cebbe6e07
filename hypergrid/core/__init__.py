"""
Core Utilities Package

Configuration schemas, logging, persistence helpers and the filesystem
layout shared by the search, trainer and CLI layers.
"""

# Configuration
from .config import (
    Config,
    CrossValidationConfig,
    DatasetConfig,
    GeneratorConfig,
    SearchConfig,
    TelemetryConfig,
    TrainTestSplitConfig,
)

# Input/Output Utilities
from .io import load_config_from_yaml, save_config_as_yaml, save_json

# Logging
from .logger import (
    Logger,
    LogStyle,
    log_final_cv_start,
    log_grid_start,
    log_search_header,
    log_search_summary,
    log_trial_result,
)

# Constants & Paths
from .paths import (
    LOGGER_NAME,
    OUTPUTS_ROOT,
    PROJECT_ROOT,
    STATIC_DIRS,
    RunPaths,
    get_project_root,
    setup_static_directories,
)

__all__ = [
    # Configuration
    "Config",
    "SearchConfig",
    "GeneratorConfig",
    "CrossValidationConfig",
    "TrainTestSplitConfig",
    "DatasetConfig",
    "TelemetryConfig",
    # I/O
    "load_config_from_yaml",
    "save_config_as_yaml",
    "save_json",
    # Logging
    "Logger",
    "LogStyle",
    "log_search_header",
    "log_grid_start",
    "log_trial_result",
    "log_search_summary",
    "log_final_cv_start",
    # Paths
    "LOGGER_NAME",
    "OUTPUTS_ROOT",
    "PROJECT_ROOT",
    "STATIC_DIRS",
    "RunPaths",
    "get_project_root",
    "setup_static_directories",
]
