"""
Search Progress Logging.

Formatted logging utilities for the parameter search: session header,
per-grid banners, one line per finished trial (metric, running best,
timing) and the final summary.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..paths import LOGGER_NAME
from .styles import LogStyle

if TYPE_CHECKING:  # pragma: no cover
    from ...search.results import BestOptionValues, TrialResult
    from ..paths import RunPaths

logger = logging.getLogger(LOGGER_NAME)


def _format_param_value(value: Any) -> str:
    """Format a hyperparameter value for log display."""
    if isinstance(value, float):
        return f"{value:.2e}" if 0 < abs(value) < 0.001 else f"{value:.4f}"
    return str(value)


def _format_duration(seconds: float) -> str:
    """Render seconds as ``1h 02m 03s`` / ``2m 03s`` / ``3.4s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(round(seconds)), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


def log_search_header(
    strategy: str,
    mode: str,
    n_grids: int,
    metric_source: str,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log the search session configuration.

    Args:
        strategy: "grid" or "random".
        mode: Evaluation mode description (cross-validation or train/test split).
        n_grids: Number of grids to search.
        metric_source: How the search metric is chosen.
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger

    LogStyle.log_phase_header(log, f"{strategy.upper()} SEARCH")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Strategy     : {strategy}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Evaluation   : {mode}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Grids        : {n_grids}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Metric       : {metric_source}")
    log.info("")


def log_grid_start(
    grid_index: int,
    n_grids: int,
    total: int,
    names: tuple[str, ...],
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log the start of one grid.

    Args:
        grid_index: Zero-based grid index.
        n_grids: Number of grids in the search.
        total: Number of trials this grid will run.
        names: Free option names of the grid.
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger

    if n_grids > 1:
        log.info(LogStyle.DOUBLE)
        log.info(f"Grid #{grid_index}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Trials       : {total}")
    if names:
        log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Options      : {', '.join(names)}")
    log.info(LogStyle.LIGHT)


def log_trial_result(
    result: "TrialResult",
    best_value: float | None,
    best_iteration: int | None,
    total: int,
    elapsed: float,
    remaining: float,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log one finished trial: its metric, the running best, and timing.

    Args:
        result: Finished trial.
        best_value: Running best metric value of the grid.
        best_iteration: Trial index of the running best.
        total: Number of trials in the grid.
        elapsed: Seconds since the grid started.
        remaining: Estimated seconds until the grid finishes.
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger

    width = len(str(total))
    marker = f" {LogStyle.STAR}" if result.is_best else ""
    best = "n/a" if best_value is None else f"{best_value:.6f} (#{best_iteration})"
    log.info(
        f"{LogStyle.INDENT}[{result.iteration:>{width}}/{total}] "
        f"{result.metric_name}={result.metric_value:.6f}  best={best}  "
        f"elapsed={_format_duration(elapsed)}  remaining={_format_duration(remaining)}{marker}"
    )

    if log.isEnabledFor(logging.DEBUG):
        q = result.quantization
        log.debug(
            f"{LogStyle.DOUBLE_INDENT}{LogStyle.BULLET} quantization : "
            f"{q.bins_count}/{q.border_type}/{q.nan_mode}"
            f"{' (requantized)' if result.requantized else ''}"
        )
        for key, value in result.params.items():
            log.debug(
                f"{LogStyle.DOUBLE_INDENT}{LogStyle.BULLET} "
                f"{key:<12} : {_format_param_value(value)}"
            )


def log_search_summary(
    best: "BestOptionValues",
    n_trials: int,
    duration: float,
    paths: "RunPaths | None" = None,
    logger_instance: logging.Logger | None = None,
) -> None:
    """
    Log the search completion summary.

    Args:
        best: Winning configuration.
        n_trials: Number of evaluated trials across all grids.
        duration: Total search wall-clock seconds.
        paths: Run paths for artifacts (None when nothing is written).
        logger_instance: Logger instance to use (defaults to module logger)
    """
    log = logger_instance or logger

    LogStyle.log_phase_header(log, "SEARCH SUMMARY", LogStyle.DOUBLE)
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Total Trials   : {n_trials}")
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Duration       : {_format_duration(duration)}")
    log.info(
        f"{LogStyle.INDENT}{LogStyle.SUCCESS} "
        f"Best {best.metric_name:<9} : {best.metric_value:.6f}"
    )
    log.info(
        f"{LogStyle.INDENT}{LogStyle.SUCCESS} Best Trial     : "
        f"#{best.iteration} (grid #{best.grid_index})"
    )

    for key, value in best.options.items():
        log.info(
            f"{LogStyle.DOUBLE_INDENT}{LogStyle.BULLET} "
            f"{key:<20} : {_format_param_value(value)}"
        )

    if best.cv_results:
        main = best.cv_results[0]
        log.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} CV {main.metric_name:<11} : "
            f"{main.average_test[-1]:.6f} ± {main.std_test[-1]:.6f}"
        )

    if paths is not None:
        log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Artifacts      : {Path(paths.root).name}")
    log.info(LogStyle.DOUBLE)
    log.info("")


def log_final_cv_start(logger_instance: logging.Logger | None = None) -> None:
    """Announce the final cross-validation of the winner."""
    log = logger_instance or logger
    log.info(f"{LogStyle.INDENT}{LogStyle.ARROW} Estimating final quality...")
