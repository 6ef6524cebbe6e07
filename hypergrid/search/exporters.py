"""
Search Result Export Functions.

Serializes a finished search to the run's ``reports/`` directory:

- Winning options (YAML)
- Every trial with the winner and CV curves (JSON)
- Top K trials comparison (Excel)

Trials whose metric is NaN are listed in the summary but never ranked.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils.dataframe import dataframe_to_rows

from ..core.io import save_config_as_yaml, save_json
from ..core.logger import LogStyle
from ..core.paths import LOGGER_NAME, RunPaths
from .best_tracker import Direction
from .results import BestOptionValues, TrialResult

logger = logging.getLogger(LOGGER_NAME)


# BEST OPTIONS EXPORT
def export_best_options(best: BestOptionValues, paths: RunPaths) -> Path:
    """
    Export the winning options as YAML.

    The file lists the options partitioned by type together with the
    metric, so that it can be pasted into the ``model`` section of a recipe
    via ``best.options``.

    Args:
        best: Search winner.
        paths: RunPaths instance for output location.

    Returns:
        Path to ``reports/best_options.yaml``.
    """
    output_path = paths.reports / "best_options.yaml"
    payload = best.as_dict()
    payload["options"] = best.options
    save_config_as_yaml(payload, output_path)

    logger.info(  # pragma: no mutant
        f"{LogStyle.INDENT}{LogStyle.ARROW} {'Best Options':<22}: {output_path.name}"
    )
    return output_path


def export_search_summary(
    trials: Sequence[TrialResult],
    best: BestOptionValues,
    paths: RunPaths,
    strategy: str,
    direction: Direction,
) -> Path:
    """
    Export complete search metadata to JSON.

    Output structure::

        {
            "strategy": str,
            "direction": "minimize" | "maximize",
            "metric_name": str,
            "n_trials": int,
            "n_valid": int,
            "best": {...},
            "trials": [...]
        }

    Args:
        trials: Every finished trial, in evaluation order.
        best: Search winner.
        paths: RunPaths instance for output location.
        strategy: "grid" or "random".
        direction: Improvement direction of the search metric.

    Returns:
        Path to ``reports/search_summary.json``.
    """
    summary = {
        "strategy": strategy,
        "direction": direction.value,
        "metric_name": best.metric_name,
        "n_trials": len(trials),
        "n_valid": len(_valid_trials(trials)),
        "best": best.as_dict(),
        "trials": [trial.as_dict() for trial in trials],
    }

    output_path = paths.reports / "search_summary.json"
    save_json(summary, output_path)

    logger.info(  # pragma: no mutant
        f"{LogStyle.INDENT}{LogStyle.ARROW} {'Search Summary':<22}: {output_path.name}"
    )
    return output_path


def export_top_trials(
    trials: Sequence[TrialResult],
    paths: RunPaths,
    direction: Direction,
    metric_name: str,
    top_k: int = 10,
) -> Path | None:
    """
    Export the top K trials to an Excel spreadsheet with professional formatting.

    Args:
        trials: Every finished trial.
        paths: RunPaths instance for output location.
        direction: Improvement direction of the search metric.
        metric_name: Search metric (column header).
        top_k: Number of trials to export.

    Returns:
        Path to ``reports/top_trials.xlsx``, or None if no trial has a
        comparable metric value.
    """
    valid = _valid_trials(trials)
    if not valid:
        logger.warning("No trial with a comparable metric value. Cannot export top trials.")
        return None

    # sorted() is stable: earlier trials keep precedence on ties
    ranked = sorted(valid, key=lambda t: direction.sign * t.metric_value)[:top_k]
    df = build_top_trials_dataframe(ranked, metric_name)

    output_path = paths.reports / "top_trials.xlsx"

    wb = Workbook()
    ws = wb.active
    ws.title = "Top Trials"

    _write_styled_rows(ws, df)
    _auto_adjust_column_widths(ws)

    wb.save(output_path)
    logger.info(  # pragma: no mutant
        f"{LogStyle.INDENT}{LogStyle.ARROW} {'Top Trials':<22}: {output_path.name} "
        f"({len(ranked)} trials)"
    )
    return output_path


def _write_styled_rows(ws, df: pd.DataFrame) -> None:
    """
    Write DataFrame rows to worksheet: styled header, bordered body cells.
    """
    header_fill = PatternFill(start_color="D7E4BC", end_color="D7E4BC", fill_type="solid")
    header_font = Font(bold=True)
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    alignment_left = Alignment(horizontal="left", vertical="center", wrap_text=True)
    alignment_center = Alignment(horizontal="center", vertical="center")

    for r_idx, row in enumerate(dataframe_to_rows(df, index=False, header=True), 1):
        for c_idx, value in enumerate(row, 1):
            cell = ws.cell(row=r_idx, column=c_idx, value=value)
            cell.border = border

            if r_idx == 1:
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = alignment_center
                continue

            cell.alignment = alignment_left
            if isinstance(value, float):
                cell.number_format = "0.0000"
            elif isinstance(value, int) and not isinstance(value, bool):
                cell.number_format = "0"


def _auto_adjust_column_widths(ws) -> None:
    for column in ws.columns:
        max_length = 0
        column_letter = column[0].column_letter
        for cell in column:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[column_letter].width = min(max(max_length + 2, 12), 50)


# HELPER FUNCTIONS
def _valid_trials(trials: Sequence[TrialResult]) -> list[TrialResult]:
    return [t for t in trials if not math.isnan(t.metric_value)]


def build_top_trials_dataframe(ranked: Sequence[TrialResult], metric_name: str) -> pd.DataFrame:
    """
    Build the comparison table of ranked trials.

    Columns: Rank, Grid, Trial, the metric, the quantization settings,
    each free option, and the trial duration.
    """
    rows = []
    for rank, trial in enumerate(ranked, 1):
        row = {
            "Rank": rank,
            "Grid": trial.grid_index,
            "Trial": trial.iteration,
            metric_name.upper(): trial.metric_value,
            "border_count": trial.quantization.bins_count,
            "feature_border_type": trial.quantization.border_type,
            "nan_mode": trial.quantization.nan_mode,
        }
        row.update(trial.params)
        row["Duration (s)"] = round(trial.duration, 2)
        rows.append(row)

    return pd.DataFrame(rows)
