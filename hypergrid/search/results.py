"""
Search Result Structures.

Immutable records emitted by the search loop: one ``TrialResult`` per
evaluated combination, and ``BestOptionValues`` describing the winner with
its options partitioned by value type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ..data_handler import QuantizationParams
from ..trainer import CVResult
from .best_tracker import BestState
from .grid_spec import GridSpec
from .values import ValueKind, value_kind


@dataclass(frozen=True)
class TrialResult:
    """
    Outcome of one evaluated combination.

    Attributes:
        iteration: Zero-based trial index within its grid.
        combination: Grid tuple as produced by the iterator (unresolved).
        quantization: Resolved quantization settings.
        params: Resolved values of the free grid options.
        metric_name: Search metric.
        metric_value: Search metric value.
        cv_results: CV curves (cross-validation mode only).
        grid_index: Index of the grid this trial belongs to.
        is_best: Whether the trial became the grid's best when it finished.
        requantized: Whether the data was re-quantized for this trial.
        duration: Wall-clock seconds spent on the trial.
    """

    iteration: int
    combination: tuple[Any, ...]
    quantization: QuantizationParams
    params: Mapping[str, Any]
    metric_name: str
    metric_value: float
    cv_results: tuple[CVResult, ...] | None = None
    grid_index: int = 0
    is_best: bool = False
    requantized: bool = False
    duration: float = 0.0

    def as_dict(self) -> dict[str, Any]:
        """Flat, JSON-compatible view (CV curves omitted)."""
        return {
            "grid_index": self.grid_index,
            "iteration": self.iteration,
            "metric_name": self.metric_name,
            "metric_value": self.metric_value,
            "is_best": self.is_best,
            "requantized": self.requantized,
            "duration_s": round(self.duration, 4),
            "border_count": self.quantization.bins_count,
            "feature_border_type": self.quantization.border_type,
            "nan_mode": self.quantization.nan_mode,
            **dict(self.params),
        }


@dataclass(frozen=True)
class BestOptionValues:
    """
    Winning configuration, options partitioned by value type.

    Quantization settings appear only if they were part of the winning
    grid, under the exact alias used there.
    """

    metric_name: str
    metric_value: float
    iteration: int
    grid_index: int = 0
    bool_options: dict[str, bool] = field(default_factory=dict)
    int_options: dict[str, int] = field(default_factory=dict)
    uint_options: dict[str, int] = field(default_factory=dict)
    double_options: dict[str, float] = field(default_factory=dict)
    string_options: dict[str, str] = field(default_factory=dict)
    cv_results: tuple[CVResult, ...] | None = None

    @classmethod
    def from_best(
        cls,
        state: BestState,
        spec: GridSpec,
        metric_name: str,
        grid_index: int = 0,
        cv_results: tuple[CVResult, ...] | None = None,
    ) -> "BestOptionValues":
        """
        Partition the best state's options by type.

        Args:
            state: Best trial of the grid.
            spec: Grid the state came from (names and quantization aliases).
            metric_name: Search metric.
            grid_index: Index of the winning grid.
            cv_results: CV curves to report (None to omit).
        """
        buckets: dict[ValueKind, dict[str, Any]] = {kind: {} for kind in ValueKind}
        for name in spec.names:
            value = state.params[name]
            buckets[value_kind(value)][name] = value

        border_count, border_type, nan_mode = spec.quantization_info
        if border_count.in_grid:
            buckets[ValueKind.INT][border_count.name] = state.quantization.bins_count
        if border_type.in_grid:
            buckets[ValueKind.STRING][border_type.name] = state.quantization.border_type
        if nan_mode.in_grid:
            buckets[ValueKind.STRING][nan_mode.name] = state.quantization.nan_mode

        return cls(
            metric_name=metric_name,
            metric_value=state.metric_value,
            iteration=state.iteration,
            grid_index=grid_index,
            bool_options=buckets[ValueKind.BOOL],
            int_options=buckets[ValueKind.INT],
            uint_options=buckets[ValueKind.UINT],
            double_options=buckets[ValueKind.DOUBLE],
            string_options=buckets[ValueKind.STRING],
            cv_results=cv_results,
        )

    @property
    def options(self) -> dict[str, Any]:
        """All winning options in a single mapping."""
        return {
            **self.bool_options,
            **self.int_options,
            **self.uint_options,
            **self.double_options,
            **self.string_options,
        }

    def as_dict(self) -> dict[str, Any]:
        return {
            "metric_name": self.metric_name,
            "metric_value": self.metric_value,
            "iteration": self.iteration,
            "grid_index": self.grid_index,
            "bool_options": dict(self.bool_options),
            "int_options": dict(self.int_options),
            "uint_options": dict(self.uint_options),
            "double_options": dict(self.double_options),
            "string_options": dict(self.string_options),
            "cv_results": (
                None if self.cv_results is None else [r.as_dict() for r in self.cv_results]
            ),
        }
