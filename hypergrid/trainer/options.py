"""
Trainer Option Schema.

Validates one flat mapping of trainer options (the base model parameters
merged with one grid combination). Unknown option names and out-of-range
values are rejected; the search treats either as fatal.

Quantization settings may be spelled with any of their aliases
(``border_count`` / ``max_bin``), matching how they may appear in grids.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from ..core.config.types import (
    BorderCount,
    BorderType,
    LearningRate,
    LossFunction,
    NanMode,
    NonNegativeFloat,
    PositiveInt,
    TreeDepth,
)
from ..data_handler.quantizer import (
    DEFAULT_BINS_COUNT,
    DEFAULT_BORDER_TYPE,
    DEFAULT_NAN_MODE,
    QuantizationParams,
)
from ..exceptions import InvalidParameterError

CLASSIFICATION_LOSSES = frozenset({"Logloss", "MultiClass"})

# Every accepted spelling of each quantization setting, primary name first
BORDER_COUNT_ALIASES: tuple[str, ...] = ("border_count", "max_bin")
BORDER_TYPE_ALIASES: tuple[str, ...] = ("feature_border_type",)
NAN_MODE_ALIASES: tuple[str, ...] = ("nan_mode",)


class TrainerOptions(BaseModel):
    """
    Validated trainer configuration for a single trial.

    Attributes:
        loss_function: Optimized objective.
        eval_metric: Metric used for model selection (defaults to the loss).
        custom_metric: Extra metrics computed for reporting.
        iterations: Number of boosting iterations.
        learning_rate: Shrinkage applied to each tree.
        depth: Maximum tree depth.
        l2_leaf_reg: L2 regularization of leaf values.
        random_seed: Trainer seed.
        thread_count: Number of OpenMP threads (-1 = all cores).
        border_count: Maximum number of borders per float feature.
        feature_border_type: Border selection algorithm.
        nan_mode: Placement of missing values.
        save_snapshot: Snapshot saving (unsupported during a search).
        verbose: Log per-iteration training progress.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    loss_function: LossFunction = "RMSE"
    eval_metric: str | None = None
    custom_metric: tuple[str, ...] = ()

    iterations: PositiveInt = 100
    learning_rate: LearningRate = 0.1
    depth: TreeDepth = 6
    l2_leaf_reg: NonNegativeFloat = 3.0
    random_seed: int = 0
    thread_count: int = Field(default=-1, ge=-1)

    border_count: BorderCount = Field(
        default=DEFAULT_BINS_COUNT,
        validation_alias=AliasChoices(*BORDER_COUNT_ALIASES),
    )
    feature_border_type: BorderType = DEFAULT_BORDER_TYPE
    nan_mode: NanMode = DEFAULT_NAN_MODE

    save_snapshot: bool = False
    verbose: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TrainerOptions":
        """
        Validate a flat option mapping.

        Raises:
            InvalidParameterError: If an option is unknown, mistyped or out
                of range, or a setting is given under two aliases at once.
        """
        spelled = [alias for alias in BORDER_COUNT_ALIASES if alias in params]
        if len(spelled) > 1:
            raise InvalidParameterError(f"Options {spelled} are aliases; set only one of them")
        try:
            return cls.model_validate(dict(params))
        except ValidationError as e:
            raise InvalidParameterError(f"Invalid trainer options: {e}") from e

    @property
    def is_classification(self) -> bool:
        return self.loss_function in CLASSIFICATION_LOSSES

    @property
    def search_metric(self) -> str:
        """Metric that ranks trials: the eval metric, else the loss function."""
        return self.eval_metric or self.loss_function

    @property
    def metric_names(self) -> tuple[str, ...]:
        """Search metric first, then the loss and custom metrics, without repeats."""
        names = [self.search_metric, self.loss_function, *self.custom_metric]
        return tuple(dict.fromkeys(names))

    @property
    def quantization(self) -> QuantizationParams:
        return QuantizationParams(
            bins_count=self.border_count,
            border_type=self.feature_border_type,
            nan_mode=self.nan_mode,
        )
