"""
Trial Evaluation Strategies.

A trial evaluator scores one option set on the current quantized data.
Two interchangeable strategies exist:

    - ``CrossValidationEvaluator``: k-fold CV per trial; the score is the
      fold-averaged test value of the search metric after the last iteration.
    - ``TrainTestEvaluator``: one metrics-only training per trial on a fixed
      train/test split; the score is the best test value over iterations.

Each evaluator also declares how a freshly quantized dataset is prepared
(the train/test evaluator splits it once), so the quantization cache can
reuse the prepared form across trials.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from ..data_handler import QuantizedDataset
from ..trainer import CrossValidator, CVResult, Trainer, TrainerOptions

if TYPE_CHECKING:  # pragma: no cover
    from ..core.config import CrossValidationConfig, TrainTestSplitConfig


@dataclass(frozen=True)
class TrialEvaluation:
    """Score of one trial plus the CV curves when they were computed."""

    metric_name: str
    metric_value: float
    cv_results: tuple[CVResult, ...] | None = None
    best_iteration: int | None = None


class TrialEvaluator(Protocol):
    """Interface shared by the evaluation strategies."""

    def prepare(self, quantized: QuantizedDataset) -> Any: ...  # pragma: no cover

    def evaluate(self, options: TrainerOptions, prepared: Any) -> TrialEvaluation: ...  # pragma: no cover


class CrossValidationEvaluator:
    """Score trials by k-fold cross-validation."""

    def __init__(
        self,
        cv_config: "CrossValidationConfig",
        cross_validator: CrossValidator | None = None,
    ) -> None:
        self.cv_config = cv_config
        self.cross_validator = cross_validator or CrossValidator()

    def prepare(self, quantized: QuantizedDataset) -> QuantizedDataset:
        return quantized

    def evaluate(self, options: TrainerOptions, prepared: QuantizedDataset) -> TrialEvaluation:
        cv_results = tuple(self.cross_validator.run(options, prepared, self.cv_config))
        return TrialEvaluation(
            metric_name=cv_results[0].metric_name,
            metric_value=cv_results[0].average_test[-1],
            cv_results=cv_results,
        )


class TrainTestEvaluator:
    """Score trials on a fixed train/test split of the quantized data."""

    def __init__(
        self,
        split_config: "TrainTestSplitConfig",
        trainer: Trainer | None = None,
    ) -> None:
        self.split_config = split_config
        self.trainer = trainer or Trainer()

    def prepare(self, quantized: QuantizedDataset) -> tuple[QuantizedDataset, QuantizedDataset]:
        return quantized.train_test_split(
            train_part=self.split_config.train_part,
            stratified=self.split_config.stratified,
            seed=self.split_config.partition_random_seed,
        )

    def evaluate(
        self,
        options: TrainerOptions,
        prepared: tuple[QuantizedDataset, QuantizedDataset],
    ) -> TrialEvaluation:
        train, test = prepared
        history = self.trainer.fit_eval(options, train, test)
        return TrialEvaluation(
            metric_name=history.search_metric,
            metric_value=history.best_test(),
            best_iteration=history.best_iteration(),
        )
