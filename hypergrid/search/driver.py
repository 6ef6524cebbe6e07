"""
Search Driver.

Runs grid and randomized hyperparameter searches. Each grid goes through

    Parse → Iterate → (Quantize?) → Evaluate → Track best → ... → Finalize

Parse builds a GridSpec; a product iterator yields combinations; the
quantization cache re-quantizes the data only when a quantization setting
changes; a trial evaluator scores the combination (k-fold CV or a fixed
train/test split); a BestTracker keeps the grid's winner. Across several
grids the overall winner is chosen with the same strict direction-aware
comparison, so an earlier grid keeps the title on ties.

Finalization runs one cross-validation of the winner when the search used
a train/test split; in cross-validation mode the winner's own curves are
reported when CV statistics are requested.

Any error (invalid option, unknown generator, quantization failure, ...)
aborts the whole search; no partial result is returned.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..core.config import CrossValidationConfig, TrainTestSplitConfig
from ..core.logger import log_final_cv_start, log_search_header, log_search_summary
from ..core.paths import LOGGER_NAME
from ..data_handler import QuantizationParams, Quantizer, TabularDataset
from ..exceptions import (
    HyperGridError,
    InvalidParameterError,
    OrderedDataError,
    SnapshotNotSupportedError,
)
from ..trainer import CrossValidator, CVResult, Trainer, TrainerOptions
from .best_tracker import BestState, BestTracker, Direction, metric_direction
from .evaluator import CrossValidationEvaluator, TrainTestEvaluator, TrialEvaluator
from .generators import GeneratorRegistry
from .grid_spec import QUANTIZATION_DIMENSIONS, GridSpec, normalize_grids, parse_grid
from .observers import LoggingObserver, SearchObserver
from .product_iterator import (
    CartesianProductIterator,
    ProductIteratorBase,
    RandomizedProductIterator,
)
from .quantization_cache import QuantizationCache, QuantizeFn
from .results import BestOptionValues, TrialResult
from .values import LiteralValue, ParamValue

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class _GridOutcome:
    """Finished grid: its spec, tracker and search metric."""

    grid_index: int
    spec: GridSpec
    tracker: BestTracker
    metric_name: str
    n_trials: int

    @property
    def best(self) -> BestState | None:
        return self.tracker.best_state


class SearchDriver:
    """
    Hyperparameter search over quantized tabular data.

    Args:
        data: Source dataset (raw float features).
        base_params: Base trainer options; grid values override them.
        cv_config: Cross-validation settings (trial scoring in CV mode, and
            the final quality estimate).
        split_config: Train/test split settings (train/test mode).
        search_by_train_test_split: Score trials on a train/test split
            instead of k-fold CV.
        calc_cv_statistics: Report CV curves of the winner in CV mode.
        generators: Registry resolving ``GeneratorRef`` grid values.
        quantizer: ``quantize(dataset, params)`` callable.
        trainer: Trainer for train/test mode.
        cross_validator: Cross-validator for CV mode and the final estimate.
        observers: Progress listeners (defaults to console logging).
        seed: Seed for sampling combinations in randomized search.

    Example:
        >>> driver = SearchDriver(data, {"loss_function": "RMSE", "iterations": 50})
        >>> best = driver.grid_search({"depth": [4, 6], "learning_rate": [0.03, 0.1]})
        >>> best.int_options, best.double_options
        ({'depth': 6}, {'learning_rate': 0.1})
    """

    def __init__(
        self,
        data: TabularDataset,
        base_params: Mapping[str, Any] | None = None,
        *,
        cv_config: CrossValidationConfig | None = None,
        split_config: TrainTestSplitConfig | None = None,
        search_by_train_test_split: bool = True,
        calc_cv_statistics: bool = True,
        generators: GeneratorRegistry | None = None,
        quantizer: QuantizeFn | None = None,
        trainer: Trainer | None = None,
        cross_validator: CrossValidator | None = None,
        observers: Sequence[SearchObserver] | None = None,
        seed: int = 0,
    ) -> None:
        self.data = data
        self.base_params: dict[str, Any] = dict(base_params or {})
        self.cv_config = cv_config or CrossValidationConfig()
        self.split_config = split_config or TrainTestSplitConfig()
        self.search_by_train_test_split = search_by_train_test_split
        self.calc_cv_statistics = calc_cv_statistics
        self.generators = generators if generators is not None else GeneratorRegistry()
        self.quantizer: QuantizeFn = quantizer or Quantizer()
        self.trainer = trainer or Trainer()
        self.cross_validator = cross_validator or CrossValidator(self.trainer)
        self.observers: list[SearchObserver] = (
            list(observers) if observers is not None else [LoggingObserver()]
        )
        self.seed = seed
        self.n_trials = 0

    # PUBLIC API
    def grid_search(
        self, grids: Mapping[str, Any] | Sequence[Mapping[str, Any]]
    ) -> BestOptionValues:
        """
        Exhaustively evaluate every combination of one or more grids.

        Args:
            grids: A grid mapping or a list of grid mappings.

        Returns:
            The overall winner across all grids.
        """
        grid_list = normalize_grids(grids)
        self._check_setup()
        self.n_trials = 0
        started = time.perf_counter()
        self._log_header("grid", len(grid_list))

        source = self._shuffled_source()
        metric_name: str | None = None
        overall: _GridOutcome | None = None
        specs = [parse_grid(grid, self.base_params) for grid in grid_list]
        for spec in specs:
            self._validate_grid(spec)
        for grid_index, spec in enumerate(specs):
            iterator = CartesianProductIterator(spec.dimensions)
            outcome = self._tune(spec, iterator, source, grid_index, len(grid_list), metric_name)
            metric_name = outcome.metric_name
            if overall is None or self._is_better_outcome(outcome, overall):
                overall = outcome

        return self._finalize(overall, started)  # type: ignore[arg-type]

    def randomized_search(
        self,
        grid: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        n_tries: int,
    ) -> BestOptionValues:
        """
        Evaluate ``n_tries`` sampled combinations of one grid.

        Combinations may repeat only when random-distribution generators
        are registered, since the same combination then yields new values.

        Args:
            grid: A grid mapping; for a list only the first grid is used.
            n_tries: Number of combinations to evaluate.

        Returns:
            The winner of the sampled combinations.
        """
        grid_list = normalize_grids(grid)
        if len(grid_list) > 1:
            logger.warning(
                f"Randomized search uses only the first of {len(grid_list)} grids"
            )
        self._check_setup()
        self.n_trials = 0
        started = time.perf_counter()

        spec = parse_grid(grid_list[0], self.base_params)
        self._validate_grid(spec)
        iterator = RandomizedProductIterator(
            spec.dimensions,
            count=n_tries,
            allow_repeat=len(self.generators) > 0,
            seed=self.seed,
        )
        self._log_header("random", 1)
        outcome = self._tune(spec, iterator, self._shuffled_source(), 0, 1, None)
        return self._finalize(outcome, started)

    # SETUP
    def _check_setup(self) -> None:
        if self.base_params.get("save_snapshot"):
            raise SnapshotNotSupportedError("Snapshots are not yet supported for parameter search")
        TrainerOptions.from_params(self.base_params)
        if self.search_by_train_test_split and self.data.ordered:
            raise OrderedDataError("Params search for ordered objects data is not yet implemented")

    @staticmethod
    def _validate_grid(spec: GridSpec) -> None:
        """Check every literal grid value before the first trial runs."""
        bins, border_types, nan_modes = spec.dimensions[:QUANTIZATION_DIMENSIONS]
        for value in bins:
            if isinstance(value, LiteralValue):
                QuantizationParams(bins_count=int(value.value))
        for value in border_types:
            if isinstance(value, LiteralValue):
                QuantizationParams(border_type=value.value)
        for value in nan_modes:
            if isinstance(value, LiteralValue):
                QuantizationParams(nan_mode=value.value)

        for name, values in zip(spec.names, spec.free_dimensions):
            for value in values:
                if not isinstance(value, LiteralValue):
                    continue
                options = TrainerOptions.from_params({**spec.base_params, name: value.value})
                if options.save_snapshot:
                    raise SnapshotNotSupportedError(
                        "Snapshots are not yet supported for parameter search"
                    )

    def _shuffled_source(self) -> TabularDataset:
        cfg = self.split_config if self.search_by_train_test_split else self.cv_config
        if not cfg.shuffle:
            return self.data
        return self.data.shuffle(cfg.partition_random_seed)

    def _make_evaluator(self) -> TrialEvaluator:
        if self.search_by_train_test_split:
            return TrainTestEvaluator(self.split_config, self.trainer)
        return CrossValidationEvaluator(self.cv_config, self.cross_validator)

    def _log_header(self, strategy: str, n_grids: int) -> None:
        if self.search_by_train_test_split:
            mode = f"train/test split (train_part={self.split_config.train_part})"
        else:
            mode = f"{self.cv_config.fold_count}-fold cross-validation"
        log_search_header(strategy, mode, n_grids, "eval_metric, else loss_function")

    # TRIAL LOOP
    def _tune(
        self,
        spec: GridSpec,
        iterator: ProductIteratorBase[ParamValue],
        source: TabularDataset,
        grid_index: int,
        n_grids: int,
        metric_name: str | None,
    ) -> _GridOutcome:
        evaluator = self._make_evaluator()
        cache = QuantizationCache(self.quantizer, prepare=evaluator.prepare)
        total = iterator.total_count
        for observer in self.observers:
            observer.on_grid_start(grid_index, n_grids, spec, total)

        tracker: BestTracker | None = None
        previous: QuantizationParams | None = None
        iteration = 0
        for combination in iterator:
            trial_started = time.perf_counter()

            quantization = self._resolve_quantization(combination[:QUANTIZATION_DIMENSIONS])
            free_values = {
                name: self.generators.resolve(value).value
                for name, value in zip(spec.names, combination[QUANTIZATION_DIMENSIONS:])
            }
            options = TrainerOptions.from_params(
                self._trial_params(spec, quantization, free_values)
            )
            if options.save_snapshot:
                raise SnapshotNotSupportedError(
                    "Snapshots are not yet supported for parameter search"
                )

            if metric_name is None:
                metric_name = options.search_metric
            elif options.search_metric != metric_name:
                raise InvalidParameterError(
                    f"Search metric changed from '{metric_name}' to "
                    f"'{options.search_metric}'; eval_metric must be the same for every trial"
                )
            if tracker is None:
                tracker = BestTracker(metric_direction(metric_name))

            prepared, requantized = cache.maybe_requantize(previous, quantization, source)
            previous = quantization

            evaluation = evaluator.evaluate(options, prepared)
            state = BestState(
                combination=combination,
                quantization=quantization,
                params=free_values,
                metric_value=evaluation.metric_value,
                iteration=iteration,
                cv_results=evaluation.cv_results,
            )
            improved = tracker.update(evaluation.metric_value, state)

            result = TrialResult(
                iteration=iteration,
                combination=combination,
                quantization=quantization,
                params=free_values,
                metric_name=metric_name,
                metric_value=evaluation.metric_value,
                cv_results=evaluation.cv_results,
                grid_index=grid_index,
                is_best=improved,
                requantized=requantized,
                duration=time.perf_counter() - trial_started,
            )
            for observer in self.observers:
                observer.on_trial_end(result, tracker, total)
            iteration += 1

        self.n_trials += iteration
        logger.debug(f"Grid #{grid_index}: {cache.requantize_count} quantization passes")
        return _GridOutcome(
            grid_index=grid_index,
            spec=spec,
            tracker=tracker,  # type: ignore[arg-type]
            metric_name=metric_name,  # type: ignore[arg-type]
            n_trials=iteration,
        )

    def _resolve_quantization(self, values: Sequence[ParamValue]) -> QuantizationParams:
        bins, border_type, nan_mode = (self.generators.resolve(v).value for v in values)
        if isinstance(bins, bool) or not isinstance(bins, (int, float)):
            raise InvalidParameterError(f"border_count must be a number, got {bins!r}")
        if not isinstance(border_type, str) or not isinstance(nan_mode, str):
            raise InvalidParameterError(
                f"feature_border_type and nan_mode must be strings, "
                f"got {border_type!r} and {nan_mode!r}"
            )
        return QuantizationParams(bins_count=int(bins), border_type=border_type, nan_mode=nan_mode)

    @staticmethod
    def _trial_params(
        spec: GridSpec, quantization: QuantizationParams, free_values: Mapping[str, Any]
    ) -> dict[str, Any]:
        params = dict(spec.base_params)
        params["border_count"] = quantization.bins_count
        params["feature_border_type"] = quantization.border_type
        params["nan_mode"] = quantization.nan_mode
        params.update(free_values)
        return params

    @staticmethod
    def _is_better_outcome(candidate: _GridOutcome, incumbent: _GridOutcome) -> bool:
        if candidate.best is None:
            return False
        if incumbent.best is None:
            return True
        direction: Direction = candidate.tracker.direction
        return direction.is_better(candidate.best.metric_value, incumbent.best.metric_value)

    # FINALIZE
    def _finalize(self, outcome: _GridOutcome, started: float) -> BestOptionValues:
        best = outcome.best
        if best is None:
            raise HyperGridError(
                f"No trial produced a comparable value of '{outcome.metric_name}' (NaN metric)"
            )

        cv_results: tuple[CVResult, ...] | None = None
        if self.search_by_train_test_split:
            log_final_cv_start()
            cv_results = self._final_cross_validation(outcome.spec, best)
        elif self.calc_cv_statistics:
            cv_results = best.cv_results

        result = BestOptionValues.from_best(
            best,
            outcome.spec,
            metric_name=outcome.metric_name,
            grid_index=outcome.grid_index,
            cv_results=cv_results,
        )
        log_search_summary(result, self.n_trials, time.perf_counter() - started)
        return result

    def _final_cross_validation(self, spec: GridSpec, best: BestState) -> tuple[CVResult, ...]:
        data = self.data
        if self.cv_config.shuffle:
            data = data.shuffle(self.cv_config.partition_random_seed)
        quantized = self.quantizer(data, best.quantization)
        options = TrainerOptions.from_params(
            self._trial_params(spec, best.quantization, best.params)
        )
        return tuple(self.cross_validator.run(options, quantized, self.cv_config))
