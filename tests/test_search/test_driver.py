"""
Test Suite for the Search Driver.

The trainer is replaced by a deterministic scorer so that the search loop
(parsing, iteration, quantization caching, best tracking, finalization)
can be checked without fitting real models.
"""

from __future__ import annotations

import math
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from hypergrid.core.config import CrossValidationConfig, TrainTestSplitConfig
from hypergrid.data_handler import Quantizer, create_synthetic_dataset
from hypergrid.exceptions import (
    AmbiguousMetricError,
    HyperGridError,
    InvalidGridError,
    InvalidParameterError,
    OrderedDataError,
    SnapshotNotSupportedError,
    UnknownGeneratorError,
)
from hypergrid.search.driver import SearchDriver
from hypergrid.search.generators import GeneratorRegistry
from hypergrid.search.observers import TrialHistory
from hypergrid.trainer import (
    MetricBestValue,
    TrainerOptions,
    TrainingHistory,
    register_metric,
    unregister_metric,
)


class ScoreTrainer:
    """Trainer double whose test metric is ``score(options)`` at every iteration."""

    def __init__(self, score):
        self.score = score
        self.calls: list[TrainerOptions] = []

    def fit_eval(self, options, train, test=None):
        self.calls.append(options)
        value = self.score(options)
        curves = {name: [value + 1.0, value] for name in options.metric_names}
        return TrainingHistory(metric_names=options.metric_names, train=curves, test=curves)


def _depth_score(options: TrainerOptions) -> float:
    return abs(options.depth - 6) + options.border_count / 1000


@pytest.fixture
def data():
    return create_synthetic_dataset(n_objects=40)


def _driver(data, score=_depth_score, base_params=None, **kwargs):
    trainer = ScoreTrainer(score)
    history = TrialHistory()
    quantizer = MagicMock(side_effect=Quantizer())
    driver = SearchDriver(
        data,
        base_params or {},
        trainer=trainer,
        quantizer=quantizer,
        observers=[history],
        **kwargs,
    )
    return driver, trainer, history, quantizer


# GRID SEARCH
@pytest.mark.integration
class TestGridSearch:
    """Tests for exhaustive search."""

    def test_train_test_mode_finds_best(self, data):
        driver, trainer, history, _ = _driver(data)

        best = driver.grid_search({"depth": [4, 6, 8], "border_count": [16, 32]})

        assert best.int_options == {"border_count": 16, "depth": 6}
        assert best.metric_name == "RMSE"
        assert best.metric_value == pytest.approx(0.016)
        assert best.iteration == 1
        assert len(history) == 6
        assert driver.n_trials == 6

    def test_train_test_mode_runs_final_cv(self, data):
        driver, trainer, _, quantizer = _driver(
            data, cv_config=CrossValidationConfig(fold_count=3)
        )

        best = driver.grid_search({"depth": [4, 6]})

        assert best.cv_results is not None
        assert best.cv_results[0].metric_name == "RMSE"
        assert best.cv_results[0].average_test[-1] == pytest.approx(0.254)
        # 2 trials + 3 folds of the final CV
        assert len(trainer.calls) == 5
        # one quantization for the loop, one for the final CV
        assert quantizer.call_count == 2

    def test_quantization_runs_only_on_change(self, data):
        driver, _, history, quantizer = _driver(data)

        driver.grid_search({"border_count": [16, 32], "depth": [4, 6, 8]})

        assert [r.requantized for r in history.results] == [True, False, False, True, False, False]
        assert quantizer.call_count == 3

    def test_cv_mode_reuses_winner_cv_results(self, data):
        driver, trainer, _, quantizer = _driver(
            data, search_by_train_test_split=False, calc_cv_statistics=True
        )

        best = driver.grid_search({"depth": [4, 6]})

        assert best.int_options == {"depth": 6}
        assert best.cv_results is not None
        # 2 trials x 3 folds, no final pass
        assert len(trainer.calls) == 6
        assert quantizer.call_count == 1

    def test_cv_mode_without_statistics(self, data):
        driver, *_ = _driver(data, search_by_train_test_split=False, calc_cv_statistics=False)

        best = driver.grid_search({"depth": [4, 6]})

        assert best.cv_results is None

    def test_maximized_metric(self, data):
        driver, *_ = _driver(
            data,
            score=lambda o: -abs(o.depth - 6),
            base_params={"eval_metric": "R2"},
        )

        best = driver.grid_search({"depth": [4, 6, 8]})

        assert best.metric_name == "R2"
        assert best.int_options == {"depth": 6}

    def test_nan_first_trial_keeps_later_winner(self, data):
        driver, _, history, _ = _driver(
            data, score=lambda o: math.nan if o.depth == 4 else 0.1
        )

        best = driver.grid_search({"depth": [4, 6]})

        assert best.int_options == {"depth": 6}
        assert best.metric_value == pytest.approx(0.1)
        assert [r.is_best for r in history.results] == [False, True]

    def test_trial_options_merge_base_and_grid(self, data):
        driver, trainer, *_ = _driver(data, base_params={"iterations": 7, "depth": 3})

        driver.grid_search({"max_bin": [16], "depth": [5]})

        options = trainer.calls[0]
        assert options.iterations == 7
        assert options.depth == 5
        assert options.border_count == 16

    def test_quantization_alias_reported(self, data):
        driver, *_ = _driver(data)

        best = driver.grid_search({"max_bin": [16, 32], "depth": [6]})

        assert best.int_options == {"max_bin": 16, "depth": 6}

    def test_generators_resolved_in_grid_search(self, data):
        registry = GeneratorRegistry({"lr": lambda: 0.05})
        driver, trainer, *_ = _driver(data, generators=registry)

        best = driver.grid_search({"learning_rate": [{"generator": "lr"}]})

        assert trainer.calls[0].learning_rate == 0.05
        assert best.double_options == {"learning_rate": 0.05}

    def test_generator_in_quantization_dimension(self, data):
        registry = GeneratorRegistry({"bins": lambda: 16.0})
        driver, trainer, *_ = _driver(data, generators=registry)

        driver.grid_search({"border_count": [{"generator": "bins"}]})

        assert trainer.calls[0].border_count == 16


# MULTIPLE GRIDS
@pytest.mark.integration
class TestMultipleGrids:
    """Tests for choosing the overall best across grids."""

    def test_best_grid_wins(self, data):
        driver, *_ = _driver(data)

        best = driver.grid_search([{"depth": [4]}, {"depth": [6]}, {"depth": [9]}])

        assert best.grid_index == 1
        assert best.int_options == {"depth": 6}
        assert driver.n_trials == 3

    def test_tie_keeps_earlier_grid(self, data):
        driver, *_ = _driver(data, score=lambda o: 1.0)

        best = driver.grid_search([{"depth": [4]}, {"depth": [6]}])

        assert best.grid_index == 0
        assert best.int_options == {"depth": 4}

    def test_metric_change_across_grids(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(InvalidParameterError, match="Search metric changed"):
            driver.grid_search([{"eval_metric": ["RMSE"]}, {"eval_metric": ["MAE"]}])

    def test_empty_grid_list(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(InvalidGridError):
            driver.grid_search([])


# RANDOMIZED SEARCH
@pytest.mark.integration
class TestRandomizedSearch:
    """Tests for sampled search."""

    def test_samples_n_tries(self, data):
        driver, _, history, _ = _driver(data, seed=3)

        best = driver.randomized_search({"depth": [4, 5, 6, 7, 8], "border_count": [16, 32]}, 3)

        assert len(history) == 3
        iterations = [r.iteration for r in history.results]
        assert iterations == [0, 1, 2]
        assert best.metric_value == min(r.metric_value for r in history.results)

    def test_clamped_to_grid_size(self, data):
        driver, _, history, _ = _driver(data)

        driver.randomized_search({"depth": [4, 6]}, 10)

        assert len(history) == 2

    def test_repeats_allowed_with_generators(self, data):
        registry = GeneratorRegistry({"lr": lambda: 0.05})
        driver, _, history, _ = _driver(data, generators=registry)

        driver.randomized_search({"learning_rate": [{"generator": "lr"}, 0.1]}, 10)

        assert len(history) == 10

    def test_uses_first_grid_with_warning(self, data):
        driver, _, history, _ = _driver(data)

        with patch("hypergrid.search.driver.logger") as mock_logger:
            best = driver.randomized_search([{"depth": [4]}, {"depth": [6]}], 5)

        mock_logger.warning.assert_called_once()
        assert best.int_options == {"depth": 4}
        assert len(history) == 1

    def test_invalid_count(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(HyperGridError):
            driver.randomized_search({"depth": [4]}, 0)


# SETUP AND OPTION ERRORS
@pytest.mark.unit
class TestSearchErrors:
    """Tests for errors that abort the whole search."""

    def test_snapshot_in_base_params(self, data):
        driver, trainer, *_ = _driver(data, base_params={"save_snapshot": True})

        with pytest.raises(SnapshotNotSupportedError):
            driver.grid_search({"depth": [4]})
        assert trainer.calls == []

    def test_snapshot_in_grid(self, data):
        driver, trainer, *_ = _driver(data)

        with pytest.raises(SnapshotNotSupportedError):
            driver.grid_search({"save_snapshot": [True]})
        assert trainer.calls == []

    def test_ordered_data_in_train_test_mode(self, data):
        driver, *_ = _driver(replace(data, ordered=True))

        with pytest.raises(OrderedDataError):
            driver.grid_search({"depth": [4]})

    def test_out_of_range_option(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.grid_search({"depth": [100]})

    def test_out_of_range_value_fails_before_any_trial(self, data):
        driver, trainer, history, quantizer = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.grid_search({"depth": [4, 6, 100]})
        assert trainer.calls == []
        assert len(history) == 0
        quantizer.assert_not_called()

    def test_snapshot_late_in_grid_fails_before_any_trial(self, data):
        driver, trainer, *_ = _driver(data)

        with pytest.raises(SnapshotNotSupportedError):
            driver.grid_search({"save_snapshot": [False, True]})
        assert trainer.calls == []

    @pytest.mark.parametrize(
        "grid",
        [
            {"border_count": [16, 1000]},
            {"feature_border_type": ["Median", "NotABorderType"]},
            {"nan_mode": ["Min", "Sometimes"]},
        ],
    )
    def test_invalid_quantization_value_fails_before_any_trial(self, data, grid):
        driver, trainer, _, quantizer = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.grid_search(grid)
        assert trainer.calls == []
        quantizer.assert_not_called()

    def test_invalid_later_grid_fails_before_first_grid_runs(self, data):
        driver, trainer, *_ = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.grid_search([{"depth": [4, 6]}, {"depth": [100]}])
        assert trainer.calls == []

    def test_randomized_search_validates_before_sampling(self, data):
        driver, trainer, *_ = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.randomized_search({"depth": [4, 6, 100]}, n_tries=3)
        assert trainer.calls == []

    def test_unknown_option(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(InvalidParameterError):
            driver.grid_search({"not_an_option": [1]})

    def test_two_aliases_in_base_params(self, data):
        driver, *_ = _driver(data, base_params={"border_count": 32, "max_bin": 64})

        with pytest.raises(InvalidParameterError, match="aliases"):
            driver.grid_search({"depth": [4]})

    def test_unknown_generator(self, data):
        driver, *_ = _driver(data)

        with pytest.raises(UnknownGeneratorError):
            driver.grid_search({"learning_rate": [{"generator": "missing"}]})

    def test_ambiguous_metric(self, data):
        register_metric("Undirected", lambda y, p: 0.0, best_value=MetricBestValue.UNDEFINED)
        try:
            driver, *_ = _driver(data, base_params={"eval_metric": "Undirected"})
            with pytest.raises(AmbiguousMetricError):
                driver.grid_search({"depth": [4]})
        finally:
            unregister_metric("Undirected")

    def test_all_nan_metrics(self, data):
        driver, *_ = _driver(data, score=lambda o: math.nan)

        with pytest.raises(HyperGridError, match="NaN"):
            driver.grid_search({"depth": [4, 6]})

    def test_default_configs(self, data):
        driver = SearchDriver(data)

        assert driver.cv_config == CrossValidationConfig()
        assert driver.split_config == TrainTestSplitConfig()
        assert len(driver.observers) == 1
