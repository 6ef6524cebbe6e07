"""
Test Suite for the Search Orchestrator.

Runs recipe-level searches on the synthetic dataset with a small
iteration count; the real scikit-learn trainer is used end to end.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from hypergrid.core import Config, RunPaths
from hypergrid.search.orchestrator import SearchOrchestrator, run_search


def _config(**search):
    return Config.model_validate(
        {
            "dataset": {"name": "synthetic", "synthetic_objects": 60},
            "search": {"param_grid": {"depth": [2, 3]}, **search},
            "model": {"iterations": 5},
        }
    )


@pytest.fixture
def paths(tmp_path):
    return RunPaths.create("synthetic", "grid", {}, base_dir=tmp_path)


@pytest.mark.integration
def test_grid_search_writes_reports(paths):
    best = run_search(_config(), paths)

    assert best.metric_name == "RMSE"
    assert set(best.int_options) == {"depth"}
    assert best.cv_results is not None
    assert (paths.reports / "best_options.yaml").exists()
    assert (paths.reports / "search_summary.json").exists()
    assert (paths.reports / "top_trials.xlsx").exists()


@pytest.mark.integration
def test_random_search_uses_generators(paths):
    cfg = _config(
        strategy="random",
        n_tries=3,
        param_grid={"learning_rate": [{"generator": "lr"}]},
        generators={"lr": {"distribution": "uniform", "low": 0.05, "high": 0.2}},
    )
    orchestrator = SearchOrchestrator(cfg, paths)

    best = orchestrator.run()

    assert len(orchestrator.history) == 3
    assert 0.05 <= best.double_options["learning_rate"] <= 0.2


@pytest.mark.integration
def test_reports_disabled(paths):
    cfg = Config.model_validate(
        {
            "dataset": {"synthetic_objects": 60},
            "search": {"param_grid": {"depth": [2]}},
            "model": {"iterations": 3},
            "telemetry": {"save_reports": False},
        }
    )

    with patch("hypergrid.search.orchestrator.export_best_options") as mock_export:
        run_search(cfg, paths)

    mock_export.assert_not_called()
    assert not (paths.reports / "search_summary.json").exists()


@pytest.mark.unit
def test_build_driver_wires_config(paths):
    cfg = _config(search_by_train_test_split=False, calc_cv_statistics=False, seed=9)

    driver = SearchOrchestrator(cfg, paths).build_driver()

    assert driver.search_by_train_test_split is False
    assert driver.calc_cv_statistics is False
    assert driver.seed == 9
    assert driver.data.n_objects == 60
    assert driver.cv_config is cfg.cross_validation
