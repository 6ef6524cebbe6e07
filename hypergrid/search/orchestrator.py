"""
Search Orchestrator.

Wires a validated ``Config`` to the ``SearchDriver``: loads the dataset,
builds the generator registry, runs the configured strategy, and exports
the reports of the finished search into the run directory.

Typical Usage:
    >>> from hypergrid.search import run_search
    >>> best = run_search(cfg, paths)
    >>> best.options
    {'depth': 6, 'learning_rate': 0.1}
"""

from __future__ import annotations

import logging

from ..core import LOGGER_NAME, Config, LogStyle, RunPaths
from .best_tracker import metric_direction
from .driver import SearchDriver
from .exporters import export_best_options, export_search_summary, export_top_trials
from .generators import GeneratorRegistry
from .observers import LoggingObserver, TrialHistory
from .results import BestOptionValues

logger = logging.getLogger(LOGGER_NAME)


# SEARCH ORCHESTRATOR
class SearchOrchestrator:
    """
    Recipe-level manager of one search run.

    Attributes:
        cfg: Validated recipe.
        paths: Output directory structure of the run.
        history: Every finished trial, filled while the search runs.
    """

    def __init__(self, cfg: Config, paths: RunPaths) -> None:
        self.cfg = cfg
        self.paths = paths
        self.history = TrialHistory()

    def build_driver(self) -> SearchDriver:
        """Load the data and assemble the driver with console and history observers."""
        data = self.cfg.dataset.load()
        logger.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Dataset':<22}: {self.cfg.dataset.name} "
            f"({data.n_objects} objects, {data.n_features} features)"
        )

        search = self.cfg.search
        return SearchDriver(
            data,
            self.cfg.model,
            cv_config=self.cfg.cross_validation,
            split_config=self.cfg.train_test_split,
            search_by_train_test_split=search.search_by_train_test_split,
            calc_cv_statistics=search.calc_cv_statistics,
            generators=GeneratorRegistry.from_config(search.generators, seed=search.seed),
            observers=[LoggingObserver(), self.history],
            seed=search.seed,
        )

    def run(self) -> BestOptionValues:
        """
        Execute the configured strategy and export its reports.

        Returns:
            The search winner.
        """
        driver = self.build_driver()
        search = self.cfg.search
        if search.strategy == "random":
            best = driver.randomized_search(search.grids, search.n_tries)
        else:
            best = driver.grid_search(search.grids)

        if self.cfg.telemetry.save_reports:
            self._export_reports(best)
        return best

    def _export_reports(self, best: BestOptionValues) -> None:
        direction = metric_direction(best.metric_name)
        trials = self.history.results

        logger.info("")
        logger.info(f"{LogStyle.INDENT}{LogStyle.SUCCESS} Reports → {self.paths.reports}")
        export_best_options(best, self.paths)
        export_search_summary(trials, best, self.paths, self.cfg.search.strategy, direction)
        export_top_trials(
            trials, self.paths, direction, best.metric_name, top_k=self.cfg.telemetry.top_k
        )


def run_search(cfg: Config, paths: RunPaths) -> BestOptionValues:
    """
    Convenience function running a complete search from a recipe.

    Args:
        cfg: Validated recipe.
        paths: RunPaths instance for output management.

    Returns:
        The search winner.
    """
    return SearchOrchestrator(cfg, paths).run()
