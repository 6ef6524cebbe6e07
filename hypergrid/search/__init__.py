"""
Search Package

Grid and randomized hyperparameter search: product iterators over value
sets, grid parsing with quantization settings pulled to the front, the
quantization cache, best tracking, trial observers, report exporters and
the recipe-level orchestrator.
"""

from .best_tracker import BestState, BestTracker, Direction, metric_direction
from .driver import SearchDriver
from .evaluator import (
    CrossValidationEvaluator,
    TrainTestEvaluator,
    TrialEvaluation,
    TrialEvaluator,
)
from .exporters import export_best_options, export_search_summary, export_top_trials
from .generators import GeneratorRegistry, build_generator
from .grid_spec import QUANTIZATION_DIMENSIONS, GridSpec, normalize_grids, parse_grid
from .observers import LoggingObserver, SearchObserver, TrialHistory
from .orchestrator import SearchOrchestrator, run_search
from .product_iterator import (
    MAX_TOTAL_COUNT,
    CartesianProductIterator,
    ProductIteratorBase,
    RandomizedProductIterator,
)
from .quantization_cache import QuantizationCache
from .results import BestOptionValues, TrialResult
from .values import GeneratorRef, LiteralValue, ParamValue, ValueKind, to_param_value, to_raw

__all__ = [
    # Driver
    "SearchDriver",
    "run_search",
    "SearchOrchestrator",
    # Iteration
    "ProductIteratorBase",
    "CartesianProductIterator",
    "RandomizedProductIterator",
    "MAX_TOTAL_COUNT",
    # Grid values
    "GridSpec",
    "parse_grid",
    "normalize_grids",
    "QUANTIZATION_DIMENSIONS",
    "ValueKind",
    "LiteralValue",
    "GeneratorRef",
    "ParamValue",
    "to_param_value",
    "to_raw",
    "GeneratorRegistry",
    "build_generator",
    # Trial evaluation
    "QuantizationCache",
    "TrialEvaluator",
    "TrialEvaluation",
    "CrossValidationEvaluator",
    "TrainTestEvaluator",
    # Best tracking & results
    "Direction",
    "metric_direction",
    "BestState",
    "BestTracker",
    "TrialResult",
    "BestOptionValues",
    # Observers & reports
    "SearchObserver",
    "LoggingObserver",
    "TrialHistory",
    "export_best_options",
    "export_search_summary",
    "export_top_trials",
]
