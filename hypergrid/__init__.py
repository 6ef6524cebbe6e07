"""
HyperGrid: grid and randomized hyperparameter search for boosted trees.

Top-level convenience API re-exporting the most commonly used components
from subpackages:

    from hypergrid import Config, SearchDriver, run_search
"""

from importlib.metadata import version as _pkg_version

__version__ = _pkg_version("hypergrid-ml")

from .core import Config, LogStyle, RunPaths
from .data_handler import TabularDataset, create_synthetic_dataset
from .search import BestOptionValues, GeneratorRegistry, SearchDriver, run_search

__all__ = [
    "__version__",
    # Core
    "Config",
    "LogStyle",
    "RunPaths",
    # Data
    "TabularDataset",
    "create_synthetic_dataset",
    # Search
    "SearchDriver",
    "GeneratorRegistry",
    "BestOptionValues",
    "run_search",
]
