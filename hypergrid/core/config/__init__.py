"""
Configuration Package Initialization.

Flat public API for the recipe schemas, loaded lazily (PEP 562) so that
importing ``hypergrid.core`` does not pull the trainer stack through the
cross-domain validator.

Example:
    >>> from hypergrid.core.config import Config, SearchConfig
    >>> cfg = Config.from_recipe(Path("recipes/housing.yaml"))
"""

from importlib import import_module
from typing import Any

__all__ = [
    "Config",
    "SearchConfig",
    "GeneratorConfig",
    "CrossValidationConfig",
    "TrainTestSplitConfig",
    "DatasetConfig",
    "TelemetryConfig",
    "ValidatedPath",
]

# LAZY IMPORTS MAPPING
_PKG = "hypergrid.core.config"
_SEARCH_MOD = f"{_PKG}.search_config"
_VALIDATION_MOD = f"{_PKG}.validation_config"

_LAZY_IMPORTS: dict[str, str] = {
    "Config": f"{_PKG}.manifest",
    "SearchConfig": _SEARCH_MOD,
    "GeneratorConfig": _SEARCH_MOD,
    "CrossValidationConfig": _VALIDATION_MOD,
    "TrainTestSplitConfig": _VALIDATION_MOD,
    "DatasetConfig": f"{_PKG}.dataset_config",
    "TelemetryConfig": f"{_PKG}.telemetry_config",
    "ValidatedPath": f"{_PKG}.types",
}


# LAZY LOADER FUNCTION
def __getattr__(name: str) -> Any:
    """
    Lazily import configuration components on first access.

    Args:
        name: Name of the configuration class to import.

    Returns:
        The requested configuration class.

    Raises:
        AttributeError: If name is not in the public API (__all__).
    """
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(_LAZY_IMPORTS[name])
    attr = getattr(module, name)

    # Cache on module for future access
    globals()[name] = attr
    return attr


# DIR SUPPORT
def __dir__() -> list[str]:
    return sorted(__all__)
