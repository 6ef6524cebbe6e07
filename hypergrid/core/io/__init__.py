"""
Input/Output & Persistence Utilities.

YAML recipe loading and atomic YAML/JSON persistence of recipes and reports.
"""

from .serialization import load_config_from_yaml, save_config_as_yaml, save_json

__all__ = [
    "save_config_as_yaml",
    "load_config_from_yaml",
    "save_json",
]
