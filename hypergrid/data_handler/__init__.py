"""
Data Handler Package

Loads tabular datasets, provides group-aware shuffling and splitting, and
quantizes float features into the bin indices consumed by the trainer.
"""

from .dataset import QuantizedDataset, TabularDataset, create_synthetic_dataset
from .quantizer import (
    BORDER_TYPES,
    DEFAULT_BINS_COUNT,
    DEFAULT_BORDER_TYPE,
    DEFAULT_NAN_MODE,
    NAN_MODES,
    QuantizationParams,
    Quantizer,
    select_borders,
)

__all__ = [
    "TabularDataset",
    "QuantizedDataset",
    "create_synthetic_dataset",
    "QuantizationParams",
    "Quantizer",
    "select_borders",
    "BORDER_TYPES",
    "NAN_MODES",
    "DEFAULT_BINS_COUNT",
    "DEFAULT_BORDER_TYPE",
    "DEFAULT_NAN_MODE",
]
