"""
Float Feature Quantization.

Converts raw float features into small integer bin indices, the input
representation of the histogram-based trainer. Three settings control the
result and together form ``QuantizationParams``:

    - ``bins_count``: maximum number of borders per feature
    - ``border_type``: how border positions are chosen
    - ``nan_mode``: where missing values go (``Min``, ``Max`` or ``Forbidden``)

Border selection:
    ``Median``              borders at equal-frequency quantiles
    ``Uniform``             borders equally spaced between min and max
    ``UniformAndQuantiles`` half uniform, half quantile borders
    ``MaxLogSum``, ``MinEntropy``, ``GreedyLogSum``
                            equal-frequency quantiles over distinct values,
                            which down-weights heavily repeated values

Features with no more distinct values than ``bins_count + 1`` get one
border between each pair of neighboring distinct values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..core.paths import LOGGER_NAME
from ..exceptions import HyperGridDatasetError, InvalidParameterError
from .dataset import QuantizedDataset, TabularDataset

logger = logging.getLogger(LOGGER_NAME)

BORDER_TYPES: tuple[str, ...] = (
    "Median",
    "Uniform",
    "UniformAndQuantiles",
    "MaxLogSum",
    "MinEntropy",
    "GreedyLogSum",
)
NAN_MODES: tuple[str, ...] = ("Min", "Max", "Forbidden")

DEFAULT_BINS_COUNT = 254
DEFAULT_BORDER_TYPE = "GreedyLogSum"
DEFAULT_NAN_MODE = "Min"

# HistGradientBoosting bins are stored as uint8
MAX_BINS_COUNT = 254


@dataclass(frozen=True)
class QuantizationParams:
    """Structural snapshot of the three quantization-affecting settings."""

    bins_count: int = DEFAULT_BINS_COUNT
    border_type: str = DEFAULT_BORDER_TYPE
    nan_mode: str = DEFAULT_NAN_MODE

    def __post_init__(self) -> None:
        if not 1 <= self.bins_count <= MAX_BINS_COUNT:
            raise InvalidParameterError(
                f"border_count must be in [1, {MAX_BINS_COUNT}], got {self.bins_count}"
            )
        if self.border_type not in BORDER_TYPES:
            raise InvalidParameterError(
                f"Unknown feature_border_type '{self.border_type}'. Valid: {BORDER_TYPES}"
            )
        if self.nan_mode not in NAN_MODES:
            raise InvalidParameterError(f"Unknown nan_mode '{self.nan_mode}'. Valid: {NAN_MODES}")


# BORDER SELECTION
def _quantile_borders(values: np.ndarray, bins_count: int) -> np.ndarray:
    qs = np.linspace(0.0, 1.0, bins_count + 2)[1:-1]
    return np.quantile(values, qs)


def _uniform_borders(values: np.ndarray, bins_count: int) -> np.ndarray:
    return np.linspace(values.min(), values.max(), bins_count + 2)[1:-1]


def select_borders(values: np.ndarray, bins_count: int, border_type: str) -> np.ndarray:
    """
    Compute sorted, unique borders for one feature.

    Args:
        values: Non-NaN feature values.
        bins_count: Maximum number of borders.
        border_type: One of BORDER_TYPES.

    Returns:
        1D float array of strictly increasing borders (possibly empty).
    """
    distinct = np.unique(values)
    if len(distinct) <= 1:
        return np.empty(0, dtype=np.float64)
    if len(distinct) <= bins_count + 1:
        return (distinct[:-1] + distinct[1:]) / 2.0

    if border_type == "Median":
        borders = _quantile_borders(values, bins_count)
    elif border_type == "Uniform":
        borders = _uniform_borders(values, bins_count)
    elif border_type == "UniformAndQuantiles":
        n_uniform = bins_count // 2
        borders = np.concatenate(
            [
                _uniform_borders(values, n_uniform),
                _quantile_borders(values, bins_count - n_uniform),
            ]
        )
    else:
        borders = _quantile_borders(distinct, bins_count)

    borders = np.unique(borders)
    # A border at the maximum would leave its upper bin empty
    return borders[borders < distinct[-1]]


# QUANTIZER
class Quantizer:
    """
    Callable that quantizes a TabularDataset under given QuantizationParams.

    Bin layout per feature with ``b`` borders:
        - ``Min``: NaN → bin 0, values → bins 1..b+1
        - ``Max``: values → bins 0..b, NaN → bin b+1
        - ``Forbidden``: values → bins 0..b, NaN raises

    Example:
        >>> quantized = Quantizer()(dataset, QuantizationParams(32, "Median", "Min"))
        >>> quantized.features.dtype
        dtype('uint8')
    """

    def __call__(self, dataset: TabularDataset, params: QuantizationParams) -> QuantizedDataset:
        features = dataset.features
        nan_mask = np.isnan(features)

        if params.nan_mode == "Forbidden" and nan_mask.any():
            bad = [dataset.feature_names[i] for i in np.flatnonzero(nan_mask.any(axis=0))]
            raise HyperGridDatasetError(
                f"NaN values found in features {bad} while nan_mode is 'Forbidden'"
            )

        bins = np.zeros(features.shape, dtype=np.uint8)
        borders: list[np.ndarray] = []

        for j in range(dataset.n_features):
            column = features[:, j]
            present = ~nan_mask[:, j]
            feature_borders = select_borders(
                column[present], params.bins_count, params.border_type
            )
            borders.append(feature_borders)

            column_bins = np.searchsorted(feature_borders, column[present], side="left")
            if params.nan_mode == "Min":
                bins[present, j] = column_bins + 1
                bins[~present, j] = 0
            else:
                bins[present, j] = column_bins
                bins[~present, j] = len(feature_borders) + 1

        logger.debug(
            f"Quantized {dataset.n_features} features "
            f"(bins={params.bins_count}, borders={params.border_type}, nan={params.nan_mode})"
        )

        return QuantizedDataset(
            features=bins,
            target=dataset.target,
            feature_names=dataset.feature_names,
            group_id=dataset.group_id,
            ordered=dataset.ordered,
            task=dataset.task,
            borders=tuple(borders),
            quantization=params,
        )
