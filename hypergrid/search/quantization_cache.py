"""
Quantization Cache.

Quantizing a dataset is expensive, and consecutive trials usually share
their quantization settings because those occupy the slowest-varying grid
dimensions. The cache keeps the last quantized (and optionally prepared)
dataset and only rebuilds it when a setting actually changes.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from ..core.paths import LOGGER_NAME
from ..data_handler import QuantizationParams, QuantizedDataset, TabularDataset

logger = logging.getLogger(LOGGER_NAME)

P = TypeVar("P")

QuantizeFn = Callable[[TabularDataset, QuantizationParams], QuantizedDataset]


class QuantizationCache(Generic[P]):
    """
    Single-slot cache of the prepared dataset for the last quantization settings.

    Args:
        quantize: ``quantize(dataset, params) -> QuantizedDataset``.
        prepare: Optional post-processing of a freshly quantized dataset
            (e.g. the train/test split); runs once per re-quantization.

    Example:
        >>> cache = QuantizationCache(Quantizer())
        >>> data, did = cache.maybe_requantize(None, params, dataset)
        >>> did
        True
    """

    def __init__(
        self,
        quantize: QuantizeFn,
        prepare: Callable[[QuantizedDataset], P] | None = None,
    ) -> None:
        self._quantize = quantize
        self._prepare = prepare
        self._cached: P | QuantizedDataset | None = None
        self.requantize_count = 0

    @property
    def current(self) -> P | QuantizedDataset | None:
        return self._cached

    def maybe_requantize(
        self,
        previous: QuantizationParams | None,
        current: QuantizationParams,
        dataset: TabularDataset,
    ) -> tuple[P | QuantizedDataset, bool]:
        """
        Return the prepared dataset for ``current``, rebuilding it if needed.

        Rebuilds when there is no previous snapshot, nothing cached yet, or any
        of bin count, border type and NaN mode differs from ``previous``.

        Returns:
            (prepared dataset, whether quantization ran)
        """
        if previous is not None and self._cached is not None and previous == current:
            return self._cached, False

        logger.debug(
            f"Quantizing: bins={current.bins_count}, borders={current.border_type}, "
            f"nan_mode={current.nan_mode}"
        )
        quantized = self._quantize(dataset, current)
        self._cached = self._prepare(quantized) if self._prepare is not None else quantized
        self.requantize_count += 1
        return self._cached, True

    def clear(self) -> None:
        self._cached = None
