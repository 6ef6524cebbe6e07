"""
Parameter Grid Parsing.

Turns a user grid (option name → list of candidate values) plus the base
trainer options into a ``GridSpec``: an ordered list of value sets whose
first three dimensions are always the quantization settings

    0. bin count           (``border_count`` / ``max_bin``)
    1. border type         (``feature_border_type``)
    2. NaN mode            (``nan_mode``)

followed by one dimension per remaining grid entry, in grid order.
Quantization settings that are not part of the grid become single-value
dimensions holding the base option (or the trainer default). The spec
remembers, per quantization setting, whether it was gridded and under
which exact alias, so the winner can be reported back under that name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from ..data_handler import DEFAULT_BINS_COUNT, DEFAULT_BORDER_TYPE, DEFAULT_NAN_MODE
from ..exceptions import InvalidGridError, InvalidParameterError
from ..trainer import BORDER_COUNT_ALIASES, BORDER_TYPE_ALIASES, NAN_MODE_ALIASES
from .values import GeneratorRef, LiteralValue, ParamValue, ValueKind, to_param_value

QUANTIZATION_DIMENSIONS = 3

# canonical name → (aliases, allowed literal kinds, default)
QUANTIZATION_ALIASES: dict[str, tuple[tuple[str, ...], frozenset[ValueKind], Any]] = {
    "border_count": (
        BORDER_COUNT_ALIASES,
        frozenset({ValueKind.INT, ValueKind.UINT, ValueKind.DOUBLE}),
        DEFAULT_BINS_COUNT,
    ),
    "feature_border_type": (
        BORDER_TYPE_ALIASES,
        frozenset({ValueKind.STRING}),
        DEFAULT_BORDER_TYPE,
    ),
    "nan_mode": (
        NAN_MODE_ALIASES,
        frozenset({ValueKind.STRING}),
        DEFAULT_NAN_MODE,
    ),
}


@dataclass(frozen=True)
class QuantizationParamInfo:
    """Whether a quantization setting is gridded, and the exact name it used."""

    canonical: str
    name: str
    in_grid: bool = False


@dataclass(frozen=True)
class GridSpec:
    """
    Parsed grid ready for product iteration.

    Attributes:
        dimensions: Value sets; the first three are the quantization settings.
        names: Names of the free dimensions (``dimensions[3:]``), in order.
        quantization_info: One entry per quantization dimension.
        base_params: Base options with every gridded option removed.
    """

    dimensions: tuple[tuple[ParamValue, ...], ...]
    names: tuple[str, ...]
    quantization_info: tuple[QuantizationParamInfo, ...]
    base_params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def free_dimensions(self) -> tuple[tuple[ParamValue, ...], ...]:
        return self.dimensions[QUANTIZATION_DIMENSIONS:]

    @property
    def total_count(self) -> int:
        total = 1
        for values in self.dimensions:
            total *= len(values)
        return total

    @property
    def has_generators(self) -> bool:
        return any(isinstance(v, GeneratorRef) for values in self.dimensions for v in values)


# PARSING
def _as_value_list(name: str, raw: Any) -> list[Any]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise InvalidGridError(
            f"Grid values for parameter '{name}' must be a list, got {type(raw).__name__}"
        )
    if len(raw) == 0:
        raise InvalidGridError(f"Error: an empty set of values for parameter {name}")
    return list(raw)


def _check_quantization_values(
    name: str, values: Sequence[ParamValue], allowed: frozenset[ValueKind]
) -> None:
    for value in values:
        if isinstance(value, LiteralValue) and value.kind not in allowed:
            raise InvalidParameterError(f"Can't parse parameter \"{name}\" with value: {value}")


def _extract_quantization(
    canonical: str,
    grid: dict[str, Any],
    base_params: dict[str, Any],
) -> tuple[tuple[ParamValue, ...], QuantizationParamInfo]:
    aliases, allowed, default = QUANTIZATION_ALIASES[canonical]

    in_grid = [alias for alias in aliases if alias in grid]
    if len(in_grid) > 1:
        raise InvalidGridError(f"Grid sets {in_grid}, which are aliases of the same option")

    if in_grid:
        exact = in_grid[0]
        values = tuple(to_param_value(v) for v in _as_value_list(exact, grid.pop(exact)))
        _check_quantization_values(exact, values, allowed)
        for alias in aliases:
            base_params.pop(alias, None)
        return values, QuantizationParamInfo(canonical=canonical, name=exact, in_grid=True)

    base_value = default
    for alias in aliases:
        if alias in base_params:
            base_value = base_params.pop(alias)
            break
    values = (to_param_value(base_value),)
    _check_quantization_values(canonical, values, allowed)
    return values, QuantizationParamInfo(canonical=canonical, name=aliases[0], in_grid=False)


def parse_grid(grid: Mapping[str, Any], base_params: Mapping[str, Any] | None = None) -> GridSpec:
    """
    Parse one grid mapping against the base options.

    Args:
        grid: option name → list of candidate values. Values are literals
            or ``{"generator": name}`` references.
        base_params: Base trainer options; quantization settings found here
            supply the single value of non-gridded quantization dimensions.

    Returns:
        GridSpec with three quantization dimensions followed by the free ones.

    Raises:
        InvalidGridError: If the grid is not a mapping, a value list is
            empty or not a list, or two aliases of one option are gridded.
        InvalidParameterError: If a quantization value has the wrong type.
    """
    if not isinstance(grid, Mapping):
        raise InvalidGridError(f"Parameter grid must be a mapping, got {type(grid).__name__}")

    remaining = dict(grid)
    base = dict(base_params or {})

    dimensions: list[tuple[ParamValue, ...]] = []
    infos: list[QuantizationParamInfo] = []
    for canonical in QUANTIZATION_ALIASES:
        values, info = _extract_quantization(canonical, remaining, base)
        dimensions.append(values)
        infos.append(info)

    names: list[str] = []
    for name, raw_values in remaining.items():
        dimensions.append(tuple(to_param_value(v) for v in _as_value_list(name, raw_values)))
        names.append(name)
        base.pop(name, None)

    return GridSpec(
        dimensions=tuple(dimensions),
        names=tuple(names),
        quantization_info=tuple(infos),
        base_params=base,
    )


def normalize_grids(grids: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """
    Accept a single grid or a list of grids and return a list of grids.

    Raises:
        InvalidGridError: For an empty list or a non-mapping entry.
    """
    if isinstance(grids, Mapping):
        return [grids]
    if isinstance(grids, (str, bytes)) or not isinstance(grids, Sequence):
        raise InvalidGridError(
            f"Parameter grid must be a mapping or a list of mappings, got {type(grids).__name__}"
        )
    if len(grids) == 0:
        raise InvalidGridError("List of parameter grids should not be empty")
    for idx, grid in enumerate(grids):
        if not isinstance(grid, Mapping):
            raise InvalidGridError(f"Parameter grid #{idx} must be a mapping")
    return list(grids)
