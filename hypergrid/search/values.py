"""
Typed Grid Values.

Every candidate value of a grid dimension is a tagged variant: either a
``LiteralValue`` carrying its Python value plus an explicit ``ValueKind``
tag, or a ``GeneratorRef`` naming a random distribution generator that is
resolved to a concrete literal once per trial.

In recipes and plain dicts a generator reference is written as a
single-key mapping::

    learning_rate: [0.03, 0.1, {generator: lr_loguniform}]

Plain strings are always literals.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from ..exceptions import InvalidParameterError

_INT64_MAX = 2**63 - 1
_UINT64_MAX = 2**64 - 1

GENERATOR_KEY = "generator"


class ValueKind(str, Enum):
    """Type tag of a literal grid value."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    DOUBLE = "double"
    STRING = "string"


def value_kind(value: Any) -> ValueKind:
    """
    Infer the type tag of a raw Python value.

    ``bool`` is checked before ``int`` since it is an ``int`` subclass.
    Integers above the signed 64-bit range are tagged ``UINT``.

    Raises:
        InvalidParameterError: for values that are not bool, int, float or str,
            and for integers outside the 64-bit range.
    """
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        if -_INT64_MAX - 1 <= value <= _INT64_MAX:
            return ValueKind.INT
        if _INT64_MAX < value <= _UINT64_MAX:
            return ValueKind.UINT
        raise InvalidParameterError(f"Integer value {value} does not fit into 64 bits")
    if isinstance(value, float):
        return ValueKind.DOUBLE
    if isinstance(value, str):
        return ValueKind.STRING
    raise InvalidParameterError(
        f"Option value should be bool, int, uint, double or string, got {value!r}"
    )


@dataclass(frozen=True)
class LiteralValue:
    """A concrete grid value with its type tag."""

    value: Any
    kind: ValueKind

    @classmethod
    def of(cls, value: Any) -> "LiteralValue":
        return cls(value=value, kind=value_kind(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class GeneratorRef:
    """Symbolic reference to a registered random distribution generator."""

    name: str

    def __str__(self) -> str:
        return f"<{self.name}>"


ParamValue = Union[LiteralValue, GeneratorRef]


def to_param_value(raw: Any) -> ParamValue:
    """
    Convert a raw recipe value into a tagged grid value.

    Args:
        raw: A bool/int/float/str literal, an existing ParamValue, or a
            ``{"generator": name}`` mapping.

    Returns:
        LiteralValue or GeneratorRef

    Raises:
        InvalidParameterError: If the value cannot be represented.
    """
    if isinstance(raw, (LiteralValue, GeneratorRef)):
        return raw
    if isinstance(raw, Mapping):
        if set(raw) != {GENERATOR_KEY} or not isinstance(raw[GENERATOR_KEY], str):
            raise InvalidParameterError(
                f"Generator reference must be a single '{GENERATOR_KEY}: <name>' mapping, "
                f"got {dict(raw)!r}"
            )
        return GeneratorRef(raw[GENERATOR_KEY])
    return LiteralValue.of(raw)


def to_raw(value: ParamValue) -> Any:
    """Inverse of ``to_param_value``, used when serializing grids."""
    if isinstance(value, GeneratorRef):
        return {GENERATOR_KEY: value.name}
    return value.value
