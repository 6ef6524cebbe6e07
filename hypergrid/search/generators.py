"""
Random Distribution Generator Registry.

Maps generator names to zero-argument callables producing one concrete
value per call. Grid values of type ``GeneratorRef`` are resolved through
the registry at the trial where they are first encountered.

Generators are either registered programmatically (any callable) or built
from ``GeneratorConfig`` recipe entries backed by a seeded
``numpy.random.Generator``.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping

import numpy as np

from ..exceptions import UnknownGeneratorError
from .values import LiteralValue, ParamValue

if TYPE_CHECKING:  # pragma: no cover
    from ..core.config import GeneratorConfig

GeneratorFn = Callable[[], Any]


class GeneratorRegistry(Mapping[str, GeneratorFn]):
    """
    Name → generator lookup used to resolve ``GeneratorRef`` grid values.

    Example:
        >>> registry = GeneratorRegistry({"lr": lambda: 0.05})
        >>> registry.resolve(GeneratorRef("lr"))
        LiteralValue(value=0.05, kind=<ValueKind.DOUBLE: 'double'>)
    """

    def __init__(self, generators: Mapping[str, GeneratorFn] | None = None) -> None:
        self._generators: dict[str, GeneratorFn] = dict(generators or {})

    def __getitem__(self, name: str) -> GeneratorFn:
        return self._generators[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._generators)

    def __len__(self) -> int:
        return len(self._generators)

    def register(self, name: str, fn: GeneratorFn) -> None:
        """Register (or replace) a generator under ``name``."""
        self._generators[name] = fn

    def resolve(self, value: ParamValue) -> LiteralValue:
        """
        Turn a grid value into a concrete literal.

        Literals pass through unchanged; generator references are evaluated.

        Raises:
            UnknownGeneratorError: If the referenced generator is not registered.
        """
        if isinstance(value, LiteralValue):
            return value
        fn = self._generators.get(value.name)
        if fn is None:
            raise UnknownGeneratorError(
                f"Reference to unknown random distribution generator '{value.name}'. "
                f"Registered: {sorted(self._generators)}"
            )
        return LiteralValue.of(_to_builtin(fn()))

    @classmethod
    def from_config(
        cls, configs: Mapping[str, "GeneratorConfig"], seed: int = 0
    ) -> "GeneratorRegistry":
        """
        Build generators from recipe entries sharing one seeded numpy Generator.

        Args:
            configs: generator name → GeneratorConfig
            seed: seed for the shared random source

        Returns:
            Populated registry
        """
        rng = np.random.default_rng(seed)
        return cls({name: build_generator(cfg, rng) for name, cfg in configs.items()})


def build_generator(cfg: "GeneratorConfig", rng: np.random.Generator) -> GeneratorFn:
    """Create the sampling callable for one validated GeneratorConfig."""
    if cfg.distribution == "uniform":
        low, high = float(cfg.low), float(cfg.high)  # type: ignore[arg-type]
        return lambda: float(rng.uniform(low, high))
    if cfg.distribution == "loguniform":
        log_low, log_high = math.log(cfg.low), math.log(cfg.high)  # type: ignore[arg-type]
        return lambda: float(math.exp(rng.uniform(log_low, log_high)))
    if cfg.distribution == "randint":
        low_i, high_i = int(cfg.low), int(cfg.high)  # type: ignore[arg-type]
        return lambda: int(rng.integers(low_i, high_i, endpoint=True))
    if cfg.distribution == "normal":
        mean, std = float(cfg.mean), float(cfg.std)  # type: ignore[arg-type]
        return lambda: float(rng.normal(mean, std))
    choices = list(cfg.choices or [])
    return lambda: choices[int(rng.integers(len(choices)))]


def _to_builtin(value: Any) -> Any:
    """Unwrap numpy scalars so the value gets a proper type tag."""
    if isinstance(value, np.generic):
        return value.item()
    return value