"""
Search Configuration Schema.

Pydantic v2 schema for the search strategy, its parameter grids and the
random-distribution generators that grid values may reference.

Example YAML::

    search:
      strategy: random
      n_tries: 20
      search_by_train_test_split: true
      param_grid:
        depth: [4, 6, 8]
        learning_rate: [0.03, 0.1, {generator: lr}]
        border_count: [32, 64, 128]
      generators:
        lr:
          distribution: loguniform
          low: 0.01
          high: 0.3
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...exceptions import HyperGridConfigError
from .types import Distribution, PositiveInt, SearchStrategy

GridMapping = dict[str, list[Any]]


# GENERATORS
class GeneratorConfig(BaseModel):
    """
    Random distribution backing a ``{generator: name}`` grid value.

    Attributes:
        distribution: uniform, loguniform, randint (inclusive bounds),
            normal or choice.
        low: Lower bound (uniform, loguniform, randint).
        high: Upper bound (uniform, loguniform, randint).
        mean: Mean (normal).
        std: Standard deviation (normal).
        choices: Candidate values (choice).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    distribution: Distribution
    low: float | None = None
    high: float | None = None
    mean: float | None = None
    std: float | None = None
    choices: list[bool | int | float | str] | None = None

    @model_validator(mode="after")
    def check_parameters(self) -> "GeneratorConfig":
        """
        Validate that the fields required by the distribution are present.
        """
        dist = self.distribution
        if dist in ("uniform", "loguniform", "randint"):
            if self.low is None or self.high is None:
                raise HyperGridConfigError(f"'{dist}' generator requires 'low' and 'high'")
            if self.low >= self.high:
                raise HyperGridConfigError(
                    f"Generator low ({self.low}) must be strictly less than high ({self.high})"
                )
            if dist == "loguniform" and self.low <= 0:
                raise HyperGridConfigError("'loguniform' generator requires low > 0")
        elif dist == "normal":
            if self.mean is None or self.std is None or self.std <= 0:
                raise HyperGridConfigError("'normal' generator requires 'mean' and 'std' > 0")
        elif not self.choices:
            raise HyperGridConfigError("'choice' generator requires a non-empty 'choices' list")
        return self


# SEARCH
class SearchConfig(BaseModel):
    """
    Search strategy and parameter space.

    Attributes:
        strategy: "grid" (exhaustive) or "random" (sampled).
        n_tries: Number of sampled combinations for random search.
        search_by_train_test_split: Score trials on a train/test split
            (True) or by k-fold cross-validation (False).
        calc_cv_statistics: Report CV curves of the winner.
        seed: Seed for combination sampling and generators.
        param_grid: One grid, or a list of grids (grid search only).
        generators: Named random distributions referenced by grid values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    strategy: SearchStrategy = "grid"
    n_tries: PositiveInt = 10
    search_by_train_test_split: bool = True
    calc_cv_statistics: bool = True
    seed: int = 0
    param_grid: GridMapping | list[GridMapping] = Field(default_factory=dict)
    generators: dict[str, GeneratorConfig] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """Treat an empty ``search:`` YAML section as defaults."""
        if data is None:
            return {}
        return data

    @model_validator(mode="after")
    def check_grids(self) -> "SearchConfig":
        """
        Validate that a grid list is non-empty.
        """
        if isinstance(self.param_grid, list) and not self.param_grid:
            raise HyperGridConfigError("param_grid list should contain at least one grid")
        return self

    @property
    def grids(self) -> list[GridMapping]:
        """The configured grids as a list."""
        if isinstance(self.param_grid, list):
            return list(self.param_grid)
        return [self.param_grid]
