"""
Semantic Type Definitions & Validation Primitives.

Annotated pydantic types shared by the configuration schemas and the
trainer option model, so that boundaries (probabilities, learning rates,
fold counts, bin counts) are declared once and enforced at the edge.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import AfterValidator, Field, PlainSerializer


# VALIDATORS
def _sanitize_path(v: str | Path) -> Path:
    """
    Resolve path to absolute form without disk side-effects.

    Args:
        v: Path object or string to sanitize

    Returns:
        Absolute Path with home directory expanded
    """
    return Path(v).expanduser().resolve()


# GENERIC PRIMITIVES
PositiveInt = Annotated[int, Field(gt=0)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveFloat = Annotated[float, Field(gt=0.0)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
OpenUnitInterval = Annotated[float, Field(gt=0.0, lt=1.0)]

# FILESYSTEM
ValidatedPath = Annotated[
    Path,
    AfterValidator(_sanitize_path),
    PlainSerializer(lambda v: str(v), when_used="json", return_type=str),
]

# TRAINER OPTIONS
LearningRate = Annotated[float, Field(gt=0.0, le=1.0)]
TreeDepth = Annotated[int, Field(ge=1, le=16)]
BorderCount = Annotated[int, Field(ge=1, le=254)]
FoldCount = Annotated[int, Field(ge=2, le=100)]

# SYSTEM & METADATA
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
TaskType = Literal["regression", "classification"]
SearchStrategy = Literal["grid", "random"]
LossFunction = Literal["RMSE", "MAE", "Logloss", "MultiClass"]
BorderType = Literal[
    "Median", "Uniform", "UniformAndQuantiles", "MaxLogSum", "MinEntropy", "GreedyLogSum"
]
NanMode = Literal["Min", "Max", "Forbidden"]
Distribution = Literal["uniform", "loguniform", "randint", "normal", "choice"]
