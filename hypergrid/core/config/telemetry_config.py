"""
Telemetry & Output Manifest.

Where run artifacts go, how verbose logging is, and which reports are
written at the end of a search.

Attributes:
    output_dir: Validated path to the outputs directory (default: ./outputs).
    log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..paths import PROJECT_ROOT
from .types import LogLevel, PositiveInt, ValidatedPath


class TelemetryConfig(BaseModel):
    """
    Declarative manifest for logging and report output.

    Attributes:
        output_dir: Absolute path of the outputs root.
        log_level: Logging verbosity.
        save_reports: Write best options, search summary and top trials.
        top_k: Number of trials listed in the top-trials workbook.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_dir: ValidatedPath = Field(default="./outputs")  # type: ignore[assignment]
    log_level: LogLevel = Field(default="INFO")
    save_reports: bool = True
    top_k: PositiveInt = 10

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        """
        Handle empty YAML section by returning default dict.

        When YAML contains 'telemetry:' with no values, Pydantic receives None.
        """
        if data is None:
            return {}
        return data

    def to_portable_dict(self) -> dict:
        """
        Convert to a dictionary with project-relative paths.

        Prevents host-specific absolute paths from leaking into archived recipes.
        """
        data = self.model_dump()

        full_path = Path(data["output_dir"])
        if full_path.is_relative_to(PROJECT_ROOT):
            data["output_dir"] = f"./{full_path.relative_to(PROJECT_ROOT)}"
        else:
            data["output_dir"] = str(full_path)
        return data
