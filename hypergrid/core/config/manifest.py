"""
Root Configuration Manifest.

``Config`` aggregates every sub-schema of a search recipe and runs the
cross-domain checks that no single section can perform alone (loss vs.
task, stratification vs. task). Recipes are YAML files; the CLI applies
dot-notation overrides (``--set search.n_tries=50``) before validation.

Example:
    >>> cfg = Config.from_recipe(Path("recipes/housing.yaml"), {"search.seed": 7})
    >>> cfg.search.seed
    7
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...exceptions import HyperGridConfigError
from ..io import load_config_from_yaml
from .dataset_config import DatasetConfig
from .search_config import SearchConfig
from .telemetry_config import TelemetryConfig
from .validation_config import CrossValidationConfig, TrainTestSplitConfig


# HELPERS
def _deep_set(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    """
    Set ``value`` at a dot-separated path, creating intermediate dicts.

    Args:
        data: Nested dictionary to modify in place.
        dotted_key: Path such as ``"search.n_tries"``.
        value: Value to store.
    """
    keys = dotted_key.split(".")
    node = data
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


class _CrossDomainValidator:
    """Checks spanning several recipe sections."""

    @staticmethod
    def validate(cfg: "Config") -> None:
        from ...trainer import TrainerOptions

        options = TrainerOptions.from_params(cfg.model)
        loss = options.loss_function
        if options.is_classification != (cfg.dataset.task == "classification"):
            raise HyperGridConfigError(
                f"model.loss_function '{loss}' does not match dataset.task '{cfg.dataset.task}'"
            )

        if cfg.dataset.task != "classification":
            if cfg.train_test_split.stratified:
                raise HyperGridConfigError("Stratified train/test split requires classification")
            if cfg.cross_validation.stratified:
                raise HyperGridConfigError("Stratified cross-validation requires classification")


# ROOT MANIFEST
class Config(BaseModel):
    """
    Complete search recipe.

    Attributes:
        dataset: Data source and column roles.
        search: Strategy, grids and generators.
        cross_validation: K-fold settings (CV mode and final estimate).
        train_test_split: Split settings (train/test mode).
        telemetry: Logging and report output.
        model: Base trainer options; grid values override them per trial.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    cross_validation: CrossValidationConfig = Field(default_factory=CrossValidationConfig)
    train_test_split: TrainTestSplitConfig = Field(default_factory=TrainTestSplitConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    model: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def handle_empty_sections(cls, data: Any) -> Any:
        """Drop ``None`` sections so field defaults apply (``model:`` with no values)."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @model_validator(mode="after")
    def validate_cross_domain(self) -> "Config":
        _CrossDomainValidator.validate(self)
        return self

    @property
    def run_slug(self) -> str:
        """Identifier combining dataset name and strategy."""
        return f"{self.dataset.name}_{self.search.strategy}"

    def dump_portable(self) -> dict[str, Any]:
        """Serializable dict with project-relative paths, for archiving."""
        data = self.dump_serialized()
        data["telemetry"] = self.telemetry.to_portable_dict()
        return data

    def dump_serialized(self) -> dict[str, Any]:
        """JSON-compatible dict of the whole recipe."""
        return self.model_dump(mode="json")

    @classmethod
    def from_recipe(cls, recipe_path: Path, overrides: dict[str, Any] | None = None) -> "Config":
        """
        Build a Config from a YAML recipe plus dot-notation overrides.

        Args:
            recipe_path: Path to the YAML recipe.
            overrides: ``{"section.key": value}`` applied before validation.

        Returns:
            Validated Config.

        Raises:
            FileNotFoundError: If the recipe does not exist.
            pydantic.ValidationError / HyperGridConfigError: On invalid content.
        """
        raw = load_config_from_yaml(Path(recipe_path))
        if not isinstance(raw, dict):
            raise HyperGridConfigError(f"Recipe {recipe_path} must contain a mapping")
        for key, value in (overrides or {}).items():
            _deep_set(raw, key, value)
        return cls.model_validate(raw)
