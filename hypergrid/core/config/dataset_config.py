"""
Dataset Configuration Schema.

Where the tabular data lives and how its columns are interpreted. Without
a ``path`` the search runs on a deterministic synthetic dataset, which is
what ``hypergrid init`` recipes use for a first smoke run.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .types import PositiveInt, TaskType, ValidatedPath

if TYPE_CHECKING:  # pragma: no cover
    from ...data_handler import TabularDataset


class DatasetConfig(BaseModel):
    """
    Tabular dataset manifest.

    Attributes:
        name: Dataset identifier used in run directory names.
        path: CSV or Parquet file (None = synthetic data).
        target: Target column name.
        feature_columns: Feature columns (None = every other column).
        group_column: Optional group id column.
        ordered: Object order is meaningful (rejected in train/test mode).
        task: regression or classification.
        synthetic_objects: Row count of the synthetic dataset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="synthetic", min_length=1)
    path: ValidatedPath | None = None
    target: str = "target"
    feature_columns: list[str] | None = None
    group_column: str | None = None
    ordered: bool = False
    task: TaskType = "regression"
    synthetic_objects: PositiveInt = 200

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        if data is None:
            return {}
        return data

    @property
    def is_synthetic(self) -> bool:
        return self.path is None

    def load(self) -> "TabularDataset":
        """Load the configured dataset (or build the synthetic one)."""
        from ...data_handler import TabularDataset, create_synthetic_dataset

        if self.path is None:
            synthetic = create_synthetic_dataset(n_objects=self.synthetic_objects, task=self.task)
            return replace(synthetic, ordered=self.ordered)

        return TabularDataset.load(
            self.path,
            target=self.target,
            feature_columns=self.feature_columns,
            group_column=self.group_column,
            ordered=self.ordered,
            task=self.task,
        )
