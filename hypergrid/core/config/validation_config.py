"""
Trial Validation Schemas.

Settings for the two ways a trial is scored: k-fold cross-validation and a
single train/test split. Both carry a partition seed that also drives the
group-wise shuffle applied to the data before the search loop starts.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from .types import FoldCount, OpenUnitInterval


class CrossValidationConfig(BaseModel):
    """
    K-fold cross-validation settings.

    Attributes:
        fold_count: Number of folds.
        shuffle: Shuffle objects by group before building folds.
        stratified: Stratify folds by class; None picks stratification
            automatically for ungrouped classification data.
        partition_random_seed: Seed of the shuffle.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fold_count: FoldCount = 3
    shuffle: bool = True
    stratified: bool | None = None
    partition_random_seed: int = 0

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        if data is None:
            return {}
        return data


class TrainTestSplitConfig(BaseModel):
    """
    Train/test split settings.

    Attributes:
        train_part: Share of groups assigned to the train part.
        shuffle: Shuffle objects by group before splitting.
        stratified: Preserve class proportions in both parts.
        partition_random_seed: Seed of the shuffle and stratified split.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    train_part: OpenUnitInterval = 0.8
    shuffle: bool = True
    stratified: bool = False
    partition_random_seed: int = 0

    @model_validator(mode="before")
    @classmethod
    def handle_empty_config(cls, data: Any) -> Any:
        if data is None:
            return {}
        return data
