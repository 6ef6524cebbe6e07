"""
Search Run Directory Management.

Provides the RunPaths class: an immutable container describing the
directory tree of one search run. Run identifiers combine the date, a
dataset slug, the search strategy, and a short blake2b hash of the search
settings plus a timestamp, so repeated runs never overwrite each other.

Example:
    >>> paths = RunPaths.create(
    ...     dataset_slug="housing",
    ...     strategy="grid",
    ...     search_cfg={"n_tries": 10, "seed": 0},
    ... )
    >>> paths.root
    PosixPath('outputs/20261017_housing_grid_a3f7c2')
"""

from __future__ import annotations

import hashlib
import json
import re
import time
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from .constants import OUTPUTS_ROOT


# RUN MANAGEMENT
class RunPaths(BaseModel):
    """
    Immutable container for run-specific directory paths.

    Attributes:
        run_id: Unique identifier in format YYYYMMDD_dataset_strategy_hash.
        dataset_slug: Normalized lowercase dataset name.
        strategy: Search strategy slug ("grid" or "random").
        root: Base directory for all run artifacts.
        reports: Directory for best options, study summary and top trials.
        logs: Directory for session logs.

    Example:
        Directory structure created::

            outputs/20261017_housing_grid_a3f7c2/
            ├── reports/
            └── logs/
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    SUB_DIRS: ClassVar[tuple[str, ...]] = ("reports", "logs")

    run_id: str
    dataset_slug: str
    strategy: str

    root: Path
    reports: Path
    logs: Path

    @classmethod
    def create(
        cls,
        dataset_slug: str,
        strategy: str,
        search_cfg: dict[str, Any],
        base_dir: Path | None = None,
    ) -> "RunPaths":
        """
        Factory method to create and initialize a unique run environment.

        Args:
            dataset_slug: Dataset identifier. Non-alphanumeric characters are
                stripped and the result is lowercased.
            strategy: Search strategy name used in the run identifier.
            search_cfg: Search settings used for hash generation. Only
                hashable primitives contribute to the hash.
            base_dir: Custom base directory for outputs. Defaults to OUTPUTS_ROOT.

        Returns:
            Fully initialized RunPaths instance with all directories created.

        Raises:
            ValueError: If dataset_slug or strategy is not a string.
        """
        if not isinstance(dataset_slug, str):
            raise ValueError(f"Expected string for dataset_slug but got {type(dataset_slug)}")
        if not isinstance(strategy, str):
            raise ValueError(f"Expected string for strategy but got {type(strategy)}")

        ds_slug = re.sub(r"[^a-z0-9_]", "", dataset_slug.lower()) or "dataset"
        st_slug = re.sub(r"[^a-z0-9]", "", strategy.lower())

        run_id = cls._generate_unique_id(ds_slug, st_slug, search_cfg)
        root_path = Path(base_dir or OUTPUTS_ROOT) / run_id

        instance = cls(
            run_id=run_id,
            dataset_slug=ds_slug,
            strategy=st_slug,
            root=root_path,
            reports=root_path / "reports",
            logs=root_path / "logs",
        )
        instance._setup_run_directories()
        return instance

    @staticmethod
    def _generate_unique_id(ds_slug: str, st_slug: str, cfg: dict[str, Any]) -> str:
        """
        Generate a unique run identifier.

        Returns:
            Identifier in format YYYYMMDD_dataset_strategy_hash where hash is
            6 hex characters from blake2b(config + timestamp).
        """
        hashable = {k: v for k, v in cfg.items() if isinstance(v, (int, float, str, bool, list))}
        hashable["_run_ts"] = cfg.get("run_timestamp", time.time())

        params_json = json.dumps(hashable, sort_keys=True, default=str)
        run_hash = hashlib.blake2b(params_json.encode(), digest_size=3).hexdigest()

        date_str = time.strftime("%Y%m%d")
        return f"{date_str}_{ds_slug}_{st_slug}_{run_hash}"

    def _setup_run_directories(self) -> None:
        """Create the physical directory structure on the filesystem."""
        for folder_name in self.SUB_DIRS:
            (self.root / folder_name).mkdir(parents=True, exist_ok=True)

    def get_config_path(self) -> Path:
        """Path to the archived run configuration (reports/config.yaml)."""
        return self.reports / "config.yaml"

    def __repr__(self) -> str:
        return f"RunPaths(run_id='{self.run_id}', root={self.root})"
