"""
Recipe & Report Serialization.

Reads search recipes from YAML and persists recipes and reports (YAML or
JSON) with atomic, fsync'ed writes so that an interrupted run never leaves
a truncated file behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from ..paths import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


# YAML
def save_config_as_yaml(data: Any, yaml_path: Path) -> Path:
    """
    Serialize a recipe or report and write it to a YAML file.

    Args:
        data: Object to save. Objects exposing ``dump_portable()`` or
            ``model_dump()`` are converted first; anything else is used as is.
        yaml_path: Destination path (parent directories are created).

    Returns:
        The path that was written.

    Raises:
        ValueError: If the data cannot be converted to plain YAML types.
        OSError: If writing fails.
    """
    try:
        if hasattr(data, "dump_portable"):
            raw = data.dump_portable()
        elif hasattr(data, "model_dump"):
            raw = data.model_dump(mode="json")
        else:
            raw = data
        final_data = _sanitize_for_yaml(raw)
    except (TypeError, ValueError) as e:
        logger.error(f"Serialization failed: object structure is incompatible. Error: {e}")
        raise ValueError(f"Could not serialize configuration object: {e}") from e

    try:
        _persist_atomic(yaml_path, lambda f: _dump_yaml(final_data, f))
    except OSError as e:
        logger.error(f"IO Error: Could not write YAML to {yaml_path}. Error: {e}")
        raise

    logger.debug(f"Configuration frozen at → {yaml_path.name}")
    return yaml_path


def load_config_from_yaml(yaml_path: Path) -> dict[str, Any]:
    """
    Load a raw recipe dictionary from a YAML file.

    An empty file yields an empty dict.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# JSON
def save_json(data: Any, json_path: Path) -> Path:
    """Write ``data`` as indented JSON (numpy scalars and paths converted)."""
    payload = _sanitize_for_yaml(data)
    _persist_atomic(json_path, lambda f: json.dump(payload, f, indent=2, allow_nan=True))
    return json_path


# HELPERS
def _sanitize_for_yaml(obj: Any) -> Any:
    """
    Recursively convert values into plain YAML/JSON types.

    - Path → str
    - numpy scalars → Python scalars, numpy arrays → lists
    - dicts, lists and tuples are processed recursively
    """
    if isinstance(obj, dict):
        return {str(k): _sanitize_for_yaml(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_yaml(i) for i in obj]
    if isinstance(obj, np.ndarray):
        return [_sanitize_for_yaml(i) for i in obj.tolist()]
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, Path):
        return str(obj)
    return obj


def _dump_yaml(data: Any, stream: Any) -> None:
    yaml.dump(data, stream, default_flow_style=False, sort_keys=False, indent=4, allow_unicode=True)


def _persist_atomic(path: Path, write: Any) -> None:
    """
    Write through a temporary sibling file, fsync it, then rename over ``path``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    with open(tmp_path, "w", encoding="utf-8") as f:
        write(f)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)
