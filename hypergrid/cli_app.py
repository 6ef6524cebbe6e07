"""
HyperGrid Command-Line Interface.

Provides the ``hypergrid`` entry point with two commands:

- ``hypergrid init``: generate a starter recipe YAML with all defaults
- ``hypergrid run``:  execute a parameter search from a YAML recipe

Usage:
    hypergrid init
    hypergrid run recipe.yaml
    hypergrid run recipe.yaml --set search.strategy=random --set search.n_tries=20
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated, Any

import typer

app = typer.Typer(
    name="hypergrid",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# ── App callback ────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from importlib.metadata import version as pkg_version

        typer.echo(f"hypergrid-ml {pkg_version('hypergrid-ml')}")
        raise typer.Exit()


@app.callback()
def main(
    _: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """HyperGrid: grid and randomized hyperparameter search for boosted trees."""
    ...  # pragma: no cover


# ── Commands ────────────────────────────────────────────────────────────────


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Argument(help="Output YAML file path."),
    ] = Path("recipe.yaml"),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file."),
    ] = False,
) -> None:
    """Generate a starter recipe with all config fields and defaults."""
    import yaml

    if output.exists() and not force:
        typer.echo(f"Error: '{output}' already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    data = _build_init_dict()
    yaml_body = yaml.dump(
        data, default_flow_style=False, sort_keys=False, indent=4, allow_unicode=True
    )
    content = _INIT_HEADER.format(filename=output.name) + yaml_body

    output.write_text(content, encoding="utf-8")
    typer.echo(f"Recipe created: {output}")
    typer.echo(f"Run it with:   hypergrid run {output}")


@app.command()
def run(
    recipe: Annotated[
        Path,
        typer.Argument(help="Path to YAML recipe file."),
    ],
    set_: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            help="Override config value (repeatable): key.path=value",
        ),
    ] = None,
) -> None:
    """Run a parameter search from a YAML recipe."""
    from hypergrid.core import (
        LOGGER_NAME,
        Config,
        Logger,
        LogStyle,
        RunPaths,
        save_config_as_yaml,
    )
    from hypergrid.search import run_search

    if not recipe.exists():
        typer.echo(f"Error: recipe not found: {recipe}", err=True)
        raise typer.Exit(code=1)

    overrides = _parse_overrides(set_ or [])
    cfg = Config.from_recipe(recipe, overrides=overrides or None)

    paths = RunPaths.create(
        dataset_slug=cfg.dataset.name,
        strategy=cfg.search.strategy,
        search_cfg=cfg.search.model_dump(mode="json"),
        base_dir=cfg.telemetry.output_dir,
    )
    run_logger = Logger.setup(name=LOGGER_NAME, log_dir=paths.logs, level=cfg.telemetry.log_level)
    save_config_as_yaml(cfg, paths.get_config_path())
    run_logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Run Directory':<22}: {paths.root}")

    started = time.perf_counter()
    try:
        best = run_search(cfg, paths)
    except KeyboardInterrupt:
        run_logger.warning(f"{LogStyle.WARNING} Interrupted by user.")
        raise SystemExit(1)
    except Exception as e:  # top-level catch-all for logging; re-raises
        run_logger.error(f"{LogStyle.WARNING} Search failed: {e}", exc_info=True)
        raise

    run_logger.info(
        f"{LogStyle.SUCCESS} Done in {time.perf_counter() - started:.1f}s: "
        f"{best.metric_name} = {best.metric_value:.6f}"
    )


# ── Private helpers ─────────────────────────────────────────────────────────

_INIT_HEADER = """\
# ==============================================================================
# HyperGrid: Starter Recipe (generated by `hypergrid init`)
# ==============================================================================
# Usage:   hypergrid run {filename}
#
# Without dataset.path the search runs on a synthetic regression dataset.
# Grid values may reference a named generator: {{generator: lr}}
# ==============================================================================

"""


def _auto_cast(value: str) -> Any:
    """
    Cast a CLI string to the appropriate Python scalar type.

    Args:
        value: Raw string from the command line.

    Returns:
        Converted bool, None, int, float, or the original string.
    """
    low = value.lower()
    if low in ("true", "false"):
        return low == "true"
    if low in ("null", "none"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _parse_overrides(raw: list[str]) -> dict[str, Any]:
    """
    Parse ``key.path=value`` strings into a flat override dict.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"Override must use key=value format, got: '{item}'")
        key, _, val = item.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in override: '{item}'")
        overrides[key] = _auto_cast(val.strip())
    return overrides


def _build_init_dict() -> dict[str, Any]:
    """
    Build a starter recipe: every section with its defaults plus a small
    example grid and generator.
    """
    from hypergrid.core.config import (
        CrossValidationConfig,
        DatasetConfig,
        TelemetryConfig,
        TrainTestSplitConfig,
    )

    dump = lambda m: m.model_dump(mode="json")  # noqa: E731

    tel = dump(TelemetryConfig())
    tel["output_dir"] = "./outputs"

    return {
        "dataset": dump(DatasetConfig()),
        "search": {
            "strategy": "grid",
            "n_tries": 10,
            "search_by_train_test_split": True,
            "calc_cv_statistics": True,
            "seed": 0,
            "param_grid": {
                "depth": [4, 6],
                "learning_rate": [0.03, 0.1, {"generator": "lr"}],
                "border_count": [32, 128],
            },
            "generators": {
                "lr": {"distribution": "loguniform", "low": 0.01, "high": 0.3},
            },
        },
        "cross_validation": dump(CrossValidationConfig()),
        "train_test_split": dump(TrainTestSplitConfig()),
        "telemetry": tel,
        "model": {"loss_function": "RMSE", "iterations": 100},
    }
