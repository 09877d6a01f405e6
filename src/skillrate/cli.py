"""Rate one TOML period file under every configured Glicko-2 system."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from skillrate.period_file import RatingPeriod, load_period_file
from skillrate.ratings.errors import RatingError
from skillrate.ratings.glicko2.config import Glicko2SystemConfig, load_glicko2_system_configs
from skillrate.ratings.glicko2.registry import Glicko2Calculator

ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "glicko2"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Glicko-2 rating jobs.",
)


def _run_single_system(*, system_config: Glicko2SystemConfig, period: RatingPeriod) -> None:
    calculator = Glicko2Calculator(params=system_config.parameters)
    for competitor_id, competitor in period.competitors.items():
        calculator.set_competitor(competitor_id, competitor)

    typer.echo(
        f"config={system_config.file_path.name} "
        f"parameters={json.dumps(system_config.as_config_json(), sort_keys=True)}"
    )

    try:
        events = calculator.process_period(period.results)
    except RatingError as exc:
        typer.echo(f"failed config={system_config.file_path.name} error={exc}", err=True)
        raise typer.Exit(code=1) from exc

    for event in sorted(events, key=lambda item: item.post_rating, reverse=True):
        typer.echo(
            f"glicko2_system={system_config.name} "
            f"competitor={event.competitor_id} "
            f"games={event.games_played} "
            f"score={event.actual_score:.1f}/{event.expected_score:.2f} "
            f"rating={event.post_rating:.2f} ({event.rating_delta:+.2f}) "
            f"rd={event.post_rd:.2f} "
            f"volatility={event.post_volatility:.6f}"
        )
    typer.echo(
        "completed "
        f"config={system_config.file_path.name} "
        f"glicko2_system={system_config.name} "
        f"rated={len(events)} "
        f"tracked={calculator.tracked_entity_count()}"
    )


@app.command()
def rate_period(
    period_file: Annotated[
        Path,
        typer.Option("--period-file", help="TOML file with competitors and results."),
    ],
    config_dir: Annotated[
        Path,
        typer.Option(
            "--config-dir",
            help=(
                "Directory containing Glicko-2 system TOML config files. "
                "The default points at configs/ratings/glicko2 in a source checkout; "
                "pass this option when running from an installed package."
            ),
        ),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str | None,
        typer.Option(
            "--config-name",
            help="Optional single config filename (for example: default.toml).",
        ),
    ] = None,
) -> None:
    """Rate a period under each Glicko-2 system config in a directory."""
    configs = load_glicko2_system_configs(config_dir)
    if config_name is not None:
        configs = [config for config in configs if config.file_path.name == config_name]
        if not configs:
            raise typer.BadParameter(
                f"No config named '{config_name}' found in {config_dir}",
                param_hint="--config-name",
            )

    try:
        period = load_period_file(period_file)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--period-file") from exc

    typer.echo(f"loaded_configs={len(configs)} config_dir={config_dir}")
    for config in configs:
        _run_single_system(system_config=config, period=period)


if __name__ == "__main__":
    app()
