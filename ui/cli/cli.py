"""CLI entrypoint for dagsim."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Dependency-graph task scheduler")
config_app = typer.Typer(help="Configuration commands")


@app.command("order")
def order_cmd(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependency file"),
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed lines"),
    config_file: Path | None = typer.Option(None, "--config", help="Extra YAML config file"),
) -> None:
    """Print the single-worker completion order."""
    commands.order(input_file=input_file, strict=strict, config_file=config_file)


@app.command("time")
def time_cmd(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependency file"),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Worker count"),
    base_offset: int | None = typer.Option(None, "--base-offset", min=0, help="Per-task offset"),
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed lines"),
    config_file: Path | None = typer.Option(None, "--config", help="Extra YAML config file"),
) -> None:
    """Print the total time for a pool of workers."""
    commands.total_time(
        input_file=input_file,
        workers=workers,
        base_offset=base_offset,
        strict=strict,
        config_file=config_file,
    )


@app.command("run")
def run_cmd(
    input_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependency file"),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Worker count"),
    base_offset: int | None = typer.Option(None, "--base-offset", min=0, help="Per-task offset"),
    timeline: bool = typer.Option(False, "--timeline", help="Show per-worker timeline"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON"),
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed lines"),
    config_file: Path | None = typer.Option(None, "--config", help="Extra YAML config file"),
) -> None:
    """Run both schedulers and journal the run."""
    commands.run(
        input_file=input_file,
        workers=workers,
        base_offset=base_offset,
        timeline=timeline,
        as_json=as_json,
        strict=strict,
        config_file=config_file,
    )


@config_app.command("show")
def config_show_cmd(
    config_file: Path | None = typer.Option(None, "--config", help="Extra YAML config file"),
) -> None:
    """Show effective configuration."""
    commands.config_show(config_file=config_file)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
