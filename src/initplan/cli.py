"""Command-line interface for the initialization planner."""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import PlannerConfig, TieBreak
from .manifest import build_initializer, load_manifest
from .observability import configure_logging
from .utils.exceptions import InitPlanError, PlanningError

app = typer.Typer(
    name="initplan",
    help="Plan the start-up order of dependent initialization modules",
    add_completion=False,
)

console = Console()


def _load_config(
    config_file: Path | None,
    tie_break: TieBreak | None,
    log_level: str | None,
    json_logs: bool,
) -> PlannerConfig:
    config = PlannerConfig.from_file(config_file) if config_file else PlannerConfig.from_env()
    if tie_break is not None:
        config.policy.tie_break = tie_break
    if log_level:
        config.logging.level = log_level
    if json_logs:
        config.logging.format = "json"

    configure_logging(
        level=config.logging.level,
        json_logs=config.logging.json_logs,
        log_file=config.logging.file,
    )
    return config


ConfigOption = typer.Option(None, "--config", "-c", help="Configuration file", exists=True)
LogLevelOption = typer.Option(
    None, "--log-level", "-l", help="Log level (TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR)"
)
JsonLogsOption = typer.Option(False, "--json-logs", help="Emit logs as JSON lines")


@app.command()
def plan(
    manifest_file: Path = typer.Argument(..., help="Module manifest (YAML)", exists=True),
    config_file: Path | None = ConfigOption,
    tie_break: TieBreak | None = typer.Option(
        None, "--tie-break", "-t", help="Order for independent modules: name or registration"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Print the initialization order of the modules in a manifest.

    Examples:
        initplan plan modules.yaml
        initplan plan modules.yaml --tie-break registration --json
    """
    try:
        config = _load_config(config_file, tie_break, log_level, json_logs)
        initializer = build_initializer(load_manifest(manifest_file), config)
        result = initializer.analyze()
    except (InitPlanError, ValueError) as e:
        console.print(f"\n[bold red]ERROR:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if as_json:
        data = {
            "order": result.order,
            "batches": result.batches,
            "tie_break": config.policy.tie_break.value,
        }
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(title=f"Initialization Plan ({len(result)} modules)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Module", style="cyan")
    table.add_column("Depth", justify="right", style="green")
    table.add_column("Requires")

    for position, module in enumerate(result.order, start=1):
        requires = ", ".join(dict.fromkeys(initializer.graph.requires(module)))
        table.add_row(str(position), module, str(result.depths[module]), requires or "-")

    console.print(table)


@app.command()
def validate(
    manifest_file: Path = typer.Argument(..., help="Module manifest (YAML)", exists=True),
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Check a manifest for unknown dependencies and cycles.

    Exits with code 1 if no valid order exists.

    Examples:
        initplan validate modules.yaml
    """
    console.print(f"\n[bold blue]Validating manifest:[/bold blue] {manifest_file}\n")

    try:
        config = _load_config(config_file, None, log_level, json_logs)
        initializer = build_initializer(load_manifest(manifest_file), config)
        result = initializer.analyze()
    except PlanningError as e:
        console.print(
            Panel.fit(
                escape(str(e)), title="[red]Invalid dependency graph[/red]", border_style="red"
            )
        )
        raise typer.Exit(code=1) from e
    except (InitPlanError, ValueError) as e:
        console.print(f"[red]ERROR: Validation failed:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print("[green]PASS: Validation successful![/green]")
    console.print(f"  Modules: {len(result)}")
    console.print(f"  Depth levels: {len(result.batches)}")


@app.command()
def graph(
    manifest_file: Path = typer.Argument(..., help="Module manifest (YAML)", exists=True),
    output_file: Path | None = typer.Option(
        None, "--output", "-o", help="Write DOT to this file instead of stdout"
    ),
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
) -> None:
    """
    Export the module graph in Graphviz DOT format.

    Examples:
        initplan graph modules.yaml | dot -Tpng -o modules.png
        initplan graph modules.yaml -o modules.dot
    """
    try:
        config = _load_config(config_file, None, log_level, False)
        initializer = build_initializer(load_manifest(manifest_file), config)
    except (InitPlanError, ValueError) as e:
        console.print(f"[red]ERROR:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    dot = initializer.graph.to_dot()

    if output_file is None:
        typer.echo(dot)
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(dot + "\n", encoding="utf-8")
    console.print(f"[green]Wrote graph to {output_file}[/green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
