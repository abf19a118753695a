"""Command Line Interface for Room Offset.

This module provides a simple CLI for computing the offset boundary and
effective area of a single room, of every matching room of a plan, and for
deriving room separation lines along hallway walls.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.config import HALLWAY_OFFSET
from .core.errors import RoomOffsetError
from .engine.api import SpaceResult, classify_and_offset_boundary, run_batch, separation_lines
from .io.parser import (
    batch_to_dict,
    load_config,
    load_plan,
    result_to_dict,
    save_results,
    separation_line_to_dict,
)

app = typer.Typer(
    name="room-offset",
    help="A CLI tool for offset room boundaries and effective areas",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_offsets(result: SpaceResult) -> None:
    table = Table(title=f"{result.space.name} ({result.space.id})")
    table.add_column("#", justify="right")
    table.add_column("Element", style="cyan")
    table.add_column("Classification")
    table.add_column("Thickness", justify="right")
    table.add_column("Offset", justify="right")

    for classification, line in zip(result.classifications, result.offset_lines):
        thickness = "-" if classification.thickness is None else f"{classification.thickness:.3f}"
        table.add_row(
            str(line.segment_index),
            classification.element_id or "-",
            classification.role.value,
            thickness,
            f"{classification.magnitude:.3f}",
        )

    console.print(table)


def _print_area(result: SpaceResult) -> None:
    report = result.report
    console.print(
        f"Original area: {report.original_area:.2f}  "
        f"Effective area: {report.effective_area:.2f}  "
        f"Difference: {report.delta:+.2f}"
    )
    if result.polygon.fallbacks:
        indices = ", ".join(str(f.vertex_index) for f in result.polygon.fallbacks)
        console.print(f"[yellow]Parallel fallback at vertices {indices}[/yellow]")
    if not result.is_simple:
        console.print("[yellow]Reconstructed polygon is self-intersecting[/yellow]")


@app.command()
def offset(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to plan JSON file"),
    space: str = typer.Option(..., "--space", "-s", help="ID of the space to offset"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to offset config JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", help="Path to output result JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Compute the offset boundary and effective area of one space."""
    _setup_logging(verbose)
    try:
        offset_config = load_config(str(config) if config else None)
        plan_obj = load_plan(str(plan), offset_config.default_thickness)
        console.print(f"[green]✓[/green] Loaded plan from {plan}")

        result = classify_and_offset_boundary(plan_obj, space, offset_config)

        _print_offsets(result)
        _print_area(result)

        if output:
            save_results(result_to_dict(result), str(output))
            console.print(f"[green]✓[/green] Result saved to {output}")

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON - {e}[/red]")
        raise typer.Exit(1)
    except (KeyError, ValueError, RoomOffsetError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def batch(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to plan JSON file"),
    name_filter: Optional[str] = typer.Option(
        None, "--filter", "-f", help="Room name fragment (default from config)"
    ),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of worker threads"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to offset config JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", help="Path to output results JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Compute offset boundaries for every space matching a name filter."""
    _setup_logging(verbose)
    try:
        offset_config = load_config(str(config) if config else None)
        plan_obj = load_plan(str(plan), offset_config.default_thickness)
        console.print(f"[green]✓[/green] Loaded plan from {plan}")
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    result = run_batch(plan_obj, name_filter, offset_config, max_workers=workers)

    if result.total == 0:
        fragment = name_filter or offset_config.room_name_filter
        console.print(f"[red]No rooms found with name containing '{fragment}'[/red]")
        raise typer.Exit(1)

    table = Table()
    table.add_column("Space", style="cyan")
    table.add_column("Name")
    table.add_column("Original", justify="right")
    table.add_column("Effective", justify="right")
    table.add_column("Difference", justify="right")
    table.add_column("Status", justify="center")

    for success in result.successes:
        report = success.report
        table.add_row(
            success.space.id,
            success.space.name,
            f"{report.original_area:.2f}",
            f"{report.effective_area:.2f}",
            f"{report.delta:+.2f}",
            "[green]OK[/green]",
        )
    for failure in result.failures:
        table.add_row(
            failure.space.id,
            failure.space.name,
            "-",
            "-",
            "-",
            f"[red]{failure.error}[/red]",
        )

    console.print(table)
    console.print(
        f"[blue]ℹ[/blue] {len(result.successes)}/{result.total} rooms processed, "
        f"{len(result.failures)} failed"
    )

    if output:
        save_results(batch_to_dict(result, offset_config), str(output))
        console.print(f"[green]✓[/green] Results saved to {output}")

    if not result.successes:
        raise typer.Exit(1)


@app.command("separation-lines")
def separation_lines_command(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to plan JSON file"),
    space: str = typer.Option(..., "--space", "-s", help="ID of the space"),
    distance: float = typer.Option(
        HALLWAY_OFFSET, "--offset", help="Distance the lines move toward the room"
    ),
    demising: bool = typer.Option(False, "--demising", help="Also create lines for demising walls"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to offset config JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", help="Path to output lines JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Derive room separation lines along the hallway walls of a space."""
    _setup_logging(verbose)
    try:
        offset_config = load_config(str(config) if config else None)
        plan_obj = load_plan(str(plan), offset_config.default_thickness)
        lines = separation_lines(plan_obj, space, distance, demising, offset_config)
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON - {e}[/red]")
        raise typer.Exit(1)
    except (KeyError, ValueError, RoomOffsetError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table()
    table.add_column("Element", style="cyan")
    table.add_column("Classification")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Length", justify="right")
    for line in lines:
        table.add_row(
            line.element_id or "-",
            line.role.value,
            f"({line.start.x:.3f}, {line.start.y:.3f})",
            f"({line.end.x:.3f}, {line.end.y:.3f})",
            f"{line.length:.3f}",
        )
    console.print(table)
    console.print(f"[blue]ℹ[/blue] {len(lines)} separation lines")

    if output:
        save_results(
            {
                "space_id": space,
                "line_count": len(lines),
                "separation_lines": [separation_line_to_dict(line) for line in lines],
            },
            str(output),
        )
        console.print(f"[green]✓[/green] Lines saved to {output}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
