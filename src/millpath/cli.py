"""
Command-line interface for millpath.

Provides commands for G-code generation, settings validation and reading
points back out of a program.
"""

from pathlib import Path
from typing import Any, Optional

import click
import numpy as np
import trimesh
from rich.console import Console
from rich.table import Table

from millpath import __version__
from millpath.core.config import (
    MachiningSettings,
    PostProcessorType,
    Strategy,
    load_settings,
    settings_from_dict,
    validate_settings,
)
from millpath.core.exceptions import GeometryError, MillpathError
from millpath.core.logging import configure_logging
from millpath.core.mesh import UNIT_SCALE, Mesh
from millpath.engine import ToolpathEngine
from millpath.postprocessor.parser import parse_program

console = Console()

SUPPORTED_FORMATS = {".stl", ".obj", ".ply", ".off"}


def load_mesh(path: Path, scale: float = UNIT_SCALE) -> Mesh:
    """
    Load a model file and convert it to machining coordinates.

    Raises:
        GeometryError: If the format is unsupported or loading fails
    """
    if path.suffix.lower() not in SUPPORTED_FORMATS:
        raise GeometryError(
            f"Unsupported format: {path.suffix}. "
            f"Supported formats: {sorted(SUPPORTED_FORMATS)}"
        )

    try:
        loaded = trimesh.load(str(path))
    except Exception as e:
        raise GeometryError(f"Failed to load geometry from {path}: {e}") from e

    if isinstance(loaded, trimesh.Scene):
        geometries = [
            geom for geom in loaded.geometry.values()
            if isinstance(geom, trimesh.Trimesh)
        ]
        if not geometries:
            raise GeometryError(f"No triangle meshes in {path}")
        loaded = trimesh.util.concatenate(geometries)
    elif not isinstance(loaded, trimesh.Trimesh):
        raise GeometryError(f"Unexpected geometry type: {type(loaded)}")

    return Mesh.from_trimesh(loaded, scale=scale)


def _build_settings(config_file: Optional[Path], overrides: dict[str, Any]) -> MachiningSettings:
    base = load_settings(config_file) if config_file else MachiningSettings()
    data = base.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    return settings_from_dict(data)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Emit JSON log lines")
def main(log_level: str, json_logs: bool) -> None:
    """millpath - Mesh to G-code toolpaths for 3-axis milling."""
    configure_logging(level=log_level, json_output=json_logs)


@main.command("generate")
@click.argument("mesh_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config", "-c", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option(
    "--strategy", "-s",
    type=click.Choice([s.value for s in Strategy], case_sensitive=False),
    help="Layer strategy",
)
@click.option(
    "--post", "-p", "post_processor",
    type=click.Choice([p.value for p in PostProcessorType], case_sensitive=False),
    help="Post processor",
)
@click.option("--tool-diameter", type=float, help="Tool diameter (mm)")
@click.option("--step-over", type=float, help="Stepover fraction (0.1-0.9)")
@click.option("--step-down", type=float, help="Layer height (mm)")
@click.option("--spindle-speed", type=int, help="Spindle speed (rpm)")
@click.option("--safe-height", type=float, help="Retract height (mm)")
@click.option("--compensate/--no-compensate", "tool_compensation", default=None,
              help="Offset paths by the tool radius")
@click.option("--scale", type=float, default=UNIT_SCALE, show_default=True,
              help="Model unit to mm factor")
@click.option("--workers", "-j", type=int, default=1, show_default=True,
              help="Threads for layer computation")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Write the program to this file instead of stdout")
def generate(
    mesh_file: Path,
    config_file: Optional[Path],
    scale: float,
    workers: int,
    output: Optional[Path],
    **overrides: Any,
) -> None:
    """Generate a G-code program from a mesh file."""
    try:
        settings = _build_settings(config_file, overrides)
        mesh = load_mesh(mesh_file, scale=scale)
        result = ToolpathEngine(settings, max_workers=workers).generate(mesh)
    except MillpathError as e:
        console.print(f"[red]✗[/red] Generation failed: {e}")
        raise SystemExit(1)

    if output is None:
        click.echo(result.program, nl=False)
        return

    output.write_text(result.program)
    stats = result.statistics
    console.print(f"[green]✓[/green] Wrote {output}")
    console.print(
        f"  {stats['emittedLayers']}/{stats['totalLayers']} layers, "
        f"{stats['totalPoints']} points, {stats['totalLines']} lines"
    )


@main.command("validate")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(config_file: Path) -> None:
    """Check a YAML settings file."""
    try:
        settings = load_settings(config_file)
    except MillpathError as e:
        console.print(f"[red]✗[/red] Failed to load settings: {e}")
        raise SystemExit(1)

    validation = validate_settings(settings)
    if not validation.ok:
        for error in validation.errors:
            console.print(f"[red]✗[/red] {error}")
        raise SystemExit(1)

    table = Table(title=f"Settings: {config_file.name}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(getattr(value, "value", value)))
    console.print(table)


@main.command("parse")
@click.argument("gcode_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def parse(gcode_file: Path) -> None:
    """Read cutting points back out of a program."""
    points = parse_program(gcode_file.read_text())
    if not points:
        console.print("[yellow]No cutting moves found.[/yellow]")
        return

    pts = np.asarray(points)
    lo, hi = pts.min(axis=0), pts.max(axis=0)

    table = Table(title=f"Program: {gcode_file.name} ({len(points)} points)")
    table.add_column("Axis", style="cyan")
    table.add_column("Min")
    table.add_column("Max")
    for i, axis in enumerate("XYZ"):
        table.add_row(axis, f"{lo[i]:.2f}", f"{hi[i]:.2f}")
    console.print(table)


if __name__ == "__main__":
    main()
