from __future__ import annotations

import pathlib
import warnings
from typing import Iterator

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from icolamp._config import UnitSettings, get_parameter_overrides, get_unit_settings
from icolamp.io.stl import write_mesh
from icolamp.mesh import Mesh
from icolamp.mesh_quality import MeshQuality
from icolamp.modeling import evaluate
from icolamp.modeling.geometry import edge_length_from_radius, face_circumradius_from_radius, face_tilt_deg
from icolamp.parameters import NUM_LEDS, LampParameters, load_parameters, parse_assignment
from icolamp.parts import BUILD_PLAN, PARTS, BuildOptions, build_part, planned_quantity
from icolamp.validation import GeometryError

console = Console()
app = typer.Typer(help="Generate the printable parts of the icosahedron lamp.")

SET_HELP = "Override a parameter, e.g. --set wall_width=1.2 (camelCase names work too)."


def _resolve_parameters(config: pathlib.Path | None, assignments: list[str] | None) -> LampParameters:
    try:
        params = LampParameters().with_overrides(get_parameter_overrides())
        if config is not None:
            if not config.exists():
                raise typer.BadParameter(f"Parameter file {config} does not exist.")
            params = load_parameters(config, params)
        overrides = dict(parse_assignment(item) for item in assignments or [])
        params = params.with_overrides(overrides)
    except GeometryError as exc:
        raise typer.BadParameter(str(exc)) from exc

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        params.check_printability()
    for warning in caught:
        console.print(f"[yellow]Warning: {warning.message}[/yellow]")
    return params


def _resolve_units(units: str | None) -> UnitSettings:
    try:
        return get_unit_settings(units)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_options(lod: str, include_lenses: bool) -> BuildOptions:
    try:
        quality = MeshQuality(lod=lod)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    return BuildOptions(quality=quality, include_lenses=include_lenses)


def _next_available_path(path: pathlib.Path) -> pathlib.Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def _mesh_part(name: str, params: LampParameters, options: BuildOptions, units: UnitSettings) -> Mesh:
    try:
        mesh = evaluate(build_part(name, params, options))
    except GeometryError as exc:
        raise typer.BadParameter(f"Cannot build {name}: {exc}") from exc
    if abs(units.scale_to_mm - 1.0) > 1e-9:
        mesh = mesh.scaled(1.0 / units.scale_to_mm)
    return mesh


def _derived_rows(params: LampParameters) -> Iterator[tuple[str, str]]:
    outer = params.outer_depth
    yield "outer_depth", f"{outer:g}"
    yield "power_outer_diameter", f"{params.power_outer_diameter:g}"
    yield "edge length (outer face)", f"{edge_length_from_radius(outer):.3f}"
    yield "circumradius (outer face)", f"{face_circumradius_from_radius(outer):.3f}"
    yield "circumradius (cavity face)", f"{face_circumradius_from_radius(params.cavity_depth):.3f}"
    yield "face tilt (deg)", f"{face_tilt_deg(outer):.3f}"
    yield "LEDs", str(NUM_LEDS)


@app.command("parts")
def list_parts() -> None:
    """List the buildable parts and how many of each one lamp needs."""

    table = Table(title="Lamp parts")
    table.add_column("Part", style="green")
    table.add_column("Description")
    table.add_column("Per lamp", justify="right")
    for spec in PARTS.values():
        table.add_row(spec.name, spec.description, str(planned_quantity(spec.name)))
    console.print(table)


@app.command()
def params(
    config: pathlib.Path | None = typer.Option(None, "--config", "-c", help="JSON file of parameter overrides."),
    assignments: list[str] | None = typer.Option(None, "--set", "-s", help=SET_HELP),
) -> None:
    """Show the resolved parameter set and the dimensions derived from it."""

    resolved = _resolve_parameters(config, assignments)
    table = Table(title="Parameters (mm)")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in resolved.as_dict().items():
        table.add_row(name, f"{value:g}")
    table.add_section()
    for name, value in _derived_rows(resolved):
        table.add_row(name, value, style="magenta")
    console.print(table)


@app.command()
def build(
    part: str = typer.Argument(..., help=f"Part to build: {', '.join(PARTS)}."),
    output: pathlib.Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Mesh file to write (STL, or any format pyvista can save). Defaults to <part>.stl.",
    ),
    config: pathlib.Path | None = typer.Option(None, "--config", "-c", help="JSON file of parameter overrides."),
    assignments: list[str] | None = typer.Option(None, "--set", "-s", help=SET_HELP),
    include_lenses: bool = typer.Option(False, "--lenses/--no-lenses", help="Place lenses in the quadrant jig too."),
    lod: str = typer.Option("final", help="Mesh level of detail: final or preview."),
    units: str | None = typer.Option(None, help="Export units; defaults to the user config."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Allow replacing an existing file."),
    ascii: bool = typer.Option(False, "--ascii", help="Write ASCII STL instead of binary."),
) -> None:
    """
    Build one part from the parameter set and export it as a mesh.
    """

    if part not in PARTS:
        raise typer.BadParameter(f"Unknown part '{part}'. Choose from: {', '.join(PARTS)}.")

    resolved = _resolve_parameters(config, assignments)
    options = _build_options(lod, include_lenses)
    unit_settings = _resolve_units(units)

    target = output or pathlib.Path(f"{part}.stl")
    final_output = target
    if target.exists() and not overwrite:
        final_output = _next_available_path(target)
        console.print(f"[yellow]Output {target} exists; writing to {final_output} instead.[/yellow]")

    mesh = _mesh_part(part, resolved, options, unit_settings)
    final_output.parent.mkdir(parents=True, exist_ok=True)
    try:
        write_mesh(mesh, final_output, ascii=ascii, name=part)
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Failed to export {final_output}: {exc}") from exc

    analysis = mesh.analysis
    issues = analysis.issues() if analysis else []
    status = "[green]watertight[/green]" if not issues else "[red]" + "; ".join(issues) + "[/red]"
    console.print(
        Panel(
            f"Wrote [green]{final_output}[/green]\n"
            f"{mesh.n_vertices} vertices, {mesh.n_faces} faces, {status}\n"
            f"Volume {analysis.volume if analysis else 0.0:.1f} {unit_settings.label}³; "
            f"print {planned_quantity(part)} per lamp.",
            title=f"Built {part}",
            border_style="green" if not issues else "red",
        )
    )


@app.command()
def plan(
    output_dir: pathlib.Path = typer.Option(pathlib.Path("dist"), "--output-dir", "-o", help="Directory for the STL files."),
    config: pathlib.Path | None = typer.Option(None, "--config", "-c", help="JSON file of parameter overrides."),
    assignments: list[str] | None = typer.Option(None, "--set", "-s", help=SET_HELP),
    lod: str = typer.Option("final", help="Mesh level of detail: final or preview."),
    units: str | None = typer.Option(None, help="Export units; defaults to the user config."),
    ascii: bool = typer.Option(False, "--ascii", help="Write ASCII STL instead of binary."),
) -> None:
    """Build one of every part in the lamp's build plan."""

    resolved = _resolve_parameters(config, assignments)
    options = _build_options(lod, include_lenses=False)
    unit_settings = _resolve_units(units)
    output_dir.mkdir(parents=True, exist_ok=True)

    console.rule("icolamp build plan")
    table = Table()
    table.add_column("Part", style="green")
    table.add_column("Qty", justify="right")
    table.add_column("Faces", justify="right")
    table.add_column(f"Volume ({unit_settings.label}³)", justify="right")
    table.add_column("File")
    for entry in BUILD_PLAN:
        mesh = _mesh_part(entry.part, resolved, options, unit_settings)
        path = output_dir / f"{entry.part}.stl"
        write_mesh(mesh, path, ascii=ascii, name=entry.part)
        volume = mesh.analysis.volume if mesh.analysis else 0.0
        table.add_row(entry.part, str(entry.quantity), str(mesh.n_faces), f"{volume:.1f}", str(path))
    console.print(table)
    console.print(f"[cyan]{NUM_LEDS} LEDs: one behind each lens.[/cyan]")
