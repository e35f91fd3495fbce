"""CLI entry-point for pool geometry and scene generation."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from packages.core.config import settings
from packages.core.types import FinishKind, ShapeKind, TimeOfDay
from packages.geometry.builder import build_pool_solid
from packages.geometry.export import write_ply
from packages.session.estimate import estimate_cost
from packages.session.state import DesignSession, render_session, set_time_of_day, update_pool

_SHAPES = [s.value for s in ShapeKind]
_FINISHES = [f.value for f in FinishKind]
_TIMES = [t.value for t in TimeOfDay]


def _pool_options(func):
    func = click.option("--depth", default=6.0, show_default=True, type=float, help="Depth (feet).")(func)
    func = click.option("--width", default=8.0, show_default=True, type=float, help="Width (feet).")(func)
    func = click.option("--length", default=16.0, show_default=True, type=float, help="Length (feet).")(func)
    return func


def _session(shape: str, finish: str, length: float, width: float, depth: float, **extras) -> DesignSession:
    try:
        return update_pool(
            DesignSession(),
            shape=shape, finish=finish, length=length, width=width, depth=depth, **extras,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.option("--log-level", default=settings.log_level, show_default=True, help="Logging level.")
def main(log_level: str):
    """Backyard pool designer: parametric pool geometry and 3D scenes."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(levelname)s | %(name)s | %(message)s",
    )


@main.command()
@click.argument("shape", type=click.Choice(_SHAPES))
@_pool_options
@click.option("-o", "--output", "output_file", default=None, help="Output PLY path.")
def solid(shape: str, length: float, width: float, depth: float, output_file: str | None):
    """Generate the pool solid for SHAPE and write it as a PLY mesh."""
    pool = _session(shape, "plaster", length, width, depth).pool
    result = build_pool_solid(pool.shape, pool.length, pool.width, pool.depth)
    if output_file is None:
        output_file = f"{pool.shape.value}_{length:g}x{width:g}x{depth:g}.ply"
    path = write_ply(result, Path(output_file))
    fl, fw = result.footprint
    click.echo(
        f"{pool.shape.value}: {len(result.parts)} part(s), {result.vertex_count} vertices, "
        f"{result.face_count} faces, footprint {fl:.2f} × {fw:.2f} ft → {path}"
    )


@main.command()
@click.option("--shape", default="rectangle", type=click.Choice(_SHAPES), show_default=True)
@click.option("--finish", default="plaster", type=click.Choice(_FINISHES), show_default=True)
@click.option("--time-of-day", default="sunset", type=click.Choice(_TIMES), show_default=True)
@_pool_options
@click.option("--elapsed", default=0.0, show_default=True, help="Animation time (seconds).")
@click.option("--spa/--no-spa", default=False, help="Add a spillover spa.")
@click.option("--led/--no-led", default=True, help="Underwater LED lighting.")
@click.option("-o", "--output", "output_file", default=None, help="Output JSON path.")
def scene(
    shape: str, finish: str, time_of_day: str, length: float, width: float, depth: float,
    elapsed: float, spa: bool, led: bool, output_file: str | None,
):
    """Compose the scene description and print (or write) its JSON."""
    session = _session(shape, finish, length, width, depth, spillover_spa=spa, led_lighting=led)
    session = set_time_of_day(session, time_of_day)
    description = render_session(session, elapsed, ground_size=settings.ground_size)
    json_str = description.model_dump_json(indent=2)
    if output_file is not None:
        Path(output_file).write_text(json_str)
        click.echo(f"Wrote scene with {len(description.nodes)} nodes → {output_file}")
    else:
        click.echo(json_str)


@main.command()
@click.option("--shape", default="rectangle", type=click.Choice(_SHAPES), show_default=True)
@click.option("--finish", default="plaster", type=click.Choice(_FINISHES), show_default=True)
@_pool_options
@click.option("--spa/--no-spa", default=False, help="Add a spillover spa.")
def estimate(shape: str, finish: str, length: float, width: float, depth: float, spa: bool):
    """Print the itemised cost estimate for a pool."""
    session = _session(shape, finish, length, width, depth, spillover_spa=spa)
    result = estimate_cost(
        session,
        unit_rate=settings.cost_unit_rate,
        led_lighting_cost=settings.led_lighting_cost,
        spillover_spa_cost=settings.spillover_spa_cost,
    )
    for line in result.lines:
        click.echo(f"{line.label:<50} ${line.amount:>12,.2f}")
    click.echo(f"{'Total':<50} ${result.total:>12,.2f}")


if __name__ == "__main__":
    main()
