"""Cost estimate for a design session."""

from __future__ import annotations

from packages.core.types import CostEstimate, CostLine, ElementCategory
from packages.geometry.profiles import get_shape_profile
from packages.scene.catalog import get_catalog_entry
from packages.scene.materials import get_finish
from packages.session.state import DesignSession


def estimate_cost(
    session: DesignSession,
    *,
    unit_rate: float = 150.0,
    led_lighting_cost: float = 1500.0,
    spillover_spa_cost: float = 9000.0,
) -> CostEstimate:
    """Itemised estimate: area × rate + shape surcharge + finish + extras + elements."""
    pool = session.pool
    profile = get_shape_profile(pool.shape)
    finish = get_finish(pool.finish)

    lines = [
        CostLine(
            label=f"Pool construction ({pool.length:g} × {pool.width:g} ft @ ${unit_rate:g}/ft²)",
            amount=pool.length * pool.width * unit_rate,
        ),
    ]
    if profile.surcharge:
        lines.append(CostLine(label=f"{profile.name} shape", amount=profile.surcharge))
    lines.append(CostLine(label=f"{finish.name} finish", amount=finish.cost))
    if pool.led_lighting:
        lines.append(CostLine(label="LED lighting", amount=led_lighting_cost))
    if pool.spillover_spa:
        lines.append(CostLine(label="Spillover spa", amount=spillover_spa_cost))

    for element in session.elements:
        if element.category is ElementCategory.EXISTING:
            continue
        entry = get_catalog_entry(element.element_id)
        lines.append(CostLine(label=entry.name, amount=entry.cost))

    return CostEstimate(lines=lines, total=round(sum(line.amount for line in lines), 2))
