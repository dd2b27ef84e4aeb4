"""
The playing field: a bounding rectangle and modifier zones.

Only the rectangle affects the simulation. A proposed node position is
legal iff it lies inside the bounds (edges included):

    min_x <= x <= max_x  and  min_y <= y <= max_y

Zones declare growth/energy/health modifiers. The turn pipeline does not
read them; `zone_modifiers_at` is the single place that resolves what a
point's modifiers would be, for display and for features built on top.
"""

from tendril.config import (
    ZONE_TYPES,
    Bounds,
    Environment,
    EnvironmentZone,
    ZoneProperties,
)


def default_environment() -> Environment:
    """The standard 200x200 field with a fertile center and rocky north."""
    return make_environment(
        Bounds(min_x=-100.0, max_x=100.0, min_y=-100.0, max_y=100.0),
        zones=(
            EnvironmentZone(
                id="fertile-center",
                type="fertile",
                bounds=Bounds(min_x=-20.0, max_x=20.0, min_y=-20.0, max_y=20.0),
                properties=ZoneProperties(
                    growth_multiplier=1.2, energy_cost=0.0, health_drain=0.0
                ),
            ),
            EnvironmentZone(
                id="rocky-north",
                type="rocky",
                bounds=Bounds(min_x=-100.0, max_x=100.0, min_y=50.0, max_y=100.0),
                properties=ZoneProperties(
                    growth_multiplier=0.7, energy_cost=5.0, health_drain=2.0
                ),
            ),
        ),
    )


def make_environment(
    bounds: Bounds, zones: tuple[EnvironmentZone, ...] = ()
) -> Environment:
    """
    Build a validated environment.

    Raises:
        ValueError: If any rectangle is inverted, a zone type is unknown,
            or zone ids repeat.
    """
    if not bounds.is_valid():
        raise ValueError(f"Invalid environment bounds: {bounds}")

    seen: set[str] = set()
    for zone in zones:
        if zone.type not in ZONE_TYPES:
            raise ValueError(f"Zone '{zone.id}' has unknown type '{zone.type}'")
        if not zone.bounds.is_valid():
            raise ValueError(f"Zone '{zone.id}' has invalid bounds: {zone.bounds}")
        if zone.id in seen:
            raise ValueError(f"Duplicate zone id '{zone.id}'")
        seen.add(zone.id)

    return Environment(bounds=bounds, zones=tuple(zones))


def contains(bounds: Bounds, x: float, y: float) -> bool:
    """Check whether (x, y) lies inside bounds, edges included."""
    return bounds.min_x <= x <= bounds.max_x and bounds.min_y <= y <= bounds.max_y


def zones_at(environment: Environment, x: float, y: float) -> list[EnvironmentZone]:
    """All zones containing (x, y), in declaration order."""
    return [zone for zone in environment.zones if contains(zone.bounds, x, y)]


def zone_modifiers_at(environment: Environment, x: float, y: float) -> ZoneProperties:
    """
    Combined modifiers for a point.

    Overlapping zones stack: growth multipliers multiply, energy costs and
    health drains add. A point outside every zone gets the neutral
    ZoneProperties().

    Args:
        environment: Field to query
        x, y: Point coordinates

    Returns:
        Combined ZoneProperties
    """
    multiplier = 1.0
    energy_cost = 0.0
    health_drain = 0.0
    for zone in zones_at(environment, x, y):
        multiplier *= zone.properties.growth_multiplier
        energy_cost += zone.properties.energy_cost
        health_drain += zone.properties.health_drain
    return ZoneProperties(
        growth_multiplier=multiplier,
        energy_cost=energy_cost,
        health_drain=health_drain,
    )
