"""Pairwise proximity detection over a roster of entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Sequence

from proximity_map.geo import is_inside_circle
from proximity_map.models import Entity

IN_RANGE_COLOR: Final[str] = "red"
DEFAULT_COLOR: Final[str] = "blue"


@dataclass(frozen=True, slots=True)
class ProximityResult:
    """Derived proximity state for one roster snapshot.

    Attributes:
        in_range: Ids of every entity that appears in at least one close pair.
        alerts: One message per close pair, in i<j enumeration order.
    """

    in_range: frozenset[str] = frozenset()
    alerts: tuple[str, ...] = ()

    def is_in_range(self, entity_id: str) -> bool:
        return entity_id in self.in_range

    def color_for(self, entity_id: str) -> str:
        """Circle/marker color for an entity: highlighted when in range."""

        return IN_RANGE_COLOR if entity_id in self.in_range else DEFAULT_COLOR


def alert_message(a: Entity, b: Entity) -> str:
    return f"{a.name} and {b.name} are within range!"


def evaluate_proximity(entities: Sequence[Entity], threshold_m: float) -> ProximityResult:
    """Find every pair of entities whose centers are within ``2 * threshold_m``.

    The boundary is inclusive. Pairs are enumerated as (i, j) with i < j over
    the given order, so alerts follow roster order with the primary first.

    Args:
        entities: Roster snapshot (primary first).
        threshold_m: Circle radius in meters.

    Returns:
        ProximityResult with the in-range id set and the ordered alerts.
    """

    limit_m = threshold_m * 2.0
    in_range: set[str] = set()
    alerts: list[str] = []

    for i, a in enumerate(entities):
        for b in entities[i + 1 :]:
            if is_inside_circle(b.latitude, b.longitude, a.latitude, a.longitude, limit_m):
                in_range.add(a.id)
                in_range.add(b.id)
                alerts.append(alert_message(a, b))

    return ProximityResult(in_range=frozenset(in_range), alerts=tuple(alerts))
