"""Data models for tracked entities and session parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class Entity:
    """A tracked point on the map.

    Attributes:
        id: Identifier, unique across the roster.
        name: Display name used in popups and alerts.
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        is_fixed: When True the entity ignores move requests.
    """

    id: str
    name: str
    latitude: float
    longitude: float
    is_fixed: bool = False

    @property
    def position(self) -> tuple[float, float]:
        """(latitude, longitude) pair, the order Leaflet/folium expect."""

        return (self.latitude, self.longitude)


DEFAULT_THRESHOLD_M: Final[float] = 500.0
DEFAULT_JITTER_DEGREES: Final[float] = 0.01


@dataclass(frozen=True, slots=True)
class SessionParams:
    """Parameters controlling a proximity session."""

    # Radius drawn around every entity. Alerts fire when two centers are
    # within twice this value, i.e. when the circles touch.
    threshold_m: float = DEFAULT_THRESHOLD_M
    # A random move shifts each axis by up to +/- half of this value.
    jitter_degrees: float = DEFAULT_JITTER_DEGREES


SEED_PRIMARY: Final[Entity] = Entity(
    id="1",
    name="Current User",
    latitude=40.7128,
    longitude=-74.006,
)

SEED_OTHERS: Final[tuple[Entity, ...]] = (
    Entity(id="2", name="User 2", latitude=40.7138, longitude=-74.007),
    Entity(id="3", name="User 3", latitude=40.7118, longitude=-74.005),
)
