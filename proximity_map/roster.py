"""Session roster: entity positions plus always-current proximity state."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import Callable, Iterable

from proximity_map.geo import validate_coordinate
from proximity_map.models import Entity, SessionParams
from proximity_map.proximity import ProximityResult, evaluate_proximity

logger = logging.getLogger(__name__)

Listener = Callable[["Roster"], None]


def _check_threshold(threshold_m: float) -> float:
    value = float(threshold_m)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"threshold must be a finite number >= 0, got {threshold_m!r}")
    return value


def _check_jitter(jitter_degrees: float) -> float:
    value = float(jitter_degrees)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"jitter must be a finite number of degrees >= 0, got {jitter_degrees!r}")
    return value


class Roster:
    """Ordered set of entities owned by a single session.

    The first entity is the primary one (the viewer). Every mutation
    recomputes the proximity result before it returns and before any
    listener is called, so ``proximity`` never lags behind positions.
    """

    def __init__(
        self,
        primary: Entity,
        others: Iterable[Entity] = (),
        params: SessionParams | None = None,
    ) -> None:
        params = params or SessionParams()
        entities = [primary, *others]

        seen: set[str] = set()
        for e in entities:
            if e.id in seen:
                raise ValueError(f"duplicate entity id: {e.id!r}")
            seen.add(e.id)
            validate_coordinate(e.latitude, e.longitude)

        self._entities: list[Entity] = entities
        self._primary_id = primary.id
        self._threshold_m = _check_threshold(params.threshold_m)
        self._jitter_degrees = _check_jitter(params.jitter_degrees)
        self._listeners: list[Listener] = []
        self._proximity = ProximityResult()
        self._recompute()

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    @property
    def primary(self) -> Entity:
        return self._entities[0]

    @property
    def others(self) -> tuple[Entity, ...]:
        return tuple(self._entities[1:])

    @property
    def threshold_m(self) -> float:
        return self._threshold_m

    @property
    def jitter_degrees(self) -> float:
        return self._jitter_degrees

    @property
    def proximity(self) -> ProximityResult:
        return self._proximity

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self):
        return iter(tuple(self._entities))

    def get(self, entity_id: str) -> Entity:
        return self._entities[self._index(entity_id)]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def move(self, entity_id: str, new_lat: float, new_lng: float) -> bool:
        """Move an entity to a new position.

        Returns:
            True if the entity moved, False if it is fixed.

        Raises:
            KeyError: Unknown entity id.
            InvalidCoordinateError: Target position is not a valid coordinate.
        """

        idx = self._index(entity_id)
        entity = self._entities[idx]
        if entity.is_fixed:
            logger.debug("ignoring move of fixed entity %s", entity_id)
            return False

        lat, lng = validate_coordinate(new_lat, new_lng)
        self._entities[idx] = replace(entity, latitude=lat, longitude=lng)
        logger.debug("moved %s to (%.6f, %.6f)", entity_id, lat, lng)
        self._changed()
        return True

    def toggle_fixed(self, entity_id: str) -> bool:
        """Flip the fixed flag of an entity and return the new value."""

        idx = self._index(entity_id)
        entity = self._entities[idx]
        updated = replace(entity, is_fixed=not entity.is_fixed)
        self._entities[idx] = updated
        logger.debug("entity %s is_fixed=%s", entity_id, updated.is_fixed)
        self._changed()
        return updated.is_fixed

    def set_threshold(self, threshold_m: float) -> None:
        self._threshold_m = _check_threshold(threshold_m)
        self._changed()

    def jitter(self, entity_id: str, rng: random.Random | None = None) -> bool:
        """Nudge an entity by a random offset, as a marker click does.

        Each axis moves by ``(random() - 0.5) * jitter_degrees``. Fixed
        entities stay put and the call returns False.
        """

        entity = self.get(entity_id)
        if entity.is_fixed:
            return False

        rnd = rng or random
        # Clamp so repeated clicks near a pole or the antimeridian stay valid.
        new_lat = min(90.0, max(-90.0, entity.latitude + (rnd.random() - 0.5) * self._jitter_degrees))
        new_lng = min(180.0, max(-180.0, entity.longitude + (rnd.random() - 0.5) * self._jitter_degrees))
        return self.move(entity_id, new_lat, new_lng)

    def move_primary_randomly(self, rng: random.Random | None = None) -> bool:
        return self.jitter(self._primary_id, rng)

    def _index(self, entity_id: str) -> int:
        for i, e in enumerate(self._entities):
            if e.id == entity_id:
                return i
        raise KeyError(f"unknown entity id: {entity_id!r}")

    def _recompute(self) -> None:
        self._proximity = evaluate_proximity(self._entities, self._threshold_m)

    def _changed(self) -> None:
        self._recompute()
        if self._proximity.alerts:
            logger.info("%d proximity alert(s)", len(self._proximity.alerts))
        for listener in list(self._listeners):
            listener(self)
