"""CSV input/output utilities for roster files."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from proximity_map.geo import validate_coordinate
from proximity_map.models import Entity

logger = logging.getLogger(__name__)

FIELDNAMES: tuple[str, ...] = ("id", "name", "latitude", "longitude", "is_fixed", "primary")
REQUIRED_FIELDS: tuple[str, ...] = ("id", "name", "latitude", "longitude")

_TRUTHY = {"1", "true", "yes", "y"}


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


@dataclass(frozen=True, slots=True)
class LoadedRoster:
    """Entities read from a roster CSV, primary first."""

    primary: Entity
    others: tuple[Entity, ...]
    summary: CsvSummary


def _parse_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _parse_row(row: dict[str, str]) -> Entity:
    entity_id = row["id"].strip()
    name = row["name"].strip()
    if not entity_id:
        raise ValueError("empty id")
    lat, lon = validate_coordinate(float(row["latitude"].strip()), float(row["longitude"].strip()))
    return Entity(
        id=entity_id,
        name=name or entity_id,
        latitude=lat,
        longitude=lon,
        is_fixed=_parse_bool(row.get("is_fixed")),
    )


def load_roster(csv_path: str | Path) -> LoadedRoster:
    """Load a roster CSV.

    Columns: ``id,name,latitude,longitude`` (required), ``is_fixed`` and
    ``primary`` (optional, truthy values: 1/true/yes). If no row is marked
    primary, the first parsed row is used.

    Raises:
        KeyError: A required column is missing.
        ValueError: File has no valid rows, duplicate ids or several primaries.
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[tuple[Entity, bool]] = []

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = tuple(reader.fieldnames or ())
        missing = [c for c in REQUIRED_FIELDS if c not in fieldnames]
        if missing:
            raise KeyError(f"roster CSV is missing columns {missing}; found {list(fieldnames)}")

        for row in reader:
            rows_total += 1
            try:
                parsed.append((_parse_row(row), _parse_bool(row.get("primary"))))
            except (ValueError, TypeError, AttributeError) as exc:
                # InvalidCoordinateError is a ValueError too
                logger.warning("skipping roster row %d: %s", rows_total, exc)
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("%s roster row(s) could not be parsed and were skipped", summary.rows_skipped)
    if not parsed:
        raise ValueError(f"no valid entities in {str(p)!r}")

    seen: set[str] = set()
    for entity, _ in parsed:
        if entity.id in seen:
            raise ValueError(f"duplicate entity id in {str(p)!r}: {entity.id!r}")
        seen.add(entity.id)

    flagged = [i for i, (_, is_primary) in enumerate(parsed) if is_primary]
    if len(flagged) > 1:
        ids = [parsed[i][0].id for i in flagged]
        raise ValueError(f"more than one primary entity: {ids}")
    primary_idx = flagged[0] if flagged else 0

    primary = parsed[primary_idx][0]
    others = tuple(e for i, (e, _) in enumerate(parsed) if i != primary_idx)
    return LoadedRoster(primary=primary, others=others, summary=summary)


def write_roster_csv(entities: Iterable[Entity], out_path: str | Path, primary_id: str | None = None) -> None:
    """Write entities to a roster CSV.

    Args:
        entities: Entities in roster order.
        out_path: Output path.
        primary_id: Id to flag as primary; defaults to the first entity.
    """

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(FIELDNAMES))
        w.writeheader()
        for i, e in enumerate(entities):
            is_primary = e.id == primary_id if primary_id is not None else i == 0
            w.writerow(
                {
                    "id": e.id,
                    "name": e.name,
                    "latitude": e.latitude,
                    "longitude": e.longitude,
                    "is_fixed": int(e.is_fixed),
                    "primary": int(is_primary),
                }
            )
