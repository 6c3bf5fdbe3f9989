from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from pathlib import Path

from proximity_map.csv_io import write_roster_csv
from proximity_map.models import Entity


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float


def generate_entities(
    *,
    count: int,
    seed: int,
    clusters: list[Cluster],
    spread_deg: float = 0.01,
    fixed_ratio: float = 0.1,
) -> list[Entity]:
    """Generate a fake roster scattered around a few neighbourhoods."""

    rng = random.Random(seed)
    out: list[Entity] = []
    for i in range(count):
        cluster = clusters[0] if i == 0 else rng.choice(clusters)
        out.append(
            Entity(
                id=str(i + 1),
                name="Current User" if i == 0 else f"User {i + 1}",
                latitude=round(cluster.lat + rng.uniform(-spread_deg, spread_deg), 7),
                longitude=round(cluster.lon + rng.uniform(-spread_deg, spread_deg), 7),
                # The viewer always starts movable
                is_fixed=i > 0 and rng.random() < fixed_ratio,
            )
        )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake roster.csv for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/roster.csv", help="Output CSV path")
    p.add_argument("--count", type=int, default=12, help="Number of entities (first one is primary)")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--spread-deg", type=float, default=0.01, help="Max offset from a cluster center")
    args = p.parse_args()

    clusters = [
        Cluster("lower_manhattan", 40.7128, -74.0060),
        Cluster("midtown", 40.7549, -73.9840),
        Cluster("brooklyn_heights", 40.6960, -73.9950),
    ]

    entities = generate_entities(count=args.count, seed=args.seed, clusters=clusters, spread_deg=args.spread_deg)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    write_roster_csv(entities, out_path)

    print(f"Generated: {out_path} (entities={len(entities)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
