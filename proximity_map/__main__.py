"""Module entry point: python -m proximity_map ..."""

from __future__ import annotations

from proximity_map.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
