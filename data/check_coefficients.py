#!/usr/bin/env python3
"""
Inspect the coefficient dataset.

Usage:
    python data/check_coefficients.py                 # list every system
    python data/check_coefficients.py uni1_zebra      # categories of one system
    python data/check_coefficients.py --path other.json uni1_zebra

Loads the dataset through the same integrity checks the service runs at
startup, so a malformed file fails here first.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sash_coefficients.config import settings  # noqa: E402
from sash_coefficients.errors import DatasetIntegrityError  # noqa: E402
from sash_coefficients.table_store import CoefficientTable  # noqa: E402


def format_table(headers: list, rows: list) -> str:
    """Render rows as a box-drawn text table."""
    widths = [
        max([len(h)] + [len(row[i]) for row in rows])
        for i, h in enumerate(headers)
    ]
    separator = "┼".join("─" * (w + 2) for w in widths)

    def line(cells):
        return "│ " + " │ ".join(c.ljust(widths[i]) for i, c in enumerate(cells)) + " │"

    out = ["┌" + separator.replace("┼", "┬") + "┐", line(headers), "├" + separator + "┤"]
    out.extend(line(row) for row in rows)
    out.append("└" + separator.replace("┼", "┴") + "┘")
    return "\n".join(out)


def describe_systems(table: CoefficientTable) -> str:
    keys = sorted(table.systems())
    rows = [
        [str(n), key, str(len(table.categories(key)))]
        for n, key in enumerate(keys, start=1)
    ]
    return (
        f"Systems in dataset: {len(keys)}\n\n"
        + format_table(["#", "System key", "Categories"], rows)
    )


def describe_system(table: CoefficientTable, system_key: str) -> str:
    rows = []
    for n, category in enumerate(table.categories(system_key), start=1):
        grid = table.lookup_grid(system_key, category)
        rows.append([
            str(n),
            category,
            f"{grid.widths[0]:g}m - {grid.widths[-1]:g}m",
            f"{grid.heights[0]:g}m - {grid.heights[-1]:g}m",
            str(len(grid.widths)),
            str(len(grid.heights)),
        ])
    return (
        f'Categories for system "{system_key}": {len(rows)}\n\n'
        + format_table(
            ["#", "Category", "Width range", "Height range", "Width points", "Height points"],
            rows,
        )
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Inspect the coefficient dataset")
    parser.add_argument("system_key", nargs="?", help="show categories for this system")
    parser.add_argument("--path", default=settings.COEFFICIENTS_PATH, help="dataset file")
    args = parser.parse_args(argv)

    try:
        table = CoefficientTable.load(args.path)
    except DatasetIntegrityError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.system_key is None:
        print(describe_systems(table))
        return 0

    if not table.has_system(args.system_key):
        print(f'System "{args.system_key}" not found in {args.path}', file=sys.stderr)
        print("Known systems:", file=sys.stderr)
        for key in sorted(table.systems()):
            print(f"  - {key}", file=sys.stderr)
        return 1

    print(describe_system(table, args.system_key))
    return 0


if __name__ == "__main__":
    sys.exit(main())
