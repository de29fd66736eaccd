"""
Coefficient table: the static grid dataset, loaded once per process.

Dataset document shape:

    {
        "<system_key>": {
            "<category>": {"widths": [...], "heights": [...], "values": [[...], ...]},
            ...
        },
        ...
    }

The legacy export wrapped the same data as
{"products": {"<system_key>": {"categories": {...}}}}; both shapes are accepted.

Every grid is validated at load time. A single violation aborts the load with
DatasetIntegrityError, so a malformed table is never served.
"""

import json
import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from pydantic import ValidationError

from .errors import DatasetIntegrityError
from .schemas import AxisRange, Grid, GridRanges

logger = logging.getLogger(__name__)


class CoefficientTable:
    """
    Read-only lookup of grids by system key and category.

    Built once from a dataset document; there are no mutators. Reloading means
    constructing a new table and swapping the reference.
    """

    def __init__(self, systems: Mapping[str, Mapping[str, Grid]]):
        frozen = {}
        for system_key, categories in systems.items():
            if not categories:
                raise DatasetIntegrityError(f"System {system_key!r} has no categories")
            frozen[system_key] = MappingProxyType(dict(categories))
        self._systems = MappingProxyType(frozen)

    # --- Construction ---

    @classmethod
    def from_document(cls, document: dict) -> "CoefficientTable":
        """Validate a parsed dataset document and build the table."""
        if not isinstance(document, dict):
            raise DatasetIntegrityError("Dataset root must be an object of system keys")

        # Legacy {"products": {key: {"categories": {...}}}} export
        if set(document.keys()) == {"products"} and isinstance(document["products"], dict):
            document = {
                key: (entry.get("categories") if isinstance(entry, dict) else entry)
                for key, entry in document["products"].items()
            }

        systems: Dict[str, Dict[str, Grid]] = {}
        for system_key, categories in document.items():
            if not isinstance(categories, dict):
                raise DatasetIntegrityError(
                    f"System {system_key!r} must map category names to grids"
                )
            if not categories:
                raise DatasetIntegrityError(f"System {system_key!r} has no categories")
            grids = {}
            for category, raw_grid in categories.items():
                try:
                    grids[category] = Grid.model_validate(raw_grid)
                except ValidationError as e:
                    raise DatasetIntegrityError(
                        f"Invalid grid for system {system_key!r}, category {category!r}: {e}"
                    ) from e
            systems[system_key] = grids
        return cls(systems)

    @classmethod
    def load(cls, path: str) -> "CoefficientTable":
        """Read and validate the dataset file. Any problem is fatal."""
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError as e:
            raise DatasetIntegrityError(f"Coefficient dataset not found: {path}") from e
        except json.JSONDecodeError as e:
            raise DatasetIntegrityError(f"Coefficient dataset is not valid JSON: {path}: {e}") from e

        table = cls.from_document(document)
        logger.info(
            "Loaded %d systems (%d grids) from %s",
            len(table._systems),
            sum(len(c) for c in table._systems.values()),
            path,
        )
        return table

    # --- Lookups ---

    def systems(self) -> FrozenSet[str]:
        """Known system keys."""
        return frozenset(self._systems.keys())

    def has_system(self, system_key: str) -> bool:
        return system_key in self._systems

    def categories(self, system_key: str) -> Tuple[str, ...]:
        """Category names of a system in dataset order. Empty for unknown systems."""
        entry = self._systems.get(system_key)
        if entry is None:
            return ()
        return tuple(entry.keys())

    def lookup_grid(self, system_key: str, category: str) -> Optional[Grid]:
        """Exact lookup. Returns None when the system or category is absent."""
        entry = self._systems.get(system_key)
        if entry is None:
            return None
        return entry.get(category)

    def match_system_key(self, system_key: str) -> Optional[str]:
        """Exact key if present, else the first key equal ignoring case."""
        if system_key in self._systems:
            return system_key
        wanted = system_key.casefold()
        for key in self._systems:
            if key.casefold() == wanted:
                return key
        return None

    def match_category(self, system_key: str, category: str) -> Optional[str]:
        """Exact category if present, else the first category equal ignoring case."""
        entry = self._systems.get(system_key)
        if entry is None:
            return None
        if category in entry:
            return category
        wanted = category.casefold()
        for name in entry:
            if name.casefold() == wanted:
                return name
        return None

    def ranges(self, system_key: str, category: str) -> Optional[GridRanges]:
        """Width/height bounds of one grid, or None when not found."""
        grid = self.lookup_grid(system_key, category)
        if grid is None:
            return None
        return GridRanges(
            system_key=system_key,
            category=category,
            width_range=AxisRange(min=grid.widths[0], max=grid.widths[-1]),
            height_range=AxisRange(min=grid.heights[0], max=grid.heights[-1]),
        )

    def __len__(self) -> int:
        return len(self._systems)
