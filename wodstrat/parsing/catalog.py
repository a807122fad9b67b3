"""Movement catalog lookup by name, alias and fuzzy text search."""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

import yaml

from wodstrat.config import get_settings
from wodstrat.models.reference import MovementDefinition

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[-_]+")
_SPACES = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lower-case, treat hyphens and underscores as spaces, collapse whitespace."""
    return _SPACES.sub(" ", _SEPARATORS.sub(" ", name.lower())).strip()


def _singular(name: str) -> str | None:
    if name.endswith("es") and len(name) > 3:
        return name[:-2]
    if name.endswith("s") and len(name) > 2:
        return name[:-1]
    return None


class MovementCatalog:
    """
    In-memory index over movement definitions.

    Every canonical name, display name and alias is indexed in normalized
    form. Lookups try the exact key first, then a singular form.
    """

    def __init__(self, movements: Iterable[MovementDefinition]):
        self.movements: list[MovementDefinition] = list(movements)
        self._index: dict[str, MovementDefinition] = {}
        for movement in self.movements:
            for key in (movement.canonical_name, movement.display_name, *movement.aliases):
                normalized = normalize_name(key)
                if normalized and normalized not in self._index:
                    self._index[normalized] = movement
        # longest keys first so "power clean" wins over "clean" in text search
        self._search_keys = sorted(self._index, key=len, reverse=True)
        self._search_patterns = {
            key: re.compile(rf"(?<![a-z0-9]){re.escape(key)}(?![a-z0-9])") for key in self._search_keys
        }

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MovementCatalog":
        """Build a catalog from a YAML file with a top-level ``movements`` list."""
        with Path(path).open("r", encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        entries = data.get("movements", [])
        if not entries:
            logger.warning("No movements found in %s - catalog is empty", path)
        movements = [
            MovementDefinition(
                id=entry["id"],
                canonical_name=entry["canonical_name"],
                display_name=entry.get("display_name", entry["canonical_name"]),
                category=entry["category"],
                is_bodyweight=entry.get("is_bodyweight", False),
                aliases=tuple(entry.get("aliases", ())),
            )
            for entry in entries
        ]
        logger.debug("Loaded %d movements from %s", len(movements), path)
        return cls(movements)

    def __len__(self) -> int:
        return len(self.movements)

    def find(self, name: str) -> MovementDefinition | None:
        """Exact lookup against canonical names, display names and aliases."""
        if not name:
            return None
        key = normalize_name(name)
        movement = self._index.get(key)
        if movement is None:
            singular = _singular(key)
            if singular is not None:
                movement = self._index.get(singular)
        return movement

    def search(self, text: str) -> list[MovementDefinition]:
        """
        Find catalog movements named anywhere inside free text.

        A shorter key that lies inside a longer matched key is not counted,
        so "Power Cleans" yields only the power clean.

        Returns:
            Distinct movements in order of key length
        """
        haystack = normalize_name(text)
        if not haystack:
            return []

        claimed: list[tuple[int, int]] = []
        found: list[MovementDefinition] = []
        for key in self._search_keys:
            for match in self._search_patterns[key].finditer(haystack):
                start, end = match.span()
                if any(start < c_end and c_start < end for c_start, c_end in claimed):
                    continue
                claimed.append((start, end))
                movement = self._index[key]
                if all(existing.id != movement.id for existing in found):
                    found.append(movement)
        return found

    def is_known(self, name: str) -> bool:
        return self.find(name) is not None

    def get(self, movement_id: int) -> MovementDefinition | None:
        return next((m for m in self.movements if m.id == movement_id), None)

    def display_names(self) -> list[str]:
        """One display name per movement, in catalog order."""
        return [movement.display_name for movement in self.movements]


@lru_cache()
def load_catalog(path: str | None = None) -> MovementCatalog:
    """Return the cached catalog, reading the configured YAML file on first use."""
    catalog_path = path or get_settings().movement_catalog_path
    return MovementCatalog.from_yaml(catalog_path)
