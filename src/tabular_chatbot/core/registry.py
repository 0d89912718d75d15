from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from tabular_chatbot.core.data_loader import (
    build_clients,
    build_hair_tips,
    build_leg_exercises,
    build_nutrition_tips,
)
from tabular_chatbot.core.schema import Dataset

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when a registry is built with conflicting or empty keywords."""


def normalize_keyword(text: str) -> str:
    return str(text or "").strip().lower()


class DatasetRegistry:
    """
    Static mapping from command keyword to dataset.

    Keywords are normalized (trimmed, lower-cased) on registration and on
    lookup. Lookup is exact; there is no partial or fuzzy matching.
    """

    def __init__(self, datasets: Iterable[Dataset]) -> None:
        by_keyword: Dict[str, Dataset] = {}
        for ds in datasets:
            key = normalize_keyword(ds.keyword)
            if not key:
                raise RegistryError(f"Dataset {ds!r} has an empty keyword.")
            if key in by_keyword:
                raise RegistryError(f"Keyword {key!r} is registered twice.")
            by_keyword[key] = ds
        self._by_keyword = by_keyword

    @property
    def keywords(self) -> Tuple[str, ...]:
        return tuple(self._by_keyword)

    def resolve(self, keyword: str) -> Optional[Dataset]:
        """Return the dataset for `keyword`, or None when no dataset is registered under it."""
        return self._by_keyword.get(normalize_keyword(keyword))

    def __contains__(self, keyword: object) -> bool:
        return isinstance(keyword, str) and normalize_keyword(keyword) in self._by_keyword

    def __iter__(self) -> Iterator[Dataset]:
        return iter(self._by_keyword.values())

    def __len__(self) -> int:
        return len(self._by_keyword)

    def __repr__(self) -> str:
        return f"DatasetRegistry({list(self._by_keyword)})"


# ---------------------------------------------------------------------------
# Process-wide registries (built once, then shared read-only)
# ---------------------------------------------------------------------------

_TIPS_REGISTRY: Optional[DatasetRegistry] = None
_SALON_REGISTRY: Optional[DatasetRegistry] = None


def load_tips_registry(refresh: bool = False) -> DatasetRegistry:
    """hair tips / nutrition tips / leg exercises."""
    global _TIPS_REGISTRY
    if _TIPS_REGISTRY is not None and not refresh:
        return _TIPS_REGISTRY

    _TIPS_REGISTRY = DatasetRegistry([build_hair_tips(), build_nutrition_tips(), build_leg_exercises()])
    logger.info("Tips registry ready: %s", _TIPS_REGISTRY.keywords)
    return _TIPS_REGISTRY


def load_salon_registry(refresh: bool = False) -> DatasetRegistry:
    """show clients."""
    global _SALON_REGISTRY
    if _SALON_REGISTRY is not None and not refresh:
        return _SALON_REGISTRY

    _SALON_REGISTRY = DatasetRegistry([build_clients()])
    logger.info("Salon registry ready: %s", _SALON_REGISTRY.keywords)
    return _SALON_REGISTRY
