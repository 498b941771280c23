"""
Category Index Set and Memory Store

Each category owns a flat inner-product vector index and an item list.
Position i in the index is position i in the item list; both grow only
by appending, under the category's lock.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from contextual_retrieval.errors import InvalidCategoryError
from contextual_retrieval.models.memory_item import (
    DEFAULT_CATEGORY,
    MemoryCategory,
    MemoryItem,
    parse_category,
)

logger = logging.getLogger("contextual_retrieval.store")


def resolve_category(value: Any) -> MemoryCategory:
    """Map a category name to the enum, falling back to the default category."""
    try:
        return parse_category(value)
    except InvalidCategoryError:
        logger.warning(f"Invalid category: {value}. Defaulting to '{DEFAULT_CATEGORY.value}'.")
        return DEFAULT_CATEGORY


class CategoryIndex:
    """
    Append-only exact inner-product index over fixed-dimension vectors.

    Vectors are kept as rows; the search matrix is rebuilt lazily after
    appends.
    """

    def __init__(self, dimension: int):
        if dimension <= 0:
            raise ValueError("Vector dimension must be positive.")
        self.dimension = dimension
        self._rows: List[np.ndarray] = []
        self._matrix: Optional[np.ndarray] = None

    def __len__(self) -> int:
        return len(self._rows)

    def _as_vector(self, vector: Sequence[float]) -> np.ndarray:
        arr = np.asarray(vector, dtype=np.float32)
        if arr.shape != (self.dimension,):
            raise ValueError(
                f"Vector dimension mismatch: {arr.shape} vs ({self.dimension},)"
            )
        return arr

    def add(self, vector: Sequence[float]) -> int:
        """Append a vector and return its position."""
        row = self._as_vector(vector)
        self._rows.append(row)
        self._matrix = None
        return len(self._rows) - 1

    def search(self, query: Sequence[float], k: int) -> List[Tuple[int, float]]:
        """
        Return up to k (position, similarity) pairs, highest similarity first.

        Equal similarities keep insertion order.
        """
        if not self._rows or k <= 0:
            return []

        query_vector = self._as_vector(query)
        if self._matrix is None:
            self._matrix = np.vstack(self._rows)

        similarities = self._matrix @ query_vector
        k_actual = min(k, similarities.shape[0])
        order = np.argsort(-similarities, kind="stable")[:k_actual]
        return [(int(pos), float(similarities[pos])) for pos in order]


class MemoryStore:
    """
    Per-category item lists paired with their vector indices.

    One lock per category covers both the index and the item list, so a
    search never observes one side of a half-finished insert.
    """

    def __init__(self, dimension: int):
        self.dimension = dimension
        self._indices: Dict[MemoryCategory, CategoryIndex] = {}
        self._items: Dict[MemoryCategory, List[MemoryItem]] = {}
        self._locks: Dict[MemoryCategory, threading.RLock] = {}

        for category in MemoryCategory:
            self._indices[category] = CategoryIndex(dimension)
            self._items[category] = []
            self._locks[category] = threading.RLock()

    @property
    def categories(self) -> List[MemoryCategory]:
        return list(MemoryCategory)

    def insert(self, category: Any, item: MemoryItem) -> MemoryItem:
        """
        Store an item under ``category``.

        Unknown categories fall back to the default category. The stored
        item always carries the category it was filed under.
        """
        resolved = resolve_category(category)
        if item.category != resolved:
            item = item.model_copy(update={"category": resolved})

        with self._locks[resolved]:
            # add() validates the vector before mutating anything
            self._indices[resolved].add(item.embedding)
            self._items[resolved].append(item)

        return item

    def search(
        self,
        category: MemoryCategory,
        query_vector: Sequence[float],
        k: int,
    ) -> List[Tuple[int, float]]:
        with self._locks[category]:
            return self._indices[category].search(query_vector, k)

    def get(self, category: MemoryCategory, position: int) -> MemoryItem:
        # Positions stay valid forever: both sequences are append-only
        with self._locks[category]:
            return self._items[category][position]

    def count(self, category: MemoryCategory) -> int:
        with self._locks[category]:
            return len(self._items[category])

    def items(self, category: MemoryCategory) -> List[MemoryItem]:
        """Snapshot of a category's items in insertion order."""
        with self._locks[category]:
            return list(self._items[category])

    def counts(self) -> Dict[str, int]:
        return {category.value: self.count(category) for category in MemoryCategory}

    def total(self) -> int:
        return sum(self.count(category) for category in MemoryCategory)
