"""
Memory Item Data Model

A memory item is a short text snippet stored with its embedding inside
exactly one category partition.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from contextual_retrieval.errors import InvalidCategoryError


class MemoryCategory(str, Enum):
    """Closed set of memory partitions, in search order."""
    GENERAL = "general"          # General knowledge and facts
    CONCEPTS = "concepts"        # Abstract concepts, theories, and explanations
    CODE = "code"                # Code snippets, patterns, and programming info
    PROCEDURES = "procedures"    # Step-by-step procedures and workflows
    DECISIONS = "decisions"      # Decision records and rationales
    PREFERENCES = "preferences"  # User preferences and history
    METADATA = "metadata"        # System metadata and control information


DEFAULT_CATEGORY = MemoryCategory.GENERAL

DEFAULT_CATEGORY_WEIGHTS: Dict[MemoryCategory, float] = {
    MemoryCategory.GENERAL: 1.0,
    MemoryCategory.CONCEPTS: 1.2,
    MemoryCategory.CODE: 1.3,
    MemoryCategory.PROCEDURES: 1.1,
    MemoryCategory.DECISIONS: 1.4,
    MemoryCategory.PREFERENCES: 1.5,
    MemoryCategory.METADATA: 0.5,
}


def parse_category(value: Any) -> MemoryCategory:
    """
    Strictly parse a category name.

    Raises:
        InvalidCategoryError: If the value is not one of the known categories.
    """
    if isinstance(value, MemoryCategory):
        return value
    try:
        return MemoryCategory(value)
    except ValueError as e:
        raise InvalidCategoryError(value) from e


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryItem(BaseModel):
    """
    A single stored memory.

    Items are immutable once created. ``metadata`` is opaque: it is stored
    and returned as given, never interpreted.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: UUID = Field(default_factory=uuid4)
    embedding: List[float] = Field(..., repr=False, description="Normalized embedding vector")
    content: str = Field(..., description="The raw memory text")
    category: MemoryCategory = DEFAULT_CATEGORY
    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Optional[Dict[str, Any]] = None

    def summary(self) -> Dict[str, Any]:
        """Serializable view without the embedding."""
        return {
            "id": str(self.id),
            "content": self.content,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }
