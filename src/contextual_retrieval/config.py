"""
Configuration

Loads and manages system configuration from acrs_config.yaml.
The category set is closed; only the weights are configurable.
"""

import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from contextual_retrieval.models.memory_item import DEFAULT_CATEGORY_WEIGHTS, MemoryCategory


DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_CHAT_MODEL = "openrouter/quasar-alpha"


class RetrievalConfig(BaseModel):
    """Ranking configuration."""
    max_context_items: int = Field(default=15, gt=0)
    similarity_threshold: float = 0.75
    category_weights: Dict[MemoryCategory, float] = Field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS)
    )

    @field_validator("category_weights")
    @classmethod
    def _fill_missing_weights(cls, weights: Dict[MemoryCategory, float]) -> Dict[MemoryCategory, float]:
        # Partial overrides keep the defaults for every other category
        merged = dict(DEFAULT_CATEGORY_WEIGHTS)
        merged.update(weights)
        return merged

    def weight_for(self, category: MemoryCategory) -> float:
        return self.category_weights[category]


class CacheConfig(BaseModel):
    """Lifetime shared by the embedding, retrieval and response caches."""
    lifetime_seconds: float = Field(default=24 * 60 * 60, gt=0)
    max_entries: Optional[int] = Field(
        default=None,
        gt=0,
        description="Optional LRU bound per cache tier; None keeps tiers unbounded",
    )


class EmbeddingConfig(BaseModel):
    """Embedding model configuration."""
    provider: str = "openai"
    model: str = "text-embedding-3-small"
    dimension: Optional[int] = Field(
        default=None,
        gt=0,
        description="Vector size; None uses the known size of the model",
    )
    api_key: Optional[str] = None
    base_url: Optional[str] = None


class LLMConfig(BaseModel):
    """Chat completion backend (any OpenAI-compatible endpoint, OpenRouter by default)."""
    default_model: str = DEFAULT_CHAT_MODEL
    api_key: Optional[str] = None
    base_url: str = DEFAULT_OPENROUTER_BASE_URL
    timeout_seconds: float = 60.0
    referer: str = "https://github.com/contextual-retrieval/contextual-retrieval"
    title: str = "Contextual Retrieval Server"
    temperature: float = 0.7


class MetricsConfig(BaseModel):
    """Bound for the latency and context-usage sample windows."""
    max_samples: int = Field(default=1000, gt=0)


class ACRSConfig(BaseModel):
    """Main configuration model."""
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    log_level: str = "INFO"


def load_config(config_path: Optional[Path] = None) -> ACRSConfig:
    """
    Load configuration from YAML file.

    Falls back to environment variables and defaults. Environment
    variables win over the file.
    """
    env_path = Path.cwd() / "setting" / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = Path.cwd() / "config" / "acrs_config.yaml"

    config_data = {}

    if config_path.exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    llm_data = config_data.setdefault("llm", {})
    if os.getenv("OPENROUTER_API_KEY"):
        llm_data["api_key"] = os.getenv("OPENROUTER_API_KEY")
    if os.getenv("OPENROUTER_BASE_URL"):
        llm_data["base_url"] = os.getenv("OPENROUTER_BASE_URL")
    if os.getenv("GEMINI_MODEL"):
        llm_data["default_model"] = os.getenv("GEMINI_MODEL")

    if os.getenv("OPENAI_API_KEY"):
        config_data.setdefault("embedding", {})["api_key"] = os.getenv("OPENAI_API_KEY")

    if os.getenv("LOG_LEVEL"):
        config_data["log_level"] = os.getenv("LOG_LEVEL")

    return ACRSConfig(**config_data)
