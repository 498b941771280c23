"""Pipelines package - memorize, retrieve and compose."""

from contextual_retrieval.pipelines.compose import PromptComposer
from contextual_retrieval.pipelines.memorize import MemorizePipeline
from contextual_retrieval.pipelines.retrieve import RetrievePipeline

__all__ = ["MemorizePipeline", "PromptComposer", "RetrievePipeline"]
