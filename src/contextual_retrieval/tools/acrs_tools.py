"""
Contextual retrieval tools

Input schemas and handlers for the operations the engine exposes.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contextual_retrieval.engine.base import ContextualRetrievalEngine
from contextual_retrieval.engine.vector_index import resolve_category
from contextual_retrieval.models.memory_item import DEFAULT_CATEGORY, MemoryCategory
from contextual_retrieval.tools.registry import ToolDefinition, ToolRegistry


class ProcessRequestInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_text: str = Field(
        ..., alias="requestText", description="The request text to process"
    )


class EnhancePromptInput(BaseModel):
    prompt: str = Field(..., description="The prompt to enhance with context")


class GetMetricsInput(BaseModel):
    pass


class SubmitFeedbackInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_text: str = Field(
        ..., alias="requestText", description="The request that was processed"
    )
    useful: bool = Field(..., description="Whether the context was useful")
    feedback: Optional[str] = Field(default=None, description="Additional feedback")


class AddMemoryInput(BaseModel):
    content: str = Field(..., description="The content to add to memory")
    category: MemoryCategory = Field(
        default=DEFAULT_CATEGORY, description="The category of the content"
    )
    metadata: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional metadata about the content"
    )

    @field_validator("category", mode="before")
    @classmethod
    def _fallback_category(cls, value: Any) -> MemoryCategory:
        # Unknown names are filed under the default category, never rejected
        if value is None:
            return DEFAULT_CATEGORY
        return resolve_category(value)


class CategoryProbeInput(BaseModel):
    pass


def register_acrs_tools(registry: ToolRegistry, engine: ContextualRetrievalEngine) -> ToolRegistry:
    """Register every contextual retrieval operation on ``registry``."""

    async def process(args: ProcessRequestInput):
        return await engine.process_request(args.request_text)

    async def enhance(args: EnhancePromptInput):
        return await engine.enhance_prompt(args.prompt)

    async def metrics(args: GetMetricsInput):
        return engine.get_metrics().model_dump()

    async def feedback(args: SubmitFeedbackInput):
        return await engine.submit_feedback(args.request_text, args.useful, args.feedback)

    async def add_memory(args: AddMemoryInput):
        return await engine.add_memory(args.content, args.category, args.metadata)

    registry.register(ToolDefinition(
        name="acrs_process",
        description=(
            "Process a request using the Automatic Contextual Retrieval System to enhance it "
            "with relevant information from vector memory."
        ),
        schema=ProcessRequestInput,
        execute=process,
    ))
    registry.register(ToolDefinition(
        name="acrs_enhance_prompt",
        description="Enhance a prompt with contextual information for use with an LLM.",
        schema=EnhancePromptInput,
        execute=enhance,
    ))
    registry.register(ToolDefinition(
        name="acrs_get_metrics",
        description="Get performance metrics for the contextual retrieval system.",
        schema=GetMetricsInput,
        execute=metrics,
    ))
    registry.register(ToolDefinition(
        name="acrs_submit_feedback",
        description="Submit feedback on the usefulness of contextual information.",
        schema=SubmitFeedbackInput,
        execute=feedback,
    ))
    registry.register(ToolDefinition(
        name="acrs_add_memory",
        description="Adds a memory entry with categorized content to the vector store.",
        schema=AddMemoryInput,
        execute=add_memory,
    ))

    test_categories = getattr(engine, "test_categories", None)
    if test_categories is not None:
        async def run_category_test(args: CategoryProbeInput):
            return await test_categories()

        registry.register(ToolDefinition(
            name="acrs_test_categories",
            description="Tests the context categories by adding sample content and retrieving it.",
            schema=CategoryProbeInput,
            execute=run_category_test,
        ))

    return registry
