"""
Prompt Composer

Wraps ranked memories around the caller's prompt.
"""

from typing import List

from contextual_retrieval.models.retrieval import EnhancedPrompt, ScoredMemory

ENHANCED_PROMPT_TEMPLATE = """I'll provide you with some relevant information to help answer the following question.
Please consider this contextual information when formulating your response.

RELEVANT CONTEXT:
{context}

USER QUESTION:
{prompt}

Please answer the question based on all of the information above. If the contextual information is not relevant or sufficient, rely on your own knowledge."""


def format_context_item(result: ScoredMemory) -> str:
    return f"[{result.item.category.value.upper()}] {result.item.content}"


class PromptComposer:
    """Formats ranked memories into the fixed context template."""

    def __init__(self, template: str = ENHANCED_PROMPT_TEMPLATE):
        self.template = template

    def compose(self, original_prompt: str, results: List[ScoredMemory]) -> EnhancedPrompt:
        """
        Build the enhanced prompt.

        With no results the original prompt passes through untouched.
        """
        if not results:
            return EnhancedPrompt(
                enhanced_prompt=original_prompt,
                context_items=[],
                original_prompt=original_prompt,
            )

        context = "\n\n".join(format_context_item(r) for r in results)
        enhanced = self.template.format(context=context, prompt=original_prompt).strip()

        return EnhancedPrompt(
            enhanced_prompt=enhanced,
            context_items=[r.item for r in results],
            original_prompt=original_prompt,
        )
