"""
LLM Client

Unified interface for chat completions against an OpenAI-compatible
endpoint (OpenRouter by default). Handles model aliases, option mapping,
the fixed request timeout and error classification.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Union

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI
from pydantic import BaseModel, Field

from contextual_retrieval.config import LLMConfig
from contextual_retrieval.errors import (
    LLMAPIError,
    LLMConfigurationError,
    LLMNetworkError,
    LLMTimeoutError,
)

logger = logging.getLogger("contextual_retrieval.llm")

API_KEY_ERROR = "OpenRouter API key not found. Set the OPENROUTER_API_KEY environment variable."
NETWORK_ERROR = "Network error occurred while calling the LLM API: "
API_ERROR = "LLM API returned an error: "


class LLMMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class LLMOptions(BaseModel):
    """Optional sampling parameters; unset fields are not sent."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    stop: Optional[List[str]] = None
    tools: Optional[List[Dict[str, Any]]] = None
    tool_choice: Optional[Union[str, Dict[str, Any]]] = None


class LLMResponse(BaseModel):
    """The parts of a chat completion the system consumes."""
    id: Optional[str] = None
    model: Optional[str] = None
    text: str = ""
    finish_reason: Optional[str] = None
    usage: Dict[str, int] = Field(default_factory=dict)


class LLMClient:
    """
    Client for chat completions.

    Requests carry a fixed timeout and are never retried; failures are
    raised as LLMTimeoutError, LLMAPIError or LLMNetworkError so callers can
    choose between retrying and failing fast.
    """

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or LLMConfig()
        self.model_aliases = {
            "auto": self.config.default_model,
            "gemini": self.config.default_model,
            "quasar": "openrouter/quasar-alpha",
        }
        self.client: Optional[AsyncOpenAI] = None
        if self.config.api_key:
            self.client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                max_retries=0,
                default_headers={
                    "HTTP-Referer": self.config.referer,
                    "X-Title": self.config.title,
                },
            )

    def resolve_model(self, model: str) -> str:
        return self.model_aliases.get(model, model)

    @staticmethod
    def _build_options(options: Optional[LLMOptions]) -> Dict[str, Any]:
        if options is None:
            return {}
        body = options.model_dump(exclude_none=True)
        # top_k is not part of the OpenAI schema; OpenRouter accepts it as an extra field
        top_k = body.pop("top_k", None)
        if top_k is not None:
            body["extra_body"] = {"top_k": top_k}
        return body

    async def chat_complete(
        self,
        model: str,
        messages: List[LLMMessage],
        options: Optional[LLMOptions] = None,
    ) -> LLMResponse:
        """
        Perform one chat completion call.

        Raises:
            LLMConfigurationError: If no API key is configured
            LLMTimeoutError: If the request exceeds the configured timeout
            LLMAPIError: If the API responds with an error status
            LLMNetworkError: If the API cannot be reached
        """
        if self.client is None:
            logger.error(API_KEY_ERROR)
            raise LLMConfigurationError(API_KEY_ERROR)

        resolved_model = self.resolve_model(model)

        try:
            response = await self.client.chat.completions.create(
                model=resolved_model,
                messages=[m.model_dump() for m in messages],
                **self._build_options(options),
            )
        except APITimeoutError as e:
            message = (
                f"LLM API request timed out after {self.config.timeout_seconds:g} seconds."
            )
            logger.error(message)
            raise LLMTimeoutError(message) from e
        except APIStatusError as e:
            body = e.body if e.body is not None else e.response.text
            message = f"{API_ERROR}{e.status_code} - {body}"
            logger.error(message)
            raise LLMAPIError(message, status_code=e.status_code, body=body) from e
        except APIConnectionError as e:
            logger.error(NETWORK_ERROR + str(e))
            raise LLMNetworkError(NETWORK_ERROR + str(e)) from e

        # OpenRouter reports some upstream failures as a 200 with an error and no choices
        choices = getattr(response, "choices", None)
        if not choices:
            body = getattr(response, "error", None)
            message = f"{API_ERROR}200 - {body if body is not None else 'response contained no choices'}"
            logger.error(message)
            raise LLMAPIError(message, status_code=200, body=body)

        choice = choices[0]
        usage = {}
        if getattr(response, "usage", None):
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": getattr(response.usage, "completion_tokens", 0),
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            id=getattr(response, "id", None),
            model=getattr(response, "model", None) or resolved_model,
            text=choice.message.content or "",
            finish_reason=getattr(choice, "finish_reason", None),
            usage=usage,
        )

    async def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        options: Optional[LLMOptions] = None,
    ) -> str:
        """Generate text using the default model."""
        messages = []
        if system_prompt:
            messages.append(LLMMessage(role="system", content=system_prompt))
        messages.append(LLMMessage(role="user", content=prompt))

        response = await self.chat_complete("auto", messages, options)
        return response.text
