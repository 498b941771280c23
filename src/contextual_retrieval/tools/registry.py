"""
Tool Registry

Central registry for the operations exposed to the hosting transport.
Inputs are validated against each tool's pydantic schema before they
reach the engine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from contextual_retrieval.errors import ToolNotFoundError, ToolValidationError

logger = logging.getLogger("contextual_retrieval.tools")


@dataclass
class ToolDefinition:
    """A named operation with its input schema and async handler."""
    name: str
    description: str
    schema: Type[BaseModel]
    execute: Callable[[BaseModel], Awaitable[Any]]


def format_validation_errors(error: ValidationError) -> List[str]:
    """One ``"path: message"`` entry per failing field."""
    messages = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"])
        messages.append(f"{path}: {err['msg']}")
    return messages


class ToolRegistry:
    """Registry of tool definitions, keyed by name."""

    def __init__(self):
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        if tool.name in self._tools:
            logger.warning(f'Tool with name "{tool.name}" is already registered. Overwriting...')
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def all(self) -> List[ToolDefinition]:
        return list(self._tools.values())

    def describe(self) -> List[Dict[str, Any]]:
        """Name, description and JSON schema of every tool."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.schema.model_json_schema(),
            }
            for tool in self._tools.values()
        ]

    async def execute(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        Validate ``payload`` and run the named tool.

        Raises:
            ToolNotFoundError: If no tool has this name
            ToolValidationError: If the payload does not match the schema
        """
        tool = self.get(name)
        if tool is None:
            raise ToolNotFoundError(f'Tool "{name}" not found')

        try:
            validated = tool.schema.model_validate(payload or {})
        except ValidationError as e:
            raise ToolValidationError(format_validation_errors(e)) from e

        logger.info(f"Executing tool: {name}")
        return await tool.execute(validated)
