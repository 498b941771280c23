"""
Tool API Routes

List and execute the registered tools.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from contextual_retrieval.api.main import get_registry
from contextual_retrieval.errors import (
    EmbeddingError,
    LLMConfigurationError,
    LLMError,
    LLMTimeoutError,
    ModelUnavailableError,
    ToolNotFoundError,
    ToolValidationError,
)
from contextual_retrieval.tools.registry import ToolRegistry

router = APIRouter()


@router.get("")
async def list_tools(registry: ToolRegistry = Depends(get_registry)) -> List[Dict[str, Any]]:
    """Names, descriptions and input schemas of all tools."""
    return registry.describe()


@router.post("/{name}")
async def execute_tool(
    name: str,
    payload: Optional[Dict[str, Any]] = Body(default=None),
    registry: ToolRegistry = Depends(get_registry),
):
    """
    Execute a tool.

    LLM failures keep their kind in the status code so clients can decide
    whether to retry.
    """
    try:
        result = await registry.execute(name, payload)
    except ToolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ToolValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.messages})
    except LLMConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except LLMTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except LLMError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ModelUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except EmbeddingError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"result": result}
