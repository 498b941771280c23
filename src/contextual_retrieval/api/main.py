"""
Contextual Retrieval API Server

FastAPI application exposing the registered tools over HTTP.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from contextual_retrieval.config import load_config
from contextual_retrieval.engine.retrieval_system import ContextualRetrievalSystem
from contextual_retrieval.logging_config import configure_logging
from contextual_retrieval.tools.acrs_tools import register_acrs_tools
from contextual_retrieval.tools.registry import ToolRegistry


def create_app(system: Optional[ContextualRetrievalSystem] = None) -> FastAPI:
    """
    Build the API around ``system``; a system is created from the loaded
    configuration when none is given.
    """
    if system is None:
        config = load_config()
        configure_logging(config.log_level)
        system = ContextualRetrievalSystem(config)

    registry = register_acrs_tools(ToolRegistry(), system)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await system.initialize()
        yield
        await system.close()

    app = FastAPI(
        title="Contextual Retrieval API",
        description="Categorized vector memory and prompt enhancement tools",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.system = system
    app.state.registry = registry

    from contextual_retrieval.api.routes import tools
    app.include_router(tools.router, prefix="/api/tools", tags=["Tools"])

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "Contextual Retrieval API"}

    return app


def get_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry
