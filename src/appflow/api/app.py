"""
FastAPI application

Usage:
    appflow-server                      # reads .env / environment
    uvicorn appflow.api.app:create_app --factory
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from ..core.config import EngineSettings
from ..core.logger import configure_logging
from ..workflows.executor import WorkflowExecutor
from .routes import router

logger = logging.getLogger(__name__)


def create_app(
    executor: Optional[WorkflowExecutor] = None,
    settings: Optional[EngineSettings] = None,
) -> FastAPI:
    """
    Create the API app.

    Args:
        executor: Executor to serve (built from settings if None)
        settings: Engine settings (read from the environment if None)
    """
    if executor is None:
        settings = settings or EngineSettings.from_env()
        executor = WorkflowExecutor(settings=settings, name="preview")

    app = FastAPI(
        title="appflow",
        description="Executes no-code AI application workflows",
        version="0.1.0",
    )
    app.state.executor = executor
    app.include_router(router)
    logger.info(f"API ready with components: {', '.join(executor.registry.types())}")
    return app


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    load_dotenv()
    settings = EngineSettings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
