"""
Workflow API Routes

- POST /api/apps/preview/execute: run a workflow against an input
- GET  /api/components: list executable component types
- GET  /health
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..core.types import WorkflowResult
from ..workflows.executor import WorkflowExecutor
from .handlers import handle_execute_request

router = APIRouter()


def get_executor(request: Request) -> WorkflowExecutor:
    """Executor created at startup and stored on app.state."""
    return request.app.state.executor


@router.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/api/components")
async def list_components(
    executor: WorkflowExecutor = Depends(get_executor),
) -> List[str]:
    """Component types the executor can dispatch."""
    return executor.registry.types()


@router.post("/api/apps/preview/execute")
async def execute_preview(
    request: Request,
    metrics: bool = False,
    executor: WorkflowExecutor = Depends(get_executor),
) -> JSONResponse:
    """Execute a workflow sent by the builder's preview panel."""
    try:
        body: Any = await request.json()
    except ValueError:
        return JSONResponse(
            status_code=400,
            content=WorkflowResult.failure("Request body must be valid JSON").to_response(),
        )

    status, content = await handle_execute_request(body, executor, include_metrics=metrics)
    return JSONResponse(status_code=status, content=jsonable_encoder(content))
