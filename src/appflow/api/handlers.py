"""
Request Handling

Translates the execute request body into an executor call and the
WorkflowResult back into the response body. Kept free of FastAPI so other
hosts (queues, CLIs, serverless functions) can reuse it.
"""

import logging
from typing import Any, Dict, Tuple

from ..core.types import WorkflowResult, WorkflowValidationError
from ..core.validation import parse_workflow
from ..workflows.executor import WorkflowExecutor

logger = logging.getLogger(__name__)


async def handle_execute_request(
    body: Any,
    executor: WorkflowExecutor,
    include_metrics: bool = False,
) -> Tuple[int, Dict[str, Any]]:
    """
    Execute the workflow described by a request body.

    Expected body::

        {"workflow": [{id, type, name, config, position}, ...],
         "input": <any>, "sessionId": <string, optional>}

    Returns:
        (HTTP status, response body). 400 for a malformed request, 500 for
        a catastrophic failure, 200 otherwise (including runs where some
        steps failed).
    """
    if not isinstance(body, dict):
        return 400, WorkflowResult.failure("Request body must be a JSON object").to_response()

    session_id = body.get("sessionId")
    if session_id is not None and not isinstance(session_id, str):
        return 400, WorkflowResult.failure("sessionId must be a string").to_response()

    try:
        components = parse_workflow(body.get("workflow"))
    except WorkflowValidationError as e:
        logger.warning(f"Rejected execute request: {e}")
        return 400, WorkflowResult.failure(str(e)).to_response()

    result = await executor.execute_workflow(components, body.get("input"), session_id)
    status = 200 if result.success else 500
    return status, result.to_response(include_metrics=include_metrics)
