"""
Workflow Executor

Runs a workflow (an ordered list of component descriptors) against an
initial input, chaining each successful step's result into the next step.

Failure policy:
  - A step that fails (capability error, timeout, unknown or missing type)
    gets a failure record in place; the next step receives the same input
    the failed step received.
  - A malformed workflow, a cancellation, or an error escaping the step
    boundary ends the run with ``success=False`` and no step results.

Example:
    executor = WorkflowExecutor(registry)
    result = await executor.execute_workflow(
        [{"type": "chatbot", "config": {}}, {"type": "text-analysis"}],
        "Hello",
        session_id="abc",
    )
    print(result.to_response())
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

from ..core.config import EngineSettings
from ..core.metrics import MetricsCollector
from ..core.types import (
    StepStatus,
    WorkflowCancelledError,
    WorkflowResult,
    WorkflowValidationError,
)
from ..core.validation import parse_workflow
from .graph import ChainGraphBuilder
from .registry import CapabilityRegistry

logger = logging.getLogger(__name__)


class WorkflowExecutor:
    """
    Executes workflows against a capability registry.

    The executor holds only its registry and settings, so one instance can
    serve any number of concurrent runs.
    """

    def __init__(
        self,
        registry: Optional[CapabilityRegistry] = None,
        settings: Optional[EngineSettings] = None,
        name: str = "workflow",
    ):
        """
        Initialize executor.

        Args:
            registry: Capabilities to dispatch to (defaults to the built-ins)
            settings: Engine settings (timeouts, capability backends)
            name: Prefix for log lines
        """
        self.settings = settings or EngineSettings()
        if registry is None:
            from ..capabilities import create_default_registry
            registry = create_default_registry(self.settings)
        self.registry = registry
        self.name = name

    async def execute_workflow(
        self,
        workflow: Any,
        input: Any = None,
        session_id: Optional[str] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> WorkflowResult:
        """
        Execute a workflow.

        Args:
            workflow: Sequence of component descriptors (mappings or
                ComponentDescriptor instances)
            input: Initial input passed to the first step
            session_id: Opaque context key routed to every capability
            cancel_event: When set, the run stops before the next step

        Returns:
            WorkflowResult; never raises for workflow or step errors
        """
        try:
            components = parse_workflow(workflow)
        except WorkflowValidationError as e:
            logger.warning(f"[{self.name}] Rejected workflow: {e}")
            return WorkflowResult.failure(str(e))

        metrics = MetricsCollector(name=session_id or self.name)
        metrics.start()

        if not components:
            metrics.stop()
            logger.info(f"[{self.name}] Empty workflow, returning input unchanged")
            return WorkflowResult(
                success=True,
                result=input,
                component_results=[],
                metrics=metrics.get_workflow_metrics(),
            )

        logger.info(
            f"[{self.name}] Starting workflow execution ({len(components)} components)"
        )
        try:
            builder = ChainGraphBuilder(self.registry, self.settings, name=self.name)
            run = builder.build(components, metrics, cancel_event=cancel_event)
            final_state = await run({
                "current_input": input,
                "component_results": [],
                "session_id": session_id,
            })
            component_results = list(final_state.get("component_results", []))
            if len(component_results) != len(components):
                raise RuntimeError(
                    f"Expected {len(components)} step results, got {len(component_results)}"
                )
        except WorkflowCancelledError as e:
            metrics.stop()
            logger.warning(f"[{self.name}] {e}")
            return WorkflowResult.failure(str(e))
        except Exception as e:
            metrics.stop()
            logger.exception(f"[{self.name}] Workflow execution error: {e}")
            return WorkflowResult.failure(str(e) or "Unknown error")

        metrics.stop()
        summary = metrics.get_workflow_metrics()
        failed_steps = [s["index"] for s in summary["steps"] if s["status"] == StepStatus.FAILED.value]
        logger.info(
            f"[{self.name}] Workflow completed "
            f"({summary['total_duration_ms'] / 1000:.2f}s, "
            f"{summary['steps_failed']}/{len(components)} steps failed)"
        )
        return WorkflowResult(
            success=True,
            result=component_results[-1],
            component_results=component_results,
            metrics=summary,
            failed_steps=failed_steps,
        )

    def __repr__(self) -> str:
        return f"WorkflowExecutor(name={self.name!r}, types={self.registry.types()!r})"


_default_executor: Optional[WorkflowExecutor] = None


def get_default_executor() -> WorkflowExecutor:
    """Executor over the built-in capabilities, configured from the environment."""
    global _default_executor
    if _default_executor is None:
        _default_executor = WorkflowExecutor(settings=EngineSettings.from_env())
    return _default_executor


async def execute_workflow(
    workflow: Sequence[Dict[str, Any]],
    input: Any = None,
    session_id: Optional[str] = None,
    *,
    cancel_event: Optional[asyncio.Event] = None,
) -> WorkflowResult:
    """Execute a workflow with the default executor."""
    return await get_default_executor().execute_workflow(
        workflow, input, session_id, cancel_event=cancel_event
    )
