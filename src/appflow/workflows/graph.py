"""
LangGraph Chain Builder

Compiles a workflow into a linear LangGraph state machine:

    START -> step_0 -> step_1 -> ... -> step_N-1 -> END

Each node dispatches one component through the capability registry. The
node wrapper owns the per-step failure boundary: a failing capability
appends a failure record and leaves ``current_input`` untouched, so the next
step sees the last successful value.
"""

import asyncio
import copy
import logging
import operator
import time
from typing import Annotated, Any, Callable, Dict, List, Mapping, Optional, TypedDict

from langgraph.graph import END, START, StateGraph
from pydantic import BaseModel

from ..core.config import EngineSettings
from ..core.metrics import MetricsCollector
from ..core.types import (
    ComponentDescriptor,
    StepFailure,
    StepStatus,
    WorkflowCancelledError,
    utc_timestamp,
)
from .registry import CapabilityRegistry, RegisteredCapability

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Component execution failed"


class ChainState(TypedDict, total=False):
    """State carried between steps of one run."""

    current_input: Any
    component_results: Annotated[List[Dict[str, Any]], operator.add]
    session_id: Optional[str]


def to_step_result(component_type: str, payload: Any) -> Dict[str, Any]:
    """
    Normalize a capability payload into a step result.

    Mappings keep their keys with ``type`` set to the component's type and a
    ``timestamp`` added when missing. Other values are wrapped under
    ``output``.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    if isinstance(payload, Mapping):
        record = {"type": component_type}
        record.update((k, v) for k, v in payload.items() if k != "type")
        record.setdefault("timestamp", utc_timestamp())
        return record
    return {"type": component_type, "output": payload, "timestamp": utc_timestamp()}


def step_node_name(index: int) -> str:
    return f"step_{index}"


class ChainGraphBuilder:
    """
    Builds the LangGraph for one workflow run.

    A new builder (and graph) is made per run; nothing here outlives the
    run except the registry and settings it was given.

    Example:
        builder = ChainGraphBuilder(registry, settings, name="preview")
        run = builder.build(components, metrics)
        final_state = await run({"current_input": "Hello", "component_results": []})
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        settings: Optional[EngineSettings] = None,
        name: str = "workflow",
    ):
        self.registry = registry
        self.settings = settings or EngineSettings()
        self.name = name

    def _resolve_timeout(self, entry: RegisteredCapability) -> Optional[float]:
        if entry.timeout is not None:
            return entry.timeout
        configured = self.settings.timeout_for(entry.component_type)
        if configured is not None:
            return configured
        return entry.capability.timeout

    async def _dispatch(
        self,
        entry: RegisteredCapability,
        component: ComponentDescriptor,
        current_input: Any,
        session_id: Optional[str],
    ) -> Any:
        timeout = self._resolve_timeout(entry)
        call = entry.capability.execute(
            copy.deepcopy(component.config), current_input, session_id
        )
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError:
            raise asyncio.TimeoutError(
                f"Component '{component.type}' timed out after {timeout:g}s"
            )

    def _create_step_wrapper(
        self,
        index: int,
        component: ComponentDescriptor,
        metrics: MetricsCollector,
        cancel_event: Optional[asyncio.Event],
    ) -> Callable:
        """Create the LangGraph node for one component."""
        async def step(state: ChainState) -> Dict[str, Any]:
            if cancel_event is not None and cancel_event.is_set():
                raise WorkflowCancelledError(index, component.type)

            start_time = time.time()
            try:
                entry = self.registry.get(component.type)
                # Each capability gets its own copy of the chained value
                step_input = copy.deepcopy(state.get("current_input"))
                payload = await self._dispatch(
                    entry, component, step_input, state.get("session_id")
                )
            except Exception as e:
                duration = (time.time() - start_time) * 1000
                message = str(e) or DEFAULT_ERROR_MESSAGE
                metrics.record_step(
                    index=index,
                    component_type=component.type,
                    duration_ms=duration,
                    status=StepStatus.FAILED,
                    component_id=component.id,
                    error=message,
                )
                logger.error(
                    f"[{self.name}] step {index} {component.label} failed "
                    f"({duration:.1f}ms): {message}"
                )
                failure = StepFailure(type=component.type, error=message)
                return {"component_results": [failure.model_dump()]}

            step_result = to_step_result(component.type, payload)
            duration = (time.time() - start_time) * 1000
            metrics.record_step(
                index=index,
                component_type=component.type,
                duration_ms=duration,
                status=StepStatus.SUCCESS,
                component_id=component.id,
            )
            logger.info(
                f"[{self.name}] step {index} {component.label} succeeded ({duration:.1f}ms)"
            )
            return {"current_input": step_result, "component_results": [step_result]}

        return step

    def build(
        self,
        components: List[ComponentDescriptor],
        metrics: MetricsCollector,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Callable[[ChainState], Any]:
        """
        Compile the chain for a non-empty workflow.

        Returns:
            Async function ``(initial_state) -> final_state``

        Raises:
            ValueError: If the workflow is empty
        """
        if not components:
            raise ValueError("Cannot build a chain for an empty workflow")

        graph = StateGraph(ChainState)
        for index, component in enumerate(components):
            graph.add_node(
                step_node_name(index),
                self._create_step_wrapper(index, component, metrics, cancel_event),
            )

        graph.add_edge(START, step_node_name(0))
        for index in range(1, len(components)):
            graph.add_edge(step_node_name(index - 1), step_node_name(index))
        graph.add_edge(step_node_name(len(components) - 1), END)

        compiled = graph.compile()
        # One superstep per component
        run_config = {"recursion_limit": len(components) + 10}

        async def invoke(initial_state: ChainState) -> Dict[str, Any]:
            return await compiled.ainvoke(initial_state, config=run_config)

        return invoke
