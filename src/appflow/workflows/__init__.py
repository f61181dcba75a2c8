"""
Workflow Engine - sequential component chains.

- CapabilityRegistry: component type -> capability
- ChainGraphBuilder: compiles a workflow into a linear LangGraph
- WorkflowExecutor: runs a workflow with per-step failure isolation
"""

from .executor import WorkflowExecutor, execute_workflow, get_default_executor
from .graph import ChainGraphBuilder, ChainState, to_step_result
from .registry import CapabilityRegistry, FunctionCapability, RegisteredCapability

__all__ = [
    "WorkflowExecutor",
    "execute_workflow",
    "get_default_executor",
    "ChainGraphBuilder",
    "ChainState",
    "to_step_result",
    "CapabilityRegistry",
    "FunctionCapability",
    "RegisteredCapability",
]
