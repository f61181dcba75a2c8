"""appflow: execution engine for no-code AI application workflows."""

from .core.config import EngineSettings
from .core.abstractions import ICapability
from .core.types import (
    AppflowError,
    CapabilityError,
    ComponentDescriptor,
    UnknownComponentTypeError,
    WorkflowCancelledError,
    WorkflowResult,
    WorkflowValidationError,
)
from .workflows import (
    CapabilityRegistry,
    WorkflowExecutor,
    execute_workflow,
)
from .capabilities import create_default_registry

__version__ = "0.1.0"

__all__ = [
    # Engine
    "WorkflowExecutor",
    "execute_workflow",
    "CapabilityRegistry",
    "create_default_registry",
    "ICapability",
    "EngineSettings",
    # Types
    "ComponentDescriptor",
    "WorkflowResult",
    # Errors
    "AppflowError",
    "CapabilityError",
    "UnknownComponentTypeError",
    "WorkflowCancelledError",
    "WorkflowValidationError",
]
