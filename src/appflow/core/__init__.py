"""Core infrastructure shared by the engine, capabilities and server."""

from .abstractions import ICapability, ILLMProvider, CapabilityFunc
from .config import EngineSettings, parse_timeouts
from .logger import get_logger, configure_logging
from .metrics import MetricsCollector
from .memory import ConversationMemory, Message, SessionMemoryStore
from .types import (
    AppflowError,
    CapabilityError,
    ComponentDescriptor,
    StepFailure,
    StepMetrics,
    StepStatus,
    UnknownComponentTypeError,
    WorkflowCancelledError,
    WorkflowResult,
    WorkflowValidationError,
    utc_timestamp,
)
from .validation import format_validation_errors, parse_workflow

__all__ = [
    # Abstractions
    "ICapability",
    "ILLMProvider",
    "CapabilityFunc",
    # Configuration & logging
    "EngineSettings",
    "parse_timeouts",
    "get_logger",
    "configure_logging",
    "MetricsCollector",
    # Memory
    "ConversationMemory",
    "Message",
    "SessionMemoryStore",
    # Types
    "AppflowError",
    "CapabilityError",
    "ComponentDescriptor",
    "StepFailure",
    "StepMetrics",
    "StepStatus",
    "UnknownComponentTypeError",
    "WorkflowCancelledError",
    "WorkflowResult",
    "WorkflowValidationError",
    "utc_timestamp",
    # Validation
    "format_validation_errors",
    "parse_workflow",
]
