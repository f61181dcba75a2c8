"""Shared type definitions for the workflow engine."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_timestamp() -> str:
    """ISO-8601 timestamp for step and workflow records."""
    return datetime.now(timezone.utc).isoformat()


class StepStatus(str, Enum):
    """Outcome of a single component execution."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class StepMetrics:
    """Metrics collected for one step of a run."""

    index: int
    component_type: Optional[str]
    status: StepStatus
    component_id: Optional[str] = None
    duration_ms: float = 0.0
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "component_id": self.component_id,
            "type": self.component_type,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "error_message": self.error_message,
        }


# ============================================================================
# Errors
# ============================================================================

class AppflowError(Exception):
    """Base class for engine errors."""


class WorkflowValidationError(AppflowError):
    """Raised when a workflow is rejected before any step runs."""

    def __init__(self, reason: str, details: Optional[List[str]] = None):
        self.reason = reason
        self.details = details or []
        super().__init__(reason)


class UnknownComponentTypeError(AppflowError):
    """Raised when no capability is registered for a component type."""

    def __init__(self, component_type: Optional[str]):
        self.component_type = component_type
        super().__init__(f"Unknown component type: {component_type}")


class CapabilityError(AppflowError):
    """
    Raised by a capability to signal that its step failed.

    Attributes:
        component_type: Type of the component that failed
        reason: Error message recorded in the step result
    """

    def __init__(self, component_type: str, reason: str):
        self.component_type = component_type
        self.reason = reason
        super().__init__(reason)


class WorkflowCancelledError(AppflowError):
    """Raised when a caller cancels a run between steps."""

    def __init__(self, step_index: int, component_type: Optional[str]):
        self.step_index = step_index
        self.component_type = component_type
        super().__init__(
            f"Workflow cancelled before step {step_index} ({component_type})"
        )


# ============================================================================
# Workflow models
# ============================================================================

class ComponentDescriptor(BaseModel):
    """
    One configured step of a workflow.

    Only ``type`` drives dispatch. A missing or unregistered type is not a
    validation error; the step fails in place when it runs. ``id``, ``name``
    and ``position`` are display metadata and are accepted in any shape.
    """

    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    config: Any = Field(default_factory=dict)
    position: Optional[Any] = None

    @field_validator("config", mode="before")
    @classmethod
    def _default_config(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("type", "id", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Builder UIs send numeric ids and arbitrary labels
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def label(self) -> str:
        """Name used in log lines."""
        return self.name or self.id or self.type or "<untyped>"


class StepFailure(BaseModel):
    """Failure record stored in place of a step's payload."""

    type: Optional[str] = None
    error: str
    timestamp: str = Field(default_factory=utc_timestamp)


class WorkflowResult(BaseModel):
    """
    Outcome of one workflow run.

    ``component_results`` is None for a top-level failure, never for a run
    that completed (even when some steps failed). ``failed_steps`` holds the
    indexes the executor recorded as failures; it is not part of the wire
    shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    result: Any = None
    component_results: Optional[List[Dict[str, Any]]] = Field(
        default=None, alias="componentResults"
    )
    error: Optional[str] = None
    timestamp: str = Field(default_factory=utc_timestamp)
    metrics: Optional[Dict[str, Any]] = None
    failed_steps: List[int] = Field(default_factory=list)

    @classmethod
    def failure(cls, error: str) -> "WorkflowResult":
        return cls(success=False, error=error)

    def to_response(self, include_metrics: bool = False) -> Dict[str, Any]:
        """Serialize to the wire shape returned by the execute endpoint."""
        if not self.success:
            return {
                "success": False,
                "error": self.error,
                "timestamp": self.timestamp,
            }
        response = {
            "success": True,
            "result": self.result,
            "componentResults": self.component_results or [],
            "timestamp": self.timestamp,
        }
        if include_metrics and self.metrics is not None:
            response["metrics"] = self.metrics
        return response
