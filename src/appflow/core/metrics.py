"""
Metrics Collection Utilities

Per-run metrics for workflow steps. One collector is created for each run,
so concurrent runs never share a collector.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .types import StepMetrics, StepStatus


class MetricsCollector:
    """
    Collect step metrics for a single workflow run.
    """

    def __init__(self, name: str = "workflow"):
        """
        Initialize metrics collector.

        Args:
            name: Identifier for this collector (e.g., workflow or session name)
        """
        self.name = name
        self.steps: List[StepMetrics] = []
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    def start(self) -> None:
        """Mark start of execution."""
        self.start_time = datetime.now()
        self.steps = []

    def stop(self) -> None:
        """Mark end of execution."""
        self.end_time = datetime.now()

    def record_step(
        self,
        index: int,
        component_type: Optional[str],
        duration_ms: float,
        status: StepStatus,
        component_id: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Record one step execution.

        Args:
            index: Position of the step in the workflow
            component_type: Component type that ran
            duration_ms: Execution time in milliseconds
            status: Step outcome
            component_id: Component id, if the descriptor had one
            error: Error message if failed
        """
        self.steps.append(StepMetrics(
            index=index,
            component_type=component_type,
            status=status,
            component_id=component_id,
            duration_ms=duration_ms,
            error_message=error,
        ))

    def get_workflow_metrics(self) -> Dict[str, Any]:
        """
        Get workflow-level summary and per-step details.

        ``overall_status`` is "success" when every step succeeded, "failed"
        when every step failed, "partial" for a mix and "empty" when no
        step ran.
        """
        total_duration_ms = 0.0
        if self.start_time and self.end_time:
            total_duration_ms = (self.end_time - self.start_time).total_seconds() * 1000

        failed = [s for s in self.steps if s.status == StepStatus.FAILED]
        if not self.steps:
            overall_status = "empty"
        elif not failed:
            overall_status = "success"
        elif len(failed) == len(self.steps):
            overall_status = "failed"
        else:
            overall_status = "partial"

        return {
            "workflow_name": self.name,
            "overall_status": overall_status,
            "total_duration_ms": total_duration_ms,
            "steps_executed": len(self.steps),
            "steps_failed": len(failed),
            "steps": [s.to_dict() for s in sorted(self.steps, key=lambda s: s.index)],
        }
