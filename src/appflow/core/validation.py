"""
Workflow Validation

Rejects malformed workflows before any step runs. Everything raised here is
a top-level failure, never a per-step one. Component fields are not checked
here: a missing or unknown type fails its own step at run time.
"""

from typing import Any, List, Mapping

from pydantic import ValidationError

from .types import ComponentDescriptor, WorkflowValidationError


def format_validation_errors(error: ValidationError, prefix: str = "") -> List[str]:
    """
    Format Pydantic validation errors as human-readable messages.

    Args:
        error: Pydantic ValidationError
        prefix: Prepended to each field path (e.g. "workflow[2]")

    Returns:
        One message per error
    """
    messages = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ["unknown"]))
        field = f"{prefix}.{loc}" if prefix else loc
        messages.append(f"{field}: {err.get('msg', '')}")
    return messages


def parse_workflow(raw: Any) -> List[ComponentDescriptor]:
    """
    Parse a workflow into component descriptors.

    Args:
        raw: List of component mappings (or descriptors)

    Returns:
        Descriptors in workflow order

    Raises:
        WorkflowValidationError: If the workflow is missing, not a list, or
            an entry is not an object
    """
    if raw is None:
        raise WorkflowValidationError("Invalid workflow provided: workflow is required")
    if not isinstance(raw, (list, tuple)):
        raise WorkflowValidationError(
            f"Invalid workflow provided: expected an array of components, "
            f"got {type(raw).__name__}"
        )

    components: List[ComponentDescriptor] = []
    problems: List[str] = []
    for index, item in enumerate(raw):
        if isinstance(item, ComponentDescriptor):
            components.append(item)
            continue
        if not isinstance(item, Mapping):
            problems.append(
                f"workflow[{index}]: expected an object, got {type(item).__name__}"
            )
            continue
        try:
            components.append(ComponentDescriptor.model_validate(dict(item)))
        except ValidationError as e:
            problems.extend(format_validation_errors(e, prefix=f"workflow[{index}]"))

    if problems:
        raise WorkflowValidationError(
            "Invalid workflow provided: " + "; ".join(problems),
            details=problems,
        )
    return components
