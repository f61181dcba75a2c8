"""
Capability Registry

Maps a component ``type`` string to the capability that executes it.

Example:
    registry = CapabilityRegistry()

    @registry.capability("echo")
    async def echo(config, input, session_id=None):
        return {"echo": input}

    registry.register("summarize", SummarizeCapability(llm), timeout=30)
"""

import asyncio
import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from ..core.abstractions import CapabilityFunc, ICapability
from ..core.types import UnknownComponentTypeError

logger = logging.getLogger(__name__)


class FunctionCapability(ICapability):
    """
    Adapts a plain callable to ICapability.

    Coroutine functions are awaited. Sync functions run in the default
    thread-pool executor so they never block the event loop.
    """

    def __init__(self, func: CapabilityFunc, name: Optional[str] = None):
        self.func = func
        self.name = name or getattr(func, "__name__", repr(func))
        self._is_async = inspect.iscoroutinefunction(func)

    async def execute(
        self,
        config: Dict[str, Any],
        input: Any,
        session_id: Optional[str] = None,
    ) -> Any:
        if self._is_async:
            return await self.func(config, input, session_id)
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(
            None, functools.partial(self.func, config, input, session_id)
        )
        # Sync wrappers around async code may hand back an awaitable
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        return f"FunctionCapability({self.name})"


@dataclass(frozen=True)
class RegisteredCapability:
    """Registry entry: the capability plus its configured timeout."""

    component_type: str
    capability: ICapability
    timeout: Optional[float] = None


class CapabilityRegistry:
    """
    Registry of component capabilities.

    The registry is only mutated at setup time; concurrent runs read it
    without locking.
    """

    def __init__(self):
        self._entries: Dict[str, RegisteredCapability] = {}

    def register(
        self,
        component_type: str,
        capability: Union[ICapability, CapabilityFunc],
        timeout: Optional[float] = None,
        replace: bool = True,
    ) -> "CapabilityRegistry":
        """
        Register a capability for a component type.

        Args:
            component_type: Type string used in component descriptors
            capability: ICapability instance or callable
                ``(config, input, session_id) -> payload``
            timeout: Per-step timeout in seconds (None = capability default)
            replace: Allow overriding an existing registration

        Returns:
            self for chaining

        Raises:
            ValueError: On an empty type, a non-callable capability, a
                non-positive timeout, or a duplicate with replace=False
        """
        if not component_type:
            raise ValueError("Component type must be a non-empty string")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Timeout for {component_type} must be positive, got {timeout}")
        if component_type in self._entries and not replace:
            raise ValueError(f"Capability already registered for: {component_type}")

        if not isinstance(capability, ICapability):
            if not callable(capability):
                raise ValueError(
                    f"Capability for {component_type} must be an ICapability or callable, "
                    f"got {type(capability).__name__}"
                )
            capability = FunctionCapability(capability, name=component_type)

        self._entries[component_type] = RegisteredCapability(
            component_type=component_type,
            capability=capability,
            timeout=timeout,
        )
        logger.debug(f"Registered capability {component_type}: {capability!r}")
        return self

    def capability(
        self,
        component_type: str,
        timeout: Optional[float] = None,
    ) -> Callable[[CapabilityFunc], CapabilityFunc]:
        """Decorator form of ``register``."""
        def decorator(func: CapabilityFunc) -> CapabilityFunc:
            self.register(component_type, func, timeout=timeout)
            return func
        return decorator

    def unregister(self, component_type: str) -> None:
        """Remove a registration. Unknown types are ignored."""
        self._entries.pop(component_type, None)

    def get(self, component_type: Optional[str]) -> RegisteredCapability:
        """
        Look up the entry for a component type.

        Raises:
            UnknownComponentTypeError: If nothing is registered for the type
        """
        entry = self._entries.get(component_type)
        if entry is None:
            raise UnknownComponentTypeError(component_type)
        return entry

    def types(self) -> List[str]:
        """Registered component types, in registration order."""
        return list(self._entries.keys())

    def copy(self) -> "CapabilityRegistry":
        """Shallow copy, for deriving a registry without mutating this one."""
        clone = CapabilityRegistry()
        clone._entries = dict(self._entries)
        return clone

    def __contains__(self, component_type: str) -> bool:
        return component_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.types())

    def __repr__(self) -> str:
        return f"CapabilityRegistry(types={self.types()!r})"
