"""
Core Abstractions

Interfaces shared by the executor and the capability implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union


# ============================================================================
# Capability Abstraction (Dependency Inversion Principle)
# ============================================================================

class ICapability(ABC):
    """
    Abstract interface for a component capability.

    A capability turns a component's config plus the current input into a
    payload. The executor depends on this interface only, so a new
    component type is a new registry entry, not a change to the executor.

    Signal failure by raising (``CapabilityError`` for expected failures).
    """

    @abstractmethod
    async def execute(
        self,
        config: Dict[str, Any],
        input: Any,
        session_id: Optional[str] = None,
    ) -> Any:
        """
        Run the capability.

        Args:
            config: Component config (meaning defined by the component type)
            input: Original workflow input or the previous step's result
            session_id: Opaque context key routed from the caller

        Returns:
            Step payload
        """
        pass

    @property
    def timeout(self) -> Optional[float]:
        """Per-capability timeout in seconds. None means no timeout."""
        return None


# Plain callables with the capability signature, sync or async
CapabilityFunc = Callable[[Dict[str, Any], Any, Optional[str]], Union[Any, Awaitable[Any]]]


# ============================================================================
# LLM Abstraction
# ============================================================================

class ILLMProvider(ABC):
    """
    Abstract interface for LLM interactions used by LLM-backed capabilities.

    Implementations can wrap LangChain chat models or test doubles.
    """

    @abstractmethod
    async def invoke(self, messages: List[Any]) -> str:
        """
        Invoke LLM with messages and return text response.

        Args:
            messages: List of message objects (LangChain format)

        Returns:
            Text response from LLM
        """
        pass
