"""
LLM Adapter for Dependency Inversion

Wraps LangChain chat models so LLM-backed capabilities depend on
ILLMProvider rather than a concrete client.
"""

from typing import Any, List

from .abstractions import ILLMProvider


class LangChainLLMAdapter(ILLMProvider):
    """
    Adapter for LangChain ChatModel implementations.
    """

    def __init__(self, llm: Any):
        """
        Initialize adapter with LangChain LLM.

        Args:
            llm: LangChain ChatModel instance (anything with ``ainvoke``)
        """
        self.llm = llm

    async def invoke(self, messages: List[Any]) -> str:
        """Invoke LLM and return text response."""
        response = await self.llm.ainvoke(messages)
        return response.content if hasattr(response, "content") else str(response)

    def __repr__(self) -> str:
        return f"LangChainLLMAdapter(llm={type(self.llm).__name__})"
