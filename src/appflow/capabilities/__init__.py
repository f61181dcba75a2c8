"""
Built-in capabilities for the builder's component types.

create_default_registry() wires them up according to EngineSettings:
simulated executors for every type, with the chatbot and api-call steps
optionally backed by an LLM and real HTTP.
"""

from typing import Optional

from ..core.config import EngineSettings
from ..workflows.registry import CapabilityRegistry
from .api_call import HttpApiCallCapability
from .chatbot import LLMChatbotCapability
from .simulated import SIMULATED_CAPABILITIES, extract_text

BUILTIN_TYPES = tuple(SIMULATED_CAPABILITIES.keys())


def create_default_registry(settings: Optional[EngineSettings] = None) -> CapabilityRegistry:
    """
    Build a registry with every built-in component type.

    Args:
        settings: Selects the chatbot/api-call backends (defaults to simulated)

    Returns:
        New CapabilityRegistry
    """
    settings = settings or EngineSettings()
    registry = CapabilityRegistry()
    for component_type, func in SIMULATED_CAPABILITIES.items():
        registry.register(component_type, func)

    if settings.chatbot_backend == "llm":
        from ..core.llm_adapter import LangChainLLMAdapter
        from ..core.llm_factory import get_chat_llm

        llm = get_chat_llm(model=settings.chatbot_model, base_url=settings.ollama_base_url)
        registry.register(
            "chatbot",
            LLMChatbotCapability(LangChainLLMAdapter(llm), model_name=settings.chatbot_model),
        )

    if settings.api_call_backend == "http":
        registry.register("api-call", HttpApiCallCapability())

    return registry


__all__ = [
    "BUILTIN_TYPES",
    "create_default_registry",
    "extract_text",
    "HttpApiCallCapability",
    "LLMChatbotCapability",
    "SIMULATED_CAPABILITIES",
]
