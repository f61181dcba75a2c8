"""
LLM Factory

Centralizes chat model creation for LLM-backed capabilities. Model name and
server URL come from ``EngineSettings``.
"""

from langchain_ollama import ChatOllama


def get_chat_llm(
    model: str,
    base_url: str,
    temperature: float = 0.7,
    num_ctx: int = 4096,
    num_predict: int = 1024,
) -> ChatOllama:
    """
    Get the conversational LLM used by the chatbot capability.

    Args:
        model: Model name (``EngineSettings.chatbot_model``)
        base_url: Ollama base URL (``EngineSettings.ollama_base_url``)
        temperature: Sampling temperature (default 0.7)
        num_ctx: Context window size (default 4096)
        num_predict: Max tokens to generate (default 1024)

    Returns:
        ChatOllama instance
    """
    return ChatOllama(
        model=model,
        base_url=base_url,
        temperature=temperature,
        num_ctx=num_ctx,
        num_predict=num_predict,
    )
