"""
LLM Chatbot Capability

Chatbot step backed by a LangChain chat model. Conversation history is kept
per session id, so consecutive runs with the same session continue the same
conversation. Runs without a session id are stateless.
"""

import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from ..core.abstractions import ICapability, ILLMProvider
from ..core.memory import SessionMemoryStore
from ..core.types import CapabilityError, utc_timestamp
from .simulated import extract_text

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant inside a no-code AI application."


class LLMChatbotCapability(ICapability):
    """
    Chatbot capability that calls an LLM.

    Config keys:
        prompt: System prompt for the step (defaults to a generic assistant)
        model: Reported back in the payload; model selection happens when
            the provider is created
    """

    def __init__(
        self,
        llm: ILLMProvider,
        model_name: str = "",
        memory: Optional[SessionMemoryStore] = None,
        history_window: int = 6,
        timeout: Optional[float] = None,
    ):
        """
        Initialize chatbot.

        Args:
            llm: Provider used to generate replies
            model_name: Default model name reported in payloads
            memory: Session memory store (a private one is created if None)
            history_window: Number of past messages sent with each request
            timeout: Per-step timeout in seconds
        """
        self.llm = llm
        self.model_name = model_name
        self.memory = memory if memory is not None else SessionMemoryStore()
        self.history_window = history_window
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def _build_messages(
        self, system_prompt: str, user_message: str, session_id: Optional[str]
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
        history = self.memory.get(session_id)
        if history is not None:
            for msg in history.get_recent(self.history_window):
                if msg.role == "user":
                    messages.append(HumanMessage(content=msg.content))
                elif msg.role == "assistant":
                    messages.append(AIMessage(content=msg.content))
        messages.append(HumanMessage(content=user_message))
        return messages

    async def execute(
        self,
        config: Dict[str, Any],
        input: Any,
        session_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        user_message = extract_text(input, "message")
        if not user_message:
            raise CapabilityError("chatbot", "Chatbot input has no message text")

        system_prompt = config.get("prompt") or DEFAULT_SYSTEM_PROMPT
        messages = self._build_messages(system_prompt, user_message, session_id)
        logger.debug(f"[chatbot] Sending {len(messages)} messages (session={session_id})")

        try:
            reply = await self.llm.invoke(messages)
        except Exception as e:
            raise CapabilityError("chatbot", f"LLM call failed: {e}") from e

        history = self.memory.get(session_id)
        if history is not None:
            history.add_message("user", user_message)
            history.add_message("assistant", reply)

        return {
            "type": "chatbot",
            "response": reply,
            "model": config.get("model", self.model_name),
            "sessionId": session_id,
            "timestamp": utc_timestamp(),
        }

    def __repr__(self) -> str:
        return f"LLMChatbotCapability(llm={self.llm!r}, model={self.model_name!r})"
