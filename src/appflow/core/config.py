"""
Engine Configuration

Settings are read from environment variables. The server entry point calls
``load_dotenv()`` first, so a local ``.env`` file works too.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_CHATBOT_MODEL = "qwen2.5:14b"

CHATBOT_BACKENDS = ("simulated", "llm")
API_CALL_BACKENDS = ("simulated", "http")


def _parse_seconds(raw: Optional[str], name: str) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def parse_timeouts(raw: Optional[str]) -> Dict[str, float]:
    """
    Parse per-type timeouts of the form ``chatbot=30,api-call=5``.

    Raises:
        ValueError: On an entry without ``=`` or a non-numeric value
    """
    timeouts: Dict[str, float] = {}
    if not raw:
        return timeouts
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "=" not in entry:
            raise ValueError(f"APPFLOW_STEP_TIMEOUTS entry must be type=seconds, got {entry!r}")
        component_type, seconds = entry.split("=", 1)
        timeouts[component_type.strip()] = _parse_seconds(seconds, f"timeout for {component_type.strip()}")
    return timeouts


@dataclass
class EngineSettings:
    """
    Runtime settings for the executor, built-in capabilities and server.

    Attributes:
        log_level: Level for the ``appflow`` logger
        step_timeout: Default per-step timeout in seconds (None = no timeout)
        step_timeouts: Per-component-type timeout overrides
        chatbot_backend: "simulated" or "llm"
        api_call_backend: "simulated" or "http"
        chatbot_model: Ollama model used by the llm chatbot
        ollama_base_url: Ollama server URL
        host: Server bind host
        port: Server bind port
    """

    log_level: str = "INFO"
    step_timeout: Optional[float] = None
    step_timeouts: Dict[str, float] = field(default_factory=dict)
    chatbot_backend: str = "simulated"
    api_call_backend: str = "simulated"
    chatbot_model: str = DEFAULT_CHATBOT_MODEL
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self):
        if self.chatbot_backend not in CHATBOT_BACKENDS:
            raise ValueError(
                f"Unknown chatbot backend: {self.chatbot_backend}. "
                f"Available: {CHATBOT_BACKENDS}"
            )
        if self.api_call_backend not in API_CALL_BACKENDS:
            raise ValueError(
                f"Unknown api-call backend: {self.api_call_backend}. "
                f"Available: {API_CALL_BACKENDS}"
            )

    def timeout_for(self, component_type: str) -> Optional[float]:
        """Timeout for a component type, falling back to the default."""
        return self.step_timeouts.get(component_type, self.step_timeout)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        """Build settings from environment variables (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        port = env.get("APPFLOW_PORT", "8000")
        try:
            port_value = int(port)
        except ValueError:
            raise ValueError(f"APPFLOW_PORT must be an integer, got {port!r}")
        return cls(
            log_level=env.get("APPFLOW_LOG_LEVEL", "INFO"),
            step_timeout=_parse_seconds(env.get("APPFLOW_STEP_TIMEOUT"), "APPFLOW_STEP_TIMEOUT"),
            step_timeouts=parse_timeouts(env.get("APPFLOW_STEP_TIMEOUTS")),
            chatbot_backend=env.get("APPFLOW_CHATBOT_BACKEND", "simulated").lower(),
            api_call_backend=env.get("APPFLOW_API_CALL_BACKEND", "simulated").lower(),
            chatbot_model=env.get("CHATBOT_MODEL", DEFAULT_CHATBOT_MODEL),
            ollama_base_url=env.get("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL),
            host=env.get("APPFLOW_HOST", "0.0.0.0"),
            port=port_value,
        )
