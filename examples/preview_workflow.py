"""
Preview Workflow - run a builder workflow from the command line

Chains a chatbot, a step with an unregistered type and a text analysis, then
prints each step's outcome. The unknown step fails in place and the text
analysis still receives the chatbot's reply.

Set APPFLOW_CHATBOT_BACKEND=llm (and have Ollama running) to use a real
model for the chatbot step.

Usage:
    python examples/preview_workflow.py "Tell me about no-code AI apps"
"""

import asyncio
import json
import sys

from dotenv import load_dotenv

from appflow import EngineSettings, WorkflowExecutor
from appflow.core.logger import configure_logging

WORKFLOW = [
    {"id": "1", "type": "chatbot", "name": "Assistant", "config": {"prompt": "Answer briefly."}},
    {"id": "2", "type": "sentiment-v2", "name": "Not installed", "config": {}},
    {"id": "3", "type": "text-analysis", "name": "Mood", "config": {"analysisType": "sentiment"}},
]


async def main(message: str) -> None:
    load_dotenv()
    settings = EngineSettings.from_env()
    configure_logging(settings.log_level)

    executor = WorkflowExecutor(settings=settings, name="preview")
    result = await executor.execute_workflow(WORKFLOW, message, session_id="cli")

    print("=" * 60)
    for index, (component, step) in enumerate(zip(WORKFLOW, result.component_results or [])):
        failed = index in result.failed_steps
        status = "FAILED" if failed else "ok"
        print(f"[{status:>6}] {component['name']} ({component['type']})")
        if failed:
            print(f"         {step['error']}")
    print("=" * 60)
    print(json.dumps(result.to_response(include_metrics=True), indent=2))


if __name__ == "__main__":
    asyncio.run(main(" ".join(sys.argv[1:]) or "Hello"))
