"""Tests for the workflow executor: ordering, chaining and failure isolation."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from appflow.core.config import EngineSettings
from appflow.core.types import CapabilityError, ComponentDescriptor
from appflow.workflows import CapabilityRegistry, WorkflowExecutor, execute_workflow
from appflow.workflows import executor as executor_module


# ============================================================================
# Recording capabilities
# ============================================================================

class Recorder:
    """Collects (type, input, session_id) for every dispatched call."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def inputs_for(self, component_type: str) -> List[Any]:
        return [c["input"] for c in self.calls if c["type"] == component_type]


def make_registry(recorder: Recorder) -> CapabilityRegistry:
    registry = CapabilityRegistry()

    @registry.capability("upper")
    async def upper(config, input, session_id=None):
        recorder.calls.append({"type": "upper", "input": input, "session_id": session_id})
        text = input if isinstance(input, str) else input["text"]
        return {"text": text.upper()}

    @registry.capability("suffix")
    async def suffix(config, input, session_id=None):
        recorder.calls.append({"type": "suffix", "input": input, "session_id": session_id})
        text = input if isinstance(input, str) else input["text"]
        return {"text": text + config.get("suffix", "!")}

    @registry.capability("explode")
    async def explode(config, input, session_id=None):
        recorder.calls.append({"type": "explode", "input": input, "session_id": session_id})
        raise CapabilityError("explode", "boom")

    @registry.capability("crash")
    async def crash(config, input, session_id=None):
        recorder.calls.append({"type": "crash", "input": input, "session_id": session_id})
        raise KeyError("missing")

    return registry


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def executor(recorder):
    return WorkflowExecutor(make_registry(recorder), name="test")


# ============================================================================
# Ordering & chaining
# ============================================================================

class TestOrderAndChaining:
    """Results follow workflow order and successful outputs feed the next step."""

    @pytest.mark.asyncio
    async def test_results_match_workflow_order(self, executor):
        workflow = [{"type": "upper"}, {"type": "suffix"}, {"type": "upper"}, {"type": "suffix"}]
        result = await executor.execute_workflow(workflow, "hi")

        assert result.success is True
        assert len(result.component_results) == len(workflow)
        assert [r["type"] for r in result.component_results] == [c["type"] for c in workflow]

    @pytest.mark.asyncio
    async def test_each_step_receives_previous_result(self, executor, recorder):
        workflow = [{"type": "upper"}, {"type": "suffix", "config": {"suffix": "?"}}]
        result = await executor.execute_workflow(workflow, "hi")

        first, second = result.component_results
        assert recorder.inputs_for("upper") == ["hi"]
        assert recorder.inputs_for("suffix") == [first]
        assert second["text"] == "HI?"

    @pytest.mark.asyncio
    async def test_final_result_is_last_step_result(self, executor):
        result = await executor.execute_workflow([{"type": "upper"}, {"type": "suffix"}], "hi")
        assert result.result == result.component_results[-1]
        assert result.result["text"] == "HI!"

    @pytest.mark.asyncio
    async def test_step_result_echoes_component_type(self, executor):
        result = await executor.execute_workflow([{"type": "upper"}], "hi")
        step = result.component_results[0]
        assert step["type"] == "upper"
        assert "timestamp" in step

    @pytest.mark.asyncio
    async def test_accepts_descriptor_instances(self, executor):
        workflow = [ComponentDescriptor(type="upper", id="c1")]
        result = await executor.execute_workflow(workflow, "abc")
        assert result.result["text"] == "ABC"

    @pytest.mark.asyncio
    async def test_session_id_routed_to_every_step(self, executor, recorder):
        await executor.execute_workflow([{"type": "upper"}, {"type": "suffix"}], "hi", "session-42")
        assert [c["session_id"] for c in recorder.calls] == ["session-42", "session-42"]

    @pytest.mark.asyncio
    async def test_long_workflow_runs_every_step(self, executor):
        workflow = [{"type": "suffix", "config": {"suffix": "."}} for _ in range(40)]
        result = await executor.execute_workflow(workflow, "x")
        assert result.success is True
        assert len(result.component_results) == 40
        assert result.result["text"] == "x" + "." * 40


# ============================================================================
# Failure isolation
# ============================================================================

class TestFailureIsolation:
    """A failed step is recorded in place and never chained forward."""

    @pytest.mark.asyncio
    async def test_failed_step_input_passed_to_next_step(self, executor, recorder):
        workflow = [{"type": "upper"}, {"type": "explode"}, {"type": "suffix"}]
        result = await executor.execute_workflow(workflow, "hi")

        first = result.component_results[0]
        assert recorder.inputs_for("explode") == [first]
        # suffix sees the same value explode saw, not the failure record
        assert recorder.inputs_for("suffix") == [first]
        assert result.result["text"] == "HI!"

    @pytest.mark.asyncio
    async def test_failure_record_shape(self, executor):
        result = await executor.execute_workflow([{"type": "explode"}], "hi")
        failure = result.component_results[0]
        assert result.success is True
        assert failure["type"] == "explode"
        assert failure["error"] == "boom"
        assert "timestamp" in failure

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_step_failure(self, executor):
        result = await executor.execute_workflow([{"type": "crash"}, {"type": "upper"}], "hi")
        assert result.success is True
        assert "missing" in result.component_results[0]["error"]
        assert result.component_results[1]["text"] == "HI"

    @pytest.mark.asyncio
    async def test_first_step_failure_passes_original_input(self, executor, recorder):
        result = await executor.execute_workflow([{"type": "explode"}, {"type": "upper"}], "hi")
        assert recorder.inputs_for("upper") == ["hi"]
        assert result.result["text"] == "HI"

    @pytest.mark.asyncio
    async def test_all_steps_failing_keeps_full_length(self, executor):
        workflow = [{"type": "explode"}, {"type": "explode"}, {"type": "explode"}]
        result = await executor.execute_workflow(workflow, "hi")
        assert len(result.component_results) == 3
        assert result.failed_steps == [0, 1, 2]
        # The final result is the last record, here a failure
        assert result.result["error"] == "boom"

    @pytest.mark.asyncio
    async def test_unknown_type_is_isolated(self, executor, recorder):
        workflow = [{"type": "upper"}, {"type": "nonexistent-type"}, {"type": "suffix"}]
        result = await executor.execute_workflow(workflow, "hi")

        assert result.success is True
        unknown = result.component_results[1]
        assert unknown["type"] == "nonexistent-type"
        assert "nonexistent-type" in unknown["error"]
        assert recorder.inputs_for("suffix") == [result.component_results[0]]

    @pytest.mark.asyncio
    async def test_step_timeout_is_step_failure(self, recorder):
        registry = make_registry(recorder)

        async def slow(config, input, session_id=None):
            await asyncio.sleep(5)
            return {"text": "late"}

        registry.register("slow", slow, timeout=0.05)
        executor = WorkflowExecutor(registry)

        result = await executor.execute_workflow([{"type": "slow"}, {"type": "upper"}], "hi")
        assert result.component_results[0]["error"] == "Component 'slow' timed out after 0.05s"
        assert result.component_results[1]["text"] == "HI"

    @pytest.mark.asyncio
    async def test_settings_timeout_applies_per_type(self, recorder):
        registry = make_registry(recorder)

        async def slow(config, input, session_id=None):
            await asyncio.sleep(5)

        registry.register("slow", slow)
        settings = EngineSettings(step_timeouts={"slow": 0.05})
        executor = WorkflowExecutor(registry, settings=settings)

        result = await executor.execute_workflow([{"type": "slow"}], "hi")
        assert "timed out" in result.component_results[0]["error"]

    @pytest.mark.asyncio
    async def test_component_without_type_fails_in_place(self, executor, recorder):
        workflow = [{"type": "upper"}, {"config": {}}, {"type": "suffix"}]
        result = await executor.execute_workflow(workflow, "hi")

        assert result.success is True
        assert len(result.component_results) == 3
        untyped = result.component_results[1]
        assert untyped["type"] is None
        assert untyped["error"] == "Unknown component type: None"
        assert result.failed_steps == [1]
        assert recorder.inputs_for("suffix") == [result.component_results[0]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_type", ["", 42])
    async def test_empty_or_non_string_type_fails_in_place(self, executor, bad_type):
        result = await executor.execute_workflow([{"type": bad_type}, {"type": "upper"}], "hi")
        assert result.success is True
        assert result.component_results[0]["error"] == f"Unknown component type: {bad_type}"
        assert result.component_results[1]["text"] == "HI"

    @pytest.mark.asyncio
    async def test_display_metadata_never_fails_a_run(self, executor):
        workflow = [
            {"type": "upper", "name": 42, "id": ["a"], "position": "left"},
            {"type": "suffix", "name": {"label": "x"}, "config": {"suffix": "?"}},
        ]
        result = await executor.execute_workflow(workflow, "hi")
        assert result.success is True
        assert result.result["text"] == "HI?"
        assert result.failed_steps == []

    @pytest.mark.asyncio
    async def test_mutating_capability_cannot_rewrite_earlier_results(self, recorder):
        registry = make_registry(recorder)
        seen = []

        @registry.capability("make")
        async def make(config, input, session_id=None):
            return {"text": "original"}

        @registry.capability("mutate")
        async def mutate(config, input, session_id=None):
            seen.append(input["text"])
            input["text"] = "clobbered"
            raise CapabilityError("mutate", "failed after mutating")

        executor = WorkflowExecutor(registry)
        result = await executor.execute_workflow(
            [{"type": "make"}, {"type": "mutate"}, {"type": "mutate"}], "hi"
        )

        assert result.component_results[0]["text"] == "original"
        # The second mutate step got the same value as the first
        assert seen == ["original", "original"]
        assert result.failed_steps == [1, 2]

    @pytest.mark.asyncio
    async def test_payload_with_error_key_is_not_a_failed_step(self, recorder):
        registry = make_registry(recorder)

        @registry.capability("report")
        async def report(config, input, session_id=None):
            return {"error": "none found", "count": 0}

        result = await WorkflowExecutor(registry).execute_workflow([{"type": "report"}], "hi")
        assert result.component_results[0]["error"] == "none found"
        assert result.failed_steps == []


# ============================================================================
# Empty workflows & top-level failures
# ============================================================================

class TestTopLevel:
    """Behavior at the boundaries of a run."""

    @pytest.mark.asyncio
    async def test_empty_workflow_returns_input(self, executor):
        payload = {"message": "unchanged"}
        result = await executor.execute_workflow([], payload)
        assert result.success is True
        assert result.result == payload
        assert result.component_results == []

    @pytest.mark.asyncio
    async def test_non_array_workflow_rejected(self, executor, recorder):
        result = await executor.execute_workflow("not-an-array", "hi")
        assert result.success is False
        assert result.error
        assert result.component_results is None
        assert recorder.calls == []
        assert "componentResults" not in result.to_response()

    @pytest.mark.asyncio
    async def test_missing_workflow_rejected(self, executor):
        result = await executor.execute_workflow(None, "hi")
        assert result.success is False
        assert "workflow is required" in result.error

    @pytest.mark.asyncio
    async def test_non_object_entry_rejected_before_running(self, executor, recorder):
        result = await executor.execute_workflow([{"type": "upper"}, "oops"], "hi")
        assert result.success is False
        assert "workflow[1]" in result.error
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_orchestration_error_is_top_level_failure(self, executor, monkeypatch):
        class BrokenBuilder:
            def __init__(self, *args, **kwargs):
                pass

            def build(self, *args, **kwargs):
                raise RuntimeError("chain construction failed")

        monkeypatch.setattr(executor_module, "ChainGraphBuilder", BrokenBuilder)
        result = await executor.execute_workflow([{"type": "upper"}], "hi")

        assert result.success is False
        assert result.error == "chain construction failed"
        assert result.component_results is None

    @pytest.mark.asyncio
    async def test_cancellation_stops_before_next_step(self, recorder):
        registry = make_registry(recorder)
        cancel = asyncio.Event()

        async def cancelling(config, input, session_id=None):
            cancel.set()
            return {"text": "done"}

        registry.register("cancelling", cancelling)
        executor = WorkflowExecutor(registry)

        result = await executor.execute_workflow(
            [{"type": "cancelling"}, {"type": "upper"}], "hi", cancel_event=cancel
        )
        assert result.success is False
        assert "cancelled before step 1 (upper)" in result.error
        assert recorder.inputs_for("upper") == []


# ============================================================================
# Capability forms, metrics, concurrency
# ============================================================================

class TestExecutorMisc:

    @pytest.mark.asyncio
    async def test_sync_capability_supported(self):
        registry = CapabilityRegistry()

        def reverse(config, input, session_id=None):
            return input[::-1]

        registry.register("reverse", reverse)
        result = await WorkflowExecutor(registry).execute_workflow([{"type": "reverse"}], "abc")
        # Non-mapping payloads are wrapped
        assert result.result["output"] == "cba"
        assert result.result["type"] == "reverse"

    @pytest.mark.asyncio
    async def test_metrics_report_partial_runs(self, executor):
        result = await executor.execute_workflow([{"type": "upper", "id": "a"}, {"type": "explode", "id": "b"}], "hi")
        metrics = result.metrics
        assert metrics["overall_status"] == "partial"
        assert metrics["steps_failed"] == 1
        assert [s["component_id"] for s in metrics["steps"]] == ["a", "b"]
        assert metrics["steps"][1]["error_message"] == "boom"

    @pytest.mark.asyncio
    async def test_concurrent_runs_do_not_share_state(self, executor):
        words = ["alpha", "beta", "gamma", "delta"]
        results = await asyncio.gather(*[
            executor.execute_workflow([{"type": "upper"}, {"type": "suffix"}], word, f"s-{word}")
            for word in words
        ])
        assert [r.result["text"] for r in results] == [w.upper() + "!" for w in words]
        assert all(len(r.component_results) == 2 for r in results)

    @pytest.mark.asyncio
    async def test_module_level_execute_uses_builtins(self, monkeypatch):
        monkeypatch.setattr(executor_module, "_default_executor", None)
        monkeypatch.delenv("APPFLOW_CHATBOT_BACKEND", raising=False)
        monkeypatch.delenv("APPFLOW_API_CALL_BACKEND", raising=False)

        result = await execute_workflow([{"type": "chatbot", "config": {}}], "Hello")
        assert result.success is True
        assert result.result["type"] == "chatbot"

    def test_repr(self, executor):
        assert "upper" in repr(executor)
