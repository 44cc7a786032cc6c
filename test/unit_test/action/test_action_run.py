"""Unit tests for typed action construction and native execution."""

import asyncio
from typing import List
from unittest.mock import ANY, patch

import pytest
from pydantic import BaseModel

from actionkit_ai.action import (
    NO_STREAM,
    Action,
    ActionKind,
    StreamMode,
    StreamTo,
    TracingState,
    init_default_tracing_state,
    new_action,
    new_streaming_action,
)
from actionkit_ai.action.tracing import OUTPUT_ATTR, STATE_ATTR


class Question(BaseModel):
    text: str


class Answer(BaseModel):
    text: str
    confidence: float


async def answer(question: Question) -> Answer:
    return Answer(text=question.text.upper(), confidence=0.9)


def shout(text: str) -> str:
    return text.upper()


def ping() -> str:
    return "pong"


async def count(n: int, stream: StreamMode[int]) -> int:
    if isinstance(stream, StreamTo):
        for i in range(n):
            await stream.send(i)
    return n


@pytest.fixture
def metrics():
    with patch("actionkit_ai.action.base.record_action_success") as success, patch(
        "actionkit_ai.action.base.record_action_failure"
    ) as failure:
        yield success, failure


class TestNewAction:
    """Actions built from plain and async functions."""

    @pytest.mark.asyncio
    async def test_async_function(self, metrics):
        action = new_action("answer", ActionKind.tool, None, answer)

        output = await action.run(Question(text="why"))

        assert output == Answer(text="WHY", confidence=0.9)

    @pytest.mark.asyncio
    async def test_plain_function(self, metrics):
        action = new_action("shout", ActionKind.tool, None, shout)

        assert await action.run("hi") == "HI"

    def test_types_and_schemas_read_from_annotations(self):
        action = new_action("answer", ActionKind.tool, None, answer)

        assert action.input_type is Question
        assert action.output_type is Answer
        assert action.stream_type is None
        assert action.input_schema["title"] == "Question"
        assert action.output_schema["required"] == ["text", "confidence"]
        assert action.stream_schema == {"type": "null"}

    @pytest.mark.asyncio
    async def test_function_without_input(self, metrics):
        action = new_action("ping", ActionKind.tool, None, ping)

        assert action.input_type is None
        assert action.input_schema == {"type": "null"}
        assert await action.run(None) == "pong"

    def test_explicit_types_override_annotations(self):
        action = new_action("echo", ActionKind.custom, None, lambda value: value, input_type=int, output_type=int)

        assert action.input_schema == {"type": "integer"}
        assert action.output_schema == {"type": "integer"}

    def test_unannotated_function_accepts_anything(self):
        action = new_action("echo", ActionKind.custom, None, lambda value: value)

        assert action.input_schema == {}
        assert action.output_schema == {}

    def test_unresolvable_annotation_raises_type_error(self):
        def broken(value: "NotDefinedAnywhere") -> str:  # noqa: F821
            return str(value)

        with pytest.raises(TypeError, match="broken"):
            new_action("broken", ActionKind.tool, None, broken)

    def test_schema_copies_are_independent(self):
        action = new_action("answer", ActionKind.tool, None, answer)

        action.input_schema["title"] = "changed"

        assert action.input_schema["title"] == "Question"

    def test_kind_and_repr(self):
        action = new_action("shout", ActionKind.chat_llm, None, shout)

        assert action.kind is ActionKind.chat_llm
        assert repr(action) == "Action(name=shout, kind=chat-llm)"


class TestStreamingAction:
    @pytest.mark.asyncio
    async def test_chunks_delivered_in_order_before_return(self, metrics):
        events: List[str] = []

        def on_chunk(chunk: int) -> None:
            events.append(f"chunk:{chunk}")

        action = new_streaming_action("count", ActionKind.flow, None, count)
        result = await action.run(3, StreamTo(on_chunk))
        events.append(f"result:{result}")

        assert events == ["chunk:0", "chunk:1", "chunk:2", "result:3"]

    @pytest.mark.asyncio
    async def test_no_stream(self, metrics):
        action = new_streaming_action("count", ActionKind.flow, None, count)

        assert await action.run(3, NO_STREAM) == 3
        assert await action.run(2) == 2

    def test_stream_type_from_annotation(self):
        action = new_streaming_action("count", ActionKind.flow, None, count)

        assert action.stream_type is int
        assert action.stream_schema == {"type": "integer"}

    def test_explicit_stream_type(self):
        action = new_streaming_action("count", ActionKind.flow, None, count, stream_type=str)

        assert action.stream_schema == {"type": "string"}
        assert action.input_type is int


class TestActionOutcomes:
    """Each run records exactly one success or failure measurement."""

    @pytest.mark.asyncio
    async def test_success_recorded_once(self, metrics):
        success, failure = metrics
        action = new_action("shout", ActionKind.tool, None, shout)

        await action.run("hi")

        success.assert_called_once_with("shout", ANY)
        assert success.call_args.args[1] >= 0
        failure.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_propagates_unchanged(self, metrics):
        success, failure = metrics
        error = LookupError("no such document")

        async def lookup(key: str) -> str:
            raise error

        action = new_action("lookup", ActionKind.retriever, None, lookup)

        with pytest.raises(LookupError) as exc_info:
            await action.run("doc-1")

        assert exc_info.value is error
        failure.assert_called_once_with("lookup", ANY, error)
        assert failure.call_args.args[1] >= 0
        success.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancellation_recorded_as_failure(self, metrics):
        success, failure = metrics

        async def hang(value: str) -> str:
            raise asyncio.CancelledError()

        action = new_action("hang", ActionKind.tool, None, hang)

        with pytest.raises(asyncio.CancelledError):
            await action.run("x")

        failure.assert_called_once()
        success.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_constructor(self, metrics):
        action = Action(
            "double",
            ActionKind.custom,
            lambda value, stream: value * 2,
            input_type=int,
            output_type=int,
        )

        assert await action.run(21) == 42


class TestActionTracing:
    @pytest.mark.asyncio
    async def test_span_per_run(self, metrics, tracing_state, finished_spans):
        action = new_action("shout", ActionKind.tool, None, shout)
        action.attach_tracing_state(tracing_state)

        await action.run("hi")

        (span,) = finished_spans()
        assert span.name == "shout"
        assert span.attributes["actionkit:metadata:subtype"] == "tool"
        assert span.attributes[OUTPUT_ATTR] == "HI"
        assert span.attributes[STATE_ATTR] == "success"

    @pytest.mark.asyncio
    async def test_failed_run_marks_span(self, metrics, tracing_state, finished_spans):
        def fail(value: str) -> str:
            raise RuntimeError("model unavailable")

        action = new_action("fail", ActionKind.model, None, fail)
        action.attach_tracing_state(tracing_state)

        with pytest.raises(RuntimeError):
            await action.run("hi")

        (span,) = finished_spans()
        assert span.attributes[STATE_ATTR] == "error"
        assert OUTPUT_ATTR not in span.attributes

    @pytest.mark.asyncio
    async def test_nested_actions_share_trace(self, metrics, tracing_state, finished_spans):
        inner = new_action("inner", ActionKind.tool, None, shout)
        inner.attach_tracing_state(tracing_state)

        async def outer_fn(text: str) -> str:
            return await inner.run(text)

        outer = new_action("outer", ActionKind.flow, None, outer_fn)
        outer.attach_tracing_state(tracing_state)

        await outer.run("hi")

        inner_span, outer_span = finished_spans()
        assert inner_span.parent.span_id == outer_span.context.span_id
        assert inner_span.attributes["actionkit:metadata:subtype"] == "tool"
        assert outer_span.attributes["actionkit:metadata:subtype"] == "flow"

    @pytest.mark.asyncio
    async def test_unattached_action_uses_default_state(self, metrics, tracing_state, finished_spans):
        init_default_tracing_state(tracing_state)
        action = new_action("shout", ActionKind.tool, None, shout)

        await action.run("hi")

        assert action.tracing_state is None
        assert [span.name for span in finished_spans()] == ["shout"]

    def test_attach_is_idempotent_for_same_state(self, tracing_state):
        action = new_action("shout", ActionKind.tool, None, shout)

        action.attach_tracing_state(tracing_state)
        action.attach_tracing_state(tracing_state)

        assert action.tracing_state is tracing_state

    def test_attach_rejects_a_different_state(self, tracing_state, local_logfire):
        action = new_action("shout", ActionKind.tool, None, shout)
        action.attach_tracing_state(tracing_state)

        with pytest.raises(RuntimeError):
            action.attach_tracing_state(TracingState(local_logfire))


class TestDescriptor:
    def test_placeholder_metadata_when_absent(self):
        descriptor = new_action("shout", ActionKind.tool, None, shout).descriptor()

        assert descriptor.key == ""
        assert descriptor.name == "shout"
        assert descriptor.description == ""
        assert descriptor.metadata == {"inputSchema": None, "outputSchema": None}
        assert descriptor.input_schema == {"type": "string"}
        assert descriptor.output_schema == {"type": "string"}

    def test_metadata_and_description_carried(self):
        action = new_action(
            "shout",
            ActionKind.tool,
            {"owner": "text"},
            shout,
            description="Upper-cases text",
        )

        descriptor = action.descriptor(key="/tool/shout")

        assert descriptor.key == "/tool/shout"
        assert descriptor.description == "Upper-cases text"
        assert descriptor.metadata == {"owner": "text"}

    def test_descriptor_metadata_is_a_copy(self):
        metadata = {"owner": "text"}
        action = new_action("shout", ActionKind.tool, metadata, shout)

        action.descriptor().metadata["owner"] = "changed"

        assert metadata == {"owner": "text"}
