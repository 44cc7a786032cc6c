"""Unit tests for the generation data model."""

import pytest
from pydantic import ValidationError

from actionkit_ai.generate.models import (
    Candidate,
    FinishReason,
    GenerateResponse,
    GenerationUsage,
    Media,
    Message,
    Part,
    Role,
    ToolRequest,
    ToolResponse,
)


class TestPart:
    def test_text_part(self):
        part = Part.from_text("hello")

        assert part.is_text
        assert part.text == "hello"

    def test_json_part(self):
        assert Part.from_json({"a": [1, 2]}).text == '{"a": [1, 2]}'

    @pytest.mark.parametrize(
        "fields",
        [
            {"media": Media(url="https://example.com/a.png", content_type="image/png")},
            {"data": {"rows": 3}},
            {"tool_request": ToolRequest(name="search", ref="1", input={"q": "x"})},
            {"tool_response": ToolResponse(name="search", ref="1", output=["hit"])},
        ],
    )
    def test_non_text_parts(self, fields):
        assert not Part(**fields).is_text

    def test_exactly_one_kind_required(self):
        with pytest.raises(ValidationError):
            Part()
        with pytest.raises(ValidationError):
            Part(text="a", data={"b": 1})

    def test_camel_case_wire_form(self):
        part = Part.model_validate({"toolRequest": {"name": "search", "input": {"q": "x"}}})

        assert part.tool_request.name == "search"
        assert part.model_dump(by_alias=True, exclude_none=True) == {
            "toolRequest": {"name": "search", "input": {"q": "x"}}
        }


class TestMessage:
    def test_text_concatenates_text_parts_only(self):
        message = Message(
            role=Role.model,
            content=[
                Part.from_text("Hello, "),
                Part(data={"ignored": True}),
                Part.from_text("World!"),
            ],
        )

        assert message.text() == "Hello, World!"

    def test_output_extracts_json(self):
        message = Message(content=[Part.from_text('```json\n{"a": 1}\n```')])

        assert message.output() == {"a": 1}

    def test_defaults(self):
        message = Message()

        assert message.role is Role.model
        assert message.content == []
        assert message.text() == ""


class TestCandidate:
    def test_without_message(self):
        candidate = Candidate()

        assert candidate.text() == ""
        assert candidate.output() is None
        assert candidate.finish_reason is FinishReason.unknown

    def test_wire_form(self):
        candidate = Candidate.model_validate(
            {
                "index": 1,
                "message": {"role": "model", "content": [{"text": "hi"}]},
                "finishReason": "stop",
                "usage": {"inputTokens": 3, "outputTokens": 1, "totalTokens": 4},
            }
        )

        assert candidate.finish_reason is FinishReason.stop
        assert candidate.usage == GenerationUsage(input_tokens=3, output_tokens=1, total_tokens=4)
        assert candidate.text() == "hi"


class TestGenerateResponse:
    def test_first_candidate_accessors(self):
        response = GenerateResponse(
            candidates=[
                Candidate(index=0, message=Message(content=[Part.from_text("[1, 2]")])),
                Candidate(index=1, message=Message(content=[Part.from_text("[3]")])),
            ]
        )

        assert response.text() == "[1, 2]"
        assert response.output() == [1, 2]

    def test_empty_response(self):
        response = GenerateResponse()

        assert response.text() == ""
        assert response.output() is None
