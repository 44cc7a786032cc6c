from __future__ import annotations

import json
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, model_validator

from actionkit_ai.core.schemas import BaseSchema

from .extract import extract_json


class Role(str, Enum):
    user = "user"
    model = "model"
    system = "system"
    tool = "tool"


class FinishReason(str, Enum):
    stop = "stop"
    length = "length"
    blocked = "blocked"
    other = "other"
    unknown = "unknown"


class Media(BaseSchema):
    url: str
    content_type: Optional[str] = Field(default=None, alias="contentType")


class ToolRequest(BaseSchema):
    name: str
    ref: Optional[str] = None
    input: Any = None


class ToolResponse(BaseSchema):
    name: str
    ref: Optional[str] = None
    output: Any = None


class Part(BaseSchema):
    """
    One piece of message content.

    Exactly one of ``text``, ``media``, ``data``, ``tool_request`` or
    ``tool_response`` is set.
    """

    text: Optional[str] = None
    media: Optional[Media] = None
    data: Any = None
    tool_request: Optional[ToolRequest] = Field(default=None, alias="toolRequest")
    tool_response: Optional[ToolResponse] = Field(default=None, alias="toolResponse")

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "Part":
        kinds = [self.text, self.media, self.data, self.tool_request, self.tool_response]
        set_kinds = sum(kind is not None for kind in kinds)
        if set_kinds != 1:
            raise ValueError(f"a part must carry exactly one kind of content, got {set_kinds}")
        return self

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)

    @classmethod
    def from_json(cls, value: Any) -> "Part":
        """Build a text part holding ``value`` serialized as JSON."""
        return cls(text=json.dumps(value))

    @property
    def is_text(self) -> bool:
        return self.text is not None


class Message(BaseSchema):
    role: Role = Role.model
    content: List[Part] = Field(default_factory=list)

    def text(self) -> str:
        """Concatenate the text of all text parts."""
        return "".join(part.text for part in self.content if part.text is not None)

    def output(self) -> Optional[Any]:
        """Best-effort JSON value extracted from ``text()``, or None."""
        return extract_json(self.text())


class GenerationUsage(BaseSchema):
    input_tokens: Optional[int] = Field(default=None, alias="inputTokens")
    output_tokens: Optional[int] = Field(default=None, alias="outputTokens")
    total_tokens: Optional[int] = Field(default=None, alias="totalTokens")


class Candidate(BaseSchema):
    """One generated response alternative."""

    index: int = 0
    message: Optional[Message] = None
    finish_reason: FinishReason = Field(default=FinishReason.unknown, alias="finishReason")
    finish_message: str = Field(default="", alias="finishMessage")
    usage: GenerationUsage = Field(default_factory=GenerationUsage)
    custom: Any = None

    def text(self) -> str:
        """Text of the candidate's message; empty when there is no message."""
        if self.message is None:
            return ""
        return self.message.text()

    def output(self) -> Optional[Any]:
        if self.message is None:
            return None
        return self.message.output()


class GenerateResponse(BaseSchema):
    candidates: List[Candidate] = Field(default_factory=list)
    usage: GenerationUsage = Field(default_factory=GenerationUsage)
    custom: Any = None

    def text(self) -> str:
        """Text of the first candidate, or an empty string."""
        if not self.candidates:
            return ""
        return self.candidates[0].text()

    def output(self) -> Optional[Any]:
        """JSON value of the first candidate, or None."""
        if not self.candidates:
            return None
        return self.candidates[0].output()
