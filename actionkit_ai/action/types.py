from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from actionkit_ai.core.schemas import BaseSchema


class ActionKind(str, Enum):
    chat_llm = "chat-llm"
    text_llm = "text-llm"
    model = "model"
    prompt = "prompt"
    tool = "tool"
    flow = "flow"
    embedder = "embedder"
    evaluator = "evaluator"
    indexer = "indexer"
    retriever = "retriever"
    custom = "custom"


class ActionDescriptor(BaseSchema):
    """
    Serializable snapshot of an action's identity, used for listing and introspection.

    ``key`` is assigned by whatever registry owns the action; the action itself
    leaves it empty. Two descriptors are equal when key, name, description and
    metadata match. Schemas are not compared.
    """

    key: str = ""
    name: str
    description: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    input_schema: Optional[Dict[str, Any]] = Field(default=None, alias="inputSchema")
    output_schema: Optional[Dict[str, Any]] = Field(default=None, alias="outputSchema")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActionDescriptor):
            return NotImplemented
        return (
            self.key == other.key
            and self.name == other.name
            and self.description == other.description
            and self.metadata == other.metadata
        )

    def to_wire(self) -> Dict[str, Any]:
        """Dump with camelCase keys, as consumed by trace and listing tooling."""
        return self.model_dump(by_alias=True)
