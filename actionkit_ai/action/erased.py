"""Type-erased view of an action.

``Action`` is generic over its input, output and stream types. Anything that
needs to hold many differently-typed actions side by side (a registry, a
dispatch table, a wire-protocol handler) depends on ``ErasedAction`` instead:
it exposes identity and descriptor information and an invocation method that
takes and returns JSON-encoded payloads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from .streaming import NO_STREAM, StreamMode
from .tracing import TracingState
from .types import ActionDescriptor, ActionKind

EncodedPayload = Union[bytes, bytearray, str]


class ErasedAction(ABC):
    """Non-generic interface shared by every action."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The action name, unique within whatever registry owns it."""

    @property
    @abstractmethod
    def kind(self) -> ActionKind:
        """The action category."""

    @abstractmethod
    def descriptor(self, key: str = "") -> ActionDescriptor:
        """
        Describe the action for listing and introspection.

        Args:
            key: Registry key to stamp on the descriptor. Actions do not know
                their own key, so this defaults to empty.
        """

    @abstractmethod
    def attach_tracing_state(self, state: TracingState) -> None:
        """Bind the tracing scope the action runs in. Called once, at registration."""

    @abstractmethod
    async def invoke_encoded(
        self,
        encoded_input: EncodedPayload,
        stream: StreamMode[bytes] = NO_STREAM,
    ) -> bytes:
        """
        Run the action with a JSON-encoded input and return the JSON-encoded output.

        Args:
            encoded_input: JSON document decodable into the action's input type.
            stream: ``StreamTo`` receiving each streamed chunk as encoded JSON, or ``NO_STREAM``.

        Returns:
            The JSON-encoded output.

        Raises:
            pydantic.ValidationError: If the input cannot be decoded; the action is not run.
            pydantic_core.PydanticSerializationError: If the output or a chunk cannot be encoded.
            Exception: Whatever the action function raised, unchanged.
        """
