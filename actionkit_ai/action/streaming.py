"""Streaming modes for action invocations.

An invocation either streams intermediate chunks to a callback or it does
not. The two cases are distinct types rather than an optional callback:

- ``NO_STREAM`` (a ``NoStream`` instance): the caller only wants the final result.
- ``StreamTo(callback)``: every chunk the action produces is forwarded to
  ``callback`` in order, before the action returns its final result.

Action functions that support streaming branch on the mode::

    async def count(n: int, stream: StreamMode[int]) -> int:
        if isinstance(stream, StreamTo):
            for i in range(n):
                await stream.send(i)
        return n
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union, get_args, get_origin

S = TypeVar("S")
T = TypeVar("T")


@dataclass(frozen=True)
class NoStream:
    """The invocation does not stream; chunks have nowhere to go."""


NO_STREAM = NoStream()


@dataclass(frozen=True)
class StreamTo(Generic[S]):
    """The invocation streams each chunk to ``callback``.

    ``callback`` may be a plain function or a coroutine function. Any exception
    it raises propagates into the action function that sent the chunk.
    """

    callback: Callable[[S], Union[None, Awaitable[None]]]

    async def send(self, chunk: S) -> None:
        result = self.callback(chunk)
        if inspect.isawaitable(result):
            await result

    def map(self, fn: Callable[[T], S]) -> "StreamTo[T]":
        """Return a stream that converts each chunk with ``fn`` before forwarding it here."""

        async def _forward(chunk: T) -> None:
            await self.send(fn(chunk))

        return StreamTo(_forward)


StreamMode = Union[NoStream, StreamTo[S]]


def stream_chunk_type(annotation: Any) -> Any:
    """Return ``S`` from a ``StreamMode[S]`` or ``StreamTo[S]`` annotation, or ``Any``."""
    candidates = get_args(annotation) if get_origin(annotation) is Union else (annotation,)
    for candidate in candidates:
        if get_origin(candidate) is StreamTo:
            args = get_args(candidate)
            return args[0] if args else Any
    return Any
