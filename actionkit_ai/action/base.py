"""Typed, traceable actions.

An ``Action`` wraps a user function that takes an input of type ``In`` and
returns an output of type ``Out``, optionally streaming chunks of type ``S``
before it returns. Every run:

- opens a trace span named after the action (nested under the caller's span),
- measures the latency of the function call itself,
- records exactly one success or failure measurement,
- logs the input before and the output (or error) after, at debug level.

Input, output and stream schemas are inferred once, when the action is built.

Usage:
    from actionkit_ai.action import ActionKind, new_action

    async def shout(text: str) -> str:
        return text.upper()

    action = new_action("shout", ActionKind.tool, None, shout)
    assert await action.run("hi") == "HI"
"""

from __future__ import annotations

import asyncio
import copy
import inspect
import time
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Tuple, TypeVar, Union, get_type_hints

from pydantic import TypeAdapter

from actionkit_ai.core.logging_config import get_logger
from actionkit_ai.core.monitoring import record_action_failure, record_action_success

from .erased import EncodedPayload, ErasedAction
from .schema import infer_json_schema
from .streaming import NO_STREAM, StreamMode, StreamTo, stream_chunk_type
from .tracing import TracingState, get_default_tracing_state, record_output, set_custom_metadata_attr
from .types import ActionDescriptor, ActionKind

logger = get_logger(__name__)

In = TypeVar("In")
Out = TypeVar("Out")
S = TypeVar("S")

ActionFn = Callable[[In, StreamMode[S]], Union[Out, Awaitable[Out]]]

SPAN_TYPE = "action"

_UNSET: Any = object()
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _none_to_type(type_: Any) -> Any:
    return type(None) if type_ is None else type_


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class Action(ErasedAction, Generic[In, Out, S]):
    """
    A named, observable operation.

    Prefer ``new_action`` / ``new_streaming_action``, which read the types from
    the function's annotations. The constructor takes the types explicitly.

    Attributes:
        description: Free-text description shown in listings.
        metadata: Arbitrary metadata shown in listings, or None.
    """

    def __init__(
        self,
        name: str,
        kind: ActionKind,
        fn: ActionFn,
        *,
        input_type: Any = Any,
        output_type: Any = Any,
        stream_type: Any = None,
        metadata: Optional[Dict[str, Any]] = None,
        description: Optional[str] = None,
    ) -> None:
        """
        Args:
            name: Action name.
            kind: Action category, stamped on every span as the ``subtype`` metadata.
            fn: ``fn(input, stream)`` returning the output, plain or ``async``.
            input_type: Type the input is decoded into by ``invoke_encoded``.
            output_type: Type the output is encoded from by ``invoke_encoded``.
            stream_type: Type of streamed chunks; ``None`` for non-streaming actions.
            metadata: Arbitrary metadata for listings.
            description: Free-text description for listings.
        """
        self._name = name
        self._kind = ActionKind(kind)
        self._tracing_state: Optional[TracingState] = None

        self._input_type = input_type
        self._output_type = output_type
        self._stream_type = stream_type
        self._input_schema = infer_json_schema(input_type)
        self._output_schema = infer_json_schema(output_type)
        self._stream_schema = infer_json_schema(stream_type)
        self._input_adapter: TypeAdapter[Any] = TypeAdapter(_none_to_type(input_type))
        self._output_adapter: TypeAdapter[Any] = TypeAdapter(_none_to_type(output_type))
        self._stream_adapter: TypeAdapter[Any] = TypeAdapter(_none_to_type(stream_type))

        self.description = description
        self.metadata = metadata

        subtype = self._kind.value

        async def _traced_fn(input: In, stream: StreamMode[S]) -> Out:
            set_custom_metadata_attr("subtype", subtype)
            return await _resolve(fn(input, stream))

        self._fn = _traced_fn

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> ActionKind:
        return self._kind

    @property
    def input_type(self) -> Any:
        return self._input_type

    @property
    def output_type(self) -> Any:
        return self._output_type

    @property
    def stream_type(self) -> Any:
        return self._stream_type

    @property
    def input_schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._input_schema)

    @property
    def output_schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._output_schema)

    @property
    def stream_schema(self) -> Dict[str, Any]:
        return copy.deepcopy(self._stream_schema)

    @property
    def tracing_state(self) -> Optional[TracingState]:
        """The attached tracing scope, or None when the action was never registered."""
        return self._tracing_state

    def attach_tracing_state(self, state: TracingState) -> None:
        if self._tracing_state is not None and self._tracing_state is not state:
            raise RuntimeError(f"Action {self._name!r} is already attached to a different tracing state")
        self._tracing_state = state

    async def run(self, input: In, stream: StreamMode[S] = NO_STREAM) -> Out:
        """
        Execute the action function in a new trace span.

        Args:
            input: The native input value.
            stream: ``StreamTo`` receiving each chunk in order, or ``NO_STREAM``.

        Returns:
            The function's return value, unmodified.

        Raises:
            Exception: Whatever the function raised, unchanged, after a failure
                measurement has been recorded.
        """
        logger.debug(f"Action.run name={self._name} input={input!r}")
        output: Any = None
        error: Optional[BaseException] = None
        try:
            # Unregistered actions still get traced, under the default scope.
            state = self._tracing_state or get_default_tracing_state()
            with state.span(self._name, SPAN_TYPE, is_root=False, input=input) as span:
                start = time.perf_counter()
                try:
                    output = await self._fn(input, stream)
                except (Exception, asyncio.CancelledError) as exc:
                    latency_ms = (time.perf_counter() - start) * 1000
                    error = exc
                    record_action_failure(self._name, latency_ms, exc)
                    raise
                latency_ms = (time.perf_counter() - start) * 1000
                record_action_success(self._name, latency_ms)
                record_output(span, output)
                return output
        finally:
            logger.debug(f"Action.run name={self._name} output={output!r} err={error!r}")

    async def invoke_encoded(
        self,
        encoded_input: EncodedPayload,
        stream: StreamMode[bytes] = NO_STREAM,
    ) -> bytes:
        native_input = self._input_adapter.validate_json(encoded_input)

        native_stream: StreamMode[S] = NO_STREAM
        if isinstance(stream, StreamTo):
            native_stream = stream.map(self._stream_adapter.dump_json)

        output = await self.run(native_input, native_stream)
        return self._output_adapter.dump_json(output)

    def descriptor(self, key: str = "") -> ActionDescriptor:
        metadata = self.metadata
        if metadata is None:
            # Listing tooling expects both keys to exist.
            metadata = {"inputSchema": None, "outputSchema": None}
        return ActionDescriptor(
            key=key,
            name=self._name,
            description=self.description or "",
            metadata=dict(metadata),
            input_schema=self.input_schema,
            output_schema=self.output_schema,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._name}, kind={self._kind.value})"


# =====================================================================
# Constructors
# =====================================================================


def _positional_params(fn: Callable[..., Any]) -> List[inspect.Parameter]:
    return [p for p in inspect.signature(fn).parameters.values() if p.kind in _POSITIONAL]


def _declared_types(name: str, fn: Callable[..., Any], streaming: bool) -> Tuple[Any, Any, Any]:
    """Read (input, output, stream chunk) types from a function's annotations."""
    try:
        hints = get_type_hints(fn)
    except Exception as exc:
        raise TypeError(
            f"Cannot resolve type annotations of action {name!r}; pass input_type/output_type explicitly: {exc}"
        ) from exc

    params = _positional_params(fn)
    input_type = hints.get(params[0].name, Any) if params else None
    output_type = hints.get("return", Any)
    stream_type: Any = None
    if streaming:
        stream_type = stream_chunk_type(hints[params[1].name]) if len(params) > 1 and params[1].name in hints else Any
    return input_type, output_type, stream_type


def new_streaming_action(
    name: str,
    kind: ActionKind,
    metadata: Optional[Dict[str, Any]],
    fn: Callable[[In, StreamMode[S]], Union[Out, Awaitable[Out]]],
    *,
    input_type: Any = _UNSET,
    output_type: Any = _UNSET,
    stream_type: Any = _UNSET,
    description: Optional[str] = None,
) -> Action[In, Out, S]:
    """
    Create an action whose function may stream chunks before returning.

    Args:
        name: Action name.
        kind: Action category.
        metadata: Arbitrary metadata for listings, or None.
        fn: ``fn(input, stream)``; ``stream`` is ``NO_STREAM`` or a ``StreamTo``.
        input_type: Overrides the annotated type of ``fn``'s first parameter.
        output_type: Overrides the annotated return type of ``fn``.
        stream_type: Overrides ``S`` from the ``StreamMode[S]`` annotation of ``fn``'s second parameter.
        description: Free-text description for listings.
    """
    if any(t is _UNSET for t in (input_type, output_type, stream_type)):
        declared = _declared_types(name, fn, streaming=True)
        input_type = declared[0] if input_type is _UNSET else input_type
        output_type = declared[1] if output_type is _UNSET else output_type
        stream_type = declared[2] if stream_type is _UNSET else stream_type

    return Action(
        name,
        kind,
        fn,
        input_type=input_type,
        output_type=output_type,
        stream_type=stream_type,
        metadata=metadata,
        description=description,
    )


def new_action(
    name: str,
    kind: ActionKind,
    metadata: Optional[Dict[str, Any]],
    fn: Callable[[In], Union[Out, Awaitable[Out]]],
    *,
    input_type: Any = _UNSET,
    output_type: Any = _UNSET,
    description: Optional[str] = None,
) -> Action[In, Out, None]:
    """
    Create a non-streaming action. ``fn`` takes the input and returns the output.

    A function without parameters makes an action whose input type is ``None``.
    """
    takes_input = bool(_positional_params(fn))
    if input_type is _UNSET or output_type is _UNSET:
        declared_input, declared_output, _ = _declared_types(name, fn, streaming=False)
        input_type = declared_input if input_type is _UNSET else input_type
        output_type = declared_output if output_type is _UNSET else output_type

    def _ignore_stream(input: In, stream: StreamMode[None]) -> Union[Out, Awaitable[Out]]:
        return fn(input) if takes_input else fn()  # type: ignore[call-arg]

    return Action(
        name,
        kind,
        _ignore_stream,
        input_type=input_type,
        output_type=output_type,
        stream_type=None,
        metadata=metadata,
        description=description,
    )
