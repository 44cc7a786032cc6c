"""Typed, traceable actions and their type-erased invocation surface.

An *action* is a named function with declared input, output and (optionally)
stream chunk types:

- ``Action`` runs the function inside a trace span and records one success or
  failure measurement per run.
- ``ErasedAction`` is the non-generic view used by anything that holds many
  differently-typed actions: it takes and returns JSON-encoded payloads.
- Input/output schemas are inferred once, at construction, by
  ``infer_json_schema``.

This package exports:

- ``Action``, ``new_action``, ``new_streaming_action``: typed actions.
- ``ErasedAction``, ``ActionDescriptor``, ``ActionKind``: the erased surface.
- ``NO_STREAM``, ``NoStream``, ``StreamTo``, ``StreamMode``: streaming modes.
- ``TracingState`` and the default-scope lifecycle functions.
"""

from .base import Action, new_action, new_streaming_action
from .erased import ErasedAction
from .schema import NULL_SCHEMA, infer_json_schema
from .streaming import NO_STREAM, NoStream, StreamMode, StreamTo
from .tracing import (
    TracingState,
    get_default_tracing_state,
    init_default_tracing_state,
    reset_default_tracing_state,
    set_custom_metadata_attr,
)
from .types import ActionDescriptor, ActionKind

__all__ = [
    "Action",
    "new_action",
    "new_streaming_action",
    "ErasedAction",
    "ActionDescriptor",
    "ActionKind",
    "NULL_SCHEMA",
    "infer_json_schema",
    "NO_STREAM",
    "NoStream",
    "StreamMode",
    "StreamTo",
    "TracingState",
    "get_default_tracing_state",
    "init_default_tracing_state",
    "reset_default_tracing_state",
    "set_custom_metadata_attr",
]
