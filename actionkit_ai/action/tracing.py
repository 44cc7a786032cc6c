"""Trace spans for action executions.

A ``TracingState`` is the tracing scope an action runs in. It wraps a
``logfire.Logfire`` instance, so spans go wherever Logfire was configured to
send them (the Logfire platform, the console, or an in-memory exporter in
tests). Every action execution opens one span named after the action.

Actions that were never attached to a scope fall back to the process-wide
default scope, managed with ``init_default_tracing_state()``,
``get_default_tracing_state()`` and ``reset_default_tracing_state()``.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

import logfire
from opentelemetry import context as otel_context

from actionkit_ai.core.logging_config import get_logger

logger = get_logger(__name__)

ATTR_PREFIX = "actionkit"
NAME_ATTR = f"{ATTR_PREFIX}:name"
TYPE_ATTR = f"{ATTR_PREFIX}:type"
INPUT_ATTR = f"{ATTR_PREFIX}:input"
OUTPUT_ATTR = f"{ATTR_PREFIX}:output"
STATE_ATTR = f"{ATTR_PREFIX}:state"
IS_ROOT_ATTR = f"{ATTR_PREFIX}:isRoot"
METADATA_ATTR_PREFIX = f"{ATTR_PREFIX}:metadata:"

_current_span: ContextVar[Optional[logfire.LogfireSpan]] = ContextVar("actionkit_current_span", default=None)


class TracingState:
    """Tracing scope that opens action spans through a Logfire instance."""

    def __init__(self, instance: Optional[logfire.Logfire] = None) -> None:
        """
        Args:
            instance: The Logfire instance to create spans with. Defaults to
                Logfire's process-wide default instance.
        """
        self._logfire = instance or logfire.DEFAULT_LOGFIRE_INSTANCE

    @property
    def logfire(self) -> logfire.Logfire:
        return self._logfire

    @contextmanager
    def span(
        self,
        name: str,
        span_type: str,
        *,
        is_root: bool = False,
        input: Any = None,
    ) -> Iterator[logfire.LogfireSpan]:
        """
        Open a span for one execution.

        A non-root span nests under whatever span is active in the caller. A
        root span detaches from the caller's trace and starts a new one.
        Exceptions escaping the block mark the span as failed and propagate
        unchanged.

        Args:
            name: Span name, normally the action name.
            span_type: Category recorded as ``actionkit:type`` (e.g. ``"action"``).
            is_root: Start a new trace instead of nesting.
            input: Value recorded as ``actionkit:input``.
        """
        attributes = {NAME_ATTR: name, TYPE_ATTR: span_type, INPUT_ATTR: input}
        if is_root:
            attributes[IS_ROOT_ATTR] = True

        detach_token = otel_context.attach(otel_context.Context()) if is_root else None
        try:
            with self._logfire.span("{action_name}", _span_name=name, action_name=name, **attributes) as span:
                span_token = _current_span.set(span)
                try:
                    yield span
                except BaseException:
                    span.set_attribute(STATE_ATTR, "error")
                    raise
                else:
                    span.set_attribute(STATE_ATTR, "success")
                finally:
                    _current_span.reset(span_token)
        finally:
            if detach_token is not None:
                otel_context.detach(detach_token)


def record_output(span: logfire.LogfireSpan, value: Any) -> None:
    """Record the final value of an execution on its span."""
    span.set_attribute(OUTPUT_ATTR, value)


def set_custom_metadata_attr(key: str, value: Any) -> None:
    """
    Stamp ``actionkit:metadata:<key>`` on the innermost active action span.

    Does nothing when called outside an action span.
    """
    span = _current_span.get()
    if span is None:
        return
    span.set_attribute(f"{METADATA_ATTR_PREFIX}{key}", value)


# =====================================================================
# Process-wide default scope
# =====================================================================

_default_state: Optional[TracingState] = None
_default_lock = threading.Lock()


def init_default_tracing_state(state: Optional[TracingState] = None) -> TracingState:
    """
    Install the process-wide default tracing scope.

    Args:
        state: The scope to install. Defaults to one bound to Logfire's default instance.

    Returns:
        The installed scope.
    """
    global _default_state
    with _default_lock:
        _default_state = state or TracingState()
        logger.debug("Default tracing state initialized")
        return _default_state


def get_default_tracing_state() -> TracingState:
    """Return the process-wide default scope, installing the default one on first use."""
    global _default_state
    with _default_lock:
        if _default_state is None:
            _default_state = TracingState()
            logger.debug("Default tracing state initialized on first use")
        return _default_state


def reset_default_tracing_state() -> None:
    """Drop the process-wide default scope; the next lookup installs a fresh one."""
    global _default_state
    with _default_lock:
        _default_state = None
