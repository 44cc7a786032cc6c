"""ActionKit-AI.

This package wraps typed functions as named, traceable actions and validates
generated model output against declared output contracts.

High-level architecture
-----------------------

The codebase is organized around two concerns:

- **Actions**: a typed function (plain or streaming) wrapped with inferred
  input/output/stream JSON schemas, a tracing span per invocation and uniform
  success/failure metrics. The type-erased ``ErasedAction`` interface lets a
  caller invoke any action with JSON bytes without knowing its types.
- **Output contracts**: a declared format (text, JSON, enum) plus an optional
  JSON schema that a generated candidate's text must satisfy.

Core subpackages
----------------

- ``actionkit_ai.action``:

  - Schema inference, action kinds and descriptors.
  - The ``Action`` class with ``new_action``/``new_streaming_action`` constructors.
  - Streaming callback modes and logfire-backed tracing state.

- ``actionkit_ai.generate``:

  - Messages, parts and candidates.
  - ``OutputContract`` and the candidate validator.
  - An adapter for pydantic-ai model responses.

- ``actionkit_ai.core``:

  - Settings, logging setup and logfire metrics.

Typical workflow
----------------

1. Wrap a function with ``new_action`` and describe it with ``descriptor()``.
2. Invoke it natively with ``run`` or with JSON bytes via ``invoke_encoded``.
3. Validate model output for a structured step with ``validate_candidate``.
"""
