"""Validation of generated candidates against output contracts.

``validate_candidate`` confirms a candidate's text satisfies a contract:

- every candidate needs a message with at least one part;
- text (and unspecified or other) contracts accept any content as-is;
- JSON contracts strip one enclosing code fence, parse the text, and check it
  against the contract's JSON schema when one is given;
- enum contracts check the bare text against the schema as a JSON string.

On success the returned copy holds the extracted payload as its text, so
``candidate.text()`` yields clean JSON without fences.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema.validators import validator_for
from referencing import Registry
from referencing.exceptions import Unresolvable

from actionkit_ai.core.logging_config import get_logger

from .contract import OutputContract, OutputFormat
from .errors import (
    CandidateValidationError,
    InvalidJSONError,
    InvalidSchemaError,
    NoContentError,
    NoMessageError,
    NoValidCandidateError,
    SchemaMismatchError,
)
from .extract import strip_code_fence
from .models import Candidate, GenerateResponse, Message, Part

logger = get_logger(__name__)


def validate_against_schema(instance: Any, schema: Dict[str, Any]) -> None:
    """
    Check ``instance`` against a JSON schema, in the schema's own dialect.

    Raises:
        InvalidSchemaError: If ``schema`` is not a valid schema, or has a ``$ref`` that does not resolve.
        SchemaMismatchError: If ``instance`` violates ``schema``; lists every violation.
    """
    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except jsonschema_exceptions.SchemaError as e:
        raise InvalidSchemaError(e.message) from e

    # Empty registry: references resolve within the schema only, never over the network.
    validator = validator_cls(schema, registry=Registry())
    try:
        violations = sorted(validator.iter_errors(instance), key=lambda error: error.json_path)
    except Unresolvable as e:
        raise InvalidSchemaError(str(e)) from e
    if violations:
        raise SchemaMismatchError([f"{error.json_path}: {error.message}" for error in violations])


def _with_text(candidate: Candidate, message: Message, text: str) -> Candidate:
    """Copy ``candidate`` with the text parts of ``message`` collapsed into one part holding ``text``."""
    content: List[Part] = []
    placed = False
    for part in message.content:
        if not part.is_text:
            content.append(part)
        elif not placed:
            content.append(Part.from_text(text))
            placed = True
    if not placed:
        content.insert(0, Part.from_text(text))
    return candidate.model_copy(update={"message": message.model_copy(update={"content": content})})


def validate_candidate(candidate: Candidate, contract: OutputContract) -> Candidate:
    """
    Confirm ``candidate`` satisfies ``contract``.

    Args:
        candidate: The generated candidate. It is never mutated.
        contract: The declared output contract.

    Returns:
        ``candidate`` itself for text-like contracts; for JSON and enum
        contracts, a copy whose text is the extracted payload.

    Raises:
        NoMessageError: The candidate has no message.
        NoContentError: The message has no parts.
        InvalidJSONError: A JSON contract got text that does not parse.
        SchemaMismatchError: The parsed output violates the schema.
        InvalidSchemaError: The contract's schema is not a valid schema.
    """
    if candidate.message is None:
        raise NoMessageError()
    if not candidate.message.content:
        raise NoContentError()

    if contract.format is OutputFormat.json:
        text = strip_code_fence(candidate.text())
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidJSONError(str(e)) from e
        if contract.schema_ is not None:
            validate_against_schema(data, contract.schema_)
        return _with_text(candidate, candidate.message, text)

    if contract.format is OutputFormat.enum:
        text = strip_code_fence(candidate.text()).strip().strip('"')
        if contract.schema_ is not None:
            validate_against_schema(text, contract.schema_)
        return _with_text(candidate, candidate.message, text)

    return candidate


def validate_response(response: GenerateResponse, contract: OutputContract) -> GenerateResponse:
    """
    Keep the candidates of ``response`` that satisfy ``contract``.

    Returns:
        A copy of ``response`` holding only the validated (normalized) candidates.

    Raises:
        NoValidCandidateError: No candidate satisfies the contract; carries each candidate's error.
    """
    valid: List[Candidate] = []
    errors: List[CandidateValidationError] = []
    for candidate in response.candidates:
        try:
            valid.append(validate_candidate(candidate, contract))
        except CandidateValidationError as e:
            logger.debug(f"Candidate {candidate.index} rejected: {e}")
            errors.append(e)

    if not valid:
        raise NoValidCandidateError(errors)
    return response.model_copy(update={"candidates": valid})
