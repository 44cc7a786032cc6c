"""Error types for output contract validation.

Each failure kind has its own class and a distinct message prefix, so callers
can tell a model that ignored the requested format (``InvalidJSONError``,
``SchemaMismatchError``) apart from a malformed contract
(``InvalidSchemaError``).
"""

from __future__ import annotations

from typing import List, Sequence


class CandidateValidationError(Exception):
    """Base error for all output contract violations."""


class NoMessageError(CandidateValidationError):
    """Raised when a candidate carries no message."""

    def __init__(self) -> None:
        super().__init__("candidate with no message")


class NoContentError(CandidateValidationError):
    """Raised when a candidate's message has no parts."""

    def __init__(self) -> None:
        super().__init__("candidate message has no content")


class InvalidJSONError(CandidateValidationError):
    """Raised when a JSON contract is given text that does not parse as JSON."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"candidate did not have valid JSON: {detail}")


class SchemaMismatchError(CandidateValidationError):
    """Raised when parsed output does not satisfy the contract's schema."""

    def __init__(self, violations: Sequence[str]) -> None:
        self.violations: List[str] = list(violations)
        details = "".join(f"\n- {violation}" for violation in self.violations)
        super().__init__(f"data did not match expected schema:{details}")


class InvalidSchemaError(CandidateValidationError):
    """Raised when the contract's schema is not itself a valid JSON schema."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"failed to validate data against expected schema: {detail}")


class NoValidCandidateError(CandidateValidationError):
    """Raised when no candidate of a response satisfies the contract."""

    def __init__(self, errors: Sequence[CandidateValidationError]) -> None:
        self.errors: List[CandidateValidationError] = list(errors)
        super().__init__("generation resulted in no candidates matching provided output schema")
