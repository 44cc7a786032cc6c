"""Output contract validation for generated model responses.

This package holds the generation data model (messages, parts, candidates),
the output contracts callers declare, and the validator that checks a
candidate's text against a contract.
"""

from .contract import OUTPUT_INSTRUCTIONS_TEMPLATE, OutputContract, OutputFormat, output_instructions
from .errors import (
    CandidateValidationError,
    InvalidJSONError,
    InvalidSchemaError,
    NoContentError,
    NoMessageError,
    NoValidCandidateError,
    SchemaMismatchError,
)
from .extract import extract_json, strip_code_fence
from .models import (
    Candidate,
    FinishReason,
    GenerateResponse,
    GenerationUsage,
    Media,
    Message,
    Part,
    Role,
    ToolRequest,
    ToolResponse,
)
from .validation import validate_against_schema, validate_candidate, validate_response

__all__ = [
    "OUTPUT_INSTRUCTIONS_TEMPLATE",
    "OutputContract",
    "OutputFormat",
    "output_instructions",
    "CandidateValidationError",
    "InvalidJSONError",
    "InvalidSchemaError",
    "NoContentError",
    "NoMessageError",
    "NoValidCandidateError",
    "SchemaMismatchError",
    "extract_json",
    "strip_code_fence",
    "Candidate",
    "FinishReason",
    "GenerateResponse",
    "GenerationUsage",
    "Media",
    "Message",
    "Part",
    "Role",
    "ToolRequest",
    "ToolResponse",
    "validate_against_schema",
    "validate_candidate",
    "validate_response",
]
