"""Output contracts declared by callers of a model.

An ``OutputContract`` says what shape a candidate's text must have: free text,
JSON (optionally constrained by a JSON schema), or one value of an enum.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from actionkit_ai.action.schema import infer_json_schema
from actionkit_ai.core.schemas import BaseSchema

from .models import Part

OUTPUT_INSTRUCTIONS_TEMPLATE = """

Output should be JSON formatted and conform to the following schema:

```
{schema}
```"""


class OutputFormat(str, Enum):
    unspecified = ""
    text = "text"
    json = "json"
    enum = "enum"
    other = "other"


class OutputContract(BaseSchema):
    """
    Expected shape of a candidate's text.

    Attributes:
        format: The output format.
        schema_: JSON schema the parsed output must satisfy, passed and
            serialized as ``schema``. None means format-only checking
            (e.g. "must parse as JSON").
    """

    format: OutputFormat = OutputFormat.unspecified
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")

    @classmethod
    def from_type(cls, type_: Any) -> "OutputContract":
        """JSON contract whose schema is inferred from ``type_``."""
        return cls(format=OutputFormat.json, schema_=infer_json_schema(type_))


def output_instructions(contract: OutputContract) -> Optional[Part]:
    """
    Build the prompt part asking a model to answer in the contract's schema.

    Returns:
        A text part to append to the user message, or None when the contract
        carries no schema.
    """
    if contract.schema_ is None:
        return None
    return Part.from_text(OUTPUT_INSTRUCTIONS_TEMPLATE.format(schema=json.dumps(contract.schema_)))
