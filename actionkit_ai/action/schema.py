"""JSON schema inference for action input, output and stream types.

Schemas are derived with pydantic's ``TypeAdapter`` and post-processed so
that downstream tooling gets a self-contained document:

- a type with no fields (``None``, an empty model or dataclass) becomes
  ``{"type": "null"}``, the marker for "no meaningful payload";
- the top-level definition is always inlined, never a bare ``$ref`` into
  ``$defs``;
- the ``$schema`` dialect marker is dropped, since several editors only
  understand draft-07.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict

from pydantic import BaseModel, TypeAdapter

NULL_SCHEMA: Dict[str, Any] = {"type": "null"}

_DEFS_KEY = "$defs"
_DEFS_PREFIX = "#/$defs/"


def is_void_type(type_: Any) -> bool:
    """Return True for types that carry no fields at all."""
    if type_ is None or type_ is type(None):
        return True
    if isinstance(type_, type):
        if issubclass(type_, BaseModel):
            return not type_.model_fields
        if dataclasses.is_dataclass(type_):
            return not dataclasses.fields(type_)
    return False


def infer_json_schema(type_: Any) -> Dict[str, Any]:
    """
    Derive a JSON schema describing values of ``type_``.

    Args:
        type_: Any type pydantic can describe (models, dataclasses, TypedDicts,
            primitives, containers, ``Any``).

    Returns:
        A new, self-contained JSON schema dictionary.

    Raises:
        pydantic.PydanticSchemaGenerationError: If pydantic cannot describe the type.
    """
    if is_void_type(type_):
        return dict(NULL_SCHEMA)

    schema = _inline_top_level(TypeAdapter(type_).json_schema())
    schema.pop("$schema", None)
    return schema


def _inline_top_level(schema: Dict[str, Any]) -> Dict[str, Any]:
    ref = schema.get("$ref")
    if not isinstance(ref, str) or not ref.startswith(_DEFS_PREFIX):
        return schema

    name = ref[len(_DEFS_PREFIX):]
    defs = dict(schema.get(_DEFS_KEY, {}))
    top = defs[name]
    others = {k: v for k, v in defs.items() if k != name}

    inlined = {k: v for k, v in schema.items() if k not in ("$ref", _DEFS_KEY)}
    inlined.update(top)

    # Recursive types still point at their own definition.
    if ref not in json.dumps(top) and ref not in json.dumps(others):
        defs = others
    if defs:
        inlined[_DEFS_KEY] = defs
    return inlined
