"""Extraction of JSON payloads from model text.

Models often wrap structured answers in a Markdown code fence, or surround
them with prose. ``strip_code_fence`` removes exactly one enclosing fence and
is what contract validation uses. ``extract_json`` is the lenient variant
behind the ``output()`` accessors: it also digs the first JSON object or array
out of surrounding prose.
"""

import json
import re
from typing import Any, Optional

_FENCE_RE = re.compile(r"\A\s*```[^\n`]*\n(.*?)\n?```\s*\Z", re.DOTALL)
_JSON_START_RE = re.compile(r"[\[{]")


def strip_code_fence(text: str) -> str:
    """
    Remove one enclosing fenced code block.

    Args:
        text: Model text, e.g. ``"```json\\n{...}\\n```"``.

    Returns:
        The fenced body when the whole text is one fenced block, otherwise the
        text unchanged.
    """
    match = _FENCE_RE.match(text)
    if match is None:
        return text
    return match.group(1)


def extract_json(text: str) -> Optional[Any]:
    """
    Best-effort extraction of a JSON value from model text.

    Tries the fenced body (or whole text) first, then the first decodable
    object or array embedded in the text.

    Returns:
        The decoded value, or None when nothing decodes.
    """
    body = strip_code_fence(text).strip()
    if not body:
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        pass

    decoder = json.JSONDecoder()
    for match in _JSON_START_RE.finditer(body):
        try:
            value, _ = decoder.raw_decode(body, match.start())
        except json.JSONDecodeError:
            continue
        return value
    return None
