"""Pydantic AI response adapter.

Converts a ``pydantic_ai.messages.ModelResponse`` into the candidate model
used by output contract validation, so pydantic-ai model output can be
checked with ``validate_candidate``/``validate_response``.
"""

from typing import Any, Dict, List, Optional

from pydantic_ai.messages import ModelResponse, TextPart, ToolCallPart

from actionkit_ai.core.logging_config import get_logger

from ..models import (
    Candidate,
    FinishReason,
    GenerateResponse,
    GenerationUsage,
    Message,
    Part,
    Role,
    ToolRequest,
)

logger = get_logger(__name__)

# pydantic-ai finish reasons mapped onto candidate finish reasons
FINISH_REASONS: Dict[str, FinishReason] = {
    "stop": FinishReason.stop,
    "tool_call": FinishReason.stop,
    "length": FinishReason.length,
    "content_filter": FinishReason.blocked,
    "error": FinishReason.other,
}


def _usage_from(response: ModelResponse) -> GenerationUsage:
    usage = getattr(response, "usage", None)
    if usage is None:
        return GenerationUsage()

    # Older releases name these request/response tokens
    input_tokens: Optional[int] = getattr(usage, "input_tokens", None)
    if input_tokens is None:
        input_tokens = getattr(usage, "request_tokens", None)
    output_tokens: Optional[int] = getattr(usage, "output_tokens", None)
    if output_tokens is None:
        output_tokens = getattr(usage, "response_tokens", None)

    total_tokens: Optional[int] = getattr(usage, "total_tokens", None)
    if total_tokens is None and input_tokens is not None and output_tokens is not None:
        total_tokens = input_tokens + output_tokens

    return GenerationUsage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens)


def _finish_reason_from(response: ModelResponse) -> FinishReason:
    reason = getattr(response, "finish_reason", None)
    if reason is None:
        return FinishReason.unknown
    return FINISH_REASONS.get(str(reason), FinishReason.other)


def _tool_request_from(part: ToolCallPart) -> ToolRequest:
    try:
        tool_input: Any = part.args_as_dict()
    except ValueError:
        # Malformed JSON from the model; keep it as-is for the caller to inspect
        logger.debug(f"Tool call {part.tool_name} has undecodable args, keeping raw text")
        tool_input = part.args
    return ToolRequest(name=part.tool_name, ref=part.tool_call_id, input=tool_input)


def _parts_from(response: ModelResponse) -> List[Part]:
    parts: List[Part] = []
    for part in response.parts:
        if isinstance(part, TextPart):
            parts.append(Part.from_text(part.content))
        elif isinstance(part, ToolCallPart):
            parts.append(Part(tool_request=_tool_request_from(part)))
        else:
            logger.debug(f"Skipping unsupported response part: {type(part).__name__}")
    return parts


def candidate_from_model_response(response: ModelResponse, index: int = 0) -> Candidate:
    """
    Convert a pydantic-ai model response into a candidate.

    Text parts become text parts and tool calls become tool requests; other
    part kinds (e.g. thinking) are skipped.

    Args:
        response: The model response.
        index: Index the candidate gets within its response.

    Returns:
        A candidate whose message has the ``model`` role.
    """
    custom: Optional[Dict[str, Any]] = None
    model_name = getattr(response, "model_name", None)
    if model_name:
        custom = {"model_name": model_name}

    return Candidate(
        index=index,
        message=Message(role=Role.model, content=_parts_from(response)),
        finish_reason=_finish_reason_from(response),
        usage=_usage_from(response),
        custom=custom,
    )


def response_from_model_response(response: ModelResponse) -> GenerateResponse:
    """Wrap a pydantic-ai model response as a single-candidate response."""
    candidate = candidate_from_model_response(response)
    return GenerateResponse(candidates=[candidate], usage=candidate.usage)
