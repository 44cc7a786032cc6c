"""Model framework adapters.

Available Adapters:
- pydantic_ai: Converts pydantic-ai model responses into candidates
"""

from .pydantic_ai import candidate_from_model_response, response_from_model_response

__all__ = [
    "candidate_from_model_response",
    "response_from_model_response",
]
