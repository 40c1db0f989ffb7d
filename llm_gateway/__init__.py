from __future__ import annotations  # Re-export llm_gateway public API

from .llm_gateway import (
    HttpClient,
    HttpResponse,
    LlmGatewayError,
    ParseError,
    coerce_messages,
    complete,
    completion,
    parse_structured,
    runnable,
    strip_code_fences,
)

__all__ = [
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "ParseError",
    "coerce_messages",
    "complete",
    "completion",
    "parse_structured",
    "runnable",
    "strip_code_fences",
]
