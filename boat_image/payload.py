"""JSON framing for the request/response boundary."""

from __future__ import annotations

import base64
from typing import Any, Dict, Mapping, Tuple

from .models import ErrorKind, FetchOutcome, ImageRequest

Body = Dict[str, Any]


def parse_request(body: Any) -> ImageRequest:
    """Build an ImageRequest from a decoded JSON object.

    A missing or non-string ``url`` yields an empty source URL, which the
    orchestrator rejects as an invalid request.
    """
    url = body.get("url") if isinstance(body, Mapping) else None
    return ImageRequest(source_url=url if isinstance(url, str) else "")


def to_data_url(data: bytes, content_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def build_response(outcome: FetchOutcome) -> Tuple[int, Body]:
    """Map an outcome to an HTTP status code and JSON body."""
    if outcome.success:
        return 200, {
            "success": True,
            "image": to_data_url(outcome.data, outcome.content_type),
            "contentType": outcome.content_type,
            "size": outcome.size,
        }
    status = 400 if outcome.error_kind is ErrorKind.INVALID_REQUEST else 500
    return status, {"success": False, "error": outcome.error}
