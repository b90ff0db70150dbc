"""http_utils.py — HTTP response building, body parsing, path/method extraction."""
from __future__ import annotations

import base64
import binascii
import json
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

__all__ = [
    "_error",
    "_json_body",
    "_path_method",
    "_query_params",
    "_request_id",
    "_response",
    "InvalidBodyError",
]

_NO_BODY = object()


class InvalidBodyError(ValueError):
    """Raised when a request body is not a JSON object."""


# ---------------------------------------------------------------------------
# HTTP helpers
# ---------------------------------------------------------------------------


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _response(status_code: int, payload: Any = _NO_BODY) -> Dict[str, Any]:
    """Build an API Gateway proxy response; omitting payload yields an empty body."""
    body = "" if payload is _NO_BODY else json.dumps(payload, default=_json_default)
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": body,
    }


def _error(status_code: int, message: str, **extra: Any) -> Dict[str, Any]:
    code = str(extra.pop("code", "") or "").strip().upper()
    if not code:
        if status_code == 400:
            code = "INVALID_INPUT"
        elif status_code == 404:
            code = "NOT_FOUND"
        else:
            code = "INTERNAL_ERROR"
    retryable = bool(extra.pop("retryable", status_code >= 500))
    details = dict(extra)
    body: Dict[str, Any] = {
        "success": False,
        "error": message,
        "error_envelope": {
            "code": code,
            "message": message,
            "retryable": retryable,
            "details": details,
        },
    }
    return _response(status_code, body)


def _json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Parse the request body as a JSON object (handles base64).

    Raises InvalidBodyError for a missing, malformed, or non-object body.
    """
    raw = event.get("body")
    if raw is None or raw == "":
        raise InvalidBodyError("Request body is required.")
    if isinstance(raw, dict):
        return raw
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidBodyError("Request body is not valid base64.") from exc
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise InvalidBodyError("Request body is not valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise InvalidBodyError("Request body must be a JSON object.")
    return parsed


def _query_params(event: Dict[str, Any]) -> Dict[str, str]:
    return event.get("queryStringParameters") or {}


def _path_method(event: Dict[str, Any]) -> Tuple[str, str]:
    """Extract HTTP method and path from a REST (v1) or HTTP API (v2) event."""
    rc = event.get("requestContext") or {}
    http = rc.get("http") or {}
    method = str(event.get("httpMethod") or http.get("method") or "")
    path = str(event.get("path") or http.get("path") or event.get("rawPath") or "")
    return method, path


def _request_id(context: Any) -> Optional[str]:
    return getattr(context, "aws_request_id", None)
