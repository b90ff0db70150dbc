"""serialization.py — DynamoDB attribute conversion, timestamps, structured logs."""
from __future__ import annotations

import datetime as dt
import json
from decimal import Decimal
from typing import Any, Dict, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from config import logger

__all__ = [
    "_deserialize",
    "_emit_structured_observability",
    "_from_ddb_value",
    "_now_z",
    "_serialize",
    "_serialize_item",
    "_to_ddb_value",
]

# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

_deserializer = TypeDeserializer()
_serializer = TypeSerializer()


def _to_ddb_value(value: Any) -> Any:
    """Deep-convert floats to Decimal; TypeSerializer rejects float."""
    # bool is a subclass of int; leave it alone
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, list):
        return [_to_ddb_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_ddb_value(v) for k, v in value.items()}
    return value


def _from_ddb_value(value: Any) -> Any:
    """Deep-convert Decimal back to int/float and sets to sorted lists."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, list):
        return [_from_ddb_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_from_ddb_value(v) for v in value), key=str)
    if isinstance(value, dict):
        return {k: _from_ddb_value(v) for k, v in value.items()}
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _serialize(value: Any) -> Dict[str, Any]:
    return _serializer.serialize(_to_ddb_value(value))


def _serialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _serialize(v) for k, v in item.items()}


def _deserialize(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a DynamoDB typed map to a plain JSON-friendly dict."""
    return {k: _from_ddb_value(_deserializer.deserialize(v)) for k, v in raw.items()}


def _now_z() -> str:
    return dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _emit_structured_observability(
    *,
    component: str,
    event: str,
    request_id: Optional[str] = None,
    status_code: Optional[int] = None,
    latency_ms: Optional[int] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    payload: Dict[str, Any] = {
        "timestamp": _now_z(),
        "component": component,
        "event": event,
        "request_id": str(request_id or ""),
        "status_code": int(status_code or 0),
        "latency_ms": int(max(0, latency_ms or 0)),
        "error_code": str(error_code or ""),
    }
    if extra:
        payload.update(extra)
    logger.info("[OBSERVABILITY] %s", json.dumps(payload, sort_keys=True, default=str))
