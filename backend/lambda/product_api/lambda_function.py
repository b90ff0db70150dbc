"""product_api/lambda_function.py

Lambda API for the product catalog table. Maps API Gateway proxy requests
onto single-table DynamoDB operations keyed by ``productId``.

Routes (via API Gateway proxy):
    GET    /health                          — liveness check, empty body
    GET    /product?productId={id}          — fetch one product
    GET    /products                        — list every product (full scan)
    POST   /product                         — create or overwrite a product
    PATCH  /product                         — set one field on a product
                                              body: productId, updateKey, updateValue
    DELETE /product                         — delete a product (body: productId)

Anything else answers 404 with body "404 Not Found". The handler never
raises: store failures and unexpected errors become 4xx/5xx responses.

Environment variables: see config.py.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

from aws_clients import _get_ddb
from config import PRODUCT_TABLE, SCAN_PAGE_SIZE, logger
from gateway import ProductGateway
from handlers import _dispatch, _needs_store, _resolve_route
from http_utils import _error, _path_method, _request_id, _response
from serialization import _emit_structured_observability

NOT_FOUND_BODY = "404 Not Found"

_gateway: Optional[ProductGateway] = None


def _get_gateway() -> ProductGateway:
    """Build the gateway once per process around the shared DynamoDB client."""
    global _gateway
    if _gateway is None:
        _gateway = ProductGateway(_get_ddb(), PRODUCT_TABLE, page_size=SCAN_PAGE_SIZE)
    return _gateway


def _set_gateway(gateway: Optional[ProductGateway]) -> None:
    global _gateway
    _gateway = gateway


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def lambda_handler(event: Dict, context: Any) -> Dict:
    started = time.monotonic()
    event = event or {}
    method, path = _path_method(event)
    logger.info("request: method=%s path=%s", method, path)

    handler = _resolve_route(method, path)
    if handler is None:
        resp = _response(404, NOT_FOUND_BODY)
    else:
        try:
            gateway = _get_gateway() if _needs_store(handler) else None
            resp = _dispatch(event, gateway, handler)
        except Exception:
            logger.exception("unhandled error: method=%s path=%s", method, path)
            resp = _error(500, "Internal server error.")

    _emit_structured_observability(
        component="product_api",
        event="request",
        request_id=_request_id(context),
        status_code=resp["statusCode"],
        latency_ms=int((time.monotonic() - started) * 1000),
        extra={"method": method, "path": path},
    )
    return resp
