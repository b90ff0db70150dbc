"""handlers.py — Route table and per-route request handlers.

Each handler takes the API Gateway event and a ProductGateway and returns a
proxy response. Gateway results are mapped to status codes here.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from config import HEALTH_PATH, PRODUCT_KEY, PRODUCT_PATH, PRODUCTS_PATH, logger
from gateway import GatewayResult, ProductGateway
from http_utils import InvalidBodyError, _error, _json_body, _query_params, _response

__all__ = [
    "ROUTES",
    "STORELESS_HANDLERS",
    "_dispatch",
    "_needs_store",
    "_resolve_route",
]

Handler = Callable[[Dict[str, Any], ProductGateway], Dict[str, Any]]


def _store_failure(result: GatewayResult) -> Dict[str, Any]:
    err = result.error
    if err.is_validation:
        return _error(400, f"Request rejected by store: {err.message}", store_code=err.code)
    return _error(500, f"Database {err.operation.lower()} failed.", store_code=err.code)


def _require_product_id(source: Dict[str, Any]) -> Optional[str]:
    value = source.get(PRODUCT_KEY)
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _success(operation: str, **fields: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"Operation": operation, "Message": "SUCCESS"}
    body.update(fields)
    return _response(200, body)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_health(event: Dict[str, Any], gateway: Optional[ProductGateway]) -> Dict[str, Any]:
    return _response(200)


def _handle_get_product(event: Dict[str, Any], gateway: ProductGateway) -> Dict[str, Any]:
    product_id = _require_product_id(_query_params(event))
    if product_id is None:
        return _error(400, f"Query parameter '{PRODUCT_KEY}' is required.")

    result = gateway.get(product_id)
    if not result.ok:
        return _store_failure(result)
    if not result.found:
        return _error(404, f"Product not found: {product_id}", productId=product_id)
    return _response(200, result.value)


def _handle_get_products(event: Dict[str, Any], gateway: ProductGateway) -> Dict[str, Any]:
    result = gateway.scan_all()
    if not result.ok:
        return _store_failure(result)
    return _response(200, {"products": result.value})


def _handle_save_product(event: Dict[str, Any], gateway: ProductGateway) -> Dict[str, Any]:
    record = _json_body(event)
    if _require_product_id(record) is None:
        return _error(400, f"Field '{PRODUCT_KEY}' is required.")

    result = gateway.put(record)
    if not result.ok:
        return _store_failure(result)
    logger.info("product saved: %s", record[PRODUCT_KEY])
    return _success("SAVE", Item=result.value)


def _handle_update_product(event: Dict[str, Any], gateway: ProductGateway) -> Dict[str, Any]:
    body = _json_body(event)
    product_id = _require_product_id(body)
    if product_id is None:
        return _error(400, f"Field '{PRODUCT_KEY}' is required.")
    update_key = body.get("updateKey")
    if not isinstance(update_key, str) or not update_key:
        return _error(400, "Field 'updateKey' is required.")
    if update_key == PRODUCT_KEY:
        return _error(400, f"Field '{PRODUCT_KEY}' cannot be updated.")

    result = gateway.update(product_id, update_key, body.get("updateValue"))
    if not result.ok:
        return _store_failure(result)
    if not result.found:
        return _error(404, f"Product not found: {product_id}", productId=product_id)
    logger.info("product updated: %s field=%s", product_id, update_key)
    return _success("UPDATE", UpdatedAttributes={"Attributes": result.value})


def _handle_delete_product(event: Dict[str, Any], gateway: ProductGateway) -> Dict[str, Any]:
    product_id = _require_product_id(_json_body(event))
    if product_id is None:
        return _error(400, f"Field '{PRODUCT_KEY}' is required.")

    result = gateway.delete(product_id)
    if not result.ok:
        return _store_failure(result)
    item: Dict[str, Any] = {}
    if result.found:
        item["Attributes"] = result.value
    logger.info("product deleted: %s existed=%s", product_id, result.found)
    return _success("DELETE", Item=item)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

ROUTES: Dict[Tuple[str, str], Handler] = {
    ("GET", HEALTH_PATH): _handle_health,
    ("GET", PRODUCT_PATH): _handle_get_product,
    ("GET", PRODUCTS_PATH): _handle_get_products,
    ("POST", PRODUCT_PATH): _handle_save_product,
    ("PATCH", PRODUCT_PATH): _handle_update_product,
    ("DELETE", PRODUCT_PATH): _handle_delete_product,
}

STORELESS_HANDLERS = frozenset({_handle_health})


def _resolve_route(method: str, path: str) -> Optional[Handler]:
    return ROUTES.get((method, path))


def _needs_store(handler: Handler) -> bool:
    return handler not in STORELESS_HANDLERS


def _dispatch(event: Dict[str, Any], gateway: Optional[ProductGateway], handler: Handler) -> Dict[str, Any]:
    try:
        return handler(event, gateway)
    except InvalidBodyError as exc:
        return _error(400, str(exc))
