"""gateway.py — Product record persistence against a single DynamoDB table.

Every operation returns a GatewayResult instead of raising, so the caller
always has something to turn into an HTTP response. Store failures are
logged here with the DynamoDB error code and carried on ``result.error``.
"""
from __future__ import annotations

import decimal
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from config import PRODUCT_KEY, logger
from serialization import _deserialize, _serialize, _serialize_item

__all__ = [
    "GatewayResult",
    "ProductGateway",
    "StoreError",
]


@dataclass(frozen=True)
class StoreError:
    operation: str
    code: str
    message: str

    @property
    def is_validation(self) -> bool:
        return self.code == "ValidationException"


@dataclass(frozen=True)
class GatewayResult:
    value: Any = None
    found: bool = True
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _store_error(operation: str, exc: Exception) -> StoreError:
    if isinstance(exc, ClientError):
        err = exc.response.get("Error", {})
        code = str(err.get("Code") or "ClientError")
        message = str(err.get("Message") or exc)
    else:
        code = type(exc).__name__
        message = str(exc)
    logger.error("DynamoDB (%s) error: code=%s message=%s", operation, code, message)
    return StoreError(operation=operation, code=code, message=message)


def _invalid_value(operation: str, exc: Exception) -> StoreError:
    message = f"Value cannot be stored: {str(exc) or type(exc).__name__}"
    logger.warning("DynamoDB (%s) rejected value: %s", operation, message)
    return StoreError(operation=operation, code="ValidationException", message=message)


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code") or "")


class ProductGateway:
    """Thin wrapper over the low-level DynamoDB client for one table."""

    def __init__(self, client: Any, table_name: str, page_size: Optional[int] = None):
        self._client = client
        self._table = table_name
        self._page_size = page_size

    @property
    def table_name(self) -> str:
        return self._table

    def _key(self, product_id: str) -> Dict[str, Any]:
        return {PRODUCT_KEY: _serialize(product_id)}

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def get(self, product_id: str) -> GatewayResult:
        try:
            resp = self._client.get_item(TableName=self._table, Key=self._key(product_id))
        except (BotoCoreError, ClientError) as exc:
            return GatewayResult(found=False, error=_store_error("GET", exc))
        item = resp.get("Item")
        if not item:
            return GatewayResult(found=False)
        return GatewayResult(value=_deserialize(item))

    def scan_all(self) -> GatewayResult:
        """Return every record, following LastEvaluatedKey page by page."""
        params: Dict[str, Any] = {"TableName": self._table}
        if self._page_size:
            params["Limit"] = self._page_size
        records: List[Dict[str, Any]] = []
        pages = 0
        started = time.monotonic()
        while True:
            try:
                resp = self._client.scan(**params)
            except (BotoCoreError, ClientError) as exc:
                return GatewayResult(value=records, error=_store_error("SCAN", exc))
            pages += 1
            records.extend(_deserialize(item) for item in resp.get("Items", []))
            lek = resp.get("LastEvaluatedKey")
            if not lek:
                break
            params["ExclusiveStartKey"] = lek
        logger.info(
            "scan complete: table=%s pages=%d items=%d elapsed_ms=%d",
            self._table, pages, len(records), int((time.monotonic() - started) * 1000),
        )
        return GatewayResult(value=records)

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def put(self, record: Dict[str, Any]) -> GatewayResult:
        try:
            item = _serialize_item(record)
        except (TypeError, decimal.DecimalException) as exc:
            return GatewayResult(error=_invalid_value("SAVE", exc))
        try:
            self._client.put_item(TableName=self._table, Item=item)
        except (BotoCoreError, ClientError) as exc:
            return GatewayResult(error=_store_error("SAVE", exc))
        return GatewayResult(value=record)

    def update(self, product_id: str, field: str, value: Any) -> GatewayResult:
        """Set one field on an existing record; a missing record is not found."""
        try:
            serialized = _serialize(value)
        except (TypeError, decimal.DecimalException) as exc:
            return GatewayResult(error=_invalid_value("UPDATE", exc))
        try:
            resp = self._client.update_item(
                TableName=self._table,
                Key=self._key(product_id),
                UpdateExpression="SET #field = :value",
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames={"#field": field, "#pk": PRODUCT_KEY},
                ExpressionAttributeValues={":value": serialized},
                ReturnValues="UPDATED_NEW",
            )
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                return GatewayResult(found=False)
            return GatewayResult(error=_store_error("UPDATE", exc))
        except BotoCoreError as exc:
            return GatewayResult(error=_store_error("UPDATE", exc))
        return GatewayResult(value=_deserialize(resp.get("Attributes") or {}))

    def delete(self, product_id: str) -> GatewayResult:
        """Delete a record; value is the prior record, or None if there was none."""
        try:
            resp = self._client.delete_item(
                TableName=self._table,
                Key=self._key(product_id),
                ReturnValues="ALL_OLD",
            )
        except (BotoCoreError, ClientError) as exc:
            return GatewayResult(error=_store_error("DELETE", exc))
        prior = resp.get("Attributes")
        if not prior:
            return GatewayResult(value=None, found=False)
        return GatewayResult(value=_deserialize(prior))
