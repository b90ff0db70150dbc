"""config.py — Environment configuration, route constants, logging.

Environment variables:
    PRODUCT_TABLE            default: productTable-1
    DYNAMODB_REGION          default: ap-southeast-1
    DYNAMODB_ENDPOINT_URL    optional (local DynamoDB)
    PRODUCT_SCAN_PAGE_SIZE   optional Limit for each scan page
    LOG_LEVEL                default: INFO
"""
from __future__ import annotations

import logging
import os
from typing import Optional

__all__ = [
    "DYNAMODB_ENDPOINT_URL",
    "DYNAMODB_REGION",
    "HEALTH_PATH",
    "PRODUCTS_PATH",
    "PRODUCT_KEY",
    "PRODUCT_PATH",
    "PRODUCT_TABLE",
    "SCAN_PAGE_SIZE",
    "logger",
]


def _optional_int(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

PRODUCT_TABLE = os.environ.get("PRODUCT_TABLE", "productTable-1")
DYNAMODB_REGION = os.environ.get("DYNAMODB_REGION", "ap-southeast-1")
DYNAMODB_ENDPOINT_URL = os.environ.get("DYNAMODB_ENDPOINT_URL") or None
SCAN_PAGE_SIZE = _optional_int("PRODUCT_SCAN_PAGE_SIZE")

PRODUCT_KEY = "productId"

HEALTH_PATH = "/health"
PRODUCT_PATH = "/product"
PRODUCTS_PATH = "/products"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger()
logger.setLevel(getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))
