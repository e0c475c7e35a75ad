"""Pydantic schemas for store configuration and request/response validation."""

from tienditas.schemas.common import BaseSchema, CamelSchema, HealthResponse
from tienditas.schemas.store import (
    HeroBanner,
    PaymentInfo,
    Product,
    StoreCollection,
    StoreRecord,
    TemplateId,
)

__all__ = [
    "BaseSchema",
    "CamelSchema",
    "HealthResponse",
    # Store configuration
    "HeroBanner",
    "PaymentInfo",
    "Product",
    "StoreCollection",
    "StoreRecord",
    "TemplateId",
]
