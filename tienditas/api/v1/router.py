"""API v1 router combining all route modules."""

from fastapi import APIRouter

from tienditas.api.v1 import chat, health, orders

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Chat widget (anonymous, keyed by browsing session)
api_router.include_router(
    chat.router,
    prefix="/stores",
    tags=["chat"],
)

# Checkout deep link for the storefront cart
api_router.include_router(
    orders.router,
    prefix="/stores",
    tags=["orders"],
)
