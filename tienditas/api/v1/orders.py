"""WhatsApp checkout link for the storefront cart."""

import logging

from fastapi import APIRouter, HTTPException, status

from tienditas.core.deps import CommittedStore
from tienditas.schemas.order import OrderLinkRequest, OrderLinkResponse
from tienditas.services.cart_service import Cart, format_order_message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{store_id}/orders/link",
    response_model=OrderLinkResponse,
    summary="Build the order deep link",
)
async def create_order_link(
    store_id: str,
    data: OrderLinkRequest,
    store: CommittedStore,
) -> OrderLinkResponse:
    """
    Turn the cart contents into the pre-filled WhatsApp order message.

    Prices and names come from the committed store, never from the client.
    Repeated lines for the same product add up.
    """
    cart = Cart()
    for line in data.items:
        product = store.find_product(line.product_id)
        if product is None:
            logger.warning("Order for store %s names unknown product %s", store_id, line.product_id)
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown product {line.product_id} for store {store_id}",
            )
        existing = next((item for item in cart.items if item.product.id == product.id), None)
        already = existing.quantity if existing else 0
        cart.add_item(product)
        cart.update_quantity(product.id, already + line.quantity)

    message = format_order_message(cart, store.payment_info, store.name)
    link = cart.checkout(store.payment_info, store.name)
    return OrderLinkResponse(
        message=message,
        link=link,
        total=cart.total(),
        item_count=cart.item_count(),
    )
