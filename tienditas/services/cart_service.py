"""Shopping cart and the order message handed off to WhatsApp.

The wording of the order message is what customers and shop owners read in
their chat, so its line order and text must stay stable.
"""

import enum
import logging
from dataclasses import dataclass
from urllib.parse import quote

from tienditas.core.config import settings
from tienditas.schemas.store import PaymentInfo, Product

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves untouched besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"


class CartState(str, enum.Enum):
    """Lifecycle of a storefront cart."""

    EMPTY = "empty"
    POPULATED = "populated"
    CHECKOUT = "checkout"


@dataclass
class CartItem:
    """A product in the cart with its quantity."""

    product: Product
    quantity: int

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


def format_money(amount: float) -> str:
    """Format an amount for display, rounding to cents."""
    return f"{settings.currency_symbol} {amount:.2f}"


def whatsapp_link(number: str, message: str) -> str:
    """Build the messaging deep link with a pre-filled, percent-encoded text."""
    encoded = quote(message, safe=_URI_COMPONENT_SAFE)
    return f"https://{settings.messaging_host}/{number}?text={encoded}"


class Cart:
    """Cart for a single storefront session. Nothing is persisted."""

    def __init__(self) -> None:
        self._items: list[CartItem] = []
        self._checkout_started = False

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def state(self) -> CartState:
        if not self._items:
            return CartState.EMPTY
        if self._checkout_started:
            return CartState.CHECKOUT
        return CartState.POPULATED

    def _find(self, product_id: int) -> CartItem | None:
        return next((item for item in self._items if item.product.id == product_id), None)

    def add_item(self, product: Product) -> None:
        """Add one unit. Products already in the cart keep their position."""
        item = self._find(product.id)
        if item:
            item.quantity += 1
        else:
            self._items.append(CartItem(product=product, quantity=1))

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set the quantity exactly; below 1 removes the item. Absent ids are ignored."""
        if quantity < 1:
            self.remove_item(product_id)
            return
        item = self._find(product_id)
        if item:
            item.quantity = quantity

    def remove_item(self, product_id: int) -> None:
        self._items = [item for item in self._items if item.product.id != product_id]

    def clear(self) -> None:
        self._items = []
        self._checkout_started = False

    def total(self) -> float:
        """Unrounded sum of line totals."""
        return sum((item.line_total for item in self._items), 0.0)

    def item_count(self) -> int:
        """Number of units in the cart."""
        return sum(item.quantity for item in self._items)

    def checkout(self, payment_info: PaymentInfo, store_name: str) -> str:
        """Start checkout and return the WhatsApp link carrying the order.

        Raises:
            ValueError: If the cart is empty.
        """
        if not self._items:
            raise ValueError("Cannot check out an empty cart.")
        self._checkout_started = True
        message = format_order_message(self, payment_info, store_name)
        logger.info("Checkout for %s: %d units", store_name, self.item_count())
        return whatsapp_link(payment_info.whatsapp, message)


def format_order_message(cart: Cart, payment_info: PaymentInfo, store_name: str) -> str:
    """Render the order summary sent to the shop over WhatsApp."""
    message = f"¡Hola {store_name}! 👋 Quisiera hacer el siguiente pedido:\n\n"
    for item in cart.items:
        message += f"- {item.product.name} (x{item.quantity}) - {format_money(item.line_total)}\n"
    message += f"\n*Total a pagar: {format_money(cart.total())}*"
    message += (
        f"\n\nEl pago lo realizaré a nombre de *{payment_info.name}* "
        f"al Yape/Plin: *{payment_info.phone}*."
    )
    message += "\n\n¡Muchas gracias! 😊"
    return message


def format_inquiry_message(store_name: str, product: Product | None = None) -> str:
    """Pre-filled question for the storefront's contact links."""
    if product is None:
        return f"¡Hola {store_name}! 👋 Tengo una consulta sobre sus productos."
    return f"¡Hola {store_name}! 👋 Quisiera más información sobre *{product.name}*."
