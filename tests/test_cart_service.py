"""Tests for the storefront cart and the WhatsApp order message."""

from urllib.parse import parse_qs, urlsplit

import pytest

from tienditas.schemas.store import PaymentInfo, Product, StoreCollection
from tienditas.services.cart_service import (
    Cart,
    CartState,
    format_inquiry_message,
    format_money,
    format_order_message,
    whatsapp_link,
)


@pytest.fixture
def chocolate(collection: StoreCollection) -> Product:
    return collection["sachacacao"].products[0]


@pytest.fixture
def chocoteja(collection: StoreCollection) -> Product:
    return collection["sachacacao"].products[1]


@pytest.fixture
def payment(collection: StoreCollection) -> PaymentInfo:
    return collection["sachacacao"].payment_info


@pytest.fixture
def cart(chocolate: Product, chocoteja: Product) -> Cart:
    cart = Cart()
    cart.add_item(chocolate)
    cart.add_item(chocolate)
    for _ in range(3):
        cart.add_item(chocoteja)
    return cart


class TestCart:
    """Tests for Cart operations."""

    def test_empty_cart(self) -> None:
        cart = Cart()

        assert cart.state == CartState.EMPTY
        assert cart.total() == 0
        assert cart.item_count() == 0

    def test_add_increments_existing_line(self, cart: Cart) -> None:
        assert [(item.product.id, item.quantity) for item in cart.items] == [(1, 2), (2, 3)]
        assert cart.state == CartState.POPULATED

    def test_total_and_count(self, cart: Cart) -> None:
        assert cart.total() == pytest.approx(37.50)
        assert cart.item_count() == 5

    def test_update_quantity_sets_exact_value(self, cart: Cart) -> None:
        cart.update_quantity(2, 1)

        assert cart.items[1].quantity == 1
        assert cart.total() == pytest.approx(32.50)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_below_one_removes_line(self, cart: Cart, quantity: int) -> None:
        cart.update_quantity(1, quantity)

        assert [item.product.id for item in cart.items] == [2]

    def test_update_absent_id_is_noop(self, cart: Cart) -> None:
        cart.update_quantity(99, 4)

        assert cart.item_count() == 5

    def test_remove_and_clear(self, cart: Cart) -> None:
        cart.remove_item(1)
        assert cart.item_count() == 3

        cart.clear()
        assert cart.state == CartState.EMPTY

    def test_items_is_a_copy(self, cart: Cart) -> None:
        cart.items.clear()

        assert cart.item_count() == 5


class TestCheckout:
    """Tests for the order message and deep link."""

    EXPECTED_MESSAGE = (
        "¡Hola Sacha Cacao! 👋 Quisiera hacer el siguiente pedido:\n\n"
        "- Tableta de Chocolate 70% (x2) - S/ 30.00\n"
        "- Chocotejas de Pecanas (x3) - S/ 7.50\n"
        "\n*Total a pagar: S/ 37.50*"
        "\n\nEl pago lo realizaré a nombre de *Juanita Pérez* al Yape/Plin: *987 654 321*."
        "\n\n¡Muchas gracias! 😊"
    )

    def test_order_message(self, cart: Cart, payment: PaymentInfo) -> None:
        assert format_order_message(cart, payment, "Sacha Cacao") == self.EXPECTED_MESSAGE

    def test_checkout_link_carries_message(self, cart: Cart, payment: PaymentInfo) -> None:
        link = cart.checkout(payment, "Sacha Cacao")

        parts = urlsplit(link)
        assert parts.scheme == "https"
        assert parts.netloc == "wa.me"
        assert parts.path == "/51987654321"
        assert parse_qs(parts.query)["text"] == [self.EXPECTED_MESSAGE]
        assert cart.state == CartState.CHECKOUT

    def test_checkout_empty_cart_raises(self, payment: PaymentInfo) -> None:
        with pytest.raises(ValueError):
            Cart().checkout(payment, "Sacha Cacao")

    def test_link_encodes_like_uri_component(self) -> None:
        link = whatsapp_link("51900000000", "Hola & adiós: 100% *rico* (ya)!\n")

        assert link == (
            "https://wa.me/51900000000?text="
            "Hola%20%26%20adi%C3%B3s%3A%20100%25%20*rico*%20(ya)!%0A"
        )

    def test_money_rounds_to_cents(self) -> None:
        assert format_money(2.5) == "S/ 2.50"
        assert format_money(0.1 + 0.2) == "S/ 0.30"

    def test_inquiry_messages(self, chocolate: Product) -> None:
        assert format_inquiry_message("Sacha Cacao") == (
            "¡Hola Sacha Cacao! 👋 Tengo una consulta sobre sus productos."
        )
        assert "*Tableta de Chocolate 70%*" in format_inquiry_message("Sacha Cacao", chocolate)
