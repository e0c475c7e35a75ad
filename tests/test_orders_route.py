"""Tests for the WhatsApp order link endpoint."""

from urllib.parse import parse_qs, urlsplit

from httpx import AsyncClient

URL = "/api/v1/stores/sachacacao/orders/link"


class TestOrderLink:
    """Tests for POST /api/v1/stores/{store_id}/orders/link."""

    async def test_builds_message_and_link(self, client: AsyncClient) -> None:
        response = await client.post(
            URL,
            json={"items": [{"productId": 1, "quantity": 2}, {"productId": 2, "quantity": 3}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 37.5
        assert data["itemCount"] == 5
        assert "- Tableta de Chocolate 70% (x2) - S/ 30.00\n" in data["message"]
        assert "*Total a pagar: S/ 37.50*" in data["message"]

        parts = urlsplit(data["link"])
        assert parts.netloc == "wa.me"
        assert parts.path == "/51987654321"
        assert parse_qs(parts.query)["text"] == [data["message"]]

    async def test_repeated_lines_add_up(self, client: AsyncClient) -> None:
        response = await client.post(
            URL,
            json={"items": [{"productId": 3, "quantity": 1}, {"productId": 3, "quantity": 2}]},
        )

        assert response.status_code == 200
        assert response.json()["itemCount"] == 3
        assert "(x3)" in response.json()["message"]

    async def test_prices_come_from_the_store(self, client: AsyncClient) -> None:
        response = await client.post(
            URL,
            json={"items": [{"productId": 1, "quantity": 1, "price": 0.01}]},
        )

        assert response.json()["total"] == 15.0

    async def test_unknown_product(self, client: AsyncClient) -> None:
        response = await client.post(URL, json={"items": [{"productId": 99}]})

        assert response.status_code == 422

    async def test_empty_cart(self, client: AsyncClient) -> None:
        response = await client.post(URL, json={"items": []})

        assert response.status_code == 422

    async def test_zero_quantity(self, client: AsyncClient) -> None:
        response = await client.post(URL, json={"items": [{"productId": 1, "quantity": 0}]})

        assert response.status_code == 422

    async def test_unknown_store(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/stores/nope/orders/link",
            json={"items": [{"productId": 1}]},
        )

        assert response.status_code == 404
