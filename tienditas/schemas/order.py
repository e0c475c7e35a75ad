"""Order schemas for the WhatsApp checkout link."""

from pydantic import Field

from tienditas.schemas.common import CamelSchema


class OrderLineRequest(CamelSchema):
    """A product and how many units of it."""

    product_id: int
    quantity: int = Field(default=1, ge=1)


class OrderLinkRequest(CamelSchema):
    """Cart contents submitted at checkout."""

    items: list[OrderLineRequest] = Field(..., min_length=1)


class OrderLinkResponse(CamelSchema):
    """Pre-filled order message and the deep link that carries it."""

    message: str
    link: str
    total: float
    item_count: int
