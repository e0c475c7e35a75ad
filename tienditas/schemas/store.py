"""Pydantic schemas for the store configuration document.

The whole collection is persisted as one JSON object keyed by store id.
Field names on the wire are camelCase, matching documents written by earlier
versions of the storefront; every field except ``name`` has a default so
older documents keep loading.
"""

import enum
import re
from typing import Any

from pydantic import Field, TypeAdapter, field_validator

from tienditas.schemas.common import CamelSchema

# Conventional theme slots. The theme mapping itself is open-ended.
THEME_SLOTS: tuple[str, ...] = (
    "primary",
    "secondary",
    "background",
    "text",
    "cardBackground",
    "buttonText",
)

DEFAULT_THEME: dict[str, str] = {
    "primary": "#5D4037",
    "secondary": "#D7CCC8",
    "background": "#F5F5F5",
    "text": "#4E342E",
    "cardBackground": "#FFFFFF",
    "buttonText": "#FFFFFF",
}

DEFAULT_SECTION_TITLE = "Nuestros Productos"

THEME_SLOT_RE = re.compile(r"^[a-z][A-Za-z0-9]*$")


class TemplateId(str, enum.Enum):
    """Visual layouts a store can be rendered with."""

    CLASSIC = "classic"
    MODERN = "modern"


class Product(CamelSchema):
    """A product offered by one store."""

    id: int
    name: str = ""
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    image: str = ""


class HeroBanner(CamelSchema):
    """Banner shown at the top of the storefront."""

    image_url: str = ""
    title: str = ""
    subtitle: str = ""


class PaymentInfo(CamelSchema):
    """Who gets paid and where orders are sent.

    ``whatsapp`` is expected to hold digits with the country code (``51987654321``);
    it is placed verbatim in the messaging deep link.
    """

    phone: str = ""
    name: str = ""
    whatsapp: str = ""


class StoreRecord(CamelSchema):
    """Complete configuration of one store."""

    name: str = Field(..., min_length=1)
    template_id: TemplateId = TemplateId.CLASSIC
    section_title: str = DEFAULT_SECTION_TITLE
    hero_banner: HeroBanner = Field(default_factory=HeroBanner)
    products: list[Product] = Field(default_factory=list)
    payment_info: PaymentInfo = Field(default_factory=PaymentInfo)
    theme: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_THEME))
    chat_instruction: str = ""

    @field_validator("template_id", mode="before")
    @classmethod
    def _fallback_to_classic(cls, value: Any) -> Any:
        """Unknown or missing template ids render with the classic layout."""
        if isinstance(value, TemplateId):
            return value
        if isinstance(value, str) and value in {t.value for t in TemplateId}:
            return value
        return TemplateId.CLASSIC

    @field_validator("theme")
    @classmethod
    def _camel_case_slots(cls, value: dict[str, str]) -> dict[str, str]:
        """Slot names become style variables, so only camelCase names map one to one."""
        for slot in value:
            if not THEME_SLOT_RE.match(slot):
                raise ValueError(f"Theme slot {slot!r} must be camelCase letters and digits")
        return value

    def find_product(self, product_id: int) -> Product | None:
        """Return the product with the given id, if present."""
        return next((p for p in self.products if p.id == product_id), None)


StoreCollection = dict[str, StoreRecord]

store_collection_adapter: TypeAdapter[StoreCollection] = TypeAdapter(StoreCollection)


def dump_collection(collection: StoreCollection) -> dict[str, Any]:
    """Serialize a collection to its JSON-compatible camelCase form."""
    return store_collection_adapter.dump_python(collection, mode="json", by_alias=True)


def validate_collection(data: Any) -> StoreCollection:
    """Validate a JSON-compatible document into a typed collection.

    Raises:
        pydantic.ValidationError: If any record does not match the schema.
    """
    return store_collection_adapter.validate_python(data)
