"""Pydantic schemas for the admin configuration API."""

from typing import Any

from pydantic import ConfigDict, Field

from tienditas.schemas.common import CamelSchema
from tienditas.schemas.store import StoreRecord

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# === Draft editing ===


class FieldUpdateRequest(CamelSchema):
    """Set one value inside the draft, addressed by a nested path.

    ``path`` is a list of object keys and list indexes starting with the
    store id, e.g. ``["sachacacao", "theme", "primary"]``.
    """

    path: list[Any] = Field(..., min_length=1)
    value: Any = None


class SelectStoreRequest(CamelSchema):
    """Switch the store being edited."""

    store_id: str


class ProductInput(CamelSchema):
    """Product as submitted by the admin product form.

    Without an ``id`` (or with an id that matches nothing) the product is
    created with a freshly assigned id.
    """

    id: int | None = None
    name: str = ""
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    image: str = ""


class StoreCreateRequest(CamelSchema):
    """Create a new store in the draft."""

    store_id: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    use_wizard_palette: bool = True


class DraftResponse(CamelSchema):
    """The admin's working copy of the collection."""

    draft: dict[str, StoreRecord]
    selected_store_id: str | None
    dirty: bool
    notification: str | None = None


class SaveResponse(CamelSchema):
    """Result of committing the draft."""

    saved: bool
    notification: str | None = None


# === Palette generation ===


class ThemePalette(CamelSchema):
    """The six-slot palette the palette assistant must answer with."""

    model_config = ConfigDict(extra="forbid")

    primary: str = Field(..., pattern=HEX_COLOR_PATTERN)
    secondary: str = Field(..., pattern=HEX_COLOR_PATTERN)
    background: str = Field(..., pattern=HEX_COLOR_PATTERN)
    text: str = Field(..., pattern=HEX_COLOR_PATTERN)
    card_background: str = Field(..., pattern=HEX_COLOR_PATTERN)
    button_text: str = Field(..., pattern=HEX_COLOR_PATTERN)


class PaletteResponse(CamelSchema):
    """Working palette of the store-creation wizard."""

    palette: dict[str, str]
