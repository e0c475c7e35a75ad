"""Resolve a store from the committed collection and render its public page."""

import logging
import re

from jinja2 import Environment

from tienditas.core.config import settings
from tienditas.rendering.base import RenderContext, StoreRenderer, ThemeScope, create_environment
from tienditas.rendering.layouts import ClassicRenderer, ModernRenderer
from tienditas.schemas.store import StoreCollection, StoreRecord, TemplateId
from tienditas.services.cart_service import format_inquiry_message, whatsapp_link

logger = logging.getLogger(__name__)

THEME_VARIABLE_PREFIX = "--theme-"

# Path segments browsers send for the bare site root
_ROOT_SEGMENTS = frozenset({"", "index.html"})

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")

RENDERERS: dict[TemplateId, type[StoreRenderer]] = {
    TemplateId.CLASSIC: ClassicRenderer,
    TemplateId.MODERN: ModernRenderer,
}


def theme_variable_name(slot: str) -> str:
    """CSS variable for a theme slot: ``cardBackground`` -> ``--theme-card-background``."""
    return THEME_VARIABLE_PREFIX + _CAMEL_BOUNDARY_RE.sub("-", slot).lower()


def theme_slot_name(variable: str) -> str:
    """Inverse of theme_variable_name for camelCase slot names."""
    first, *rest = variable.removeprefix(THEME_VARIABLE_PREFIX).split("-")
    return first + "".join(part.capitalize() for part in rest)


def apply_theme(store: StoreRecord) -> ThemeScope:
    """Project every theme entry of a store into style variables."""
    return ThemeScope(
        variables={theme_variable_name(slot): color for slot, color in store.theme.items()}
    )


def resolve_store_id(identifier: str | None) -> str:
    """Map the requested path segment to a store id; the site root means the default store."""
    segment = (identifier or "").strip("/").split("/")[0]
    if segment in _ROOT_SEGMENTS:
        return settings.default_store_id
    return segment


def resolve_store(collection: StoreCollection, identifier: str | None) -> StoreRecord | None:
    """Exact-match lookup in the committed collection. Unknown ids give None."""
    return collection.get(resolve_store_id(identifier))


class StorefrontService:
    """Dispatches store pages to the layout selected by ``templateId``."""

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or create_environment()
        self._renderers = {template_id: cls(self.env) for template_id, cls in RENDERERS.items()}

    def renderer_for(self, store: StoreRecord) -> StoreRenderer:
        return self._renderers[store.template_id]

    def render(self, store_id: str, store: StoreRecord) -> str:
        """Render the public page of a store."""
        payment = store.payment_info
        context = RenderContext(
            store_id=store_id,
            store=store,
            theme=apply_theme(store),
            inquiry_link=whatsapp_link(payment.whatsapp, format_inquiry_message(store.name)),
            currency_symbol=settings.currency_symbol,
            api_prefix=settings.api_v1_prefix,
        )
        logger.debug("Rendering store %s with %s layout", store_id, store.template_id.value)
        return self.renderer_for(store).render(context)

    def render_not_found(self, identifier: str) -> str:
        """Page shown for an unknown store id."""
        template = self.env.get_template("not_found.html")
        return template.render(identifier=identifier, admin_prefix=settings.admin_prefix)

    def render_admin(self, draft: StoreCollection, selected_store_id: str | None) -> str:
        """Overview page of the admin console."""
        template = self.env.get_template("admin.html")
        return template.render(
            stores=draft,
            selected_store_id=selected_store_id,
            admin_prefix=settings.admin_prefix,
            currency=settings.currency_symbol,
        )
