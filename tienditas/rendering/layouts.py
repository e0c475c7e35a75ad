"""Storefront layouts."""

from typing import Any

from tienditas.rendering.base import RenderContext, StoreRenderer


class ClassicRenderer(StoreRenderer):
    """Full-width hero banner followed by a product grid."""

    template_name = "classic.html"


class ModernRenderer(StoreRenderer):
    """Split hero with the first product featured beside the banner."""

    template_name = "modern.html"

    def template_vars(self, context: RenderContext) -> dict[str, Any]:
        variables = super().template_vars(context)
        products = context.store.products
        variables["featured"] = products[0] if products else None
        variables["others"] = products[1:]
        return variables
