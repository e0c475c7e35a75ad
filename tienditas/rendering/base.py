"""Contract shared by all storefront layouts."""

from abc import ABC
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from jinja2 import Environment, FileSystemLoader, select_autoescape

from tienditas.schemas.store import StoreRecord
from tienditas.services.chat_service import CHAT_FALLBACK_MESSAGE

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def create_environment() -> Environment:
    """Jinja2 environment for the bundled HTML templates."""
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


@dataclass(frozen=True)
class ThemeScope:
    """Style variables for one rendered store page.

    Built per render and handed to the template, so pages for different stores
    never share theme state.
    """

    variables: dict[str, str] = field(default_factory=dict)

    def css(self) -> str:
        """Declarations for a ``style`` attribute."""
        return "; ".join(f"{name}: {value}" for name, value in self.variables.items())


@dataclass(frozen=True)
class RenderContext:
    """Everything a layout needs to render a store page."""

    store_id: str
    store: StoreRecord
    theme: ThemeScope
    inquiry_link: str
    currency_symbol: str
    api_prefix: str


class StoreRenderer(ABC):
    """Renders a store page from a RenderContext.

    Subclasses pick the template and may add layout-specific variables; the
    store data itself is the same for every layout.
    """

    template_name: ClassVar[str]

    def __init__(self, env: Environment) -> None:
        self.env = env

    def template_vars(self, context: RenderContext) -> dict[str, Any]:
        return {
            "store_id": context.store_id,
            "store": context.store,
            "theme_css": context.theme.css(),
            "inquiry_link": context.inquiry_link,
            "currency": context.currency_symbol,
            "api_prefix": context.api_prefix,
            "chat_fallback": CHAT_FALLBACK_MESSAGE,
        }

    def render(self, context: RenderContext) -> str:
        template = self.env.get_template(self.template_name)
        return template.render(**self.template_vars(context))
