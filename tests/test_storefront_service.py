"""Tests for store resolution, theming and layout dispatch."""

import pytest
from pydantic import ValidationError

from tienditas.rendering.layouts import ClassicRenderer, ModernRenderer
from tienditas.schemas.store import THEME_SLOTS, StoreCollection, StoreRecord, TemplateId
from tienditas.services.chat_service import CHAT_FALLBACK_MESSAGE
from tienditas.services.storefront_service import (
    RENDERERS,
    StorefrontService,
    apply_theme,
    resolve_store,
    resolve_store_id,
    theme_slot_name,
    theme_variable_name,
)


@pytest.fixture
def storefront() -> StorefrontService:
    return StorefrontService()


class TestResolveStore:
    """Tests for resolve_store_id() and resolve_store()."""

    @pytest.mark.parametrize("identifier", [None, "", "/", "index.html", "/index.html"])
    def test_root_means_default_store(self, identifier: str | None) -> None:
        assert resolve_store_id(identifier) == "sachacacao"

    def test_exact_identifier(self, collection: StoreCollection) -> None:
        assert resolve_store(collection, "cafedelvalle") is collection["cafedelvalle"]

    def test_unknown_identifier(self, collection: StoreCollection) -> None:
        assert resolve_store(collection, "CafeDelValle") is None
        assert resolve_store(collection, "nope") is None


class TestTheme:
    """Tests for theme variable naming and projection."""

    def test_variable_names(self) -> None:
        assert theme_variable_name("primary") == "--theme-primary"
        assert theme_variable_name("cardBackground") == "--theme-card-background"
        assert theme_variable_name("buttonText") == "--theme-button-text"

    @pytest.mark.parametrize("slot", [*THEME_SLOTS, "accentHoverColor"])
    def test_names_round_trip(self, slot: str) -> None:
        assert theme_slot_name(theme_variable_name(slot)) == slot

    @pytest.mark.parametrize("slot", ["a-b", "Primary", "button_text", ""])
    def test_slots_that_would_collide_are_rejected(
        self,
        collection: StoreCollection,
        slot: str,
    ) -> None:
        data = collection["sachacacao"].model_dump(by_alias=True)
        data["theme"] = {"aB": "#222222", slot: "#111111"}

        with pytest.raises(ValidationError):
            StoreRecord.model_validate(data)

    def test_every_theme_entry_is_projected(self, collection: StoreCollection) -> None:
        store = collection["sachacacao"].model_copy(
            update={"theme": {**collection["sachacacao"].theme, "accent": "#ABCDEF"}}
        )

        scope = apply_theme(store)

        assert scope.variables["--theme-accent"] == "#ABCDEF"
        assert scope.variables["--theme-card-background"] == "#FFFFFF"
        assert len(scope.variables) == 7

    def test_scopes_are_independent(self, collection: StoreCollection) -> None:
        first = apply_theme(collection["sachacacao"])
        second = apply_theme(collection["cafedelvalle"])

        assert first.variables["--theme-primary"] == "#5D4037"
        assert second.variables["--theme-primary"] == "#1a4a3c"

    def test_css_declarations(self, collection: StoreCollection) -> None:
        css = apply_theme(collection["sachacacao"]).css()

        assert "--theme-primary: #5D4037" in css
        assert "--theme-button-text: #FFFFFF" in css


class TestRender:
    """Tests for StorefrontService rendering."""

    def test_every_template_has_a_renderer(self) -> None:
        assert set(RENDERERS) == set(TemplateId)

    def test_dispatch_by_template(self, storefront: StorefrontService, collection: StoreCollection) -> None:
        assert isinstance(storefront.renderer_for(collection["sachacacao"]), ClassicRenderer)
        assert isinstance(storefront.renderer_for(collection["cafedelvalle"]), ModernRenderer)

    def test_classic_page(self, storefront: StorefrontService, collection: StoreCollection) -> None:
        html = storefront.render("sachacacao", collection["sachacacao"])

        assert 'data-layout="classic"' in html
        assert "Nuestros Chocolates Artesanales" in html
        assert "Chocotejas de Pecanas" in html
        assert "S/ 2.50" in html
        assert "--theme-primary: #5D4037" in html
        assert "https://wa.me/51987654321?text=" in html
        assert f'data-chat-fallback="{CHAT_FALLBACK_MESSAGE}"' in html

    def test_modern_page_features_first_product(
        self,
        storefront: StorefrontService,
        collection: StoreCollection,
    ) -> None:
        html = storefront.render("cafedelvalle", collection["cafedelvalle"])

        assert 'data-layout="modern"' in html
        assert "featured-card" in html
        assert "Café Geisha Tostado Medio" in html
        assert "--theme-primary: #1a4a3c" in html

    def test_same_data_in_both_layouts(
        self,
        storefront: StorefrontService,
        collection: StoreCollection,
    ) -> None:
        store = collection["sachacacao"].model_copy(update={"template_id": TemplateId.MODERN})

        html = storefront.render("sachacacao", store)

        assert 'data-layout="modern"' in html
        for product in store.products:
            assert product.name in html

    def test_store_text_is_escaped(self, storefront: StorefrontService, collection: StoreCollection) -> None:
        store = collection["sachacacao"].model_copy(update={"section_title": "<script>x</script>"})

        html = storefront.render("sachacacao", store)

        assert "<script>x</script>" not in html
        assert "&lt;script&gt;x&lt;/script&gt;" in html

    def test_not_found_page(self, storefront: StorefrontService) -> None:
        html = storefront.render_not_found("nope")

        assert "Tienda no encontrada" in html
        assert '"nope"' in html or "&#34;nope&#34;" in html
        assert 'href="/admin"' in html

    def test_admin_page(self, storefront: StorefrontService, collection: StoreCollection) -> None:
        html = storefront.render_admin(collection, "cafedelvalle")

        assert "Editando" in html
        assert "Café del Valle" in html
        assert "Sacha Cacao" in html
