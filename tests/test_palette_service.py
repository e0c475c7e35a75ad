"""Tests for logo palette extraction."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from tienditas.services.palette_service import (
    PaletteGenerationError,
    PaletteService,
    parse_palette,
)
from tests.conftest import VALID_PALETTE_JSON

EXPECTED_PALETTE = {
    "primary": "#112233",
    "secondary": "#445566",
    "background": "#FAFAFA",
    "text": "#101010",
    "cardBackground": "#FFFFFF",
    "buttonText": "#000000",
}


class TestParsePalette:
    """Tests for parse_palette()."""

    def test_plain_json(self) -> None:
        assert parse_palette(VALID_PALETTE_JSON) == EXPECTED_PALETTE

    def test_fenced_json(self) -> None:
        assert parse_palette(f"```json\n{VALID_PALETTE_JSON}\n```") == EXPECTED_PALETTE

    def test_not_json(self) -> None:
        with pytest.raises(PaletteGenerationError, match="not valid JSON"):
            parse_palette("Aquí tienes una paleta bonita")

    def test_missing_slot(self) -> None:
        with pytest.raises(PaletteGenerationError):
            parse_palette('{"primary": "#112233"}')

    def test_bad_color(self) -> None:
        bad = VALID_PALETTE_JSON.replace("#112233", "red")

        with pytest.raises(PaletteGenerationError):
            parse_palette(bad)

    def test_extra_keys_rejected(self) -> None:
        extra = VALID_PALETTE_JSON.replace("}", ', "accent": "#000000"}')

        with pytest.raises(PaletteGenerationError):
            parse_palette(extra)


class TestGeneratePalette:
    """Tests for PaletteService.generate_palette()."""

    async def test_returns_validated_palette(self, mock_palette_llm: MagicMock) -> None:
        palette = await PaletteService().generate_palette(b"\x89PNG", "image/png")

        assert palette == EXPECTED_PALETTE

    async def test_sends_image_as_data_url(self, mock_palette_llm: MagicMock) -> None:
        await PaletteService().generate_palette(b"abc", "image/jpeg")

        messages = mock_palette_llm.ainvoke.call_args.args[0]
        assert len(messages) == 1
        message = messages[0]
        assert isinstance(message, HumanMessage)
        image_part = message.content[1]
        assert image_part["type"] == "image_url"
        assert image_part["image_url"]["url"] == "data:image/jpeg;base64,YWJj"

    async def test_empty_image(self, mock_palette_llm: MagicMock) -> None:
        with pytest.raises(PaletteGenerationError):
            await PaletteService().generate_palette(b"", "image/png")

        mock_palette_llm.ainvoke.assert_not_called()

    async def test_non_image_type(self, mock_palette_llm: MagicMock) -> None:
        with pytest.raises(PaletteGenerationError, match="Unsupported"):
            await PaletteService().generate_palette(b"%PDF", "application/pdf")

    async def test_service_error_is_wrapped(self, mock_palette_llm: MagicMock) -> None:
        mock_palette_llm.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))

        with pytest.raises(PaletteGenerationError, match="unavailable"):
            await PaletteService().generate_palette(b"png", "image/png")

    async def test_unusable_answer(self, mock_palette_llm: MagicMock) -> None:
        mock_palette_llm.ainvoke = AsyncMock(return_value=AIMessage(content="no sé"))

        with pytest.raises(PaletteGenerationError):
            await PaletteService().generate_palette(b"png", "image/png")
