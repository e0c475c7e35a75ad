"""Derive a store theme palette from its logo with a vision-capable chat model."""

import base64
import json
import logging
import re

from langchain_core.messages import AIMessage, HumanMessage
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from tienditas.core.config import settings
from tienditas.schemas.admin import ThemePalette

logger = logging.getLogger(__name__)

MAX_PALETTE_TOKENS = 300

PALETTE_INSTRUCTION = (
    "Analiza este logo y propone una paleta de colores para la tienda online que lo usa. "
    "Responde ÚNICAMENTE con un objeto JSON con exactamente estas claves: "
    '"primary", "secondary", "background", "text", "cardBackground", "buttonText". '
    "Cada valor debe ser un color hexadecimal de seis dígitos, por ejemplo #5D4037. "
    "El texto debe contrastar con el fondo y buttonText debe contrastar con primary."
)

_FENCE_START_RE = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_END_RE = re.compile(r"\n?```\s*$")


class PaletteGenerationError(RuntimeError):
    """The palette could not be generated or the answer was unusable."""


def _get_llm() -> ChatOpenAI:
    """Create the ChatOpenAI client used for palette extraction."""
    return ChatOpenAI(
        model=settings.palette_model,
        api_key=settings.openai_api_key,
        temperature=0,
        max_tokens=MAX_PALETTE_TOKENS,
    )


def parse_palette(content: str) -> dict[str, str]:
    """Parse and validate the model's answer into a theme palette.

    Raises:
        PaletteGenerationError: If the answer is not a JSON object with all six
            slots set to hex colors.
    """
    # Models sometimes wrap JSON in ```json ... ``` fences
    cleaned = _FENCE_START_RE.sub("", content.strip())
    cleaned = _FENCE_END_RE.sub("", cleaned)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise PaletteGenerationError("Palette answer is not valid JSON.") from e

    try:
        palette = ThemePalette.model_validate(data)
    except ValidationError as e:
        raise PaletteGenerationError(
            f"Palette answer does not match the theme slots ({e.error_count()} errors)."
        ) from e

    return palette.model_dump(by_alias=True)


class PaletteService:
    """Asks the model for a six-slot palette matching an uploaded logo."""

    async def generate_palette(self, image: bytes, mime_type: str) -> dict[str, str]:
        """Generate a palette for the given logo image.

        Args:
            image: Raw image bytes.
            mime_type: Image content type, e.g. ``image/png``.

        Returns:
            Mapping of theme slot to ``#RRGGBB`` color.

        Raises:
            PaletteGenerationError: On a missing image, a service failure or an
                answer that does not validate.
        """
        if not image:
            raise PaletteGenerationError("No image provided.")
        if not mime_type.startswith("image/"):
            raise PaletteGenerationError(f"Unsupported file type: {mime_type}")

        encoded = base64.b64encode(image).decode("ascii")
        message = HumanMessage(
            content=[
                {"type": "text", "text": PALETTE_INSTRUCTION},
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
            ]
        )

        try:
            response: AIMessage = await _get_llm().ainvoke([message])
        except Exception as e:
            logger.exception("Palette generation request failed")
            raise PaletteGenerationError("Palette service is unavailable.") from e

        content = response.content if isinstance(response.content, str) else ""
        palette = parse_palette(content)
        logger.info("Generated palette %s", palette)
        return palette
