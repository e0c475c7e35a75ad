"""Admin configuration editor: draft editing, product CRUD and store creation.

The editor keeps two snapshots of the collection: the committed ``baseline``
and the working ``draft``. Every mutation builds a new draft from the JSON form
of the current one and re-validates it, so earlier snapshots handed out to
callers never change underneath them.
"""

import logging
import re
import time
from collections import OrderedDict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from tienditas.core.config import settings
from tienditas.schemas.admin import ProductInput
from tienditas.schemas.store import (
    DEFAULT_SECTION_TITLE,
    DEFAULT_THEME,
    StoreCollection,
    StoreRecord,
    TemplateId,
    dump_collection,
    validate_collection,
)
from tienditas.services.config_path import ConfigPathError, get_in, parse_path, set_in
from tienditas.services.palette_service import PaletteGenerationError, PaletteService
from tienditas.services.seed_data import NEW_PRODUCT_TEMPLATE
from tienditas.services.store_repository import StoreRepository

logger = logging.getLogger(__name__)

STORE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
RESERVED_STORE_IDS = frozenset({"admin", "api", "docs", "health"})

PALETTE_MISSING_IMAGE_MESSAGE = "Sube el logo de la tienda para generar la paleta."
PALETTE_FAILED_MESSAGE = "No se pudo generar la paleta de colores. Inténtalo de nuevo."


class DraftValidationError(ValueError):
    """An edit was rejected; the draft is unchanged."""


@dataclass(frozen=True)
class Notification:
    """Transient confirmation shown after a save."""

    message: str
    expires_at: float

    def is_active(self, now: float) -> bool:
        return now < self.expires_at


def default_chat_instruction(name: str) -> str:
    """Persona used for stores created without one."""
    return (
        f"Eres el asistente virtual de {name}. Ayuda a los clientes con sus preguntas sobre "
        "los productos, precios y pedidos. Responde siempre con amabilidad y de forma breve."
    )


def backfill_store_config(store_id: str, initial: dict[str, Any] | None) -> dict[str, Any]:
    """Fill every field a new store needs, keeping what the caller supplied."""
    initial = {k: v for k, v in (initial or {}).items() if v is not None}
    name = initial.get("name") or store_id

    defaults: dict[str, Any] = {
        "name": name,
        "templateId": TemplateId.CLASSIC.value,
        "sectionTitle": DEFAULT_SECTION_TITLE,
        "heroBanner": {"imageUrl": "", "title": name, "subtitle": ""},
        "products": [],
        "paymentInfo": {"phone": "", "name": "", "whatsapp": ""},
        "theme": dict(DEFAULT_THEME),
        "chatInstruction": default_chat_instruction(name),
    }

    config = {**defaults, **initial, "name": name}
    for nested in ("heroBanner", "paymentInfo", "theme"):
        supplied = initial.get(nested)
        if isinstance(supplied, dict):
            config[nested] = {**defaults[nested], **supplied}
    return config


def _format_validation_error(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"Invalid value at {location}: {first['msg']}"


def _check_unique_product_ids(collection: StoreCollection) -> None:
    for store_id, record in collection.items():
        ids = [p.id for p in record.products]
        if len(ids) != len(set(ids)):
            raise DraftValidationError(f"Duplicate product id in store {store_id}")


class StoreEditor:
    """Editable draft of the whole store collection for one admin session."""

    def __init__(
        self,
        baseline: StoreCollection,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._baseline = baseline
        self._draft = baseline
        self._selected_store_id: str | None = next(iter(baseline), None)
        self._last_issued_ids: dict[str, int] = {}
        self._notification: Notification | None = None
        self._clock = clock
        self._wall_clock = wall_clock

    # === Snapshots ===

    @property
    def draft(self) -> StoreCollection:
        return self._draft

    @property
    def baseline(self) -> StoreCollection:
        return self._baseline

    @property
    def is_dirty(self) -> bool:
        """Whether the draft holds edits that have not been saved."""
        if self._draft is self._baseline:
            return False
        return dump_collection(self._draft) != dump_collection(self._baseline)

    @property
    def notification(self) -> Notification | None:
        """The save confirmation, until it expires."""
        if self._notification and not self._notification.is_active(self._clock()):
            self._notification = None
        return self._notification

    # === Selection ===

    @property
    def selected_store_id(self) -> str | None:
        return self._selected_store_id

    @property
    def selected_store(self) -> StoreRecord | None:
        if self._selected_store_id is None:
            return None
        return self._draft.get(self._selected_store_id)

    def select_store(self, store_id: str) -> StoreRecord | None:
        """Make ``store_id`` the active store. Unknown ids leave the selection as is."""
        record = self._draft.get(store_id)
        if record is not None:
            self._selected_store_id = store_id
        return record

    # === Generic field edits ===

    def set_field(self, path: Sequence[Any], value: Any) -> StoreCollection:
        """Write ``value`` at a nested path and return the new draft.

        The first step must name an existing store. Intermediate containers
        must exist, and only the theme mapping accepts a new final key.

        Raises:
            DraftValidationError: On a bad path or a value that breaks the schema.
        """
        try:
            config_path = parse_path(path)
        except ConfigPathError as e:
            raise DraftValidationError(str(e)) from e

        store_id = config_path[0]
        if not isinstance(store_id, str) or store_id not in self._draft:
            raise DraftValidationError(f"Unknown store: {store_id}")

        try:
            updated = set_in(dump_collection(self._draft), config_path, value)
        except ConfigPathError as e:
            raise DraftValidationError(str(e)) from e

        validated = self._validate(updated)
        try:
            # Keys the schema does not know are dropped by validation
            get_in(dump_collection(validated), config_path)
        except ConfigPathError as e:
            raise DraftValidationError(f"Unknown field in path {list(config_path)}") from e

        self._draft = validated
        return self._draft

    # === Products ===

    def upsert_product(self, store_id: str, product: ProductInput) -> StoreCollection:
        """Replace a product in place by id, or append it with a fresh id."""
        record = self._require_store(store_id)
        data = product.model_dump(mode="json", by_alias=True)
        products = [p.model_dump(mode="json", by_alias=True) for p in record.products]

        index = None
        if product.id is not None:
            index = next((i for i, p in enumerate(record.products) if p.id == product.id), None)

        if index is not None:
            products[index] = data
        else:
            data["id"] = self._next_product_id(store_id, record)
            products.append(data)
            logger.info("Adding product %s to store %s", data["id"], store_id)

        return self.set_field((store_id, "products"), products)

    def delete_product(self, store_id: str, product_id: int) -> StoreCollection:
        """Remove a product. Unknown ids are ignored."""
        record = self._require_store(store_id)
        if record.find_product(product_id) is None:
            return self._draft

        remaining = [
            p.model_dump(mode="json", by_alias=True) for p in record.products if p.id != product_id
        ]
        return self.set_field((store_id, "products"), remaining)

    def new_product_template(self) -> ProductInput:
        """Placeholder values for the "add product" form."""
        return ProductInput.model_validate(NEW_PRODUCT_TEMPLATE)

    def _next_product_id(self, store_id: str, record: StoreRecord) -> int:
        """Strictly increasing id, never equal to one issued before for this store."""
        highest = max((p.id for p in record.products), default=0)
        candidate = max(
            int(self._wall_clock() * 1000),
            highest + 1,
            self._last_issued_ids.get(store_id, 0) + 1,
        )
        self._last_issued_ids[store_id] = candidate
        return candidate

    # === Stores ===

    def create_store(self, store_id: str, initial_config: dict[str, Any] | None = None) -> StoreCollection:
        """Add a new store to the draft and select it.

        Raises:
            DraftValidationError: If the id is empty, not URL-safe, reserved or
                already used, or the config does not validate.
        """
        store_id = (store_id or "").strip()
        if not store_id:
            raise DraftValidationError("Store id is required.")
        if not STORE_ID_RE.match(store_id):
            raise DraftValidationError(
                "Store id may only contain letters, digits, '-' and '_'."
            )
        if store_id.lower() in RESERVED_STORE_IDS:
            raise DraftValidationError(f"Store id '{store_id}' is reserved.")
        if store_id in self._draft:
            raise DraftValidationError(f"Store '{store_id}' already exists.")

        config = backfill_store_config(store_id, initial_config)
        updated = dump_collection(self._draft)
        updated[store_id] = config

        self._draft = self._validate(updated)
        self._selected_store_id = store_id
        logger.info("Created store %s in draft", store_id)
        return self._draft

    # === Commit ===

    async def commit(self, repository: StoreRepository) -> Notification | None:
        """Persist the full draft. On success it becomes the new baseline."""
        saved = await repository.save(self._draft)
        if not saved:
            return None

        self._baseline = self._draft
        store = self.selected_store
        label = store.name if store else "todas las tiendas"
        self._notification = Notification(
            message=f'Cambios para "{label}" guardados correctamente.',
            expires_at=self._clock() + settings.notification_ttl_seconds,
        )
        return self._notification

    def discard(self) -> StoreCollection:
        """Drop unsaved edits."""
        self._draft = self._baseline
        if self._selected_store_id not in self._draft:
            self._selected_store_id = next(iter(self._draft), None)
        return self._draft

    # === Helpers ===

    def _require_store(self, store_id: str) -> StoreRecord:
        record = self._draft.get(store_id)
        if record is None:
            raise DraftValidationError(f"Unknown store: {store_id}")
        return record

    def _validate(self, data: dict[str, Any]) -> StoreCollection:
        try:
            collection = validate_collection(data)
        except ValidationError as e:
            raise DraftValidationError(_format_validation_error(e)) from e
        _check_unique_product_ids(collection)
        return collection


@dataclass
class StoreWizard:
    """State collected by the store-creation flow before the store exists."""

    palette: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_THEME))
    last_error: str | None = None

    async def derive_palette(
        self,
        service: PaletteService,
        image: bytes | None,
        mime_type: str | None,
    ) -> bool:
        """Replace the working palette with one derived from the logo.

        On any failure the previous palette is kept and ``last_error`` holds a
        message for the user.
        """
        if not image:
            self.last_error = PALETTE_MISSING_IMAGE_MESSAGE
            return False

        try:
            palette = await service.generate_palette(image, mime_type or "image/png")
        except PaletteGenerationError as e:
            logger.warning("Palette generation failed: %s", e)
            self.last_error = PALETTE_FAILED_MESSAGE
            return False

        self.palette = palette
        self.last_error = None
        return True

    def apply_to(self, config: dict[str, Any]) -> dict[str, Any]:
        """Initial store config with the working palette as its theme."""
        if "theme" in config:
            return dict(config)
        return {**config, "theme": dict(self.palette)}

    def reset(self) -> None:
        self.palette = dict(DEFAULT_THEME)
        self.last_error = None


@dataclass
class AdminSession:
    """Everything one admin console keeps between requests."""

    editor: StoreEditor
    wizard: StoreWizard = field(default_factory=StoreWizard)


class AdminSessionRegistry:
    """In-process admin sessions keyed by the client's session id.

    Holds at most ``max_sessions`` sessions; the least recently used one and
    its unsaved edits are dropped when a new session would exceed the limit.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self._sessions: OrderedDict[str, AdminSession] = OrderedDict()
        self.max_sessions = max_sessions or settings.max_admin_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    async def get_or_create(self, session_id: str, repository: StoreRepository) -> AdminSession:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session

        baseline = await repository.load()
        session = AdminSession(editor=StoreEditor(baseline))
        self._sessions[session_id] = session
        logger.info("Opened admin session %s with %d stores", session_id, len(baseline))
        while len(self._sessions) > self.max_sessions:
            evicted_id, evicted = self._sessions.popitem(last=False)
            if evicted.editor.is_dirty:
                logger.warning("Evicted admin session %s with unsaved edits", evicted_id)
        return session

    def clear(self) -> None:
        self._sessions.clear()
