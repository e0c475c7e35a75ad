"""Admin console: HTML overview and the JSON API that edits the draft."""

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from fastapi.responses import HTMLResponse

from tienditas.core.config import settings
from tienditas.core.deps import CurrentAdminSession, Palette, Repository, Storefront
from tienditas.core.rate_limit import PALETTE_RATE_LIMIT, limiter
from tienditas.schemas.admin import (
    DraftResponse,
    FieldUpdateRequest,
    PaletteResponse,
    ProductInput,
    SaveResponse,
    SelectStoreRequest,
    StoreCreateRequest,
)
from tienditas.services.editor_service import AdminSession, DraftValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


def _draft_response(session: AdminSession) -> DraftResponse:
    editor = session.editor
    notification = editor.notification
    return DraftResponse(
        draft=editor.draft,
        selected_store_id=editor.selected_store_id,
        dirty=editor.is_dirty,
        notification=notification.message if notification else None,
    )


def _unprocessable(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=str(e),
    )


# === HTML ===


@router.get("", response_class=HTMLResponse, include_in_schema=False)
async def admin_page(session: CurrentAdminSession, storefront: Storefront) -> HTMLResponse:
    """Overview of the draft for the current admin session."""
    editor = session.editor
    return HTMLResponse(storefront.render_admin(editor.draft, editor.selected_store_id))


# === Draft ===


@router.get("/api/draft", response_model=DraftResponse, summary="Get the working draft")
async def get_draft(session: CurrentAdminSession) -> DraftResponse:
    return _draft_response(session)


@router.post("/api/draft/select", response_model=DraftResponse, summary="Select a store")
async def select_store(
    payload: SelectStoreRequest,
    session: CurrentAdminSession,
) -> DraftResponse:
    """Make a store the active one. Unknown ids answer 404 and keep the selection."""
    if session.editor.select_store(payload.store_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Store not found: {payload.store_id}",
        )
    return _draft_response(session)


@router.patch("/api/draft", response_model=DraftResponse, summary="Set a field in the draft")
async def update_field(
    payload: FieldUpdateRequest,
    session: CurrentAdminSession,
) -> DraftResponse:
    """
    Write one value at a nested path of the draft.

    The path starts with the store id, e.g. ``["sachacacao", "theme", "primary"]``
    or ``["sachacacao", "products", 0, "price"]``. The draft is left untouched
    when the path or the resulting configuration is invalid.
    """
    try:
        session.editor.set_field(payload.path, payload.value)
    except DraftValidationError as e:
        raise _unprocessable(e) from e
    return _draft_response(session)


# === Products ===


@router.get(
    "/api/products/template",
    response_model=ProductInput,
    summary="Placeholder for a new product",
)
async def product_template(session: CurrentAdminSession) -> ProductInput:
    return session.editor.new_product_template()


@router.put(
    "/api/stores/{store_id}/products",
    response_model=DraftResponse,
    summary="Create or replace a product",
)
async def upsert_product(
    store_id: str,
    payload: ProductInput,
    session: CurrentAdminSession,
) -> DraftResponse:
    try:
        session.editor.upsert_product(store_id, payload)
    except DraftValidationError as e:
        raise _unprocessable(e) from e
    return _draft_response(session)


@router.delete(
    "/api/stores/{store_id}/products/{product_id}",
    response_model=DraftResponse,
    summary="Delete a product",
)
async def delete_product(
    store_id: str,
    product_id: int,
    session: CurrentAdminSession,
) -> DraftResponse:
    try:
        session.editor.delete_product(store_id, product_id)
    except DraftValidationError as e:
        raise _unprocessable(e) from e
    return _draft_response(session)


# === Stores ===


@router.post(
    "/api/stores",
    response_model=DraftResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a store",
)
async def create_store(
    payload: StoreCreateRequest,
    session: CurrentAdminSession,
) -> DraftResponse:
    """
    Add a new store to the draft and select it.

    Unless ``useWizardPalette`` is false or the config carries its own theme,
    the palette derived from the uploaded logo becomes the store's theme.
    """
    config = payload.config
    if payload.use_wizard_palette:
        config = session.wizard.apply_to(config)

    try:
        session.editor.create_store(payload.store_id, config)
    except DraftValidationError as e:
        raise _unprocessable(e) from e

    session.wizard.reset()
    return _draft_response(session)


@router.post(
    "/api/palette",
    response_model=PaletteResponse,
    summary="Derive a palette from a logo",
)
@limiter.limit(PALETTE_RATE_LIMIT)
async def generate_palette(
    request: Request,  # noqa: ARG001  # required by slowapi
    session: CurrentAdminSession,
    palette_service: Palette,
    logo: UploadFile = File(...),
) -> PaletteResponse:
    """
    Ask the vision model for a six-color palette matching the uploaded logo.

    On failure the wizard keeps its previous palette and the error message is
    returned with a 422.
    """
    image = await logo.read()
    if len(image) > settings.max_logo_bytes:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="El logo es demasiado grande.",
        )

    wizard = session.wizard
    if not await wizard.derive_palette(palette_service, image, logo.content_type):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=wizard.last_error,
        )
    return PaletteResponse(palette=wizard.palette)


# === Commit ===


@router.post("/api/save", response_model=SaveResponse, summary="Save the draft")
async def save_draft(session: CurrentAdminSession, repository: Repository) -> SaveResponse:
    """Persist the whole draft. A failed write keeps the draft and reports ``saved: false``."""
    notification = await session.editor.commit(repository)
    if notification is None:
        logger.warning("Draft could not be saved")
        return SaveResponse(saved=False)
    return SaveResponse(saved=True, notification=notification.message)


@router.post("/api/discard", response_model=DraftResponse, summary="Discard unsaved edits")
async def discard_draft(session: CurrentAdminSession) -> DraftResponse:
    session.editor.discard()
    return _draft_response(session)
