"""Public storefront pages."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, RedirectResponse

from tienditas.core.config import settings
from tienditas.core.deps import CommittedCollection, Storefront
from tienditas.core.logging_config import store_id_var
from tienditas.services.storefront_service import resolve_store, resolve_store_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["storefront"])


@router.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    """Send bare visits to the default store so the address names it."""
    return RedirectResponse(
        url=f"/{settings.default_store_id}",
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )


@router.get("/{store_id}", response_class=HTMLResponse, summary="Render a store")
async def store_page(
    store_id: str,
    collection: CommittedCollection,
    storefront: Storefront,
) -> HTMLResponse:
    """Render the committed configuration of a store with its own layout and theme."""
    resolved_id = resolve_store_id(store_id)
    store_id_var.set(resolved_id)

    store = resolve_store(collection, store_id)
    if store is None:
        logger.info("Unknown store requested: %s", store_id)
        return HTMLResponse(
            storefront.render_not_found(store_id),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return HTMLResponse(storefront.render(resolved_id, store))
