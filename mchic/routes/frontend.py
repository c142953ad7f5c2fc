"""
Mchic Setlist — Front-end & Fallback Routes
=============================================

What:  Serves the static single-page front-end and answers unknown /api
       paths.
Why:   The browser UI is plain files in PUBLIC_DIR; client-side routing
       means any non-API path must return index.html.
How:   Two catch-all routers, mounted last so every real route wins:
       - api_fallback_router: /api/{anything} → 401 without credentials,
         404 JSON with them
       - router: GET /{path} → the file if it exists under PUBLIC_DIR,
         otherwise index.html

Security:
    Resolved paths must stay inside PUBLIC_DIR (no ../ traversal).
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from mchic.config import Settings
from mchic.dependencies import get_settings
from mchic.exceptions import NotFoundError
from mchic.schemas.song import ErrorResponse
from mchic.security import require_credentials

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"
API_NOT_FOUND_MESSAGE = "Risorsa non trovata."

api_fallback_router = APIRouter(
    prefix="/api",
    dependencies=[Depends(require_credentials)],
    include_in_schema=False,
)

router = APIRouter(include_in_schema=False)


@api_fallback_router.api_route(
    "/{api_path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    responses={404: {"model": ErrorResponse}},
)
async def unknown_api_path(api_path: str) -> None:
    raise NotFoundError(message=API_NOT_FOUND_MESSAGE, resource_id=api_path)


@router.get("/{file_path:path}")
async def serve_frontend(
    file_path: str,
    settings: Settings = Depends(get_settings),
) -> FileResponse:
    """
    Serve a static asset, falling back to the single-page entry document.

    Examples:
        GET /scripts.js   → public/scripts.js
        GET /             → public/index.html
        GET /setlist/42   → public/index.html (client-side route)
    """
    public_root = Path(settings.public_dir).resolve()
    candidate = (public_root / file_path).resolve()

    # Reject paths that resolve outside the public directory
    if candidate != public_root and public_root not in candidate.parents:
        raise NotFoundError(message=API_NOT_FOUND_MESSAGE, resource_id=file_path)

    if candidate.is_file():
        return FileResponse(path=str(candidate))

    index = public_root / INDEX_DOCUMENT
    if not index.is_file():
        logger.warning("Front-end entry document missing: %s", index)
        raise NotFoundError(message=API_NOT_FOUND_MESSAGE, resource_id=file_path)
    return FileResponse(path=str(index), headers={"Cache-Control": "no-cache"})
