"""Gist endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from gisty.exceptions import CacheWriteError
from gisty.models.schemas import (
    GistDocumentResponse,
    GistListResponse,
    GistStreamResponse,
)
from gisty.services.gist_service import GistService

router = APIRouter(prefix="/gists", tags=["Gists"])
logger = logging.getLogger(__name__)


async def get_gist_service() -> GistService:
    """Placeholder - overridden in main.py."""
    raise NotImplementedError


@router.get(
    "",
    response_model=GistListResponse,
    summary="List one page of gists",
    responses={
        200: {"description": "Successfully retrieved gists"},
        422: {"description": "Invalid credentials or pagination"},
        502: {"description": "Error communicating with GitHub API"},
    },
)
async def list_gists(
    page: Annotated[int, Query(description="Page parameter sent to GitHub")] = 0,
    per_page: Annotated[int, Query(description="Items per page")] = 40,
    service: GistService = Depends(get_gist_service),
) -> GistListResponse:
    """
    List one page of the configured user's gists.

    Values are passed through unchecked so the service can reject them.
    """
    gists = await service.list_gists(per_page=per_page, page=page)
    return GistListResponse(
        username=service.settings.username,
        page=page,
        per_page=per_page,
        gists=gists,
    )


@router.get(
    "/all",
    response_model=GistStreamResponse,
    summary="List every gist across all pages",
)
async def list_all_gists(
    service: GistService = Depends(get_gist_service),
) -> GistStreamResponse:
    """
    Follow the pagination until it is exhausted.

    A failure part way through still returns what was collected, with
    ``complete`` set to false.
    """
    gists = []
    error = None
    async for result in service.iter_gist_results():
        if result.ok:
            gists.append(result.gist)
        else:
            error = str(result.error)

    return GistStreamResponse(
        username=service.settings.username,
        count=len(gists),
        gists=gists,
        complete=error is None,
        error=error,
    )


@router.get(
    "/{gist_id}",
    response_model=GistDocumentResponse,
    summary="Get a single gist",
    responses={
        200: {"description": "Successfully retrieved the gist"},
        404: {"description": "Gist not found"},
        502: {"description": "Error communicating with GitHub API"},
    },
)
async def get_gist(
    gist_id: str,
    service: GistService = Depends(get_gist_service),
) -> GistDocumentResponse:
    """Get a gist, served from the local cache once it has been fetched."""
    try:
        document = await service.get_gist(gist_id)
    except CacheWriteError as e:
        logger.warning(str(e))
        return GistDocumentResponse(id=gist_id, cache_stored=False, document=e.document)

    return GistDocumentResponse(id=gist_id, document=document)


@router.delete(
    "/{gist_id}/cache",
    status_code=204,
    summary="Drop a gist from the local cache",
    responses={404: {"description": "Gist was not cached"}},
)
async def invalidate_gist(
    gist_id: str,
    service: GistService = Depends(get_gist_service),
) -> Response:
    """Remove the cached copy so the next read goes to GitHub."""
    if not await service.invalidate(gist_id):
        return Response(status_code=404)
    return Response(status_code=204)
