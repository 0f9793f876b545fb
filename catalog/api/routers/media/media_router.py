"""
Media catalog API endpoints.

Routes:
- GET /media - List media titles (paginated)
- POST /media - Create media title
- GET /media/countries - List countries in the catalog
- GET /media/countries/{country} - Media type counts for a country
- GET /media/ratings/{country} - Rating counts for a country
- GET /media/{id} - Get single media title
- PUT /media/{id} - Replace media title
- PATCH /media/{id} - Update media title
- DELETE /media/{id} - Delete media title

Dependencies: catalog.application.services, catalog.models
System role: Media catalog HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status

from catalog.api.deps.dependencies import get_media_service, load_media_document
from catalog.application.services import MediaService
from catalog.core.document import Document
from catalog.models.media import CountryMediaBreakdown, MediaTitleResponse, RatingCount

from .media_error_handling import handle_media_errors
from .media_responses import (
    map_media_list_to_response,
    map_media_to_response,
    set_pagination_headers,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])


@router.get("", response_model=list[MediaTitleResponse])
@handle_media_errors
async def list_media(
    request: Request,
    response: Response,
    page: int = Query(default=1, description="1-based page number"),
    per_page: int = Query(default=20, description="Titles per page (1-100)"),
    media_service: MediaService = Depends(get_media_service),
):
    """
    List media titles with pagination headers.

    Returns:
        list[MediaTitleResponse]: One page of titles, or 204 when the page is empty
    """
    logger.info("Listing media titles", extra={"page": page, "per_page": per_page})

    result = await media_service.get(page=page, per_page=per_page)

    if not result.data:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    set_pagination_headers(request, response, result.pagination)
    return map_media_list_to_response(result.data)


@router.post("", response_model=MediaTitleResponse, status_code=201)
@handle_media_errors
async def create_media(
    request: Request,
    response: Response,
    payload: dict[str, Any] = Body(...),
    media_service: MediaService = Depends(get_media_service),
) -> MediaTitleResponse:
    """
    Create new media title.

    Raises:
        HttpError(400): Missing, excess or invalid fields
    """
    doc = await media_service.insert(payload)

    response.headers["Location"] = f"{str(request.url).rstrip('/')}/{doc.id}"
    logger.info("Media title created", extra={"media_id": str(doc.id)})

    return map_media_to_response(doc)


@router.get("/countries", response_model=list[str])
@handle_media_errors
async def list_countries(
    media_service: MediaService = Depends(get_media_service),
):
    """List every country named in the catalog, or 204 when there is none."""
    countries = await media_service.get_countries()
    if not countries:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return countries


@router.get("/countries/{country}", response_model=list[CountryMediaBreakdown])
@handle_media_errors
async def get_country_media_breakdown(
    country: str,
    media_service: MediaService = Depends(get_media_service),
):
    """Count titles per media type for one country, or 204 when none match."""
    logger.info("Aggregating media types", extra={"country": country})

    breakdown = await media_service.get_country_media_breakdown(country)
    if not breakdown:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return breakdown


@router.get("/ratings/{country}", response_model=list[RatingCount])
@handle_media_errors
async def get_country_rating_breakdown(
    country: str,
    media_service: MediaService = Depends(get_media_service),
):
    """Count titles per media type and rating for one country, or 204 when none match."""
    logger.info("Aggregating ratings", extra={"country": country})

    ratings = await media_service.get_country_rating_breakdown(country)
    if not ratings:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return ratings


@router.get("/{media_id}", response_model=MediaTitleResponse)
@handle_media_errors
async def get_media(
    doc: Document = Depends(load_media_document),
) -> MediaTitleResponse:
    """
    Get single media title by ID.

    Raises:
        HttpError(404): Unknown or malformed id
    """
    return map_media_to_response(doc)


@router.put("/{media_id}", response_model=MediaTitleResponse)
@handle_media_errors
async def replace_media(
    payload: dict[str, Any] = Body(...),
    doc: Document = Depends(load_media_document),
    media_service: MediaService = Depends(get_media_service),
):
    """
    Replace every field of a media title.

    The payload must carry every field plus the current version.

    Raises:
        HttpError(400): Missing, excess or invalid fields
        HttpError(409): Stale version
    """
    saved = await media_service.update_or_replace(doc, payload, replace=True)

    logger.info("Media title replaced", extra={"media_id": str(saved.id), "version": saved.version})
    return map_media_to_response(saved)


@router.patch("/{media_id}", response_model=MediaTitleResponse)
@handle_media_errors
async def update_media(
    payload: dict[str, Any] = Body(...),
    doc: Document = Depends(load_media_document),
    media_service: MediaService = Depends(get_media_service),
):
    """
    Update some fields of a media title.

    The payload must carry at least one field plus the current version.

    Raises:
        HttpError(400): Missing, excess or invalid fields
        HttpError(409): Stale version
    """
    saved = await media_service.update_or_replace(doc, payload, replace=False)

    logger.info("Media title updated", extra={"media_id": str(saved.id), "version": saved.version})
    return map_media_to_response(saved)


@router.delete("/{media_id}", status_code=204)
@handle_media_errors
async def delete_media(
    payload: dict[str, Any] | None = Body(default=None),
    doc: Document = Depends(load_media_document),
    media_service: MediaService = Depends(get_media_service),
) -> Response:
    """
    Delete a media title.

    The body carries the current version: ``{"version": n}``.

    Raises:
        HttpError(400): Missing version or extra properties
        HttpError(409): Stale version
    """
    await media_service.delete(doc, payload or {})

    logger.info("Media title deleted", extra={"media_id": str(doc.id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
