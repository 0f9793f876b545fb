"""
Media response mapping utilities.

Transforms document handles into Pydantic response models and sets
pagination headers on list responses.

Dependencies: fastapi, catalog.models.media
System role: Media response transformation
"""

from fastapi import Request, Response

from catalog.core.document import Document, Pagination
from catalog.models.media import MediaTitleResponse


def map_media_to_response(doc: Document) -> MediaTitleResponse:
    """
    Transform a document handle into MediaTitleResponse.

    Args:
        doc: Loaded or saved media title document

    Returns:
        MediaTitleResponse: Pydantic model for API response
    """
    return MediaTitleResponse(**doc.to_dict())


def map_media_list_to_response(docs: list[Document]) -> list[MediaTitleResponse]:
    """Transform a list of document handles into MediaTitleResponse models."""
    return [map_media_to_response(doc) for doc in docs]


def build_link_header(base_url: str, pagination: Pagination) -> str:
    """
    Build the RFC 8288 Link header for a page of results.

    Args:
        base_url: Collection URL without query string
        pagination: Pagination of the current page

    Returns:
        str: ``next`` and ``prev`` links when they exist, always ``first`` and ``last``
    """
    page, per_page, total_pages = pagination.page, pagination.per_page, pagination.total_pages
    links = []
    if page < total_pages:
        links.append(f'<{base_url}?page={page + 1}&per_page={per_page}>; rel="next"')
    if page > 1:
        links.append(f'<{base_url}?page={page - 1}&per_page={per_page}>; rel="prev"')
    links.append(f'<{base_url}?page=1&per_page={per_page}>; rel="first"')
    links.append(f'<{base_url}?page={total_pages}&per_page={per_page}>; rel="last"')
    return ", ".join(links)


def set_pagination_headers(request: Request, response: Response, pagination: Pagination) -> None:
    """
    Set X-Total-Count, X-Page, X-Per-Page, X-Total-Pages and Link headers.

    Args:
        request: Incoming request (its URL is the collection URL)
        response: Response to decorate
        pagination: Pagination of the returned page
    """
    response.headers["X-Total-Count"] = str(pagination.total_count)
    response.headers["X-Page"] = str(pagination.page)
    response.headers["X-Per-Page"] = str(pagination.per_page)
    response.headers["X-Total-Pages"] = str(pagination.total_pages)
    base_url = str(request.url.replace(query=""))
    response.headers["Link"] = build_link_header(base_url, pagination)
