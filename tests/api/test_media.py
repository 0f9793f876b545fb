from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from catalog.api.deps.dependencies import get_media_service
from catalog.api.main import create_app
from catalog.configs.settings import Settings
from catalog.core.document import PaginatedDocuments, Pagination
from catalog.core.exceptions import (
    ConcurrencyError,
    ExcessDataError,
    InsufficientDataError,
    NotFoundError,
    NotModifiedError,
    RepositoryError,
    ValidationError,
)
from catalog.models.media import CountryMediaBreakdown, MediaTypeCount, RatingCount


@pytest.fixture
def client(mock_media_service):
    app = create_app()
    app.dependency_overrides[get_media_service] = lambda: mock_media_service
    return TestClient(app)


def test_list_media_sets_pagination_headers(client, mock_media_service, make_media_document):
    docs = [make_media_document(title=f"Title {i}") for i in range(10)]
    mock_media_service.get.return_value = PaginatedDocuments(
        data=docs,
        pagination=Pagination(total_count=25, page=2, per_page=10, total_pages=3),
    )

    response = client.get("/api/v1/media", params={"page": 2, "per_page": 10})

    assert response.status_code == 200
    assert len(response.json()) == 10
    assert response.headers["X-Total-Count"] == "25"
    assert response.headers["X-Page"] == "2"
    assert response.headers["X-Per-Page"] == "10"
    assert response.headers["X-Total-Pages"] == "3"
    link = response.headers["Link"]
    assert '<http://testserver/api/v1/media?page=3&per_page=10>; rel="next"' in link
    assert '<http://testserver/api/v1/media?page=1&per_page=10>; rel="prev"' in link
    assert 'rel="first"' in link
    assert '<http://testserver/api/v1/media?page=3&per_page=10>; rel="last"' in link
    mock_media_service.get.assert_awaited_once_with(page=2, per_page=10)


def test_list_media_last_page_has_no_next_link(client, mock_media_service, make_media_document):
    mock_media_service.get.return_value = PaginatedDocuments(
        data=[make_media_document()],
        pagination=Pagination(total_count=1, page=1, per_page=20, total_pages=1),
    )

    response = client.get("/api/v1/media")

    assert response.status_code == 200
    assert 'rel="next"' not in response.headers["Link"]
    assert 'rel="prev"' not in response.headers["Link"]


def test_list_media_empty_returns_no_content(client, mock_media_service):
    mock_media_service.get.return_value = PaginatedDocuments(
        data=[], pagination=Pagination(total_count=0, page=1, per_page=20, total_pages=0)
    )

    response = client.get("/api/v1/media")

    assert response.status_code == 204
    assert response.content == b""


def test_list_media_rejects_non_numeric_page(client):
    response = client.get("/api/v1/media", params={"page": "first"})

    assert response.status_code == 400
    assert response.json()["status"] == 400


def test_create_media_returns_location(client, mock_media_service, make_media_document, media_payload):
    doc = make_media_document(title=media_payload["title"])
    mock_media_service.insert.return_value = doc

    response = client.post("/api/v1/media", json=media_payload)

    assert response.status_code == 201
    assert response.headers["Location"] == f"http://testserver/api/v1/media/{doc.id}"
    body = response.json()
    assert body["id"] == str(doc.id)
    assert body["version"] == 0
    mock_media_service.insert.assert_awaited_once_with(media_payload)


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (InsufficientDataError(), 400),
        (ExcessDataError(), 400),
        (ValidationError(), 400),
        (RepositoryError(), 500),
    ],
)
def test_create_media_maps_error_kind_to_status(client, mock_media_service, error, status):
    mock_media_service.insert.side_effect = error

    response = client.post("/api/v1/media", json={"title": "x"})

    assert response.status_code == status
    assert response.json()["status"] == status


def test_get_media_returns_document(client, mock_media_service, make_media_document):
    doc = make_media_document(version=4, country="India")
    mock_media_service.get_by_id.return_value = doc

    response = client.get(f"/api/v1/media/{doc.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["country"] == "India"
    assert body["version"] == 4
    mock_media_service.get_by_id.assert_awaited_once_with(str(doc.id))


def test_get_media_not_found(client, mock_media_service):
    mock_media_service.get_by_id.side_effect = NotFoundError(data={"id": "nope"})

    response = client.get("/api/v1/media/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == 404
    assert body["cause"]["name"] == "NotFoundError"
    assert body["cause"]["data"] == {"id": "nope"}


def test_error_payload_hides_causes_in_production(client, mock_media_service):
    mock_media_service.get_by_id.side_effect = NotFoundError(cause=KeyError("id"))

    with patch("catalog.api.main.get_settings", return_value=Settings(environment="production")):
        response = client.get("/api/v1/media/nope")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "message": "Not Found"}


def test_patch_media_updates_document(client, mock_media_service, make_media_document):
    doc = make_media_document(title="Old")
    saved = make_media_document(version=1, title="New")
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.update_or_replace.return_value = saved

    response = client.patch(f"/api/v1/media/{doc.id}", json={"title": "New", "version": 0})

    assert response.status_code == 200
    assert response.json()["title"] == "New"
    assert response.json()["version"] == 1
    mock_media_service.update_or_replace.assert_awaited_once_with(
        doc, {"title": "New", "version": 0}, replace=False
    )


def test_put_media_replaces_document(client, mock_media_service, make_media_document, media_payload):
    doc = make_media_document()
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.update_or_replace.return_value = make_media_document(version=1)
    payload = {**media_payload, "version": 0}

    response = client.put(f"/api/v1/media/{doc.id}", json=payload)

    assert response.status_code == 200
    mock_media_service.update_or_replace.assert_awaited_once_with(doc, payload, replace=True)


def test_patch_media_not_modified(client, mock_media_service, make_media_document):
    doc = make_media_document()
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.update_or_replace.side_effect = NotModifiedError()

    response = client.patch(f"/api/v1/media/{doc.id}", json={"title": "Test Title", "version": 0})

    assert response.status_code == 304
    assert response.content == b""


def test_patch_media_conflict(client, mock_media_service, make_media_document):
    doc = make_media_document(version=2)
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.update_or_replace.side_effect = ConcurrencyError()

    response = client.patch(f"/api/v1/media/{doc.id}", json={"title": "New", "version": 1})

    assert response.status_code == 409
    assert response.json()["message"] == "Conflict"


def test_delete_media(client, mock_media_service, make_media_document):
    doc = make_media_document(version=3)
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.delete.return_value = doc

    response = client.request("DELETE", f"/api/v1/media/{doc.id}", json={"version": 3})

    assert response.status_code == 204
    mock_media_service.delete.assert_awaited_once_with(doc, {"version": 3})


def test_delete_media_without_body(client, mock_media_service, make_media_document):
    doc = make_media_document()
    mock_media_service.get_by_id.return_value = doc
    mock_media_service.delete.side_effect = InsufficientDataError()

    response = client.delete(f"/api/v1/media/{doc.id}")

    assert response.status_code == 400
    mock_media_service.delete.assert_awaited_once_with(doc, {})


def test_countries(client, mock_media_service):
    mock_media_service.get_countries.return_value = ["France", "India"]

    response = client.get("/api/v1/media/countries")

    assert response.status_code == 200
    assert response.json() == ["France", "India"]


def test_country_media_breakdown(client, mock_media_service):
    mock_media_service.get_country_media_breakdown.return_value = [
        CountryMediaBreakdown(
            country="India",
            media_types=[MediaTypeCount(type="Movie", count=1), MediaTypeCount(type="TV Show", count=1)],
        )
    ]

    response = client.get("/api/v1/media/countries/India")

    assert response.status_code == 200
    assert response.json() == [
        {"country": "India", "media_types": [{"type": "Movie", "count": 1}, {"type": "TV Show", "count": 1}]}
    ]
    mock_media_service.get_country_media_breakdown.assert_awaited_once_with("India")


def test_country_media_breakdown_empty(client, mock_media_service):
    mock_media_service.get_country_media_breakdown.return_value = []

    response = client.get("/api/v1/media/countries/Atlantis")

    assert response.status_code == 204


def test_country_rating_breakdown(client, mock_media_service):
    mock_media_service.get_country_rating_breakdown.return_value = [
        RatingCount(type="Movie", rating=None, count=1),
        RatingCount(type="Movie", rating="PG", count=2),
    ]

    response = client.get("/api/v1/media/ratings/India")

    assert response.status_code == 200
    assert response.json() == [
        {"type": "Movie", "rating": None, "count": 1},
        {"type": "Movie", "rating": "PG", "count": 2},
    ]


def test_unexpected_service_failure_returns_500(client, mock_media_service):
    mock_media_service.get_countries.side_effect = RuntimeError("boom")

    response = client.get("/api/v1/media/countries")

    assert response.status_code == 500
    assert response.json()["message"] == "Internal Server Error"
