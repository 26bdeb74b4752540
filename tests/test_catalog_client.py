"""Tests for the catalog HTTP adapter, with a stubbed requests session."""

import pytest
import requests

from storefront.domain.errors import UpstreamError
from storefront.services.catalog_client import CatalogClient


class StubResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def _client(session):
    return CatalogClient(base_url="https://catalog.test/", timeout=3, session=session)


def test_list_products_maps_offset_to_skip():
    session = StubSession(StubResponse({
        "products": [{"id": 1}, {"id": 2}],
        "total": 194,
        "skip": 30,
        "limit": 2,
    }))

    page = _client(session).list_products(limit=2, offset=30)

    assert session.calls == [("https://catalog.test/products", {"limit": 2, "skip": 30}, 3)]
    assert [p["id"] for p in page.items] == [1, 2]
    assert (page.total, page.offset, page.limit) == (194, 30, 2)


def test_list_categories_accepts_objects_and_bare_slugs():
    session = StubSession(StubResponse([
        {"slug": "beauty", "name": "Beauty", "url": "https://catalog.test/products/category/beauty"},
        "mens-shirts",
    ]))

    categories = _client(session).list_categories()

    assert [(c.slug, c.name) for c in categories] == [("beauty", "Beauty"), ("mens-shirts", None)]


@pytest.mark.parametrize("session", [
    StubSession(error=requests.ConnectionError("connection refused")),
    StubSession(error=requests.Timeout("read timed out")),
    StubSession(StubResponse({"message": "boom"}, status=503)),
    StubSession(StubResponse(ValueError("not json"))),
])
def test_transport_failures_become_upstream_errors(session):
    with pytest.raises(UpstreamError):
        _client(session).list_products(limit=30, offset=0)
    # domyslnie bez ponawiania
    assert len(session.calls) == 1


def test_malformed_page_is_upstream_error():
    session = StubSession(StubResponse({"items": []}))
    with pytest.raises(UpstreamError):
        _client(session).list_products(limit=30, offset=0)


def test_malformed_category_list_is_upstream_error():
    session = StubSession(StubResponse({"categories": []}))
    with pytest.raises(UpstreamError):
        _client(session).list_categories()
