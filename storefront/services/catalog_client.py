# storefront/services/catalog_client.py
from typing import List

import requests
from pydantic import ValidationError as PydanticValidationError
from requests import RequestException

from storefront.domain.catalog import CatalogCategory, CatalogPage
from storefront.domain.errors import UpstreamError
from storefront.utils.settings import (
    CATALOG_API_URL,
    CATALOG_TIMEOUT_SECONDS,
)
from storefront.utils.retry import http_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogClient:
    """
    Adapter HTTP do zewnetrznego katalogu (format DummyJSON).
    Tylko odczyt, kazdy blad sieci/statusu/ksztaltu odpowiedzi -> UpstreamError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or CATALOG_API_URL).rstrip("/")
        self.timeout = timeout or CATALOG_TIMEOUT_SECONDS
        self.http = session or requests.Session()
        self.http.headers.update({"Content-Type": "application/json"})

    @http_retry()
    def _get(self, path: str, params: dict | None = None):
        url = f"{self.base_url}{path}"
        logger.info(f"CatalogClient GET {url} params={params}")

        resp = self.http.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _fetch(self, path: str, params: dict | None = None):
        try:
            return self._get(path, params)
        except (RequestException, ValueError) as e:
            logger.error(f"Catalog request {path} failed: {e}")
            raise UpstreamError(
                f"Failed to fetch {path} from catalog: {e}",
                {"path": path},
            ) from e

    def list_products(self, limit: int, offset: int) -> CatalogPage:
        data = self._fetch("/products", {"limit": limit, "skip": offset})

        try:
            page = CatalogPage(
                items=data["products"],
                total=data.get("total", 0),
                offset=data.get("skip", offset),
                limit=data.get("limit", limit),
            )
        except (KeyError, TypeError, AttributeError, PydanticValidationError) as e:
            raise UpstreamError("Malformed product page from catalog", {"offset": offset}) from e

        logger.info(f"Fetched {len(page.items)} products from catalog (offset {offset})")
        return page

    def list_categories(self) -> List[CatalogCategory]:
        data = self._fetch("/products/categories")

        if not isinstance(data, list):
            raise UpstreamError("Malformed category list from catalog")

        try:
            # starsze API zwraca same slugi zamiast obiektow
            categories = [
                CatalogCategory(slug=c) if isinstance(c, str) else CatalogCategory.model_validate(c)
                for c in data
            ]
        except PydanticValidationError as e:
            raise UpstreamError("Malformed category list from catalog") from e

        logger.info(f"Fetched {len(categories)} categories from catalog")
        return categories
