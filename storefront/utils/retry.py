# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from requests import RequestException

from storefront.utils.settings import CATALOG_HTTP_ATTEMPTS


def http_retry(attempts: int | None = None):
    """Ponawianie tylko bledow transportu; attempts=1 wylacza ponawianie."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(attempts or CATALOG_HTTP_ATTEMPTS, 1)),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(RequestException),
    )
