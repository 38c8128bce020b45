# artisan_cart/services/api_client.py
from typing import Any, Dict

import requests
from requests import RequestException

from artisan_cart.domain.errors import RemoteCallError
from artisan_cart.utils.retry import http_retry
from artisan_cart.utils.settings import HTTP_TIMEOUT
from artisan_cart.utils.logging import get_logger

logger = get_logger(__name__)


class ApiClient:
    """
    Wspolna baza klientow HTTP marketplace.
    - GET (idempotentne) z retry na bledach transportu
    - zapisy bez retry, zeby nie zdublowac operacji
    - kazdy blad -> RemoteCallError z najlepszym dostepnym komunikatem
    """

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        session: requests.Session | None = None,
        headers: Dict[str, str] | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else HTTP_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if headers:
            self.session.headers.update(headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @http_retry()
    def _get(self, url: str) -> requests.Response:
        return self.session.get(url, timeout=self.timeout)

    def _request(self, method: str, path: str, payload: Dict[str, Any] | None = None) -> Any:
        url = self._url(path)
        logger.info(f"{type(self).__name__} {method} {url}")

        try:
            if method == "GET":
                resp = self._get(url)
            else:
                resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise RemoteCallError(f"Could not reach {url}: {e}") from e

        if not resp.ok:
            message = error_message(resp)
            logger.warning(f"{method} {url} -> {resp.status_code}: {message}")
            raise RemoteCallError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return None


def error_message(resp: requests.Response) -> str:
    """Best-effort komunikat bledu: json message, json detail, tekst, reason."""
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "detail"):
            if body.get(key):
                return str(body[key])

    text = (resp.text or "").strip()
    if text:
        return text[:500]
    return resp.reason or f"HTTP {resp.status_code}"
