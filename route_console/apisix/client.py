"""
APISIX Admin API Client
Authenticated request executor with a uniform error contract
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ..core.config_store import ApiConfig, ConfigStore
from .errors import ConfigurationMissing, TransportFailure

logger = logging.getLogger(__name__)


class _NoContent:
    """Result of a successful call that returned no body"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = _NoContent()


class ApiClient:
    """
    Executes one authenticated HTTP call per request against the Admin API

    The configuration is read from the injected ``ConfigStore`` on every
    call, so a newly saved base URL / key applies to the next request.
    Each call is a single attempt: no retries, no timeout, no deduplication.
    """

    def __init__(self, store: ConfigStore, client: Optional[httpx.AsyncClient] = None):
        self.store = store
        self.client = client or httpx.AsyncClient(timeout=None)

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()

    async def request(
        self,
        config: Optional[ApiConfig],
        path: str,
        method: str = "GET",
        body: Any = None
    ) -> Any:
        """
        Perform one call and return parsed JSON or NO_CONTENT

        Args:
            config: Admin API endpoint and key; must be set
            path: Path appended verbatim to the base URL, starting with '/'
            method: HTTP method
            body: JSON-serialisable body, or a pre-encoded string

        Raises:
            ConfigurationMissing: no base URL / API key, nothing is sent
            TransportFailure: non-2xx status, unreachable host or malformed body
        """
        if config is None or not config.base_url or not config.api_key:
            logger.error("API client called without proper configuration.")
            raise ConfigurationMissing()

        url = f"{config.base_url}{path}"
        headers = {
            "X-API-KEY": config.api_key,
            "Content-Type": "application/json"
        }

        content = None
        if body is not None:
            content = body if isinstance(body, str) else json.dumps(body)

        logger.debug(f"{method} {url}")
        try:
            response = await self.client.request(method, url, content=content, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"API request {method} {url} failed: {e}")
            raise TransportFailure(f"Could not reach the Admin API: {e}") from e

        if not response.is_success:
            raise self._failure(response)

        if response.status_code == 204 or not response.content:
            return NO_CONTENT

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Malformed JSON from {method} {url}: {response.text[:200]}")
            raise TransportFailure(
                "Received a malformed response from the server.",
                status=response.status_code,
                data=response.text
            ) from e

    async def get(self, path: str) -> Any:
        return await self.request(self.store.load(), path, "GET")

    async def post(self, path: str, body: Any) -> Any:
        return await self.request(self.store.load(), path, "POST", body)

    async def put(self, path: str, body: Any) -> Any:
        return await self.request(self.store.load(), path, "PUT", body)

    async def delete(self, path: str) -> Any:
        return await self.request(self.store.load(), path, "DELETE")

    @staticmethod
    def _failure(response: httpx.Response) -> TransportFailure:
        """Build the error for a non-2xx response"""
        status = response.status_code
        try:
            data: Any = response.json()
        except ValueError:
            data = {"message": response.reason_phrase}

        message = None
        if isinstance(data, dict):
            message = data.get("message") or data.get("error_msg")
        if not message:
            message = f"API request failed with status {status}"

        logger.error(f"Admin API returned {status}: {message}")
        return TransportFailure(message, status=status, data=data)

    async def health_check(self) -> Dict[str, Any]:
        """Check whether the configured Admin API answers"""
        try:
            await self.get("/routes?page=1&page_size=1")
            return {"status": "healthy", "admin_api_reachable": True}
        except ConfigurationMissing as e:
            return {"status": "unconfigured", "admin_api_reachable": False, "error": e.message}
        except TransportFailure as e:
            return {"status": "unhealthy", "admin_api_reachable": False, "error": e.message}
