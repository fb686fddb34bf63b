"""
Coolify API Client
==================

Authenticated JSON request executor for the Coolify control plane.

Handles:
- Effective base URL resolution (explicit prefix, default /api/v1/, raw root)
- Bearer auth and JSON headers
- Mapping non-success responses to ``CoolifyAPIError``

Uses httpx.AsyncClient; no retries, no timeout unless the caller asks for one.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse

import httpx

from .config import CoolifyConfig
from .errors import ConfigurationError, CoolifyAPIError

logger = logging.getLogger(__name__)

DEFAULT_API_SEGMENT = "api/v1/"


def resolve_base_url(api_url: str, api_prefix: Optional[str] = None) -> str:
    """
    Compute the base URL all relative API paths are resolved against.

    Precedence:
        1. Explicit prefix, with "/v1" read as "/api/v1"; a whitespace-only
           prefix selects the raw root, an empty string counts as unset
        2. Root without an "/api/" segment gets "api/v1/" appended
        3. Root unchanged

    Args:
        api_url: Configured control-plane root URL
        api_prefix: Optional path prefix override

    Returns:
        Absolute base URL
    """
    root = urlparse(api_url).geturl()

    if api_prefix:
        prefix = api_prefix.strip()
        if not prefix:
            return root
        if not prefix.startswith("/"):
            prefix = f"/{prefix}"
        if prefix == "/v1":
            prefix = "/api/v1"
        base = urljoin(root, prefix.lstrip("/"))
        # Relative paths must resolve beneath the prefix, not beside it
        if not base.endswith("/"):
            base = f"{base}/"
        return base

    if "/api/" not in urlparse(root).path:
        return urljoin(root, DEFAULT_API_SEGMENT)

    return root


class CoolifyClient:
    """
    Generic authenticated request executor.

    Usage:
        client = CoolifyClient(config.coolify)
        projects = await client.execute("/projects")
        await client.execute("/applications/abc/start", method="POST")
    """

    def __init__(
        self,
        config: CoolifyConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.base_url: Optional[str] = None
        if config.is_configured:
            self.base_url = resolve_base_url(config.api_url, config.api_prefix)
        else:
            logger.warning("Coolify API not fully configured")

        self.client = httpx.AsyncClient(transport=transport, timeout=httpx.Timeout(None))

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    def url_for(self, path: str) -> str:
        if self.base_url is None:
            raise ConfigurationError("Coolify API not configured")
        return urljoin(self.base_url, path.lstrip("/"))

    async def execute(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Issue one request against the control plane.

        Args:
            path: Path relative to the resolved base URL
            method: HTTP method
            body: JSON-serializable request body
            headers: Extra headers; override the defaults
            timeout: Optional per-call timeout in seconds

        Returns:
            Parsed JSON body, or None for 204 / unparseable bodies

        Raises:
            ConfigurationError: URL or token missing (no request is made)
            CoolifyAPIError: Non-success status
        """
        if not self.config.is_configured:
            raise ConfigurationError("Coolify API not configured")

        url = self.url_for(path)
        request_headers = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self.config.api_token}",
        }
        content = None
        if body is not None:
            request_headers["Content-Type"] = "application/json"
            content = json.dumps(body)
        if headers:
            request_headers.update(headers)

        kwargs: Dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout

        response = await self.client.request(
            method,
            url,
            content=content,
            headers=request_headers,
            **kwargs,
        )

        payload = None
        if response.status_code != 204:
            try:
                payload = response.json()
            except ValueError:
                payload = None

        if not response.is_success:
            logger.warning(
                f"Coolify API {method} {path} failed: {response.status_code} "
                f"{json.dumps(payload) if payload is not None else ''}"
            )
            raise CoolifyAPIError(response.status_code, method=method, path=path, payload=payload)

        return payload
