"""Async GraphQL client for the Monday.com API."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp

from ...core.exceptions import RateLimitError, UpstreamError, UpstreamTimeoutError
from .config import API_URL, DEFAULT_RETRY_AFTER_SECONDS, DEFAULT_TIMEOUT_SECONDS, FILE_API_URL


class GraphQLClient:
    """Async HTTP client wrapper for GraphQL over POST."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = API_URL,
        file_url: str = FILE_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.api_url = api_url
        self.file_url = file_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._token = token
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def _read(self, response: aiohttp.ClientResponse) -> dict[str, Any]:
        if response.status == 429:
            retry_after = response.headers.get("Retry-After", "")
            raise RateLimitError(
                "Upstream rate limit exceeded",
                retry_after=int(retry_after) if retry_after.isdigit() else DEFAULT_RETRY_AFTER_SECONDS,
            )
        if response.status >= 400:
            text = await response.text()
            raise UpstreamError(f"HTTP {response.status}: {text[:500]}", status_code=response.status)
        body = await response.json(content_type=None)
        if not isinstance(body, dict):
            raise UpstreamError("Unexpected response body", status_code=response.status)
        if body.get("errors"):
            raise UpstreamError(json.dumps(body["errors"]), status_code=response.status)
        return body

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a query or mutation and return its ``data`` object.

        Raises:
            RateLimitError: On HTTP 429
            UpstreamTimeoutError: If the request times out
            UpstreamError: On transport errors, HTTP errors or GraphQL errors
        """
        headers = {"Authorization": f"Bearer {self._token}", "Content-Type": "application/json"}
        payload = {"query": query, "variables": variables or {}}
        try:
            async with self.session.post(self.api_url, json=payload, headers=headers) as response:
                body = await self._read(response)
        except asyncio.TimeoutError as exc:
            raise UpstreamTimeoutError("Upstream request timed out", timeout=self.timeout.total) from exc
        except aiohttp.ClientError as exc:
            raise UpstreamError(f"Upstream request failed: {exc}") from exc
        return body.get("data") or {}

    async def upload(
        self,
        query: str,
        *,
        content: bytes,
        file_name: str,
        content_type: str,
    ) -> dict[str, Any]:
        """Send a multipart file mutation and return the whole response body."""
        form = aiohttp.FormData()
        form.add_field("query", query)
        form.add_field("variables[file]", content, filename=file_name, content_type=content_type)
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            async with self.session.post(self.file_url, data=form, headers=headers) as response:
                return await self._read(response)
        except asyncio.TimeoutError as exc:
            raise UpstreamTimeoutError("Upstream upload timed out", timeout=self.timeout.total) from exc
        except aiohttp.ClientError as exc:
            raise UpstreamError(f"Upstream upload failed: {exc}") from exc

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> GraphQLClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
