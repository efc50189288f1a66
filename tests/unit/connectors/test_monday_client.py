"""Unit tests for GraphQLClient.

Tests focus on session management and the mapping of HTTP and GraphQL
failures to library exceptions.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from crewlink.board.connectors import GraphQLClient
from crewlink.board.core import RateLimitError, UpstreamError, UpstreamTimeoutError


def _response(status: int = 200, body=None, text: str = "", headers=None) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.headers = headers or {}
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value=text)
    return response


def _client_with(response: MagicMock) -> tuple[GraphQLClient, MagicMock]:
    client = GraphQLClient("secret", timeout=5.0)
    session = MagicMock()
    session.closed = False
    session.post.return_value.__aenter__.return_value = response
    client._session = session
    return client, session


class TestGraphQLClientSessionManagement:
    """Test GraphQLClient session management."""

    def test_init(self):
        """Test GraphQLClient initialization."""
        client = GraphQLClient("secret", timeout=10.0)
        assert client.timeout.total == 10.0
        assert client.api_url == "https://api.monday.com/v2"
        assert client.file_url == "https://api.monday.com/v2/file"
        assert client._session is None

    @pytest.mark.asyncio
    async def test_session_created_lazily(self):
        """Test session property creates and reuses the session."""
        client = GraphQLClient("secret")
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client.session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test close() can be called multiple times."""
        client = GraphQLClient("secret")
        session = client.session
        await client.close()
        await client.close()
        assert session.closed

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test GraphQLClient as async context manager."""
        async with GraphQLClient("secret") as client:
            session = client.session
        assert session.closed


class TestGraphQLClientExecute:
    """Test execute()."""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        """Test the data object is returned and the token is sent."""
        client, session = _client_with(_response(body={"data": {"boards": []}}))

        data = await client.execute("query { boards { id } }", {"x": 1})

        assert data == {"boards": []}
        _, kwargs = session.post.call_args
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["json"] == {"query": "query { boards { id } }", "variables": {"x": 1}}

    @pytest.mark.asyncio
    async def test_missing_data_is_empty(self):
        """Test a body without data yields an empty dict."""
        client, _ = _client_with(_response(body={}))
        assert await client.execute("query { me { id } }") == {}

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        """Test HTTP 429 maps to RateLimitError with Retry-After."""
        client, _ = _client_with(_response(status=429, headers={"Retry-After": "12"}))
        with pytest.raises(RateLimitError) as exc_info:
            await client.execute("query { me { id } }")
        assert exc_info.value.retry_after == 12

    @pytest.mark.asyncio
    async def test_rate_limit_without_header(self):
        """Test a missing Retry-After falls back to the default."""
        client, _ = _client_with(_response(status=429))
        with pytest.raises(RateLimitError) as exc_info:
            await client.execute("query { me { id } }")
        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test HTTP errors map to UpstreamError with the status."""
        client, _ = _client_with(_response(status=500, text="boom"))
        with pytest.raises(UpstreamError) as exc_info:
            await client.execute("query { me { id } }")
        assert exc_info.value.status_code == 500
        assert "boom" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        """Test a 200 response with errors is a failure."""
        body = {"errors": [{"message": "Column not found"}], "data": None}
        client, _ = _client_with(_response(body=body))
        with pytest.raises(UpstreamError, match="Column not found"):
            await client.execute("query { me { id } }")

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        """Test a non-object body is rejected."""
        client, _ = _client_with(_response(body=["unexpected"]))
        with pytest.raises(UpstreamError):
            await client.execute("query { me { id } }")

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test timeouts map to UpstreamTimeoutError."""
        client, session = _client_with(_response())
        session.post.side_effect = asyncio.TimeoutError()
        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await client.execute("query { me { id } }")
        assert exc_info.value.timeout == 5.0

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test aiohttp errors map to UpstreamError."""
        client, session = _client_with(_response())
        session.post.side_effect = aiohttp.ClientConnectionError("refused")
        with pytest.raises(UpstreamError, match="refused"):
            await client.execute("query { me { id } }")


class TestGraphQLClientUpload:
    """Test upload()."""

    @pytest.mark.asyncio
    async def test_upload_posts_multipart(self):
        """Test upload posts form data to the file endpoint."""
        body = {"data": {"add_file_to_column": {"id": "1"}}}
        client, session = _client_with(_response(body=body))

        result = await client.upload(
            "mutation", content=b"jpeg", file_name="a.jpg", content_type="image/jpeg"
        )

        assert result == body
        args, kwargs = session.post.call_args
        assert args[0] == client.file_url
        assert isinstance(kwargs["data"], aiohttp.FormData)
        assert "Content-Type" not in kwargs["headers"]
