"""Unit tests for the shared fetch_json transport helper."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from src.utils.errors import NotFoundError, ProviderUnavailableError, RateLimitError
from src.utils.http import DEFAULT_USER_AGENT, fetch_json, is_not_found_message
from tests.conftest import make_response

_URL = "https://api.example.test/thing"


class TestIsNotFoundMessage:
    @pytest.mark.parametrize(
        "message",
        ["Artist not found", "UNKNOWN ID", "invalid id: 42", "no data"],
    )
    def test_markers(self, message: str) -> None:
        assert is_not_found_message(message) is True

    @pytest.mark.parametrize("message", ["", None, "quota exceeded", "internal error"])
    def test_other_messages(self, message: str | None) -> None:
        assert is_not_found_message(message) is False


class TestFetchJson:
    @pytest.mark.asyncio
    async def test_success_returns_json_and_sets_headers(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({"ok": True})

        result = await fetch_json(mock_client, _URL, provider="test", params={"q": "x"}, timeout=3.0)

        assert result == {"ok": True}
        kwargs = mock_client.get.call_args.kwargs
        assert kwargs["params"] == {"q": "x"}
        assert kwargs["headers"]["User-Agent"] == DEFAULT_USER_AGENT
        assert kwargs["headers"]["Accept"] == "application/json"
        assert kwargs["timeout"] == httpx.Timeout(3.0)

    @pytest.mark.asyncio
    async def test_post_sends_form_and_basic_auth(self, mock_client: AsyncMock) -> None:
        mock_client.post.return_value = make_response({"access_token": "t"})

        await fetch_json(
            mock_client,
            _URL,
            provider="test",
            method="POST",
            data={"grant_type": "client_credentials"},
            auth=("id", "secret"),
        )

        kwargs = mock_client.post.call_args.kwargs
        assert kwargs["data"] == {"grant_type": "client_credentials"}
        assert kwargs["auth"] == ("id", "secret")
        mock_client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_404_is_not_found(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({"error": "missing"}, status_code=404)
        with pytest.raises(NotFoundError) as exc_info:
            await fetch_json(mock_client, _URL, provider="deezer")
        assert exc_info.value.provider_name == "deezer"

    @pytest.mark.asyncio
    async def test_timeout_is_unavailable_not_not_found(self, mock_client: AsyncMock) -> None:
        mock_client.get.side_effect = httpx.TimeoutException("Timed out")
        with pytest.raises(ProviderUnavailableError) as exc_info:
            await fetch_json(mock_client, _URL, provider="deezer")
        assert not isinstance(exc_info.value, NotFoundError)

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, mock_client: AsyncMock) -> None:
        mock_client.get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(ProviderUnavailableError):
            await fetch_json(mock_client, _URL, provider="x")

    @pytest.mark.asyncio
    async def test_429_is_rate_limit(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({}, status_code=429)
        with pytest.raises(RateLimitError) as exc_info:
            await fetch_json(mock_client, _URL, provider="x")
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_400_with_unknown_id_message_is_not_found(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response(
            {"error": {"status": 400, "message": "invalid id"}}, status_code=400
        )
        with pytest.raises(NotFoundError):
            await fetch_json(mock_client, _URL, provider="spotify")

    @pytest.mark.asyncio
    async def test_500_is_unavailable_with_status(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response({"message": "boom"}, status_code=500)
        with pytest.raises(ProviderUnavailableError) as exc_info:
            await fetch_json(mock_client, _URL, provider="x")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_malformed_json_is_unavailable(self, mock_client: AsyncMock) -> None:
        mock_client.get.return_value = make_response(ValueError("not json"))
        with pytest.raises(ProviderUnavailableError):
            await fetch_json(mock_client, _URL, provider="x")
