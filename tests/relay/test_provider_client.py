"""Tests for ProviderClient."""

import asyncio

import aiohttp
import pytest
from aioresponses import aioresponses

from shoutit.errors import UpstreamError, UpstreamTimeout
from shoutit.relay.client import ProviderClient, ProviderClientConfig, ProviderResponse

URL = "https://provider.test/api/v1/notifications"


class TestProviderClientConfig:
    def test_default_values(self):
        config = ProviderClientConfig()

        assert config.connect_timeout == 10.0
        assert config.read_timeout == 30.0
        assert config.connection_limit == 100


class TestProviderClient:
    @pytest.fixture
    async def client(self):
        client = ProviderClient(ProviderClientConfig())
        await client.connect()
        yield client
        await client.close()

    async def test_post_before_connect(self):
        client = ProviderClient(ProviderClientConfig())

        with pytest.raises(RuntimeError):
            await client.post(URL, data=b"{}", headers={})

    async def test_connect_is_idempotent(self, client):
        session = client._session

        await client.connect()

        assert client._session is session

    async def test_close(self):
        client = ProviderClient(ProviderClientConfig())
        await client.connect()
        assert client.connected

        await client.close()

        assert not client.connected

    async def test_successful_post(self, client):
        with aioresponses() as m:
            m.post(URL, status=200, body='{"id":"abc"}')

            response = await client.post(URL, data=b"{}", headers={"charset": "utf-8"})

        assert response == ProviderResponse(
            status=200,
            body=b'{"id":"abc"}',
            content_type="application/json",
        )

    async def test_sends_body_and_headers(self, client):
        with aioresponses() as m:
            m.post(URL, status=200, body="{}")

            await client.post(URL, data=b'{"a": 1}', headers={"Authorization": "Basic k"})

            call = next(iter(m.requests.values()))[0]
            assert call.kwargs["data"] == b'{"a": 1}'
            assert call.kwargs["headers"]["Authorization"] == "Basic k"

    async def test_error_status_is_returned_not_raised(self, client):
        """Provider 4xx/5xx are responses, not transport failures."""
        with aioresponses() as m:
            m.post(URL, status=400, body='{"errors":["bad"]}')

            response = await client.post(URL, data=b"{}", headers={})

        assert response.status == 400
        assert response.body == b'{"errors":["bad"]}'

    async def test_connection_error(self, client):
        with aioresponses() as m:
            m.post(URL, exception=aiohttp.ClientConnectionError("Connection refused"))

            with pytest.raises(UpstreamError) as exc_info:
                await client.post(URL, data=b"{}", headers={})

        assert exc_info.value.status_code == 502
        assert "Connection refused" in str(exc_info.value)

    async def test_timeout(self, client):
        with aioresponses() as m:
            m.post(URL, exception=asyncio.TimeoutError())

            with pytest.raises(UpstreamTimeout) as exc_info:
                await client.post(URL, data=b"{}", headers={})

        assert exc_info.value.status_code == 504

    async def test_single_attempt(self, client):
        """A failed request is never retried."""
        with aioresponses() as m:
            m.post(URL, exception=aiohttp.ClientConnectionError("down"))
            m.post(URL, status=200, body="{}")

            with pytest.raises(UpstreamError):
                await client.post(URL, data=b"{}", headers={})

            assert len(next(iter(m.requests.values()))) == 1
