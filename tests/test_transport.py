import json

import httpx
import pytest

from a2ui_chat.config import Settings
from a2ui_chat.errors import TransportError
from a2ui_chat.transport import TransportClient
from a2ui_chat.types import DataPart, OutboundRequest, TextPart

ENDPOINT = "http://agent.test/a2a"


def _client(handler) -> TransportClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TransportClient(ENDPOINT, supported_catalog_uris=["catalog://standard"], client=http)


@pytest.mark.asyncio
async def test_send_posts_parts_capabilities_and_context() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"result": {"kind": "message", "parts": []}})

    client = _client(handler)
    envelope = await client.send(OutboundRequest(parts=(TextPart(text="hi"),)), "ctx-1")

    assert envelope == {"result": {"kind": "message", "parts": []}}
    assert seen[0].method == "POST"
    assert str(seen[0].url) == ENDPOINT
    assert json.loads(seen[0].content) == {
        "parts": [{"kind": "text", "text": "hi"}],
        "metadata": {"clientUiCapabilities": {"supportedCatalogUris": ["catalog://standard"]}},
        "context_id": "ctx-1",
    }


@pytest.mark.asyncio
async def test_send_omits_missing_context_and_echoes_current_catalogs() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"result": {}})

    client = _client(handler)
    client.supported_catalog_uris = ["catalog://custom"]
    part = DataPart(data={"userAction": {"name": "refresh"}}, metadata={"mimeType": "application/json+a2ui"})
    await client.send(OutboundRequest(parts=(part,)))

    assert "context_id" not in bodies[0]
    assert bodies[0]["metadata"]["clientUiCapabilities"]["supportedCatalogUris"] == ["catalog://custom"]
    assert bodies[0]["parts"] == [
        {"kind": "data", "data": {"userAction": {"name": "refresh"}}, "metadata": {"mimeType": "application/json+a2ui"}}
    ]


@pytest.mark.asyncio
async def test_success_body_passes_through_unvalidated() -> None:
    client = _client(lambda request: httpx.Response(200, json={"unexpected": [1, 2]}))

    assert await client.send(OutboundRequest(parts=())) == {"unexpected": [1, 2]}


@pytest.mark.asyncio
async def test_error_status_raises_server_message() -> None:
    client = _client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(TransportError) as exc_info:
        await client.send(OutboundRequest(parts=(TextPart(text="hi"),)))

    assert exc_info.value.message == "boom"
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_unparseable_error_body_raises_generic_error() -> None:
    client = _client(lambda request: httpx.Response(502, text="<html>bad gateway</html>"))

    with pytest.raises(TransportError) as exc_info:
        await client.send(OutboundRequest(parts=()))

    assert "502" in exc_info.value.message


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(TransportError, match="connection refused"):
        await client.send(OutboundRequest(parts=()))


@pytest.mark.asyncio
async def test_non_json_success_raises_transport_error() -> None:
    client = _client(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(TransportError, match="non-JSON"):
        await client.send(OutboundRequest(parts=()))


def test_from_settings_uses_endpoint_and_catalogs() -> None:
    settings = Settings(agent_url="http://agent.test/", supported_catalog_uris=["catalog://a"])

    client = TransportClient.from_settings(settings, client=httpx.AsyncClient())

    assert client.endpoint_url == "http://agent.test/a2a"
    assert client.supported_catalog_uris == ["catalog://a"]
