import json

import httpx
import pytest

from app.domains.support.service.support_service import whatsapp_link
from app.domains.tracking.client import TrackingApiClient


def test_whatsapp_link_encodes_message():
    assert whatsapp_link("524491431962", "Hola, necesito ayuda") == (
        "https://wa.me/524491431962?text=Hola%2C%20necesito%20ayuda"
    )


def test_support_endpoint(client):
    res = client.get("/api/v1/support/whatsapp")

    assert res.status_code == 200
    assert res.json()["phone"] == "524491431962"
    assert res.json()["url"].startswith("https://wa.me/524491431962?text=Hola")


def test_root(client):
    assert "running" in client.get("/").json()["message"]


class TestTrackingApiClient:

    async def test_publish_sends_bearer_token_and_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "active": True})

        async with TrackingApiClient("http://api.test/", "walker-1", transport=httpx.MockTransport(handler)) as api:
            body = await api.publish(21.88, -102.29)

        assert body["active"] is True
        assert seen == {
            "auth": "Bearer walker-1",
            "path": "/api/v1/tracking/location",
            "body": {"latitude": 21.88, "longitude": -102.29},
        }

    async def test_errors_raise(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"code": "AUTH_403_1"})

        async with TrackingApiClient("http://api.test", "client-1", transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(httpx.HTTPStatusError) as exc:
                await api.stop()

        assert exc.value.response.status_code == 403
