import logging
from typing import Optional, Dict, Any

import httpx

logger = logging.getLogger(__name__)


class TrackingApiClient:
    """Thin httpx wrapper over the walker tracking endpoints."""

    def __init__(self, base_url: str, id_token: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {id_token}"},
            timeout=10.0,
            transport=transport,
        )

    async def publish(self, latitude: float, longitude: float) -> Dict[str, Any]:
        response = await self._client.post(
            "/api/v1/tracking/location",
            json={"latitude": latitude, "longitude": longitude},
        )
        response.raise_for_status()
        return response.json()

    async def stop(self) -> Dict[str, Any]:
        response = await self._client.post("/api/v1/tracking/stop")
        response.raise_for_status()
        return response.json()

    async def status(self) -> Dict[str, Any]:
        response = await self._client.get("/api/v1/tracking/status")
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
