"""HTTP client for the notification endpoints."""

from __future__ import annotations

from typing import Any

import httpx


class NotificationApiClient:
    """Call the notification endpoints on behalf of one bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._headers = {"Authorization": f"Bearer {token}"}

    async def list(self) -> list[dict[str, Any]]:
        response = await self._client.get("/notifications", headers=self._headers)
        response.raise_for_status()
        return response.json()

    async def mark_all_read(self) -> int:
        response = await self._client.put(
            "/notifications/mark-all-read", headers=self._headers
        )
        response.raise_for_status()
        return int(response.json().get("count", 0))

    async def clear_all(self) -> int:
        response = await self._client.delete("/notifications", headers=self._headers)
        response.raise_for_status()
        return int(response.json().get("count", 0))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "NotificationApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["NotificationApiClient"]
