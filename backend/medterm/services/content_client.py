"""
HTTP content source for a remote medterm server.

Each fetch is an independent request, so ``load_catalog`` can run them
concurrently and tolerate one failing:

    client = ContentClient("http://localhost:8000", token)
    catalog = await load_catalog(client)
"""
from __future__ import annotations

from typing import Any

import httpx

from medterm.models.category import Category
from medterm.models.phrase import MedicalPhrase
from medterm.models.term import MedicalTerm

DEFAULT_TIMEOUT = 10.0


class ContentClient:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def _get(self, path: str) -> Any:
        async with self._client() as client:
            res = await client.get(path)
            res.raise_for_status()
            return res.json()

    async def login(self, username: str, password: str) -> str:
        """Exchange credentials for a token and keep it for later requests."""
        async with self._client() as client:
            res = await client.post(
                "/api/auth/login", json={"username": username, "password": password}
            )
            res.raise_for_status()
            self.token = res.json()["access_token"]
        return self.token

    async def fetch_terms(self) -> list[MedicalTerm]:
        return [MedicalTerm.model_validate(t) for t in await self._get("/api/terms")]

    async def fetch_phrases(self) -> list[MedicalPhrase]:
        return [MedicalPhrase.model_validate(p) for p in await self._get("/api/phrases")]

    async def fetch_categories(self) -> list[Category]:
        return [Category.model_validate(c) for c in await self._get("/api/categories")]
