import asyncio

import httpx
import pytest

from medterm.services import ContentClient
from medterm.study.catalog import load_catalog

STAMP = "2024-01-01 00:00:00"

TERMS = [
    {
        "id": "t1",
        "term": "Hypertension",
        "meaning": "High blood pressure",
        "pronunciation": None,
        "categories": [],
        "created_by": "u",
        "created_at": STAMP,
        "updated_at": STAMP,
    }
]


def make_transport(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json={"access_token": "abc", "user": {}})
        if request.url.path == "/api/terms":
            return httpx.Response(200, json=TERMS)
        if request.url.path == "/api/phrases":
            return httpx.Response(500, json={"detail": "boom"})
        return httpx.Response(200, json=[])

    return httpx.MockTransport(handler)


def test_login_then_fetch_sends_bearer_token():
    seen = []
    client = ContentClient("http://medterm.test/", transport=make_transport(seen))

    assert asyncio.run(client.login("admin", "admin123")) == "abc"
    terms = asyncio.run(client.fetch_terms())

    assert terms[0].term == "Hypertension"
    assert seen[-1].headers["Authorization"] == "Bearer abc"


def test_http_errors_raise():
    client = ContentClient("http://medterm.test", token="abc", transport=make_transport([]))
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.fetch_phrases())


def test_catalog_from_remote_source_skips_failed_fetch():
    client = ContentClient("http://medterm.test", token="abc", transport=make_transport([]))
    catalog = asyncio.run(load_catalog(client))

    assert [c.id for c in catalog.cards] == ["term-t1"]
    assert catalog.categories == []
