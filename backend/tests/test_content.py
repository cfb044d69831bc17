import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_news_lifecycle(client: AsyncClient, admin_headers):
    created = await client.post(
        "/admin/news",
        json={"title": "Certificate authentication is online", "content": "Submit through the portal"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    news_id = created.json()["id"]

    public = await client.get("/news")
    assert [n["id"] for n in public.json()] == [news_id]

    await client.patch(f"/admin/news/{news_id}", json={"is_active": False}, headers=admin_headers)
    assert (await client.get("/news")).json() == []
    assert len((await client.get("/admin/news", headers=admin_headers)).json()) == 1

    deleted = await client.delete(f"/admin/news/{news_id}", headers=admin_headers)
    assert deleted.status_code == 204
    missing = await client.delete(f"/admin/news/{news_id}", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_news_requires_admin(client: AsyncClient, auth_headers):
    response = await client.post("/admin/news", json={"title": "x", "content": "y"}, headers=auth_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_library_documents(client: AsyncClient, admin_headers):
    for category, country in [("Medical", "Iraq"), ("IT", "Iraq"), ("IT", "Yemen")]:
        response = await client.post(
            "/admin/library",
            json={"title": f"{category} guide", "file_url": "https://example.org/guide.pdf", "category": category, "country": country},
            headers=admin_headers,
        )
        assert response.status_code == 201

    assert len((await client.get("/library")).json()) == 3
    assert len((await client.get("/library", params={"category": "IT"})).json()) == 2
    assert len((await client.get("/library", params={"category": "IT", "country": "Yemen"})).json()) == 1


@pytest.mark.asyncio
async def test_library_rejects_unknown_category(client: AsyncClient, admin_headers):
    response = await client.post(
        "/admin/library",
        json={"title": "Law", "file_url": "https://example.org/law.pdf", "category": "Law", "country": "Iraq"},
        headers=admin_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["storage"]["backend"] == "local"
