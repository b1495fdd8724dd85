import pytest


@pytest.mark.asyncio
async def test_health_endpoint(client) -> None:
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_health_head(client) -> None:
    response = await client.head("/api/health")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(client) -> None:
    response = await client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"message": "Route not found", "error": "Not Found"}
