# tests/test_basic_endpoints.py
import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio


async def test_ping_health(client: AsyncClient):
    r = await client.get("/api/v1/ping/")
    assert r.status_code == 200
    assert r.json().get("message") == "pong"

    r = await client.get("/api/v1/health/")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert isinstance(data["vision_configured"], bool)


async def test_metrics_and_ops(client: AsyncClient):
    """測試 /metrics, /healthz, /readyz 都能正確回應"""
    r = await client.get("/metrics")
    assert r.status_code == 200
    assert "# HELP" in r.text  # Prometheus metrics 格式驗證

    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json().get("ok") is True

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json().get("ready") is True


async def test_security_headers(client: AsyncClient):
    r = await client.get("/")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


async def test_categories_list(client: AsyncClient):
    r = await client.get("/api/v1/categories/")
    assert r.status_code == 200
    data = r.json()
    assert len(data) == 21
    assert data[0] == {"id": 1, "name": "Animals"}
    assert data[-1] == {"id": 21, "name": "Travel"}


async def test_unknown_route_uses_detail_shape(client: AsyncClient):
    r = await client.get("/api/v1/nope")
    assert r.status_code == 404
    assert "detail" in r.json()
