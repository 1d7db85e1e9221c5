from __future__ import annotations


def test_health_returns_status_and_services(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert data["version"] == "0.1.0"
    assert "cosmos_db" in data["services"]
    assert "users" in data["services"]
    assert "uploads" in data["services"]


def test_health_with_store_is_healthy(client):
    data = client.get("/api/health").json()
    assert data["status"] == "healthy"
    assert data["services"]["cosmos_db"] == "ok"
    assert data["services"]["uploads"] == "ok"


def test_health_store_error_is_degraded(client, employee_container):
    employee_container.fail_with = RuntimeError("store down")
    data = client.get("/api/health").json()
    assert data["status"] == "degraded"
    assert data["services"]["cosmos_db"] == "error"


def test_readiness_probe(client):
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["ready"] is True
