def test_root_returns_message(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Appraisal Portal API"


def test_health_returns_status(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ("healthy", "degraded")
    assert "version" in data
    assert data["version"] == "0.1.0"
    assert "services" in data


def test_protected_routes_require_auth(client):
    assert client.get("/api/v1/employees").status_code == 401
    assert client.get("/api/v1/org-chart/levels").status_code == 401
    assert client.post("/api/v1/assignments/preview", json={"reviewPeriodId": "p1"}).status_code == 401
