def test_health_check(anon_client):
    response = anon_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers
