async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"


async def test_root_welcome_message(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert "Bottin des artistes" in response.json()["message"]


async def test_invalid_path_parameter_is_400(client):
    response = await client.get("/api/troc/pas-un-nombre")
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid input"


async def test_cors_allows_frontend_with_credentials(client):
    response = await client.options(
        "/api/troc",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"
