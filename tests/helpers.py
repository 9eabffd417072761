from fastapi.testclient import TestClient

CUSTOMER = {"username": "maria", "email": "maria@example.com", "password": "secret123"}
ADMIN = {"email": "admin@example.com", "password": "admin123"}


def login_headers(client: TestClient, email: str, password: str) -> dict[str, str]:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
