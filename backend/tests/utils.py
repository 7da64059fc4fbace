from fastapi.testclient import TestClient

PASSWORD = "secret1"


def register_and_token(client: TestClient, email: str, password: str = PASSWORD) -> tuple[str, dict[str, str]]:
    """Register a user and log in through the OAuth2 form; returns (user_id, auth headers)."""
    reg_resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert reg_resp.status_code == 201, reg_resp.text
    user_id = reg_resp.json()["id"]
    token_resp = client.post(
        "/api/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert token_resp.status_code == 200, token_resp.text
    return user_id, {"Authorization": f"Bearer {token_resp.json()['access_token']}"}


def create_project(client: TestClient, headers: dict[str, str], name: str = "Launch", description: str = "desc") -> int:
    resp = client.post("/api/projects", json={"name": name, "description": description}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def add_member(client: TestClient, headers: dict[str, str], project_id: int, email: str) -> dict:
    resp = client.post(f"/api/projects/{project_id}/members", json={"email": email}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_task(
    client: TestClient,
    headers: dict[str, str],
    project_id: int,
    title: str = "Design",
    status: str = "todo",
    **extra,
) -> dict:
    payload = {"title": title, "description": "Draft", "status": status, **extra}
    resp = client.post(f"/api/projects/{project_id}/tasks", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
