from datetime import datetime

from fastapi.testclient import TestClient

from app import models
from app.db import SessionLocal

from .utils import add_member, create_project, create_task, register_and_token


def _setup(client: TestClient):
    alice_id, alice = register_and_token(client, "alice@example.com")
    bob_id, bob = register_and_token(client, "bob@example.com")
    project_id = create_project(client, alice)
    add_member(client, alice, project_id, "bob@example.com")
    return project_id, (alice_id, alice), (bob_id, bob)


def test_create_task_defaults_assignee_to_creator(client: TestClient):
    project_id, _, (bob_id, bob) = _setup(client)

    resp = client.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "  Design ", "description": "Draft", "status": "todo"},
        headers=bob,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Design"
    assert body["assignee_id"] == bob_id
    assert body["assignee"]["email"] == "bob@example.com"
    assert body["project_id"] == project_id


def test_create_task_with_explicit_assignee(client: TestClient):
    project_id, (alice_id, alice), (bob_id, _) = _setup(client)

    task = create_task(client, alice, project_id, assignee_id=bob_id)
    assert task["assignee_id"] == bob_id


def test_create_task_rejects_non_member_assignee(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    carol_id, _ = register_and_token(client, "carol@example.com")

    resp = client.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "T", "description": "D", "status": "todo", "assignee_id": carol_id},
        headers=alice,
    )
    assert resp.status_code == 400
    assert "assignee_id" in resp.json()["details"]


def test_create_task_validation(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    cases = [
        ({"description": "D", "status": "todo"}, "title"),
        ({"title": "   ", "description": "D", "status": "todo"}, "title"),
        ({"title": "T", "description": "", "status": "todo"}, "description"),
        ({"title": "T", "description": "D"}, "status"),
        ({"title": "x" * 256, "description": "D", "status": "todo"}, "title"),
        ({"title": "T", "description": "d" * 1001, "status": "todo"}, "description"),
        ({"title": "T", "description": "D", "status": "s" * 51}, "status"),
    ]
    for payload, field in cases:
        resp = client.post(f"/api/projects/{project_id}/tasks", json=payload, headers=alice)
        assert resp.status_code == 400, payload
        assert field in resp.json()["details"], payload


def test_create_task_accepts_free_form_status(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    task = create_task(client, alice, project_id, status="pending")
    assert task["status"] == "pending"


def test_non_member_cannot_create_or_list_tasks(client: TestClient):
    project_id, _, _ = _setup(client)
    _, carol = register_and_token(client, "carol@example.com")

    create = client.post(
        f"/api/projects/{project_id}/tasks",
        json={"title": "T", "description": "D", "status": "todo"},
        headers=carol,
    )
    assert create.status_code == 403
    assert client.get(f"/api/projects/{project_id}/tasks", headers=carol).status_code == 403


def test_list_tasks_newest_first(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    for title in ("First", "Second", "Third"):
        create_task(client, alice, project_id, title)

    body = client.get(f"/api/projects/{project_id}/tasks", headers=alice).json()
    assert body["total"] == 3
    assert [t["title"] for t in body["items"]] == ["Third", "Second", "First"]
    assert body["project"]["id"] == project_id


def test_task_from_other_project_is_404(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    other_project = create_project(client, alice, "Other")
    task = create_task(client, alice, other_project)

    resp = client.get(f"/api/projects/{project_id}/tasks/{task['id']}", headers=alice)
    assert resp.status_code == 404
    assert client.get(f"/api/projects/{project_id}/tasks/9999", headers=alice).status_code == 404


def test_assignee_updates_own_task_and_other_member_cannot(client: TestClient):
    project_id, (_, alice), (_, bob) = _setup(client)
    _, carol = register_and_token(client, "carol@example.com")
    add_member(client, alice, project_id, "carol@example.com")
    task = create_task(client, bob, project_id)

    resp = client.put(
        f"/api/projects/{project_id}/tasks/{task['id']}", json={"status": "in-progress"}, headers=bob
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "in-progress"
    assert resp.json()["title"] == "Design"

    forbidden = client.put(f"/api/projects/{project_id}/tasks/{task['id']}", json={"status": "done"}, headers=carol)
    assert forbidden.status_code == 403


def test_owner_can_edit_any_task(client: TestClient):
    project_id, (_, alice), (_, bob) = _setup(client)
    task = create_task(client, bob, project_id)

    resp = client.put(f"/api/projects/{project_id}/tasks/{task['id']}", json={"title": "Renamed"}, headers=alice)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Renamed"


def test_assignee_can_hand_task_over(client: TestClient):
    project_id, (alice_id, alice), (bob_id, bob) = _setup(client)
    task = create_task(client, bob, project_id)

    resp = client.put(
        f"/api/projects/{project_id}/tasks/{task['id']}", json={"assignee_id": alice_id}, headers=bob
    )
    assert resp.status_code == 200
    assert resp.json()["assignee_id"] == alice_id

    # Bob no longer holds the task
    again = client.put(f"/api/projects/{project_id}/tasks/{task['id']}", json={"title": "Mine"}, headers=bob)
    assert again.status_code == 403


def test_update_rejects_explicit_nulls_and_non_member_assignee(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    carol_id, _ = register_and_token(client, "carol@example.com")
    task = create_task(client, alice, project_id)

    for field in ("title", "description", "status", "assignee_id"):
        resp = client.put(f"/api/projects/{project_id}/tasks/{task['id']}", json={field: None}, headers=alice)
        assert resp.status_code == 400, field
        assert field in resp.json()["details"]

    resp = client.put(
        f"/api/projects/{project_id}/tasks/{task['id']}", json={"assignee_id": carol_id}, headers=alice
    )
    assert resp.status_code == 400
    assert "assignee_id" in resp.json()["details"]


def test_update_with_same_values_stamps_updated_at(client: TestClient):
    project_id, (_, alice), _ = _setup(client)
    task = create_task(client, alice, project_id)

    with SessionLocal() as db:
        row = db.get(models.Task, task["id"])
        row.updated_at = datetime(2020, 1, 1)
        db.commit()

    resp = client.put(f"/api/projects/{project_id}/tasks/{task['id']}", json={"title": "Design"}, headers=alice)
    assert resp.status_code == 200
    assert not resp.json()["updated_at"].startswith("2020-01-01")


def test_last_write_wins(client: TestClient):
    project_id, (_, alice), (_, bob) = _setup(client)
    task = create_task(client, bob, project_id)
    url = f"/api/projects/{project_id}/tasks/{task['id']}"

    # Both read the same version, then write without coordination
    assert client.get(url, headers=alice).status_code == 200
    assert client.get(url, headers=bob).status_code == 200
    assert client.put(url, json={"title": "Alice's title"}, headers=alice).status_code == 200
    assert client.put(url, json={"title": "Bob's title"}, headers=bob).status_code == 200

    assert client.get(url, headers=alice).json()["title"] == "Bob's title"


def test_delete_task_permissions(client: TestClient):
    project_id, (_, alice), (_, bob) = _setup(client)
    _, carol = register_and_token(client, "carol@example.com")
    add_member(client, alice, project_id, "carol@example.com")
    task = create_task(client, bob, project_id)
    url = f"/api/projects/{project_id}/tasks/{task['id']}"

    assert client.delete(url, headers=carol).status_code == 403

    resp = client.delete(url, headers=bob)
    assert resp.status_code == 200
    assert resp.json() == {"detail": "Task deleted"}
    assert client.get(url, headers=alice).status_code == 404
