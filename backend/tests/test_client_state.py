import httpx
import pytest
from fastapi.testclient import TestClient

from app.client import (
    ApiError,
    BoardView,
    ProjectMembersStore,
    ProjectsStore,
    ProjectTasksStore,
    ResourceCache,
    TaskboardClient,
    UnknownColumn,
    UserSearchStore,
)

from .utils import PASSWORD


def _session(client: TestClient, email: str) -> TaskboardClient:
    api = TaskboardClient(client)
    api.register(email, PASSWORD)
    api.login(email, PASSWORD)
    return api


def test_api_errors_carry_envelope(client: TestClient):
    api = TaskboardClient(client)
    with pytest.raises(ApiError) as exc_info:
        api.me()
    assert exc_info.value.is_unauthenticated
    assert exc_info.value.error == "Authentication required - please log in first"

    alice = _session(client, "alice@example.com")
    with pytest.raises(ApiError) as exc_info:
        alice.create_task(9999, "T", "D", "todo")
    assert exc_info.value.is_not_found


def test_projects_store_refreshes_after_write(client: TestClient):
    api = _session(client, "alice@example.com")
    cache = ResourceCache()
    projects = ProjectsStore(api, cache)

    assert projects.state.data["total"] == 0
    assert projects.state.data["total"] == 0
    assert cache.fetch_count == 1

    projects.create("Launch")
    state = projects.state
    assert state.ok
    assert [p["name"] for p in state.data["items"]] == ["Launch"]
    assert cache.fetch_count == 2


def test_task_writes_only_invalidate_their_project(client: TestClient):
    api = _session(client, "alice@example.com")
    cache = ResourceCache()
    first = api.create_project("First")["id"]
    second = api.create_project("Second")["id"]
    first_tasks = ProjectTasksStore(api, cache, first)
    second_tasks = ProjectTasksStore(api, cache, second)

    assert first_tasks.state.data["total"] == 0
    assert second_tasks.state.data["total"] == 0

    first_tasks.create("Design", "Draft", "todo")
    assert ("project", first, "tasks") not in cache
    assert ("project", second, "tasks") in cache
    assert first_tasks.state.data["total"] == 1


def test_forbidden_read_lands_in_error(client: TestClient):
    alice = _session(client, "alice@example.com")
    carol = _session(client, "carol@example.com")
    project_id = alice.create_project("Launch")["id"]

    state = ProjectTasksStore(carol, ResourceCache(), project_id).state
    assert state.data is None
    assert state.error is not None and state.error.is_forbidden
    assert not state.ok


def test_member_removal_refreshes_task_assignees(client: TestClient):
    alice = _session(client, "alice@example.com")
    bob = _session(client, "bob@example.com")
    project_id = alice.create_project("Launch")["id"]
    cache = ResourceCache()
    members = ProjectMembersStore(alice, cache, project_id)
    tasks = ProjectTasksStore(alice, cache, project_id)

    members.add("bob@example.com")
    bob.create_task(project_id, "Design", "Draft", "todo")
    assert tasks.state.data["items"][0]["assignee"]["email"] == "bob@example.com"
    assert len(members.state.data["items"]) == 2

    members.remove(bob.me()["id"])
    assert len(members.state.data["items"]) == 1
    assert tasks.state.data["items"][0]["assignee"]["email"] == "alice@example.com"


def test_user_search_skips_short_queries(client: TestClient):
    alice = _session(client, "alice@example.com")
    _session(client, "alina@example.com")
    cache = ResourceCache()
    search = UserSearchStore(alice, cache)

    assert search.search("a").data == {"items": []}
    assert search.search("  ").data == {"items": []}
    assert cache.fetch_count == 0

    assert [u["email"] for u in search.search("ali").data["items"]] == ["alina@example.com"]
    assert cache.fetch_count == 1


def test_board_drop_moves_card(client: TestClient):
    alice = _session(client, "alice@example.com")
    project_id = alice.create_project("Launch")["id"]
    task = alice.create_task(project_id, "Design", "Draft", "todo")
    alice.create_task(project_id, "Old", "Imported", "pending")

    board = BoardView(ProjectTasksStore(alice, ResourceCache(), project_id)).load()
    assert [t["title"] for t in board.columns["todo"]] == ["Design"]
    assert [t["title"] for t in board.other] == ["Old"]

    board.drop(task["id"], "done")
    assert board.columns["todo"] == []
    assert [t["title"] for t in board.columns["done"]] == ["Design"]
    assert alice.get_task(project_id, task["id"])["status"] == "done"

    # Dropping on the same column still succeeds
    board.drop(task["id"], "done")
    assert board.find(task["id"])[0] == "done"


def test_board_rejects_unknown_column_locally(client: TestClient):
    alice = _session(client, "alice@example.com")
    project_id = alice.create_project("Launch")["id"]
    task = alice.create_task(project_id, "Design", "Draft", "todo")
    store = ProjectTasksStore(alice, ResourceCache(), project_id)
    board = BoardView(store).load()
    fetches = store.cache.fetch_count

    with pytest.raises(UnknownColumn):
        board.drop(task["id"], "archived")
    assert board.find(task["id"])[0] == "todo"
    assert store.cache.fetch_count == fetches
    assert alice.get_task(project_id, task["id"])["status"] == "todo"


def test_board_reverts_when_server_rejects(client: TestClient):
    alice = _session(client, "alice@example.com")
    bob = _session(client, "bob@example.com")
    project_id = alice.create_project("Launch")["id"]
    alice.add_member(project_id, "bob@example.com")
    task = alice.create_task(project_id, "Design", "Draft", "todo")

    board = BoardView(ProjectTasksStore(bob, ResourceCache(), project_id)).load()
    with pytest.raises(ApiError) as exc_info:
        board.drop(task["id"], "in-progress")
    assert exc_info.value.is_forbidden
    status, card = board.find(task["id"])
    assert status == "todo"
    assert card["status"] == "todo"
    assert board.columns["in-progress"] == []


def test_transport_failure_is_an_error_and_refetched(client: TestClient, monkeypatch):
    api = _session(client, "alice@example.com")
    api.create_project("Launch")
    cache = ResourceCache()
    projects = ProjectsStore(api, cache)
    real_list = api.list_projects
    calls = []

    def flaky_list():
        calls.append(1)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused")
        return real_list()

    monkeypatch.setattr(api, "list_projects", flaky_list)

    failed = projects.state
    assert isinstance(failed.error, httpx.ConnectError)
    assert failed.data is None and not failed.ok

    recovered = projects.state
    assert recovered.ok
    assert recovered.data["total"] == 1
    assert cache.fetch_count == 2


def test_board_reverts_when_server_unreachable(client: TestClient, monkeypatch):
    alice = _session(client, "alice@example.com")
    project_id = alice.create_project("Launch")["id"]
    task = alice.create_task(project_id, "Design", "Draft", "todo")
    store = ProjectTasksStore(alice, ResourceCache(), project_id)
    board = BoardView(store).load()

    def unreachable(task_id, status):
        raise httpx.ReadTimeout("timed out")

    monkeypatch.setattr(store, "move", unreachable)

    with pytest.raises(httpx.ReadTimeout):
        board.drop(task["id"], "done")
    status, card = board.find(task["id"])
    assert status == "todo"
    assert card["status"] == "todo"
    assert board.columns["done"] == []
    assert alice.get_task(project_id, task["id"])["status"] == "todo"
