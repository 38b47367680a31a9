"""Tests for the task list HTTP API."""

from unittest.mock import patch

import pytest

from tasklist.exceptions import InternalError


def create(client, **data):
    response = client.post("/api/items", json=data)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateRoutes:
    """Test POST /api/items."""

    def test_create_task_success(self, client, sample_task_data):
        """Test successful task creation via API."""
        response = client.post("/api/items", json=sample_task_data)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["title"] == "Test Task"
        assert data["description"] == "This is a test task description"
        assert data["category"] == ["work", "urgent"]
        assert data["dueDate"] == "2024-03-15"
        assert data["completed"] is False
        assert data["createdAt"]
        assert data["updatedAt"] is None

    def test_create_task_missing_title(self, client):
        """Test task creation without a title."""
        response = client.post("/api/items", json={"description": "Test Description"})

        assert response.status_code == 400
        assert response.json() == {"error": "Title is required"}

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "   "},
            {"title": "a" * 101},
            {"title": "Task", "description": "d" * 501},
            {"title": "Task", "dueDate": "not-a-date"},
            {"title": "Task", "category": "work"},
            {"title": 12},
        ],
    )
    def test_create_task_validation_error(self, client, payload):
        """Test invalid bodies are rejected with an error message."""
        response = client.post("/api/items", json=payload)

        assert response.status_code == 400
        assert isinstance(response.json()["error"], str)
        assert client.get("/api/items").json()["pagination"]["total"] == 0

    def test_create_task_empty_due_date(self, client):
        """Test the empty due date sent by an unfilled date input."""
        data = create(client, title="Task", dueDate="")

        assert data["dueDate"] is None


class TestItemRoutes:
    """Test single-item routes."""

    def test_get_task_success(self, client, sample_task_data):
        created = create(client, **sample_task_data)

        response = client.get(f"/api/items/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_task_not_found(self, client):
        response = client.get("/api/items/999")

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}

    def test_get_task_bad_id(self, client):
        response = client.get("/api/items/abc")

        assert response.status_code == 400
        assert "task_id" in response.json()["error"]

    def test_update_task_success(self, client):
        created = create(client, title="Original Title", description="Keep me", category=["x"])

        response = client.put(
            f"/api/items/{created['id']}",
            json={"title": "Updated Title", "completed": True, "dueDate": "2024-07-04"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Updated Title"
        assert data["description"] == "Keep me"
        assert data["category"] == ["x"]
        assert data["completed"] is True
        assert data["dueDate"] == "2024-07-04"
        assert data["updatedAt"] is not None
        assert data["createdAt"] == created["createdAt"]

    def test_update_task_clears_due_date(self, client):
        created = create(client, title="Task", dueDate="2024-01-01")

        response = client.put(f"/api/items/{created['id']}", json={"dueDate": None})

        assert response.status_code == 200
        assert response.json()["dueDate"] is None

    def test_update_task_not_found(self, client):
        """Test PUT on a missing id leaves the store unchanged."""
        created = create(client, title="Only")

        response = client.put("/api/items/999", json={"title": "Updated Title"})

        assert response.status_code == 404
        listing = client.get("/api/items").json()
        assert listing["items"] == [created]

    @pytest.mark.parametrize(
        "payload",
        [{"title": ""}, {"title": None}, {"description": "d" * 501}, {"completed": "yes"}],
    )
    def test_update_task_validation_error(self, client, payload):
        created = create(client, title="Task")

        response = client.put(f"/api/items/{created['id']}", json=payload)

        assert response.status_code == 400
        assert client.get(f"/api/items/{created['id']}").json() == created

    def test_delete_task_then_get(self, client):
        created = create(client, title="To Be Deleted")

        response = client.delete(f"/api/items/{created['id']}")
        assert response.status_code == 204
        assert response.content == b""

        assert client.get(f"/api/items/{created['id']}").status_code == 404

    def test_delete_task_not_found(self, client):
        response = client.delete("/api/items/999")

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}

    def test_toggle_task(self, client):
        created = create(client, title="Toggle Test")

        first = client.patch(f"/api/items/{created['id']}/toggle")
        second = client.patch(f"/api/items/{created['id']}/toggle")

        assert first.status_code == 200
        assert first.json()["completed"] is True
        assert second.status_code == 200
        assert second.json()["completed"] is False
        assert second.json()["updatedAt"] is not None

    def test_toggle_task_not_found(self, client):
        assert client.patch("/api/items/999/toggle").status_code == 404


class TestListRoutes:
    """Test GET /api/items and /api/categories."""

    def test_list_tasks_shape(self, client, sample_tasks_bulk):
        for task in sample_tasks_bulk:
            create(client, **task)

        response = client.get("/api/items")

        assert response.status_code == 200
        data = response.json()
        assert [item["title"] for item in data["items"]] == ["Task 3", "Task 2", "Task 1"]
        assert data["pagination"] == {"total": 3, "pages": 1, "currentPage": 1, "limit": 10}

    def test_category_filter_and_categories(self, client):
        create(client, title="A", category=["x"])
        create(client, title="B", category=["y"])

        response = client.get("/api/items", params={"category": "x"})
        assert [item["title"] for item in response.json()["items"]] == ["A"]

        response = client.get("/api/categories")
        assert response.status_code == 200
        assert sorted(response.json()) == ["x", "y"]

    def test_list_tasks_with_query_parameters(self, client):
        create(client, title="Write report", dueDate="2024-02-10")
        done = create(client, title="Read report", dueDate="2024-02-20")
        create(client, title="Report later", dueDate="2024-05-01")
        create(client, title="Unrelated")
        client.patch(f"/api/items/{done['id']}/toggle")

        response = client.get(
            "/api/items",
            params={
                "search": "REPORT",
                "dueAfter": "2024-02-01",
                "dueBefore": "2024-03-01",
                "sortBy": "title",
                "sortOrder": "asc",
            },
        )
        assert [item["title"] for item in response.json()["items"]] == ["Read report", "Write report"]

        response = client.get("/api/items", params={"completed": "true"})
        assert [item["id"] for item in response.json()["items"]] == [done["id"]]

    def test_list_tasks_pagination(self, client):
        for i in range(12):
            create(client, title=f"Task {i}")

        response = client.get("/api/items", params={"page": 3, "limit": 5, "sortBy": "id", "sortOrder": "asc"})

        data = response.json()
        assert [item["title"] for item in data["items"]] == ["Task 10", "Task 11"]
        assert data["pagination"] == {"total": 12, "pages": 3, "currentPage": 3, "limit": 5}

    @pytest.mark.parametrize(
        "params",
        [
            {"page": 0},
            {"limit": 0},
            {"sortBy": "priority"},
            {"sortOrder": "up"},
            {"dueBefore": "soon"},
            {"completed": "maybe"},
        ],
    )
    def test_list_tasks_bad_query(self, client, params):
        response = client.get("/api/items", params=params)

        assert response.status_code == 400
        assert "error" in response.json()

    def test_list_tasks_large_limit_returns_everything(self, client):
        """Test a limit above the default page size is honoured."""
        for i in range(25):
            create(client, title=f"Task {i}")

        response = client.get("/api/items", params={"limit": 500})

        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 25
        assert data["pagination"] == {"total": 25, "pages": 1, "currentPage": 1, "limit": 500}


class TestBulkRoutes:
    """Test bulk delete and toggle."""

    def test_bulk_delete(self, client):
        ids = [create(client, title=f"Task {i}")["id"] for i in range(3)]

        response = client.post("/api/items/bulk-delete", json={"ids": [ids[0], ids[1], 999]})

        assert response.status_code == 204
        remaining = client.get("/api/items").json()["items"]
        assert [item["id"] for item in remaining] == [ids[2]]

    @pytest.mark.parametrize("payload", [{"ids": "1,2"}, {"ids": [1, "two"]}, {}])
    def test_bulk_delete_requires_id_array(self, client, payload):
        response = client.post("/api/items/bulk-delete", json=payload)

        assert response.status_code == 400
        assert "ids" in response.json()["error"]

    def test_bulk_toggle(self, client):
        ids = [create(client, title=f"Task {i}")["id"] for i in range(3)]

        response = client.post(
            "/api/items/bulk-toggle", json={"ids": [ids[0], ids[2], 999], "completed": True}
        )

        assert response.status_code == 200
        data = response.json()
        assert [item["id"] for item in data] == [ids[0], ids[2]]
        assert all(item["completed"] for item in data)
        assert client.get(f"/api/items/{ids[1]}").json()["completed"] is False

    @pytest.mark.parametrize(
        "payload",
        [{"ids": [1], "completed": "true"}, {"ids": 1, "completed": True}, {"ids": [1]}],
    )
    def test_bulk_toggle_type_mismatch(self, client, payload):
        response = client.post("/api/items/bulk-toggle", json=payload)

        assert response.status_code == 400


class TestAppRoutes:
    """Test health, root and error mapping."""

    def test_health_check(self, client):
        create(client, title="Task")

        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "1.0.0", "tasks": 1}

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["items"] == "/api/items"

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/items",
            content=b'{"title": "Task",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_run_serves_module_app(self):
        """Test the server entry point serves the single module-level app."""
        from tasklist import main

        with patch("tasklist.main.uvicorn.run") as mock_run:
            main.run()

        mock_run.assert_called_once_with(
            main.app,
            host=main.app.state.settings.app_host,
            port=main.app.state.settings.app_port,
        )

    def test_unexpected_store_error_is_500(self, client):
        def boom(*args, **kwargs):
            raise RuntimeError("disk on fire")

        client.app.state.task_service.get_task = boom

        response = client.get("/api/items/1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch item"}

    def test_missing_store_is_500(self, client):
        client.app.state.task_service = None

        response = client.get("/api/categories")

        assert response.status_code == 500
        assert response.json() == {"error": InternalError("Task service not available").message}

    def test_static_files_served(self, test_settings, tmp_path):
        from fastapi.testclient import TestClient

        from tasklist.main import create_app

        public = tmp_path / "public"
        public.mkdir()
        (public / "index.html").write_text("<h1>Tasks</h1>")
        test_settings.static_dir = public

        with TestClient(create_app(test_settings)) as static_client:
            assert "<h1>Tasks</h1>" in static_client.get("/").text
            assert static_client.get("/api/items").status_code == 200
