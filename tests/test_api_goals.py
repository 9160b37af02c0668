"""
Goal API tests — CRUD, list controls, detail with initiatives, goal deletion.
"""

import pytest


@pytest.fixture()
def goal(client, auth_headers):
    res = client.post("/api/v1/goals", headers=auth_headers, json={
        "title": "Grow revenue", "description": "Double it", "status": "active",
        "target_date": "2026-12-31",
    })
    assert res.status_code == 201
    return res.get_json()


class TestGoalCreate:
    def test_create(self, goal, tenant):
        assert goal["id"] > 0
        assert goal["tenant_id"] == tenant.id
        assert goal["title"] == "Grow revenue"
        assert goal["status"] == "active"
        assert goal["target_date"] == "2026-12-31"
        assert goal["initiative_count"] == 0
        assert goal["created_at"] and goal["updated_at"]

    def test_defaults(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={"title": "  Minimal  "})
        assert res.status_code == 201
        data = res.get_json()
        assert data["title"] == "Minimal"
        assert data["status"] == "planned"
        assert data["description"] == ""
        assert data["target_date"] is None

    def test_sequential_creates_get_distinct_ids(self, client, auth_headers):
        ids = [
            client.post("/api/v1/goals", headers=auth_headers, json={"title": "Same"}).get_json()["id"]
            for _ in range(5)
        ]
        assert len(set(ids)) == 5

    def test_title_length_limit(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={"title": "x" * 256})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Title must be at most 255 characters"
        ok = client.post("/api/v1/goals", headers=auth_headers, json={"title": "x" * 255})
        assert ok.status_code == 201

    @pytest.mark.parametrize("body", [[1], "Ship it", 42])
    def test_body_must_be_object(self, client, auth_headers, body):
        res = client.post("/api/v1/goals", headers=auth_headers, json=body)
        assert res.status_code == 400
        assert res.get_json()["error"] == "Request body must be a JSON object"

    def test_title_required(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={"status": "active"})
        assert res.status_code == 400
        body = res.get_json()
        assert body["error"] == "Title is required"
        assert body["code"] == "ERR_VALIDATION_INVALID"
        assert "title" in body["details"]

    def test_blank_title_rejected(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={"title": "   "})
        assert res.status_code == 400

    def test_invalid_status(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={
            "title": "X", "status": "done",
        })
        assert res.status_code == 400
        assert res.get_json()["error"] == "Invalid status. Must be one of: active, planned, completed"

    def test_invalid_target_date(self, client, auth_headers):
        res = client.post("/api/v1/goals", headers=auth_headers, json={
            "title": "X", "target_date": "someday",
        })
        assert res.status_code == 400
        assert "target_date" in res.get_json()["error"]

    def test_requires_auth(self, client):
        res = client.post("/api/v1/goals", json={"title": "X"})
        assert res.status_code == 401


class TestGoalReadUpdateDelete:
    def test_get_detail_includes_initiatives(self, client, auth_headers, goal):
        client.post(f"/api/v1/goals/{goal['id']}/initiatives", headers=auth_headers,
                    json={"title": "Low", "priority": 4})
        client.post(f"/api/v1/goals/{goal['id']}/initiatives", headers=auth_headers,
                    json={"title": "High", "priority": 1})

        res = client.get(f"/api/v1/goals/{goal['id']}", headers=auth_headers)
        assert res.status_code == 200
        data = res.get_json()
        assert data["initiative_count"] == 2
        assert [i["title"] for i in data["initiatives"]] == ["High", "Low"]

    def test_get_missing(self, client, auth_headers):
        res = client.get("/api/v1/goals/9999", headers=auth_headers)
        assert res.status_code == 404
        assert res.get_json()["error"] == "Goal not found"

    def test_partial_update(self, client, auth_headers, goal):
        res = client.put(f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={
            "status": "completed",
        })
        assert res.status_code == 200
        data = res.get_json()
        assert data["status"] == "completed"
        assert data["title"] == "Grow revenue"
        assert data["description"] == "Double it"
        assert data["target_date"] == "2026-12-31"

    def test_update_clears_target_date(self, client, auth_headers, goal):
        res = client.put(f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={
            "target_date": None,
        })
        assert res.get_json()["target_date"] is None

    def test_update_ignores_protected_fields(self, client, auth_headers, goal):
        res = client.put(f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={
            "id": 777, "created_at": "2000-01-01T00:00:00", "title": "Renamed",
        })
        data = res.get_json()
        assert data["id"] == goal["id"]
        assert data["created_at"] == goal["created_at"]
        assert data["title"] == "Renamed"

    def test_update_rejects_blank_title(self, client, auth_headers, goal):
        res = client.put(f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={"title": ""})
        assert res.status_code == 400

    def test_update_invalid_status(self, client, auth_headers, goal):
        res = client.put(f"/api/v1/goals/{goal['id']}", headers=auth_headers, json={
            "status": "archived",
        })
        assert res.status_code == 400

    def test_update_missing(self, client, auth_headers):
        res = client.put("/api/v1/goals/9999", headers=auth_headers, json={"title": "X"})
        assert res.status_code == 404

    def test_delete(self, client, auth_headers, goal):
        res = client.delete(f"/api/v1/goals/{goal['id']}", headers=auth_headers)
        assert res.status_code == 204
        assert client.get(f"/api/v1/goals/{goal['id']}", headers=auth_headers).status_code == 404

    def test_delete_missing(self, client, auth_headers):
        res = client.delete("/api/v1/goals/9999", headers=auth_headers)
        assert res.status_code == 404

    def test_delete_unlinks_initiatives(self, client, auth_headers, goal):
        init = client.post(f"/api/v1/goals/{goal['id']}/initiatives", headers=auth_headers,
                           json={"title": "Keep me"}).get_json()
        client.delete(f"/api/v1/goals/{goal['id']}", headers=auth_headers)

        res = client.get(f"/api/v1/initiatives/{init['id']}", headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json()["goal_id"] is None


class TestGoalInitiativeRoute:
    def test_add_initiative(self, client, auth_headers, goal):
        res = client.post(f"/api/v1/goals/{goal['id']}/initiatives", headers=auth_headers,
                          json={"title": "Onboarding", "priority": 2})
        assert res.status_code == 201
        data = res.get_json()
        assert data["goal_id"] == goal["id"]
        assert data["goal_title"] == "Grow revenue"
        assert data["priority"] == 2

    def test_body_goal_id_overridden(self, client, auth_headers, goal):
        res = client.post(f"/api/v1/goals/{goal['id']}/initiatives", headers=auth_headers,
                          json={"title": "X", "goal_id": None})
        assert res.get_json()["goal_id"] == goal["id"]

    def test_missing_goal(self, client, auth_headers):
        res = client.post("/api/v1/goals/9999/initiatives", headers=auth_headers,
                          json={"title": "X"})
        assert res.status_code == 404


class TestGoalList:
    @pytest.fixture()
    def goals(self, client, auth_headers):
        for title, status in (("Bravo", "active"), ("Alpha", "planned"), ("Charlie", "active")):
            client.post("/api/v1/goals", headers=auth_headers, json={
                "title": title, "status": status, "description": f"{title} goal",
            })

    def test_bare_array_with_total(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals", headers=auth_headers)
        assert res.status_code == 200
        assert isinstance(res.get_json(), list)
        assert res.headers["X-Total-Count"] == "3"

    def test_filter_by_status(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals?status=active&sort=title:asc", headers=auth_headers)
        assert [g["title"] for g in res.get_json()] == ["Bravo", "Charlie"]
        assert res.headers["X-Total-Count"] == "2"

    def test_sort(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals?sort=title:desc", headers=auth_headers)
        assert [g["title"] for g in res.get_json()] == ["Charlie", "Bravo", "Alpha"]

    def test_unknown_sort_field_falls_back(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals?sort=password:asc", headers=auth_headers)
        assert res.status_code == 200
        assert len(res.get_json()) == 3

    def test_search(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals?search=alp", headers=auth_headers)
        assert [g["title"] for g in res.get_json()] == ["Alpha"]

    def test_pagination(self, client, auth_headers, goals):
        res = client.get("/api/v1/goals?sort=title:asc&limit=2&page=2", headers=auth_headers)
        assert [g["title"] for g in res.get_json()] == ["Charlie"]
        assert res.headers["X-Total-Count"] == "3"

    def test_empty(self, client, auth_headers):
        res = client.get("/api/v1/goals", headers=auth_headers)
        assert res.get_json() == []
        assert res.headers["X-Total-Count"] == "0"
