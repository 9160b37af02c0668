"""
Initiative API tests — priority range, goal links, filters and comment cleanup.
"""

import pytest

from app.models.comment import Comment


@pytest.fixture()
def goal(client, auth_headers):
    return client.post("/api/v1/goals", headers=auth_headers, json={"title": "Retention"}).get_json()


@pytest.fixture()
def initiative(client, auth_headers, goal):
    res = client.post("/api/v1/initiatives", headers=auth_headers, json={
        "title": "Exports", "status": "active", "priority": 2, "goal_id": goal["id"],
    })
    assert res.status_code == 201
    return res.get_json()


class TestInitiativeCreate:
    def test_create(self, initiative, goal):
        assert initiative["title"] == "Exports"
        assert initiative["status"] == "active"
        assert initiative["priority"] == 2
        assert initiative["goal_id"] == goal["id"]
        assert initiative["goal_title"] == "Retention"
        assert initiative["idea_count"] == 0

    def test_defaults(self, client, auth_headers):
        data = client.post("/api/v1/initiatives", headers=auth_headers,
                           json={"title": "Bare"}).get_json()
        assert data["status"] == "planned"
        assert data["priority"] == 3
        assert data["goal_id"] is None

    def test_priority_as_string(self, client, auth_headers):
        data = client.post("/api/v1/initiatives", headers=auth_headers,
                           json={"title": "X", "priority": "5"}).get_json()
        assert data["priority"] == 5

    @pytest.mark.parametrize("priority", [0, 6, "high", None])
    def test_invalid_priority(self, client, auth_headers, priority):
        res = client.post("/api/v1/initiatives", headers=auth_headers,
                          json={"title": "X", "priority": priority})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Invalid priority. Must be an integer from 1 to 5"

    def test_goal_id_none_string(self, client, auth_headers):
        data = client.post("/api/v1/initiatives", headers=auth_headers,
                           json={"title": "X", "goal_id": "none"}).get_json()
        assert data["goal_id"] is None

    def test_unknown_goal(self, client, auth_headers):
        res = client.post("/api/v1/initiatives", headers=auth_headers,
                          json={"title": "X", "goal_id": 9999})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Invalid goal_id"

    def test_title_required(self, client, auth_headers):
        res = client.post("/api/v1/initiatives", headers=auth_headers, json={"priority": 1})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Title is required"


class TestInitiativeUpdate:
    def test_unlink_goal(self, client, auth_headers, initiative):
        res = client.put(f"/api/v1/initiatives/{initiative['id']}", headers=auth_headers,
                         json={"goal_id": None})
        assert res.status_code == 200
        assert res.get_json()["goal_id"] is None
        assert res.get_json()["priority"] == 2

    def test_change_priority(self, client, auth_headers, initiative):
        res = client.put(f"/api/v1/initiatives/{initiative['id']}", headers=auth_headers,
                         json={"priority": 1})
        assert res.get_json()["priority"] == 1

    def test_invalid_status(self, client, auth_headers, initiative):
        res = client.put(f"/api/v1/initiatives/{initiative['id']}", headers=auth_headers,
                         json={"status": "blocked"})
        assert res.status_code == 400


class TestInitiativeListAndDelete:
    def test_filter_by_goal(self, client, auth_headers, initiative, goal):
        client.post("/api/v1/initiatives", headers=auth_headers, json={"title": "Loose"})
        res = client.get(f"/api/v1/initiatives?goal_id={goal['id']}", headers=auth_headers)
        assert [i["title"] for i in res.get_json()] == ["Exports"]

    def test_filter_by_bad_goal_id(self, client, auth_headers):
        res = client.get("/api/v1/initiatives?goal_id=abc", headers=auth_headers)
        assert res.status_code == 400

    def test_sort_by_priority(self, client, auth_headers):
        for title, priority in (("C", 3), ("A", 1), ("B", 2)):
            client.post("/api/v1/initiatives", headers=auth_headers,
                        json={"title": title, "priority": priority})
        res = client.get("/api/v1/initiatives?sort=priority:asc", headers=auth_headers)
        assert [i["title"] for i in res.get_json()] == ["A", "B", "C"]

    def test_delete_removes_comments_and_unlinks_ideas(self, client, auth_headers, initiative):
        idea = client.post("/api/v1/ideas", headers=auth_headers, json={
            "title": "Linked", "initiative_id": initiative["id"],
        }).get_json()
        assert idea["initiative_id"] == initiative["id"]
        client.post(f"/api/v1/initiatives/{initiative['id']}/comments", headers=auth_headers,
                    json={"content": "Scope?"})
        assert Comment.query.filter_by(entity_type="initiative").count() == 1

        res = client.delete(f"/api/v1/initiatives/{initiative['id']}", headers=auth_headers)
        assert res.status_code == 204
        assert Comment.query.filter_by(entity_type="initiative").count() == 0

        idea = client.get(f"/api/v1/ideas/{idea['id']}", headers=auth_headers).get_json()
        assert idea["initiative_id"] is None
