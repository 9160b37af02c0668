"""
User administration API tests — admin-only listing and edits, self-service
profile, tenant boundaries.
"""

from app.models import db
from app.models.auth import User
from app.models.comment import Comment
from app.utils.crypto import hash_password


class TestUserList:
    def test_admin_lists_own_tenant_by_name(self, client, auth_headers, member_user, other_user):
        res = client.get("/api/v1/users", headers=auth_headers)
        assert res.status_code == 200
        assert [u["email"] for u in res.get_json()] == ["admin@acme.com", "member@acme.com"]
        assert res.headers["X-Total-Count"] == "2"

    def test_no_password_material(self, client, auth_headers):
        user = client.get("/api/v1/users", headers=auth_headers).get_json()[0]
        assert "password_hash" not in user
        assert "reset_token_hash" not in user

    def test_member_forbidden(self, client, member_headers):
        res = client.get("/api/v1/users", headers=member_headers)
        assert res.status_code == 403
        assert res.get_json()["error"] == "Insufficient permissions"

    def test_requires_auth(self, client):
        assert client.get("/api/v1/users").status_code == 401


class TestProfile:
    def test_get_me(self, client, member_headers, tenant):
        res = client.get("/api/v1/users/me", headers=member_headers)
        assert res.status_code == 200
        data = res.get_json()
        assert data["email"] == "member@acme.com"
        assert data["tenant"]["domain_name"] == "acme.com"

    def test_update_name_only(self, client, member_headers, member_user, other_tenant):
        res = client.put("/api/v1/users/me", headers=member_headers, json={
            "name": "  Maxine  ", "email": "boss@acme.com", "role": "admin",
            "tenant_id": other_tenant.id,
        })
        assert res.status_code == 200
        data = res.get_json()
        assert data["name"] == "Maxine"
        assert data["email"] == "member@acme.com"
        assert data["role"] == "user"
        assert data["tenant_id"] == member_user.tenant_id

    def test_blank_name_rejected(self, client, member_headers):
        res = client.put("/api/v1/users/me", headers=member_headers, json={"name": "  "})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Name is required"

    def test_long_name_rejected(self, client, member_headers):
        res = client.put("/api/v1/users/me", headers=member_headers, json={"name": "x" * 201})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Name must be at most 200 characters"


class TestUserAdmin:
    def test_get_user(self, client, auth_headers, member_user):
        res = client.get(f"/api/v1/users/{member_user.id}", headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json()["email"] == "member@acme.com"

    def test_promote_member(self, client, auth_headers, member_user):
        res = client.put(f"/api/v1/users/{member_user.id}", headers=auth_headers,
                         json={"role": "admin", "name": "Max"})
        assert res.status_code == 200
        assert res.get_json()["role"] == "admin"
        assert db.session.get(User, member_user.id).name == "Max"

    def test_invalid_role(self, client, auth_headers, member_user):
        res = client.put(f"/api/v1/users/{member_user.id}", headers=auth_headers,
                         json={"role": "owner"})
        assert res.status_code == 400
        assert res.get_json()["error"] == "Invalid role. Must be one of: user, admin"

    def test_member_cannot_edit_others(self, client, member_headers, admin_user):
        res = client.put(f"/api/v1/users/{admin_user.id}", headers=member_headers,
                         json={"role": "user"})
        assert res.status_code == 403

    def test_foreign_user_is_404(self, client, auth_headers, other_user):
        url = f"/api/v1/users/{other_user.id}"
        for res in (
            client.get(url, headers=auth_headers),
            client.put(url, headers=auth_headers, json={"role": "user"}),
            client.delete(url, headers=auth_headers),
        ):
            assert res.status_code == 404
            assert res.get_json()["error"] == "User not found"
        assert db.session.get(User, other_user.id) is not None

    def test_cannot_delete_yourself(self, client, auth_headers, admin_user):
        res = client.delete(f"/api/v1/users/{admin_user.id}", headers=auth_headers)
        assert res.status_code == 400
        assert res.get_json()["error"] == "Cannot delete yourself"

    def test_delete_removes_their_comments(self, client, auth_headers, member_headers, headers_for, tenant):
        leaver = User(tenant_id=tenant.id, email="leaver@acme.com", name="Leaver",
                      role="user", password_hash=hash_password("Password123"))
        db.session.add(leaver)
        db.session.commit()
        idea = client.post("/api/v1/ideas", headers=auth_headers, json={"title": "Idea"}).get_json()
        client.post(f"/api/v1/ideas/{idea['id']}/comments", headers=member_headers,
                    json={"content": "stays"})
        client.post(f"/api/v1/ideas/{idea['id']}/comments", headers=headers_for(leaver),
                    json={"content": "goes"})
        leaver_id = leaver.id

        res = client.delete(f"/api/v1/users/{leaver_id}", headers=auth_headers)
        assert res.status_code == 204
        assert db.session.query(User).filter_by(id=leaver_id).count() == 0
        assert db.session.query(Comment).filter_by(user_id=leaver_id).count() == 0
        thread = client.get(f"/api/v1/ideas/{idea['id']}/comments", headers=auth_headers).get_json()
        assert [c["content"] for c in thread] == ["stays"]
