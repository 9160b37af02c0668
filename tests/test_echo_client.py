"""
Tests for app/integrations/echo_client.py

The HTTP session is a MagicMock; no network access.

Scenarios covered:
  1. Headers (Bearer token, X-Tenant-ID) and None params dropped
  2. Fallback to the next base URL on connection error, timeout and 5xx
  3. No fallback on 4xx; EchoApiError carries the server's "error" text
  4. The base URL that answered is tried first next time
  5. DELETE answering 404 counts as success
  6. List normalisation and login / register token handling
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from app.integrations.echo_client import (
    DEFAULT_BASE_URL,
    EchoApiError,
    EchoClient,
    normalize_list,
)

PRIMARY = "https://echo.example.com/api/v1"
BACKUP = "http://localhost:3000/api/v1"


def _response(status_code=200, body=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode() if body is not None else b""
    return resp


def _client(*responses, token="tok", tenant_id=7):
    session = MagicMock()
    session.request.side_effect = list(responses)
    return EchoClient(PRIMARY, fallback_urls=(BACKUP,), token=token,
                      tenant_id=tenant_id, session=session)


def _called_urls(client):
    return [c.args[1] for c in client.session.request.call_args_list]


# ── 1. Construction & headers ───────────────────────────────────────────────


class TestConstruction:
    def test_default_urls_deduplicated(self):
        client = EchoClient()
        assert client.base_urls[0] == DEFAULT_BASE_URL
        assert len(client.base_urls) == len(set(client.base_urls))

    def test_trailing_slash_stripped(self):
        client = EchoClient(PRIMARY + "/", fallback_urls=())
        assert client.base_urls == [PRIMARY]

    def test_headers_and_params(self):
        client = _client(_response(200, []))
        client.list_goals(status="active", search=None)
        kwargs = client.session.request.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert kwargs["headers"]["X-Tenant-ID"] == "7"
        assert kwargs["params"] == {"status": "active"}

    def test_no_auth_headers_when_logged_out(self):
        client = _client(_response(200, {"status": "ok"}), token=None, tenant_id=None)
        client.request("GET", "/health")
        headers = client.session.request.call_args.kwargs["headers"]
        assert "Authorization" not in headers
        assert "X-Tenant-ID" not in headers


# ── 2-4. Fallback ────────────────────────────────────────────────────────────


class TestFallback:
    def test_connection_error_falls_back(self):
        client = _client(requests.ConnectionError("refused"), _response(200, {"id": 1}))
        assert client.get_goal(1) == {"id": 1}
        assert _called_urls(client) == [f"{PRIMARY}/goals/1", f"{BACKUP}/goals/1"]

    def test_timeout_falls_back(self):
        client = _client(requests.Timeout(), _response(200, {"id": 1}))
        assert client.get_goal(1) == {"id": 1}

    def test_server_error_falls_back(self):
        client = _client(_response(503, {"error": "down"}), _response(200, {"id": 1}))
        assert client.get_goal(1) == {"id": 1}

    def test_successful_base_promoted(self):
        client = _client(requests.ConnectionError(), _response(200, {}), _response(200, {}))
        client.get_goal(1)
        assert client.base_urls[0] == BACKUP
        client.get_goal(2)
        assert _called_urls(client)[-1] == f"{BACKUP}/goals/2"

    def test_all_urls_fail(self):
        client = _client(requests.ConnectionError(), _response(500, {"error": "boom"}))
        with pytest.raises(EchoApiError) as exc:
            client.get_goal(1)
        assert exc.value.status_code == 500
        assert exc.value.message == "boom"

    def test_all_urls_unreachable(self):
        client = _client(requests.ConnectionError(), requests.ConnectionError())
        with pytest.raises(EchoApiError) as exc:
            client.get_goal(1)
        assert exc.value.status_code is None


# ── 3, 5. Client errors ─────────────────────────────────────────────────────


class TestClientErrors:
    def test_4xx_is_final(self):
        client = _client(_response(400, {"error": "Title is required", "code": "ERR_VALIDATION_INVALID"}))
        with pytest.raises(EchoApiError) as exc:
            client.create_goal({})
        assert exc.value.status_code == 400
        assert exc.value.message == "Title is required"
        assert exc.value.data["code"] == "ERR_VALIDATION_INVALID"
        assert client.session.request.call_count == 1

    def test_error_without_json_body(self):
        client = _client(_response(403))
        with pytest.raises(EchoApiError) as exc:
            client.me()
        assert exc.value.message.startswith("HTTP 403")

    def test_delete_404_is_success(self):
        client = _client(_response(404, {"error": "Goal not found"}))
        assert client.delete_goal(5) is None

    def test_get_404_raises(self):
        client = _client(_response(404, {"error": "Goal not found"}))
        with pytest.raises(EchoApiError) as exc:
            client.get_goal(5)
        assert exc.value.status_code == 404


# ── 6. Lists & auth ─────────────────────────────────────────────────────────


class TestListsAndAuth:
    @pytest.mark.parametrize("body, expected", [
        ([1, 2], [1, 2]),
        ({"items": [1]}, [1]),
        ({"data": [2]}, [2]),
        ({"unexpected": True}, []),
        (None, []),
    ])
    def test_normalize_list(self, body, expected):
        assert normalize_list(body) == expected

    def test_list_ideas_wrapped(self):
        client = _client(_response(200, {"items": [{"id": 1}]}))
        assert client.list_ideas() == [{"id": 1}]

    def test_login_stores_token_and_tenant(self):
        client = _client(_response(200, {"token": "new", "user": {"id": 1, "tenant_id": 42}}),
                         token=None, tenant_id=None)
        client.login("jane@acme.com", "Password123")
        assert client.token == "new"
        assert client.tenant_id == 42
        body = client.session.request.call_args.kwargs["json"]
        assert body == {"email": "jane@acme.com", "password": "Password123"}

    def test_register_stores_token(self):
        client = _client(_response(201, {"token": "reg", "tenant_id": 9, "role": "admin"}),
                         token=None, tenant_id=None)
        client.register("jane@acme.com", "Password123", name="Jane")
        assert (client.token, client.tenant_id) == ("reg", 9)

    def test_logout(self):
        client = _client()
        client.logout()
        assert client.token is None
        assert client.tenant_id is None

    def test_comment_paths(self):
        client = _client(_response(200, []), _response(201, {"id": 3}))
        client.list_comments("feedback", 4)
        client.add_comment("feedback", 4, "Thanks")
        assert _called_urls(client) == [f"{PRIMARY}/feedback/4/comments"] * 2
        assert client.session.request.call_args.kwargs["json"] == {"content": "Thanks"}

    def test_change_password_body(self):
        client = _client(_response(200, {"message": "ok"}))
        client.change_password("Old12345", "New12345")
        assert client.session.request.call_args.kwargs["json"] == {
            "currentPassword": "Old12345", "newPassword": "New12345",
        }

    def test_user_admin_paths(self):
        client = _client(
            _response(200, [{"id": 1}]),
            _response(200, {"id": 1, "name": "Jane"}),
            _response(200, {"id": 2, "role": "admin"}),
            _response(204),
        )
        assert client.list_users() == [{"id": 1}]
        client.update_profile({"name": "Jane"})
        client.update_user(2, {"role": "admin"})
        assert client.delete_user(2) is None
        calls = client.session.request.call_args_list
        assert [(c.args[0], c.args[1]) for c in calls] == [
            ("GET", f"{PRIMARY}/users"),
            ("PUT", f"{PRIMARY}/users/me"),
            ("PUT", f"{PRIMARY}/users/2"),
            ("DELETE", f"{PRIMARY}/users/2"),
        ]
