"""
Echo API client.

Python counterpart of the web UI's API layer, used by scripts and other
services that talk to an Echo backend over HTTP.

Behaviour:
  - Sends Authorization: Bearer <token>, X-Tenant-ID and JSON headers
  - Tries the configured base URL first, then each fallback URL, on a
    connection error, timeout or 5xx; 4xx answers are final
  - The base URL that answered last is tried first next time
  - DELETE answering 404 counts as success (the row is gone either way)
  - Non-2xx answers raise EchoApiError with the server's "error" message
  - List endpoints always come back as a Python list

Testability: pass a mock `session` to EchoClient() in tests instead of
letting it create a real requests.Session internally.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api/v1"
DEFAULT_FALLBACK_URLS = (
    "http://localhost:3000/api/v1",
    "http://localhost:5000/api/v1",
)

# ── Default request timeout ────────────────────────────────────────────────
_DEFAULT_TIMEOUT = 30


class EchoApiError(Exception):
    """Raised for non-2xx answers and when no base URL could be reached.

    Attributes:
        status_code: HTTP status, or None when every base URL failed at
                     network level.
        message:     The server's ``error`` field, else a generic text.
        data:        Parsed JSON body when there was one.
    """

    def __init__(self, status_code: int | None, message: str, data: Any = None) -> None:
        self.status_code = status_code
        self.message = message
        self.data = data
        super().__init__(f"[{status_code}] {message}" if status_code else message)


def _parse_body(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def _error_message(resp: requests.Response, body: Any) -> str:
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {resp.status_code}: {resp.reason or resp.text[:200]}"


def normalize_list(data: Any) -> list:
    """Bare list, ``{"items": [...]}`` or ``{"data": [...]}`` → list."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("items", "data"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


class EchoClient:
    """HTTP client for the Echo REST API.

    Usage:
        client = EchoClient("https://echo.example.com/api/v1")
        client.login("jane@acme.com", "Secret123")
        ideas = client.list_ideas(status="new", sort="created_at:desc")
    """

    def __init__(
        self,
        base_url: str | None = None,
        fallback_urls: tuple[str, ...] | list[str] = DEFAULT_FALLBACK_URLS,
        token: str | None = None,
        tenant_id: int | str | None = None,
        session: requests.Session | None = None,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> None:
        urls: list[str] = []
        for url in (base_url or DEFAULT_BASE_URL, *fallback_urls):
            url = url.rstrip("/")
            if url not in urls:
                urls.append(url)
        self.base_urls = urls
        self.token = token
        self.tenant_id = tenant_id
        self.timeout = timeout
        # Inject custom session for testing; create real one lazily otherwise.
        self._session: requests.Session | None = session

    # ── HTTP session ─────────────────────────────────────────────────────────

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.tenant_id is not None:
            headers["X-Tenant-ID"] = str(self.tenant_id)
        return headers

    # ── Core request dispatcher ───────────────────────────────────────────────

    def _do_request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        params: dict | None = None,
    ) -> requests.Response:
        """Execute a single HTTP request, no fallback logic here."""
        kwargs: dict[str, Any] = {"headers": self._headers(), "timeout": self.timeout}
        if json_body is not None:
            kwargs["json"] = json_body
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        return self.session.request(method, url, **kwargs)

    def _promote(self, base: str) -> None:
        if self.base_urls[0] != base:
            self.base_urls.remove(base)
            self.base_urls.insert(0, base)

    def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict | None = None,
    ) -> Any:
        """Send ``method path`` to the first base URL that answers.

        Returns the parsed JSON body (None for empty bodies and for a
        DELETE that answered 404).

        Raises:
            EchoApiError: on a 4xx answer, or when every base URL failed.
        """
        method = method.upper()
        last_error: EchoApiError | None = None

        for base in list(self.base_urls):
            url = f"{base}{path}"
            t0 = time.perf_counter()
            try:
                resp = self._do_request(method, url, json_body=json_body, params=params)
            except requests.Timeout:
                last_error = EchoApiError(None, f"Request to {base} timed out after {self.timeout}s")
                logger.warning("Echo request timed out url=%s", url)
                continue
            except requests.RequestException as exc:
                last_error = EchoApiError(None, f"Could not reach {base}: {str(exc)[:200]}")
                logger.warning("Echo network error url=%s error=%s", url, exc)
                continue

            duration_ms = int((time.perf_counter() - t0) * 1000)
            body = _parse_body(resp)

            if resp.status_code >= 500:
                last_error = EchoApiError(resp.status_code, _error_message(resp, body), body)
                logger.warning(
                    "Echo server error status=%d url=%s (%dms)",
                    resp.status_code, url, duration_ms,
                )
                continue

            self._promote(base)

            if method == "DELETE" and resp.status_code == 404:
                return None
            if not resp.ok:
                raise EchoApiError(resp.status_code, _error_message(resp, body), body)

            logger.debug("Echo %s %s → %d (%dms)", method, url, resp.status_code, duration_ms)
            return body

        raise last_error or EchoApiError(None, "No Echo API base URL configured")

    def _list(self, path: str, params: dict) -> list:
        return normalize_list(self.request("GET", path, params=params))

    # ── Auth ──────────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> dict:
        """Log in and keep the returned token (and tenant) for later calls."""
        data = self.request("POST", "/auth/login", json_body={"email": email, "password": password})
        self.token = data["token"]
        self.tenant_id = (data.get("user") or {}).get("tenant_id", self.tenant_id)
        return data

    def register(self, email: str, password: str, name: str | None = None) -> dict:
        """Register (joining or creating the e-mail domain's tenant) and keep the token."""
        body = {"email": email, "password": password}
        if name:
            body["name"] = name
        data = self.request("POST", "/auth/register", json_body=body)
        self.token = data["token"]
        self.tenant_id = data.get("tenant_id", self.tenant_id)
        return data

    def logout(self) -> None:
        self.token = None
        self.tenant_id = None

    def me(self) -> dict:
        return self.request("GET", "/auth/me")

    def change_password(self, current_password: str, new_password: str) -> dict:
        return self.request("POST", "/auth/change-password", json_body={
            "currentPassword": current_password, "newPassword": new_password,
        })

    # ── Dashboard ─────────────────────────────────────────────────────────────

    def dashboard_summary(self) -> dict:
        return self.request("GET", "/dashboard/summary")

    # ── Users ─────────────────────────────────────────────────────────────────

    def list_users(self) -> list:
        return self._list("/users", {})

    def update_profile(self, data: dict) -> dict:
        return self.request("PUT", "/users/me", json_body=data)

    def update_user(self, user_id: int, data: dict) -> dict:
        return self.request("PUT", f"/users/{user_id}", json_body=data)

    def delete_user(self, user_id: int) -> None:
        self.request("DELETE", f"/users/{user_id}")

    # ── Goals ─────────────────────────────────────────────────────────────────

    def list_goals(self, **params) -> list:
        return self._list("/goals", params)

    def get_goal(self, goal_id: int) -> dict:
        return self.request("GET", f"/goals/{goal_id}")

    def create_goal(self, data: dict) -> dict:
        return self.request("POST", "/goals", json_body=data)

    def update_goal(self, goal_id: int, data: dict) -> dict:
        return self.request("PUT", f"/goals/{goal_id}", json_body=data)

    def delete_goal(self, goal_id: int) -> None:
        self.request("DELETE", f"/goals/{goal_id}")

    def add_goal_initiative(self, goal_id: int, data: dict) -> dict:
        return self.request("POST", f"/goals/{goal_id}/initiatives", json_body=data)

    # ── Initiatives ───────────────────────────────────────────────────────────

    def list_initiatives(self, **params) -> list:
        return self._list("/initiatives", params)

    def get_initiative(self, initiative_id: int) -> dict:
        return self.request("GET", f"/initiatives/{initiative_id}")

    def create_initiative(self, data: dict) -> dict:
        return self.request("POST", "/initiatives", json_body=data)

    def update_initiative(self, initiative_id: int, data: dict) -> dict:
        return self.request("PUT", f"/initiatives/{initiative_id}", json_body=data)

    def delete_initiative(self, initiative_id: int) -> None:
        self.request("DELETE", f"/initiatives/{initiative_id}")

    # ── Customers ─────────────────────────────────────────────────────────────

    def list_customers(self, **params) -> list:
        return self._list("/customers", params)

    def get_customer(self, customer_id: int) -> dict:
        return self.request("GET", f"/customers/{customer_id}")

    def create_customer(self, data: dict) -> dict:
        return self.request("POST", "/customers", json_body=data)

    def update_customer(self, customer_id: int, data: dict) -> dict:
        return self.request("PUT", f"/customers/{customer_id}", json_body=data)

    def delete_customer(self, customer_id: int) -> None:
        self.request("DELETE", f"/customers/{customer_id}")

    # ── Feedback ──────────────────────────────────────────────────────────────

    def list_feedback(self, **params) -> list:
        return self._list("/feedback", params)

    def get_feedback(self, feedback_id: int) -> dict:
        return self.request("GET", f"/feedback/{feedback_id}")

    def create_feedback(self, data: dict) -> dict:
        return self.request("POST", "/feedback", json_body=data)

    def update_feedback(self, feedback_id: int, data: dict) -> dict:
        return self.request("PUT", f"/feedback/{feedback_id}", json_body=data)

    def delete_feedback(self, feedback_id: int) -> None:
        self.request("DELETE", f"/feedback/{feedback_id}")

    # ── Ideas ─────────────────────────────────────────────────────────────────

    def list_ideas(self, **params) -> list:
        return self._list("/ideas", params)

    def get_idea(self, idea_id: int) -> dict:
        return self.request("GET", f"/ideas/{idea_id}")

    def create_idea(self, data: dict) -> dict:
        return self.request("POST", "/ideas", json_body=data)

    def update_idea(self, idea_id: int, data: dict) -> dict:
        return self.request("PUT", f"/ideas/{idea_id}", json_body=data)

    def delete_idea(self, idea_id: int) -> None:
        self.request("DELETE", f"/ideas/{idea_id}")

    # ── Comments ──────────────────────────────────────────────────────────────

    def list_comments(self, entity: str, entity_id: int) -> list:
        """``entity`` is the collection path: "ideas", "feedback" or "initiatives"."""
        return self._list(f"/{entity}/{entity_id}/comments", {})

    def add_comment(self, entity: str, entity_id: int, content: str) -> dict:
        return self.request("POST", f"/{entity}/{entity_id}/comments", json_body={"content": content})
