"""HTTP client for the 100 Networks API."""

from typing import Any

import httpx

from app.client.session_store import SessionStore


class NetworksClient:
    """Thin API client that keeps its session token in a SessionStore."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        store: SessionStore | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.store = store or SessionStore({})
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "NetworksClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        token = self.store.read()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        if response.status_code == 401:
            # server no longer accepts the token
            self.store.clear()
        response.raise_for_status()
        return response

    def signup(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/api/v1/auth/signup", json={"email": email, "password": password}).json()
        self.store.store(data["token"])
        return data

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", "/api/v1/auth/login", json={"email": email, "password": password}).json()
        self.store.store(data["token"])
        return data

    def logout(self) -> None:
        """Revoke the token server-side, then forget it locally."""
        try:
            if self.store.is_authenticated():
                self._request("POST", "/api/v1/auth/logout")
        finally:
            self.store.clear()

    def request_password_reset(self, email: str) -> str:
        return self._request("POST", "/api/v1/auth/request-password-reset", json={"email": email}).json()["message"]

    def reset_password(self, token: str, new_password: str) -> str:
        response = self._request(
            "POST", "/api/v1/auth/reset-password", json={"token": token, "newPassword": new_password}
        )
        return response.json()["message"]

    def get_profile(self) -> dict[str, Any]:
        return self._request("GET", "/api/v1/profile").json()

    def update_profile(self, **fields: Any) -> dict[str, Any]:
        return self._request("PUT", "/api/v1/profile", json=fields).json()

    def search_users(self, query: str) -> list[dict[str, Any]]:
        return self._request("GET", "/api/v1/users/search", params={"query": query}).json()["users"]
