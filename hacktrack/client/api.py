"""HTTP client for the tracker API with a local session cache."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from hacktrack.client.session_cache import (
    CachedSession,
    FileSessionCache,
    MemorySessionCache,
    SessionCache,
    device_fingerprint,
)
from hacktrack.schemas.auth import RegisterResponse, SessionInfo, TokenResponse
from hacktrack.schemas.hackathons import HackathonFields, HackathonRecord
from hacktrack.schemas.users import UserInfo

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


def utc_now() -> datetime:
    return datetime.now(UTC)


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, error: str, detail: Any = None) -> None:
        self.status_code = status_code
        self.error = error
        self.detail = detail
        super().__init__(f"{status_code} {error}: {detail}")


class TrackerClient:
    """
    Thin wrapper over the REST API.

    login(remember=True) keeps the session in the durable cache, otherwise in the
    transient one. is_authenticated() answers from the cache without a request.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        api_prefix: str = "/api",
        http: httpx.Client | None = None,
        transient: SessionCache | None = None,
        durable: SessionCache | None = None,
        fingerprint: Callable[[], str] = device_fingerprint,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.http = http or httpx.Client(base_url=base_url, timeout=DEFAULT_TIMEOUT_SEC)
        self.api_prefix = api_prefix.rstrip("/")
        self.transient = transient or MemorySessionCache()
        self.durable = durable or FileSessionCache()
        self.fingerprint = fingerprint
        self.clock = clock

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if not response.is_error:
            return
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {"detail": response.text}
        raise ApiError(response.status_code, body.get("error", "http_error"), body.get("detail"))

    def _request(self, method: str, path: str, json: Any = None) -> httpx.Response:
        headers = {}
        session = self.cached_session()
        if session is not None:
            headers["Authorization"] = f"Bearer {session.token}"
        response = self.http.request(method, self._url(path), json=json, headers=headers)
        self._raise_for_error(response)
        return response

    def cached_session(self) -> CachedSession | None:
        """
        Current session from the caches, transient first. Expired entries and durable
        entries written on another device are discarded.
        """
        now = self.clock()
        session = self.transient.load()
        if session is not None:
            if not session.is_expired(now):
                return session
            self.transient.clear()
        session = self.durable.load()
        if session is None:
            return None
        if session.is_expired(now) or session.fingerprint != self.fingerprint():
            self.durable.clear()
            return None
        return session

    def is_authenticated(self) -> bool:
        return self.cached_session() is not None

    def clear_session(self) -> None:
        self.transient.clear()
        self.durable.clear()

    def login(self, username: str, password: str, remember: bool = False) -> TokenResponse:
        response = self.http.post(
            self._url("/login"),
            json={"username": username, "password": password, "remember": remember},
        )
        self._raise_for_error(response)
        token = TokenResponse.model_validate(response.json())
        cached = CachedSession(
            token=token.token,
            username=username,
            role=token.role,
            expires_at=token.expires_at,
            persistent=remember,
            fingerprint=self.fingerprint() if remember else "",
        )
        self.clear_session()
        (self.durable if remember else self.transient).save(cached)
        return token

    def logout(self) -> None:
        """Revoke the token server-side (best effort) and forget it locally."""
        if self.cached_session() is not None:
            try:
                self._request("POST", "/logout")
            except ApiError as e:
                logger.info("Logout request rejected", extra={"status_code": e.status_code})
        self.clear_session()

    def validate(self) -> SessionInfo:
        """Ask the server whether the cached token is still live; forget it if not."""
        try:
            return SessionInfo.model_validate(self._request("GET", "/validate").json())
        except ApiError as e:
            if e.status_code == 401:
                self.clear_session()
            raise

    def register(self, username: str, password: str, request_admin: bool = False) -> RegisterResponse:
        response = self._request(
            "POST",
            "/register",
            json={"username": username, "password": password, "requestAdmin": request_admin},
        )
        return RegisterResponse.model_validate(response.json())

    def list_hackathons(self) -> list[HackathonRecord]:
        return [HackathonRecord.model_validate(h) for h in self._request("GET", "/hackathons").json()]

    def create_hackathon(self, **fields: Any) -> HackathonRecord:
        body = HackathonFields(**fields).model_dump(by_alias=True, exclude_unset=True)
        return HackathonRecord.model_validate(self._request("POST", "/hackathons", json=body).json())

    def update_hackathon(self, hackathon_id: int, **fields: Any) -> HackathonRecord:
        body = HackathonFields(**fields).model_dump(by_alias=True, exclude_unset=True)
        response = self._request("PUT", f"/hackathons/{hackathon_id}", json=body)
        return HackathonRecord.model_validate(response.json())

    def delete_hackathon(self, hackathon_id: int) -> str:
        return self._request("DELETE", f"/hackathons/{hackathon_id}").json()["message"]

    def list_users(self) -> list[UserInfo]:
        return [UserInfo.model_validate(u) for u in self._request("GET", "/users").json()]

    def close(self) -> None:
        self.http.close()
