from __future__ import annotations

import json
import time
import uuid
from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from aawaaj_admin.core.config import get_settings
from aawaaj_admin.core.database import Base, get_db
from aawaaj_admin.identity.backend import AuthBackendClient, get_auth_backend
from aawaaj_admin.main import app
from aawaaj_admin.models.profile import Profile
from aawaaj_admin.security.roles import Role


TEST_JWT_SECRET = "test-jwt-secret"
TEST_AUTH_URL = "https://auth.aawaaj.test"


def make_token(user_id: str, email: str | None = None, *, expires_in: int = 3600) -> str:
    claims: dict[str, Any] = {
        "sub": user_id,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
        "role": "authenticated",
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


class FakeAuthService:
    """In-process stand-in for the hosted auth REST API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], httpx.Response] = {}
        self.sign_in_user_id = "signed-in-user"
        self.created_user_id = "created-user-id"

    def respond(self, method: str, path: str, response: httpx.Response) -> None:
        self.overrides[(method, f"/auth/v1{path}")] = response

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [item for item in self.requests if item.method == method and item.url.path == f"/auth/v1{path}"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.overrides:
            return self.overrides[key]

        body = json.loads(request.content) if request.content else {}
        path = request.url.path.removeprefix("/auth/v1")
        if request.method == "POST" and path == "/token":
            return httpx.Response(
                200,
                json={
                    "access_token": make_token(self.sign_in_user_id, body.get("email")),
                    "refresh_token": "refresh-token-1",
                    "expires_in": 3600,
                    "user": {"id": self.sign_in_user_id},
                },
            )
        if request.method == "POST" and path == "/admin/users":
            return httpx.Response(200, json={"id": self.created_user_id, "email": body.get("email")})
        if request.method == "DELETE" and path.startswith("/admin/users/"):
            return httpx.Response(200, json={})
        if request.method == "PUT" and path == "/user":
            return httpx.Response(200, json={"id": self.sign_in_user_id})
        if request.method == "POST" and path in {"/recover", "/logout"}:
            return httpx.Response(204)
        return httpx.Response(404, json={"msg": "not found"})


@pytest.fixture(autouse=True)
def setup_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("SUPABASE_URL", TEST_AUTH_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-role-key")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("SITE_URL", "https://admin.aawaaj.test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def auth_service() -> FakeAuthService:
    return FakeAuthService()


@pytest.fixture()
def auth_backend(auth_service: FakeAuthService) -> AuthBackendClient:
    return AuthBackendClient(
        base_url=TEST_AUTH_URL,
        anon_key="anon-key",
        service_role_key="service-role-key",
        transport=httpx.MockTransport(auth_service.handler),
    )


@pytest.fixture()
def client(db_session: Session, auth_backend: AuthBackendClient) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_backend] = lambda: auth_backend
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def add_profile(db_session: Session) -> Callable[..., Profile]:
    def _add(
        role: Role,
        region: str | None = None,
        *,
        user_id: str | None = None,
        full_name: str | None = None,
        email: str | None = None,
    ) -> Profile:
        profile_id = user_id or f"user-{uuid.uuid4().hex[:8]}"
        profile = Profile(
            id=profile_id,
            full_name=full_name or f"Member {profile_id}",
            email=email or f"{profile_id}@aawaaj.test",
            role=role,
            region=region,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return _add
