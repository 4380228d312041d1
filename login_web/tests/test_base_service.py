import json

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from login_web.auth.exceptions import AuthServiceError
from login_web.auth.middleware import AuthContext, require_user
from login_web.base_service import BaseService
from login_web.config import ConfigError, Settings
from login_web.main import auth_error_handler

base_service = BaseService("tests")


def test_mcp_response_envelope():
    response = base_service.mcp_response(data={"foo": "bar"}, message="done", status_code=201)
    assert response.status_code == 201
    assert json.loads(response.body) == {"status": "ok", "message": "done", "data": {"foo": "bar"}}


def test_log_event_and_error(caplog):
    with caplog.at_level("INFO"):
        base_service.log_event("pytest_log_event", {"foo": "bar"})
        assert any("pytest_log_event" in m for m in caplog.text.splitlines())
    with caplog.at_level("ERROR"):
        try:
            raise ValueError("test error")
        except Exception as e:
            data = base_service.log_error(e, context="pytest")
        assert any("test error" in m for m in caplog.text.splitlines())
    assert data["error_type"] == "ValueError"
    assert data["context"] == "pytest"


def protected_client(issuer):
    test_app = FastAPI()
    test_app.state.token_issuer = issuer
    test_app.add_exception_handler(AuthServiceError, auth_error_handler)

    @test_app.get("/protected")
    async def protected(context: AuthContext = Depends(require_user)):
        return {"user_id": context.user_id}

    return test_app, TestClient(test_app)


def test_require_user_accepts_bearer_token(issuer):
    _, client = protected_client(issuer)
    token = issuer.issue(7).access_token
    for scheme in ("Bearer", "bearer", "BEARER"):
        resp = client.get("/protected", headers={"Authorization": f"{scheme} {token}"})
        assert resp.status_code == 200
        assert resp.json() == {"user_id": 7}


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": ""},
    {"Authorization": "Bearer"},
    {"Authorization": "Basic abc"},
    {"Authorization": "Bearer a b"},
    {"Authorization": "abc.def.ghi"},
    {"Authorization": "Bearer invalid.token.here"},
])
def test_require_user_rejects_uniformly(issuer, headers):
    _, client = protected_client(issuer)
    resp = client.get("/protected", headers=headers)
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"
    assert resp.json() == {"status": "error", "message": "Unauthorized", "data": None}


def test_bearer_scheme_in_openapi(issuer):
    test_app, _ = protected_client(issuer)
    schema = test_app.openapi()
    schemes = schema["components"]["securitySchemes"]
    assert schemes["HTTPBearer"] == {"type": "http", "scheme": "bearer"}
    assert schema["paths"]["/protected"]["get"]["security"] == [{"HTTPBearer": []}]


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "env-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "5")
    monkeypatch.setenv("BCRYPT_ROUNDS", "10")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:5173, http://example.com")

    settings = Settings.from_env()
    assert settings.jwt_secret_key == "env-secret"
    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.access_token_expire_minutes == 5
    assert settings.bcrypt_rounds == 10
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["http://localhost:5173", "http://example.com"]


def test_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "JWT_ALGORITHM", "ACCESS_TOKEN_EXPIRE_MINUTES",
                 "BCRYPT_ROUNDS", "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("JWT_SECRET_KEY", "env-secret")

    settings = Settings.from_env()
    assert settings.database_url == "sqlite+aiosqlite:///./users.db"
    assert settings.jwt_algorithm == "HS256"
    assert settings.access_token_expire_minutes == 30
    assert settings.bcrypt_rounds == 12
    assert settings.cors_origins == ["*"]


def test_settings_require_secret(monkeypatch):
    monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
    with pytest.raises(ConfigError):
        Settings.from_env()


@pytest.mark.parametrize("name,value", [
    ("BCRYPT_ROUNDS", "3"),
    ("BCRYPT_ROUNDS", "lots"),
    ("ACCESS_TOKEN_EXPIRE_MINUTES", "0"),
])
def test_settings_reject_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv("JWT_SECRET_KEY", "env-secret")
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        Settings.from_env()
