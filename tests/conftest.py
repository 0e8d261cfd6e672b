"""Shared fixtures: test settings, a fresh SQLite schema per test and HTTP helpers."""

import os
import tempfile

# 必須在匯入 gigflow 之前設定環境變數
_TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"gigflow_test_{os.getpid()}.db")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TEST_DB_PATH}")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from gigflow.core.database import Base
from gigflow.main import app

DEFAULT_PASSWORD = "Secret123"

# 建表/清表使用同步引擎，不需要事件迴圈
sync_engine = create_engine(f"sqlite:///{_TEST_DB_PATH}")


@pytest.fixture(autouse=True)
def fresh_database():
    """Recreate every table before each test."""
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Register and log in a user; returns id, token and auth headers."""

    def _make(name: str, email: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post(
            "/auth/register", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text

        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        # 登入會寫入 cookie；cookie 優先於 header，清掉以免多個使用者互相覆蓋
        client.cookies.clear()

        body = response.json()
        return {
            "id": body["user"]["userId"],
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make


@pytest.fixture
def make_gig(client):
    def _make(owner: dict, title: str = "Build a landing page",
              description: str = "Need a responsive landing page", budget: float = 5000) -> dict:
        response = client.post(
            "/gigs",
            json={"title": title, "description": description, "budget": budget},
            headers=owner["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["gig"]

    return _make


@pytest.fixture
def make_bid(client):
    def _make(freelancer: dict, gig_id: str, price: float = 4000,
              message: str = "I can deliver this within a week.") -> dict:
        response = client.post(
            "/bids",
            json={"gigId": gig_id, "message": message, "price": price},
            headers=freelancer["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["bid"]

    return _make
