import io
import uuid

import pytest
from common.db import db
from app import create_app


@pytest.fixture(scope="module")
def test_app(tmp_path_factory):
    storage_root = tmp_path_factory.mktemp("uploads")
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
        "STORAGE_BACKEND": "local",
        "STORAGE_ROOT": str(storage_root),
        "PUBLIC_BASE_URL": "",
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture(scope="module")
def client(test_app):
    return test_app.test_client()


@pytest.fixture
def make_user(client):
    """注册并登录一个随机用户，返回 JWT headers"""
    def _make(prefix="user"):
        username = f"{prefix}_{uuid.uuid4().hex[:8]}"
        password = "123456"
        res = client.post("/auth/register", json={"username": username, "password": password})
        assert res.get_json()["code"] == 0, f"Register failed: {res.get_json()}"
        res = client.post("/auth/login", json={"username": username, "password": password})
        data = res.get_json()
        assert data["code"] == 0, f"Login failed: {data}"
        return {"Authorization": f"Bearer {data['data']['token']}"}
    return _make


@pytest.fixture
def auth_headers(make_user):
    return make_user()


@pytest.fixture
def upload(client):
    """上传 bytes，返回响应 JSON"""
    def _upload(name, content, content_type="text/plain", headers=None):
        data = {"file": (io.BytesIO(content), name, content_type)}
        res = client.post("/file/upload", headers=headers or {}, data=data,
                          content_type="multipart/form-data")
        return res.get_json()
    return _upload
