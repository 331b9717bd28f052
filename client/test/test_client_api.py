import json

import pytest
import requests

from client.api.auth_api import AuthAPI
from client.api.base import APIError
from client.api.file_api import FileAPI
from client.config import Config


class FakeResponse:
    def __init__(self, payload=None, status_code=200, content=b""):
        self.payload = payload
        self.status_code = status_code
        self.content = content

    def json(self):
        if self.payload is None:
            raise ValueError("no json")
        return self.payload


class FakeSession:
    """按顺序返回预置响应，并记录每次请求"""

    def __init__(self, responses=()):
        self.responses = list(responses)
        self.calls = []
        self.headers = {}

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)


def ok(data):
    return FakeResponse({"code": 0, "msg": "ok", "data": data})


RECORD = {
    "id": 1, "name": "a.txt", "original_name": "a.txt", "size": 10, "type": "text/plain",
    "share_id": "AbCdEfGhIjKlMnOpQrStUv", "download_url": "http://srv/public/1_abc.txt",
    "upload_date": "2026-01-01T00:00:00",
}


def test_request_unwraps_data():
    session = FakeSession([ok([RECORD])])
    api = FileAPI("http://srv/", session=session)
    assert api.list() == [RECORD]
    assert session.calls[0][:2] == ("GET", "http://srv/file/list")


def test_error_envelope_raises():
    session = FakeSession([FakeResponse({"code": 4004, "msg": "Shared file not found"}, status_code=404)])
    api = FileAPI("http://srv", session=session)
    with pytest.raises(APIError) as exc:
        api.resolve_share("missing-token-000000000")
    assert exc.value.not_found
    assert exc.value.status == 404


def test_network_error_raises_api_error():
    session = FakeSession([requests.ConnectionError("refused")])
    with pytest.raises(APIError):
        FileAPI("http://srv", session=session).list()


def test_non_json_response_raises_api_error():
    session = FakeSession([FakeResponse(None, status_code=502)])
    with pytest.raises(APIError) as exc:
        FileAPI("http://srv", session=session).list()
    assert exc.value.status == 502


def test_resolve_share_accepts_full_link():
    session = FakeSession([ok(RECORD)])
    api = FileAPI("http://srv", session=session)
    api.resolve_share("https://shroomuploads.online/?share=AbCdEfGhIjKlMnOpQrStUv")
    assert session.calls[0][1] == "http://srv/share/AbCdEfGhIjKlMnOpQrStUv"


def test_resolve_share_without_token():
    session = FakeSession()
    with pytest.raises(APIError):
        FileAPI("http://srv", session=session).resolve_share("https://shroomuploads.online/")
    assert session.calls == []


def test_oversized_upload_sends_nothing(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "MAX_FILE_SIZE", 4)
    path = tmp_path / "big.txt"
    path.write_bytes(b"12345")
    session = FakeSession()
    with pytest.raises(APIError) as exc:
        FileAPI("http://srv", session=session).upload(str(path))
    assert exc.value.code == 1001
    assert session.calls == []


def test_upload_sends_type(tmp_path):
    path = tmp_path / "a.txt"
    path.write_bytes(b"0123456789")
    session = FakeSession([ok(RECORD)])
    FileAPI("http://srv", session=session).upload(str(path))
    method, url, kwargs = session.calls[0]
    name, _, content_type = kwargs["files"]["file"]
    assert (method, url) == ("POST", "http://srv/file/upload")
    assert (name, content_type) == ("a.txt", "text/plain")


def test_upload_many_is_sequential_and_independent(tmp_path):
    paths = []
    for name in ("one.txt", "two.txt", "three.txt"):
        path = tmp_path / name
        path.write_bytes(b"x")
        paths.append(str(path))
    session = FakeSession([
        ok(dict(RECORD, id=1)),
        FakeResponse({"code": 2001, "msg": "Upload failed"}),
        ok(dict(RECORD, id=3)),
    ])
    result = FileAPI("http://srv", session=session).upload_many(paths)
    assert [r["id"] for r in result["uploaded"]] == [1, 3]
    assert result["failed"] == [{"path": paths[1], "msg": "Upload failed"}]
    assert [c[2]["files"]["file"][0] for c in session.calls] == ["one.txt", "two.txt", "three.txt"]


def test_download_to_directory(tmp_path):
    session = FakeSession([FakeResponse(content=b"0123456789")])
    saved = FileAPI("http://srv", session=session).download(RECORD, str(tmp_path))
    assert saved == str(tmp_path / "a.txt")
    assert (tmp_path / "a.txt").read_bytes() == b"0123456789"


def test_download_failure(tmp_path):
    session = FakeSession([FakeResponse(status_code=404)])
    with pytest.raises(APIError):
        FileAPI("http://srv", session=session).download(RECORD, str(tmp_path / "out.txt"))


def test_download_from_object_storage_sends_no_token(tmp_path, monkeypatch):
    sent = []

    def plain_get(url, **kwargs):
        sent.append((url, kwargs))
        return FakeResponse(content=b"s3 bytes")

    monkeypatch.setattr(requests, "get", plain_get)
    session = FakeSession()
    api = FileAPI("http://srv", session=session)
    api.set_token("SECRET.JWT")
    record = dict(RECORD, download_url="https://bucket.s3.us-east-1.amazonaws.com/1_abc.txt")

    api.download(record, str(tmp_path))
    assert session.calls == []
    assert sent[0][0] == record["download_url"]
    assert "headers" not in sent[0][1]
    assert (tmp_path / "a.txt").read_bytes() == b"s3 bytes"


def test_download_from_backend_keeps_token(tmp_path):
    session = FakeSession([FakeResponse(content=b"local")])
    api = FileAPI("http://srv", session=session)
    api.set_token("SECRET.JWT")
    api.download(RECORD, str(tmp_path))
    assert session.calls[0][1] == RECORD["download_url"]
    assert session.headers["Authorization"] == "Bearer SECRET.JWT"


def test_delete_selected_payload():
    session = FakeSession([ok({"deleted": [1], "failed": []})])
    FileAPI("http://srv", session=session).delete_selected((1, 2))
    assert session.calls[0][2]["json"] == {"ids": [1, 2]}


def test_login_caches_token(tmp_path, monkeypatch):
    token_path = tmp_path / "cache" / "token.json"
    monkeypatch.setattr(Config, "TOKEN_PATH", str(token_path))
    session = FakeSession([ok({"token": "jwt-token", "user_id": 1}), ok({"msg": "Signed out"})])
    auth = AuthAPI("http://srv", session=session)

    auth.login("alice", "pw")
    assert session.headers["Authorization"] == "Bearer jwt-token"
    assert json.loads(token_path.read_text()) == {"token": "jwt-token"}

    restored = AuthAPI("http://srv", session=FakeSession())
    assert restored.load_token() == "jwt-token"

    auth.logout()
    assert "Authorization" not in session.headers
    assert not token_path.exists()
