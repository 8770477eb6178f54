import importlib

import pytest
from fastapi.testclient import TestClient

import apps.worker.main as worker_main
from lib.codec.toon import encode

client = TestClient(worker_main.app)


def test_encode_returns_toon_text():
    response = client.post("/encode", json={"a": 1, "b": [1, 2, 3]})
    assert response.status_code == 200
    assert response.headers["content-type"] == "text/plain; charset=utf-8"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.text == encode({"a": 1, "b": [1, 2, 3]})


def test_encode_rejects_malformed_json():
    response = client.post("/encode", content=b'{"a": ')
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid JSON or encode failure"
    assert body["detail"]


def test_decode_returns_json():
    toon = encode({"users": [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Bob"}]})
    response = client.post("/decode", content=toon.encode("utf-8"))
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json; charset=utf-8"
    assert response.json() == {"users": [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Bob"}]}


def test_decode_empty_body():
    response = client.post("/decode", content=b"")
    assert response.status_code == 400
    assert response.json() == {"error": "Empty body"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_decode_invalid_toon():
    response = client.post("/decode", content=b"tags[3]: a,b")
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Decode failure"
    assert body["detail"]


def test_get_is_not_allowed():
    response = client.get("/encode")
    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_unknown_path():
    response = client.post("/unknown", content=b"{}")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_preflight_on_any_path():
    response = client.options("/whatever/path")
    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert response.headers["access-control-allow-headers"] == "content-type"
    assert response.headers["access-control-max-age"] == "86400"


@pytest.fixture
def recorded_bodies(monkeypatch):
    """Shrink the body limit to 10 bytes and record what reaches the handler."""

    seen = []
    original = worker_main.handler.handle

    def recording(method, path, body=b""):
        seen.append(len(body))
        return original(method, path, body)

    monkeypatch.setattr(worker_main.handler.config, "max_body_bytes", 10)
    monkeypatch.setattr(worker_main.handler, "handle", recording)
    return seen


def test_streamed_body_is_cut_at_limit(recorded_bodies):
    chunks = (b"x" * 1000 for _ in range(5000))
    response = client.post("/encode", content=chunks)
    assert response.status_code == 413
    assert response.json() == {"error": "Payload too large"}
    assert recorded_bodies
    assert max(recorded_bodies) <= 11


def test_declared_length_over_limit_is_rejected_early(recorded_bodies):
    response = client.post("/encode", content=b"x" * 5_000_000)
    assert response.status_code == 413
    assert response.json() == {"error": "Payload too large"}
    assert response.headers["access-control-allow-origin"] == "*"
    assert recorded_bodies == []


def test_body_within_limit_is_passed_whole(recorded_bodies):
    response = client.post("/encode", content=b"[1,2,3]")
    assert response.status_code == 200
    assert recorded_bodies == [7]


@pytest.fixture
def reload_worker(monkeypatch):
    yield lambda: importlib.reload(worker_main)
    monkeypatch.delenv("TOON_WORKER_CONFIG", raising=False)
    importlib.reload(worker_main)


def test_config_path_from_environment(tmp_path, monkeypatch, reload_worker):
    path = tmp_path / "worker.yaml"
    path.write_text(
        "worker:\n"
        "  cors:\n"
        "    allow_origin: https://toon.example\n"
        "  limits:\n"
        "    max_body_bytes: 4\n"
    )
    monkeypatch.setenv("TOON_WORKER_CONFIG", str(path))
    module = reload_worker()
    assert module.handler.config.max_body_bytes == 4

    response = TestClient(module.app).post("/decode", content=b"a: 12345")
    assert response.status_code == 413
    assert response.headers["access-control-allow-origin"] == "https://toon.example"
