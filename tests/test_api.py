"""
Tests for the image cache proxy HTTP surface.
"""

import stat
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from image_cache_proxy.api import create_app
from image_cache_proxy.config import Settings
from image_cache_proxy.repositories.file_repository import current_umask

from .fakes import JPEG_5000, FakeOrigin, MemoryStore


def assert_text(response, status_code: int, body: str) -> None:
    assert response.status_code == status_code
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == body


def test_lifespan_creates_cache_dir(client, cache_dir: Path):
    """Cache directory is created at startup."""
    assert cache_dir.is_dir()


def test_get_miss_fetches_and_caches(client, origin: FakeOrigin, cache_dir: Path):
    """First GET fetches from origin and writes {key}.jpg."""
    response = client.get("/200")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert len(response.content) == 5000
    assert response.content == JPEG_5000
    assert origin.calls == ["200"]
    assert (cache_dir / "200.jpg").read_bytes() == JPEG_5000


def test_second_get_served_from_disk(client, origin: FakeOrigin):
    """Second GET returns identical bytes without another origin call."""
    first = client.get("/200")
    second = client.get("/200")

    assert second.status_code == 200
    assert second.content == first.content
    assert origin.calls == ["200"]


def test_get_origin_failure_returns_404(client, cache_dir: Path):
    """Origin failure yields 404 Not Found and no cache file."""
    response = client.get("/999")

    assert_text(response, 404, "Not Found")
    assert not (cache_dir / "999.jpg").exists()


def test_put_then_get_bypasses_origin(client, origin: FakeOrigin, cache_dir: Path):
    """PUT body is returned verbatim by the following GET."""
    body = b"\xff\xd8custom image\xff\xd9"

    put = client.put("/418", content=body)
    assert_text(put, 201, "Created")
    assert (cache_dir / "418.jpg").read_bytes() == body

    get = client.get("/418")
    assert get.status_code == 200
    assert get.content == body
    assert origin.calls == []


def test_put_overwrites_cached_entry(client):
    """PUT replaces an existing entry."""
    client.get("/200")
    client.put("/200", content=b"replacement")

    assert client.get("/200").content == b"replacement"


def test_put_empty_body(client):
    """An empty body is stored as an empty entry."""
    assert_text(client.put("/204", content=b""), 201, "Created")
    assert client.get("/204").content == b""


def test_delete_then_get_refetches(client, origin: FakeOrigin, cache_dir: Path):
    """DELETE removes the entry; the next GET is a fresh miss."""
    client.get("/200")

    assert_text(client.delete("/200"), 200, "Deleted")
    assert not (cache_dir / "200.jpg").exists()

    assert client.get("/200").status_code == 200
    assert origin.calls == ["200", "200"]


def test_delete_never_cached_returns_404(client):
    """DELETE of an unknown key is 404."""
    assert_text(client.delete("/404"), 404, "Not Found")


@pytest.mark.parametrize("method", ["PATCH", "POST", "OPTIONS"])
def test_unsupported_method_returns_405(client, method: str):
    """Methods other than GET/PUT/DELETE are rejected."""
    assert_text(client.request(method, "/200"), 405, "Method Not Allowed")


def test_unsupported_method_ignores_path(client):
    """405 is returned regardless of path, even an invalid one."""
    assert_text(client.request("PATCH", "/"), 405, "Method Not Allowed")
    assert_text(client.request("PATCH", "/a/b/../c"), 405, "Method Not Allowed")


def test_unrouted_method_returns_plain_405(client):
    """Methods the router does not list get the same plain-text 405."""
    assert_text(client.request("PROPFIND", "/200"), 405, "Method Not Allowed")


@pytest.mark.parametrize("path", ["/", "/.hidden", "/a/b", "/x.jpg"])
def test_invalid_key_returns_400(client, path: str, origin: FakeOrigin):
    """Empty or unsafe keys are rejected before touching store or origin."""
    assert_text(client.get(path), 400, "Bad Request")
    assert_text(client.put(path, content=b"data"), 400, "Bad Request")
    assert_text(client.delete(path), 400, "Bad Request")
    assert origin.calls == []


def test_put_too_large_returns_413(client, cache_dir: Path):
    """Bodies above max_body_bytes are rejected and not written."""
    response = client.put("/big", content=b"x" * (64 * 1024 + 1))

    assert_text(response, 413, "Payload Too Large")
    assert not (cache_dir / "big.jpg").exists()


def test_put_too_large_streamed_returns_413(client, cache_dir: Path):
    """Chunked bodies without Content-Length are bounded while streaming."""
    chunks = iter([b"x" * 40 * 1024, b"y" * 40 * 1024])

    response = client.put("/big", content=chunks)

    assert_text(response, 413, "Payload Too Large")
    assert not (cache_dir / "big.jpg").exists()


def test_get_serves_bytes_when_cache_write_fails(settings: Settings):
    """A failed cache write on GET-miss still returns the fetched image."""
    store = MemoryStore(fail_writes=True)
    app = create_app(settings, store=store, origin=FakeOrigin({"200": JPEG_5000}))

    with TestClient(app) as client:
        response = client.get("/200")

    assert response.status_code == 200
    assert response.content == JPEG_5000
    assert store.entries == {}


def test_put_write_failure_returns_500(settings: Settings):
    """StoreIOError on PUT surfaces as a bare 500."""
    app = create_app(settings, store=MemoryStore(fail_writes=True), origin=FakeOrigin())

    with TestClient(app) as client:
        response = client.put("/500", content=b"data")

    assert_text(response, 500, "Internal Server Error")


def test_origin_closed_on_shutdown(settings: Settings):
    """Lifespan shutdown releases the origin client."""
    origin = FakeOrigin()
    with TestClient(create_app(settings, origin=origin)):
        pass

    assert origin.closed


def test_cached_files_get_default_permissions(client, cache_dir: Path):
    """Entries written by PUT and by GET-miss are 0666 & ~umask, not 0600."""
    expected = 0o666 & ~current_umask()

    client.put("/418", content=b"teapot")
    client.get("/200")

    assert stat.S_IMODE((cache_dir / "418.jpg").stat().st_mode) == expected
    assert stat.S_IMODE((cache_dir / "200.jpg").stat().st_mode) == expected
