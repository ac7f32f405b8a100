from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from maskframe.main import app


@pytest.fixture
def client():
    return TestClient(app)


def png_bytes(img):
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["mask_height"] == 12


def test_text_frame(client):
    r = client.post("/api/frames/text", json={"text": "Hi", "font": "default"})
    assert r.status_code == 200
    body = r.json()
    assert body["columns"] > 0
    assert len(bytes.fromhex(body["bitmap"])) == 2 * body["columns"]
    assert bytes.fromhex(body["colors"]) == b"\xff" * (3 * body["columns"])


def test_empty_text_frame(client):
    r = client.post("/api/frames/text", json={"text": "", "font": "default"})
    assert r.status_code == 200
    assert r.json() == {"columns": 0, "bitmap": "", "colors": ""}


def test_text_frame_binary(client):
    r = client.post("/api/frames/text.bin", json={"text": "Hi", "font": "default"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/octet-stream"
    columns = int(r.headers["x-mask-columns"])
    assert len(r.content) == 5 * columns


def test_missing_font_is_404(tmp_path, client):
    r = client.post("/api/frames/text", json={"text": "Hi", "font": str(tmp_path / "missing.ttf")})
    assert r.status_code == 404


def test_image_frame(client):
    files = {"image": ("white.png", png_bytes(Image.new("RGB", (80, 24), "white")), "image/png")}
    r = client.post("/api/frames/image", files=files)
    assert r.status_code == 200
    body = r.json()
    assert body["columns"] == 40
    assert body["bitmap"] == "fff0" * 40


def test_unreadable_image_is_422(client):
    files = {"image": ("junk.png", b"not an image", "image/png")}
    r = client.post("/api/frames/image", files=files)
    assert r.status_code == 422


def test_font_paths_are_not_read(tmp_path, client):
    existing = tmp_path / "secret.txt"
    existing.write_text("not a font")
    r1 = client.post("/api/frames/text", json={"text": "Hi", "font": str(existing)})
    r2 = client.post("/api/frames/text", json={"text": "Hi", "font": str(tmp_path / "nope.txt")})
    assert r1.status_code == r2.status_code == 404
    assert r1.json()["detail"].startswith("Font not found")
    assert r2.json()["detail"].startswith("Font not found")


def test_oversized_image_is_422(client, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    files = {"image": ("big.png", png_bytes(Image.new("RGB", (400, 400), "white")), "image/png")}
    r = client.post("/api/frames/image", files=files)
    assert r.status_code == 422
