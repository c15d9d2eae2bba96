import httpx
import pytest
from conftest import VIEWER, as_user, make_material

from studyfeed.main import app
from studyfeed.services.storage import StorageClient, get_storage, object_path, to_data_url


@pytest.fixture
def storage_requests(client):
    """Route uploads to a mock object store that accepts everything."""
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"Key": request.url.path})

    transport = httpx.MockTransport(handler)
    app.dependency_overrides[get_storage] = lambda: StorageClient(
        base_url="https://store.example", key="service-key", transport=transport
    )
    return seen


@pytest.fixture
def failing_storage(client):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    app.dependency_overrides[get_storage] = lambda: StorageClient(
        base_url="https://store.example", key="service-key", transport=transport
    )


def test_create_material_uploads_cover(client, storage_requests):
    r = client.post(
        "/materials",
        data={"name": "英単語ターゲット"},
        files={"image": ("cover.PNG", b"\x89PNG", "image/png")},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200, r.text
    material = r.json()

    (req,) = storage_requests
    assert req.method == "POST"
    assert req.url.path.startswith(f"/storage/v1/object/materials/{VIEWER}-")
    assert req.url.path.endswith(".png")
    assert req.headers["x-upsert"] == "true"
    assert req.headers["authorization"] == "Bearer service-key"
    assert material["image"] == "https://store.example" + req.url.path.replace(
        "/storage/v1/object/", "/storage/v1/object/public/"
    )


def test_upload_failure_falls_back_to_inline_image(client, failing_storage):
    r = client.post(
        "/materials",
        data={"name": "青チャート"},
        files={"image": ("c.jpg", b"abc", "image/jpeg")},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    assert r.json()["image"] == "data:image/jpeg;base64,YWJj"


def test_material_without_image(client):
    r = client.post("/materials", data={"name": "過去問"}, headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json()["image"] is None


def test_blank_name_is_rejected(client):
    r = client.post("/materials", data={"name": "  "}, headers=as_user(VIEWER))
    assert r.status_code == 422
    assert r.json()["detail"] == "教材名を入力してください"


def test_list_and_search(client, db):
    make_material(db, "英単語ターゲット")
    make_material(db, "数学チャート")

    assert len(client.get("/materials").json()) == 2
    hits = client.get("/materials/search", params={"q": "チャート"}).json()
    assert [m["name"] for m in hits] == ["数学チャート"]
    assert client.get("/materials/search", params={"q": ""}).json() == []


def test_object_path_and_data_url():
    assert object_path("u1", "photo.JPEG").startswith("u1-")
    assert object_path("u1", "photo.JPEG").endswith(".jpeg")
    assert object_path("u1", None).endswith(".jpg")
    assert to_data_url(b"abc", None) == "data:application/octet-stream;base64,YWJj"


def test_unconfigured_storage_inlines():
    client = StorageClient(base_url="", key=None)
    assert not client.configured
    assert client.upload_image("avatars", "u1", "a.png", b"abc", "image/png") == (
        "data:image/png;base64,YWJj"
    )
