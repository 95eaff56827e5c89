"""API tests with TestClient: status, users, connect, file upload, visibility, content."""

import base64
import io
import uuid

from fastapi.testclient import TestClient
from PIL import Image


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _png(size=(640, 480)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, "blue").save(buf, format="PNG")
    return buf.getvalue()


def test_status(client: TestClient, session_store) -> None:
    r = client.get("/status")
    assert r.status_code == 200
    assert r.json() == {"redis": True, "db": True}
    session_store.alive = False
    assert client.get("/status").json()["redis"] is False


def test_stats_counts(client: TestClient, owner) -> None:
    before = client.get("/stats").json()
    _, headers = owner
    client.post("/files", json={"name": "d", "type": "folder"}, headers=headers)
    after = client.get("/stats").json()
    assert after["files"] == before["files"] + 1
    assert after["users"] >= 1


def test_register_validation(client: TestClient) -> None:
    assert client.post("/users", json={"password": "x"}).json() == {"error": "Missing email"}
    r = client.post("/users", json={"email": "a@b.co"})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing password"}


def test_register_duplicate(client: TestClient) -> None:
    email = f"dup-{uuid.uuid4().hex[:8]}@example.com"
    r = client.post("/users", json={"email": email, "password": "pw"})
    assert r.status_code == 201
    assert r.json()["email"] == email
    r = client.post("/users", json={"email": email, "password": "pw"})
    assert r.status_code == 400
    assert r.json() == {"error": "Already exist"}


def test_connect_me_disconnect(client: TestClient, owner) -> None:
    user_id, headers = owner
    r = client.get("/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["id"] == user_id
    assert "password" not in r.json()
    assert client.get("/disconnect", headers=headers).status_code == 204
    assert client.get("/users/me", headers=headers).status_code == 401
    assert client.get("/disconnect", headers=headers).status_code == 401


def test_connect_bad_credentials(client: TestClient) -> None:
    assert client.get("/connect").status_code == 401
    r = client.get("/connect", auth=("nobody@example.com", "x"))
    assert r.status_code == 401
    assert r.json() == {"error": "Unauthorized"}


def test_upload_requires_token(client: TestClient) -> None:
    r = client.post("/files", json={"name": "d", "type": "folder"})
    assert r.status_code == 401
    r = client.post("/files", json={"name": "d", "type": "folder"}, headers={"X-Token": "bogus"})
    assert r.status_code == 401


def test_upload_folder_and_child(client: TestClient, owner) -> None:
    user_id, headers = owner
    r = client.post("/files", json={"name": "docs", "type": "folder"}, headers=headers)
    assert r.status_code == 201
    folder = r.json()
    assert folder == {
        "id": folder["id"],
        "userId": user_id,
        "name": "docs",
        "type": "folder",
        "isPublic": False,
        "parentId": 0,
    }
    r = client.post(
        "/files",
        json={"name": "a.txt", "type": "file", "data": _b64(b"hello"), "parentId": folder["id"]},
        headers=headers,
    )
    assert r.status_code == 201
    assert r.json()["parentId"] == folder["id"]


def test_upload_validation_errors(client: TestClient, owner) -> None:
    _, headers = owner
    r = client.post("/files", json={"name": "t.txt", "type": "file", "data": _b64(b"t")}, headers=headers)
    not_folder = r.json()["id"]
    cases = [
        ({"type": "folder"}, "Missing name"),
        ({"name": "x", "type": "bad"}, "Missing type"),
        ({"name": "x", "type": "file"}, "Missing data"),
        ({"name": "x", "type": "folder", "parentId": str(uuid.uuid4())}, "Parent not found"),
        ({"name": "x", "type": "folder", "parentId": not_folder}, "Parent is not a folder"),
    ]
    for body, message in cases:
        r = client.post("/files", json=body, headers=headers)
        assert r.status_code == 400, body
        assert r.json() == {"error": message}


def test_show_is_owner_scoped(client: TestClient, owner, other_user) -> None:
    _, headers = owner
    _, other_headers = other_user
    file_id = client.post("/files", json={"name": "d", "type": "folder"}, headers=headers).json()["id"]
    assert client.get(f"/files/{file_id}", headers=headers).json()["id"] == file_id
    assert client.get(f"/files/{file_id}", headers=other_headers).status_code == 404


def test_publish_unpublish(client: TestClient, owner, other_user) -> None:
    _, headers = owner
    _, other_headers = other_user
    r = client.post("/files", json={"name": "p.txt", "type": "file", "data": _b64(b"p")}, headers=headers)
    file_id = r.json()["id"]

    r = client.put(f"/files/{file_id}/publish", headers=headers)
    assert r.status_code == 200
    assert r.json()["isPublic"] is True
    r = client.put(f"/files/{file_id}/unpublish", headers=headers)
    assert r.status_code == 200
    assert r.json()["isPublic"] is False

    assert client.put(f"/files/{file_id}/publish").status_code == 401
    r = client.put(f"/files/{file_id}/publish", headers=other_headers)
    assert r.status_code == 404
    assert r.json() == {"error": "Not found"}
    assert client.put(f"/files/{uuid.uuid4()}/publish", headers=headers).status_code == 404


def test_private_content_access(client: TestClient, owner, other_user) -> None:
    """Private content: owner gets 200; no token, bad token and other users get 404."""
    _, headers = owner
    _, other_headers = other_user
    r = client.post("/files", json={"name": "n.txt", "type": "file", "data": _b64(b"secret")}, headers=headers)
    file_id = r.json()["id"]

    r = client.get(f"/files/{file_id}/data", headers=headers)
    assert r.status_code == 200
    assert r.content == b"secret"
    assert r.headers["content-type"].startswith("text/plain")

    assert client.get(f"/files/{file_id}/data").status_code == 404
    assert client.get(f"/files/{file_id}/data", headers={"X-Token": "bogus"}).status_code == 404
    assert client.get(f"/files/{file_id}/data", headers=other_headers).status_code == 404

    client.put(f"/files/{file_id}/publish", headers=headers)
    r = client.get(f"/files/{file_id}/data")
    assert r.status_code == 200
    assert r.content == b"secret"


def test_content_errors(client: TestClient, owner) -> None:
    _, headers = owner
    folder_id = client.post("/files", json={"name": "d", "type": "folder"}, headers=headers).json()["id"]
    r = client.get(f"/files/{folder_id}/data", headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "A folder doesn't have content"}

    r = client.get(f"/files/{uuid.uuid4()}/data?size=300")
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid size"}
    assert client.get(f"/files/{uuid.uuid4()}/data").status_code == 404


def test_image_upload_thumbnail_scenario(client: TestClient, owner, job_queue) -> None:
    """Upload an image, run the queued job, then fetch the 100px variant."""
    from files_manager.jobs.tasks import generate_thumbnails

    user_id, headers = owner
    r = client.post("/files", json={"name": "a.png", "type": "image", "data": _b64(_png())}, headers=headers)
    assert r.status_code == 201
    assert r.json()["type"] == "image"
    file_id = r.json()["id"]
    assert job_queue.jobs == [(user_id, file_id)]

    # not generated yet
    assert client.get(f"/files/{file_id}/data?size=100", headers=headers).status_code == 404

    result = generate_thumbnails.apply(args=job_queue.jobs[0])
    assert result.successful()
    assert len(result.get()) == 3

    for width in (100, 250, 500):
        r = client.get(f"/files/{file_id}/data", params={"size": str(width)}, headers=headers)
        assert r.status_code == 200
        assert r.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(r.content)).size == (width, round(width * 0.75))


def test_thumbnail_task_fails_for_unknown_file(init_test_db) -> None:
    from files_manager.errors import FileNotFound
    from files_manager.jobs.tasks import generate_thumbnails

    result = generate_thumbnails.apply(args=[str(uuid.uuid4()), str(uuid.uuid4())])
    assert result.failed()
    assert isinstance(result.result, FileNotFound)


def test_upload_wrongly_typed_fields_are_400(client: TestClient, owner) -> None:
    _, headers = owner
    cases = [
        ({"name": "x", "type": 7}, "Missing type"),
        ({"type": 7}, "Missing name"),
        ({"name": 5, "type": "folder"}, "Missing name"),
        ({"name": "x", "type": "file", "data": 1}, "Missing data"),
    ]
    for body, message in cases:
        r = client.post("/files", json=body, headers=headers)
        assert r.status_code == 400, body
        assert r.json() == {"error": message}


def test_upload_without_body_is_missing_name(client: TestClient, owner) -> None:
    _, headers = owner
    r = client.post("/files", headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Missing name"}


def test_unknown_route_keeps_default_404(client: TestClient) -> None:
    r = client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"detail": "Not Found"}


def test_unhandled_error_is_generic_500(client: TestClient, monkeypatch) -> None:
    from files_manager import main

    async def boom(session):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(main, "count_files", boom)
    with TestClient(main.app, raise_server_exceptions=False) as c:
        r = c.get("/stats")
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}
