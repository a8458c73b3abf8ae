from fastapi import status

from tests.fixtures.api_fixtures import upload


async def test_upload_image_and_video(user_client):
    image = await upload(user_client, "cat.png", "image/png", b"x" * 100)
    video = await upload(user_client, "clip.mp4", "video/mp4", b"y" * 250)

    assert image.status_code == status.HTTP_201_CREATED
    assert video.status_code == status.HTTP_201_CREATED
    image_body, video_body = image.json(), video.json()
    assert image_body["kind"] == "image"
    assert image_body["size"] == 100
    assert image_body["name"] == "cat.png"
    assert image_body["url"].startswith("/foto/")
    assert image_body["effective_url"] == image_body["url"]
    assert image_body["user_email"] == "alice@example.com"
    assert video_body["kind"] == "video"
    assert video_body["url"].startswith("/video/")


async def test_upload_rejects_other_media(user_client):
    response = await upload(user_client, "notes.txt", "text/plain", b"hello")

    assert response.status_code == status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


async def test_upload_requires_login(client):
    response = await upload(client)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_list_my_files_most_recent_first(user_client, client_factory):
    first = (await upload(user_client, "a.png")).json()
    second = (await upload(user_client, "b.png")).json()
    other = await client_factory()
    await other.post("/api/auth/register", json={"email": "bob@example.com", "password": "pw"})
    await upload(other, "c.png")

    response = await user_client.get("/api/files/")

    assert response.status_code == status.HTTP_200_OK
    assert [f["id"] for f in response.json()] == [second["id"], first["id"]]


async def test_resolve_is_public(user_client, client):
    created = (await upload(user_client)).json()

    found = await client.get("/api/files/resolve", params={"path": created["url"]})
    missing = await client.get("/api/files/resolve", params={"path": "/foto/missing"})

    assert found.status_code == status.HTTP_200_OK
    assert found.json()["id"] == created["id"]
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_custom_url_update_and_conflict(user_client, client):
    a = (await upload(user_client, "a.png")).json()
    b = (await upload(user_client, "b.png")).json()
    taken_slug = b["url"].rsplit("/", 1)[1]

    conflict = await user_client.put(f"/api/files/{a['id']}/url", json={"slug": taken_slug})
    assert conflict.status_code == status.HTTP_409_CONFLICT

    updated = await user_client.put(f"/api/files/{a['id']}/url", json={"slug": "holiday"})
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["custom_url"] == "/foto/holiday"
    assert updated.json()["effective_url"] == "/foto/holiday"

    resolved = await client.get("/api/files/resolve", params={"path": "/foto/holiday"})
    assert resolved.json()["id"] == a["id"]
    old = await client.get("/api/files/resolve", params={"path": a["url"]})
    assert old.status_code == status.HTTP_404_NOT_FOUND


async def test_custom_url_validation(user_client):
    a = (await upload(user_client)).json()

    response = await user_client.put(f"/api/files/{a['id']}/url", json={"slug": "../etc"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_other_users_files_look_missing(user_client, client_factory):
    a = (await upload(user_client)).json()
    intruder = await client_factory()
    await intruder.post("/api/auth/register", json={"email": "eve@example.com", "password": "pw"})

    rename = await intruder.put(f"/api/files/{a['id']}/url", json={"slug": "mine"})
    delete = await intruder.delete(f"/api/files/{a['id']}")
    absent = await intruder.delete("/api/files/does-not-exist")

    assert rename.status_code == status.HTTP_404_NOT_FOUND
    assert delete.status_code == status.HTTP_404_NOT_FOUND
    assert absent.json() == delete.json()


async def test_delete_own_file(user_client):
    a = (await upload(user_client)).json()

    response = await user_client.delete(f"/api/files/{a['id']}")

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert (await user_client.get("/api/files/")).json() == []
