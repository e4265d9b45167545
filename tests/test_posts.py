"""Post API tests."""


def create_post(client, headers, key="key-1", title="Hello", content="First post"):
    return client.post(
        "/api/v1/posts",
        headers=headers,
        json={"idempotency_key": key, "title": title, "content": content},
    )


def test_create_post(client, auth_headers):
    """Test that an author can create a draft post."""
    response = create_post(client, auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Hello"
    assert data["status"] == "Draft"
    assert data["images"] == []


def test_create_post_requires_author_role(client, reader_headers):
    """Test that readers cannot create posts."""
    response = create_post(client, reader_headers)
    assert response.status_code == 403


def test_create_post_missing_fields(client, auth_headers):
    """Test that a blank title is rejected."""
    response = create_post(client, auth_headers, title="  ")
    assert response.status_code == 400
    assert response.json()["detail"] == "All fields are required."


def test_create_post_reused_idempotency_key(client, auth_headers):
    """Test that a repeated idempotency key is a conflict."""
    assert create_post(client, auth_headers, key="same").status_code == 201

    response = create_post(client, auth_headers, key="same", title="Again")
    assert response.status_code == 409
    assert response.json()["detail"] == "IdempotencyKey has already been used."


def test_draft_hidden_from_other_users(client, auth_headers, reader_headers):
    """Test that drafts are only visible to their author."""
    post_id = create_post(client, auth_headers).json()["id"]

    assert client.get(f"/api/v1/posts/{post_id}", headers=auth_headers).status_code == 200
    response = client.get(f"/api/v1/posts/{post_id}", headers=reader_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found."


def test_publish_post(client, auth_headers, reader_headers):
    """Test that published posts are listed for everyone."""
    post_id = create_post(client, auth_headers).json()["id"]
    assert client.get("/api/v1/posts", headers=reader_headers).json() == []

    response = client.patch(
        f"/api/v1/posts/{post_id}/status", headers=auth_headers, json={"status": "Published"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Published"

    published = client.get("/api/v1/posts", headers=reader_headers).json()
    assert [p["id"] for p in published] == [post_id]
    assert client.get(f"/api/v1/posts/{post_id}", headers=reader_headers).status_code == 200


def test_publish_post_invalid_status(client, auth_headers):
    """Test that only Draft and Published are accepted."""
    post_id = create_post(client, auth_headers).json()["id"]

    response = client.patch(
        f"/api/v1/posts/{post_id}/status", headers=auth_headers, json={"status": "Archived"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid status."


def test_update_post(client, auth_headers):
    """Test editing a post."""
    post_id = create_post(client, auth_headers).json()["id"]

    response = client.put(
        f"/api/v1/posts/{post_id}",
        headers=auth_headers,
        json={"title": "Edited", "content": "New body"},
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Edited"
    assert response.json()["content"] == "New body"


def test_update_post_by_other_author(client, auth_headers):
    """Test that another author cannot edit the post."""
    post_id = create_post(client, auth_headers).json()["id"]
    other = client.post(
        "/api/v1/auth/register",
        json={"email": "other@example.com", "password": "testpass123", "role": "Author"},
    ).json()
    other_headers = {"Authorization": f"Bearer {other['access_token']}"}

    response = client.put(
        f"/api/v1/posts/{post_id}",
        headers=other_headers,
        json={"title": "Hijacked", "content": "Nope"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied."


def test_update_missing_post(client, auth_headers):
    """Test editing a post that does not exist."""
    response = client.put(
        "/api/v1/posts/00000000-0000-0000-0000-000000000000",
        headers=auth_headers,
        json={"title": "Edited", "content": "New body"},
    )
    assert response.status_code == 404


def test_my_posts_include_drafts(client, auth_headers):
    """Test that an author sees their own drafts."""
    create_post(client, auth_headers, key="a")
    create_post(client, auth_headers, key="b")

    response = client.get("/api/v1/posts/mine", headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()) == 2


def test_upload_images(client, auth_headers, storage):
    """Test uploading images stores objects and skips empty files."""
    post_id = create_post(client, auth_headers).json()["id"]

    response = client.post(
        f"/api/v1/posts/{post_id}/images",
        headers=auth_headers,
        files=[
            ("images", ("cat.png", b"\x89PNG fake bytes", "image/png")),
            ("images", ("empty.png", b"", "image/png")),
        ],
    )
    assert response.status_code == 201
    images = response.json()
    assert len(images) == 1
    assert images[0]["post_id"] == post_id
    assert images[0]["url"] == f"http://minio.test/post-images/{post_id}/{images[0]['id']}"

    storage.ensure_bucket.assert_called_once_with("post-images")
    storage.upload_object.assert_called_once()
    assert storage.upload_object.call_args.args[1] == f"{post_id}/{images[0]['id']}"

    post = client.get(f"/api/v1/posts/{post_id}", headers=auth_headers).json()
    assert [image["id"] for image in post["images"]] == [images[0]["id"]]


def test_delete_image(client, auth_headers, storage):
    """Test removing an image deletes the object and the record."""
    post_id = create_post(client, auth_headers).json()["id"]
    image_id = client.post(
        f"/api/v1/posts/{post_id}/images",
        headers=auth_headers,
        files=[("images", ("cat.png", b"bytes", "image/png"))],
    ).json()[0]["id"]

    response = client.delete(f"/api/v1/posts/{post_id}/images/{image_id}", headers=auth_headers)
    assert response.status_code == 204
    storage.delete_object.assert_called_once_with("post-images", f"{post_id}/{image_id}")

    post = client.get(f"/api/v1/posts/{post_id}", headers=auth_headers).json()
    assert post["images"] == []


def test_delete_missing_image(client, auth_headers):
    """Test removing an image that does not exist."""
    post_id = create_post(client, auth_headers).json()["id"]

    response = client.delete(
        f"/api/v1/posts/{post_id}/images/00000000-0000-0000-0000-000000000000",
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Image not found."
