from __future__ import annotations

import math

from bson import ObjectId


def _post(client, auth, **fields):
    body = {"title": "Hello, World!", "content": "Body text", **fields}
    r = client.post("/api/blog", headers=auth, json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_requires_auth(client):
    r = client.post("/api/blog", json={"title": "T", "content": "C"})
    assert r.status_code == 401


def test_create_derives_slug_and_expands_author(client, auth):
    post = _post(client, auth, tags=["Python", " FastAPI "])
    assert post["slug"] == "hello-world"
    assert post["status"] == "draft"
    assert post["category"] == "technology"
    assert post["tags"] == ["python", "fastapi"]
    assert post["author"]["username"] == "admin"
    assert post["id"] == post["_id"]
    assert "publishedAt" not in post


def test_publishing_stamps_published_at(client, auth):
    post = _post(client, auth, status="published")
    assert post["publishedAt"]

    explicit = _post(client, auth, title="Dated", status="published", publishedAt="2023-05-01T10:00:00Z")
    assert explicit["publishedAt"].startswith("2023-05-01T10:00:00")


def test_public_list_only_shows_published(client, auth):
    _post(client, auth, title="Draft one")
    _post(client, auth, title="Live one", status="published")
    _post(client, auth, title="Old one", status="archived")

    public = client.get("/api/blog").json()
    assert [p["title"] for p in public["items"]] == ["Live one"]
    assert public["pagination"]["total"] == 1

    filtered = client.get("/api/blog", params={"status": "published"}).json()
    assert [p["status"] for p in filtered["items"]] == ["published"]

    assert client.get("/api/blog", params={"status": "draft"}).json()["items"] == []


def test_admin_list_shows_every_status(client, auth):
    _post(client, auth, title="Draft one")
    _post(client, auth, title="Live one", status="published")

    assert client.get("/api/blog/admin/all").status_code == 401
    body = client.get("/api/blog/admin/all", headers=auth).json()
    assert body["pagination"]["total"] == 2

    drafts = client.get("/api/blog/admin/all", headers=auth, params={"status": "draft"}).json()
    assert [p["title"] for p in drafts["items"]] == ["Draft one"]


def test_public_list_sorted_by_published_at(client, auth):
    _post(client, auth, title="Older", status="published", publishedAt="2024-01-01T00:00:00Z")
    _post(client, auth, title="Newer", status="published", publishedAt="2024-06-01T00:00:00Z")

    items = client.get("/api/blog").json()["items"]
    assert [p["title"] for p in items] == ["Newer", "Older"]


def test_pagination_page_two(client, auth):
    for i in range(12):
        _post(client, auth, title=f"Post {i}", status="published")

    body = client.get("/api/blog", params={"page": 2, "limit": 5}).json()
    assert len(body["items"]) <= 5
    assert len(body["items"]) == 5
    meta = body["pagination"]
    assert meta == {
        "page": 2,
        "limit": 5,
        "total": 12,
        "pages": math.ceil(12 / 5),
        "hasNext": True,
        "hasPrev": True,
    }

    last = client.get("/api/blog", params={"page": 3, "limit": 5}).json()
    assert len(last["items"]) == 2
    assert last["pagination"]["hasNext"] is False


def test_pagination_params_are_validated(client):
    assert client.get("/api/blog", params={"limit": 0}).status_code == 400
    assert client.get("/api/blog", params={"limit": 101}).status_code == 400
    assert client.get("/api/blog", params={"page": 0}).status_code == 400


def test_tag_and_search_filters(client, auth):
    _post(client, auth, title="Python tips", status="published", tags=["python"])
    _post(client, auth, title="Design notes", status="published", tags=["ux"])

    by_tag = client.get("/api/blog", params={"tag": "Python"}).json()["items"]
    assert [p["title"] for p in by_tag] == ["Python tips"]

    by_search = client.get("/api/blog", params={"search": "design"}).json()["items"]
    assert [p["title"] for p in by_search] == ["Design notes"]

    # Regex metacharacters are matched literally.
    assert client.get("/api/blog", params={"search": "(.*"}).json()["items"] == []


def test_get_by_slug_id_and_alias(client, auth):
    live = _post(client, auth, title="Live one", status="published")
    draft = _post(client, auth, title="Draft one")

    assert client.get("/api/blog/live-one").json()["_id"] == live["_id"]
    assert client.get("/api/blog/post/live-one").json()["_id"] == live["_id"]
    assert client.get(f"/api/blog/{live['_id']}").json()["slug"] == "live-one"

    r = client.get("/api/blog/draft-one")
    assert r.status_code == 404
    assert r.json()["message"] == "Blog post not found"
    assert client.get(f"/api/blog/{draft['_id']}").status_code == 404


def test_update_merges_and_regenerates_slug(client, auth, db):
    post = _post(client, auth, excerpt="Short")

    r = client.put(f"/api/blog/{post['_id']}", headers=auth, json={"title": "Brand New Title"})
    assert r.status_code == 200
    updated = r.json()
    assert updated["slug"] == "brand-new-title"
    assert updated["excerpt"] == "Short"
    assert updated["content"] == "Body text"
    assert updated["author"]["username"] == "admin"
    assert updated["createdAt"] == post["createdAt"]

    stored = db.blogs.find_one({"_id": ObjectId(post["_id"])})
    assert isinstance(stored["author"], ObjectId)


def test_update_is_revalidated(client, auth):
    post = _post(client, auth)
    r = client.put(f"/api/blog/{post['_id']}", headers=auth, json={"category": "gossip"})
    assert r.status_code == 400
    assert r.json()["title"] == "Validation Failed"


def test_update_missing_post_is_404(client, auth):
    assert client.put(f"/api/blog/{ObjectId()}", headers=auth, json={"title": "x"}).status_code == 404


def test_duplicate_slug_is_rejected(client, auth):
    _post(client, auth)
    r = client.post("/api/blog", headers=auth, json={"title": "Hello World", "content": "again"})
    assert r.status_code == 400
    assert r.json()["title"] == "Duplicate entry"


def test_delete_post(client, auth):
    post = _post(client, auth)

    r = client.delete(f"/api/blog/{post['_id']}", headers=auth)
    assert r.status_code == 200
    assert r.json()["message"] == "Blog post deleted successfully"
    assert client.delete(f"/api/blog/{post['_id']}", headers=auth).status_code == 404
    assert client.delete("/api/blog/nope", headers=auth).status_code == 404
