from __future__ import annotations

from conftest import bearer, make_user


def test_upsert_creates_then_updates_page(client, auth, admin):
    r = client.put(
        "/api/content/home",
        headers=auth,
        json={"data": {"hero": {"title": "Hi"}}, "seo": {"title": "Home"}},
    )
    assert r.status_code == 200, r.text
    page = r.json()
    assert page["page"] == "home"
    assert page["isPublished"] is False
    assert page["data"] == {"hero": {"title": "Hi"}}
    assert page["lastEditedBy"]["username"] == "admin"
    created_at = page["createdAt"]

    r = client.put("/api/content/home", headers=auth, json={"isPublished": True})
    page = r.json()
    assert page["isPublished"] is True
    assert page["data"] == {"hero": {"title": "Hi"}}
    assert page["seo"]["title"] == "Home"
    assert page["createdAt"] == created_at


def test_unpublished_page_is_hidden(client, auth):
    assert client.get("/api/content/about").status_code == 404

    client.put("/api/content/about", headers=auth, json={"data": {"bio": "x"}})
    r = client.get("/api/content/about")
    assert r.status_code == 404
    assert r.json()["message"] == "Page not found"

    client.put("/api/content/about", headers=auth, json={"isPublished": True})
    r = client.get("/api/content/about")
    assert r.status_code == 200
    assert r.json()["data"] == {"bio": "x"}


def test_unknown_page_key_is_rejected(client, auth):
    assert client.put("/api/content/pricing", headers=auth, json={"data": {}}).status_code == 400
    assert client.get("/api/content/blog").status_code == 400


def test_seo_limits(client, auth):
    r = client.put("/api/content/contact", headers=auth, json={"seo": {"title": "x" * 61}})
    assert r.status_code == 400
    assert r.json()["errors"][0]["path"] == "seo.title"


def test_list_pages_requires_auth(client, auth, ctx):
    assert client.get("/api/content").status_code == 401

    client.put("/api/content/home", headers=auth, json={"data": {}})
    editor = make_user(ctx, username="ed")
    client.put("/api/content/services", headers=bearer(ctx, editor), json={"data": {}, "isPublished": True})

    pages = client.get("/api/content", headers=auth).json()
    by_key = {p["page"]: p for p in pages}
    assert set(by_key) == {"home", "services"}
    assert by_key["services"]["lastEditedBy"]["username"] == "ed"
    assert by_key["home"]["isPublished"] is False


def test_editing_requires_auth(client):
    assert client.put("/api/content/home", json={"data": {}}).status_code == 401
