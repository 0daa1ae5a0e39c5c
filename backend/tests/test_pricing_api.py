from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor

from bson import ObjectId

from portfolio_api.repositories.pricing_repo import PricingRepository


def _plan(client, auth, **fields):
    body = {
        "name": "Pro Plan",
        "title": "Professional",
        "description": "Everything a growing business needs",
        "shortDescription": "For growing teams",
        "price": {"amount": 49, "originalAmount": 99},
        "status": "active",
        **fields,
    }
    r = client.post("/api/pricing", headers=auth, json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_create_plan_derives_slug_seo_and_analytics(client, auth):
    plan = _plan(client, auth)
    assert plan["slug"] == "pro-plan"
    assert plan["seoTitle"] == "Professional - Pro Plan"
    assert plan["seoDescription"] == "For growing teams"
    assert plan["analytics"] == {"views": 0, "clicks": 0, "conversions": 0}
    assert plan["price"]["currency"] == "USD"
    assert plan["price"]["period"] == "one-time"
    assert plan["buttonText"] == "Get Started"
    assert plan["color"] == {"primary": "#3B82F6", "secondary": "#1E40AF"}
    assert plan["formattedPrice"] == "$49"
    assert plan["discountPercentage"] == 51
    assert plan["conversionRate"] == "0.00"


def test_long_seo_title_is_truncated(client, auth):
    plan = _plan(client, auth, title="T" * 100)
    assert len(plan["seoTitle"]) == 60


def test_plan_validation(client, auth):
    r = client.post(
        "/api/pricing",
        headers=auth,
        json={
            "name": "Basic",
            "title": "Basic",
            "description": "Entry level plan",
            "price": {"amount": -1},
            "color": {"primary": "blue"},
            "buttonLink": "javascript:alert(1)",
            "ribbonText": "x" * 21,
        },
    )
    assert r.status_code == 400
    paths = {e["path"] for e in r.json()["errors"]}
    assert {"price.amount", "color.primary", "buttonLink", "ribbonText"} <= paths


def test_rename_regenerates_slug_and_keeps_analytics(client, auth, db):
    plan = _plan(client, auth)
    db.pricing.update_one({"_id": ObjectId(plan["_id"])}, {"$set": {"analytics.clicks": 3}})

    r = client.put(f"/api/pricing/{plan['_id']}", headers=auth, json={"name": "Pro Plus", "analytics": {"clicks": 0}})
    assert r.status_code == 200
    body = r.json()
    assert body["slug"] == "pro-plus"
    assert body["analytics"]["clicks"] == 3
    assert client.get("/api/pricing/pro-plan").status_code == 404


def test_clicks_increment_exactly_once_per_call(client, auth, db):
    plan = _plan(client, auth)
    n = 7
    for _ in range(n):
        r = client.post("/api/pricing/pro-plan/click")
        assert r.status_code == 200
        assert r.json()["message"] == "Click tracked successfully"

    stored = db.pricing.find_one({"_id": ObjectId(plan["_id"])})
    assert stored["analytics"]["clicks"] == n
    assert stored["analytics"]["conversions"] == 0


def test_conversions_and_rate(client, auth):
    _plan(client, auth)
    for _ in range(4):
        client.post("/api/pricing/pro-plan/click")
    client.post("/api/pricing/pro-plan/conversion")

    plan = client.get("/api/pricing/pro-plan").json()
    assert plan["analytics"]["conversions"] == 1
    assert plan["conversionRate"] == "25.00"


def test_counters_only_track_active_plans(client, auth):
    _plan(client, auth, name="Hidden", status="draft")
    assert client.post("/api/pricing/hidden/click").status_code == 404
    assert client.post("/api/pricing/hidden/conversion").status_code == 404
    assert client.post("/api/pricing/missing/click").status_code == 404


def test_public_fetch_counts_views(client, auth):
    plan = _plan(client, auth)
    assert client.get("/api/pricing/pro-plan").json()["analytics"]["views"] == 1
    assert client.get(f"/api/pricing/{plan['_id']}").json()["analytics"]["views"] == 2

    _plan(client, auth, name="Draft", status="draft")
    assert client.get("/api/pricing/draft").status_code == 404


def test_services_are_expanded(client, auth):
    r = client.post(
        "/api/services",
        headers=auth,
        json={"title": "SEO Audit", "description": "A full technical audit", "status": "active"},
    )
    service = r.json()
    _plan(client, auth, services=[service["_id"]])

    single = client.get("/api/pricing/pro-plan").json()
    assert single["services"] == [
        {"_id": service["_id"], "title": "SEO Audit", "slug": "seo-audit", "description": "A full technical audit"}
    ]

    listed = client.get("/api/pricing").json()["items"][0]
    assert listed["services"] == [{"_id": service["_id"], "title": "SEO Audit", "slug": "seo-audit"}]


def test_invalid_service_reference_is_rejected(client, auth):
    r = client.post(
        "/api/pricing",
        headers=auth,
        json={"name": "Odd", "title": "Odd", "description": "Odd plan here", "price": {"amount": 1}, "services": ["nope"]},
    )
    assert r.status_code == 400


def test_public_list_filters_and_sort(client, auth):
    _plan(client, auth, name="Starter", price={"amount": 10}, type="basic", sortOrder=1)
    _plan(client, auth, name="Team", price={"amount": 50, "currency": "EUR"}, type="standard", isPopular=True)
    _plan(client, auth, name="Enterprise", price={"amount": 500, "period": "yearly"}, type="enterprise", isFeatured=True)
    _plan(client, auth, name="Archived", price={"amount": 5}, status="archived")

    names = [p["name"] for p in client.get("/api/pricing").json()["items"]]
    assert names == ["Enterprise", "Team", "Starter"]

    mid = client.get("/api/pricing", params={"minPrice": 20, "maxPrice": 100}).json()["items"]
    assert [p["name"] for p in mid] == ["Team"]
    assert mid[0]["formattedPrice"] == "€50"

    assert [p["name"] for p in client.get("/api/pricing", params={"type": "basic"}).json()["items"]] == ["Starter"]
    assert [p["name"] for p in client.get("/api/pricing", params={"period": "yearly"}).json()["items"]] == ["Enterprise"]
    assert [p["name"] for p in client.get("/api/pricing", params={"popular": "true"}).json()["items"]] == ["Team"]
    assert [p["name"] for p in client.get("/api/pricing", params={"search": "enterp"}).json()["items"]] == ["Enterprise"]

    assert client.get("/api/pricing", params={"minPrice": 100, "maxPrice": 10}).status_code == 400
    assert client.get("/api/pricing", params={"status": "archived"}).json()["items"] == []

    admin = client.get("/api/pricing/admin/all", headers=auth, params={"status": "archived"}).json()
    assert [p["name"] for p in admin["items"]] == ["Archived"]


def test_pagination(client, auth):
    for i in range(7):
        _plan(client, auth, name=f"Plan {i}")

    body = client.get("/api/pricing", params={"page": 2, "limit": 5}).json()
    assert len(body["items"]) == 2
    assert body["pagination"]["pages"] == math.ceil(7 / 5)
    assert body["pagination"]["hasPrev"] is True
    assert body["pagination"]["hasNext"] is False


def test_stats(client, auth):
    empty = client.get("/api/pricing/analytics/stats").json()
    assert empty["overview"]["totalPlans"] == 0
    assert empty["overview"]["averagePrice"] == 0
    assert empty["byType"] == []

    _plan(client, auth, name="Starter", price={"amount": 10}, type="basic")
    _plan(client, auth, name="Team", price={"amount": 30}, type="standard")
    _plan(client, auth, name="Draft", price={"amount": 1000}, type="standard", status="draft")
    client.post("/api/pricing/team/click")
    client.post("/api/pricing/team/click")

    stats = client.get("/api/pricing/analytics/stats").json()
    overview = stats["overview"]
    assert overview["totalPlans"] == 2
    assert overview["totalClicks"] == 2
    assert overview["averagePrice"] == 20
    assert overview["minPrice"] == 10
    assert overview["maxPrice"] == 30

    by_type = {row["type"]: row for row in stats["byType"]}
    assert set(by_type) == {"basic", "standard"}
    assert by_type["standard"]["count"] == 1
    assert by_type["standard"]["totalClicks"] == 2


def test_delete_plan(client, auth):
    plan = _plan(client, auth)
    assert client.delete(f"/api/pricing/{plan['_id']}", headers=auth).status_code == 200
    assert client.delete(f"/api/pricing/{plan['_id']}", headers=auth).status_code == 404
    assert client.delete(f"/api/pricing/{ObjectId()}", headers=auth).status_code == 404


def test_concurrent_clicks_are_all_counted(client, auth, db):
    plan = _plan(client, auth)
    n = 20

    with ThreadPoolExecutor(max_workers=8) as pool:
        statuses = list(pool.map(lambda _: client.post("/api/pricing/pro-plan/click").status_code, range(n)))

    assert statuses == [200] * n
    stored = db.pricing.find_one({"_id": ObjectId(plan["_id"])})
    assert stored["analytics"]["clicks"] == n


def test_update_keeps_clicks_recorded_while_it_runs(client, auth, db, monkeypatch):
    plan = _plan(client, auth)
    read_plan = PricingRepository.get

    def get_then_click(self, id, **kwargs):
        doc = read_plan(self, id, **kwargs)
        # A click lands after the update has read the stored plan.
        assert self.increment("pro-plan", "clicks") is not None
        return doc

    monkeypatch.setattr(PricingRepository, "get", get_then_click)
    r = client.put(f"/api/pricing/{plan['_id']}", headers=auth, json={"sortOrder": 2})
    monkeypatch.undo()

    assert r.status_code == 200
    assert r.json()["sortOrder"] == 2
    assert r.json()["analytics"]["clicks"] == 1
    stored = db.pricing.find_one({"_id": ObjectId(plan["_id"])})
    assert stored["analytics"] == {"views": 0, "clicks": 1, "conversions": 0}


def test_update_removes_cleared_fields(client, auth, db):
    plan = _plan(client, auth, buttonLink="/contact", ribbonText="Best value")

    r = client.put(f"/api/pricing/{plan['_id']}", headers=auth, json={"buttonLink": ""})
    assert r.status_code == 200
    assert "buttonLink" not in r.json()

    stored = db.pricing.find_one({"_id": ObjectId(plan["_id"])})
    assert "buttonLink" not in stored
    assert stored["ribbonText"] == "Best value"


def test_create_returns_the_stored_plan(client, auth, db):
    plan = _plan(client, auth)
    stored = db.pricing.find_one({"_id": ObjectId(plan["_id"])})
    assert plan["slug"] == stored["slug"]
    assert plan["analytics"] == stored["analytics"]
    assert "updatedAt" in plan
