def _create_brand(client, **kw):
    payload = {"name": "Muuto", "project_sectors": ["Retail"], **kw}
    r = client.post("/api/brands/", json=payload)
    assert r.status_code == 200, r.text
    return r.json()


def test_brand_crud(client):
    brand = _create_brand(client, priority=1)
    assert brand["status"] == "prospect"

    r = client.get("/api/brands/", params={"search": "muu"})
    assert [b["name"] for b in r.json()] == ["Muuto"]

    r = client.put(f"/api/brands/{brand['id']}", json={"status": "active"})
    assert r.json()["status"] == "active"

    r = client.get(f"/api/brands/{brand['id']}")
    data = r.json()
    assert data["deal"] is None
    assert data["contacts"] == []

    assert client.delete(f"/api/brands/{brand['id']}").status_code == 200
    assert client.get(f"/api/brands/{brand['id']}").status_code == 404


def test_brand_validation(client):
    assert client.post("/api/brands/", json={"name": ""}).status_code == 422
    assert client.post("/api/brands/", json={"name": "X", "priority": 5}).status_code == 422
    assert client.post("/api/brands/", json={"name": "X", "status": "unknown"}).status_code == 422


def test_children_require_existing_brand(client):
    r = client.post("/api/contacts/", json={"brand_id": 999, "name": "A", "email": "a@x.com"})
    assert r.status_code == 404
    r = client.post("/api/tasks/", json={"brand_id": 999, "title": "Call"})
    assert r.status_code == 404
    r = client.put("/api/brands/999/deal", json={"discount": 0.2})
    assert r.status_code == 404


def test_brand_detail_includes_children(client):
    brand = _create_brand(client)
    bid = brand["id"]
    client.post("/api/contacts/", json={"brand_id": bid, "name": "Jane", "email": "jane@muuto.com", "is_primary": True})
    client.put(f"/api/brands/{bid}/deal", json={"discount": 0.35, "payment_terms": "Net 30"})
    client.post("/api/communications/", json={"brand_id": bid, "type": "meeting", "subject": "Intro"})
    client.post("/api/documents/", json={"brand_id": bid, "name": "Price list", "url": "https://x/p.pdf"})
    task = client.post("/api/tasks/", json={"brand_id": bid, "title": "Send samples"}).json()

    data = client.get(f"/api/brands/{bid}").json()
    assert data["contacts"][0]["is_primary"] is True
    assert data["deal"]["discount"] == 0.35
    assert data["communications"][0]["subject"] == "Intro"
    assert data["last_contact_date"] is not None
    assert data["documents"][0]["name"] == "Price list"
    assert data["tasks"][0]["title"] == "Send samples"

    r = client.post(f"/api/tasks/{task['id']}/toggle")
    assert r.json()["status"] == "completed"

    recent = client.get("/api/communications/recent", params={"limit": 5}).json()
    assert recent[0]["brand_name"] == "Muuto"


def test_deal_discount_is_a_fraction(client):
    brand = _create_brand(client)
    r = client.put(f"/api/brands/{brand['id']}/deal", json={"discount": 35})
    assert r.status_code == 422


def test_dashboard_and_analytics(client):
    _create_brand(client, status="active")
    _create_brand(client, name="Hay", project_sectors=[])
    stats = client.get("/api/dashboard/stats").json()
    assert stats["total_partners"] == 2
    assert stats["active_partners"] == 1

    analytics = client.get("/api/analytics").json()
    sectors = {i["name"]: i["percent"] for i in analytics["sectors"]}
    assert sectors == {"Retail": 50.0, "Unassigned": 50.0}


def test_explicit_null_on_required_columns_is_rejected(client):
    brand = _create_brand(client)
    bid = brand["id"]
    for field in ("name", "status", "deal_stage", "hide"):
        r = client.put(f"/api/brands/{bid}", json={field: None})
        assert r.status_code == 422, field

    task = client.post("/api/tasks/", json={"brand_id": bid, "title": "Call"}).json()
    for field in ("title", "status", "priority"):
        r = client.put(f"/api/tasks/{task['id']}", json={field: None})
        assert r.status_code == 422, field

    # les colonnes nullables acceptent toujours null
    r = client.put(f"/api/brands/{bid}", json={"priority": None, "comments": None})
    assert r.status_code == 200
    assert client.get(f"/api/brands/{bid}").json()["status"] == "prospect"
