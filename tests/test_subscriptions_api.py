from datetime import date, timedelta

NEXT_MONTH = (date.today() + timedelta(days=30)).isoformat()


def _netflix(**overrides):
    payload = {
        "name": "Netflix",
        "cost": 15.99,
        "billing_cycle": "monthly",
        "next_billing": NEXT_MONTH,
        "category": "Entertainment",
    }
    payload.update(overrides)
    return payload


async def test_requires_authentication(client):
    response = await client.get("/api/v1/subscriptions/")
    assert response.status_code == 401


async def test_create_and_list(client, auth_headers):
    response = await client.post("/api/v1/subscriptions/", json=_netflix(), headers=auth_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["currency"] == "USD"
    assert created["color"] == "#8B5CF6"
    assert created["status"] == "active"

    response = await client.get("/api/v1/subscriptions/", headers=auth_headers)
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [created["id"]]


async def test_update_toggle_cancel_delete(client, auth_headers):
    created = (await client.post("/api/v1/subscriptions/", json=_netflix(), headers=auth_headers)).json()
    url = f"/api/v1/subscriptions/{created['id']}"

    response = await client.patch(url, json={"cost": 17.99}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["cost"] == 17.99
    assert response.json()["name"] == "Netflix"

    response = await client.post(f"{url}/toggle", headers=auth_headers)
    assert response.json()["status"] == "paused"
    response = await client.post(f"{url}/toggle", headers=auth_headers)
    assert response.json()["status"] == "active"

    response = await client.post(f"{url}/cancel", headers=auth_headers)
    assert response.json()["status"] == "cancelled"

    response = await client.delete(url, headers=auth_headers)
    assert response.status_code == 204
    response = await client.get(url, headers=auth_headers)
    assert response.status_code == 404


async def test_other_users_rows_are_invisible(client, auth_headers, register):
    created = (await client.post("/api/v1/subscriptions/", json=_netflix(), headers=auth_headers)).json()
    url = f"/api/v1/subscriptions/{created['id']}"

    mallory = await register(client, "mallory@example.com")

    assert (await client.get("/api/v1/subscriptions/", headers=mallory)).json() == []
    assert (await client.get(url, headers=mallory)).status_code == 404
    assert (await client.patch(url, json={"cost": 0}, headers=mallory)).status_code == 404
    assert (await client.delete(url, headers=mallory)).status_code == 404

    response = await client.post(
        "/api/v1/subscriptions/bulk-delete", json={"ids": [created["id"]]}, headers=mallory
    )
    assert response.json() == {"deleted": 0}

    assert (await client.get(url, headers=auth_headers)).status_code == 200


async def test_bulk_delete(client, auth_headers):
    ids = []
    for name in ("Netflix", "Spotify", "Hulu"):
        response = await client.post("/api/v1/subscriptions/", json=_netflix(name=name), headers=auth_headers)
        ids.append(response.json()["id"])

    response = await client.post("/api/v1/subscriptions/bulk-delete", json={"ids": ids[:2]}, headers=auth_headers)
    assert response.json() == {"deleted": 2}

    remaining = (await client.get("/api/v1/subscriptions/", headers=auth_headers)).json()
    assert [s["name"] for s in remaining] == ["Hulu"]


async def test_invalid_billing_cycle_is_rejected(client, auth_headers):
    response = await client.post(
        "/api/v1/subscriptions/", json=_netflix(billing_cycle="weekly"), headers=auth_headers
    )
    assert response.status_code == 422


async def test_intake_recognises_known_service(client, auth_headers):
    response = await client.post(
        "/api/v1/subscriptions/intake",
        files={"file": ("Netflix-receipt.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Netflix"
    assert body["cost"] == 15.99
    assert body["matched"] is True


async def test_intake_rejects_disallowed_type(client, auth_headers):
    response = await client.post(
        "/api/v1/subscriptions/intake",
        files={"file": ("netflix.exe", b"MZ", "application/octet-stream")},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "upload an image" in response.json()["detail"]


async def test_null_for_required_column_is_rejected(client, auth_headers):
    created = (await client.post("/api/v1/subscriptions/", json=_netflix(), headers=auth_headers)).json()
    url = f"/api/v1/subscriptions/{created['id']}"

    for field in ("status", "name", "cost", "next_billing"):
        response = await client.patch(url, json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    response = await client.patch(url, json={"category": None}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["category"] is None
    assert response.json()["status"] == "active"
