from datetime import date, timedelta


async def _add(client, headers, **fields):
    payload = {
        "name": "Netflix",
        "cost": 15.99,
        "billing_cycle": "monthly",
        "next_billing": (date.today() + timedelta(days=40)).isoformat(),
        "category": "Entertainment",
    }
    payload.update(fields)
    response = await client.post("/api/v1/subscriptions/", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_spending_series_current_month_is_exact(client, auth_headers):
    await _add(client, auth_headers)
    await _add(client, auth_headers, name="Amazon Prime", cost=139.0, billing_cycle="annual", category="Shopping")
    paused = await _add(client, auth_headers, name="Hulu", cost=7.99)
    await client.post(f"/api/v1/subscriptions/{paused['id']}/toggle", headers=auth_headers)

    response = await client.get("/api/v1/dashboard/spending", headers=auth_headers)
    assert response.status_code == 200
    series = response.json()
    assert len(series) == 7
    assert series[-1]["amount"] == round(15.99 + 139.0 / 12, 2)
    # Everything was created this month, so no history yet
    assert [p["amount"] for p in series[:-1]] == [0.0] * 6


async def test_spending_series_empty_account(client, auth_headers):
    series = (await client.get("/api/v1/dashboard/spending", headers=auth_headers)).json()
    assert [p["amount"] for p in series] == [0.0] * 7


async def test_summary(client, auth_headers):
    await _add(client, auth_headers, next_billing=(date.today() + timedelta(days=3)).isoformat())
    await _add(client, auth_headers, name="Notion", cost=10.0, category="Productivity")
    cancelled = await _add(client, auth_headers, name="Dropbox", cost=11.99, category="Productivity")
    await client.post(f"/api/v1/subscriptions/{cancelled['id']}/cancel", headers=auth_headers)

    body = (await client.get("/api/v1/dashboard/summary", headers=auth_headers)).json()
    assert body["summary"]["total_monthly"] == 25.99
    assert body["summary"]["total_annual"] == round(25.99 * 12, 2)
    assert body["summary"]["active_count"] == 2
    assert body["summary"]["cancelled_count"] == 1
    assert body["categories"][0] == {"name": "Entertainment", "value": 15.99}
    assert [r["name"] for r in body["upcoming_renewals"]] == ["Netflix"]
