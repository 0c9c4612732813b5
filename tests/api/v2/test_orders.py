"""
Tests for the orders API endpoints (/api/v2/orders).
"""
import pytest

ORDERS_PREFIX = "/api/v2/orders"


@pytest.mark.asyncio
async def test_list_orders_newest_first(client, store):
    """Default page is the 10 most recent orders."""
    response = await client.get(ORDERS_PREFIX)
    assert response.status_code == 200

    data = response.json()
    assert data["total"] == len(store.get_orders())
    assert data["page"] == 1
    assert data["pageSize"] == 10
    assert len(data["items"]) == 10

    dates = [o["date"] for o in data["items"]]
    assert dates == sorted(dates, reverse=True)
    newest = max(o.order_date for o in store.get_orders())
    assert dates[0] == newest.isoformat()


@pytest.mark.asyncio
async def test_order_fields(client):
    response = await client.get(ORDERS_PREFIX, params={"page_size": 1})
    order = response.json()["items"][0]

    assert set(order) >= {"id", "customerId", "date", "amount", "items"}
    assert order["items"]
    assert order["amount"] == sum(i["price"] * i["quantity"] for i in order["items"])


@pytest.mark.asyncio
async def test_pagination_covers_every_order(client, store):
    seen = []
    for page in (1, 2, 3, 4):
        response = await client.get(ORDERS_PREFIX, params={"page": page, "page_size": 15})
        seen.extend(o["id"] for o in response.json()["items"])

    assert sorted(seen) == sorted(o.id for o in store.get_orders())


@pytest.mark.asyncio
async def test_filter_by_customer(client, store):
    customer_id = store.get_orders()[0].customer_id

    response = await client.get(ORDERS_PREFIX, params={"customer_id": customer_id, "page_size": 100})
    data = response.json()

    expected = [o for o in store.get_orders() if o.customer_id == customer_id]
    assert data["total"] == len(expected)
    assert all(o["customerId"] == customer_id for o in data["items"])


@pytest.mark.asyncio
async def test_unknown_customer_has_no_orders(client):
    response = await client.get(ORDERS_PREFIX, params={"customer_id": "nobody"})
    assert response.json()["total"] == 0
    assert response.json()["items"] == []
