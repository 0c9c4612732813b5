"""
Tests for the segment builder endpoints (/api/v2/segments).
"""
import pytest

from app.services.segment_engine import count_matches, filter_customers
from tests.factories import REFERENCE_DATE

SEGMENTS_PREFIX = "/api/v2/segments"

HIGH_SPENDERS = [{"field": "totalSpent", "operator": ">", "value": 1000}]


class TestFields:
    """Field/operator catalog."""

    @pytest.mark.asyncio
    async def test_fields(self, client):
        response = await client.get(f"{SEGMENTS_PREFIX}/fields")
        assert response.status_code == 200

        data = response.json()
        fields = {f["field"]: f for f in data["fields"]}
        assert list(fields) == ["totalSpent", "purchaseCount", "lastPurchase", "tag"]
        assert fields["lastPurchase"]["valueType"] == "days"
        assert [o["value"] for o in fields["tag"]["operators"]] == ["contains", "does_not_contain"]
        assert "frequent_buyer" in data["tags"]


class TestCount:
    """Live audience size."""

    @pytest.mark.asyncio
    async def test_count_matches_engine(self, client, store):
        response = await client.post(f"{SEGMENTS_PREFIX}/count", json={"rules": HIGH_SPENDERS})
        assert response.status_code == 200
        expected = count_matches(store.get_customers(), HIGH_SPENDERS, REFERENCE_DATE)
        assert response.json() == {"audienceSize": expected}

    @pytest.mark.asyncio
    async def test_empty_rules_count_zero(self, client):
        response = await client.post(f"{SEGMENTS_PREFIX}/count", json={"rules": []})
        assert response.status_code == 200
        assert response.json()["audienceSize"] == 0

    @pytest.mark.asyncio
    async def test_recency_uses_injected_today(self, client, store):
        rules = [{"field": "lastPurchase", "operator": "<", "value": 30}]
        response = await client.post(f"{SEGMENTS_PREFIX}/count", json={"rules": rules})
        expected = sum(
            1 for c in store.get_customers()
            if (REFERENCE_DATE - c.last_purchase_date).days < 30
        )
        assert response.json()["audienceSize"] == expected

    @pytest.mark.asyncio
    async def test_or_conjunction(self, client, store):
        rules = [
            {"field": "tag", "operator": "contains", "value": "churned", "conjunction": "OR"},
            {"field": "purchaseCount", "operator": "≥", "value": 15},
        ]
        response = await client.post(f"{SEGMENTS_PREFIX}/count", json={"rules": rules})
        expected = sum(
            1 for c in store.get_customers()
            if "churned" in c.tags or c.purchase_count >= 15
        )
        assert response.json()["audienceSize"] == expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rule", [
        {"field": "bogus", "operator": ">", "value": 1},
        {"field": "totalSpent", "operator": "contains", "value": 1},
        {"field": "tag", "operator": "contains", "value": ["vip"]},
        {"field": "totalSpent", "operator": ">", "value": "1000"},
        {"field": "totalSpent", "operator": "between", "value": 1},
    ])
    async def test_invalid_rule_rejected(self, client, rule):
        response = await client.post(f"{SEGMENTS_PREFIX}/count", json={"rules": [rule]})
        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")

        problem = response.json()
        assert problem["status"] == 422
        assert problem["code"] == "VAL_001"
        assert problem["errors"]
        assert problem["trace_id"]


class TestPreview:
    """Audience preview before save."""

    @pytest.mark.asyncio
    async def test_preview_default_limit(self, client, store):
        rules = [{"field": "totalSpent", "operator": "≥", "value": 0}]
        response = await client.post(f"{SEGMENTS_PREFIX}/preview", json={"rules": rules})
        assert response.status_code == 200

        data = response.json()
        assert data["audienceSize"] == len(store.get_customers())
        assert len(data["sample"]) == 10
        assert data["referenceDate"] == REFERENCE_DATE.isoformat()

    @pytest.mark.asyncio
    async def test_preview_sample_in_store_order(self, client, store):
        response = await client.post(
            f"{SEGMENTS_PREFIX}/preview",
            json={"rules": HIGH_SPENDERS, "limit": 3},
        )
        data = response.json()
        expected = filter_customers(store.get_customers(), HIGH_SPENDERS, REFERENCE_DATE)
        assert data["audienceSize"] == len(expected)
        assert [c["id"] for c in data["sample"]] == [c.id for c in expected[:3]]

    @pytest.mark.asyncio
    async def test_preview_limit_out_of_range(self, client):
        response = await client.post(
            f"{SEGMENTS_PREFIX}/preview",
            json={"rules": HIGH_SPENDERS, "limit": 500},
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    response = await client.post(
        f"{SEGMENTS_PREFIX}/count",
        json={"rules": HIGH_SPENDERS},
        headers={"X-Request-ID": "abc123"},
    )
    assert response.headers["X-Request-ID"] == "abc123"
