"""
Tests for the campaigns API endpoints (/api/v2/campaigns).
"""
import pytest

from app.services.segment_engine import count_matches, filter_customers
from tests.factories import REFERENCE_DATE

CAMPAIGNS_PREFIX = "/api/v2/campaigns"


def _payload(**overrides):
    payload = {
        "name": "Loyalty Push",
        "message": "Thanks for shopping with us!",
        "segmentRules": [
            {"field": "totalSpent", "operator": ">", "value": 500, "conjunction": "AND"},
            {"field": "tag", "operator": "contains", "value": "frequent_buyer"},
        ],
    }
    payload.update(overrides)
    return payload


class TestListCampaigns:
    """Tests for GET /campaigns."""

    @pytest.mark.asyncio
    async def test_seed_campaigns_listed(self, client):
        response = await client.get(CAMPAIGNS_PREFIX)
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 3
        assert [c["name"] for c in data["items"]] == [
            "High Value Customers",
            "Win-back Campaign",
            "New Summer Collection",
        ]
        assert data["items"][0]["segmentRules"][0]["field"] == "totalSpent"

    @pytest.mark.asyncio
    async def test_filter_by_status(self, client):
        response = await client.get(CAMPAIGNS_PREFIX, params={"status": "draft"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "New Summer Collection"


class TestCreateCampaign:
    """Tests for POST /campaigns."""

    @pytest.mark.asyncio
    async def test_create_counts_audience_at_save(self, client, store):
        response = await client.post(CAMPAIGNS_PREFIX, json=_payload())
        assert response.status_code == 201

        data = response.json()
        expected = count_matches(store.get_customers(), _payload()["segmentRules"], REFERENCE_DATE)
        assert data["audienceSize"] == expected
        assert data["status"] == "draft"
        assert data["sentCount"] == 0
        assert data["createdAt"] == REFERENCE_DATE.isoformat()
        assert data["segmentRules"][0]["conjunction"] == "AND"
        assert data["segmentRules"][0]["id"]

    @pytest.mark.asyncio
    async def test_created_campaign_is_listed(self, client):
        created = (await client.post(CAMPAIGNS_PREFIX, json=_payload(name="Listed"))).json()

        response = await client.get(CAMPAIGNS_PREFIX)
        ids = [c["id"] for c in response.json()["items"]]
        assert ids[-1] == created["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"name": "   "},
        {"message": ""},
        {"segmentRules": []},
        {"segmentRules": [{"field": "lastPurchase", "operator": "contains", "value": 30}]},
    ])
    async def test_invalid_campaign_rejected(self, client, store, overrides):
        before = len(store.get_campaigns())

        response = await client.post(CAMPAIGNS_PREFIX, json=_payload(**overrides))

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert len(store.get_campaigns()) == before

    @pytest.mark.asyncio
    async def test_blank_name_message(self, client):
        response = await client.post(CAMPAIGNS_PREFIX, json=_payload(name=" "))
        messages = [e["message"] for e in response.json()["errors"]]
        assert any("Campaign name is required" in m for m in messages)


class TestCampaignDetail:
    """Tests for GET /campaigns/{id}."""

    @pytest.mark.asyncio
    async def test_detail_recounts_audience(self, client, store):
        campaign = store.get_campaigns()[1]

        response = await client.get(f"{CAMPAIGNS_PREFIX}/{campaign.id}")
        assert response.status_code == 200

        data = response.json()
        expected = filter_customers(store.get_customers(), campaign.segment_rules, REFERENCE_DATE)
        assert data["campaign"]["audienceSize"] == 180
        assert data["currentAudienceSize"] == len(expected)
        assert [c["id"] for c in data["targetedCustomers"]] == [c.id for c in expected[:10]]
        assert data["ruleDescriptions"] == [
            "last purchase is greater than 90",
            "AND total spent is greater than 500",
        ]

    @pytest.mark.asyncio
    async def test_delivery_rate(self, client, store):
        campaign = store.get_campaigns()[0]
        response = await client.get(f"{CAMPAIGNS_PREFIX}/{campaign.id}")
        assert response.json()["deliveryRate"] == 93.9

    @pytest.mark.asyncio
    async def test_draft_has_no_delivery_rate(self, client, store):
        campaign = store.get_campaigns()[2]
        response = await client.get(f"{CAMPAIGNS_PREFIX}/{campaign.id}")
        assert response.json()["deliveryRate"] is None

    @pytest.mark.asyncio
    async def test_detail_preview_limit(self, client, store):
        campaign = store.get_campaigns()[0]
        response = await client.get(f"{CAMPAIGNS_PREFIX}/{campaign.id}", params={"preview_limit": 2})
        assert len(response.json()["targetedCustomers"]) <= 2

    @pytest.mark.asyncio
    async def test_unknown_campaign(self, client):
        response = await client.get(f"{CAMPAIGNS_PREFIX}/does-not-exist")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("application/problem+json")
        problem = response.json()
        assert problem["code"] == "RES_001"
        assert problem["instance"] == f"{CAMPAIGNS_PREFIX}/does-not-exist"
        assert "does-not-exist" in problem["detail"]
