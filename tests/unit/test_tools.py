import pytest

from campaignflow import ValidationError
from campaignflow.tools import (
    compare_kpi,
    create_campaign,
    default_producers,
    fetch_analytics,
    get_campaign_analytics,
    recommend_campaigns,
    simulate_campaign_kpis,
)
from campaignflow.tools.campaigns import _simple_hash


def test_simple_hash_matches_string_hash_arithmetic():
    assert _simple_hash("") == 0
    assert _simple_hash("a") == 97
    assert _simple_hash("ab") == 97 * 31 + 98


def test_simulated_kpis_are_deterministic():
    first = simulate_campaign_kpis("cmp_spring_sale")
    second = simulate_campaign_kpis("cmp_spring_sale")
    assert first == second
    assert 5000 <= first.impressions <= 450000
    assert 0.02 <= first.target_ctr <= 0.06
    assert first.clicks == int(first.impressions * first.ctr + 0.5)
    assert first.period == "last_30_days"


def test_simulated_kpis_for_known_seed():
    kpis = simulate_campaign_kpis("a")
    assert kpis.impressions == 5097
    assert kpis.target_ctr == 0.0204


def test_campaign_analytics_validates_ids():
    result = get_campaign_analytics("cmp_123")
    assert result.success is True
    assert result.data.campaign_id == "cmp_123"

    for bad_id in ["", "bad id!", "x" * 129]:
        result = get_campaign_analytics(bad_id)
        assert result.success is False
        assert result.error == "invalid_campaign_id"
        assert result.data is None
        assert result.message


def test_compare_kpi_counts_equal_as_above():
    assert compare_kpi(0.05, 0.04).status == "above_target"
    assert compare_kpi(0.04, 0.04).status == "above_target"
    assert compare_kpi(0.03, 0.04).status == "below_target"


def test_fetch_analytics_reports_only_requested_sources():
    report = fetch_analytics("last_7_days", ["ga", "instagram"])
    data = report.model_dump(exclude_none=True)
    assert set(data) == {"date_range", "ga", "instagram"}
    assert data["ga"]["users"] == 12500
    assert data["instagram"]["profile_visits"] == 1800


def test_recommendations_and_campaign_creation():
    ideas = recommend_campaigns("Facebook CTR is strong").ideas
    assert [i.duration_days for i in ideas] == [7, 7, 14]

    created = create_campaign("Spring Sale", 500.0)
    assert created.campaign_id.startswith("cmp_")
    assert created.status == "created"


@pytest.mark.asyncio
async def test_producers_validate_queries_and_omit_missing_fields():
    producers = default_producers()

    report = await producers["analytics"].fetch(
        {"date_range": "last_30_days", "sources": ["facebook"]}
    )
    assert set(report) == {"date_range", "facebook"}
    assert report["facebook"]["spend"] == 850

    with pytest.raises(ValidationError) as exc_info:
        await producers["analytics"].fetch({"date_range": "last_30_days", "sources": ["tiktok"]})
    assert exc_info.value.fields == ["sources.0"]

    result = await producers["campaign_analytics"].fetch({"campaign_id": "cmp_1"})
    assert result["success"] is True
    assert "error" not in result

    comparison = await producers["kpi_comparison"].fetch({"current_ctr": 0.01, "target_ctr": 0.02})
    assert comparison == {"status": "below_target"}
