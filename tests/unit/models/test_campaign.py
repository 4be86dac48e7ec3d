"""Tests for campaign and analysis models."""

import pytest
from pydantic import ValidationError

from adinsight_mcp.models.analysis import ColumnResolution, ColumnRole
from adinsight_mcp.models.campaign import (
    UNNAMED_CAMPAIGN,
    Campaign,
    Platform,
    compute_cost_per_result,
    make_campaign_id,
)


class TestCampaign:
    """Test Campaign record validation."""

    def test_cost_per_result_is_derived(self):
        campaign = Campaign(id="c-0", name="A", spend=1000, results=10)
        assert campaign.cost_per_result == 100

    def test_cost_per_result_zero_without_results(self):
        campaign = Campaign(id="c-0", name="A", spend=1000, results=0)
        assert campaign.cost_per_result == 0

    def test_supplied_cost_per_result_is_kept(self):
        campaign = Campaign(
            id="g-0", name="A", spend=1000, results=10, cost_per_result=95.5
        )
        assert campaign.cost_per_result == 95.5

    def test_supplied_camel_case_cost_per_result(self):
        campaign = Campaign.model_validate(
            {"id": "g-0", "name": "A", "spend": 50, "results": 2, "costPerResult": 30}
        )
        assert campaign.cost_per_result == 30

    def test_zero_supplied_cost_per_result_is_derived(self):
        campaign = Campaign(id="g-0", name="A", spend=50, results=2, cost_per_result=0)
        assert campaign.cost_per_result == 25

    def test_metrics_are_normalized(self):
        campaign = Campaign(
            id="c-0", name="A", spend="1.234,56", results="12", reach="45.000"
        )
        assert campaign.spend == pytest.approx(1234.56)
        assert campaign.results == 12
        assert campaign.reach == 45000
        assert campaign.impressions == 0

    def test_name_is_cleaned(self):
        assert Campaign(id="c-0", name='  "Brand"  ').name == "Brand"

    @pytest.mark.parametrize("name", [None, "", '""', "   "])
    def test_empty_name_uses_placeholder(self, name):
        assert Campaign(id="c-0", name=name).name == UNNAMED_CAMPAIGN

    def test_default_status(self):
        assert Campaign(id="c-0", name="A").status == "Active"

    def test_records_are_immutable(self):
        campaign = Campaign(id="c-0", name="A")
        with pytest.raises(ValidationError):
            campaign.spend = 10

    def test_wire_format_uses_camel_case(self):
        wire = Campaign(id="c-0", name="A", spend=10, results=2).to_wire()
        assert wire == {
            "id": "c-0",
            "name": "A",
            "spend": 10.0,
            "results": 2.0,
            "costPerResult": 5.0,
            "reach": 0.0,
            "impressions": 0.0,
            "status": "Active",
        }


class TestHelpers:
    def test_compute_cost_per_result(self):
        assert compute_cost_per_result(100, 4) == 25
        assert compute_cost_per_result(100, 0) == 0
        assert compute_cost_per_result(100, -1) == 0

    def test_make_campaign_id(self):
        assert make_campaign_id("c-", 3) == "c-3"
        assert make_campaign_id("g-", 0) == "g-0"


class TestPlatform:
    def test_labels(self):
        assert Platform.GOOGLE.display_name == "Google Ads"
        assert Platform.META.display_name == "Meta Ads"
        assert Platform.GOOGLE.results_label == "Conversiones"
        assert Platform.META.results_label == "Resultados"

    def test_from_value(self):
        assert Platform("google") is Platform.GOOGLE


class TestColumnResolution:
    def test_missing_role_is_unresolved(self):
        resolution = ColumnResolution(
            delimiter=";", header_row=0, columns={ColumnRole.NAME: 0}
        )
        assert resolution.index_of(ColumnRole.NAME) == 0
        assert resolution.index_of(ColumnRole.SPEND) == -1
        assert ColumnRole.NAME not in resolution.unresolved_roles
        assert ColumnRole.SPEND in resolution.unresolved_roles

    def test_header_row_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            ColumnResolution(delimiter=",", header_row=-1)
