"""Unit tests for the per-section blueprint chunker."""

import pytest

from blueprint_intel.ingestion.chunker import (
    _text,
    chunk_blueprint,
    chunk_competitor_analysis,
    chunk_cross_analysis,
    chunk_industry_market_overview,
    chunk_offer_analysis,
    chunk_section,
)
from blueprint_intel.models.enums import SECTION_ORDER, BlueprintSection, ContentType

from conftest import SAMPLE_CHUNK_COUNTS


def _by_path(chunks):
    return {c.field_path: c for c in chunks}


class TestText:
    """Test scalar rendering used inside chunk sentences."""

    def test_booleans_render_as_yes_no(self):
        assert _text(True) == "yes"
        assert _text(False) == "no"

    def test_none_and_dict_render_empty(self):
        assert _text(None) == ""
        assert _text({"a": 1}) == ""

    def test_lists_join_with_commas(self):
        assert _text(["a", None, "b"]) == "a, b"

    def test_numbers_render_plainly(self):
        assert _text(7) == "7"
        assert _text(6.2) == "6.2"


class TestChunkBlueprint:
    """Test whole-document chunking."""

    def test_produces_expected_counts_per_section(self, sample_blueprint):
        chunks = chunk_blueprint("bp-1", sample_blueprint)
        assert len(chunks) == sum(SAMPLE_CHUNK_COUNTS.values())
        for section, expected in SAMPLE_CHUNK_COUNTS.items():
            assert len([c for c in chunks if c.section == section]) == expected

    def test_chunks_follow_document_section_order(self, sample_blueprint):
        chunks = chunk_blueprint("bp-1", sample_blueprint)
        order = [SECTION_ORDER.index(c.section) for c in chunks]
        assert order == sorted(order)

    def test_every_chunk_carries_blueprint_id_and_title(self, sample_blueprint):
        for chunk in chunk_blueprint("bp-42", sample_blueprint):
            assert chunk.blueprint_id == "bp-42"
            assert chunk.metadata.section_title
            assert chunk.metadata.field_description
            assert chunk.content

    def test_chunking_is_deterministic(self, sample_blueprint):
        first = [(c.section, c.field_path, c.content) for c in chunk_blueprint("bp-1", sample_blueprint)]
        second = [(c.section, c.field_path, c.content) for c in chunk_blueprint("bp-1", sample_blueprint)]
        assert first == second

    def test_field_paths_are_unique(self, sample_blueprint):
        keys = [c.key for c in chunk_blueprint("bp-1", sample_blueprint)]
        assert len(keys) == len(set(keys))

    def test_missing_section_is_skipped(self, sample_blueprint):
        del sample_blueprint["competitorAnalysis"]
        chunks = chunk_blueprint("bp-1", sample_blueprint)
        assert all(c.section != BlueprintSection.COMPETITOR_ANALYSIS for c in chunks)
        assert len(chunks) == sum(SAMPLE_CHUNK_COUNTS.values()) - 8

    def test_non_dict_blueprint_yields_nothing(self):
        assert chunk_blueprint("bp-1", None) == []
        assert chunk_blueprint("bp-1", ["not", "a", "blueprint"]) == []


class TestChunkSection:
    """Test one-section dispatch and its failure handling."""

    def test_non_dict_section_yields_nothing(self):
        assert chunk_section("bp-1", BlueprintSection.ICP_ANALYSIS_VALIDATION, "oops") == []

    def test_malformed_sub_fields_degrade_to_empty_text(self):
        data = {
            "categorySnapshot": "not an object",
            "painPoints": {"primary": "not a list"},
            "psychologicalDrivers": None,
        }
        chunks = chunk_industry_market_overview("bp-1", data)
        paths = _by_path(chunks)
        assert "categorySnapshot" in paths
        assert paths["categorySnapshot"].metadata.original_value == "not an object"
        assert not any(p.startswith("painPoints") for p in paths)

    def test_empty_section_still_yields_composite_chunks(self):
        chunks = chunk_section("bp-1", BlueprintSection.ICP_ANALYSIS_VALIDATION, {})
        assert [c.field_path for c in chunks] == [
            "coherenceCheck",
            "painSolutionFit",
            "marketReachability",
            "economicFeasibility",
            "riskAssessment",
            "finalVerdict",
        ]


class TestIndustryMarketOverview:

    def test_pain_points_are_one_chunk_each(self, sample_blueprint):
        paths = _by_path(chunk_industry_market_overview(
            "bp-1", sample_blueprint["industryMarketOverview"]
        ))
        primary = paths["painPoints.primary[0]"]
        assert primary.content == "Primary Pain Point: Teams lose track of deadlines across tools"
        assert primary.content_type == ContentType.STRING
        assert primary.metadata.is_editable
        assert primary.metadata.original_value == "Teams lose track of deadlines across tools"
        assert paths["painPoints.secondary[0]"].content.startswith("Secondary Pain Point: ")

    def test_category_snapshot_is_a_single_sentence(self, sample_blueprint):
        paths = _by_path(chunk_industry_market_overview(
            "bp-1", sample_blueprint["industryMarketOverview"]
        ))
        snapshot = paths["categorySnapshot"]
        assert snapshot.content.startswith("Category Snapshot for B2B SaaS project management")
        assert "30-60 days" in snapshot.content
        assert not snapshot.metadata.is_editable

    def test_objection_content_quotes_objection(self, sample_blueprint):
        paths = _by_path(chunk_industry_market_overview(
            "bp-1", sample_blueprint["industryMarketOverview"]
        ))
        objection = paths["audienceObjections.objections[1]"]
        assert objection.content == (
            'Objection: "Too expensive". How to address: Anchor against missed deadline costs'
        )

    def test_messaging_opportunities_include_opportunities(self, sample_blueprint):
        paths = _by_path(chunk_industry_market_overview(
            "bp-1", sample_blueprint["industryMarketOverview"]
        ))
        content = paths["messagingOpportunities"].content
        assert "Deadline certainty; One source of truth" in content
        assert "Lead with visibility; Use customer proof" in content


class TestOfferAnalysis:

    def test_each_score_is_its_own_chunk(self, sample_blueprint):
        paths = _by_path(chunk_offer_analysis("bp-1", sample_blueprint["offerAnalysisViability"]))
        assert paths["offerStrength.painRelevance"].content == "Offer Strength - Pain Relevance: 8/10"
        assert paths["offerStrength.painRelevance"].content_type == ContentType.NUMBER
        assert paths["offerStrength.painRelevance"].metadata.original_value == 8

    def test_overall_score_is_not_editable(self, sample_blueprint):
        paths = _by_path(chunk_offer_analysis("bp-1", sample_blueprint["offerAnalysisViability"]))
        overall = paths["offerStrength.overallScore"]
        assert overall.content == "Offer Strength Overall Score: 6.2/10"
        assert not overall.metadata.is_editable

    def test_empty_red_flags_are_skipped(self, sample_blueprint):
        data = sample_blueprint["offerAnalysisViability"]
        data["redFlags"] = []
        paths = _by_path(chunk_offer_analysis("bp-1", data))
        assert "redFlags" not in paths

    def test_booleans_read_as_yes_no(self, sample_blueprint):
        paths = _by_path(chunk_offer_analysis("bp-1", sample_blueprint["offerAnalysisViability"]))
        assert "Transformation measurable: no" in paths["offerClarity"].content
        assert "Clearly articulated: yes" in paths["offerClarity"].content


class TestCompetitorAnalysis:

    def test_one_chunk_per_competitor(self, sample_blueprint):
        chunks = chunk_competitor_analysis("bp-1", sample_blueprint["competitorAnalysis"])
        paths = _by_path(chunks)
        asana = paths["competitors[0]"]
        assert asana.content.startswith("Competitor: Asana.")
        assert "Ad platforms: Meta, Google." in asana.content
        assert asana.metadata.field_description == "Competitive analysis of Asana"
        assert "competitors[1]" in paths

    def test_unnamed_competitor_gets_placeholder_name(self):
        chunks = chunk_competitor_analysis("bp-1", {"competitors": [{"positioning": "Cheap"}]})
        assert _by_path(chunks)["competitors[0]"].content.startswith("Competitor: competitor #1.")

    def test_ad_hooks_chunk(self, sample_blueprint):
        paths = _by_path(chunk_competitor_analysis("bp-1", sample_blueprint["competitorAnalysis"]))
        assert paths["creativeLibrary.adHooks"].content == (
            "Competitor Ad Hooks: Stop missing deadlines; Your team, finally in sync"
        )


class TestCrossAnalysis:

    def test_positioning_chunk(self, sample_blueprint):
        paths = _by_path(chunk_cross_analysis("bp-1", sample_blueprint["crossAnalysisSynthesis"]))
        positioning = paths["recommendedPositioning"]
        assert positioning.content == (
            "Recommended Positioning: The project tool that guarantees you never miss a deadline"
        )
        assert positioning.content_type == ContentType.STRING
        assert positioning.metadata.is_editable

    def test_next_steps_join_with_semicolons(self, sample_blueprint):
        paths = _by_path(chunk_cross_analysis("bp-1", sample_blueprint["crossAnalysisSynthesis"]))
        assert paths["nextSteps"].content == (
            "Recommended Next Steps: Build case studies; Launch LinkedIn pilot"
        )
        assert paths["nextSteps"].metadata.original_value == [
            "Build case studies", "Launch LinkedIn pilot",
        ]

    def test_platforms_and_insights_per_item(self, sample_blueprint):
        paths = _by_path(chunk_cross_analysis("bp-1", sample_blueprint["crossAnalysisSynthesis"]))
        assert paths["recommendedPlatforms[0]"].content == (
            "Recommended Platform: LinkedIn (primary). Reasoning: Reaches ops leaders"
        )
        assert paths["keyInsights[1]"].content.startswith("Key Insight (medium priority): ")

    @pytest.mark.parametrize("key", ["primaryMessagingAngles", "potentialBlockers"])
    def test_optional_lists_skipped_when_empty(self, sample_blueprint, key):
        data = sample_blueprint["crossAnalysisSynthesis"]
        data[key] = []
        assert key not in _by_path(chunk_cross_analysis("bp-1", data))
