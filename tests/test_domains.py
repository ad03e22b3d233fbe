"""Tests for the per-endpoint domain registry."""

from esg_rag.domains import DOMAINS, configure_domains

VECTOR_ONLY = {"sci", "report", "patent"}


class TestRegistry:
    def test_every_endpoint_is_registered(self):
        assert {config.endpoint for config in DOMAINS.values()} == {
            "esg_search",
            "edu_search",
            "sci_search",
            "standard_search",
            "report_search",
            "patent_search",
            "green_deal_search",
            "internal_search",
        }

    def test_vector_only_domains_have_no_index(self):
        assert {name for name, config in DOMAINS.items() if not config.is_hybrid} == VECTOR_ONLY

    def test_prefilter_only_on_standard(self):
        assert [name for name, config in DOMAINS.items() if config.prefilter] == ["standard"]


class TestConfigureDomains:
    def test_overrides_names(self):
        configured = configure_domains({"esg": "esg-v2"}, {"esg": "esg-chunks", "sci": "ignored"})

        assert configured["esg"].namespace == "esg-v2"
        assert configured["esg"].fulltext_index == "esg-chunks"
        assert configured["sci"].fulltext_index is None
        assert configured["edu"] is DOMAINS["edu"]
        assert DOMAINS["esg"].namespace == "esg"
