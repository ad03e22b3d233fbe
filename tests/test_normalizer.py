"""Tests for mapping provider hits onto DocumentChunk."""

from types import SimpleNamespace

from conftest import fulltext_hit, mget_doc, vector_hit

from esg_rag.domains import DOMAINS
from esg_rag.retrieval.normalizer import from_fulltext_hit, from_mget_doc, from_vector_hit

ESG = DOMAINS["esg"]
PATENT = DOMAINS["patent"]


class TestFromVectorHit:
    def test_reads_payload(self):
        hit = vector_hit("doc1_3", rec_id="doc1", text="Forest cover fell.", page_number=4)

        chunk = from_vector_hit(hit, ESG)

        assert chunk.chunk_id == "doc1_3"
        assert chunk.doc_id == "doc1"
        assert chunk.sort_ordinal == 3
        assert chunk.text == "Forest cover fell."
        assert chunk.source_fields == {"rec_id": "doc1", "page_number": 4}

    def test_falls_back_to_point_id(self):
        hit = SimpleNamespace(id="doc9_0", payload={"text": "x"})

        chunk = from_vector_hit(hit, ESG)

        assert chunk.chunk_id == "doc9_0"
        assert chunk.doc_id == "doc9_0"

    def test_hit_without_payload_is_skipped(self):
        assert from_vector_hit(SimpleNamespace(id=1, payload=None), ESG) is None

    def test_domain_text_and_doc_id_fields(self):
        hit = vector_hit("JP123_0", patent_id="JP123", abstract="A tunnel.", country="Japan")

        chunk = from_vector_hit(hit, PATENT)

        assert chunk.doc_id == "JP123"
        assert chunk.text == "A tunnel."
        assert "abstract" not in chunk.source_fields


class TestFromFulltextHit:
    def test_reads_source(self):
        chunk = from_fulltext_hit(fulltext_hit("doc2_1", rec_id="doc2", text="Palm oil."), ESG)

        assert chunk.chunk_id == "doc2_1"
        assert chunk.doc_id == "doc2"
        assert chunk.text == "Palm oil."

    def test_missing_source_is_skipped(self):
        assert from_fulltext_hit({"_id": "doc2_1"}, ESG) is None


class TestFromMgetDoc:
    def test_not_found_is_none(self):
        assert from_mget_doc(mget_doc("doc2_9", found=False), ESG) is None

    def test_found(self):
        chunk = from_mget_doc(mget_doc("doc2_2", rec_id="doc2", text="Soy."), ESG)

        assert chunk.sort_ordinal == 2
        assert chunk.text == "Soy."
