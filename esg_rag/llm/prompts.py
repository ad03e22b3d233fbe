"""Prompt templates for query expansion and answer generation."""

from __future__ import annotations

from typing import Iterable

from esg_rag.models.search import SourcedDocument

QUERY_EXPANSION_PROMPT = (
    "Task: Transform original query into four specific queries: SemanticQuery, "
    "FulltextQueryENG, FulltextQueryChiSim and FulltextQueryChiTra."
)


def _keyword_list(title: str, language: str) -> dict:
    return {
        "title": title,
        "description": (
            f"A query list for full-text search in {language}, "
            "including original names and synonyms."
        ),
        "type": "array",
        "items": {"type": "string"},
    }


EXPANDED_QUERY_SCHEMA = {
    "type": "object",
    "properties": {
        "semantic_query": {
            "title": "SemanticQuery",
            "description": "A query for semantic retrieval in query's original language.",
            "type": "string",
        },
        "fulltext_query_eng": _keyword_list("FulltextQueryENG", "English"),
        "fulltext_query_chi_sim": _keyword_list("FulltextQueryChiSim", "Simplified Chinese"),
        "fulltext_query_chi_tra": _keyword_list("FulltextQueryChiTra", "Traditional Chinese"),
    },
    "required": [
        "semantic_query",
        "fulltext_query_eng",
        "fulltext_query_chi_sim",
        "fulltext_query_chi_tra",
    ],
    "additionalProperties": False,
}


def build_expansion_prompt(query: str) -> str:
    return f"Original query: {query.strip()}"


SYSTEM_PROMPT = """You are an ESG research assistant.
Use only the provided sources to answer the question.
Cite every statement with the matching [Source #] marker.
Answer in the language of the question.
Do not fabricate data. If the sources are insufficient, say so explicitly."""


def format_source_block(index: int, document: SourcedDocument) -> str:
    return f"[Source {index}] {document.source}\n{document.content.strip()}"


def build_user_prompt(question: str, documents: Iterable[SourcedDocument]) -> str:
    source_sections = "\n\n".join(
        format_source_block(idx, document) for idx, document in enumerate(documents, start=1)
    )
    return f"""Question:
{question.strip()}

Sources:
{source_sections}

Instructions:
- Support every conclusion with a citation such as [Source 1].
- Prefer figures and dates exactly as they appear in the sources."""
