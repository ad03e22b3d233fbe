"""Per-endpoint retrieval configuration.

Every search endpoint runs the same hybrid pipeline; what differs is where
its chunks live, which fields callers may filter on, whether citation
metadata is joined from the relational store or read from the search
payload, and how the citation is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional, Tuple

from esg_rag.retrieval.formatting import SourceFormatter
from esg_rag.retrieval.metadata import MetadataQuery, PrefilterQuery

ALL_LANGUAGES = ("chi_tra", "chi_sim", "eng")


@dataclass(frozen=True)
class DomainConfig:
    name: str
    namespace: str
    formatter: SourceFormatter
    fulltext_index: Optional[str] = None
    doc_id_field: str = "rec_id"
    text_field: str = "text"
    filter_fields: Tuple[str, ...] = ()
    range_fields: Tuple[str, ...] = ()
    metadata: Optional[MetadataQuery] = None
    prefilter: Optional[PrefilterQuery] = None
    languages: Tuple[str, ...] = ALL_LANGUAGES
    zero_match_message: str = "No documents match the requested metadata."
    zero_match_suggestion: str = "Try a broader meta_contains value or drop it."

    @property
    def endpoint(self) -> str:
        return f"{self.name}_search"

    @property
    def is_hybrid(self) -> bool:
        return self.fulltext_index is not None


DOMAINS: Dict[str, DomainConfig] = {
    config.name: config
    for config in (
        DomainConfig(
            name="esg",
            namespace="esg",
            fulltext_index="esg",
            filter_fields=("rec_id",),
            metadata=MetadataQuery(
                table="esg_meta",
                key_column="id",
                columns=("report_title", "company_name", "publication_date", "language"),
            ),
            formatter=SourceFormatter(
                template="{company_name}: **{report_title} (P{page_number})**. {publication_date}.",
                day_fields=("publication_date",),
            ),
        ),
        DomainConfig(
            name="edu",
            namespace="edu",
            fulltext_index="edu",
            filter_fields=("course",),
            languages=("chi_sim", "eng"),
            metadata=MetadataQuery(
                table="edu_meta",
                key_column="id",
                columns=("name", "chapter_number", "description"),
            ),
            formatter=SourceFormatter(
                template="{course}: **{name} (Ch. {chapter_number})**. {description}.",
            ),
        ),
        DomainConfig(
            name="sci",
            namespace="sci",
            doc_id_field="doi",
            filter_fields=("journal",),
            range_fields=("date",),
            metadata=MetadataQuery(table="journals", key_column="doi", columns=("title", "authors")),
            formatter=SourceFormatter(
                template="[{title}, {journal}. {authors}. {date}.](https://doi.org/{doi})",
                month_fields=("date",),
                list_fields=("authors",),
            ),
        ),
        DomainConfig(
            name="standard",
            namespace="standard",
            fulltext_index="standard",
            filter_fields=("rec_id", "standard_number", "organization"),
            range_fields=("effective_date",),
            languages=("chi_sim", "eng"),
            prefilter=PrefilterQuery(
                table="standards",
                key_column="id",
                search_columns=("title", "standard_number", "organization"),
            ),
            zero_match_message="No standards match the requested metadata.",
            zero_match_suggestion="Check the standard number or title in meta_contains.",
            formatter=SourceFormatter(
                template="{title}({standard_number}), {organization}. {effective_date}.",
                day_fields=("effective_date",),
            ),
        ),
        DomainConfig(
            name="report",
            namespace="report",
            metadata=MetadataQuery(
                table="reports",
                key_column="id",
                columns=("title", "issuing_organization", "release_date", "url"),
            ),
            formatter=SourceFormatter(
                template="[{title}, {issuing_organization}. {release_date}.](https://doi.org/{url})",
                day_fields=("release_date",),
            ),
        ),
        DomainConfig(
            name="patent",
            namespace="patent",
            doc_id_field="patent_id",
            text_field="abstract",
            filter_fields=("country",),
            range_fields=("publication_date",),
            formatter=SourceFormatter(
                template="[{title}, {doc_id}, {country}. {publication_date}.]({url})",
            ),
        ),
        DomainConfig(
            name="green_deal",
            namespace="green_deal",
            fulltext_index="green_deal",
            filter_fields=("rec_id", "issue_agency", "tags"),
            range_fields=("publish_date",),
            formatter=SourceFormatter(
                template="{issue_agency}: **{title}({document_id})**. {publish_date}",
                day_fields=("publish_date",),
                tag_field="tags",
            ),
        ),
        DomainConfig(
            name="internal",
            namespace="internal",
            fulltext_index="internal",
            filter_fields=("rec_id",),
            formatter=SourceFormatter(template="**{title}**."),
        ),
    )
}


def configure_domains(
    namespaces: Mapping[str, str],
    indices: Mapping[str, str],
) -> Dict[str, DomainConfig]:
    """Return the registry with deployment-specific collection/index names applied."""
    configured: Dict[str, DomainConfig] = {}
    for name, config in DOMAINS.items():
        overrides = {}
        if name in namespaces:
            overrides["namespace"] = namespaces[name]
        if name in indices and config.is_hybrid:
            overrides["fulltext_index"] = indices[name]
        configured[name] = replace(config, **overrides) if overrides else config
    return configured
