"""Render combined documents into ``{content, source}`` citations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from string import Formatter
from typing import Any, Dict, List, Mapping, Optional, Tuple

from esg_rag.models.chunk import CombinedDocument
from esg_rag.models.search import SourcedDocument

logger = logging.getLogger(__name__)

_formatter = Formatter()


def _from_timestamp(seconds: float, original: Any) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        logger.warning("Out-of-range timestamp %r left as-is", original)
        return None


def _to_utc_datetime(value: Any) -> Optional[datetime]:
    """Parse datetimes, dates, Unix seconds and ISO strings.

    Eight-digit strings are compact ``YYYYMMDD`` dates, not epoch seconds.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return _from_timestamp(value, value)
    text = str(value).strip()
    if len(text) == 8 and text.isdigit():
        try:
            return datetime.strptime(text, "%Y%m%d").replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        return _from_timestamp(seconds, value)
    try:
        return _to_utc_datetime(datetime.fromisoformat(text))
    except ValueError:
        logger.warning("Unparseable date value %r left as-is", value)
        return None


def format_date(value: Any) -> str:
    """Unix timestamp or date-like value as ``YYYY-MM-DD`` (UTC)."""
    parsed = _to_utc_datetime(value)
    return parsed.strftime("%Y-%m-%d") if parsed else ("" if value is None else str(value))


def format_month(value: Any) -> str:
    """Unix timestamp or date-like value as ``YYYY-MM`` (UTC)."""
    parsed = _to_utc_datetime(value)
    return parsed.strftime("%Y-%m") if parsed else ("" if value is None else str(value))


def split_tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return [tag.strip() for tag in str(value).split(",") if tag.strip()]


class _Context(dict):
    def __missing__(self, key: str) -> str:
        return ""


@dataclass(frozen=True)
class SourceFormatter:
    """Citation template plus the field conversions it needs."""

    template: str
    day_fields: Tuple[str, ...] = ()
    month_fields: Tuple[str, ...] = ()
    list_fields: Tuple[str, ...] = ()
    tag_field: Optional[str] = None

    def context(
        self,
        document: CombinedDocument,
        record: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        values: Dict[str, Any] = {**document.source_fields, **(record or {})}
        values["doc_id"] = document.doc_id
        for name in self.day_fields:
            if name in values:
                values[name] = format_date(values[name])
        for name in self.month_fields:
            if name in values:
                values[name] = format_month(values[name])
        for name in self.list_fields:
            if isinstance(values.get(name), (list, tuple)):
                values[name] = ", ".join(str(item) for item in values[name])
        return values

    def render(
        self,
        document: CombinedDocument,
        record: Optional[Mapping[str, Any]] = None,
    ) -> SourcedDocument:
        values = self.context(document, record)
        source = _formatter.vformat(self.template, (), _Context(values))
        tags = split_tags(values.get(self.tag_field)) if self.tag_field else None
        return SourcedDocument(content=document.text, source=source, tag=tags)
