"""Exception hierarchy shared by the retrieval pipeline and the HTTP layer."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors the API knows how to report."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class AuthenticationError(ServiceError):
    """Missing, undecodable or rejected credentials."""

    status_code = 401


class InvalidFilterError(ServiceError):
    """A request filter names a field the domain does not allow."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, {"field": field} if field else None)


class RecordNotFoundError(ServiceError):
    """A combined document has no matching metadata row."""

    def __init__(self, doc_id: str, table: str) -> None:
        super().__init__("Record not found", {"doc_id": doc_id, "table": table})
