from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


def ensure_mapping(payload: Any, context: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{context} expected mapping payload, got {type(payload).__name__}")
    return payload


def ensure_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    return []


def ensure_list_payload(payload: Any, context: str) -> list[Any]:
    """Like ``ensure_mapping`` for list bodies; an empty body is an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError(f"{context} expected list payload, got {type(payload).__name__}")
    return payload


@dataclass
class ApiResponse:
    """Outcome of one backend call.

    ``status_code`` is the HTTP status, or 0 when no usable response came back
    (network failure, undecodable body).
    """

    status_code: int
    data: Any = None
    error: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status_code == 200


@dataclass
class SendDocumentRequest:
    document: str
    tenant_ids: Sequence[str] = field(default_factory=list)
    year: int = 0
    month: int = 0

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValueError("month must be between 1 and 12")

    def to_json(self) -> dict[str, Any]:
        return {
            "document": self.document,
            "tenantIds": list(self.tenant_ids),
            "year": int(self.year),
            "month": int(self.month),
        }
