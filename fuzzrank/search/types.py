from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Legacy listing exports stored the category label under this key
_CATEGORY_FALLBACK_KEY = "category_name"


def _field(payload: Any, name: str) -> Any:
    if isinstance(payload, Mapping):
        return payload.get(name)
    return getattr(payload, name, None)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Record:
    """Normalized view over a caller-supplied record.

    Only the three text fields are read; the payload is carried through
    untouched and is what search results hand back.
    """

    payload: Any
    title: str = ""
    description: str = ""
    category: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "Record":
        category = _field(payload, "category")
        if category is None:
            category = _field(payload, _CATEGORY_FALLBACK_KEY)
        return cls(
            payload=payload,
            title=_text(_field(payload, "title")),
            description=_text(_field(payload, "description")),
            category=_text(category),
        )


@dataclass
class ScoredRecord:
    """Internal pairing of a record with its final score and input position."""

    record: Record
    score: float
    index: int


@dataclass
class SearchRequest:
    records: list[Any]
    query: str = ""
    threshold: float | None = None


@dataclass
class SearchResponse:
    results: list[Any] = field(default_factory=list)
    total_results: int = 0
