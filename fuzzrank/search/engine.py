from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from fuzzrank.constants import (
    CATEGORY_WEIGHT,
    DEFAULT_THRESHOLD,
    DESCRIPTION_WEIGHT,
    MAX_RECORD_SCORE,
    TITLE_WEIGHT,
)
from fuzzrank.logging import get_logger
from fuzzrank.search.similarity import similarity
from fuzzrank.search.types import Record, ScoredRecord, SearchResponse

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RankingConfig:
    title_weight: float = TITLE_WEIGHT
    description_weight: float = DESCRIPTION_WEIGHT
    category_weight: float = CATEGORY_WEIGHT
    threshold: float = DEFAULT_THRESHOLD


def tokenize(query: Any) -> list[str]:
    if query is None:
        return []
    text = query if isinstance(query, str) else str(query)
    return text.lower().split()


class RankingEngine:
    def __init__(self, config: RankingConfig | None = None):
        self.config = config or RankingConfig()

    def score_word(self, record: Record, word: str) -> float:
        # Best single field wins; fields are never summed.
        return max(
            similarity(record.title, word) * self.config.title_weight,
            similarity(record.description, word) * self.config.description_weight,
            similarity(record.category, word) * self.config.category_weight,
        )

    def score_record(self, record: Record, words: Sequence[str]) -> float:
        """Aggregate per-word scores into a final score in [0, 1].

        The running sum is capped after every word, then divided by the word
        count, so a two-word query whose first word already saturates the cap
        cannot exceed 0.5.
        """
        score = 0.0
        for word in words:
            score = min(MAX_RECORD_SCORE, score + self.score_word(record, word))
        return score / max(1, len(words))

    def search(
        self,
        records: Iterable[Any],
        query: Any,
        threshold: float | None = None,
    ) -> SearchResponse:
        payloads = list(records)
        words = tokenize(query)

        if not words:
            return SearchResponse(results=payloads, total_results=len(payloads))

        if threshold is None:
            threshold = self.config.threshold

        scored = [
            ScoredRecord(record=record, score=self.score_record(record, words), index=i)
            for i, record in enumerate(Record.from_payload(p) for p in payloads)
        ]
        matches = [s for s in scored if s.score >= threshold]
        matches.sort(key=lambda s: (-s.score, s.index))

        _logger.debug(
            "Search complete",
            records=len(payloads),
            words=len(words),
            matches=len(matches),
            threshold=threshold,
        )

        return SearchResponse(
            results=[s.record.payload for s in matches],
            total_results=len(matches),
        )


def search(
    records: Iterable[Any],
    query: Any,
    threshold: float | None = None,
    config: RankingConfig | None = None,
) -> SearchResponse:
    return RankingEngine(config).search(records, query, threshold)
