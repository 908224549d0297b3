from fuzzrank.search.engine import RankingConfig, RankingEngine, search, tokenize
from fuzzrank.search.similarity import levenshtein_distance, similarity
from fuzzrank.search.types import Record, ScoredRecord, SearchRequest, SearchResponse
from fuzzrank.search.worker import DispatchError, SearchDispatcher, SearchWorker, WorkerMode

__all__ = [
    "DispatchError",
    "RankingConfig",
    "RankingEngine",
    "Record",
    "ScoredRecord",
    "SearchDispatcher",
    "SearchRequest",
    "SearchResponse",
    "SearchWorker",
    "WorkerMode",
    "levenshtein_distance",
    "search",
    "similarity",
    "tokenize",
]
