from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from fuzzrank import __version__
from fuzzrank.logging import configure_logging, get_logger
from fuzzrank.search import DispatchError, SearchRequest
from fuzzrank.server.runtime import get_runtime, get_runtime_async, reset_runtime
from fuzzrank.server.schemas import SearchBody, SearchResults

_logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    runtime = await get_runtime_async()
    configure_logging(runtime.config.log_level)
    yield
    await reset_runtime()


app = FastAPI(
    title="fuzzrank",
    description="Fuzzy listing search - API server",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def _run(request: SearchRequest) -> SearchResults:
    runtime = get_runtime()
    try:
        response = await runtime.worker.search(request)
    except DispatchError as e:
        _logger.warning("Search dispatch failed: %s", e)
        raise HTTPException(status_code=503, detail="Search worker unavailable") from e
    return SearchResults(results=response.results, total_results=response.total_results)


def _category_key(record: dict) -> str | None:
    value = record.get("category_id")
    if value is None:
        value = record.get("category")
    return None if value is None else str(value)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.post("/search", response_model=SearchResults)
async def search_records(body: SearchBody):
    return await _run(SearchRequest(records=body.records, query=body.query, threshold=body.threshold))


@app.get("/search", response_model=SearchResults)
async def search_loaded(
    response: Response,
    q: str = "",
    threshold: float | None = Query(default=None, ge=0, le=1),
    category: str | None = None,
):
    runtime = get_runtime()
    records = runtime.records
    if category is not None:
        records = [r for r in records if _category_key(r) == category]

    results = await _run(SearchRequest(records=records, query=q, threshold=threshold))
    response.headers["X-Total-Count"] = str(results.total_results)
    return results
