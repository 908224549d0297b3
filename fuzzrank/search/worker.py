import asyncio
import copy
import multiprocessing
import pickle
from collections.abc import Awaitable, Callable
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from enum import StrEnum
from typing import TypeAlias

from fuzzrank.logging import get_logger
from fuzzrank.search.engine import RankingConfig, RankingEngine
from fuzzrank.search.types import SearchRequest, SearchResponse

ResultCallback: TypeAlias = Callable[[SearchResponse], None | Awaitable[None]]
ErrorCallback: TypeAlias = Callable[[BaseException], None | Awaitable[None]]

_logger = get_logger(__name__)


class WorkerMode(StrEnum):
    THREAD = "thread"  # dedicated background thread, request deep-copied in
    PROCESS = "process"  # dedicated subprocess, request pickled across


class DispatchError(RuntimeError):
    """The worker could not run a request: not started, shut down, or crashed."""


def _run_search(config: RankingConfig, request: SearchRequest) -> SearchResponse:
    return RankingEngine(config).search(request.records, request.query, request.threshold)


def _copy_and_run(config: RankingConfig, request: SearchRequest) -> SearchResponse:
    return _run_search(config, copy.deepcopy(request))


class SearchWorker:
    """Runs the ranking engine off the event loop, one request at a time.

    Requests cross into the worker by value, so the caller may keep mutating
    its own records while a search is running.
    """

    def __init__(
        self,
        config: RankingConfig | None = None,
        mode: WorkerMode | str = WorkerMode.THREAD,
    ):
        self.config = config or RankingConfig()
        self.mode = WorkerMode(mode)
        self._executor: Executor | None = None

    @property
    def is_running(self) -> bool:
        return self._executor is not None

    def start(self) -> None:
        if self._executor is not None:
            return
        if self.mode is WorkerMode.PROCESS:
            self._executor = ProcessPoolExecutor(
                max_workers=1,
                mp_context=multiprocessing.get_context("spawn"),
            )
        else:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fuzzrank-search")
        _logger.info("Search worker started", mode=self.mode.value)

    def close(self) -> None:
        if self._executor is None:
            return
        self._executor.shutdown(wait=True, cancel_futures=True)
        self._executor = None
        _logger.info("Search worker stopped", mode=self.mode.value)

    async def __aenter__(self) -> "SearchWorker":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await asyncio.to_thread(self.close)

    async def search(self, request: SearchRequest) -> SearchResponse:
        executor = self._executor
        if executor is None:
            raise DispatchError("Search worker is not running")

        # Snapshot the record list here; the deep copy runs on the worker thread
        payload = SearchRequest(records=list(request.records), query=request.query, threshold=request.threshold)
        run = _run_search if self.mode is WorkerMode.PROCESS else _copy_and_run
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(executor, run, self.config, payload)
        except BrokenProcessPool as e:
            _logger.error("Search worker process died", exc_info=True)
            raise DispatchError("Search worker process died") from e
        except (pickle.PicklingError, copy.Error, TypeError, AttributeError) as e:
            raise DispatchError(f"Search request could not be transferred: {e}") from e
        except RuntimeError as e:
            # Executor shut down between the check above and submission
            raise DispatchError(str(e)) from e

    def post(
        self,
        request: SearchRequest,
        on_result: ResultCallback,
        on_error: ErrorCallback | None = None,
    ) -> asyncio.Task[None]:
        """Fire-and-forget variant of search(); delivers the response to a callback."""
        return asyncio.create_task(self._deliver(request, on_result, on_error))

    async def _deliver(
        self,
        request: SearchRequest,
        on_result: ResultCallback,
        on_error: ErrorCallback | None,
    ) -> None:
        try:
            response = await self.search(request)
        except DispatchError as e:
            if on_error is None:
                _logger.exception("Search dispatch failed")
                return
            await self._call(on_error, e)
            return

        await self._call(on_result, response)

    async def _call(self, handler: Callable, value) -> None:
        try:
            result = handler(value)
            if result is not None:
                await result
        except Exception:
            _logger.exception("Search callback %s failed", getattr(handler, "__qualname__", repr(handler)))


class SearchDispatcher:
    """Host-side sequencing over a worker.

    Every dispatch gets the next sequence number; a response whose number is
    no longer the latest is dropped and dispatch() returns None.
    """

    def __init__(self, worker: SearchWorker):
        self.worker = worker
        self._seq = 0

    @property
    def latest(self) -> int:
        return self._seq

    async def dispatch(self, request: SearchRequest) -> SearchResponse | None:
        self._seq += 1
        seq = self._seq

        response = await self.worker.search(request)

        if seq != self._seq:
            _logger.debug("Dropping stale search response", seq=seq, latest=self._seq)
            return None
        return response
