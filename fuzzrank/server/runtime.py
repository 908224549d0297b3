import asyncio
from typing import Any

from fuzzrank.config import Config, get_config
from fuzzrank.logging import get_logger
from fuzzrank.records import load_records
from fuzzrank.search import SearchWorker

_logger = get_logger(__name__)


class Runtime:
    def __init__(self, config: Config | None = None, records: list[dict[str, Any]] | None = None):
        self.config = config or get_config()
        self.worker = SearchWorker(config=self.config.ranking, mode=self.config.worker_mode)
        self.records: list[dict[str, Any]] = records if records is not None else []
        self._connected = False

    async def connect(self) -> None:
        if self._connected:
            return
        if self.config.records_path is not None and not self.records:
            self.records = await asyncio.to_thread(load_records, self.config.records_path)
            _logger.info("Loaded records", count=len(self.records), path=str(self.config.records_path))
        self.worker.start()
        self._connected = True

    async def close(self) -> None:
        if not self._connected:
            return
        await asyncio.to_thread(self.worker.close)
        self._connected = False


_runtime: Runtime | None = None
_runtime_lock = asyncio.Lock()


async def get_runtime_async() -> Runtime:
    global _runtime
    async with _runtime_lock:
        if _runtime is None:
            _runtime = Runtime()
            await _runtime.connect()
    return _runtime


def get_runtime() -> Runtime:
    if _runtime is None:
        raise RuntimeError("Runtime not initialized. Call get_runtime_async() first.")
    if not _runtime._connected:
        raise RuntimeError("Runtime not connected. Call await runtime.connect() first.")
    return _runtime


async def reset_runtime() -> None:
    global _runtime
    if _runtime is not None:
        await _runtime.close()
        _runtime = None
