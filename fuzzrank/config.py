import json
import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fuzzrank.constants import CATEGORY_WEIGHT, DEFAULT_THRESHOLD, DESCRIPTION_WEIGHT, TITLE_WEIGHT
from fuzzrank.logging import get_logger
from fuzzrank.search.engine import RankingConfig
from fuzzrank.search.worker import WorkerMode

FUZZRANK_DIR = Path.home() / ".fuzzrank"
SETTINGS_PATH = FUZZRANK_DIR / "settings.json"

_logger = get_logger(__name__)


def load_user_settings() -> dict:
    if not SETTINGS_PATH.exists():
        return {}
    try:
        return json.loads(SETTINGS_PATH.read_text())
    except (json.JSONDecodeError, OSError):
        _logger.warning("Failed to load user settings", exc_info=True)
        return {}


def save_user_settings(settings: dict) -> None:
    FUZZRANK_DIR.mkdir(exist_ok=True)
    persisted = {k: v for k, v in settings.items() if k in PERSIST_KEYS}
    SETTINGS_PATH.write_text(json.dumps(persisted, indent=2, default=str))


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FUZZRANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        populate_by_name=True,
    )

    # Field weights, applied before the per-word max across fields
    title_weight: float = Field(default=TITLE_WEIGHT, ge=0)
    description_weight: float = Field(default=DESCRIPTION_WEIGHT, ge=0)
    category_weight: float = Field(default=CATEGORY_WEIGHT, ge=0)

    threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0, le=1)

    worker_mode: WorkerMode = WorkerMode.THREAD
    log_level: str = "INFO"

    # JSON array of records served by GET /search (optional)
    records_path: Path | None = None

    @field_validator("worker_mode", mode="before")
    @classmethod
    def _normalize_worker_mode(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("records_path", mode="before")
    @classmethod
    def _normalize_records_path(cls, v):
        if v in ("", "none"):
            return None
        return v

    @property
    def ranking(self) -> RankingConfig:
        return RankingConfig(
            title_weight=self.title_weight,
            description_weight=self.description_weight,
            category_weight=self.category_weight,
            threshold=self.threshold,
        )


PERSIST_KEYS = frozenset(
    {
        "title_weight",
        "description_weight",
        "category_weight",
        "threshold",
        "worker_mode",
        "log_level",
        "records_path",
    }
)


def get_config() -> Config:
    settings = load_user_settings()

    # Build config: init args (settings.json) > env vars > defaults
    overrides = {k: settings[k] for k in PERSIST_KEYS if k in settings}
    return Config(**overrides)
