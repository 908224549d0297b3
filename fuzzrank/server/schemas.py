from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SearchBody(BaseModel):
    records: list[dict[str, Any]] = Field(default_factory=list)
    query: str = ""
    threshold: float | None = Field(default=None, ge=0, le=1)


class SearchResults(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: list[dict[str, Any]]
    total_results: int = Field(alias="totalResults")
