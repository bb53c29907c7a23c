from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ErrorInfo(ResultModel):
    type: str
    message: str
    hint: str | None = None
    details: dict[str, Any] | None = None


class CommandMeta(ResultModel):
    duration_ms: int = Field(..., alias="durationMs")
    fields_source: str | None = Field(None, alias="fieldsSource")


class CommandResult(ResultModel):
    ok: bool
    command: str
    data: Any | None = None
    warnings: list[str] = Field(default_factory=list)
    meta: CommandMeta
    error: ErrorInfo | None = None
