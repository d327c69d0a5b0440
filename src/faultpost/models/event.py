"""Report event models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Level(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Frame(BaseModel):
    """One stack frame, oldest call first within a trace."""

    model_config = ConfigDict(extra="ignore")

    filename: str
    lineno: int
    method: str | None = None
    code: str | None = None


class ExceptionInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    class_name: str = Field(alias="class")
    message: str
    description: str | None = None


class TraceRecord(BaseModel):
    """Frames and exception details for one link of a cause chain."""

    model_config = ConfigDict(extra="ignore")

    frames: list[Frame] = Field(default_factory=list)
    exception: ExceptionInfo
    extra: dict[str, Any] | None = None


class MessageBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    body: str
    extra: dict[str, Any] | None = None


class ReportBody(BaseModel):
    """Exactly one of ``trace``, ``trace_chain`` or ``message`` is set."""

    model_config = ConfigDict(extra="ignore")

    trace: TraceRecord | None = None
    trace_chain: list[TraceRecord] | None = None
    message: MessageBody | None = None

    @model_validator(mode="after")
    def validate_single_kind(self) -> ReportBody:
        kinds = [value for value in (self.trace, self.trace_chain, self.message) if value is not None]
        if len(kinds) != 1:
            raise ValueError("report body needs exactly one of trace, trace_chain or message")
        return self


class ServerInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str
    pid: int
    root: str | None = None
    branch: str | None = None


class NotifierInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    version: str


class ReportEvent(BaseModel):
    """The ``data`` document of a report before payload options are merged in."""

    model_config = ConfigDict(extra="ignore")

    timestamp: int
    environment: str
    level: Level
    language: str = "python"
    framework: str | None = None
    server: ServerInfo
    notifier: NotifierInfo
    body: ReportBody
    project_package_paths: list[str] | None = None
    code_version: str | None = None
    uuid: str

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
