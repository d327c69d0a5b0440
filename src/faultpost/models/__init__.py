"""Data models for report capture."""

from .event import (
    ExceptionInfo,
    Frame,
    Level,
    MessageBody,
    NotifierInfo,
    ReportBody,
    ReportEvent,
    ServerInfo,
    TraceRecord,
)
from .payload import Payload

__all__ = [
    "ExceptionInfo",
    "Frame",
    "Level",
    "MessageBody",
    "NotifierInfo",
    "Payload",
    "ReportBody",
    "ReportEvent",
    "ServerInfo",
    "TraceRecord",
]
