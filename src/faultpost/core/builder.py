"""PayloadBuilder: turn a level, message, exception and extra data into a Payload."""

from __future__ import annotations

import os
import re
import socket
import time
import traceback
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from ..models import (
    ExceptionInfo,
    Frame,
    MessageBody,
    NotifierInfo,
    Payload,
    ReportBody,
    ReportEvent,
    ServerInfo,
    TraceRecord,
)
from ..utils import deep_copy, deep_merge, sanitize
from ..version import NOTIFIER_NAME, __version__
from .config import Configuration, resolve_option

if TYPE_CHECKING:
    from .notifier import Notifier

PACKAGE_DIR = str(Path(__file__).resolve().parent.parent)
UNKNOWN_FILENAME = "<unknown>"
EMPTY_MESSAGE = "Empty message"

_PYTHON_FRAME_RE = re.compile(r'^\s*File "(?P<filename>.*)", line (?P<lineno>\d+)(?:, in (?P<method>.+))?')
_COLON_FRAME_RE = re.compile(r"^(?P<filename>.*):(?P<lineno>\d+)(?::in `(?P<method>[^']+)')?")


class PayloadBuilder:
    """Builds payloads for one notifier.

    ``build_payload`` only raises for programming errors in the caller's
    arguments (for example an unknown level); failures of the custom data
    provider are reported separately and never escape.
    """

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    @property
    def configuration(self) -> Configuration:
        return self.notifier.configuration

    def build_payload(
        self,
        level: str,
        message: str | None,
        exception: BaseException | None,
        extra: Mapping[str, Any] | None,
    ) -> Payload:
        configuration = self.configuration
        environment = configuration.environment or "unspecified"

        event = ReportEvent(
            timestamp=int(time.time()),
            environment=environment,
            level=level,
            framework=configuration.framework,
            server=self.server_data(),
            notifier=NotifierInfo(name=NOTIFIER_NAME, version=__version__),
            body=self.build_payload_body(message, exception, extra),
            project_package_paths=configuration.project_package_paths,
            code_version=configuration.code_version,
            uuid=str(uuid4()),
        )
        data = event.to_data()

        deep_merge(data, deep_copy(configuration.payload_options))

        for key in ("person", "request", "context"):
            if key in data:
                data[key] = resolve_option(data[key])

        # The collector rejects a null context.
        if not data.get("context"):
            data.pop("context", None)

        return Payload({"access_token": configuration.access_token, "data": data}, configuration)

    def build_payload_body(
        self,
        message: str | None,
        exception: BaseException | None,
        extra: Mapping[str, Any] | None,
    ) -> ReportBody:
        if self.configuration.custom_data_method is not None:
            extra = deep_merge(self.custom_data(), dict(extra or {}))
        plain_extra = sanitize(extra) if extra is not None else None

        if exception is not None:
            return self.build_payload_body_exception(message, exception, plain_extra)
        return ReportBody(message=MessageBody(body=message or EMPTY_MESSAGE, extra=plain_extra))

    def build_payload_body_exception(
        self,
        message: str | None,
        exception: BaseException,
        extra: dict[str, Any] | None,
    ) -> ReportBody:
        traces = self.trace_chain(exception)
        if message:
            traces[0].exception.description = message
        if extra is not None:
            traces[0].extra = extra

        if len(traces) > 1:
            return ReportBody(trace_chain=traces)
        return ReportBody(trace=traces[0])

    def custom_data(self) -> dict[str, Any]:
        configuration = self.configuration
        try:
            data = configuration.custom_data_method()  # type: ignore[misc]
            return dict(deep_copy(data or {}))
        except Exception as exc:
            if configuration.safely:
                return {}
            return self.notifier.report_custom_data_error(exc)

    def trace_chain(self, exception: BaseException) -> list[TraceRecord]:
        """Trace records for ``exception`` followed by each of its causes.

        Each distinct exception is visited at most once, so cyclic cause
        graphs terminate.
        """
        traces = [self.trace_data(exception)]
        visited = {id(exception)}

        current = exception
        while True:
            cause = _cause_of(current)
            if cause is None or cause is current or id(cause) in visited:
                break
            traces.append(self.trace_data(cause))
            visited.add(id(cause))
            current = cause
        return traces

    def trace_data(self, exception: BaseException) -> TraceRecord:
        return TraceRecord(
            frames=self.exception_frames(exception),
            exception=ExceptionInfo(
                class_name=type(exception).__name__,
                message=_exception_message(exception),
            ),
        )

    def exception_frames(self, exception: BaseException) -> list[Frame]:
        """Frames to report for ``exception``, oldest call first.

        The exception's own traceback wins; then a ``backtrace`` list of text
        lines (exceptions rebuilt from another process carry one); then, if
        ``populate_empty_backtraces`` is on, the current stack minus the
        frames that belong to this package.
        """
        if exception.__traceback__ is not None:
            return [_frame_from_summary(summary) for summary in traceback.extract_tb(exception.__traceback__)]

        backtrace = getattr(exception, "backtrace", None)
        if isinstance(backtrace, (list, tuple)):
            return [parse_frame_line(str(line)) for line in backtrace]

        if not self.configuration.populate_empty_backtraces:
            return []

        stack = traceback.extract_stack()
        while stack and _is_own_frame(stack[-1].filename):
            stack.pop()
        return [_frame_from_summary(summary) for summary in stack]

    def server_data(self) -> ServerInfo:
        configuration = self.configuration
        return ServerInfo(
            host=socket.gethostname(),
            pid=os.getpid(),
            root=str(configuration.root) if configuration.root else None,
            branch=configuration.branch,
        )


def parse_frame_line(line: str) -> Frame:
    """Parse a text stack frame, falling back to the raw text as the method."""
    for pattern in (_PYTHON_FRAME_RE, _COLON_FRAME_RE):
        match = pattern.match(line)
        if match:
            method = match.group("method")
            return Frame(
                filename=match.group("filename"),
                lineno=int(match.group("lineno")),
                method=method.strip() if method else None,
            )
    return Frame(filename=UNKNOWN_FILENAME, lineno=0, method=line)


def _frame_from_summary(summary: traceback.FrameSummary) -> Frame:
    return Frame(
        filename=summary.filename,
        lineno=summary.lineno or 0,
        method=summary.name,
        code=summary.line or None,
    )


def _cause_of(exception: BaseException) -> BaseException | None:
    if exception.__cause__ is not None:
        return exception.__cause__
    if exception.__suppress_context__:
        return None
    return exception.__context__


def _exception_message(exception: BaseException) -> str:
    try:
        return str(exception)
    except Exception:
        return f"<unprintable {type(exception).__name__}>"


def _is_own_frame(filename: str) -> bool:
    return filename.startswith(PACKAGE_DIR + os.sep)

