"""Notifier: build, filter, schedule and deliver reports."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from ..exceptions import FaultpostError, PayloadTooLargeError
from ..models import Payload
from ..serializers import dump_json
from ..transport import HttpTransport, PayloadFileWriter, Transport
from ..utils import deep_copy, deep_merge
from .builder import PayloadBuilder
from .config import Configuration, resolve_option
from .context import set_last_report
from .failsafe import FailsafeBuilder

logger = logging.getLogger(__name__)

DISABLED = "disabled"
IGNORED = "ignored"
ERROR = "error"

IGNORE_LEVEL = "ignore"
DO_NOT_REPORT_ATTR = "_faultpost_do_not_report"
USE_EXCEPTION_LEVEL_FILTERS = "use_exception_level_filters"


class Notifier:
    """Reports errors and messages for one configuration.

    Error-handling contract
    -----------------------
    - ``log`` and the level shorthands never raise for reporting failures;
      they return ``"disabled"``, ``"ignored"``, ``"error"`` or the reported
      data.
    - ``process_payload`` logs and re-raises, so callers can tell a failed
      delivery from a successful one.
    - ``report_internal_error`` and ``send_failsafe`` never raise; their own
      failures end up in the log.
    """

    def __init__(
        self,
        configuration: Configuration | None = None,
        payload_options: Mapping[str, Any] | None = None,
    ) -> None:
        configuration = configuration or Configuration()
        if payload_options:
            configuration = configuration.clone()
            deep_merge(configuration.payload_options, deep_copy(payload_options))
        self.configuration = configuration
        self.last_report: dict[str, Any] | None = None
        # Options added with scope_in_place, replayed when a default notifier is rebuilt.
        self.in_place_options: dict[str, Any] = {}
        # Global configuration version this notifier was cloned from, for default notifiers only.
        self.configuration_version: int | None = None

    @property
    def logger(self) -> logging.Logger:
        return self.configuration.logger or logger

    def configure(self, **options: Any) -> Configuration:
        """Apply ``options`` to this notifier's configuration, enabling it if unset."""
        if self.configuration.enabled is None:
            self.configuration.enabled = True
        for name, value in options.items():
            setattr(self.configuration, name, value)
        return self.configuration

    def scope(self, options: Mapping[str, Any] | None = None) -> Notifier:
        """Return a child notifier with ``options`` merged into a cloned configuration."""
        if options:
            return Notifier(self.configuration, payload_options=options)
        return Notifier(self.configuration.clone())

    def scope_in_place(self, options: Mapping[str, Any] | None = None) -> Notifier:
        """Merge ``options`` into this notifier's own payload options."""
        if options:
            deep_merge(self.configuration.payload_options, deep_copy(options))
            deep_merge(self.in_place_options, deep_copy(options))
        return self

    def safely(self) -> Notifier:
        """Return a child notifier that never reports failures of custom user code."""
        notifier = self.scope()
        notifier.configuration.safely = True
        return notifier

    @contextmanager
    def silenced(self) -> Iterator[None]:
        """Mark any exception raised in the block so that ``log`` skips it."""
        try:
            yield
        except Exception as exc:
            setattr(exc, DO_NOT_REPORT_ATTR, True)
            raise

    def log(self, level: str, *args: Any) -> dict[str, Any] | str:
        """Report a message, an exception and/or extra data.

        The last str argument becomes the message (or the description of the
        exception), the last exception the reported exception and the last
        mapping the extra data. Passing ``use_exception_level_filters=True``
        in the extra data applies ``exception_level_filters`` to the
        exception.
        """
        if not self.configuration.enabled:
            return DISABLED

        message: str | None = None
        exception: BaseException | None = None
        extra: dict[str, Any] | None = None
        for arg in args:
            if isinstance(arg, str):
                message = arg
            elif isinstance(arg, BaseException):
                exception = arg
            elif isinstance(arg, Mapping):
                extra = dict(arg)

        use_filters = extra is not None and extra.pop(USE_EXCEPTION_LEVEL_FILTERS, False) is True
        level = _normalize_level(level)

        try:
            filtered_level = self._filtered_level(exception) if use_filters else None
            if filtered_level == IGNORE_LEVEL or _do_not_report(exception):
                return IGNORED
            if filtered_level:
                level = str(filtered_level)
            return self._report(level, message, exception, extra)
        except Exception as exc:
            self.report_internal_error(exc)
            return ERROR

    def debug(self, *args: Any) -> dict[str, Any] | str:
        return self.log("debug", *args)

    def info(self, *args: Any) -> dict[str, Any] | str:
        return self.log("info", *args)

    def warning(self, *args: Any) -> dict[str, Any] | str:
        return self.log("warning", *args)

    warn = warning

    def error(self, *args: Any) -> dict[str, Any] | str:
        return self.log("error", *args)

    def critical(self, *args: Any) -> dict[str, Any] | str:
        return self.log("critical", *args)

    def build_payload(
        self,
        level: str,
        message: str | None,
        exception: BaseException | None,
        extra: Mapping[str, Any] | None,
    ) -> Payload:
        return PayloadBuilder(self).build_payload(level, message, exception, extra)

    def process_payload(self, payload: Payload) -> None:
        """Write the payload to the local file or send it; log and re-raise on failure."""
        try:
            if self.configuration.write_to_file:
                self._write_payload(payload)
            else:
                self._send_payload(payload)
        except Exception as exc:
            self.logger.error(
                "Error processing the payload: %s, %s. Payload: %r",
                type(exc).__name__,
                exc,
                payload,
            )
            raise

    def process_payload_safely(self, payload: Payload) -> None:
        try:
            self.process_payload(payload)
        except Exception as exc:
            self.report_internal_error(exc)

    def schedule_payload(self, payload: Payload | None) -> None:
        if payload is None:
            return

        self.logger.info("Scheduling payload")
        if self.configuration.use_async:
            self._process_async_payload(payload)
        else:
            self.process_payload(payload)

    def report_internal_error(self, exception: BaseException) -> None:
        """Report a failure of this library itself, falling back to a failsafe."""
        self.logger.error("Reporting internal error encountered while sending data to the collector.")

        try:
            payload = self.build_payload("error", None, exception, {"internal": True})
        except Exception as exc:
            self.send_failsafe("build_payload in exception_data", exc)
            return

        try:
            self.process_payload(payload)
        except Exception as exc:
            self.send_failsafe("error in process_payload", exc)
            return

        try:
            self.log_instance_link(payload.data)
        except Exception as exc:
            self.send_failsafe("error logging instance link", exc)
            return

    def send_failsafe(self, message: str, exception: BaseException | None) -> None:
        self.logger.error("Sending failsafe response due to %s.", message)
        if exception is not None:
            self.logger.error("%s: %s", type(exception).__name__, _safe_str(exception))

        try:
            payload = FailsafeBuilder(self).build_payload(message, exception)
            self.schedule_payload(payload)
        except Exception as exc:
            self.logger.error("Error sending failsafe : %s", _safe_str(exc))

    def report_custom_data_error(self, exception: BaseException) -> dict[str, Any]:
        """Report a failing custom data provider and return a link to that report."""
        data = self.safely().error(exception)
        if not isinstance(data, dict) or not data.get("uuid"):
            return {}
        return {"_error_in_custom_data_method": self.uuid_url(data)}

    def log_instance_link(self, data: Mapping[str, Any]) -> None:
        if data.get("uuid"):
            self.logger.info(
                "Details: %s (only available if report was successful)",
                self.uuid_url(data),
            )

    def uuid_url(self, data: Mapping[str, Any]) -> str:
        return f"{self.configuration.web_base}/instance/uuid?uuid={data['uuid']}"

    def _report(
        self,
        level: str,
        message: str | None,
        exception: BaseException | None,
        extra: dict[str, Any] | None,
    ) -> dict[str, Any] | str:
        if message is None and exception is None and extra is None:
            self.logger.error("Tried to send a report with no message, exception or extra data.")
            return ERROR

        payload = self.build_payload(level, message, exception, extra)
        data = payload.data
        if payload.ignored:
            return IGNORED

        self.schedule_payload(payload)
        self.log_instance_link(data)

        self.last_report = data
        set_last_report(data)
        return data

    def _filtered_level(self, exception: BaseException | None) -> Any:
        if exception is None:
            return None
        filters = self.configuration.exception_level_filters
        cls = type(exception)
        for name in (f"{cls.__module__}.{cls.__qualname__}", cls.__qualname__, cls.__name__):
            if name in filters:
                return resolve_option(filters[name], exception)
        return None

    def _transport(self) -> Transport:
        configuration = self.configuration
        if configuration.transport is not None:
            return configuration.transport
        return HttpTransport(configuration.endpoint, configuration.request_timeout, log=self.logger)

    def _dump_payload(self, payload: Payload) -> str | None:
        try:
            return payload.dump()
        except PayloadTooLargeError as exc:
            self.send_failsafe(str(exc), None)
            self.logger.error("Payload too large to be sent: %s", dump_json(payload.value))
            return None

    def _send_payload(self, payload: Payload) -> None:
        self.logger.info("Sending payload")
        body = self._dump_payload(payload)
        if body is None:
            return
        self._transport().send(body, payload.access_token)

    def _write_payload(self, payload: Payload) -> None:
        self.logger.info("Writing payload to file")
        filepath = self.configuration.filepath
        if not filepath:
            raise FaultpostError("write_to_file is enabled but no filepath is configured")
        body = self._dump_payload(payload)
        if body is None:
            return
        PayloadFileWriter(filepath).write(body)
        self.logger.info("Success")

    def _process_async_payload(self, payload: Payload) -> None:
        handler = self.configuration.async_handler or default_async_handler()
        try:
            handler(payload.value)
        except Exception:
            if not self.configuration.failover_handlers:
                self.logger.error(
                    "Async handler failed, and there are no failover handlers configured. "
                    "See the docs for 'failover_handlers'"
                )
                return
            self._async_failover(payload)

    def _async_failover(self, payload: Payload) -> None:
        self.logger.warning("Primary async handler failed. Trying failovers...")

        handlers = list(self.configuration.failover_handlers)
        for index, handler in enumerate(handlers):
            try:
                handler(payload.value)
            except Exception:
                if index == len(handlers) - 1:
                    self.logger.error(
                        "All failover handlers failed while processing payload: %s",
                        dump_json(payload.value),
                    )
                continue
            return


def default_async_handler() -> Callable[[dict[str, Any]], Any]:
    from ..delay import ThreadHandler

    return ThreadHandler()


def _normalize_level(level: Any) -> str:
    value = str(getattr(level, "value", level)).lower()
    return "warning" if value == "warn" else value


def _do_not_report(exception: BaseException | None) -> bool:
    return exception is not None and getattr(exception, DO_NOT_REPORT_ATTR, False) is True


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"
