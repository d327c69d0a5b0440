"""FailsafeBuilder: the minimal report sent when normal reporting fails."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import Payload
from ..version import NOTIFIER_NAME, __version__
from .config import Configuration

if TYPE_CHECKING:
    from .notifier import Notifier


class FailsafeBuilder:
    """Builds a fixed-shape payload that does not depend on the failed report."""

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    @property
    def configuration(self) -> Configuration:
        return self.notifier.configuration

    def build_payload(self, message: str, exception: BaseException | None = None) -> Payload:
        del exception
        configuration = self.configuration
        data = {
            "level": "error",
            "environment": str(configuration.environment or ""),
            "body": {"message": {"body": f"Failsafe from {NOTIFIER_NAME}: {message}"}},
            "notifier": {"name": NOTIFIER_NAME, "version": __version__},
            "internal": True,
            "failsafe": True,
        }
        return Payload({"access_token": configuration.access_token, "data": data}, configuration)
