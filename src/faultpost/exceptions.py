"""Public exception types for faultpost."""

from __future__ import annotations


class FaultpostError(Exception):
    """Base class for all faultpost exceptions."""


class FaultpostLoadError(FaultpostError):
    """Raised when a payload file or spooled job cannot be loaded or parsed."""


class PayloadTooLargeError(FaultpostError):
    """Raised when a payload is still over the size limit after truncation."""

    def __init__(self, original_size: int, final_size: int) -> None:
        self.original_size = original_size
        self.final_size = final_size
        super().__init__(
            "Could not send payload due to it being too large after truncating attempts. "
            f"Original size: {original_size} Final size: {final_size}"
        )
