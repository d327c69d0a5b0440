"""Payload transports."""

from .base import Transport
from .file import PayloadFileWriter
from .http import ACCESS_TOKEN_HEADER, HttpTransport

__all__ = ["ACCESS_TOKEN_HEADER", "HttpTransport", "PayloadFileWriter", "Transport"]
