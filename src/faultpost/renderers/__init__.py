"""Report renderers."""

from .console import render_report

__all__ = ["render_report"]
