"""Serialization helpers."""

from .json import dump_json, iter_payload_lines, json_size, load_payload_json

__all__ = ["dump_json", "iter_payload_lines", "json_size", "load_payload_json"]
