"""Utility modules."""

from .parser import ParsedJson, RawText, parse_json_reply

__all__ = ["ParsedJson", "RawText", "parse_json_reply"]
