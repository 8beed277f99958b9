"""Parser for flat ``key=value`` marker files"""

from __future__ import annotations

import logging
from typing import Dict, Union

logger = logging.getLogger(__name__)

SEPARATOR = "="
COMMENT_PREFIX = "#"
TRUE_LITERAL = "true"
BOM = "\ufeff"
DUPLICATE_POLICIES = ("first", "last", "error")


class ConfigParseError(ValueError):
    """Raised when a marker file line is structurally invalid."""

    def __init__(self, line_number: int, line: str, reason: str = "missing '=' separator"):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line!r}")


def to_bool(value: Union[str, bool, None]) -> bool:
    """Return True only for the exact string ``"true"``."""

    if isinstance(value, bool):
        return value
    return value == TRUE_LITERAL


def parse_properties(text: str, on_duplicate: str = "last") -> Dict[str, str]:
    """Parse marker file contents into a key -> raw value mapping.

    Args:
        text: Raw file contents
        on_duplicate: ``"last"``, ``"first"`` or ``"error"``

    Returns:
        Mapping of trimmed keys to trimmed raw string values

    Raises:
        ConfigParseError: On a line without separator, an empty key, or a
            duplicate key when ``on_duplicate == "error"``
    """
    if on_duplicate not in DUPLICATE_POLICIES:
        raise ValueError(f"unknown duplicate policy {on_duplicate!r}")

    if text.startswith(BOM):
        text = text[len(BOM):]

    values: Dict[str, str] = {}
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue

        if SEPARATOR not in stripped:
            raise ConfigParseError(line_number, raw_line)

        key, value = stripped.split(SEPARATOR, 1)
        key = key.strip()
        value = value.strip()
        if not key:
            raise ConfigParseError(line_number, raw_line, reason="empty key")

        if key in values:
            if on_duplicate == "error":
                raise ConfigParseError(line_number, raw_line, reason=f"duplicate key {key}")
            logger.warning("duplicate key %s on line %d, keeping %s value", key, line_number, on_duplicate)
            if on_duplicate == "first":
                continue

        values[key] = value

    logger.debug("parsed %d keys", len(values))
    return values


__all__ = ["ConfigParseError", "parse_properties", "to_bool", "TRUE_LITERAL"]
