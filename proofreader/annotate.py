from __future__ import annotations
from typing import List
import logging

from proofreader.ir import Suggestion, split_lines, join_lines
from proofreader.markers import encode_marker, MarkerError

logger = logging.getLogger(__name__)


def _append(line: str, marker: str) -> str:
    # keep a CRLF line ending at the very end of the line
    if line.endswith("\r"):
        return f"{line[:-1]} {marker}\r"
    return f"{line} {marker}"


def insert_suggestions(text: str, suggestions: List[Suggestion]) -> str:
    """
    Append a marker for each suggestion to the end of its line.

    Markers on the same line keep the order the suggestions were given in.
    Suggestions pointing outside the document are dropped.
    """
    lines = split_lines(text)
    for s in suggestions:
        idx = s.line - 1
        if idx < 0 or idx >= len(lines):
            logger.debug(f"Dropping {s.id}: line {s.line} out of range")
            continue
        try:
            marker = encode_marker(s)
        except MarkerError as e:
            logger.warning(f"Dropping suggestion: {e}")
            continue
        lines[idx] = _append(lines[idx], marker)
    return join_lines(lines)
