"""
Suggestion markers

A marker is an HTML comment appended to the line it concerns:

    <!-- [S3] REVIEW: Long sentence Suggested: "Split it." -->

Markdown renderers ignore it, and the resolver can find every marker on
a line without disturbing its neighbours.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import re

from proofreader.ir import Marker, Suggestion

OPEN = "<!--"
CLOSE = "-->"
SUGGESTED_TAG = 'Suggested: "'

_ID = re.compile(r"S[1-9]\d*")
_BODY = re.compile(r"\s*\[(S[1-9]\d*)\]\s*REVIEW:\s?(.*?)\s*$", re.DOTALL)


class MarkerError(ValueError):
    """The suggestion cannot be written as a marker without ambiguity."""


def _clean(value: str) -> str:
    return " ".join(value.splitlines()).strip()


def _split_suggested(rest: str) -> Tuple[str, Optional[str]]:
    if not rest.endswith('"'):
        return rest, None
    cut = rest.rfind(SUGGESTED_TAG)
    if cut == -1 or cut + len(SUGGESTED_TAG) > len(rest) - 1:
        return rest, None
    if cut > 0 and rest[cut - 1] != " ":
        return rest, None
    return rest[:cut].rstrip(), rest[cut + len(SUGGESTED_TAG):-1]


def encode_marker(suggestion: Suggestion) -> str:
    """
    Render a suggestion as a marker.

    Newlines are folded into spaces and surrounding whitespace dropped.
    Text that would read back differently (the closing delimiter, or a
    trailing ``Suggested: "..."`` look-alike) raises MarkerError.
    """
    if not _ID.fullmatch(suggestion.id or ""):
        raise MarkerError(f"Invalid suggestion id: {suggestion.id!r}")
    text = _clean(suggestion.text)
    if CLOSE in text:
        raise MarkerError(f"{suggestion.id}: description contains {CLOSE!r}")

    body = f"[{suggestion.id}] REVIEW: {text}"
    if suggestion.suggested:
        suggested = _clean(suggestion.suggested)
        if CLOSE in suggested or SUGGESTED_TAG in suggested:
            raise MarkerError(f"{suggestion.id}: suggested text cannot be delimited")
        body += f' {SUGGESTED_TAG}{suggested}"'
    elif _split_suggested(text)[1] is not None:
        raise MarkerError(f"{suggestion.id}: description ends like a suggested replacement")
    return f"{OPEN} {body} {CLOSE}"


def parse_markers(line: str) -> List[Marker]:
    """
    Return every review marker on the line, left to right.

    Scanning restarts after each marker's closing delimiter, so markers
    never overlap. An opening delimiter that does not start a review
    marker is stepped over on its own, so an unclosed `<!--` earlier in
    the line does not swallow the marker after it.
    """
    markers: List[Marker] = []
    pos = 0
    while True:
        start = line.find(OPEN, pos)
        if start == -1:
            break
        close = line.find(CLOSE, start + len(OPEN))
        if close == -1:
            break
        end = close + len(CLOSE)
        m = _BODY.match(line[start + len(OPEN):close])
        if m:
            text, suggested = _split_suggested(m.group(2))
            markers.append(Marker(id=m.group(1), text=text, suggested=suggested, start=start, end=end))
            pos = end
        else:
            pos = start + len(OPEN)
    return markers


def strip_markers(line: str, markers: List[Marker]) -> str:
    """Remove markers, and the whitespace just before each, from a line."""
    out = line
    for mk in sorted(markers, key=lambda m: m.start, reverse=True):
        start = mk.start
        while start > 0 and out[start - 1] in " \t":
            start -= 1
        out = out[:start] + out[mk.end:]
    return out
