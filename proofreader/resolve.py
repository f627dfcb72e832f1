"""
Suggestion Resolver

Reads the markers left by the annotator, sorts their ids into applied
and removed according to the reviewer's choice, and strips every marker
from the document.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Set, Union
import logging

from proofreader.ir import split_lines, join_lines
from proofreader.markers import parse_markers, strip_markers

logger = logging.getLogger(__name__)

ALL = "ALL"

ResolutionSet = Union[Set[str], str]


@dataclass
class ResolveResult:
    text: str
    applied: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)


def normalize_ids(tokens: Iterable[str]) -> ResolutionSet:
    """Upper-case ids; a literal ``all`` anywhere selects everything."""
    ids = {t.strip().upper() for t in tokens if t.strip()}
    if ALL in ids:
        return ALL
    return ids


def _is_accepted(marker_id: str, accepted: ResolutionSet) -> bool:
    if accepted == ALL:
        return True
    return marker_id in accepted


def resolve_suggestions(text: str, accepted: ResolutionSet) -> ResolveResult:
    result = ResolveResult(text="")
    out_lines: List[str] = []

    for line in split_lines(text):
        markers = parse_markers(line)
        if not markers:
            out_lines.append(line)
            continue

        for mk in markers:
            if _is_accepted(mk.id, accepted):
                result.applied.append(mk.id)
            else:
                result.removed.append(mk.id)

        crlf = line.endswith("\r")
        cleaned = strip_markers(line, markers).rstrip()
        out_lines.append(cleaned + "\r" if crlf else cleaned)

    result.text = join_lines(out_lines)
    logger.info(f"Resolved {len(result.applied) + len(result.removed)} markers "
                f"({len(result.applied)} applied, {len(result.removed)} removed)")
    return result
