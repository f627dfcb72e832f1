"""
Finding Normalizer

Turns loosely typed checker records into typed corrections and
suggestions. Checker output is never trusted: every record is validated
on its own and malformed ones are dropped.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple
import json
import logging
import re

from proofreader.ir import (
    ChunkFindings,
    Correction,
    Suggestion,
    CORRECTION_KINDS,
    SUGGESTION_KINDS,
)

logger = logging.getLogger(__name__)

AUTO_CORRECTION = "auto-correction"
SUGGESTION = "suggestion"

DEFAULT_SUGGESTION_TEXT = "Style/clarity suggestion"


class MalformedResponseError(ValueError):
    """A checker reply could not be decoded into a list of findings."""


def _coerce_line(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        line = value
    elif isinstance(value, float) and value.is_integer():
        line = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        line = int(value.strip())
    else:
        return None
    return line if line >= 1 else None


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _to_correction(item: Dict[str, Any], line: int) -> Optional[Correction]:
    before = item.get("from")
    after = item.get("to")
    if not isinstance(before, str) or not before or not isinstance(after, str):
        return None
    kind = item.get("kind")
    return Correction(
        line=line,
        kind=kind if kind in CORRECTION_KINDS else "grammar",
        before=before,
        after=after,
        context=_optional_str(item.get("reason")),
    )


def _to_suggestion(item: Dict[str, Any], line: int) -> Suggestion:
    kind = item.get("kind")
    return Suggestion(
        line=line,
        kind=kind if kind in SUGGESTION_KINDS else "style",
        text=_optional_str(item.get("reason")) or DEFAULT_SUGGESTION_TEXT,
        suggested=_optional_str(item.get("to")),
        context=_optional_str(item.get("context")) or _optional_str(item.get("from")),
    )


def normalize_findings(items: List[Any]) -> ChunkFindings:
    """Partition raw checker records into corrections and suggestions."""
    findings = ChunkFindings()
    for item in items:
        if not isinstance(item, dict):
            logger.debug(f"Dropping non-object finding: {item!r}")
            continue
        line = _coerce_line(item.get("line"))
        if line is None:
            logger.debug(f"Dropping finding without a usable line: {item!r}")
            continue

        kind = item.get("type")
        if kind == AUTO_CORRECTION:
            correction = _to_correction(item, line)
            if correction is None:
                logger.debug(f"Dropping malformed auto-correction: {item!r}")
                continue
            findings.corrections.append(correction)
        elif kind == SUGGESTION:
            findings.suggestions.append(_to_suggestion(item, line))
        else:
            logger.debug(f"Dropping finding of unknown type {kind!r}")
    return findings


def dedupe_corrections(corrections: List[Correction]) -> List[Correction]:
    seen = set()
    out: List[Correction] = []
    for c in corrections:
        key = (c.line, c.before, c.after)
        if key in seen:
            continue
        seen.add(key)
        out.append(c)
    return out


def dedupe_suggestions(suggestions: List[Suggestion]) -> List[Suggestion]:
    seen = set()
    out: List[Suggestion] = []
    for s in suggestions:
        key = (s.line, s.text, s.suggested)
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


def assign_ids(suggestions: List[Suggestion], start: int = 1) -> Tuple[List[Suggestion], int]:
    """
    Give suggestions sequential ids S<start>, S<start+1>, ...

    Returns the renumbered copies and the next free counter value.
    """
    numbered: List[Suggestion] = []
    counter = start
    for s in suggestions:
        numbered.append(replace(s, id=f"S{counter}"))
        counter += 1
    return numbered, counter


# --- model reply decoding ---

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)```")
_FENCED_ANY = re.compile(r"```\s*([\s\S]*?)```")
_BARE_ARRAY = re.compile(r"\[[\s\S]*\]")
_NEWLINE_IN_STRING = re.compile(r'\n\s*(?=[^"]*"[^"]*$)', re.MULTILINE)
_BAD_BACKSLASH = re.compile(r'(?<!\\)\\(?!["\\/bfnrt]|u[0-9a-fA-F]{4})')


def extract_json(response: str) -> str:
    """
    Pull the JSON array out of a model reply and patch the usual
    breakage (raw newlines inside strings, unescaped backslashes).
    """
    m = _FENCED_JSON.search(response) or _FENCED_ANY.search(response)
    if m:
        json_str = m.group(1).strip()
    else:
        m = _BARE_ARRAY.search(response)
        json_str = m.group(0).strip() if m else response.strip()

    json_str = _NEWLINE_IN_STRING.sub(" ", json_str)
    json_str = _BAD_BACKSLASH.sub(r"\\\\", json_str)
    return json_str


def parse_response(response: str) -> List[Any]:
    json_str = extract_json(response)
    try:
        items = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"JSON parse error: {e}; response starts {response[:500]!r}") from e
    if not isinstance(items, list):
        raise MalformedResponseError(f"Response is not an array: {type(items).__name__}")
    return items
