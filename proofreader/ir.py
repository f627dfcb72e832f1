from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Literal

CorrectionKind = Literal["spelling", "grammar", "punctuation"]
SuggestionKind = Literal["style", "clarity", "spelling"]

CORRECTION_KINDS = ("spelling", "grammar", "punctuation")
SUGGESTION_KINDS = ("style", "clarity", "spelling")


@dataclass
class Correction:
    line: int                      # 1-indexed, absolute
    kind: CorrectionKind
    before: str                    # exact text to replace ("from" on the wire)
    after: str                     # replacement ("to" on the wire)
    context: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"line": self.line, "type": self.kind, "from": self.before, "to": self.after}
        if self.context is not None:
            d["context"] = self.context
        return d


@dataclass
class Suggestion:
    line: int
    kind: SuggestionKind
    text: str                      # human-readable description
    suggested: Optional[str] = None  # None = flag only
    context: Optional[str] = None
    id: str = ""                   # S<n>, assigned per run by the orchestrator

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id, "line": self.line, "type": self.kind,
            "text": self.text, "suggested": self.suggested,
        }
        if self.context is not None:
            d["context"] = self.context
        return d


@dataclass(frozen=True)
class Marker:
    """A suggestion marker parsed back out of a line."""
    id: str
    text: str
    suggested: Optional[str]
    start: int   # offset of "<!--" on the line
    end: int     # offset just past "-->"


@dataclass
class ChunkFindings:
    corrections: List[Correction] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)


def split_lines(text: str) -> List[str]:
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)
