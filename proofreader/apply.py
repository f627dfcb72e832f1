from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple
import logging

from proofreader.ir import Correction, split_lines, join_lines

logger = logging.getLogger(__name__)


@dataclass
class CorrectionOutcome:
    applied: List[Correction] = field(default_factory=list)
    skipped: List[Tuple[Correction, str]] = field(default_factory=list)  # (correction, reason)


def _order_for_application(corrections: List[Correction]) -> List[Correction]:
    # descending line; within a line the last-listed correction goes first
    return sorted(reversed(corrections), key=lambda c: c.line, reverse=True)


def apply_corrections_with_status(text: str, corrections: List[Correction]) -> Tuple[str, CorrectionOutcome]:
    lines = split_lines(text)
    outcome = CorrectionOutcome()

    for c in _order_for_application(corrections):
        idx = c.line - 1
        if idx < 0 or idx >= len(lines):
            outcome.skipped.append((c, "line_out_of_range"))
            logger.debug(f"Skipping correction on line {c.line}: out of range")
            continue
        if c.before not in lines[idx]:
            outcome.skipped.append((c, "before_mismatch"))
            logger.debug(f"Skipping correction on line {c.line}: {c.before!r} not found")
            continue
        lines[idx] = lines[idx].replace(c.before, c.after, 1)
        outcome.applied.append(c)

    return join_lines(lines), outcome


def apply_corrections(text: str, corrections: List[Correction]) -> str:
    """Apply corrections line by line; ones that no longer match are no-ops."""
    new_text, _ = apply_corrections_with_status(text, corrections)
    return new_text
