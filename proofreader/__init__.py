"""
Markdown proofreader

Two-phase proofreading: corrections are applied in place and
suggestions are embedded as review markers, then resolved in a second
pass once a reviewer has picked the ones to keep.
"""
from proofreader.pipeline import run_proofread, run_apply, proofread_text
from proofreader.resolve import resolve_suggestions, normalize_ids, ALL

__all__ = [
    "run_proofread",
    "run_apply",
    "proofread_text",
    "resolve_suggestions",
    "normalize_ids",
    "ALL",
]
