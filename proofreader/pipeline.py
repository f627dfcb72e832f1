"""
Proofreading Pipeline

Phase 1 (``run_proofread``): chunk -> check -> normalize -> correct ->
annotate, written to ``<name>.proofread.<ext>``.

Phase 2 (``run_apply``): resolve the markers in a ``.proofread.`` file
against the reviewer's accepted ids, written to ``<name>.final.<ext>``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple
import logging

from proofreader.annotate import insert_suggestions
from proofreader.apply import apply_corrections_with_status
from proofreader.checkers import Checker
from proofreader.chunker import DEFAULT_MAX_TOKENS, chunk_document
from proofreader.ir import ChunkFindings, Correction, Suggestion
from proofreader.normalize import (
    assign_ids,
    dedupe_corrections,
    dedupe_suggestions,
    normalize_findings,
)
from proofreader.resolve import ResolutionSet, resolve_suggestions

logger = logging.getLogger(__name__)

PROOFREAD_INFIX = ".proofread."
FINAL_INFIX = ".final."


def proofread_path(path: str) -> Path:
    """``doc.md`` -> ``doc.proofread.md`` (extensionless: ``doc.proofread``)."""
    p = Path(path)
    if p.suffix:
        return p.with_name(f"{p.stem}.proofread{p.suffix}")
    return p.with_name(f"{p.name}.proofread")


def final_path(path: str) -> Path:
    """``doc.proofread.md`` -> ``doc.final.md``."""
    p = Path(path)
    if PROOFREAD_INFIX in p.name:
        return p.with_name(p.name.replace(PROOFREAD_INFIX, FINAL_INFIX, 1))
    if p.suffix:
        return p.with_name(f"{p.stem}.final{p.suffix}")
    return p.with_name(f"{p.name}.final")


def read_document(path: str) -> str:
    # newline="" keeps CRLF documents byte-identical
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_document(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


@dataclass
class ProofreadOutcome:
    """In-memory result of phase 1 before anything is written."""
    text: str
    applied: List[Correction] = field(default_factory=list)
    skipped: List[Correction] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    total_chunks: int = 0
    failed_chunks: List[int] = field(default_factory=list)


def collect_findings(
    text: str,
    checker: Checker,
    level: int,
    max_chunk_tokens: int = DEFAULT_MAX_TOKENS,
) -> Tuple[List[Correction], List[Suggestion], int, List[int]]:
    """
    Run the checker over every chunk, strictly in document order.

    A chunk whose check fails contributes nothing; the rest of the
    document is still processed. Suggestion ids are numbered across the
    whole run in the order they are found.
    """
    chunks = chunk_document(text, max_chunk_tokens)
    n_lines = sum(len(c.lines) for c in chunks)
    all_findings = ChunkFindings()
    failed: List[int] = []
    counter = 1

    for chunk in chunks:
        logger.info(f"Processing chunk {chunk.index + 1}/{len(chunks)} (lines {chunk.start_line}-{chunk.end_line})...")
        try:
            findings = normalize_findings(checker.check(chunk.text, level, chunk.start_line))
        except Exception as e:
            logger.warning(f"Chunk {chunk.index + 1} failed, no findings recorded: {type(e).__name__}: {e}")
            failed.append(chunk.index)
            continue

        in_range = [s for s in findings.suggestions if s.line <= n_lines]
        if len(in_range) < len(findings.suggestions):
            logger.debug(f"Dropped {len(findings.suggestions) - len(in_range)} suggestions past line {n_lines}")
        suggestions, counter = assign_ids(dedupe_suggestions(in_range), counter)
        all_findings.corrections.extend(findings.corrections)
        all_findings.suggestions.extend(suggestions)

    corrections = dedupe_corrections(all_findings.corrections)
    return corrections, all_findings.suggestions, len(chunks), failed


def proofread_text(
    text: str,
    checker: Checker,
    level: int,
    max_chunk_tokens: int = DEFAULT_MAX_TOKENS,
) -> ProofreadOutcome:
    corrections, suggestions, total, failed = collect_findings(text, checker, level, max_chunk_tokens)

    corrected, outcome = apply_corrections_with_status(text, corrections)
    annotated = insert_suggestions(corrected, suggestions)

    logger.info(f"Applied {len(outcome.applied)}/{len(corrections)} corrections, "
                f"inserted {len(suggestions)} suggestions")
    return ProofreadOutcome(
        text=annotated,
        applied=outcome.applied,
        skipped=[c for c, _ in outcome.skipped],
        suggestions=suggestions,
        total_chunks=total,
        failed_chunks=failed,
    )


@dataclass
class ProofreadResult:
    file: str
    corrected_file: str
    level: int
    engine: str
    outcome: ProofreadOutcome

    def to_dict(self) -> Dict[str, Any]:
        o = self.outcome
        return {
            "file": self.file,
            "correctedFile": self.corrected_file,
            "level": self.level,
            "engine": self.engine,
            "autoApplied": {
                "count": len(o.applied),
                "changes": [c.to_dict() for c in o.applied],
            },
            "skipped": [c.to_dict() for c in o.skipped],
            "suggestions": [s.to_dict() for s in o.suggestions],
            "chunks": {"total": o.total_chunks, "failed": len(o.failed_chunks)},
        }


def run_proofread(
    input_path: str,
    checker: Checker,
    level: int = 2,
    max_chunk_tokens: int = DEFAULT_MAX_TOKENS,
) -> ProofreadResult:
    text = read_document(input_path)
    out_path = proofread_path(input_path)

    # spell-check is a mechanical pass whatever level was asked for
    effective_level = 1 if checker.name == "spellcheck" else level
    outcome = proofread_text(text, checker, effective_level, max_chunk_tokens)

    write_document(str(out_path), outcome.text)
    logger.info(f"Wrote {out_path}")
    return ProofreadResult(
        file=Path(input_path).name,
        corrected_file=out_path.name,
        level=effective_level,
        engine=checker.name,
        outcome=outcome,
    )


@dataclass
class ApplyResult:
    file: str
    final_file: str
    applied: List[str]
    removed: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "finalFile": self.final_file,
            "applied": self.applied,
            "removed": self.removed,
        }


def run_apply(input_path: str, accepted: ResolutionSet) -> ApplyResult:
    text = read_document(input_path)
    out_path = final_path(input_path)
    resolved = resolve_suggestions(text, accepted)
    write_document(str(out_path), resolved.text)
    logger.info(f"Wrote {out_path}")
    return ApplyResult(
        file=Path(input_path).name,
        final_file=out_path.name,
        applied=resolved.applied,
        removed=resolved.removed,
    )
