"""
Document Chunker

Splits a document into line-aligned chunks small enough for a
bounded-context checker, remembering where each chunk starts.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List
import math

from proofreader.ir import split_lines, join_lines

# Rough estimate: 1 token ~= 4 chars of English
CHARS_PER_TOKEN = 4

DEFAULT_MAX_TOKENS = 6000


@dataclass
class Chunk:
    """A contiguous run of document lines."""
    index: int             # 0-based position in the chunk sequence
    start_line: int        # absolute 1-indexed line of lines[0]
    lines: List[str]

    @property
    def text(self) -> str:
        return join_lines(self.lines)

    @property
    def end_line(self) -> int:
        return self.start_line + len(self.lines) - 1


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def iter_chunks(text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> Iterator[Chunk]:
    """
    Yield chunks of at most ``max_tokens`` (estimated) in document order.

    Chunks never split a line. A line that alone exceeds the limit is
    emitted as its own oversized chunk.
    """
    if max_tokens < 1:
        raise ValueError(f"max_tokens must be positive, got {max_tokens}")

    lines = split_lines(text)
    if estimate_tokens(text) <= max_tokens:
        yield Chunk(index=0, start_line=1, lines=lines)
        return

    index = 0
    start_line = 1
    current: List[str] = []
    current_tokens = 0

    for line in lines:
        line_tokens = estimate_tokens(line)
        if current_tokens + line_tokens > max_tokens and current:
            yield Chunk(index=index, start_line=start_line, lines=current)
            index += 1
            start_line += len(current)
            current = []
            current_tokens = 0
        current.append(line)
        current_tokens += line_tokens

    if current:
        yield Chunk(index=index, start_line=start_line, lines=current)


def chunk_document(text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> List[Chunk]:
    """Materialized form of :func:`iter_chunks`."""
    return list(iter_chunks(text, max_tokens))
