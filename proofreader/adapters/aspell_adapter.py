from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging
import re
import shutil
import subprocess

from proofreader.config import ConfigError

logger = logging.getLogger(__name__)

# Lines that look like code, LaTeX or task lists are not spell-checked
_SKIP_CHARS = re.compile(r"[\\{}$`]")
_FENCE = re.compile(r"^```")
_TASK_ITEM = re.compile(r"^\s*[-*]\s*\[")

_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_URL = re.compile(r"https?://\S+")
_INLINE_CODE = re.compile(r"`[^`]+`")
_EMPHASIS = re.compile(r"[_*]+")

# & <word> <count> <offset>: <s1>, <s2>, ...
_MISS = re.compile(r"^& (\S+) \d+ (\d+): (.+)$")


@dataclass
class AspellConfig:
    """Configuration for the aspell spell-checker."""
    aspell_binary: str = "aspell"
    lang: str = "en_GB"
    timeout: int = 60


def find_aspell(binary: str = "aspell") -> str:
    path = shutil.which(binary)
    if not path:
        raise ConfigError(f"{binary} not found. Install aspell (e.g. brew install aspell / apt install aspell)")
    return path


def should_skip(line: str) -> bool:
    return bool(_SKIP_CHARS.search(line) or _FENCE.match(line) or _TASK_ITEM.match(line))


def clean_line(line: str) -> str:
    """Reduce a Markdown line to plain words for the spell-checker."""
    line = _MD_LINK.sub(r"\1", line)
    line = _URL.sub("", line)
    line = _INLINE_CODE.sub("", line)
    return _EMPHASIS.sub(" ", line)


def parse_aspell_output(output: str, n_lines: int) -> List[List[Tuple[str, List[str]]]]:
    """
    Split ``aspell -a`` output into one list of misses per input line.

    Each input line's results end with a blank line; the banner line
    starting with ``@(#)`` is skipped.
    """
    groups: List[List[Tuple[str, List[str]]]] = [[] for _ in range(n_lines)]
    idx = 0
    for raw in output.split("\n"):
        if raw.startswith("@(#)"):
            continue
        if raw == "":
            idx += 1
            if idx >= n_lines:
                break
            continue
        m = _MISS.match(raw)
        if m and idx < n_lines:
            groups[idx].append((m.group(1), m.group(3).split(", ")))
    return groups


def is_likely_typo(misspelled: str, suggestion: str) -> bool:
    # acronyms, proper nouns, abbreviations and words with numbers are left alone
    if misspelled == misspelled.upper() and len(misspelled) > 1:
        return False
    if re.fullmatch(r"[A-Z][a-z]+", misspelled):
        return False
    if len(misspelled) <= 2:
        return False
    if re.search(r"\d", misspelled):
        return False
    if not suggestion:
        return False

    len_diff = abs(len(misspelled) - len(suggestion))
    m, s = misspelled.lower(), suggestion.lower()
    return len_diff <= 2 and (s[:3] in m or m[:3] in s)


class AspellChecker:
    """
    Deterministic spell-check engine.

    Every finding is returned as a spelling *suggestion*: aspell's
    vocabulary is too small to auto-apply its guesses.
    """

    name = "spellcheck"

    def __init__(self, config: AspellConfig, binary_path: Optional[str] = None):
        self.config = config
        self.binary_path = binary_path or find_aspell(config.aspell_binary)

    def _run(self, lines: List[str]) -> str:
        cmd = [self.binary_path, "-a", f"--lang={self.config.lang}"]
        # "^" keeps aspell from reading a line as a pipe-mode command
        payload = "".join(f"^{line}\n" for line in lines)
        logger.debug(f"Running aspell on {len(lines)} lines: {' '.join(cmd)}")
        result = subprocess.run(
            cmd,
            input=payload,
            capture_output=True,
            text=True,
            timeout=self.config.timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(f"aspell exited with {result.returncode}: {result.stderr.strip()}")
        return result.stdout

    def check(self, text: str, level: int, start_line: int) -> List[Dict[str, Any]]:
        source_lines: List[str] = []
        line_numbers: List[int] = []
        to_check: List[str] = []
        for offset, line in enumerate(text.split("\n")):
            if should_skip(line):
                continue
            cleaned = clean_line(line)
            if not cleaned.strip():
                continue
            source_lines.append(line)
            line_numbers.append(start_line + offset)
            to_check.append(cleaned)

        if not to_check:
            return []

        groups = parse_aspell_output(self._run(to_check), len(to_check))

        findings: List[Dict[str, Any]] = []
        seen = set()
        for line, line_no, misses in zip(source_lines, line_numbers, groups):
            for misspelled, suggestions in misses:
                best = suggestions[0] if suggestions else ""
                if not is_likely_typo(misspelled, best) or misspelled not in line:
                    continue
                key = (line_no, misspelled)
                if key in seen:
                    continue
                seen.add(key)
                findings.append({
                    "line": line_no,
                    "type": "suggestion",
                    "kind": "spelling",
                    "from": misspelled,
                    "to": best,
                    "reason": f'Possible misspelling: "{misspelled}"',
                    "context": f"Suggestion: {', '.join(suggestions[:3])}",
                })
        logger.info(f"aspell flagged {len(findings)} possible misspellings")
        return findings
