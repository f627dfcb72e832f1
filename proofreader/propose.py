from __future__ import annotations
from typing import Any, Dict, List, Optional, Set
import logging
import re

from proofreader.rules.load_rules import (
    DEFAULT_RULES_PATH,
    ReplacementRule,
    load_rule_pack,
    load_replacement_rules,
    load_protected_terms,
)

logger = logging.getLogger(__name__)


def _match_case(found: str, replacement: str) -> str:
    if found[:1].isupper() and replacement:
        return replacement[0].upper() + replacement[1:]
    return replacement


def _compile(rule: ReplacementRule) -> "re.Pattern[str]":
    flags = re.IGNORECASE if rule.case_insensitive else 0
    return re.compile((rf"\b{re.escape(rule.search)}\b" if rule.whole_word else re.escape(rule.search)), flags)


def propose_from_rules(text: str, rules: List[ReplacementRule], protected_terms: Set[str], start_line: int = 1) -> List[Dict[str, Any]]:
    """Scan each line with every rule and emit raw finding records."""
    findings: List[Dict[str, Any]] = []
    patterns = [(rule, _compile(rule)) for rule in rules
                # if search string appears within protected term, skip
                if not any(rule.search.lower() in t.lower() for t in protected_terms)]

    for offset, line in enumerate(text.split("\n")):
        for rule, pattern in patterns:
            seen = set()
            for m in pattern.finditer(line):
                before = m.group(0)
                if before in seen:
                    continue
                seen.add(before)
                findings.append({
                    "line": start_line + offset,
                    "type": "suggestion" if rule.requires_review else "auto-correction",
                    "kind": rule.category,
                    "from": before,
                    "to": _match_case(before, rule.replace),
                    "reason": rule.rationale or rule.id,
                })
    return findings


class RuleChecker:
    """Static-dictionary checker driven by a YAML rule pack."""

    name = "rules"

    def __init__(self, rules: List[ReplacementRule], protected_terms: Optional[Set[str]] = None):
        self.rules = rules
        self.protected_terms = protected_terms or set()

    @classmethod
    def from_path(cls, path: Optional[str] = None) -> "RuleChecker":
        pack = load_rule_pack(path or DEFAULT_RULES_PATH)
        rules = load_replacement_rules(pack)
        logger.info(f"Loaded {len(rules)} replacement rules from {path or DEFAULT_RULES_PATH}")
        return cls(rules, load_protected_terms(pack))

    def check(self, text: str, level: int, start_line: int) -> List[Dict[str, Any]]:
        rules = self.rules
        if level == 1:
            # mechanical pass only
            rules = [r for r in rules if not r.requires_review]
        return propose_from_rules(text, rules, self.protected_terms, start_line)
