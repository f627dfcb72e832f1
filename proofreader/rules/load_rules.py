from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Set
import yaml

DEFAULT_RULES_PATH = str(Path(__file__).parent / "default_rules.yml")


@dataclass
class ReplacementRule:
    id: str
    category: str
    rationale: str
    search: str
    replace: str
    case_insensitive: bool = True
    whole_word: bool = True
    requires_review: bool = False


def load_rule_pack(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_replacement_rules(rule_pack: Dict[str, Any]) -> List[ReplacementRule]:
    rules: List[ReplacementRule] = []
    for r in rule_pack.get("replacement_rules", []) or []:
        rules.append(ReplacementRule(
            id=r["id"],
            category=r.get("category", "spelling"),
            rationale=r.get("rationale", ""),
            search=r["search"],
            replace=r["replace"],
            case_insensitive=bool(r.get("case_insensitive", True)),
            whole_word=bool(r.get("whole_word", True)),
            requires_review=bool(r.get("requires_review", False)),
        ))
    return rules


def load_protected_terms(rule_pack: Dict[str, Any]) -> Set[str]:
    return {str(t) for t in (rule_pack.get("protected_terms") or [])}
