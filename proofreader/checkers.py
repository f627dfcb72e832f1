from __future__ import annotations
from typing import Any, Dict, List, Protocol

import yaml

from proofreader.config import ProofreadConfig, ConfigError


class Checker(Protocol):
    """
    Anything that can look at a chunk of text and report findings.

    ``start_line`` is the absolute number of the chunk's first line;
    returned records must carry absolute line numbers.
    """
    name: str

    def check(self, text: str, level: int, start_line: int) -> List[Dict[str, Any]]:
        ...


def build_checker(config: ProofreadConfig) -> Checker:
    """Construct the checker for ``config.engine``; raises ConfigError if it cannot run."""
    if config.engine == "llm":
        from proofreader.llm.client import ClaudeClient, LLMConfig, LLMChecker
        if not config.api_key:
            raise ConfigError("ANTHROPIC_API_KEY not set")
        return LLMChecker(ClaudeClient(LLMConfig(
            api_key=config.api_key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            max_retries=config.max_retries,
            min_request_interval=config.min_request_interval,
        )))
    if config.engine == "spellcheck":
        from proofreader.adapters.aspell_adapter import AspellChecker, AspellConfig
        return AspellChecker(AspellConfig(aspell_binary=config.aspell_binary, lang=config.aspell_lang))
    if config.engine == "rules":
        from proofreader.propose import RuleChecker
        try:
            return RuleChecker.from_path(config.rules_path)
        except (OSError, yaml.YAMLError, KeyError) as e:
            raise ConfigError(f"Cannot load rule pack: {e}") from e
    raise ConfigError(f"Unknown engine: {config.engine}")
