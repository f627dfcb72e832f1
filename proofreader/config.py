from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

ENGINES = ("llm", "spellcheck", "rules")
LEVELS = (1, 2, 3)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class ConfigError(Exception):
    """Fatal configuration problem, reported before any processing."""


@dataclass
class ProofreadConfig:
    """Settings for one proofreading run, resolved once at start-up."""
    engine: str = "llm"
    level: int = 2
    max_chunk_tokens: int = 6000

    # llm engine
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_tokens: int = 8192
    temperature: float = 0.2
    max_retries: int = 3
    min_request_interval: float = 0.3

    # spellcheck engine
    aspell_binary: str = "aspell"
    aspell_lang: str = "en_GB"

    # rules engine
    rules_path: Optional[str] = None

    def validate(self) -> "ProofreadConfig":
        if self.engine not in ENGINES:
            raise ConfigError(f"Engine must be one of {', '.join(ENGINES)}; got {self.engine!r}")
        if self.level not in LEVELS:
            raise ConfigError(f"Level must be 1, 2, or 3; got {self.level!r}")
        if self.max_chunk_tokens < 1:
            raise ConfigError("max_chunk_tokens must be positive")
        if self.engine == "llm" and not self.api_key:
            raise ConfigError("ANTHROPIC_API_KEY not set (environment, config file or --anthropic-api-key)")
        return self


def load_config_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return data


def load_config(
    config_path: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ProofreadConfig:
    """
    Build the run configuration.

    Precedence (lowest first): defaults, YAML file, environment,
    explicit overrides (CLI flags). ``None`` overrides are ignored.
    """
    env = env or {}
    known = {f.name for f in fields(ProofreadConfig)}
    values: Dict[str, Any] = {}

    if config_path:
        for k, v in load_config_file(config_path).items():
            if k not in known:
                logger.warning(f"Ignoring unknown config key {k!r} in {config_path}")
                continue
            values[k] = v

    if env.get("ANTHROPIC_API_KEY"):
        values["api_key"] = env["ANTHROPIC_API_KEY"]
    if env.get("PROOFREAD_MODEL"):
        values["model"] = env["PROOFREAD_MODEL"]

    for k, v in overrides.items():
        if k not in known:
            raise ConfigError(f"Unknown setting {k!r}")
        if v is not None:
            values[k] = v

    try:
        cfg = replace(ProofreadConfig(), **values)
        cfg.level = int(cfg.level)
        cfg.max_chunk_tokens = int(cfg.max_chunk_tokens)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    return cfg
