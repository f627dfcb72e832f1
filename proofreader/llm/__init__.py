from __future__ import annotations

from proofreader.llm.client import ClaudeClient, LLMConfig, LLMChecker

__all__ = ["ClaudeClient", "LLMConfig", "LLMChecker"]
