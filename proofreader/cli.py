from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from proofreader.checkers import build_checker
from proofreader.changelog import write_txt
from proofreader.config import ConfigError, ENGINES, LEVELS, load_config
from proofreader.pipeline import run_apply, run_proofread
from proofreader.resolve import normalize_ids

logger = logging.getLogger("proofreader")


def _setup_logging(verbose: bool) -> None:
    # stdout is reserved for the JSON payload
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(
        prog="proofread",
        description="Proofread a Markdown document: auto-apply corrections, embed suggestions for review",
    )
    ap.add_argument("input_file", help="Path to the document (e.g. chapter.md)")
    ap.add_argument(
        "--engine", choices=ENGINES, default=None,
        help="llm: Claude-based proofreading (default); spellcheck: deterministic aspell pass; rules: YAML replacement rules",
    )
    ap.add_argument(
        "--level", type=int, choices=LEVELS, default=None,
        help="1 mechanical only, 2 light style pass (default), 3 comprehensive review",
    )
    ap.add_argument("--config", help="YAML config file")
    ap.add_argument("--max-chunk-tokens", type=int, default=None, help="Approximate tokens per checker call")

    llm_group = ap.add_argument_group("LLM Options")
    llm_group.add_argument(
        "--anthropic-api-key", default=None,
        help="Anthropic API key (or set ANTHROPIC_API_KEY env var)",
    )
    llm_group.add_argument("--model", default=None, help="Claude model (or set PROOFREAD_MODEL env var)")

    rules_group = ap.add_argument_group("Rules Options")
    rules_group.add_argument("--rules", default=None, help="Replacement rule pack (YAML) for --engine rules")

    ap.add_argument("--report", help="Also write a plain-text review sheet to this path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    args = ap.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(
            args.config,
            env=os.environ,
            engine=args.engine,
            level=args.level,
            max_chunk_tokens=args.max_chunk_tokens,
            api_key=args.anthropic_api_key,
            model=args.model,
            rules_path=args.rules,
        ).validate()
        checker = build_checker(config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        result = run_proofread(
            args.input_file,
            checker,
            level=config.level,
            max_chunk_tokens=config.max_chunk_tokens,
        )
        payload = result.to_dict()
        if args.report:
            write_txt(args.report, payload)
    except Exception as e:
        logger.error(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)

    print(json.dumps(payload, indent=2, ensure_ascii=False))


def apply_main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(
        prog="apply-suggestions",
        description="Resolve review markers in a .proofread. document and write the .final. document",
        epilog="Examples:\n  apply-suggestions doc.proofread.md S1 S3 S5\n  apply-suggestions doc.proofread.md all",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("input_file", help="Path to <file>.proofread.md")
    ap.add_argument("ids", nargs="+", metavar="ID", help="Suggestion ids to accept (S1 S2 ...) or 'all'")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    args = ap.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        result = run_apply(args.input_file, normalize_ids(args.ids))
    except Exception as e:
        logger.error(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)

    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
