"""Command-line entry points for stdpkgs-gen.

Installed as ``console_scripts`` so the generator can be run from the
directory that should receive ``stdpkgs.go``; shell completion is provided
through ``argcomplete``.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import argcomplete

from common.base.logging import get_logger, normalize_use_rich, setup_logging
from common.shared.loader import load_task_config
from stdpkgs.emitter import FormatterError
from stdpkgs.generate import generate

TASK_NAME = "stdpkgs_gen"

log = get_logger(__name__)


def _configure_logging(logging_cfg: Dict[str, Any], level_override: Optional[str]) -> None:
    setup_logging(
        level=level_override or logging_cfg.get("level"),
        use_rich=normalize_use_rich(logging_cfg.get("use_rich")),
        log_dir=logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stdpkgs-gen",
        description="Generate stdpkgs.go, the static index of Go standard library packages.",
    )
    parser.add_argument("--config", "-c", help="Path to configuration YAML (defaults to repo config).")
    parser.add_argument("--output", "-o", help="Output file (defaults to ./stdpkgs.go).")
    parser.add_argument("--goroot", help="Go runtime root (defaults to $GOROOT, then `go env GOROOT`).")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Set logging verbosity (defaults to config, INFO if unset).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated source to stdout instead of writing the output file.",
    )
    parser.add_argument("--no-format", action="store_true", help="Skip the external formatter (gofmt).")
    parser.add_argument("--progress", action="store_true", help="Show a directory counter while scanning.")
    return parser


def cli_stdpkgs_gen(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        cfg = load_task_config(TASK_NAME, args.config)
    except (OSError, ValueError) as exc:
        setup_logging(level=args.log_level)
        log.error("❌ Invalid configuration: %s", exc)
        return 1

    logging_cfg = cfg.pop("__logging__", {}) or {}
    _configure_logging(logging_cfg, args.log_level)

    if args.output:
        cfg["output"] = str(Path(args.output).expanduser())
    if args.goroot:
        cfg["goroot"] = str(Path(args.goroot).expanduser())
    if args.no_format:
        cfg["format"] = False
    dry_run = args.dry_run or bool(cfg.get("dry_run", False))

    log.debug("Configuration: %s", cfg)
    try:
        result = generate(cfg, dry_run=dry_run, show_progress=args.progress)
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return 130
    except FormatterError as exc:
        log.error("❌ Formatting failed, nothing written: %s", exc)
        return 1
    except OSError as exc:
        log.error("❌ Generation failed: %s", exc)
        return 1

    if result.output is None:
        sys.stdout.write(result.source)
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_stdpkgs_gen())


__all__ = ["build_parser", "cli_stdpkgs_gen"]
