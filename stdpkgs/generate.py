"""
stdpkgs.generate

The generation pipeline: resolve roots, walk, render, format, write.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from common.base.logging import get_logger
from common.shared.utils import Progress

from .emitter import (
    DEFAULT_FORMATTER,
    DEFAULT_OUTPUT_FILENAME,
    format_source,
    render_source,
    write_output,
)
from .models import (
    DEFAULT_HEADER,
    DEFAULT_PACKAGE,
    DEFAULT_PLACEHOLDER,
    DEFAULT_TYPE_NAME,
    DEFAULT_VAR_NAME,
    EmitterSettings,
    PackageIndex,
)
from .roots import resolve_goroot, source_roots
from .walker import walk_roots

log = get_logger(__name__)


@dataclass
class GenerationResult:
    index: PackageIndex
    source: str
    output: Optional[Path]  # None when nothing was written (dry run)


def emitter_settings(config: Mapping[str, Any], goroot: Optional[Path]) -> EmitterSettings:
    header = config.get("header")
    return EmitterSettings(
        package=config.get("package") or DEFAULT_PACKAGE,
        type_name=config.get("type_name") or DEFAULT_TYPE_NAME,
        var_name=config.get("var_name") or DEFAULT_VAR_NAME,
        header=DEFAULT_HEADER if header is None else header,
        goroot=str(goroot) if goroot is not None else None,
        placeholder=config.get("placeholder") or DEFAULT_PLACEHOLDER,
    )


def generate(
    config: Mapping[str, Any],
    *,
    dry_run: bool = False,
    show_progress: bool = False,
    environ: Optional[Mapping[str, str]] = None,
) -> GenerationResult:
    """Run the whole pipeline for one task configuration.

    ``config`` is the mapping returned by
    :func:`common.shared.loader.load_task_config` (any subset of its keys).
    Without explicit ``roots`` the source root is ``<GOROOT>/src``. With
    explicit ``roots`` and no ``goroot`` the emitted directories keep their
    absolute paths.

    Raises:
        FileNotFoundError: GOROOT is required but cannot be located.
        FormatterError: The configured formatter failed.
        OSError: The output file could not be written.
    """
    roots_cfg = config.get("roots")
    goroot_cfg = config.get("goroot")

    goroot: Optional[Path] = None
    if goroot_cfg or not roots_cfg:
        goroot = resolve_goroot(goroot_cfg, environ=environ)
    roots = [Path(root) for root in roots_cfg] if roots_cfg else source_roots(goroot)  # type: ignore[arg-type]
    if goroot is None:
        log.debug("No GOROOT configured; directories are emitted verbatim")

    log.info("🔎 Scanning %s", ", ".join(str(root) for root in roots))
    with Progress(desc="Scanning", unit="dir", disable=not show_progress) as progress:
        index = walk_roots(roots, progress)

    source = render_source(index, emitter_settings(config, goroot))

    formatter = config.get("formatter", DEFAULT_FORMATTER) if config.get("format", True) else None
    source = format_source(source, formatter)

    if dry_run or config.get("dry_run"):
        log.info("[DRY-RUN] Skipping write of %d bytes", len(source.encode("utf-8")))
        return GenerationResult(index=index, source=source, output=None)

    output = write_output(Path(config.get("output") or DEFAULT_OUTPUT_FILENAME), source)
    return GenerationResult(index=index, source=source, output=output)
