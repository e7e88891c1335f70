"""
stdpkgs.roots

Locate the Go runtime root and the standard library source roots beneath it.

Resolution order for GOROOT: an explicit value, then ``$GOROOT``, then the
output of ``go env GOROOT``. GOPATH is never consulted, so only the standard
library is enumerated.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional

from common.base.fs import absolute_path
from common.base.logging import get_logger
from common.base.ops import run_command

log = get_logger(__name__)

GOROOT_ENV = "GOROOT"


def _goroot_from_toolchain(go_bin: str, environ: Mapping[str, str]) -> Optional[str]:
    code, out, _err = run_command([go_bin, "env", GOROOT_ENV], env=environ)
    if code != 0:
        return None
    value = out.strip()
    return value or None


def resolve_goroot(
    explicit: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    go_bin: str = "go",
) -> Path:
    """Return the absolute GOROOT directory.

    Raises:
        FileNotFoundError: No candidate was found, or the candidate is not a directory.
    """
    env = dict(os.environ if environ is None else environ)
    source = "config"
    candidate: Optional[str] = str(explicit) if explicit else None
    if not candidate:
        candidate, source = env.get(GOROOT_ENV) or None, f"${GOROOT_ENV}"
    if not candidate:
        candidate, source = _goroot_from_toolchain(go_bin, env), f"`{go_bin} env {GOROOT_ENV}`"
    if not candidate:
        raise FileNotFoundError(
            f"Cannot locate GOROOT: set {GOROOT_ENV}, configure 'goroot', or put '{go_bin}' on PATH"
        )

    goroot = absolute_path(candidate)
    if not goroot.is_dir():
        raise FileNotFoundError(f"GOROOT from {source} is not a directory: {goroot}")
    log.debug("GOROOT resolved from %s: %s", source, goroot)
    return goroot


def source_roots(goroot: Path) -> List[Path]:
    """Library source roots under ``goroot`` (``$GOROOT/src``)."""
    return [goroot / "src"]
