"""
common.base.ops

Subprocess helper shared by the generator.

`run_command` executes an external tool (`go env`, `gofmt`, ...) and hands
back its exit code and raw output. It never raises for a failing or missing
executable; callers decide what a non-zero status means.
"""

from __future__ import annotations

import subprocess
from typing import Mapping, Optional, Sequence, Tuple

from .logging import get_logger

log = get_logger(__name__)


def run_command(
    cmd: Sequence[str],
    input_text: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[int, str, str]:
    """
    Execute a command and capture its output.

    Args:
        cmd: Argument list, never run through a shell
        input_text: Text fed to the process on stdin
        env: Environment for the child process (inherits ours when None)

    Returns:
        tuple: (exit_code, stdout, stderr) with output left unstripped
    """
    argv = list(cmd)
    log.debug(f"▶️ Running command: {argv}")

    try:
        result = subprocess.run(
            argv,
            input=input_text,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        log.debug(f"Could not start {argv[0]}: {e}")
        return (127, "", str(e))

    if result.returncode == 0:
        log.debug(f"✅ Command OK: {argv}")
    else:
        log.debug(f"Command returned {result.returncode}: {argv}")
        if result.stderr.strip():
            log.debug(f"stderr: {result.stderr.strip()}")
    return result.returncode, result.stdout, result.stderr
