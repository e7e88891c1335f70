from __future__ import annotations

import os
import sys
from pathlib import Path

from common.base.ops import run_command


def test_run_command_feeds_stdin_and_keeps_output_unstripped() -> None:
    code, out, err = run_command(
        [sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read().upper())"],
        input_text="package x\n\n",
    )

    assert code == 0
    assert out == "PACKAGE X\n\n"
    assert err == ""


def test_run_command_passes_environment() -> None:
    code, out, _err = run_command(
        [sys.executable, "-c", "import os; print(os.environ['GOROOT'])"],
        env={**os.environ, "GOROOT": "/opt/go"},
    )

    assert code == 0
    assert out.strip() == "/opt/go"


def test_run_command_reports_missing_executable(tmp_path: Path) -> None:
    code, out, err = run_command([str(tmp_path / "no-such-tool")])

    assert code == 127
    assert out == ""
    assert err
