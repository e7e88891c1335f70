from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Iterator, List

import pytest


PASSTHROUGH_FORMATTER: List[str] = [
    sys.executable,
    "-c",
    "import sys; sys.stdout.write(sys.stdin.read())",
]
FAILING_FORMATTER: List[str] = [
    sys.executable,
    "-c",
    "import sys; sys.stderr.write('1:1: expected package'); sys.exit(2)",
]


def _make_dirs(base: Path, rel_paths: Iterable[str]) -> Path:
    for rel in rel_paths:
        (base / rel).mkdir(parents=True, exist_ok=True)
    return base


@pytest.fixture
def make_tree() -> Callable[[Path, Iterable[str]], Path]:
    """Create every directory in ``rel_paths`` below ``base`` and return ``base``."""
    return _make_dirs


@pytest.fixture
def goroot(tmp_path: Path) -> Path:
    """A small fake GOROOT with a handful of standard packages under src/."""
    root = tmp_path / "go"
    _make_dirs(
        root / "src",
        [
            "fmt",
            "net/http/httptest",
            "net/http/testdata",
            "vendor/golang.org/x/net",
            "vendor/v1",
            ".git/objects",
        ],
    )
    (root / "src" / "fmt" / "print.go").write_text("package fmt\n", encoding="utf-8")
    return root


@pytest.fixture
def passthrough_formatter() -> List[str]:
    return list(PASSTHROUGH_FORMATTER)


@pytest.fixture
def failing_formatter() -> List[str]:
    return list(FAILING_FORMATTER)


@pytest.fixture
def propagate_logs() -> Iterator[None]:
    """Let caplog see generator records even after setup_logging disabled propagation."""
    logger = logging.getLogger("stdpkgs")
    saved = (logger.propagate, logger.level)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    yield
    logger.propagate, level = saved
    logger.setLevel(level)
