"""
common.shared.utils

Progress helpers shared across the generator.
"""

from __future__ import annotations

from typing import Any

from tqdm import tqdm


class Progress:
    """
    Open-ended tqdm counter that closes itself when used as a context manager.

    The total is unknown up front (directory trees are walked lazily), so the
    bar only shows a running count and rate.
    """

    def __init__(self, desc: str = "Processing", unit: str = "it", disable: bool = False):
        self._tqdm = tqdm(
            desc=desc,
            unit=unit,
            leave=False,
            dynamic_ncols=True,
            disable=disable,
        )

    def __enter__(self) -> "Progress":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def update(self, n: int = 1) -> None:
        self._tqdm.update(n)

    def close(self) -> None:
        self._tqdm.close()
