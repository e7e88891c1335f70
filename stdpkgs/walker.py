"""
stdpkgs.walker

Depth-first walk over the standard library source roots.

Every directory below a root is a package candidate. Directories named
``testdata``, or whose name starts with ``.`` or a decimal digit, are neither
recorded nor descended into. Each directory handle is read completely and
closed before recursing, so only one handle is open per frame.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Iterable, List, Optional

from common.base.fs import absolute_path
from common.base.logging import get_logger
from common.shared.utils import Progress

from .models import PackageIndex, StdPkg

log = get_logger(__name__)

TESTDATA_DIRNAME = "testdata"


def is_ignored(name: str) -> bool:
    """True for directory names the walker must skip."""
    if not name or name == TESTDATA_DIRNAME:
        return True
    first = name[0]
    return first == "." or "0" <= first <= "9"


def _child_dirnames(path: str) -> List[str]:
    """Sorted names of the non-ignored subdirectories of ``path``.

    Raises OSError when ``path`` cannot be listed.
    """
    names: List[str] = []
    with os.scandir(path) as entries:
        for entry in entries:
            if is_ignored(entry.name):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    names.append(entry.name)
            except OSError as exc:
                log.warning("⚠️ cannot stat %s: %s", entry.path, exc)
    names.sort()
    return names


def load_package(
    root: str,
    import_path: str,
    index: PackageIndex,
    progress: Optional[Progress] = None,
) -> None:
    """Record ``import_path`` under ``root`` and recurse into its children."""
    name = posixpath.basename(import_path)
    if is_ignored(name):
        return

    pkg_dir = os.path.join(root, *import_path.split("/"))
    index.setdefault(name, []).append(StdPkg(path=import_path, dir=pkg_dir))
    if progress is not None:
        progress.update()

    try:
        children = _child_dirnames(pkg_dir)
    except OSError as exc:
        log.warning("⚠️ skipping unreadable package dir %s: %s", pkg_dir, exc)
        return

    for child in children:
        load_package(root, f"{import_path}/{child}", index, progress)


def walk_roots(
    roots: Iterable[Path | str],
    progress: Optional[Progress] = None,
) -> PackageIndex:
    """Collect every package below ``roots`` into a base-name index."""
    index: PackageIndex = {}
    for raw_root in roots:
        root = str(absolute_path(raw_root))
        try:
            children = _child_dirnames(root)
        except OSError as exc:
            log.warning("⚠️ skipping unreadable source root %s: %s", root, exc)
            continue

        log.debug("Walking %s (%d top-level dirs)", root, len(children))
        for child in children:
            load_package(root, child, index, progress)

    log.info(
        "Collected %d packages under %d names",
        sum(len(records) for records in index.values()),
        len(index),
    )
    return index
