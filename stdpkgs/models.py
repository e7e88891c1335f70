"""Record types shared by the walker and the emitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

DEFAULT_PACKAGE = "filters"
DEFAULT_TYPE_NAME = "stdpkg"
DEFAULT_VAR_NAME = "stdpkgs"
DEFAULT_PLACEHOLDER = "/go"
DEFAULT_HEADER = "this file is auto-generated by stdpkgs-gen"


@dataclass(frozen=True)
class StdPkg:
    """One standard library package."""

    path: str  # import path, e.g. "net/http"
    dir: str  # absolute source directory, e.g. "/usr/lib/go/src/net/http"


# base name (last import path segment) -> records in traversal order
PackageIndex = Dict[str, List[StdPkg]]


@dataclass(frozen=True)
class EmitterSettings:
    package: str = DEFAULT_PACKAGE
    type_name: str = DEFAULT_TYPE_NAME
    var_name: str = DEFAULT_VAR_NAME
    header: str = DEFAULT_HEADER
    goroot: Optional[str] = None
    placeholder: str = DEFAULT_PLACEHOLDER
