"""Generator for the Go standard library package index (``stdpkgs.go``)."""

from .emitter import FormatterError, format_source, render_source, write_output
from .generate import GenerationResult, generate
from .models import EmitterSettings, PackageIndex, StdPkg
from .walker import is_ignored, walk_roots

__all__ = [
    "EmitterSettings",
    "FormatterError",
    "GenerationResult",
    "PackageIndex",
    "StdPkg",
    "format_source",
    "generate",
    "is_ignored",
    "render_source",
    "walk_roots",
    "write_output",
]
