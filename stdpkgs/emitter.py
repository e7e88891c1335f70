"""
stdpkgs.emitter

Turns a package index into Go source.

The text is assembled line by line from the index (no patching of a
pre-rendered blob), already in gofmt's canonical layout:

    package filters

    type stdpkg struct {
    	path, dir string
    }

    var stdpkgs = map[string][]stdpkg{
    	"http": {
    		{path: "net/http", dir: "/go/src/net/http"},
    	},
    }

Map keys are sorted so an unchanged tree always yields identical bytes. The
result may then be piped through an external formatter (``gofmt``) and is
written atomically.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import List, Optional, Sequence

from common.base.file_io import write_bytes_atomic
from common.base.logging import get_logger
from common.base.ops import run_command

from .models import EmitterSettings, PackageIndex, StdPkg

log = get_logger(__name__)

DEFAULT_OUTPUT_FILENAME = "stdpkgs.go"
DEFAULT_FORMATTER = ("gofmt",)


class FormatterError(RuntimeError):
    """The external source formatter failed or could not be started."""


_RAW_BYTE = re.compile("[\udc80-\udcff]")


def _hex_escape(match: "re.Match[str]") -> str:
    return "\\x%02x" % (ord(match.group()) - 0xDC00)


def go_quote(value: str) -> str:
    """Quote ``value`` as a Go interpreted string literal.

    Filenames that are not valid UTF-8 reach Python with each stray byte
    smuggled in as a lone surrogate (``os.fsdecode``). Those bytes are
    written as ``\\xNN`` escapes, as Go's ``%#v`` prints them.
    """
    text = os.fsencode(value).decode("utf-8", "surrogateescape")
    # JSON string escapes are a subset of Go's.
    return _RAW_BYTE.sub(_hex_escape, json.dumps(text, ensure_ascii=False))


def portable_path(value: str, goroot: Optional[str], placeholder: str) -> str:
    """Replace every occurrence of ``goroot`` in ``value`` with ``placeholder``."""
    if not goroot:
        return value
    return value.replace(goroot, placeholder)


def _header_lines(header: str) -> List[str]:
    lines = [line.rstrip() for line in header.strip("\n").splitlines()]
    return [f"// {line}" if line else "" for line in lines]


def _record_line(record: StdPkg, settings: EmitterSettings) -> str:
    directory = portable_path(record.dir, settings.goroot, settings.placeholder)
    return f"\t\t{{path: {go_quote(record.path)}, dir: {go_quote(directory)}}},"


def render_source(index: PackageIndex, settings: EmitterSettings) -> str:
    lines: List[str] = []
    if settings.header.strip():
        lines.extend(_header_lines(settings.header))
        lines.append("")

    lines.extend(
        [
            f"package {settings.package}",
            "",
            f"type {settings.type_name} struct {{",
            "\tpath, dir string",
            "}",
            "",
        ]
    )

    map_type = f"map[string][]{settings.type_name}"
    if not index:
        lines.append(f"var {settings.var_name} = {map_type}{{}}")
    else:
        lines.append(f"var {settings.var_name} = {map_type}{{")
        for name in sorted(index):
            lines.append(f"\t{go_quote(name)}: {{")
            lines.extend(_record_line(record, settings) for record in index[name])
            lines.append("\t},")
        lines.append("}")

    return "\n".join(lines) + "\n"


def format_source(source: str, command: Optional[Sequence[str]] = DEFAULT_FORMATTER) -> str:
    """Pipe ``source`` through ``command`` and return its stdout.

    ``command=None`` (or empty) returns ``source`` untouched.

    Raises:
        FormatterError: The formatter exited non-zero, could not be started,
            or printed nothing.
    """
    if not command:
        return source

    argv = [str(part) for part in command]
    code, out, err = run_command(argv, input_text=source)
    if code != 0:
        detail = err.strip() or "no diagnostics"
        raise FormatterError(f"{argv[0]} exited with status {code}: {detail}")
    if not out.strip():
        raise FormatterError(f"{argv[0]} produced no output")
    return out


def write_output(path: Path | str, source: str) -> Path:
    """Overwrite ``path`` with ``source`` (UTF-8), atomically."""
    target = write_bytes_atomic(path, source.encode("utf-8"))
    log.info("✅ Wrote %s (%d bytes)", target, len(source.encode("utf-8")))
    return target
