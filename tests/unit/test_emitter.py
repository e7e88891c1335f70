from __future__ import annotations

import os
import stat
import sys
from pathlib import Path
from typing import List

import pytest

from stdpkgs.emitter import (
    FormatterError,
    format_source,
    go_quote,
    portable_path,
    render_source,
    write_output,
)
from stdpkgs.models import EmitterSettings, StdPkg


GOROOT = "/usr/lib/go"


def _index():
    return {
        "http": [StdPkg("net/http", f"{GOROOT}/src/net/http")],
        "fmt": [StdPkg("fmt", f"{GOROOT}/src/fmt")],
        "util": [
            StdPkg("a/util", f"{GOROOT}/src/a/util"),
            StdPkg("b/util", f"{GOROOT}/src/b/util"),
        ],
    }


def test_render_source_emits_sorted_map_with_portable_dirs() -> None:
    settings = EmitterSettings(header="this file is auto-generated", goroot=GOROOT)

    source = render_source(_index(), settings)

    assert source == (
        "// this file is auto-generated\n"
        "\n"
        "package filters\n"
        "\n"
        "type stdpkg struct {\n"
        "\tpath, dir string\n"
        "}\n"
        "\n"
        "var stdpkgs = map[string][]stdpkg{\n"
        '\t"fmt": {\n'
        '\t\t{path: "fmt", dir: "/go/src/fmt"},\n'
        "\t},\n"
        '\t"http": {\n'
        '\t\t{path: "net/http", dir: "/go/src/net/http"},\n'
        "\t},\n"
        '\t"util": {\n'
        '\t\t{path: "a/util", dir: "/go/src/a/util"},\n'
        '\t\t{path: "b/util", dir: "/go/src/b/util"},\n'
        "\t},\n"
        "}\n"
    )


def test_render_source_empty_index() -> None:
    source = render_source({}, EmitterSettings(header=""))

    assert source.startswith("package filters\n")
    assert source.endswith("var stdpkgs = map[string][]stdpkg{}\n")


def test_render_source_custom_names_and_multiline_header() -> None:
    settings = EmitterSettings(
        package="imports",
        type_name="pkgInfo",
        var_name="stdlib",
        header="Copyright 2016 govend.\n\nGenerated, do not edit.\n",
    )

    source = render_source({"os": [StdPkg("os", "/opt/go/src/os")]}, settings)

    assert source.splitlines()[:5] == [
        "// Copyright 2016 govend.",
        "",
        "// Generated, do not edit.",
        "",
        "package imports",
    ]
    assert "type pkgInfo struct {" in source
    assert "var stdlib = map[string][]pkgInfo{" in source
    assert '{path: "os", dir: "/opt/go/src/os"},' in source


def test_render_source_keeps_dirs_without_goroot() -> None:
    source = render_source(_index(), EmitterSettings(goroot=None))

    assert f'dir: "{GOROOT}/src/fmt"' in source
    assert '"/go/src' not in source


def test_render_source_replaces_every_goroot_occurrence() -> None:
    nested = StdPkg("x", f"{GOROOT}/src/mirror{GOROOT}/x")
    source = render_source({"x": [nested]}, EmitterSettings(goroot=GOROOT, placeholder="$GOROOT"))

    assert GOROOT not in source
    assert 'dir: "$GOROOT/src/mirror$GOROOT/x"' in source


def test_render_source_is_byte_stable() -> None:
    settings = EmitterSettings(goroot=GOROOT)
    assert render_source(_index(), settings) == render_source(dict(reversed(list(_index().items()))), settings)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("/go/src/fmt", "/go/src/fmt"),
        ("/usr/lib/go/src/fmt", "/go/src/fmt"),
        ("/usr/lib/go/src/usr/lib/go", "/go/src/go"),
        ("/opt/other", "/opt/other"),
    ],
)
def test_portable_path(value: str, expected: str) -> None:
    assert portable_path(value, GOROOT, "/go") == expected


def test_portable_path_without_root_is_identity() -> None:
    assert portable_path("/usr/lib/go/src", None, "/go") == "/usr/lib/go/src"
    assert portable_path("/usr/lib/go/src", "", "/go") == "/usr/lib/go/src"


def test_go_quote_escapes_specials() -> None:
    assert go_quote("net/http") == '"net/http"'
    assert go_quote('C:\\go\\src "x"') == '"C:\\\\go\\\\src \\"x\\""'
    assert go_quote("tab\there") == '"tab\\there"'


def test_go_quote_escapes_bytes_that_are_not_utf8() -> None:
    name = os.fsdecode(b"bad\xffname")

    assert go_quote(name) == '"bad\\xffname"'
    assert go_quote("caf\u00e9") == '"caf\u00e9"'


def test_format_source_skipped_without_command() -> None:
    assert format_source("package x\n", None) == "package x\n"
    assert format_source("package x\n", []) == "package x\n"


def test_format_source_pipes_through_command(passthrough_formatter: List[str]) -> None:
    source = render_source(_index(), EmitterSettings(goroot=GOROOT))
    assert format_source(source, passthrough_formatter) == source


def test_format_source_raises_on_failure(failing_formatter: List[str]) -> None:
    with pytest.raises(FormatterError, match="expected package"):
        format_source("package x\n", failing_formatter)


def test_format_source_raises_when_formatter_missing(tmp_path: Path) -> None:
    with pytest.raises(FormatterError):
        format_source("package x\n", [str(tmp_path / "no-such-gofmt")])


def test_format_source_rejects_empty_output() -> None:
    with pytest.raises(FormatterError, match="no output"):
        format_source("package x\n", [sys.executable, "-c", "pass"])


def test_write_output_overwrites_and_cleans_up(tmp_path: Path) -> None:
    target = tmp_path / "stdpkgs.go"
    target.write_text("stale content that is much longer than the new one\n" * 20, encoding="utf-8")

    written = write_output(target, "package filters\n")

    assert written == target
    assert target.read_text(encoding="utf-8") == "package filters\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["stdpkgs.go"]
    assert stat.S_IMODE(os.stat(target).st_mode) == 0o644


def test_write_output_failure_propagates(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        write_output(tmp_path / "missing-dir" / "stdpkgs.go", "package filters\n")
