"""Command-line options: external variables, top-level arguments, output and traces."""

from __future__ import annotations

import argparse
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

DEFAULT_MAX_STACK = 200
DEFAULT_MAX_TRACE = 20
COMPACT_TRACE_PADDING = 4


@dataclass(frozen=True)
class ExtVar:
    """A named string given on the command line: an external variable or an argument."""

    name: str
    value: str


def parse_ext_str(text: str) -> ExtVar:
    """Parse ``name=value``, or ``name`` whose value is read from that environment variable.

    The value may itself contain ``=``.
    """
    name, sep, value = text.partition("=")
    if sep:
        return ExtVar(name, value)
    try:
        return ExtVar(text, os.environ[text])
    except KeyError:
        raise ValueError("missing env var") from None


def parse_ext_file(text: str) -> ExtVar:
    """Parse ``name=path`` and read the value from the file at path."""
    parts = text.split("=")
    if len(parts) != 2:
        raise ValueError("bad ext-file syntax")
    name, path = parts
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ValueError(str(err)) from None
    return ExtVar(name, content)


@dataclass(frozen=True)
class TlaArg:
    """A top-level argument: a plain string, or code to evaluate."""

    value: str
    is_code: bool = False
    source_name: Optional[str] = None


def collect_tla_args(
    strs: Iterable[ExtVar] = (),
    str_files: Iterable[ExtVar] = (),
    codes: Iterable[ExtVar] = (),
    code_files: Iterable[ExtVar] = (),
) -> dict[str, TlaArg]:
    """Gather top-level arguments by name; later ones replace earlier ones of the same name."""
    out: dict[str, TlaArg] = {}
    for ext in (*strs, *str_files):
        out[ext.name] = TlaArg(ext.value)
    for ext in (*codes, *code_files):
        out[ext.name] = TlaArg(
            ext.value, is_code=True, source_name=f"<top-level-arg:{ext.name}>"
        )
    return out


def library_paths(
    jpaths: Iterable[Any], environ: Optional[Mapping[str, str]] = None
) -> list[Path]:
    """Library search directories: command-line ones right-most first, then JSONNET_PATH."""
    environ = os.environ if environ is None else environ
    paths = [Path(p) for p in reversed(list(jpaths))]
    extra = environ.get("JSONNET_PATH")
    if extra is not None:
        paths.extend(Path(p) for p in extra.split(os.pathsep))
    return paths


class ManifestFormatName(Enum):
    """Output formats a result can be manifested in."""

    STRING = "string"
    JSON = "json"
    YAML = "yaml"
    TOML = "toml"

    def __str__(self) -> str:
        return self.value


class TraceFormatName(Enum):
    """Ways of displaying a stack trace."""

    COMPACT = "compact"
    EXPLAINING = "explaining"

    def __str__(self) -> str:
        return self.value


_DEFAULT_PADDING = {
    ManifestFormatName.JSON: 3,
    ManifestFormatName.YAML: 2,
    ManifestFormatName.TOML: 2,
}


@dataclass(frozen=True)
class ManifestOptions:
    """How the result is turned into output text."""

    format: ManifestFormatName = ManifestFormatName.JSON
    string: bool = False
    yaml_stream: bool = False
    line_padding: Optional[int] = None
    preserve_order: bool = False

    def __post_init__(self) -> None:
        if self.string and self.yaml_stream:
            raise ValueError("--yaml-stream cannot be used with --string")
        if self.line_padding is not None and self.line_padding < 0:
            raise ValueError("line padding must not be negative")

    def line_padding_or_default(self) -> Optional[int]:
        """The padding to use, or None for output kinds that take no padding."""
        if self.string or self.format is ManifestFormatName.STRING:
            return None
        if self.line_padding is not None:
            return self.line_padding
        return _DEFAULT_PADDING[self.format]

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "ManifestOptions":
        """Build from arguments parsed by the parser of build_argument_parser."""
        return cls(
            format=namespace.format,
            string=namespace.string,
            yaml_stream=namespace.yaml_stream,
            line_padding=namespace.line_padding,
            preserve_order=namespace.preserve_order,
        )


@dataclass(frozen=True)
class TraceOptions:
    """How stack traces are displayed; max_trace 0 shows every frame."""

    trace_format: Optional[TraceFormatName] = None
    max_trace: int = DEFAULT_MAX_TRACE

    @property
    def effective_format(self) -> TraceFormatName:
        return self.trace_format or TraceFormatName.COMPACT

    @property
    def padding(self) -> Optional[int]:
        """Line padding of the compact format; the explaining format has none."""
        if self.effective_format is TraceFormatName.COMPACT:
            return COMPACT_TRACE_PADDING
        return None

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "TraceOptions":
        """Build from arguments parsed by the parser of build_argument_parser."""
        return cls(namespace.trace_format, namespace.max_trace)


def _argument_type(convert: Callable[[str], Any], name: str) -> Callable[[str], Any]:
    def parse(text: str) -> Any:
        try:
            return convert(text)
        except ValueError as err:
            raise argparse.ArgumentTypeError(str(err)) from None

    parse.__name__ = name
    return parse


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"{text} is negative")
    return value


_EXT_STR = _argument_type(parse_ext_str, "name[=value]")
_EXT_FILE = _argument_type(parse_ext_file, "name=path")
_COUNT = _argument_type(_non_negative, "count")


def build_argument_parser() -> argparse.ArgumentParser:
    """The command-line parser of the interpreter."""
    parser = argparse.ArgumentParser(description="Jsonnet commandline interpreter")
    parser.add_argument("--version", action="store_true", help="print version")

    group = parser.add_argument_group("input")
    group.add_argument(
        "-e", "--exec", action="store_true",
        help="treat input as code, evaluate it instead of reading a file",
    )
    group.add_argument(
        "input", nargs="?",
        help="path to the file to be compiled, or the code itself with --exec",
    )

    group = parser.add_argument_group("options")
    group.add_argument(
        "-s", "--max-stack", type=_COUNT, default=DEFAULT_MAX_STACK,
        help="maximal allowed number of stack frames",
    )
    group.add_argument(
        "-J", "--jpath", action="append", type=Path, default=[],
        help="library search dirs (right-most wins); JSONNET_PATH is searched too",
    )

    group = parser.add_argument_group("top level arguments")
    group.add_argument("-A", "--tla-str", action="append", type=_EXT_STR, default=[])
    group.add_argument("--tla-str-file", action="append", type=_EXT_FILE, default=[])
    group.add_argument("--tla-code", action="append", type=_EXT_STR, default=[])
    group.add_argument("--tla-code-file", action="append", type=_EXT_FILE, default=[])

    group = parser.add_argument_group("standard library")
    group.add_argument("--no-stdlib", action="store_true", help="disable standard library")
    group.add_argument("-V", "--ext-str", action="append", type=_EXT_STR, default=[])
    group.add_argument("--ext-str-file", action="append", type=_EXT_FILE, default=[])
    group.add_argument("--ext-code", action="append", type=_EXT_STR, default=[])
    group.add_argument("--ext-code-file", action="append", type=_EXT_FILE, default=[])

    group = parser.add_argument_group("garbage collection")
    group.add_argument("--gc-collect-on-exit", action="store_true")
    group.add_argument("--gc-print-stats", action="store_true")
    group.add_argument("--gc-collect-before-printing-stats", action="store_true")

    group = parser.add_argument_group("stack trace visual")
    group.add_argument(
        "--trace-format", type=TraceFormatName,
        choices=list(TraceFormatName), default=None,
    )
    group.add_argument(
        "-t", "--max-trace", type=_COUNT, default=DEFAULT_MAX_TRACE,
        help="number of stack trace elements to display, 0 for all",
    )

    group = parser.add_argument_group("manifestification output")
    exclusive = group.add_mutually_exclusive_group()
    exclusive.add_argument(
        "-f", "--format", type=ManifestFormatName,
        choices=list(ManifestFormatName), default=ManifestFormatName.JSON,
    )
    exclusive.add_argument(
        "-S", "--string", action="store_true", help="expect plain string as output"
    )
    group.add_argument("-y", "--yaml-stream", action="store_true")
    group.add_argument("--line-padding", type=_COUNT, default=None)
    group.add_argument("--preserve-order", action="store_true")

    group = parser.add_argument_group("output")
    group.add_argument("-o", "--output-file", type=Path, default=None)
    group.add_argument("-c", "--create-output-dirs", action="store_true")
    group.add_argument("-m", "--multi", type=Path, default=None)

    group = parser.add_argument_group("debug")
    group.add_argument("--os-stack", type=_COUNT, default=None, metavar="size")
    return parser