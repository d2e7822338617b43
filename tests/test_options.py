from pathlib import Path

import pytest

from jsonnet_core.options import (
    ExtVar,
    ManifestFormatName,
    ManifestOptions,
    TlaArg,
    TraceFormatName,
    TraceOptions,
    build_argument_parser,
    collect_tla_args,
    library_paths,
    parse_ext_file,
    parse_ext_str,
)


def test_parse_ext_str_with_value():
    ext = parse_ext_str("name=value")
    assert ext == ExtVar("name", "value")


def test_parse_ext_str_from_environment(monkeypatch):
    monkeypatch.setenv("name", "value")
    ext = parse_ext_str("name")
    assert ext.name == "name"
    assert ext.value == "value"


def test_parse_ext_str_value_with_equals():
    ext = parse_ext_str("name=value=with=equals")
    assert ext.name == "name"
    assert ext.value == "value=with=equals"


def test_parse_ext_str_missing_env(monkeypatch):
    monkeypatch.delenv("JSONNET_CORE_UNSET_VAR", raising=False)
    with pytest.raises(ValueError, match="missing env var"):
        parse_ext_str("JSONNET_CORE_UNSET_VAR")


def test_parse_ext_file_reads_content(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("contents\n", encoding="utf-8")
    ext = parse_ext_file(f"var={path}")
    assert ext == ExtVar("var", "contents\n")


def test_parse_ext_file_bad_syntax():
    with pytest.raises(ValueError, match="bad ext-file syntax"):
        parse_ext_file("novalue")
    with pytest.raises(ValueError, match="bad ext-file syntax"):
        parse_ext_file("a=b=c")


def test_parse_ext_file_missing_file(tmp_path):
    with pytest.raises(ValueError):
        parse_ext_file(f"var={tmp_path / 'absent'}")


def test_collect_tla_args_kinds_and_override():
    args = collect_tla_args(
        strs=[ExtVar("a", "one"), ExtVar("b", "two")],
        str_files=[ExtVar("a", "file")],
        codes=[ExtVar("c", "1 + 2")],
        code_files=[ExtVar("b", "[]")],
    )
    assert args["a"] == TlaArg("file")
    assert args["b"].is_code and args["b"].value == "[]"
    assert args["c"].source_name == "<top-level-arg:c>"
    assert set(args) == {"a", "b", "c"}


def test_collect_tla_args_empty():
    assert collect_tla_args() == {}


def test_library_paths_reverses_and_appends_env():
    env = {"JSONNET_PATH": "lib1" + __import_pathsep() + "lib2"}
    paths = library_paths(["x", "y"], env)
    assert paths == [Path("y"), Path("x"), Path("lib1"), Path("lib2")]


def __import_pathsep():
    import os

    return os.pathsep


def test_library_paths_without_env():
    assert library_paths([Path("a"), Path("b")], {}) == [Path("b"), Path("a")]


def test_manifest_padding_defaults():
    assert ManifestOptions().line_padding_or_default() == 3
    assert ManifestOptions(format=ManifestFormatName.YAML).line_padding_or_default() == 2
    assert ManifestOptions(format=ManifestFormatName.TOML).line_padding_or_default() == 2
    assert ManifestOptions(string=True).line_padding_or_default() is None
    assert ManifestOptions(line_padding=0).line_padding_or_default() == 0


def test_manifest_string_conflicts_with_yaml_stream():
    with pytest.raises(ValueError):
        ManifestOptions(string=True, yaml_stream=True)


def test_trace_options_defaults():
    options = TraceOptions()
    assert options.effective_format is TraceFormatName.COMPACT
    assert options.max_trace == 20
    assert options.padding == 4
    assert TraceOptions(TraceFormatName.EXPLAINING).padding is None


def test_parser_defaults():
    ns = build_argument_parser().parse_args(["file.jsonnet"])
    assert ns.input == "file.jsonnet"
    assert ns.max_stack == 200
    assert ns.max_trace == 20
    assert ns.format is ManifestFormatName.JSON
    assert ns.exec is False
    assert ns.ext_str == []


def test_parser_collects_options(monkeypatch):
    monkeypatch.setenv("FROM_ENV", "env")
    ns = build_argument_parser().parse_args(
        ["-e", "code", "-V", "k=v", "-V", "FROM_ENV", "-A", "t=x",
         "-J", "a", "-J", "b", "-f", "yaml", "--trace-format", "explaining"]
    )
    assert ns.exec is True
    assert ns.ext_str == [ExtVar("k", "v"), ExtVar("FROM_ENV", "env")]
    assert collect_tla_args(ns.tla_str) == {"t": TlaArg("x")}
    assert ns.jpath == [Path("a"), Path("b")]
    manifest = ManifestOptions.from_namespace(ns)
    assert manifest.format is ManifestFormatName.YAML
    assert manifest.line_padding_or_default() == 2
    trace = TraceOptions.from_namespace(ns)
    assert trace.effective_format is TraceFormatName.EXPLAINING


def test_parser_string_conflicts_with_format():
    with pytest.raises(SystemExit):
        build_argument_parser().parse_args(["-S", "-f", "yaml", "x"])


def test_parser_rejects_bad_ext_file():
    with pytest.raises(SystemExit):
        build_argument_parser().parse_args(["--ext-str-file", "noequals", "x"])


def test_parser_rejects_negative_stack():
    with pytest.raises(SystemExit):
        build_argument_parser().parse_args(["-s", "-1", "x"])