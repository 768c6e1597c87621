"""Tests for jsxhoist.engine."""

from unittest.mock import patch

import pytest

from jsxhoist.config import JsxHoistConfig
from jsxhoist.engine import ProcessResult, process_source, run_engine
from jsxhoist.errors import JsxHoistAPIError, SerializationFailure
from jsxhoist.mapping.framework_mapper import MappingResult
from jsxhoist.stats import RunStats

ROWS = (
    "export const List = () => (\n"
    "  <ul>\n"
    '    <li className="item">one</li>\n'
    '    <li className="item">two</li>\n'
    '    <li className="item">three</li>\n'
    "  </ul>\n"
    ");\n"
)
PLAIN = "export const Title = () => <h1>Hello</h1>;\n"


# ---------------------------------------------------------------------------
# process_source
# ---------------------------------------------------------------------------


def test_process_source_extracts_and_counts():
    stats = RunStats()
    result = process_source(ROWS, "List.tsx", JsxHoistConfig(), stats, verbose=False)
    assert isinstance(result, ProcessResult)
    assert result.failed is False
    assert result.source.count("<Extracted1 />") == 3
    assert result.msgs == [
        "List.tsx: ComponentExtractor: extracted Extracted1 (3 occurrences) "
        "[li:1:1:item]"
    ]
    assert stats.components_extracted == 1
    assert stats.occurrences_replaced == 3


def test_process_source_no_op():
    result = process_source(PLAIN, "T.tsx", JsxHoistConfig(), RunStats(), verbose=False)
    assert result == ProcessResult(PLAIN, [], False)


def test_process_source_parse_error():
    stats = RunStats()
    bad = "export const A = () => <div>;\n"
    result = process_source(bad, "A.tsx", JsxHoistConfig(), stats, verbose=False)
    assert result.failed is True
    assert result.source == bad
    assert result.msgs[0].startswith("SKIP A.tsx: parse error:")
    assert stats.parse_failures == 1


def test_process_source_serialization_error():
    stats = RunStats()
    with patch(
        "jsxhoist.componentize.extractor.serialize_document",
        side_effect=SerializationFailure("bad output"),
    ):
        result = process_source(ROWS, "L.tsx", JsxHoistConfig(), stats, verbose=False)
    assert result.failed is True
    assert result.source == ROWS
    assert result.msgs == ["SKIP L.tsx: output not valid TSX: bad output"]
    assert stats.serialization_failures == 1


def test_process_source_respects_config():
    config = JsxHoistConfig(min_repeats=4, component_name_base="Row")
    result = process_source(ROWS, "L.tsx", config, RunStats(), verbose=False)
    assert result.source == ROWS
    config = JsxHoistConfig(component_name_base="Row")
    result = process_source(ROWS, "L.tsx", config, RunStats(), verbose=False)
    assert "function Row1()" in result.source


def test_process_source_verbose_logs_to_stderr(capsys):
    process_source(ROWS, "L.tsx", JsxHoistConfig(), RunStats(), verbose=True)
    err = capsys.readouterr().err
    assert "jsxhoist: ComponentExtractor: scanning L.tsx" in err


def test_process_source_relabels_after_extraction():
    stats = RunStats()
    mapping = MappingResult(
        "mapped\n", ["FrameworkMapper: mapped components to MUI"], llm_calls=1
    )
    with patch("jsxhoist.engine.map_to_framework", return_value=mapping) as mock_map:
        result = process_source(
            ROWS, "L.tsx", JsxHoistConfig(framework="mui"), stats, verbose=False
        )
    extracted = mock_map.call_args[0][0]
    assert "<Extracted1 />" in extracted
    assert mock_map.call_args[0][1] == "mui"
    assert result.source == "mapped\n"
    assert result.msgs[-1] == "L.tsx: FrameworkMapper: mapped components to MUI"
    assert stats.framework_mapped == 1
    assert stats.llm_calls == 1


def test_process_source_reads_tailwind_config(tmp_path):
    tw = tmp_path / "tailwind.config.js"
    tw.write_text("module.exports = {};", encoding="utf-8")
    config = JsxHoistConfig(framework="shadcn", tailwind_config=str(tw))
    with patch(
        "jsxhoist.engine.map_to_framework", return_value=MappingResult(PLAIN)
    ) as mock_map:
        process_source(PLAIN, "T.tsx", config, RunStats(), verbose=False)
    assert mock_map.call_args[0][3] == "module.exports = {};"


def test_process_source_unreadable_tailwind_config(tmp_path):
    config = JsxHoistConfig(
        framework="shadcn", tailwind_config=str(tmp_path / "missing.js")
    )
    with patch(
        "jsxhoist.engine.map_to_framework", return_value=MappingResult(PLAIN)
    ) as mock_map:
        result = process_source(PLAIN, "T.tsx", config, RunStats(), verbose=False)
    assert mock_map.call_args[0][3] is None
    assert "could not read Tailwind config" in result.msgs[0]


def test_process_source_api_error_propagates():
    with patch(
        "jsxhoist.engine.map_to_framework", side_effect=JsxHoistAPIError("no key")
    ):
        with pytest.raises(JsxHoistAPIError):
            process_source(
                PLAIN, "T.tsx", JsxHoistConfig(framework="mui"), RunStats(), verbose=False
            )


# ---------------------------------------------------------------------------
# run_engine
# ---------------------------------------------------------------------------


def test_run_engine_missing_file(tmp_path):
    missing = str(tmp_path / "nope.tsx")
    msgs = list(run_engine([missing], config=JsxHoistConfig(), verbose=False))
    assert msgs == [f"SKIP {missing}: file not found"]


def test_run_engine_rewrites_in_place(tmp_path):
    path = tmp_path / "List.tsx"
    path.write_text(ROWS, encoding="utf-8")
    stats = RunStats()
    msgs = list(
        run_engine([str(path)], config=JsxHoistConfig(), stats=stats, verbose=False)
    )
    assert len(msgs) == 1
    assert "extracted Extracted1 (3 occurrences)" in msgs[0]
    assert "<Extracted1 />" in path.read_text(encoding="utf-8")
    assert stats.files_edited == [str(path)]
    assert stats.lines_changed > 0


def test_run_engine_leaves_unchanged_file_alone(tmp_path):
    path = tmp_path / "Title.tsx"
    path.write_text(PLAIN, encoding="utf-8")
    stats = RunStats()
    msgs = list(
        run_engine([str(path)], config=JsxHoistConfig(), stats=stats, verbose=False)
    )
    assert msgs == []
    assert stats.files_edited == []


def test_run_engine_parse_error_does_not_write(tmp_path):
    path = tmp_path / "Bad.tsx"
    path.write_text("const a = <div>;\n", encoding="utf-8")
    msgs = list(run_engine([str(path)], config=JsxHoistConfig(), verbose=False))
    assert msgs[0].startswith(f"SKIP {path}: parse error:")
    assert path.read_text(encoding="utf-8") == "const a = <div>;\n"


def test_run_engine_output_dir_always_writes(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "Title.tsx").write_text(PLAIN, encoding="utf-8")
    out = tmp_path / "out"
    stats = RunStats()
    list(
        run_engine(
            [str(src / "Title.tsx")],
            config=JsxHoistConfig(),
            stats=stats,
            output_dir=str(out),
            verbose=False,
        )
    )
    assert (out / "Title.tsx").read_text(encoding="utf-8") == PLAIN
    assert stats.files_edited == [str(out / "Title.tsx")]
    assert stats.lines_changed == 0


def test_run_engine_output_dir_refuses_overwrite(tmp_path):
    src = tmp_path / "List.tsx"
    src.write_text(ROWS, encoding="utf-8")
    out = tmp_path / "out"
    out.mkdir()
    (out / "List.tsx").write_text("keep", encoding="utf-8")
    msgs = list(
        run_engine(
            [str(src)], config=JsxHoistConfig(), output_dir=str(out), verbose=False
        )
    )
    assert msgs[-1].startswith(f"SKIP {src}:")
    assert "already exists" in msgs[-1]
    assert (out / "List.tsx").read_text(encoding="utf-8") == "keep"


def test_run_engine_output_dir_force(tmp_path):
    src = tmp_path / "List.tsx"
    src.write_text(ROWS, encoding="utf-8")
    out = tmp_path / "out"
    out.mkdir()
    (out / "List.tsx").write_text("old", encoding="utf-8")
    list(
        run_engine(
            [str(src)],
            config=JsxHoistConfig(),
            output_dir=str(out),
            force=True,
            verbose=False,
        )
    )
    assert "<Extracted1 />" in (out / "List.tsx").read_text(encoding="utf-8")
    assert src.read_text(encoding="utf-8") == ROWS


def test_run_engine_config_none_loads_default(tmp_path, monkeypatch):
    (tmp_path / ".jsxhoist.toml").write_text("min_repeats = 4\n", encoding="utf-8")
    path = tmp_path / "List.tsx"
    path.write_text(ROWS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert list(run_engine([str(path)], verbose=False)) == []
    assert path.read_text(encoding="utf-8") == ROWS
