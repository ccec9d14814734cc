import io
import json

import pytest

from lox.diagnostics import RunContext
from lox.interpreter import Interpreter
from lox.pipeline import InterpreterPipeline, run_source


def test_run_source_executes_and_returns_clean_context():
    output = io.StringIO()

    context = run_source("print 1 + 1;", output=output)

    assert output.getvalue() == "2\n"
    assert isinstance(context, RunContext)
    assert context.diagnostics == []


@pytest.mark.parametrize(
    "source, stage",
    [
        ('print "ran";\n@', "scan"),
        ('print "ran";\nprint ;', "parse"),
        ('print "ran";\nreturn 1;', "resolve"),
    ],
    ids=["scan_error", "parse_error", "resolution_error"],
)
def test_static_errors_abort_before_execution(source, stage):
    # --- ARRANGE ---
    output = io.StringIO()

    # --- ACT ---
    context = run_source(source, output=output)

    # --- ASSERT ---
    assert output.getvalue() == ""
    assert context.had_error
    assert [d.stage for d in context.diagnostics] == [stage]
    assert context.diagnostics[0].line == 2


def test_syntax_errors_skip_resolution():
    # --- ARRANGE ---
    pipeline = InterpreterPipeline("{ var a = 1; print a; }\nprint ;", output=io.StringIO())

    # --- ACT ---
    pipeline.run()

    # --- ASSERT ---
    assert "resolution" not in pipeline.artifacts
    assert pipeline.interpreter.locals == {}


def test_scan_and_parse_errors_are_reported_together():
    context = run_source("@\nprint ;", output=io.StringIO())
    assert [d.stage for d in context.diagnostics] == ["scan", "parse"]


def test_stop_after_stage_keeps_earlier_artifacts_only():
    # --- ARRANGE ---
    output = io.StringIO()
    pipeline = InterpreterPipeline("print 1;", stop_after_stage="ast", output=output)

    # --- ACT ---
    pipeline.run()

    # --- ASSERT ---
    assert list(pipeline.artifacts) == ["tokens", "ast"]
    assert len(pipeline.statements) == 1
    assert output.getvalue() == ""


def test_dumped_artifacts_are_written_next_to_the_script(tmp_path, capsys):
    # --- ARRANGE ---
    script = tmp_path / "program.lox"
    source = "{ var x = 1;\nprint x; }"
    pipeline = InterpreterPipeline(
        source,
        file_path=str(script),
        dump_stages=["tokens", "ast", "resolution"],
        output=io.StringIO(),
    )

    # --- ACT ---
    pipeline.run()

    # --- ASSERT ---
    tokens = json.loads((tmp_path / "program.tokens.json").read_text())
    ast = json.loads((tmp_path / "program.ast.json").read_text())
    resolution = json.loads((tmp_path / "program.resolution.json").read_text())

    assert tokens[0] == {"kind": "LEFT_BRACE", "lexeme": "{", "literal": None, "line": 1}
    assert tokens[-1]["kind"] == "EOF"
    assert ast[0]["kind"] == "block"
    assert ast[0]["statements"][0]["kind"] == "var"
    assert ast[0]["statements"][0]["initializer"] == {"kind": "literal", "value": 1.0}
    assert resolution == [{"name": "x", "line": 2, "kind": "variable", "depth": 0}]
    assert "--- Saving artifact 'ast'" in capsys.readouterr().out


def test_stdin_artifacts_use_fallback_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    pipeline = InterpreterPipeline("print 1;", dump_stages=["ast"], stop_after_stage="ast")

    pipeline.run()

    assert (tmp_path / "stdin_output.ast.json").exists()


def test_save_artifact_rejects_unknown_stage():
    pipeline = InterpreterPipeline("print 1;")

    with pytest.raises(ValueError, match="Unknown pipeline stage 'bytecode'"):
        pipeline.save_artifact("bytecode", [])


def test_shared_interpreter_sees_each_runs_context():
    # --- ARRANGE ---
    output = io.StringIO()
    interpreter = Interpreter(output=output)
    first, second = RunContext(), RunContext()

    # --- ACT ---
    run_source("var a = 1;", interpreter=interpreter, context=first)
    run_source("print a; print nope;", interpreter=interpreter, context=second)

    # --- ASSERT ---
    assert output.getvalue() == "1\n"
    assert first.diagnostics == []
    assert second.messages == ["Undefined variable 'nope'."]


def test_resolution_table_is_only_flattened_on_request():
    # --- ARRANGE ---
    plain = InterpreterPipeline("{ var a = 1; print a; }", output=io.StringIO())
    stopped = InterpreterPipeline("{ var a = 1; print a; }", stop_after_stage="resolution", output=io.StringIO())

    # --- ACT ---
    plain.run()
    stopped.run()

    # --- ASSERT ---
    assert "resolution" not in plain.artifacts
    assert stopped.artifacts["resolution"] == [{"name": "a", "line": 1, "kind": "variable", "depth": 0}]
