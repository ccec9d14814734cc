from lsprotocol.types import CompletionItemKind, DiagnosticSeverity

from lox.server import analyse_source, collect_completions, collect_diagnostics


def test_clean_source_has_no_diagnostics():
    assert collect_diagnostics("var a = 1;\nprint a;") == []


def test_syntax_error_becomes_a_diagnostic_on_a_zero_based_line():
    # --- ARRANGE & ACT ---
    diagnostics = collect_diagnostics("var a = 1;\nprint ;")

    # --- ASSERT ---
    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert diagnostic.range.start.line == 1
    assert diagnostic.message == "Error at ';': Expect expression."
    assert diagnostic.severity == DiagnosticSeverity.Error
    assert diagnostic.source == "lox"


def test_resolution_errors_are_published():
    diagnostics = collect_diagnostics("fun f() {}\nreturn 1;")

    assert [d.message for d in diagnostics] == ["Error at 'return': Can't return from top-level code."]


def test_resolution_is_skipped_when_syntax_is_broken():
    context, _ = analyse_source("return 1;\nprint ;")

    assert [d.stage for d in context.diagnostics] == ["parse"]


def test_source_is_never_executed(capsys):
    collect_diagnostics('print "side effect";')
    assert capsys.readouterr().out == ""


def test_completions_offer_keywords_and_top_level_names():
    # --- ARRANGE ---
    source = "class Shape {}\nfun area(w, h) { return w * h; }\nvar total = 0;"

    # --- ACT ---
    completions = collect_completions(source)

    # --- ASSERT ---
    by_label = {item.label: item for item in completions.items}
    assert {"while", "class", "return", "clock"} <= set(by_label)
    assert by_label["Shape"].kind == CompletionItemKind.Class
    assert by_label["area"].kind == CompletionItemKind.Function
    assert by_label["area"].detail == "fun area(w, h)"
    assert by_label["total"].kind == CompletionItemKind.Variable
    assert completions.is_incomplete is False
