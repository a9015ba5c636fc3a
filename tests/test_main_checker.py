import textwrap
import time

import pytest

from baseline_checker.config import AnalysisSettings, PatternSettings
from baseline_checker.errors import FileError, ParseError, ValidationError
from baseline_checker.issue import Severity
from baseline_checker.main_checker import BaselineChecker, FileResult, discover_files


def test_word_break_auto_phrase_is_an_error_under_high(checker):
    issues = checker.analyze_css(".c { word-break: auto-phrase; }", level="high")
    assert len(issues) == 1
    issue = issues[0]
    assert issue.severity is Severity.ERROR
    assert issue.feature_key == "css.properties.word-break.auto-phrase"
    assert issue.compatible is False


def test_array_at_is_never_an_error_under_low(checker):
    issues = checker.analyze_js("const x = arr.at(-1);", level="low")
    at = [i for i in issues if i.feature_key == "javascript.builtins.Array.at"]
    assert len(at) == 1
    assert at[0].severity in (Severity.INFO, Severity.WARNING)


def test_issue_carries_the_key_that_resolved(checker):
    issues = checker.analyze_css(".a { display: contents; }")
    assert [i.feature_key for i in issues] == ["css.properties.display"]
    assert issues[0].value == "contents"


def test_unknown_feature_is_a_warning(checker):
    issues = checker.analyze_css(".a { zoom-level: 2; }")
    assert issues[0].severity is Severity.WARNING
    assert issues[0].compatible is False


def test_provider_data_used_for_issues(checker):
    issues = checker.analyze_css(".a { anchor-name: --tip; }")
    assert issues[0].severity is Severity.ERROR


def test_level_defaults_to_settings(offline_settings, resolver):
    checker = BaselineChecker(offline_settings.model_copy(update={"required_level": "high"}), resolver=resolver)
    issues = checker.analyze_css(".t { text-wrap: balance; }")
    assert issues[0].severity is Severity.WARNING
    assert checker.analyze_css(".t { text-wrap: balance; }", level="newly")[0].severity is Severity.INFO


def test_invalid_level_rejected(checker):
    with pytest.raises(ValidationError):
        checker.analyze_css(".a { color: red; }", level="medium")


def test_at_rules_only_checked_when_enabled(offline_settings, resolver):
    css = "@media (min-width: 40em) { .a { color: red; } }"
    default = BaselineChecker(offline_settings, resolver=resolver)
    assert [i.feature_key for i in default.analyze_css(css)] == ["css.properties.color"]

    settings = offline_settings.model_copy(
        update={"analysis": AnalysisSettings(check_at_rules=True)}
    )
    enabled = BaselineChecker(settings, resolver=resolver)
    assert [i.feature_key for i in enabled.analyze_css(css)] == [
        "css.at-rules.media", "css.properties.color",
    ]


def test_analyze_content_dispatch(checker):
    assert checker.analyze_content(".a { color: red; }", "css")
    assert checker.analyze_content("fetch(url);", "js")
    assert checker.analyze_content("fetch(url as string);", "typescript")
    with pytest.raises(FileError):
        checker.analyze_content("print(1)", "python")


def test_analyze_file(tmp_path, checker):
    path = tmp_path / "app.css"
    path.write_text(".a { color: red; }\n", encoding="utf-8")
    result = checker.analyze_file(path)
    assert result.type == "css"
    assert result.file == str(path)
    assert result.summary == {"total": 1, "errors": 0, "warnings": 0}


def test_analyze_file_rejects_bad_input(tmp_path, offline_settings, resolver, checker):
    with pytest.raises(ValidationError):
        checker.analyze_file(tmp_path / "notes.txt")
    with pytest.raises(FileError):
        checker.analyze_file(tmp_path / "missing.css")

    big = tmp_path / "big.css"
    big.write_text(".a { color: red; }\n" * 10, encoding="utf-8")
    small = BaselineChecker(
        offline_settings.model_copy(update={"analysis": AnalysisSettings(max_file_size=16)}),
        resolver=resolver,
    )
    with pytest.raises(FileError):
        small.analyze_file(big)

    binary = tmp_path / "bad.js"
    binary.write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(FileError):
        checker.analyze_file(binary)


def test_parse_failure_becomes_failure_marker(tmp_path, checker):
    path = tmp_path / "broken.css"
    path.write_text(".a { color: red; }\n}}} {{{ ;;", encoding="utf-8")
    result = checker.check_file(path)
    assert result.failed
    assert result.issues == []
    assert "CSS parsing failed" in result.error
    assert result.to_dict()["failed"] is True


def test_check_files_keeps_order_and_isolates_failures(tmp_path, checker):
    good = tmp_path / "a.css"
    good.write_text(".a { word-break: auto-phrase; }", encoding="utf-8")
    bad = tmp_path / "b.css"
    bad.write_text("}}} {{{", encoding="utf-8")
    js = tmp_path / "c.js"
    js.write_text("const copy = structuredClone(state);", encoding="utf-8")
    missing = tmp_path / "d.css"

    results = checker.check_files([good, bad, js, missing], batch_size=2)
    assert [r.file for r in results] == [str(good), str(bad), str(js), str(missing)]
    assert [r.failed for r in results] == [False, True, False, True]
    assert results[0].issues[0].severity is Severity.ERROR
    assert results[2].type == "js"


def test_check_files_times_out_slow_files(tmp_path, offline_settings, resolver, monkeypatch):
    settings = offline_settings.model_copy(update={"analysis": AnalysisSettings(timeout=0.05)})
    checker = BaselineChecker(settings, resolver=resolver)
    path = tmp_path / "slow.css"
    path.write_text(".a { color: red; }", encoding="utf-8")

    def slow(file_path, level=None):
        time.sleep(0.5)
        return FileResult(str(file_path), "css")

    monkeypatch.setattr(checker, "analyze_file", slow)
    results = checker.check_files([path])
    assert results[0].failed
    assert results[0].error == "Analysis timed out after 0.05s"


def test_slow_file_does_not_fail_later_batches(tmp_path, offline_settings, resolver, monkeypatch):
    settings = offline_settings.model_copy(update={"analysis": AnalysisSettings(timeout=0.3)})
    checker = BaselineChecker(settings, resolver=resolver)
    paths = []
    for name in ("slow.css", "fast1.css", "fast2.css"):
        path = tmp_path / name
        path.write_text(".a { color: red; }", encoding="utf-8")
        paths.append(path)

    def analyze(file_path, level=None):
        if file_path.name == "slow.css":
            time.sleep(1)
        return FileResult(str(file_path), "css")

    monkeypatch.setattr(checker, "analyze_file", analyze)
    results = checker.check_files(paths, batch_size=1)
    assert [r.failed for r in results] == [True, False, False]
    assert results[0].error == "Analysis timed out after 0.3s"


def test_each_file_in_a_batch_gets_the_timeout(tmp_path, offline_settings, resolver, monkeypatch):
    settings = offline_settings.model_copy(update={"analysis": AnalysisSettings(timeout=0.5)})
    checker = BaselineChecker(settings, resolver=resolver)
    paths = []
    for i in range(4):
        path = tmp_path / f"f{i}.css"
        path.write_text(".a { color: red; }", encoding="utf-8")
        paths.append(path)

    def analyze(file_path, level=None):
        time.sleep(0.2)
        return FileResult(str(file_path), "css")

    monkeypatch.setattr(checker, "analyze_file", analyze)
    results = checker.check_files(paths, batch_size=4)
    assert [r.failed for r in results] == [False] * 4


def test_no_files(checker):
    assert checker.check_files([]) == []
    assert BaselineChecker.aggregate([]) == {"results": [], "score": 100}


def test_aggregate_wire_format(checker):
    issues = checker.analyze_css(".c { word-break: auto-phrase; }")
    ok = FileResult("a.css", "css", issues)
    failed = FileResult("b.css", "css", failed=True, error="CSS parsing failed")
    data = BaselineChecker.aggregate([ok, failed])
    assert data["score"] == 30
    first, second = data["results"]
    assert first["summary"] == {"total": 1, "errors": 1, "warnings": 0}
    assert "failed" not in first
    assert second == {
        "file": "b.css", "type": "css", "issues": [],
        "summary": {"total": 0, "errors": 0, "warnings": 0},
        "failed": True, "error": "CSS parsing failed",
    }


def test_errors_only_filters_visible_issues(checker):
    issues = checker.analyze_css(".c { word-break: auto-phrase; color: red; }")
    result = FileResult("a.css", "css", issues)
    assert len(result.to_dict()["issues"]) == 2
    assert [i["severity"] for i in result.to_dict(errors_only=True)["issues"]] == ["error"]


def _tree(root, files):
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")


def test_discover_files_walks_and_ignores(tmp_path):
    _tree(tmp_path, {
        "src/app.js": "fetch(url);",
        "src/styles/site.css": ".a { color: red; }",
        "src/types.ts": "export type A = string;",
        "src/readme.md": "# hi",
        "node_modules/lib/index.js": "fetch(url);",
        "src/dist/bundle.js": "fetch(url);",
    })
    found = sorted(p.relative_to(tmp_path).as_posix() for p in discover_files([tmp_path]))
    assert found == ["src/app.js", "src/styles/site.css", "src/types.ts"]


def test_discover_files_type_filters(tmp_path):
    _tree(tmp_path, {"a.css": "", "b.js": ""})
    assert [p.name for p in discover_files([tmp_path], css_only=True)] == ["a.css"]
    assert [p.name for p in discover_files([tmp_path], js_only=True)] == ["b.js"]


def test_discover_files_explicit_files_globs_and_missing(tmp_path):
    _tree(tmp_path, {"a.css": "", "b.js": "", "c.txt": ""})
    assert discover_files([tmp_path / "a.css", tmp_path / "c.txt"]) == [tmp_path / "a.css"]
    assert [p.name for p in discover_files([str(tmp_path / "*.js")])] == ["b.js"]
    assert discover_files([tmp_path / "nope"]) == []


def test_discover_files_custom_patterns(tmp_path):
    _tree(tmp_path, {"keep/a.css": "", "skip/b.css": ""})
    patterns = PatternSettings(css=["**/*.css"], js=[], ignore=["**/skip/**"])
    assert [p.name for p in discover_files([tmp_path], patterns)] == ["a.css"]


def test_batch_results_match_single_file_analysis(tmp_path, checker):
    source = textwrap.dedent("""\
        const copy = structuredClone(state);
        const last = items.findLast(Boolean);
    """)
    path = tmp_path / "app.js"
    path.write_text(source, encoding="utf-8")
    [batched] = checker.check_files([path])
    single = checker.analyze_file(path)
    assert batched.to_dict() == single.to_dict()
