import json

import pytest

from baseline_checker.cli import main

WEB_FEATURES = {
    "features": {
        "grid": {
            "name": "Grid",
            "description": "Two-dimensional layout.",
            "group": "css",
            "compat_features": ["css.properties.display.grid"],
            "status": {"baseline": "high", "baseline_low_date": "2017-10-17",
                       "baseline_high_date": "2020-04-17", "support": {"chrome": "57"}},
        },
        "anchor-positioning": {
            "name": "Anchor positioning",
            "description": "Position elements relative to an anchor.",
            "group": "css",
            "compat_features": ["css.properties.anchor-name"],
            "status": {"baseline": False, "support": {"chrome": "125"}},
        },
    },
}


@pytest.fixture(autouse=True)
def offline(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BASELINE_DATA_URL", "")
    for name in ("BASELINE_REQUIRED_LEVEL", "BASELINE_DATA_PATH", "HOST", "PORT", "BASELINE_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(WEB_FEATURES), encoding="utf-8")
    monkeypatch.setenv("BASELINE_DATA_PATH", str(path))
    return path


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "site.css").write_text(".c { word-break: auto-phrase; }\n", encoding="utf-8")
    (src / "app.js").write_text("const copy = structuredClone(state);\n", encoding="utf-8")
    return src


def test_check_json(project, capsys):
    assert main(["check", str(project), "--format", "json", "--score"]) == 0
    data = json.loads(capsys.readouterr().out)
    files = sorted(r["file"].rsplit("/", 1)[-1] for r in data["results"])
    assert files == ["app.js", "site.css"]
    assert isinstance(data["score"], int)


def test_check_text(project, capsys):
    assert main(["check", str(project), "--level", "widely"]) == 0
    out = capsys.readouterr().out
    assert "word-break: auto-phrase" in out
    assert "Errors: 1" in out


def test_check_markdown(project, capsys):
    assert main(["check", str(project), "-f", "markdown"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("## 🎯 Baseline Compatibility Report")


def test_fail_on_error(project):
    assert main(["check", str(project), "--fail-on-error"]) == 1
    assert main(["check", str(project), "--js-only", "--fail-on-error"]) == 0


def test_fail_on_error_counts_failed_files(tmp_path):
    (tmp_path / "broken.css").write_text("}}} {{{", encoding="utf-8")
    assert main(["check", str(tmp_path), "--fail-on-error"]) == 1


def test_no_warnings_hides_warnings(tmp_path, capsys):
    (tmp_path / "a.css").write_text(".a { zoom-level: 2; }", encoding="utf-8")
    assert main(["check", str(tmp_path), "--no-warnings", "-f", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["results"][0]["issues"] == []


def test_conflicting_filters(project, capsys):
    assert main(["check", str(project), "--css-only", "--js-only"]) == 1
    assert "mutually exclusive" in capsys.readouterr().err


def test_invalid_level_is_a_usage_error(project):
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(project), "--level", "medium"])
    assert excinfo.value.code == 2


def test_score(project, capsys):
    assert main(["score", str(project)]) == 0
    out = capsys.readouterr().out
    assert "Baseline Compatibility Score" in out
    assert "Total files analyzed: 2" in out


def test_list_count(data_file, capsys):
    assert main(["list", "widely", "--count"]) == 0
    assert capsys.readouterr().out.strip() == "1"


def test_list_with_group(data_file, capsys):
    assert main(["list", "limited", "--group", "css"]) == 0
    assert "Anchor positioning" in capsys.readouterr().out


def test_list_without_data_source(capsys):
    assert main(["list", "newly", "--count"]) == 0
    assert capsys.readouterr().out.strip() == "0"


def test_search(data_file, capsys):
    assert main(["search", "anchor"]) == 0
    assert "anchor-positioning" in capsys.readouterr().out
    assert main(["search", "nothing-like-this"]) == 0
    assert "No features found" in capsys.readouterr().out


def test_info(data_file, capsys):
    assert main(["info", "grid"]) == 0
    out = capsys.readouterr().out
    assert "Widely Available" in out
    assert "Widely Available Since: 2020-04-17" in out
    assert main(["info", "nope"]) == 1


def test_config_init_and_show(tmp_path, capsys):
    path = tmp_path / "baseline-lint.json"
    assert main(["config", "--init", "--path", str(path)]) == 0
    assert json.loads(path.read_text(encoding="utf-8"))["requiredLevel"] == "low"
    capsys.readouterr()
    assert main(["config", "--show", "--config", str(path)]) == 0
    assert '"bcdCacheSize": 5000' in capsys.readouterr().out


def test_config_error_exits_1(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    assert main(["check", str(tmp_path), "--config", str(bad)]) == 1


def test_comment(tmp_path, capsys):
    results = tmp_path / "results.json"
    results.write_text(json.dumps({"results": [], "score": 100}), encoding="utf-8")
    assert main(["comment", str(results), "--previous-score", "90"]) == 0
    assert "(+10 from last PR)" in capsys.readouterr().out

    results.write_text(json.dumps({"score": 100}), encoding="utf-8")
    assert main(["comment", str(results)]) == 1
