import textwrap

import pytest

from baseline_checker.checkers import JavaScriptChecker
from baseline_checker.errors import ParseError
from baseline_checker.parsing import JAVASCRIPT, TSX, TYPESCRIPT


def by_api(usages):
    return {u.api: u for u in usages}


def test_prototype_method_matched_by_name():
    usages = by_api(JavaScriptChecker().extract("const x = arr.at(-1);"))
    usage = usages["Array.prototype.at"]
    assert usage.feature_key == "javascript.builtins.Array.at"
    assert (usage.line, usage.column) == (1, 10)
    assert "String.prototype.at" in usages


def test_each_api_reported_once_per_file():
    code = "arr.at(-1);\narr.at(-2);\n"
    usages = JavaScriptChecker().extract(code)
    at = [u for u in usages if u.api == "Array.prototype.at"]
    assert len(at) == 1
    assert at[0].line == 1


def test_owner_member_access():
    code = "Promise.allSettled(tasks).then(done);"
    usages = by_api(JavaScriptChecker().extract(code))
    usage = usages["Promise.allSettled"]
    assert usage.feature_key == "javascript.builtins.Promise.allSettled"
    assert usage.column == 0


def test_member_of_unknown_owner_is_ignored():
    usages = by_api(JavaScriptChecker().extract("widget.allSettled(tasks);"))
    assert "Promise.allSettled" not in usages


def test_global_function_call():
    code = textwrap.dedent("""\
        const copy = structuredClone(state);
        queueMicrotask(flush);
    """)
    usages = by_api(JavaScriptChecker().extract(code))
    assert usages["structuredClone"].feature_key == "javascript.builtins.structuredClone"
    assert usages["structuredClone"].line == 1
    assert usages["queueMicrotask"].line == 2


def test_constructor():
    code = "\n\nconst ro = new ResizeObserver(onResize);"
    usage = by_api(JavaScriptChecker().extract(code))["ResizeObserver"]
    assert (usage.line, usage.column) == (3, 11)


def test_bare_identifier_reference():
    usages = by_api(JavaScriptChecker().extract("const g = globalThis;"))
    assert "globalThis" in usages


def test_shorthand_property_reference():
    usages = by_api(JavaScriptChecker().extract("export default { fetch };"))
    assert "fetch" in usages


def test_declared_names_are_not_references():
    code = textwrap.dedent("""\
        function structuredClone(value) { return value; }
        const fetch = null;
        const handler = (queueMicrotask) => 1;
    """)
    usages = by_api(JavaScriptChecker().extract(code))
    assert "structuredClone" not in usages
    assert "fetch" not in usages
    assert "queueMicrotask" not in usages


def test_typescript_dialect():
    code = 'const has: boolean = Object.hasOwn(config, "debug");'
    usages = by_api(JavaScriptChecker(dialect=TYPESCRIPT).extract(code))
    assert usages["Object.hasOwn"].feature_key == "javascript.builtins.Object.hasOwn"


def test_jsx_in_tsx_dialect():
    code = "const el = <ul>{items.findLast(isOpen)}</ul>;"
    usages = by_api(JavaScriptChecker(dialect=TSX).extract(code))
    assert "Array.prototype.findLast" in usages


def test_plain_javascript_dialect():
    usages = by_api(JavaScriptChecker(dialect=JAVASCRIPT).extract("s.replaceAll('a', 'b');"))
    assert usages["String.prototype.replaceAll"].feature_key == "javascript.builtins.String.replaceAll"


def test_usages_in_document_order():
    code = "fetch(url);\nlist.flat();\n"
    apis = [u.api for u in JavaScriptChecker().extract(code)]
    assert apis.index("fetch") < apis.index("Array.prototype.flat")


def test_recoverable_syntax_error_keeps_partial_results():
    code = "const a = arr.at(0);\nconst b = ;\n"
    usages = by_api(JavaScriptChecker().extract(code))
    assert "Array.prototype.at" in usages


def test_strict_mode_makes_syntax_errors_fatal():
    code = "const a = arr.at(0);\nconst b = ;\n"
    with pytest.raises(ParseError) as excinfo:
        JavaScriptChecker(strict=True).extract(code, file_path="app.js")
    assert excinfo.value.line is not None
    assert excinfo.value.column is not None


def test_unparseable_source_raises_parse_error():
    with pytest.raises(ParseError):
        JavaScriptChecker().extract("}}} ))) ]]]")


def test_unknown_dialect_rejected():
    with pytest.raises(ValueError):
        JavaScriptChecker(dialect="coffeescript")


def test_source_without_catalog_apis():
    assert JavaScriptChecker().extract("let total = a + b;") == []
