from quickrefer.helpers import LineIndex
from quickrefer.models import Position, Selection
from quickrefer.references import build_reference_entries


def _select_all(text: str) -> Selection:
    end = LineIndex(text).position_at(len(text))
    return Selection(anchor=Position(line=0, character=0), active=end)


def _labels(path: str, text: str):
    return [
        (e.line_text, e.label)
        for e in build_reference_entries(path, text, _select_all(text))
    ]


def test_module_exports_members_are_qualified():
    text = (
        "module.exports = {\n"
        "  run() {},\n"
        "  stop: function () {},\n"
        "};\n"
    )

    assert _labels("lib/index.js", text) == [
        ("2", "module.exports.run"),
        ("3", "module.exports.stop"),
    ]


def test_declarations_and_generators():
    text = (
        "function greet(name) {\n"
        "  return `hi ${name}`;\n"
        "}\n"
        "function* ids() {\n"
        "  yield 1;\n"
        "}\n"
        "const answer = 42;\n"
    )

    assert _labels("a.js", text) == [("1", "greet"), ("4", "ids")]


def test_class_fields_and_methods():
    text = "class Counter {\n  count = 0;\n  inc() {\n    this.count++;\n  }\n}\n"

    assert _labels("a.js", text) == [("2", "Counter.count"), ("3", "Counter.inc")]


def test_jsx_component():
    text = "export const App = () => <div className=\"app\">hi</div>;\n"

    assert _labels("App.jsx", text) == [("1", "App")]


def test_object_without_owner_uses_bare_property():
    text = "register({ onLoad: () => {} });\n"

    assert _labels("a.js", text) == [("1", "onLoad")]


def test_deep_method_chain_does_not_exhaust_the_stack():
    text = "const q = db" + ".where(x)" * 600 + ";\n"
    entries = build_reference_entries("a.js", text, Selection.cursor(0, 3))

    assert [e.render() for e in entries] == ["a.js:1"]


def test_deep_concatenation_inside_arrow_function():
    text = "const join = () => " + " + ".join(["'a'"] * 1500) + ";\n"

    assert _labels("a.js", text) == [("1", "join")]
