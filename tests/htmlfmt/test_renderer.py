import pytest

from quickrefer.htmlfmt import format_html, format_html_range, render, tokenize
from quickrefer.htmlfmt.models import VOID_ELEMENTS
from quickrefer.models import Position, Selection
from quickrefer.settings import FormatterSettings


def test_nested_elements_and_inline_collapse():
    html = '<ul><li><a href="#">x</a></li><li>y</li></ul>'

    assert format_html(html) == (
        "<ul>\n"
        "  <li>\n"
        '    <a href="#">x</a>\n'
        "  </li>\n"
        "  <li>y</li>\n"
        "</ul>"
    )


def test_void_elements_do_not_indent():
    html = "<div><p>Hello</p><br><img src=a.png>tail</div>"

    assert format_html(html) == (
        "<div>\n"
        "  <p>Hello</p>\n"
        "  <br />\n"
        "  <img src=a.png />\n"
        "  tail\n"
        "</div>"
    )


@pytest.mark.parametrize("name", sorted(VOID_ELEMENTS))
def test_text_after_void_element_stays_at_same_depth(name):
    assert format_html(f"<{name}>after") == f"<{name} />\nafter"


def test_closing_void_tag_keeps_depth():
    assert format_html("<div><br></br><p>x</p></div>") == (
        "<div>\n  <br />\n  <p>x</p>\n</div>"
    )


def test_doctype_and_comment_lines():
    html = "<!DOCTYPE html><html><!--  keep   me  --><body></body></html>"

    assert format_html(html) == (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <!--  keep   me  -->\n"
        "  <body>\n"
        "  </body>\n"
        "</html>"
    )


def test_short_raw_text_is_inlined():
    html = (
        "<head><style>\n\n   body { margin: 0; }\n\n</style>"
        '<script src="x.js"></script></head>'
    )

    assert format_html(html) == (
        "<head>\n"
        "  <style>body { margin: 0; }</style>\n"
        '  <script src="x.js"></script>\n'
        "</head>"
    )


def test_multi_line_raw_text_is_reindented_relatively():
    html = (
        "<div><script>\n"
        "        function a() {\n"
        "          return 1;\n"
        "\n"
        "        }\n"
        "</script></div>"
    )

    assert format_html(html) == (
        "<div>\n"
        "  <script>\n"
        "    function a() {\n"
        "      return 1;\n"
        "\n"
        "    }\n"
        "  </script>\n"
        "</div>"
    )


def test_long_single_line_script_is_a_block():
    body = "console.log(" + "'x', " * 12 + "'y');"
    out = format_html(f"<script>{body}</script>")

    assert out == f"<script>\n  {body}\n</script>"


def test_preformatted_text_keeps_line_breaks():
    html = "<pre>\n  line1\n  line2\n</pre>"

    assert format_html(html) == "<pre>\n  line1\n  line2\n</pre>"


def test_newlines_in_ordinary_text_are_escaped_and_collapsed():
    assert format_html("<p>\na\r\nb\n</p>") == "<p>a&#13;&#10;b</p>"
    assert format_html("<div>a\nb<br></div>") == "<div>\n  a&#10;b\n  <br />\n</div>"


def test_text_nested_inside_pre_is_not_escaped():
    out = format_html("<pre><b>x\ny</b></pre>")

    assert "&#10;" not in out
    assert "x\ny" in out


def test_unmatched_end_tags_clamp_depth():
    assert format_html("</div></div><p>x</p>") == "</div>\n</div>\n<p>x</p>"


def test_custom_indent():
    settings = FormatterSettings(indent="\t")

    assert format_html("<div><span>a</span></div>", settings) == (
        "<div>\n\t<span>a</span>\n</div>"
    )


def test_pairs_return_to_depth_zero():
    html = "<section><div><p>a</p><div><b>c</b></div></div></section>"
    lines = format_html(html).split("\n")

    assert lines[-1] == "</section>"
    assert not lines[-1].startswith(" ")


@pytest.mark.parametrize(
    "html",
    [
        '<ul><li><a href="#">x</a></li><li>y</li></ul>',
        "<!DOCTYPE html><html><head><meta charset=utf-8><title>T</title></head>"
        "<body><!-- c --><p>\na\n</p><pre>\n  x\n</pre></body></html>",
        "<p>a\nb</p><section>\n  one\n  two\n<br></section>",
        "<div><script>\n    if (a) {\n      b();\n    }\n</script></div>",
    ],
)
def test_formatting_is_idempotent(html):
    once = render(tokenize(html))

    assert render(tokenize(once)) == once


def test_format_range_replaces_selected_lines():
    text = "<p>keep</p>\n<div><b>x</b></div>\n"
    selection = Selection(
        anchor=Position(line=1, character=0), active=Position(line=2, character=0)
    )

    assert format_html_range(text, selection) == (
        12,
        32,
        "<div>\n  <b>x</b>\n</div>",
    )


def test_format_range_with_empty_selection_uses_whole_document():
    text = "<div><b>x</b></div>"
    start, end, replacement = format_html_range(text, Selection.cursor(0, 3))

    assert (start, end) == (0, len(text))
    assert replacement == "<div>\n  <b>x</b>\n</div>"
