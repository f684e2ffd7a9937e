from quickrefer.lang.html import find_enclosing_tag_name
from quickrefer.models import Selection
from quickrefer.references import build_references_text


def test_nearest_open_tag_wins():
    text = "<div><span>cursor_here</span></div>"
    offset = text.index("cursor_here") + 3

    assert find_enclosing_tag_name(text, offset) == "span"


def test_closing_comment_and_processing_tags_are_skipped():
    text = '<?xml version="1.0"?><section class="x"><!-- note -->text'

    assert find_enclosing_tag_name(text, text.index("text")) == "section"


def test_already_closed_tag_can_be_returned():
    # Tags are not balanced: the closed <span> still precedes the cursor
    text = "<div><span>a</span>b</div>"

    assert find_enclosing_tag_name(text, text.index("b</div>")) == "span"


def test_no_tag_before_cursor():
    assert find_enclosing_tag_name("<div></div>", 0) is None
    assert find_enclosing_tag_name("plain text", 4) is None
    assert find_enclosing_tag_name("</p> x", 5) is None


def test_html_reference_uses_tag_at_focus():
    text = "<main>\n  <p>hello</p>\n</main>\n"

    assert build_references_text("index.html", text, Selection.cursor(1, 6)) == (
        "index.html:2 p"
    )
    assert build_references_text("index.htm", text, Selection.cursor(0, 0)) == (
        "index.htm:1"
    )
