import pytest

pytest.importorskip("lxml")

from review_toolkit.core.converter.inline import render_inline
from review_toolkit.core.parser.odt_utils import qn


def _render(make_doc, context, paragraph):
    doc = make_doc(paragraph)
    return render_inline(doc, next(doc.body.iter(qn("text:p"))), context)


class TestRenderInline:
    def test_plain_text(self, make_doc, context):
        assert _render(make_doc, context, "<text:p>Hello world</text:p>") == "Hello world"

    def test_none_renders_empty(self, make_doc, context):
        assert render_inline(make_doc(""), None, context) == ""

    def test_carriage_returns_removed(self, make_doc, context):
        assert _render(make_doc, context, "<text:p>a&#13;b</text:p>") == "ab"

    def test_whitespace_elements(self, make_doc, context):
        paragraph = '<text:p>a<text:s text:c="2"/>b<text:tab/>c</text:p>'
        assert _render(make_doc, context, paragraph) == "a  b\tc"

    def test_unknown_inline_elements_render_their_text(self, make_doc, context):
        paragraph = '<text:p>see <text:bookmark-ref text:ref-name="r">here</text:bookmark-ref>!</text:p>'
        assert _render(make_doc, context, paragraph) == "see here!"


class TestSpans:
    @pytest.mark.parametrize(
        "style,expected",
        [
            ("T1", "x @<b>{bold} y"),
            ("T3", "x @<b>{bold} y"),
            ("T2", "x bold y"),
            ("T4", "x bold y"),
            ("Missing", "x bold y"),
        ],
    )
    def test_only_bold_weight_is_marked(self, make_doc, context, style, expected):
        paragraph = f'<text:p>x <text:span text:style-name="{style}">bold</text:span> y</text:p>'
        assert _render(make_doc, context, paragraph) == expected

    def test_nested_spans(self, make_doc, context):
        paragraph = ('<text:p><text:span text:style-name="T2">a '
                     '<text:span text:style-name="T1">b</text:span></text:span></text:p>')
        assert _render(make_doc, context, paragraph) == "a @<b>{b}"


class TestLinks:
    def test_link(self, make_doc, context):
        paragraph = ('<text:p>Visit <text:a xlink:type="simple" xlink:href="https://example.com/">'
                     "our site</text:a>.</text:p>")
        assert _render(make_doc, context, paragraph) == "Visit @<href>{https://example.com/,our site}."

    def test_link_text_escaped(self, make_doc, context):
        paragraph = '<text:p><text:a xlink:href="https://example.com/">a]b</text:a></text:p>'
        assert _render(make_doc, context, paragraph) == "@<href>{https://example.com/,a\\]b}"

    def test_bold_link_text(self, make_doc, context):
        paragraph = ('<text:p><text:a xlink:href="http://x.org">'
                     '<text:span text:style-name="T1">x</text:span></text:a></text:p>')
        assert _render(make_doc, context, paragraph) == "@<href>{http://x.org,@<b>{x}}"


class TestFootnotes:
    NOTE = (
        '<text:note text:id="{id}" text:note-class="footnote">'
        "<text:note-citation>1</text:note-citation>"
        '<text:note-body><text:p text:style-name="Footnote">{body}</text:p></text:note-body>'
        "</text:note>"
    )

    def test_reference_and_definition(self, make_doc, context):
        paragraph = "<text:p>See" + self.NOTE.format(id="ftn1", body="Note body.") + " here.</text:p>"
        assert _render(make_doc, context, paragraph) == "See@<fn>{sample_ftn1} here."
        assert context.footnotes.flush() == "//footnote[sample_ftn1][Note body.]\n"
        assert context.stats["footnotes"] == 1

    def test_footnote_body_is_rendered_inline(self, make_doc, context):
        body = 'A <text:span text:style-name="T1">b]</text:span>  '
        paragraph = "<text:p>x" + self.NOTE.format(id="ftn2", body=body) + "</text:p>"
        _render(make_doc, context, paragraph)
        assert context.footnotes.flush() == "//footnote[sample_ftn2][A @<b>{b\\]}]\n"

    def test_several_footnotes_in_order(self, make_doc, context):
        paragraph = ("<text:p>a" + self.NOTE.format(id="ftn1", body="one")
                     + "b" + self.NOTE.format(id="ftn2", body="two") + "</text:p>")
        assert _render(make_doc, context, paragraph) == "a@<fn>{sample_ftn1}b@<fn>{sample_ftn2}"
        assert context.footnotes.flush() == (
            "//footnote[sample_ftn1][one]\n"
            "//footnote[sample_ftn2][two]\n"
        )
