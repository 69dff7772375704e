"""Tests for rendering parsed segments as editor HTML."""

from typst_inline.converter.html_renderer import (
    SegmentsToHtmlRenderer,
    markup_to_html,
    render_html,
)
from typst_inline.converter.spans import Math, ParsedSegment, Text
from typst_inline.converter.tokens import LineKind, MathFormat


class TestBlocks:
    """Paragraph and list containers."""

    def test_empty_markup_renders_cursor_placeholder(self):
        assert markup_to_html("") == "<div><br/></div>"

    def test_text_lines(self):
        assert markup_to_html("a\n\nb") == "<div>a</div><div><br/></div><div>b</div>"

    def test_bullet_list(self):
        assert markup_to_html("- a\n- b") == "<ul><li>a</li><li>b</li></ul>"

    def test_ordered_list_start_attribute(self):
        assert markup_to_html("1. a") == "<ol><li>a</li></ol>"
        assert markup_to_html("4. a\n5. b") == '<ol start="4"><li>a</li><li>b</li></ol>'

    def test_empty_list_item(self):
        assert markup_to_html("-") == "<ul><li><br/></li></ul>"


class TestInline:
    """Inline span markup."""

    def test_bold_italic(self):
        assert markup_to_html("*b* _i_") == "<div><strong>b</strong> <em>i</em></div>"

    def test_strike_and_color(self):
        html = markup_to_html('#strike[s] #text(fill: rgb("#00ff00"))[c]')
        assert html == (
            '<div><span style="text-decoration: line-through;">s</span> '
            '<span style="color: #00ff00;">c</span></div>'
        )

    def test_hard_break(self):
        # Newlines inside a styled run stay on one line as a hard break.
        assert markup_to_html("#strike[a\nb]") == (
            '<div><span style="text-decoration: line-through;">a<br/>b</span></div>'
        )

    def test_text_is_escaped(self):
        assert markup_to_html("a < b & c") == "<div>a &lt; b &amp; c</div>"


class TestMathPill:
    """Inline math placeholders."""

    def test_pill_attributes(self):
        span = Math(
            id="im-7",
            format=MathFormat.LATEX,
            native_expr='"a" < b',
            latex_expr=r"\text{a} < b",
        )
        html = SegmentsToHtmlRenderer().render_spans((span,))
        assert html == (
            '<span class="inline-math-pill" data-inline-math-id="im-7" '
            'data-format="latex" data-native-expr="&quot;a&quot; &lt; b" '
            'data-latex-expr="\\text{a} &lt; b" contenteditable="false">∑</span>'
        )

    def test_display_mode_attribute(self):
        html = markup_to_html("$ x $")
        assert 'data-display-mode="true"' in html

    def test_segment_render(self):
        segment = ParsedSegment(kind=LineKind.BULLET, items=((Text("x"),),))
        assert SegmentsToHtmlRenderer().render([segment]) == "<ul><li>x</li></ul>"


class TestRenderHtml:
    """Module-level rendering entry point."""

    def test_matches_renderer(self):
        segments = [ParsedSegment(kind=LineKind.TEXT, items=((Text("a"),),))]
        assert render_html(segments) == SegmentsToHtmlRenderer().render(segments)
        assert render_html(segments) == "<div>a</div>"
