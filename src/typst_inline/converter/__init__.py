"""Bidirectional codec between rich-text trees and Typst inline markup."""

from typst_inline.converter.html_renderer import (
    SegmentsToHtmlRenderer,
    markup_to_html,
    render_html,
)
from typst_inline.converter.html_tree import parse_html_fragment
from typst_inline.converter.inline_math import (
    SequentialMathIds,
    decode_inline_math,
    encode_inline_math,
    random_math_id,
)
from typst_inline.converter.lines import classify_line, segment_lines, split_into_lines
from typst_inline.converter.markup_parser import (
    MarkupToSegmentsConverter,
    markup_to_plain_text,
    parse_markup,
)
from typst_inline.converter.math_transpile import MathTranspiler, SymbolMathTranspiler
from typst_inline.converter.spans import segment_to_record, span_to_record
from typst_inline.converter.tree_to_markup import TreeToMarkupConverter, html_to_markup

__all__ = [
    "MarkupToSegmentsConverter",
    "MathTranspiler",
    "SegmentsToHtmlRenderer",
    "SequentialMathIds",
    "SymbolMathTranspiler",
    "TreeToMarkupConverter",
    "classify_line",
    "decode_inline_math",
    "encode_inline_math",
    "html_to_markup",
    "markup_to_html",
    "markup_to_plain_text",
    "parse_html_fragment",
    "parse_markup",
    "random_math_id",
    "render_html",
    "segment_lines",
    "segment_to_record",
    "span_to_record",
    "split_into_lines",
]
