"""Tests for the default LaTeX <-> native math transpiler."""

import pytest

from typst_inline.converter.math_transpile import SymbolMathTranspiler


@pytest.fixture
def transpiler():
    return SymbolMathTranspiler()


class TestToNative:
    """LaTeX to native math."""

    @pytest.mark.parametrize(
        ("latex", "native"),
        [
            (r"\frac{1}{2}", "frac(1, 2)"),
            (r"\sqrt{x}", "sqrt(x)"),
            (r"x^{2} + y_{i}", "x^(2) + y_(i)"),
            (r"\alpha + \beta", "alpha + beta"),
            (r"\leftarrow", "<-"),
            (r"\left( x \right)", "( x )"),
            (r"\text{speed}", '"speed"'),
            (r"$x$", "x"),
            (r"\frac{\alpha}{2}", "frac(alpha, 2)"),
            ("", ""),
        ],
    )
    def test_conversions(self, transpiler, latex, native):
        assert transpiler.to_native(latex) == native

    def test_unknown_command_is_kept(self, transpiler):
        assert transpiler.to_native(r"\foo x") == r"\foo x"


class TestToLatex:
    """Native math to LaTeX."""

    @pytest.mark.parametrize(
        ("native", "latex"),
        [
            ("frac(1, 2)", r"\frac{1}{2}"),
            ("sqrt(x)", r"\sqrt{x}"),
            ("x^(2)", "x^{2}"),
            ("alpha + beta", r"\alpha + \beta"),
            ('"speed"', r"\text{speed}"),
            ("a -> b", r"a \rightarrow b"),
            ("", ""),
        ],
    )
    def test_conversions(self, transpiler, native, latex):
        assert transpiler.to_latex(native) == latex

    def test_words_inside_identifiers_are_untouched(self, transpiler):
        assert transpiler.to_latex("alphabet") == "alphabet"
