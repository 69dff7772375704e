"""Best-effort conversion between LaTeX math and Typst math.

The codec treats the transpiler as an opaque collaborator: anything that
satisfies :class:`MathTranspiler` can be injected.  The default
:class:`SymbolMathTranspiler` is intentionally conservative; constructs it
does not know are left as-is.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Protocol

from typst_inline.converter.brackets import NOT_FOUND, find_matching


class MathTranspiler(Protocol):
    """LaTeX <-> native math conversion, lossy in both directions."""

    def to_native(self, latex: str) -> str: ...

    def to_latex(self, native: str) -> str: ...


_LATEX_TO_NATIVE: dict[str, str] = {
    "sum": "sum",
    "prod": "product",
    "int": "integral",
    "oint": "integral.cont",
    "lim": "lim",
    "infty": "oo",
    "log": "log",
    "ln": "ln",
    "sin": "sin",
    "cos": "cos",
    "tan": "tan",
    "exp": "exp",
    "cdot": "dot",
    "times": "times",
    "pm": "plus.minus",
    "leq": "<=",
    "geq": ">=",
    "neq": "!=",
    "approx": "approx",
    "equiv": "equiv",
    "in": "in",
    "subset": "subset",
    "cup": "union",
    "cap": "sect",
    "forall": "forall",
    "exists": "exists",
    "partial": "diff",
    "nabla": "nabla",
    "rightarrow": "->",
    "leftarrow": "<-",
    "Rightarrow": "=>",
    "to": "->",
    "ldots": "dots",
    "cdots": "dots",
    "alpha": "alpha",
    "beta": "beta",
    "gamma": "gamma",
    "Gamma": "Gamma",
    "delta": "delta",
    "Delta": "Delta",
    "epsilon": "epsilon",
    "theta": "theta",
    "lambda": "lambda",
    "mu": "mu",
    "pi": "pi",
    "Pi": "Pi",
    "rho": "rho",
    "sigma": "sigma",
    "Sigma": "Sigma",
    "tau": "tau",
    "phi": "phi",
    "Phi": "Phi",
    "omega": "omega",
    "Omega": "Omega",
}

# First spelling wins on the way back (e.g. "->" maps to \rightarrow).
_NATIVE_TO_LATEX: dict[str, str] = {}
for _cmd, _native in _LATEX_TO_NATIVE.items():
    _NATIVE_TO_LATEX.setdefault(_native, f"\\{_cmd}")

_COMMAND = re.compile(r"\\([A-Za-z]+)")
_DELIMITED = re.compile(r"^(?:\$\$(.*)\$\$|\\\[(.*)\\\]|\$(.*)\$)$", re.DOTALL)


def _split_top_level_commas(text: str) -> list[str]:
    args: list[str] = []
    depth = 0
    current = ""
    for ch in text:
        if ch in "({":
            depth += 1
        elif ch in ")}":
            depth = max(0, depth - 1)
        if ch == "," and depth == 0:
            args.append(current.strip())
            current = ""
            continue
        current += ch
    if current.strip():
        args.append(current.strip())
    return args


class SymbolMathTranspiler:
    """Token-table transpiler covering fractions, roots, scripts and symbols."""

    def to_native(self, latex: str) -> str:
        s = (latex or "").strip()
        if not s:
            return ""
        delimited = _DELIMITED.match(s)
        if delimited:
            s = next(g for g in delimited.groups() if g is not None).strip()

        s = re.sub(r"\\text\{([^}]*)\}", r'"\1"', s)
        s = re.sub(r"\\(?:left|right)(?![A-Za-z])\s*", "", s)
        s = self._replace_braced_command(s, "\\frac", 2, lambda a: f"frac({a[0]}, {a[1]})")
        s = self._replace_braced_command(s, "\\sqrt", 1, lambda a: f"sqrt({a[0]})")
        s = self._replace_braced_scripts(s)

        def command(m: re.Match[str]) -> str:
            name = m.group(1)
            native = _LATEX_TO_NATIVE.get(name)
            return f" {native} " if native is not None else m.group(0)

        s = _COMMAND.sub(command, s)
        return re.sub(r"\s+", " ", s).strip()

    def to_latex(self, native: str) -> str:
        s = (native or "").strip()
        if not s:
            return ""
        s = self._replace_call(s, "frac", lambda inner: self._frac_to_latex(inner))
        s = self._replace_call(s, "sqrt", lambda inner: f"\\sqrt{{{self.to_latex(inner)}}}")
        s = re.sub(r'"([^"]*)"', r"\\text{\1}", s)
        s = re.sub(r"([_^])\(([^()]*)\)", r"\1{\2}", s)

        for token in sorted(_NATIVE_TO_LATEX, key=len, reverse=True):
            latex = _NATIVE_TO_LATEX[token]
            if re.fullmatch(r"[A-Za-z.]+", token):
                pattern = rf"(?<![\w.\\]){re.escape(token)}(?![\w.])"
            else:
                pattern = re.escape(token)
            s = re.sub(pattern, lambda _m, latex=latex: f"{latex} ", s)
        return re.sub(r"\s+", " ", s).strip()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _frac_to_latex(self, inner: str) -> str:
        args = _split_top_level_commas(inner) + ["", ""]
        return f"\\frac{{{self.to_latex(args[0])}}}{{{self.to_latex(args[1])}}}"

    def _replace_braced_command(
        self,
        s: str,
        name: str,
        arity: int,
        render: Callable[[list[str]], str],
    ) -> str:
        while True:
            idx = s.find(name)
            if idx == NOT_FOUND:
                return s
            pos = idx + len(name)
            args: list[str] = []
            for _ in range(arity):
                if pos >= len(s) or s[pos] != "{":
                    return s
                end = find_matching(s, pos, "{", "}")
                if end == NOT_FOUND:
                    return s
                args.append(self.to_native(s[pos + 1 : end]))
                pos = end + 1
            s = s[:idx] + render(args) + s[pos:]

    def _replace_braced_scripts(self, s: str) -> str:
        idx = 0
        while True:
            idx = min(
                (i for i in (s.find("_{", idx), s.find("^{", idx)) if i != NOT_FOUND),
                default=NOT_FOUND,
            )
            if idx == NOT_FOUND:
                return s
            end = find_matching(s, idx + 1, "{", "}")
            if end == NOT_FOUND:
                return s
            inner = self.to_native(s[idx + 2 : end])
            s = f"{s[:idx]}{s[idx]}({inner}){s[end + 1:]}"
            idx += 1

    @staticmethod
    def _replace_call(s: str, name: str, render: Callable[[str], str]) -> str:
        search_from = 0
        while True:
            idx = s.find(f"{name}(", search_from)
            if idx == NOT_FOUND:
                return s
            if idx > 0 and (s[idx - 1].isalnum() or s[idx - 1] in "\\."):
                search_from = idx + 1
                continue
            open_idx = idx + len(name)
            end = find_matching(s, open_idx, "(", ")")
            if end == NOT_FOUND:
                return s
            replacement = render(s[open_idx + 1 : end])
            s = s[:idx] + replacement + s[end + 1 :]
            search_from = idx + len(replacement)
