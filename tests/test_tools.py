"""Tests for the MCP tool functions."""

import json

import pytest

from typst_inline.tools.codec_tools import register_codec_tools
from typst_inline.tools.table_tools import register_table_tools


class RecordingServer:
    """Stand-in for FastMCP that keeps the decorated tool functions."""

    def __init__(self):
        self.tools = {}

    def tool(self, name=None, **kwargs):
        def decorator(fn):
            self.tools[name or fn.__name__] = fn
            return fn

        return decorator


@pytest.fixture
def tools():
    server = RecordingServer()
    register_codec_tools(server)
    register_table_tools(server)
    return server.tools


TABLE = json.dumps({"rows": [["A", "B"], ["C", "D"]]})


class TestRegistration:
    """Tool names exposed to MCP clients."""

    def test_tool_names(self, tools):
        assert set(tools) == {
            "markup_to_html",
            "markup_to_segments",
            "html_to_markup",
            "encode_inline_math",
            "normalize_table",
            "merge_table_cells",
            "unmerge_table_cell",
            "flatten_table_merges",
            "resize_table",
            "set_table_cell",
        }


class TestCodecTools:
    """Markup conversion tools."""

    def test_markup_to_html(self, tools):
        assert tools["markup_to_html"]("*a*") == "<div><strong>a</strong></div>"

    def test_math_ids_restart_per_call(self, tools):
        first = tools["markup_to_segments"]("$x$")
        second = tools["markup_to_segments"]("$y$")
        assert first["segments"][0]["items"][0][0]["id"] == "im-1"
        assert second["segments"][0]["items"][0][0]["id"] == "im-1"

    def test_markup_to_segments_plain_text(self, tools):
        assert tools["markup_to_segments"]("- a\n- b")["plain_text"] == "- a\n- b"

    def test_html_to_markup(self, tools):
        assert tools["html_to_markup"]("<p><s>x</s></p>") == "#strike[x]"

    def test_encode_inline_math_from_latex(self, tools):
        result = tools["encode_inline_math"](latex_expr=r"\sqrt{x}")
        assert result["native_expr"] == "sqrt(x)"
        assert result["markup"].startswith("$sqrt(x)$/*LF_LATEX:")


class TestTableTools:
    """Table span tools."""

    def test_merge(self, tools):
        result = tools["merge_table_cells"](TABLE, 0, 0, 1, 1)
        assert result["changed"]
        assert result["table"]["cells"][0][0]["content"] == "A\nB\nC\nD"

    def test_rejected_merge_has_message(self, tools):
        merged = json.dumps(tools["merge_table_cells"](TABLE, 0, 0, 1, 1)["table"])
        result = tools["merge_table_cells"](merged, 0, 0, 0, 1)
        assert not result["changed"]
        assert result["message"]

    def test_unmerge(self, tools):
        merged = json.dumps(tools["merge_table_cells"](TABLE, 0, 0, 0, 1)["table"])
        result = tools["unmerge_table_cell"](merged, 0, 0)
        assert result["changed"]
        assert result["table"]["cells"][0][1] == {"content": ""}

    def test_resize_and_flatten(self, tools):
        assert tools["resize_table"](TABLE, 3, 1)["table"]["rows"] == 3
        assert not tools["flatten_table_merges"](TABLE)["changed"]

    def test_normalize_malformed_input(self, tools):
        result = tools["normalize_table"]("garbage")
        assert result["table"]["rows"] == 1
        assert result["table"]["cells"] == [[{"content": ""}]]

    def test_set_cell(self, tools):
        result = tools["set_table_cell"](TABLE, 0, 1, "x")
        assert result["table"]["cells"][0][1] == {"content": "x"}
