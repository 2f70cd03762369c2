"""Tests for the result presenter."""

import pytest

from models import AnalysisResult, Token
from presenter import (
    DEFAULT_SYMBOL_COLOR,
    DEFAULT_TOKEN_STYLE,
    PLACEHOLDER,
    TOKEN_STYLES,
    category_rows,
    diagnostics_section,
    escape_value,
    present,
    summary,
    symbol_rows,
    token_chips,
    tree_rows,
)


def _rows_by_label(result):
    return {row["label"]: row for row in category_rows(result)}


class TestCategoryRows:
    """Tests for the flat category table."""

    def test_counts_and_text(self) -> None:
        result = AnalysisResult.from_payload(
            {"reservedWords": ["SELECT", "FROM"], "operators": [], "strings": ["users"]}
        )
        rows = _rows_by_label(result)
        assert rows["保留字"]["text"] == "SELECT, FROM"
        assert rows["保留字"]["count"] == 2
        assert rows["运算符"]["text"] == PLACEHOLDER
        assert rows["运算符"]["count"] == 0
        assert rows["数字"]["text"] == PLACEHOLDER
        assert rows["字符串"]["text"] == '"users"'

    def test_error_objects_projected_to_text(self) -> None:
        result = AnalysisResult.from_payload(
            {"syntaxErrors": [{"line": 3, "message": "missing ')'"}, "bare message"]}
        )
        row = _rows_by_label(result)["语法错误"]
        assert row["items"] == ["Line 3: missing ')'", "bare message"]
        assert row["count"] == 2

    def test_identifiers_from_totals(self) -> None:
        rows = _rows_by_label(AnalysisResult.from_payload({"totals": {"identifiers": 7}}))
        assert rows["标识符（近似）"]["count"] == 7

    def test_identifiers_row_matches_summary(self, full_payload: dict) -> None:
        result = AnalysisResult.from_payload(full_payload)
        row = _rows_by_label(result)["标识符（近似）"]
        assert row["count"] == summary(result)["counts"]["identifiers"] == 2

    def test_empty_result(self) -> None:
        rows = category_rows(AnalysisResult())
        assert all(row["text"] == PLACEHOLDER for row in rows)
        assert all(row["count"] == 0 for row in rows)


class TestTokenChips:
    """Tests for the token stream."""

    def test_empty_tokens(self) -> None:
        assert token_chips([]) == []
        assert token_chips(None) == []

    def test_known_style(self) -> None:
        chips = token_chips([Token("KEYWORD", "def", 1, 1)])
        assert chips[0]["label"] == "def"
        assert chips[0]["style"] == TOKEN_STYLES["KEYWORD"]

    @pytest.mark.parametrize("token_type", ["SQL_CLAUSE", "", "keyword", "EOF"])
    def test_unknown_type_falls_back(self, token_type: str) -> None:
        chips = token_chips([Token(token_type, "x")])
        assert chips[0]["style"] == DEFAULT_TOKEN_STYLE

    def test_newline_escaped(self) -> None:
        chips = token_chips([Token("NEWLINE", "\n"), Token("STRING", "'a\tb'")])
        assert chips[0]["label"] == "\\n"
        assert chips[1]["label"] == "'a\\tb'"

    def test_already_escaped_value_unchanged(self) -> None:
        assert escape_value("\\n") == "\\n"


class TestTreeRows:
    """Tests for the syntax tree view."""

    def test_count_and_depth(self, full_payload: dict) -> None:
        forest = AnalysisResult.from_payload(full_payload).syntax_tree
        rows = tree_rows(forest)

        assert len(rows) == sum(root.count() for root in forest) == 8
        assert [(r["type"], r["depth"]) for r in rows] == [
            ("ASSIGNMENT", 0),
            ("IDENTIFIER", 1),
            ("NUMBER", 1),
            ("PRINT_STATEMENT", 0),
            ("BINARY_EXPRESSION", 1),
            ("IDENTIFIER", 2),
            ("OPERATOR", 2),
            ("STRING", 2),
        ]

    def test_deep_chain(self) -> None:
        payload = {"type": "N0"}
        node = payload
        for i in range(1, 2000):
            child = {"type": f"N{i}"}
            node["children"] = [child]
            node = child
        rows = tree_rows(AnalysisResult.from_payload({"syntaxTree": [payload]}).syntax_tree)
        assert len(rows) == 2000
        assert [r["depth"] for r in rows] == list(range(2000))
        assert rows[-1]["type"] == "N1999"

    def test_value_optional(self) -> None:
        forest = AnalysisResult.from_payload(
            {"syntaxTree": [{"type": "IF_STATEMENT", "line": 4}]}
        ).syntax_tree
        assert tree_rows(forest) == [
            {"type": "IF_STATEMENT", "value": None, "line": 4, "depth": 0}
        ]

    def test_absent_tree(self) -> None:
        assert tree_rows(None) == []


class TestSymbolRows:
    """Tests for the symbol table."""

    def test_rows(self, full_payload: dict) -> None:
        rows = symbol_rows(AnalysisResult.from_payload(full_payload).symbol_table)
        assert [r["name"] for r in rows] == ["x", "f"]
        assert rows[0]["used"] == "是"
        assert rows[1]["used"] == "否"
        assert rows[0]["color"] != DEFAULT_SYMBOL_COLOR
        assert rows[1]["color"] == DEFAULT_SYMBOL_COLOR


class TestDiagnostics:
    """Absent and empty diagnostics must be distinguishable."""

    def test_absent(self) -> None:
        assert diagnostics_section(None)["state"] == "absent"

    def test_clean(self) -> None:
        section = diagnostics_section([])
        assert section["state"] == "clean"
        assert section["count"] == 0

    def test_errors(self, full_payload: dict) -> None:
        section = diagnostics_section(AnalysisResult.from_payload(full_payload).semantic_errors)
        assert section["state"] == "errors"
        assert section["items"][0]["text"] == "Line 2: incompatible types: int + string"
        assert section["items"][0]["actual_type"] == "string"


class TestSummary:
    """Tests for derived counts and totals overrides."""

    def test_scenario_single_keyword(self, keyword_payload: dict) -> None:
        counts = summary(AnalysisResult.from_payload(keyword_payload))["counts"]
        assert counts["tokens"] == 1
        assert counts["errors"] == 0

    def test_derived_counts(self, full_payload: dict) -> None:
        counts = summary(AnalysisResult.from_payload(full_payload))["counts"]
        assert counts["tokens"] == 5
        assert counts["nodes"] == 8
        assert counts["symbolTable"] == 2
        assert counts["semanticErrors"] == 1
        assert counts["errors"] == 1

    def test_totals_override_only_its_category(self, full_payload: dict) -> None:
        full_payload["totals"] = {"tokens": 100}
        result = AnalysisResult.from_payload(full_payload)
        counts = summary(result)["counts"]
        assert counts["tokens"] == 100
        assert counts["symbolTable"] == 2
        assert len(result.tokens) == 5

    def test_totals_override_bucket_category(self) -> None:
        result = AnalysisResult.from_payload(
            {"reservedWords": ["def"], "operators": ["+"], "totals": {"reservedWords": 5}}
        )
        counts = summary(result)["counts"]
        assert counts["reservedWords"] == 5
        assert counts["operators"] == 1
        assert "reserved_words" not in counts
        assert result.reserved_words == ["def"]

    def test_bucket_symbols_separate_from_symbol_table(self, full_payload: dict) -> None:
        full_payload["symbols"] = ["(", ")", ":"]
        counts = summary(AnalysisResult.from_payload(full_payload))["counts"]
        assert counts["symbols"] == 3
        assert counts["symbolTable"] == 2

    def test_identifiers_total_without_symbol_table(self) -> None:
        counts = summary(AnalysisResult.from_payload({"totals": {"identifiers": 7}}))["counts"]
        assert counts["identifiers"] == 7

    def test_validity_flags(self) -> None:
        s = summary(AnalysisResult.from_payload({"syntaxValid": False}))
        assert s["syntax_valid"] is False
        assert s["semantic_valid"] is None


class TestPresent:
    """Tests for the assembled view model."""

    def test_empty_result_does_not_fail(self) -> None:
        view = present(AnalysisResult())
        assert view["tokens"] == []
        assert view["has_tokens"] is False
        assert view["syntax_errors"]["state"] == "absent"

    def test_active_tab(self) -> None:
        view = present(AnalysisResult(), "symbols")
        assert view["active_tab"] == "symbols"
        assert [t["id"] for t in view["tabs"] if t["active"]] == ["symbols"]

    def test_invalid_tab_defaults(self) -> None:
        assert present(AnalysisResult(), "nope")["active_tab"] == "lexical"
