"""
Tests for Markdown report rendering.
"""

from datetime import datetime, timezone

import pytest

from classaudit.extractor import Extractor
from classaudit.inventory.models import DisplayTable
from classaudit.report.components import Footer, Table
from classaudit.report.options import ReportOptions
from tests.sample_classes import (
    BrokenService,
    FullFeatures,
    HealthyService,
    OddValues,
    PartialFeatures,
    ServiceA,
    ServiceB,
    ServiceWithExtra,
    TrapFeatures,
)

FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED


def extract(*kinds: str) -> Extractor:
    return Extractor(*kinds, clock=fixed_clock)


def table_rows(markdown: str) -> list[list[str]]:
    lines = [line for line in markdown.splitlines() if line.startswith("|")]
    return [[cell.strip() for cell in line.strip("|").split("|")] for line in lines[2:]]


class TestReportOptions:
    """Declarative option schema."""

    def test_defaults(self) -> None:
        opts = ReportOptions.build("markdown")
        assert opts.table_style == "standard"
        assert opts.max_column_width == 50
        assert not opts.show_missing_summary

    def test_unknown_option(self) -> None:
        with pytest.raises(ValueError, match="Unknown report option"):
            ReportOptions.build("markdown", {"separator": ";"})

    @pytest.mark.parametrize(
        "overrides",
        [
            {"summary_style": "fancy"},
            {"table_style": "tiny"},
            {"footer_style": "loud"},
            {"min_column_width": 0},
            {"min_column_width": 10, "max_column_width": 5},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            ReportOptions.build("markdown", overrides)


class TestMarkdownReport:
    """End-to-end Markdown output."""

    def test_table_layout(self) -> None:
        md = extract("constants").from_([ServiceA, ServiceB]).filter("NAME").to_markdown(
            show_metadata=False, show_footer=False
        )
        assert md == (
            "| Constant | ServiceA | ServiceB |\n"
            "|----------|----------|----------|\n"
            "| NAME     | x        | y        |"
        )

    def test_header_sections(self) -> None:
        md = extract("constants", "class_methods").from_([ServiceA, ServiceB]).to_markdown()
        assert md.startswith("# Constants and Class Methods Report\n\n## Classes Analyzed")
        assert "- **ServiceA**\n- **ServiceB**" in md
        assert "- **Constants**: Class constants and their values" in md
        assert "- **Class Methods**: Class method results and return values" in md

    def test_custom_title_and_hidden_sections(self) -> None:
        md = extract("constants").from_([ServiceA]).to_markdown(
            title="Drift", show_classes=False, show_extraction_info=False
        )
        assert md.startswith("# Drift\n\n| Constant")
        assert "Classes Analyzed" not in md

    def test_multi_kind_type_column(self) -> None:
        md = extract("constants", "class_methods").from_([ServiceA, ServiceB]).to_markdown()
        rows = table_rows(md)
        assert {row[0] for row in rows} == {"Constant", "Class Method"}
        assert [row[1] for row in rows if row[0] == "Constant"].count("NAME") == 1
        assert [row[1] for row in rows if row[0] == "Class Method"] == ["status"]

    def test_sections_are_separated_by_blank_lines(self) -> None:
        md = extract("constants").from_([ServiceA]).to_markdown()
        assert "\n\n\n" not in md
        assert md.endswith("---\n*Report generated by classaudit*")

    def test_empty_extraction_renders_nothing(self) -> None:
        assert extract("constants").from_([]).to_markdown() == ""
        assert extract("constants").from_([ServiceA]).filter("NOPE").to_markdown() == ""

    def test_expanded_key_rows(self) -> None:
        md = (
            extract("constants")
            .from_([FullFeatures, PartialFeatures])
            .filter("FEATURES")
            .show_only_keys()
            .to_markdown(show_metadata=False, show_footer=False)
        )
        assert table_rows(md) == [["FEATURES.a", "1", "1"], ["FEATURES.b", "2", "—"]]

    def test_expansion_survives_raising_getattr(self) -> None:
        md = (
            extract("constants")
            .from_([PartialFeatures, TrapFeatures])
            .filter("FEATURES")
            .show_expanded_details()
            .to_markdown(show_metadata=False, show_footer=False)
        )
        rows = table_rows(md)
        assert [row[0] for row in rows] == ["FEATURES", "FEATURES.a"]
        assert rows[1][1:] == ["1", "—"]

    def test_writes_file(self, tmp_path) -> None:
        target = tmp_path / "reports" / "audit.md"
        md = extract("constants").from_([ServiceA]).to_markdown(target)
        assert target.read_text(encoding="utf-8") == md


class TestTableStyles:
    """Column widths and truncation."""

    def test_compact_truncates(self) -> None:
        md = extract("constants").from_([OddValues]).filter("LISTED").to_markdown(
            show_metadata=False, show_footer=False, table_style="compact", max_column_width=6
        )
        assert table_rows(md) == [["LISTED", "1, ..."]]

    @pytest.mark.parametrize("style", ["standard", "wide"])
    def test_standard_and_wide_never_truncate(self, style: str) -> None:
        md = extract("constants").from_([OddValues]).filter("LISTED").to_markdown(
            show_metadata=False, show_footer=False, table_style=style, max_column_width=6
        )
        assert table_rows(md) == [["LISTED", "1, 2, 3"]]

    def test_compact_narrower_than_ellipsis_stays_aligned(self) -> None:
        opts = ReportOptions.build(
            "markdown", {"table_style": "compact", "min_column_width": 1, "max_column_width": 2}
        )
        table = DisplayTable(headers=["A", "B"], rows=[["x", "long"]])
        lines = Table(opts, table).generate()
        assert lines == ["| A | B  |", "|---|----|", "| x | lo |"]

    def test_min_width(self) -> None:
        opts = ReportOptions.build("markdown", {"min_column_width": 6})
        table = DisplayTable(headers=["A", "B"], rows=[["x", "yy"]])
        assert Table(opts, table).generate()[1] == "|--------|--------|"

    def test_pipes_are_escaped(self) -> None:
        opts = ReportOptions.build("markdown")
        table = DisplayTable(headers=["Constant", "A"], rows=[["SEP", "a|b"]])
        assert Table(opts, table).generate()[2] == "| SEP      | a\\|b |"


class TestMissingBehaviors:
    """Summary of missing members and errors."""

    def test_disabled_by_default(self) -> None:
        md = extract("constants").from_([ServiceA, ServiceWithExtra]).to_markdown()
        assert "Missing Behaviors" not in md

    def test_grouped(self) -> None:
        md = (
            extract("constants")
            .from_([ServiceA, ServiceWithExtra])
            .handle_errors()
            .to_markdown(show_missing_summary=True)
        )
        assert (
            "## Missing Behaviors Summary\n\n"
            "The following behaviors are not defined in some classes:\n\n"
            "### ServiceA\n"
            "- `EXTRA` - 🚫 Not defined"
        ) in md
        assert "### ServiceWithExtra" not in md

    def test_flat(self) -> None:
        md = (
            extract("class_methods")
            .from_([ServiceA, ServiceWithExtra])
            .handle_errors()
            .to_markdown(show_missing_summary=True, summary_style="flat")
        )
        assert "## Missing Behaviors\n\n- **ServiceA**: `version` - 🚫 No method" in md

    def test_missing_members_render_as_cross_without_handling(self) -> None:
        md = extract("constants").from_([ServiceA, ServiceWithExtra]).filter("EXTRA").to_markdown(
            show_metadata=False, show_footer=False, show_missing_summary=True
        )
        assert table_rows(md) == [["EXTRA", "❌", "✅"]]
        assert "Missing Behaviors" not in md

    def test_detailed_groups_by_category(self) -> None:
        md = (
            extract("class_methods")
            .from_([HealthyService, BrokenService, ServiceA])
            .handle_errors()
            .to_markdown(show_missing_summary=True, summary_style="detailed")
        )
        assert "**Summary**: 4 missing behaviors across 3 classes" in md
        assert "### ⚠️ Error (1 items)" in md
        assert "### 🚫 No method (3 items)" in md
        assert "- **BrokenService**: `fetch_config` - ⚠️ Error: connection refused by" in md

    def test_nothing_missing_omits_section(self) -> None:
        md = extract("constants").from_([ServiceA, ServiceB]).to_markdown(
            show_missing_summary=True
        )
        assert "Missing Behaviors" not in md


class TestFooter:
    """Footer styles."""

    def render(self, **overrides) -> list[str]:
        return Footer(ReportOptions.build("markdown", overrides), fixed_clock).generate()

    def test_default(self) -> None:
        assert self.render() == ["---", "*Report generated by classaudit*"]

    def test_timestamp_and_custom_message(self) -> None:
        assert self.render(show_timestamp=True, custom_footer="Audit v2") == [
            "---",
            "Audit v2",
            "",
            "*Generated at: 2024-01-02 03:04:05 UTC*",
        ]

    def test_minimal(self) -> None:
        assert self.render(footer_style="minimal") == ["---", "*Generated by classaudit*"]

    def test_detailed(self) -> None:
        lines = self.render(footer_style="detailed", custom_footer="nightly")
        assert "## Report Information" in lines
        assert "- **Generated at**: 2024-01-02 03:04:05 UTC" in lines
        assert any(line.startswith("- **Python version**: ") for line in lines)
        assert lines[-1] == "- **Note**: nightly"

    def test_hidden(self) -> None:
        assert self.render(show_footer=False) == []
