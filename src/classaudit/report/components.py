"""
Markdown report sections.

Each component returns a list of lines; an empty list means the section is
omitted. The renderer joins non-empty sections with a blank line.
"""

import platform
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable

from classaudit.inventory.core import KIND_LEGENDS, kind_description
from classaudit.inventory.models import DisplayTable, ErrorMarker, RawTable

from .options import ReportOptions

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_title(kinds: list[str]) -> str:
    if not kinds:
        return "Class Analysis Report"
    return f"{' and '.join(kind_description(k) for k in kinds)} Report"


class ReportComponent(ABC):
    def __init__(self, options: ReportOptions) -> None:
        self._options = options

    @abstractmethod
    def generate(self) -> list[str]: ...


class Header(ReportComponent):
    def __init__(
        self, options: ReportOptions, class_names: list[str], kinds: list[str]
    ) -> None:
        super().__init__(options)
        self._class_names = class_names
        self._kinds = kinds

    def generate(self) -> list[str]:
        opts = self._options
        lines: list[str] = []

        if opts.title or opts.show_metadata:
            lines += [f"# {opts.title or default_title(self._kinds)}", ""]

        if not opts.show_metadata:
            return lines

        if opts.show_classes and self._class_names:
            lines += ["## Classes Analyzed", ""]
            lines += [f"- **{name}**" for name in self._class_names]
            lines.append("")

        if opts.show_extraction_info and self._kinds:
            lines += ["## Extraction Types", ""]
            for kind in self._kinds:
                legend = KIND_LEGENDS.get(kind)
                entry = f"- **{kind_description(kind)}**"
                lines.append(f"{entry}: {legend}" if legend else entry)
            lines.append("")

        return lines


class Table(ReportComponent):
    """Pipe table with widths bounded by the table style."""

    def __init__(self, options: ReportOptions, table: DisplayTable) -> None:
        super().__init__(options)
        self._table = table

    def generate(self) -> list[str]:
        headers = [self._escape(h) for h in self._table.headers]
        if not headers:
            return []
        rows = [[self._escape(c) for c in row] for row in self._table.rows]

        widths = self.column_widths(headers, rows)
        lines = [self._row(headers, widths)]
        lines.append("|" + "|".join("-" * (w + 2) for w in widths) + "|")
        lines.extend(self._row(row, widths) for row in rows)
        return lines

    def column_widths(self, headers: list[str], rows: list[list[str]]) -> list[int]:
        opts = self._options
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row[: len(widths)]):
                widths[i] = max(widths[i], self._cell_width(cell))
        return [max(w, opts.min_column_width) for w in widths]

    def _cell_width(self, cell: str) -> int:
        if self._options.table_style == "compact":
            return min(len(cell), self._options.max_column_width)
        return len(cell)

    def _fit(self, cell: str) -> str:
        limit = self._options.max_column_width
        if self._options.table_style != "compact" or len(cell) <= limit:
            return cell
        if limit < 3:
            return cell[:limit]
        return f"{cell[: limit - 3]}..."

    def _row(self, cells: list[str], widths: list[int]) -> str:
        padded = [f" {self._fit(c).ljust(w)} " for c, w in zip(cells, widths)]
        return "|" + "|".join(padded) + "|"

    @staticmethod
    def _escape(cell: str) -> str:
        return cell.replace("|", "\\|").replace("\n", " ")


class MissingBehaviors(ReportComponent):
    """
    Summary of cells that hold a missing-member or invocation-error marker.

    Works from the raw table so markers are found by tag, not by glyph.
    """

    def __init__(self, options: ReportOptions, raw: RawTable) -> None:
        super().__init__(options)
        self._raw = raw

    def collect(self) -> dict[str, list[tuple[str, ErrorMarker]]]:
        raw = self._raw
        found: dict[str, list[tuple[str, ErrorMarker]]] = {
            name: [] for name in raw.class_names
        }
        for row in raw.rows:
            behavior = str(row[raw.behavior_index])
            for name, value in zip(raw.class_names, row[raw.value_start :]):
                if isinstance(value, ErrorMarker):
                    found[name].append((behavior, value))
        return found

    def generate(self) -> list[str]:
        if not self._options.show_missing_summary:
            return []

        found = self.collect()
        if not any(found.values()):
            return []

        style = self._options.summary_style
        if style == "flat":
            return self._flat(found)
        if style == "detailed":
            return self._detailed(found)
        return self._grouped(found)

    def _grouped(self, found: dict[str, list[tuple[str, ErrorMarker]]]) -> list[str]:
        lines = [
            "## Missing Behaviors Summary",
            "",
            "The following behaviors are not defined in some classes:",
            "",
        ]
        for name, items in found.items():
            if not items:
                continue
            lines.append(f"### {name}")
            lines += [f"- `{behavior}` - {marker.label}" for behavior, marker in items]
            lines.append("")
        return lines

    def _flat(self, found: dict[str, list[tuple[str, ErrorMarker]]]) -> list[str]:
        entries = sorted(
            f"- **{name}**: `{behavior}` - {marker.label}"
            for name, items in found.items()
            for behavior, marker in items
        )
        return ["## Missing Behaviors", "", *entries, ""]

    def _detailed(self, found: dict[str, list[tuple[str, ErrorMarker]]]) -> list[str]:
        total = sum(len(items) for items in found.values())
        lines = [
            "## Missing Behaviors Analysis",
            "",
            f"**Summary**: {total} missing behaviors across {len(found)} classes",
            "",
        ]

        by_category: dict[str, list[str]] = {}
        for name, items in found.items():
            for behavior, marker in items:
                by_category.setdefault(marker.category, []).append(
                    f"- **{name}**: `{behavior}` - {marker.label}"
                )

        for category, entries in by_category.items():
            lines += [f"### {category} ({len(entries)} items)", "", *entries, ""]
        return lines


class Footer(ReportComponent):
    def __init__(self, options: ReportOptions, clock: Clock = utc_now) -> None:
        super().__init__(options)
        self._clock = clock

    def generate(self) -> list[str]:
        opts = self._options
        if not opts.show_footer:
            return []

        lines = ["---"]
        if opts.footer_style == "minimal":
            lines.append("*Generated by classaudit*")
        elif opts.footer_style == "detailed":
            lines += [
                "## Report Information",
                "",
                "- **Generated by**: classaudit",
                f"- **Generated at**: {self._timestamp()}",
                f"- **Python version**: {platform.python_version()}",
            ]
            if opts.custom_footer:
                lines.append(f"- **Note**: {opts.custom_footer}")
        else:
            lines.append(opts.custom_footer or "*Report generated by classaudit*")
            if opts.show_timestamp:
                lines += ["", f"*Generated at: {self._timestamp()}*"]
        return lines

    def _timestamp(self) -> str:
        return self._clock().strftime(TIMESTAMP_FORMAT)
