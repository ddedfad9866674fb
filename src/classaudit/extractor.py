from pathlib import Path
from typing import Any

from classaudit.inventory.core import EXTRACTORS, MultiTypeExtractor, build_extractor
from classaudit.inventory.filters import NameFilter, NameFilterSpec
from classaudit.inventory.introspect import (
    ClassIntrospector,
    ClassResolver,
    PythonIntrospector,
)
from classaudit.inventory.models import RawTable, ScopeConfig
from classaudit.report.components import Clock, utc_now
from classaudit.report.csv_report import CsvRenderer
from classaudit.report.markdown import MarkdownRenderer
from classaudit.report.options import ReportOptions
from classaudit.report.table_builder import TableSettings
from classaudit.shared.console import (
    ConsoleManager,
    DebugLevel,
    NullConsole,
    debug_console,
)


class Extractor:
    """
    Chainable builder for one class audit.

    Configuration methods return ``self``; ``data()``, ``to_markdown()`` and
    ``to_csv()`` run a fresh extraction each time they are called.
    """

    def __init__(
        self,
        *kinds: str,
        console: ConsoleManager | None = None,
        introspector: ClassIntrospector | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if not kinds:
            raise ValueError("At least one extraction kind is required")
        if len(kinds) == 1 and kinds[0] not in EXTRACTORS:
            raise ValueError(
                f"Unknown extraction kind: {kinds[0]!r} "
                f"(expected one of {', '.join(EXTRACTORS)})"
            )

        self._kinds = list(kinds)
        self._console = console or NullConsole()
        self._introspector = introspector or PythonIntrospector()
        self._clock = clock

        self._classes: list[type] = []
        self._filters: list[NameFilterSpec] = []
        self._scope = ScopeConfig()
        self._handle_errors = False
        self._show_source = False
        self._expand_hashes = False
        self._hide_main_row = False
        self._hide_key_rows = True

    # --- Configuration ---

    def from_(self, classes: Any) -> "Extractor":
        self._classes = ClassResolver.normalize_classes(classes)
        self._console.trace(
            f"Classes: {', '.join(self._introspector.name_of(k) for k in self._classes)}"
        )
        return self

    def filter(self, spec: NameFilterSpec) -> "Extractor":
        self._filters.append(NameFilter.validate(spec))
        return self

    def strict(self) -> "Extractor":
        self._scope = self._scope.strict()
        return self

    def comprehensive(self) -> "Extractor":
        self._scope = self._scope.comprehensive()
        return self

    def with_private(self) -> "Extractor":
        self._scope = self._scope.with_private()
        return self

    def show_source(self) -> "Extractor":
        self._show_source = True
        return self

    def expand_hashes(self) -> "Extractor":
        self._expand_hashes = True
        return self

    def handle_errors(self) -> "Extractor":
        self._handle_errors = True
        return self

    def show_only_main(self) -> "Extractor":
        return self._hash_display(hide_main=False, hide_keys=True)

    def show_only_keys(self) -> "Extractor":
        return self._hash_display(hide_main=True, hide_keys=False)

    def show_expanded_details(self) -> "Extractor":
        return self._hash_display(hide_main=False, hide_keys=False)

    def hide_main_row(self, flag: bool = True) -> "Extractor":
        self._hide_main_row = flag
        return self

    def hide_key_rows(self, flag: bool = True) -> "Extractor":
        self._hide_key_rows = flag
        return self

    def debug(self, level: "str | int | DebugLevel" = "basic") -> "Extractor":
        self._console = debug_console(level)
        return self

    # --- Terminal Operations ---

    def data(self) -> RawTable:
        options: dict[str, Any] = {
            "handle_errors": self._handle_errors,
            "scope": self._scope,
            "show_source": self._show_source,
            "introspector": self._introspector,
            "console": self._console,
        }
        self._console.trace(
            f"Extracting {self._kinds} (scope={self._scope.scope}, "
            f"private={self._scope.include_private}, handle_errors={self._handle_errors})"
        )

        if len(self._kinds) == 1:
            return build_extractor(
                self._kinds[0], self._classes, filters=self._filters, **options
            ).extract()

        return MultiTypeExtractor(
            self._kinds, self._classes, self._filters, **options
        ).extract()

    def to_markdown(self, filename: str | Path | None = None, **options: Any) -> str:
        report = ReportOptions.build("markdown", options)
        text = MarkdownRenderer(
            self.data(),
            self._kinds,
            self._table_settings(),
            report,
            clock=self._clock,
            console=self._console,
        ).render()
        return self._save(text, filename)

    def to_csv(self, filename: str | Path | None = None, **options: Any) -> str:
        report = ReportOptions.build("csv", options)
        text = CsvRenderer(
            self.data(),
            self._kinds,
            self._table_settings(),
            report,
            clock=self._clock,
            console=self._console,
        ).render()
        return self._save(text, filename)

    # --- Private Helpers ---

    def _hash_display(self, *, hide_main: bool, hide_keys: bool) -> "Extractor":
        self._expand_hashes = True
        self._hide_main_row = hide_main
        self._hide_key_rows = hide_keys
        return self

    def _table_settings(self) -> TableSettings:
        return TableSettings(
            expand_hashes=self._expand_hashes,
            hide_main_row=self._hide_main_row,
            hide_key_rows=self._hide_key_rows,
            show_source=self._show_source,
        )

    def _save(self, text: str, filename: str | Path | None) -> str:
        if filename is None:
            return text

        out_p = Path(filename)
        out_p.parent.mkdir(parents=True, exist_ok=True)
        with open(out_p, "w", encoding="utf-8") as f:
            f.write(text)

        self._console.info(f"Report written to: {out_p.resolve()}")
        return text


def extract(*kinds: str, console: ConsoleManager | None = None) -> Extractor:
    return Extractor(*kinds, console=console)
