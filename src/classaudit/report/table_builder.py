from dataclasses import dataclass
from typing import Any

from classaudit.inventory.models import DisplayTable, ErrorMarker, RawTable
from classaudit.shared.console import ConsoleManager, DebugLevel, NullConsole, safe_repr
from classaudit.shared.values import MISSING_KEY, ValueProcessor


@dataclass(slots=True, frozen=True)
class TableSettings:
    expand_hashes: bool = False
    hide_main_row: bool = False
    hide_key_rows: bool = True
    show_source: bool = False


class TableBuilder:
    """
    Turns a RawTable into a DisplayTable of strings.

    With ``expand_hashes`` set, rows holding dict cells fan out into a main
    row plus one ``behavior.key`` row per key seen in any of the dicts.
    """

    def __init__(
        self,
        raw: RawTable,
        settings: TableSettings | None = None,
        *,
        console: ConsoleManager | None = None,
    ) -> None:
        self._raw = raw
        self._settings = settings or TableSettings()
        self._console = console or NullConsole()

    def build(self) -> DisplayTable:
        if self._settings.expand_hashes:
            return self.build_expanded_table()
        return self.build_simple_table()

    def build_simple_table(self) -> DisplayTable:
        rows = [self._plain_row(i, row) for i, row in enumerate(self._raw.rows)]
        return DisplayTable(headers=list(self._raw.headers), rows=rows)

    def build_expanded_table(self) -> DisplayTable:
        raw = self._raw
        show_main = not self._settings.hide_main_row
        show_keys = not self._settings.hide_key_rows
        if not show_main and not show_keys:
            self._console.decision(
                "keeping main rows", "both main and key rows were hidden"
            )
            show_main = True

        rows: list[list[str]] = []
        for i, row in enumerate(raw.rows):
            keys = self._row_hash_keys(row)
            if not keys:
                rows.append(self._plain_row(i, row))
                continue

            self._console.trace(
                f"Expanding '{row[raw.behavior_index]}' over keys {keys}",
                DebugLevel.DETAILED,
            )
            if show_main:
                rows.append(self._plain_row(i, row))
            if show_keys:
                rows.extend(self._key_row(row, key) for key in keys)

        return DisplayTable(headers=list(raw.headers), rows=rows)

    # --- Overridable Formatting ---

    def _process(self, value: Any) -> str:
        return ValueProcessor.process(value)

    def _missing_key(self) -> str:
        return MISSING_KEY

    # --- Private Helpers ---

    def _plain_row(self, row_idx: int, row: list[Any]) -> list[str]:
        start = self._raw.value_start
        cells = [str(c) for c in row[:start]]
        for col in range(start, len(row)):
            cells.append(self._with_source(row_idx, col, self._process(row[col])))
        return cells

    def _with_source(self, row_idx: int, col: int, text: str) -> str:
        if not self._settings.show_source:
            return text
        source = self._raw.source_for(row_idx, col)
        return f"{text} (from {source})" if source else text

    def _key_row(self, row: list[Any], key: str) -> list[str]:
        raw = self._raw
        start = raw.value_start
        cells = [str(c) for c in row[:start]]
        cells[raw.behavior_index] = f"{row[raw.behavior_index]}.{key}"
        cells.extend(self._key_cell(value, key) for value in row[start:])
        return cells

    def _key_cell(self, value: Any, key: str) -> str:
        if ValueProcessor.is_hash(value):
            if ValueProcessor.has_key(value, key):
                return self._process(ValueProcessor.lookup(value, key))
            return self._missing_key()
        if isinstance(value, ErrorMarker):
            return self._process(ValueProcessor.missing_marker("constant"))
        return self._missing_key()

    def _row_hash_keys(self, row: list[Any]) -> list[str]:
        keys: set[str] = set()
        for value in row[self._raw.value_start :]:
            if ValueProcessor.is_hash(value):
                keys.update(ValueProcessor.hash_keys(value))
            elif ValueProcessor.looks_like_hash(value):
                self._console.anomaly(
                    f"{type(value).__name__} looks like a mapping but is not a dict; "
                    f"treated as a scalar: {safe_repr(value)}"
                )
        return sorted(keys)


class CsvTableBuilder(TableBuilder):
    """
    CSV flavour: machine-readable values, and an optional flattened layout
    where dict keys become extra ``behavior.key.Class`` columns.
    """

    def __init__(
        self,
        raw: RawTable,
        settings: TableSettings | None = None,
        *,
        null_value: str = "",
        console: ConsoleManager | None = None,
    ) -> None:
        super().__init__(raw, settings, console=console)
        self._null_value = null_value

    def build(self, flatten: bool = False) -> DisplayTable:
        if self._settings.expand_hashes and flatten:
            return self.build_flattened_table()
        return super().build()

    def build_flattened_table(self) -> DisplayTable:
        raw = self._raw
        groups: list[tuple[int, list[str]]] = []
        for i, row in enumerate(raw.rows):
            keys = self._row_hash_keys(row)
            if keys:
                groups.append((i, keys))

        headers = list(raw.headers)
        for i, keys in groups:
            behavior = raw.rows[i][raw.behavior_index]
            for key in keys:
                headers.extend(f"{behavior}.{key}.{name}" for name in raw.class_names)

        rows: list[list[str]] = []
        width = len(raw.class_names)
        for i, row in enumerate(raw.rows):
            cells = self._plain_row(i, row)
            for owner, keys in groups:
                for key in keys:
                    if owner == i:
                        cells.extend(
                            self._flat_cell(value, key) for value in row[raw.value_start :]
                        )
                    else:
                        cells.extend([self._null_value] * width)
            rows.append(cells)

        return DisplayTable(headers=headers, rows=rows)

    def _process(self, value: Any) -> str:
        return ValueProcessor.process_for_csv(value, self._null_value)

    def _missing_key(self) -> str:
        return self._null_value

    def _flat_cell(self, value: Any, key: str) -> str:
        if ValueProcessor.is_hash(value) and ValueProcessor.has_key(value, key):
            return self._process(ValueProcessor.lookup(value, key))
        return self._null_value
