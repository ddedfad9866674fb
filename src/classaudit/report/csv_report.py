import csv
import io

from classaudit.inventory.core import kind_description
from classaudit.inventory.models import RawTable
from classaudit.shared.console import ConsoleManager, NullConsole

from .components import TIMESTAMP_FORMAT, Clock, default_title, utc_now
from .options import ReportOptions
from .table_builder import CsvTableBuilder, TableSettings


class CsvRenderer:
    """
    Comment-line header followed by the table written with ``csv.writer``.
    """

    def __init__(
        self,
        raw: RawTable,
        kinds: list[str],
        settings: TableSettings,
        options: ReportOptions,
        *,
        clock: Clock = utc_now,
        console: ConsoleManager | None = None,
    ) -> None:
        self._raw = raw
        self._kinds = kinds
        self._settings = settings
        self._options = options
        self._clock = clock
        self._console = console or NullConsole()

    def render(self) -> str:
        if self._raw.is_empty:
            self._console.warning("Nothing extracted; CSV report is empty")
            return ""

        opts = self._options
        table = CsvTableBuilder(
            self._raw,
            self._settings,
            null_value=opts.null_value,
            console=self._console,
        ).build(flatten=opts.flatten_hashes)

        buffer = io.StringIO()
        for line in self.header_lines():
            buffer.write(f"{line}\n")

        writer = csv.writer(
            buffer,
            delimiter=opts.separator,
            quotechar=opts.quote_char,
            lineterminator="\n",
            quoting=csv.QUOTE_MINIMAL,
        )
        writer.writerow(table.headers)
        writer.writerows(table.rows)
        return buffer.getvalue()

    def header_lines(self) -> list[str]:
        opts = self._options
        if not opts.show_metadata:
            return []

        mark = opts.comment_char
        lines = [
            f"{mark} {opts.title or default_title(self._kinds)}",
            f"{mark} Classes: {', '.join(self._raw.class_names)}",
        ]
        if self._kinds:
            types = ", ".join(kind_description(k) for k in self._kinds)
            lines.append(f"{mark} Extraction Types: {types}")
        lines.append(f"{mark} Generated: {self._clock().strftime(TIMESTAMP_FORMAT)}")
        lines.append(mark)
        return lines
