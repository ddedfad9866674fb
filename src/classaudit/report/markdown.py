from classaudit.inventory.models import RawTable
from classaudit.shared.console import ConsoleManager, NullConsole

from .components import Clock, Footer, Header, MissingBehaviors, Table, utc_now
from .options import ReportOptions
from .table_builder import TableBuilder, TableSettings


class MarkdownRenderer:
    """
    Assembles header, table, missing-behaviors summary and footer.
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
            self._console.warning("Nothing extracted; Markdown report is empty")
            return ""

        display = TableBuilder(self._raw, self._settings, console=self._console).build()
        sections = [
            Header(self._options, self._raw.class_names, self._kinds).generate(),
            Table(self._options, display).generate(),
            MissingBehaviors(self._options, self._raw).generate(),
            Footer(self._options, self._clock).generate(),
        ]
        return "\n\n".join(
            text for text in (self._join(lines) for lines in sections) if text
        )

    @staticmethod
    def _join(lines: list[str]) -> str:
        return "\n".join(lines).strip("\n")
