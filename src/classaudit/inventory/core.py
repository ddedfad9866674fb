from __future__ import annotations

from typing import Any, ClassVar, Iterable

from classaudit.shared.console import ConsoleManager, DebugLevel, NullConsole
from classaudit.shared.values import ValueProcessor

from .collectors import MemberCollector, PrivateConstantProbe
from .filters import NameFilter, NameFilterSpec
from .introspect import ClassIntrospector, PythonIntrospector
from .models import MemberKind, RawTable, ScopeConfig
from .resolvers import MemberResolver

KIND_LABELS: dict[str, str] = {
    "constants": "Constant",
    "class_methods": "Class Method",
}

KIND_DESCRIPTIONS: dict[str, str] = {
    "constants": "Constants",
    "class_methods": "Class Methods",
}

KIND_LEGENDS: dict[str, str] = {
    "constants": "Class constants and their values",
    "class_methods": "Class method results and return values",
}


def titleize(kind: str) -> str:
    return " ".join(part.capitalize() for part in kind.split("_") if part)


def kind_label(kind: str) -> str:
    return KIND_LABELS.get(kind) or titleize(kind)


def kind_description(kind: str) -> str:
    return KIND_DESCRIPTIONS.get(kind) or titleize(kind)


class MemberExtractor:
    """
    Builds a RawTable for one member kind across a list of classes.

    Cells hold raw values or ErrorMarkers; stringification happens later.
    """

    behavior_label: ClassVar[str]
    member_kind: ClassVar[MemberKind]

    def __init__(
        self,
        classes: list[type],
        filters: Iterable[NameFilterSpec] = (),
        *,
        handle_errors: bool = False,
        scope: ScopeConfig | None = None,
        show_source: bool = False,
        introspector: ClassIntrospector | None = None,
        console: ConsoleManager | None = None,
    ) -> None:
        self._classes = list(classes)
        self._filters = list(filters)
        self._handle_errors = handle_errors
        self._scope = scope or ScopeConfig()
        self._show_source = show_source
        self._introspector = introspector or PythonIntrospector()
        self._console = console or NullConsole()

        self._collector = MemberCollector(
            self._introspector,
            self._scope,
            probe=PrivateConstantProbe(self._introspector),
            console=self._console,
        )
        self._resolver = MemberResolver(
            self._introspector, self._scope, self._collector, console=self._console
        )

    def extract(self) -> RawTable:
        if not self._classes:
            return RawTable()

        names = self.member_names()
        header = self.behavior_label
        if self._show_source:
            header = f"{header} (Source)"
        table = RawTable(headers=[header, *self._class_names()])

        for name in names:
            row: list[Any] = [name]
            sources: list[str | None] = [None]
            for klass in self._classes:
                value, source = self._cell(klass, name)
                row.append(value)
                sources.append(source if self._show_source else None)
            table.rows.append(row)
            table.sources.append(sources)

        self._console.summary(
            f"Extracted {self.member_kind} rows", [r[0] for r in table.rows]
        )
        return table

    def member_names(self) -> list[str]:
        collected = self._collector.collect_all(self._classes, self.member_kind)
        filtered = NameFilter.apply(collected, self._filters)
        self._console.trace(
            f"{self.member_kind}: {len(collected)} collected, {len(filtered)} after filters",
            DebugLevel.BASIC,
        )
        return sorted(filtered)

    # --- Private Helpers ---

    def _class_names(self) -> list[str]:
        return [self._introspector.name_of(k) for k in self._classes]

    def _cell(self, klass: type, name: str) -> tuple[Any, str | None]:
        try:
            info = self._resolver.resolve(klass, name, self.member_kind)
            if info is None:
                if not self._handle_errors:
                    return None, None
                return ValueProcessor.missing_marker(self.member_kind), None
            value = info.fetch()
        except Exception as e:
            if not self._handle_errors:
                raise
            marker = ValueProcessor.classify_error(e, name, self.member_kind)
            self._console.warning(
                f"{self._introspector.name_of(klass)}.{name}: "
                f"{type(e).__name__} captured as '{marker.label}'"
            )
            return marker, None

        source = None if info.source_kind == "own" else info.source_label
        return value, source


class ConstantsExtractor(MemberExtractor):
    behavior_label = "Constant"
    member_kind = "constant"


class MethodsExtractor(MemberExtractor):
    behavior_label = "Method"
    member_kind = "method"


EXTRACTORS: dict[str, type[MemberExtractor]] = {
    "constants": ConstantsExtractor,
    "class_methods": MethodsExtractor,
}


def build_extractor(kind: str, classes: list[type], **kwargs: Any) -> MemberExtractor:
    try:
        extractor_cls = EXTRACTORS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown extraction kind: {kind!r} (expected one of {', '.join(EXTRACTORS)})"
        )
    return extractor_cls(classes, **kwargs)


class MultiTypeExtractor:
    """
    Runs one extractor per kind and stacks the rows under a ``Type`` column.
    """

    def __init__(
        self,
        kinds: list[str],
        classes: list[type],
        filters: Iterable[NameFilterSpec] = (),
        *,
        show_source: bool = False,
        introspector: ClassIntrospector | None = None,
        console: ConsoleManager | None = None,
        **kwargs: Any,
    ) -> None:
        self._kinds = list(kinds)
        self._classes = list(classes)
        self._filters = list(filters)
        self._show_source = show_source
        self._introspector = introspector or PythonIntrospector()
        self._console = console or NullConsole()
        self._kwargs = kwargs

    def extract(self) -> RawTable:
        if not self._classes or not self._kinds:
            return RawTable()

        behavior = "Behavior (Source)" if self._show_source else "Behavior"
        class_names = [self._introspector.name_of(k) for k in self._classes]
        table = RawTable(headers=["Type", behavior, *class_names])

        for kind in self._kinds:
            label = kind_label(kind)
            extractor_cls = EXTRACTORS.get(kind)
            if extractor_cls is None:
                self._console.warning(
                    f"Unknown extraction kind '{kind}' ({label}) contributes no rows"
                )
                continue

            sub = extractor_cls(
                self._classes,
                self._filters,
                show_source=self._show_source,
                introspector=self._introspector,
                console=self._console,
                **self._kwargs,
            ).extract()
            for row, sources in zip(sub.rows, sub.sources):
                table.rows.append([label, *row])
                table.sources.append([None, *sources])

        return table
