from dataclasses import dataclass, field
from typing import Any, Callable, Literal

MemberKind = Literal["constant", "method"]

SourceKind = Literal["own", "inherited", "module", "unknown"]

Visibility = Literal["public", "private", "dunder"]

MarkerKind = Literal["missing_constant", "missing_method", "invocation_error"]

Scope = Literal["strict", "comprehensive"]


@dataclass(slots=True, frozen=True)
class ErrorMarker:
    """Stands in for a cell value that could not be produced."""

    kind: MarkerKind
    message: str

    @property
    def is_missing(self) -> bool:
        return self.kind != "invocation_error"

    @property
    def glyph(self) -> str:
        return "🚫" if self.is_missing else "⚠️"

    @property
    def label(self) -> str:
        """Glyph-prefixed text shown in Markdown cells."""
        return f"{self.glyph} {self.message}"

    @property
    def category(self) -> str:
        """Short prefix used to group markers in detailed summaries."""
        if self.is_missing:
            return self.label
        return f"{self.glyph} Error"

    def __str__(self) -> str:
        return self.label


@dataclass(slots=True, frozen=True)
class ScopeConfig:
    """Which parts of a class hierarchy are scanned for members."""

    scope: Scope = "comprehensive"
    include_private: bool = False

    @property
    def is_strict(self) -> bool:
        return self.scope == "strict"

    @property
    def include_inherited(self) -> bool:
        return self.scope == "comprehensive"

    @property
    def include_modules(self) -> bool:
        return self.scope == "comprehensive"

    def strict(self) -> "ScopeConfig":
        return ScopeConfig(scope="strict", include_private=self.include_private)

    def comprehensive(self) -> "ScopeConfig":
        return ScopeConfig(scope="comprehensive", include_private=self.include_private)

    def with_private(self) -> "ScopeConfig":
        return ScopeConfig(scope=self.scope, include_private=True)


@dataclass(slots=True, frozen=True)
class MemberInfo:
    fetch: Callable[[], Any]
    source_label: str
    source_kind: SourceKind


@dataclass
class RawTable:
    """Extraction output. Value cells hold raw values or ErrorMarkers."""

    headers: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)
    sources: list[list[str | None]] = field(default_factory=list)

    @property
    def has_type_column(self) -> bool:
        return bool(self.headers) and self.headers[0] == "Type"

    @property
    def value_start(self) -> int:
        return 2 if self.has_type_column else 1

    @property
    def behavior_index(self) -> int:
        return 1 if self.has_type_column else 0

    @property
    def class_names(self) -> list[str]:
        return self.headers[self.value_start :]

    @property
    def is_empty(self) -> bool:
        return not self.headers or not self.rows

    def source_for(self, row_idx: int, col_idx: int) -> str | None:
        if row_idx >= len(self.sources):
            return None
        row = self.sources[row_idx]
        return row[col_idx] if col_idx < len(row) else None


@dataclass
class DisplayTable:
    """Render-ready table: every cell is a string."""

    headers: list[str]
    rows: list[list[str]]
