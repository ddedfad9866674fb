from dataclasses import dataclass
from typing import Any, Literal

ReportFormat = Literal["markdown", "csv"]

MARKDOWN_DEFAULTS: dict[str, Any] = {
    "title": None,
    "show_metadata": True,
    "show_classes": True,
    "show_extraction_info": True,
    "show_missing_summary": False,
    "summary_style": "grouped",
    "table_style": "standard",
    "min_column_width": 3,
    "max_column_width": 50,
    "show_footer": True,
    "footer_style": "default",
    "show_timestamp": False,
    "custom_footer": None,
}

CSV_DEFAULTS: dict[str, Any] = {
    "title": None,
    "show_metadata": True,
    "separator": ",",
    "quote_char": '"',
    "flatten_hashes": True,
    "null_value": "",
    "comment_char": "#",
}

SCHEMAS: dict[str, dict[str, Any]] = {
    "markdown": MARKDOWN_DEFAULTS,
    "csv": CSV_DEFAULTS,
}

CHOICES: dict[str, tuple[str, ...]] = {
    "summary_style": ("grouped", "flat", "detailed"),
    "table_style": ("standard", "compact", "wide"),
    "footer_style": ("default", "minimal", "detailed"),
}


@dataclass(slots=True, frozen=True)
class ReportOptions:
    """
    Every option a renderer may read, built once per render call.

    Options that do not apply to the chosen format keep their defaults.
    """

    format: ReportFormat = "markdown"
    title: str | None = None
    show_metadata: bool = True
    show_classes: bool = True
    show_extraction_info: bool = True
    show_missing_summary: bool = False
    summary_style: str = "grouped"
    table_style: str = "standard"
    min_column_width: int = 3
    max_column_width: int = 50
    show_footer: bool = True
    footer_style: str = "default"
    show_timestamp: bool = False
    custom_footer: str | None = None
    separator: str = ","
    quote_char: str = '"'
    flatten_hashes: bool = True
    null_value: str = ""
    comment_char: str = "#"

    @classmethod
    def build(
        cls, format: ReportFormat, overrides: dict[str, Any] | None = None
    ) -> "ReportOptions":
        try:
            schema = SCHEMAS[format]
        except KeyError:
            raise ValueError(
                f"Unknown report format: {format!r} (expected one of {', '.join(SCHEMAS)})"
            )

        overrides = dict(overrides or {})
        unknown = sorted(set(overrides) - set(schema))
        if unknown:
            raise ValueError(
                f"Unknown report option(s) for {format}: {', '.join(unknown)} "
                f"(recognized: {', '.join(sorted(schema))})"
            )

        values = {**schema, **overrides}
        cls._validate(values)
        return cls(format=format, **values)

    @staticmethod
    def _validate(values: dict[str, Any]) -> None:
        for key, allowed in CHOICES.items():
            if key in values and values[key] not in allowed:
                raise ValueError(
                    f"Invalid {key}: {values[key]!r} (expected one of {', '.join(allowed)})"
                )

        if "min_column_width" in values:
            lo, hi = values["min_column_width"], values["max_column_width"]
            for name, width in (("min_column_width", lo), ("max_column_width", hi)):
                if isinstance(width, bool) or not isinstance(width, int) or width < 1:
                    raise ValueError(f"{name} must be a positive integer, got {width!r}")
            if lo > hi:
                raise ValueError(
                    f"min_column_width ({lo}) cannot exceed max_column_width ({hi})"
                )

        for key in ("separator", "quote_char"):
            if key in values and (
                not isinstance(values[key], str) or len(values[key]) != 1
            ):
                raise ValueError(f"{key} must be a single character, got {values[key]!r}")
