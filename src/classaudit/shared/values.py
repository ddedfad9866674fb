import re
from collections.abc import Mapping
from numbers import Number
from typing import Any

from classaudit.inventory.models import ErrorMarker, MemberKind

CHECK = "✅"
CROSS = "❌"
MISSING_KEY = "—"

_GLYPHS = re.compile(r"🚫|⚠️|⚠|✅|❌")


class ValueProcessor:
    """
    Static utilities turning raw cell values into display strings.

    Formatting never raises: a value whose own ``repr``/``str`` blows up is
    rendered as ``⚠️ <ExceptionClass>``.
    """

    @staticmethod
    def process(value: Any) -> str:
        try:
            return ValueProcessor._format(value)
        except Exception as e:
            return f"⚠️ {type(e).__name__}"

    @staticmethod
    def process_for_csv(value: Any, null_value: str = "") -> str:
        try:
            return ValueProcessor._format_csv(value, null_value)
        except Exception as e:
            return type(e).__name__

    @staticmethod
    def expand_hash(value: dict) -> list[tuple[str, str]]:
        """(key, processed value) pairs for a hash cell, in insertion order."""
        return [(str(k), ValueProcessor.process(v)) for k, v in value.items()]

    @staticmethod
    def is_hash(value: Any) -> bool:
        return type(value) is dict

    @staticmethod
    def looks_like_hash(value: Any) -> bool:
        """Mapping-ish objects that are not a plain dict."""
        if ValueProcessor.is_hash(value):
            return False
        if isinstance(value, Mapping):
            return True
        if isinstance(value, type):
            return False
        try:
            return callable(getattr(value, "keys", None)) and callable(
                getattr(value, "__getitem__", None)
            )
        except Exception:
            return False

    @staticmethod
    def hash_keys(value: dict) -> list[str]:
        return [str(k) for k in value]

    @staticmethod
    def has_key(value: dict, key: str) -> bool:
        if key in value:
            return True
        return any(str(k) == key for k in value)

    @staticmethod
    def lookup(value: dict, key: str) -> Any:
        if key in value:
            return value[key]
        for k, v in value.items():
            if str(k) == key:
                return v
        raise KeyError(key)

    @staticmethod
    def missing_marker(kind: MemberKind) -> ErrorMarker:
        if kind == "constant":
            return ErrorMarker("missing_constant", "Not defined")
        return ErrorMarker("missing_method", "No method")

    @staticmethod
    def classify_error(error: BaseException, member: str, kind: MemberKind) -> ErrorMarker:
        if isinstance(error, AttributeError) and getattr(error, "name", None) == member:
            return ValueProcessor.missing_marker(kind)

        words = str(error).split()[:3]
        excerpt = " ".join(words) if words else type(error).__name__
        return ErrorMarker("invocation_error", f"Error: {excerpt}")

    @staticmethod
    def strip_glyphs(text: str) -> str:
        return _GLYPHS.sub("", text).strip()

    # --- Private Helpers ---

    @staticmethod
    def _format(value: Any) -> str:
        if isinstance(value, ErrorMarker):
            return value.label
        if value is True:
            return CHECK
        if value is False or value is None:
            return CROSS
        if isinstance(value, str):
            return value
        if ValueProcessor.is_hash(value):
            return repr(value)
        if isinstance(value, (list, tuple)):
            return ", ".join(ValueProcessor._element(v) for v in value)
        if isinstance(value, (set, frozenset)):
            return ", ".join(sorted(ValueProcessor._element(v) for v in value))
        if isinstance(value, Number):
            return str(value)
        return repr(value)

    @staticmethod
    def _element(value: Any) -> str:
        """Sequence members: no glyphs, empty for None."""
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    @staticmethod
    def _format_csv(value: Any, null_value: str) -> str:
        if isinstance(value, ErrorMarker):
            return value.message or null_value
        if value is True:
            return "TRUE"
        if value is False:
            return "FALSE"
        if value is None:
            return null_value
        if isinstance(value, str):
            clean = ValueProcessor.strip_glyphs(value)
            return clean if clean else null_value
        if ValueProcessor.is_hash(value):
            return repr(value)
        if isinstance(value, (list, tuple)):
            return "; ".join(ValueProcessor._element(v) for v in value)
        if isinstance(value, (set, frozenset)):
            return "; ".join(sorted(ValueProcessor._element(v) for v in value))
        if isinstance(value, Number):
            return str(value)
        return repr(value)
