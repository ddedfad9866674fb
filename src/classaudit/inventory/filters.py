import re
from typing import Iterable

NameFilterSpec = str | re.Pattern


class NameFilter:
    """
    Narrows member names by substring or regex. Filters AND together.
    """

    @staticmethod
    def validate(spec: object) -> NameFilterSpec:
        if isinstance(spec, (str, re.Pattern)):
            return spec
        raise TypeError(
            f"Filter must be a string or compiled pattern, got {type(spec).__name__}"
        )

    @staticmethod
    def matches(name: str, spec: NameFilterSpec) -> bool:
        if isinstance(spec, re.Pattern):
            return spec.search(name) is not None
        return spec in name

    @staticmethod
    def apply(names: Iterable[str], filters: Iterable[NameFilterSpec]) -> set[str]:
        kept = set(names)
        for spec in filters:
            kept = {n for n in kept if NameFilter.matches(n, spec)}
        return kept
