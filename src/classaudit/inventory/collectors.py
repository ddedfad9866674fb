import string

from classaudit.shared.console import ConsoleManager, DebugLevel, NullConsole

from .introspect import ClassIntrospector
from .models import MemberKind, ScopeConfig


class PrivateConstantProbe:
    """
    Best-effort discovery of private constants.

    Python has no notion of a "private constant list", so a curated set of
    common names is probed in its hidden spellings (``_NAME`` and the
    name-mangled ``_Class__NAME``). Anything outside the list is not found.
    """

    COMMON_NAMES: tuple[str, ...] = (
        *string.ascii_uppercase,
        "VERSION",
        "CONFIG",
        "SECRET_KEY",
        "API_KEY",
        "TOKEN",
        "PRIVATE_KEY",
        "INTERNAL_CONFIG",
        "DEBUG_MODE",
        "DEVELOPMENT_MODE",
        "CACHE_TTL",
        "TIMEOUT",
        "RETRY_COUNT",
        "MAX_RETRIES",
        "DEFAULT_OPTIONS",
        "INTERNAL_OPTIONS",
    )

    def __init__(self, introspector: ClassIntrospector) -> None:
        self._introspector = introspector

    def candidates(self, klass: type) -> list[str]:
        short = self._introspector.name_of(klass).rsplit(".", 1)[-1]
        prefix = short.upper()
        names = [
            *self.COMMON_NAMES,
            f"{prefix}_CONFIG",
            f"{prefix}_OPTIONS",
            f"{prefix}_SETTINGS",
        ]
        mangle = f"_{short.lstrip('_')}__"
        spellings: list[str] = []
        for name in names:
            spellings.append(f"_{name}")
            spellings.append(f"{mangle}{name}")
        return spellings

    def probe(self, klass: type, public: set[str]) -> set[str]:
        return {
            name
            for name in self.candidates(klass)
            if name not in public
            and self._introspector.declares(klass, name, "constant")
        }


class MemberCollector:
    """
    Enumerates candidate member names for one class under a scope.
    """

    def __init__(
        self,
        introspector: ClassIntrospector,
        scope: ScopeConfig,
        *,
        probe: PrivateConstantProbe | None = None,
        console: ConsoleManager | None = None,
    ) -> None:
        self._introspector = introspector
        self._scope = scope
        self._probe = probe or PrivateConstantProbe(introspector)
        self._console = console or NullConsole()

    def collect(self, klass: type, kind: MemberKind) -> set[str]:
        intro = self._introspector
        names = set(intro.own_members(klass, kind))
        self._console.trace(
            f"{intro.name_of(klass)}: {len(names)} own {kind}(s)", DebugLevel.DETAILED
        )

        if self._scope.include_inherited:
            for parent in intro.ancestors(klass):
                names |= intro.own_members(parent, kind)

        if self._scope.include_modules:
            for module, _ in self.modules_for(klass):
                names |= intro.own_members(module, kind)

        if self._scope.include_private:
            names |= self._collect_private(klass, kind)

        return names

    def collect_all(self, classes: list[type], kind: MemberKind) -> set[str]:
        names: set[str] = set()
        for klass in classes:
            names |= self.collect(klass, kind)
        return names

    def modules_for(self, klass: type) -> list[tuple[type, bool]]:
        """Mixins in lookup order, flagged True when reached through an ancestor."""
        intro = self._introspector
        seen: list[type] = []
        modules: list[tuple[type, bool]] = []

        owners = [klass]
        if self._scope.include_inherited:
            owners.extend(intro.ancestors(klass))

        for owner in owners:
            for module in intro.mixed_in_modules(owner):
                if module in seen:
                    continue
                seen.append(module)
                modules.append((module, owner is not klass))
        return modules

    # --- Private Helpers ---

    def _collect_private(self, klass: type, kind: MemberKind) -> set[str]:
        intro = self._introspector
        if kind == "constant":
            found = self._probe.probe(klass, intro.own_constants(klass))
            self._console.trace(
                f"{intro.name_of(klass)}: probe found {sorted(found)}", DebugLevel.VERBOSE
            )
            return found

        names = set(intro.private_methods(klass))
        if self._scope.include_inherited:
            for parent in intro.ancestors(klass):
                names |= intro.private_methods(parent)
        if self._scope.include_modules:
            for module, _ in self.modules_for(klass):
                names |= intro.private_methods(module)
        return names
