from classaudit.shared.console import ConsoleManager, DebugLevel, NullConsole

from .collectors import MemberCollector
from .introspect import ClassIntrospector
from .models import MemberInfo, MemberKind, ScopeConfig


class MemberResolver:
    """
    Finds where a member effectively comes from for a given class.

    First match wins: own, nearest ancestor, first mixin, then any
    attribute the plain lookup still reaches.
    """

    def __init__(
        self,
        introspector: ClassIntrospector,
        scope: ScopeConfig,
        collector: MemberCollector,
        *,
        console: ConsoleManager | None = None,
    ) -> None:
        self._introspector = introspector
        self._scope = scope
        self._collector = collector
        self._console = console or NullConsole()

    def resolve(self, klass: type, name: str, kind: MemberKind) -> MemberInfo | None:
        info = (
            self._own(klass, name, kind)
            or self._inherited(klass, name, kind)
            or self._module(klass, name, kind)
            or self._fallback(klass, name, kind)
        )
        member = f"{self._introspector.name_of(klass)}.{name}"
        if info is None:
            self._console.decision(
                f"{member} unresolved", "no source declares it", DebugLevel.DETAILED
            )
        else:
            self._console.trace(
                f"{member} -> {info.source_kind} ({info.source_label})",
                DebugLevel.VERBOSE,
            )
        return info

    # --- Private Helpers ---

    def _own(self, klass: type, name: str, kind: MemberKind) -> MemberInfo | None:
        intro = self._introspector
        if not intro.declares(klass, name, kind):
            return None
        return MemberInfo(self._fetcher(klass, klass, name, kind), intro.name_of(klass), "own")

    def _inherited(self, klass: type, name: str, kind: MemberKind) -> MemberInfo | None:
        if not self._scope.include_inherited:
            return None
        intro = self._introspector
        for parent in intro.ancestors(klass):
            if intro.declares(parent, name, kind):
                return MemberInfo(
                    self._fetcher(parent, parent, name, kind), intro.name_of(parent), "inherited"
                )
        return None

    def _module(self, klass: type, name: str, kind: MemberKind) -> MemberInfo | None:
        if not self._scope.include_modules:
            return None
        for module, via_parent in self._collector.modules_for(klass):
            if not self._introspector.declares(module, name, kind):
                continue
            label = self._introspector.name_of(module)
            if via_parent:
                label = f"{label} (via parent)"
            # Mixin methods run against the audited class, constants come from the mixin.
            return MemberInfo(self._fetcher(module, klass, name, kind), label, "module")
        return None

    def _fallback(self, klass: type, name: str, kind: MemberKind) -> MemberInfo | None:
        intro = self._introspector
        if not intro.responds_to(klass, name, kind):
            return None
        if kind == "method":
            return MemberInfo(lambda: intro.invoke(klass, name), "inherited", "unknown")
        return MemberInfo(lambda: intro.lookup(klass, name), "inherited", "unknown")

    def _fetcher(self, owner: type, target: type, name: str, kind: MemberKind):
        intro = self._introspector
        if kind == "method":
            return lambda: intro.invoke(target, name)
        return lambda: intro.read_constant(owner, name)
