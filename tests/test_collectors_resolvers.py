"""
Tests for member collection under scopes and for source resolution.
"""

import pytest

from classaudit.inventory.collectors import MemberCollector, PrivateConstantProbe
from classaudit.inventory.introspect import PythonIntrospector
from classaudit.inventory.models import ScopeConfig
from classaudit.inventory.resolvers import MemberResolver
from tests.sample_classes import (
    AuditMixin,
    Child,
    Grandchild,
    Parent,
    PlainHolder,
    SecretHolder,
    ServiceA,
)

INTRO = PythonIntrospector()


def collector(scope: ScopeConfig) -> MemberCollector:
    return MemberCollector(INTRO, scope)


def resolver(scope: ScopeConfig) -> MemberResolver:
    return MemberResolver(INTRO, scope, collector(scope))


class TestScopeConfig:
    """Immutable scope variants."""

    def test_default_is_comprehensive(self) -> None:
        scope = ScopeConfig()
        assert not scope.is_strict
        assert scope.include_inherited and scope.include_modules
        assert not scope.include_private

    def test_variants_return_new_instances(self) -> None:
        base = ScopeConfig()
        strict = base.strict()
        private = strict.with_private()

        assert base.scope == "comprehensive"
        assert strict.is_strict and not strict.include_private
        assert private.is_strict and private.include_private
        assert private.comprehensive().include_private


class TestMemberCollector:
    """Candidate name enumeration."""

    def test_strict_is_own_only(self) -> None:
        names = collector(ScopeConfig().strict()).collect(Child, "constant")
        assert names == {"CHILD_ONLY", "TIMEOUT"}

    def test_comprehensive_adds_ancestors_and_mixins(self) -> None:
        strict = collector(ScopeConfig().strict()).collect(Child, "constant")
        full = collector(ScopeConfig()).collect(Child, "constant")

        assert strict <= full
        assert full >= strict | INTRO.own_constants(Parent) | INTRO.own_constants(AuditMixin)

    def test_comprehensive_methods(self) -> None:
        names = collector(ScopeConfig()).collect(Grandchild, "method")
        assert names == {
            "child_method",
            "overridable_method",
            "parent_method",
            "mixin_method",
        }

    def test_lifecycle_hooks_never_collected(self) -> None:
        class Hooked:
            def __init_subclass__(cls, **kwargs):
                super().__init_subclass__(**kwargs)

            @classmethod
            def real(cls):
                return 1

        names = collector(ScopeConfig().with_private()).collect(Hooked, "method")
        assert names == {"real"}

    def test_private_methods_follow_scope(self) -> None:
        private = ScopeConfig().with_private()
        assert "_internal" in collector(private).collect(SecretHolder, "method")
        assert "_parent_secret" in collector(private).collect(Child, "method")
        assert "_parent_secret" not in collector(private.strict()).collect(
            Child, "method"
        )

    def test_private_constants_use_candidate_names(self) -> None:
        names = collector(ScopeConfig().with_private()).collect(SecretHolder, "constant")
        assert names == {"PUBLIC", "_TIMEOUT", "_SecretHolder__API_KEY"}

    def test_collect_all_unions_classes(self) -> None:
        names = collector(ScopeConfig()).collect_all([SecretHolder, PlainHolder], "method")
        assert names == {"visible"}

    def test_modules_for_flags_ancestor_mixins(self) -> None:
        assert collector(ScopeConfig()).modules_for(Child) == [(AuditMixin, False)]
        assert collector(ScopeConfig()).modules_for(Grandchild) == [(AuditMixin, True)]
        assert collector(ScopeConfig().strict()).modules_for(Grandchild) == []


class TestPrivateConstantProbe:
    """Best-effort private constant discovery."""

    def test_candidates_include_class_specific_names(self) -> None:
        names = PrivateConstantProbe(INTRO).candidates(SecretHolder)
        assert "_SECRETHOLDER_CONFIG" in names
        assert "_SecretHolder__SECRETHOLDER_SETTINGS" in names
        assert "_A" in names and "_Z" in names

    def test_unlisted_names_are_not_found(self) -> None:
        found = PrivateConstantProbe(INTRO).probe(SecretHolder, {"PUBLIC"})
        assert "_UNLISTED_THING" not in found

    def test_public_names_are_excluded(self) -> None:
        found = PrivateConstantProbe(INTRO).probe(
            SecretHolder, {"PUBLIC", "_TIMEOUT"}
        )
        assert found == {"_SecretHolder__API_KEY"}


class TestMemberResolver:
    """Own > inherited > module > fallback."""

    def test_own_override_wins(self) -> None:
        info = resolver(ScopeConfig()).resolve(Child, "overridable_method", "method")
        assert info is not None
        assert info.source_kind == "own"
        assert info.fetch() == "child"

    def test_nearest_ancestor_wins(self) -> None:
        info = resolver(ScopeConfig()).resolve(Grandchild, "overridable_method", "method")
        assert info is not None
        assert (info.source_kind, info.source_label) == ("inherited", "Child")
        assert info.fetch() == "child"

    def test_inherited_methods_run_on_the_ancestor(self) -> None:
        info = resolver(ScopeConfig()).resolve(Child, "parent_method", "method")
        assert info is not None
        assert info.source_label == "Parent"
        assert info.fetch() == "parent:Parent"

    def test_inherited_constants_read_ancestor_value(self) -> None:
        info = resolver(ScopeConfig()).resolve(Grandchild, "TIMEOUT", "constant")
        assert info is not None
        assert (info.source_kind, info.source_label) == ("inherited", "Child")
        assert info.fetch() == 60

    def test_module_methods_run_on_the_audited_class(self) -> None:
        info = resolver(ScopeConfig()).resolve(Child, "mixin_method", "method")
        assert info is not None
        assert (info.source_kind, info.source_label) == ("module", "AuditMixin")
        assert info.fetch() == "mixin:Child"

    def test_module_reached_through_parent_is_labelled(self) -> None:
        info = resolver(ScopeConfig()).resolve(Grandchild, "MIXIN_LEVEL", "constant")
        assert info is not None
        assert info.source_label == "AuditMixin (via parent)"
        assert info.fetch() == "mixin"

    def test_strict_falls_back_to_plain_lookup(self) -> None:
        info = resolver(ScopeConfig().strict()).resolve(Child, "PARENT_ONLY", "constant")
        assert info is not None
        assert (info.source_kind, info.source_label) == ("unknown", "inherited")
        assert info.fetch() == "parent"

    @pytest.mark.parametrize("kind", ["constant", "method"])
    def test_unknown_members_resolve_to_none(self, kind: str) -> None:
        assert resolver(ScopeConfig()).resolve(ServiceA, "EXTRA", kind) is None
