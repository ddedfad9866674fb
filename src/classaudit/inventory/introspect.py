import builtins
import importlib
import inspect
import re
import sys
import types
from abc import ABC, abstractmethod
from typing import Any, Iterable

from .models import MemberKind, Visibility

CONSTANT_NAME = re.compile(r"^_*[A-Z][A-Z0-9_]*$")

# Implicit classmethods/staticmethods Python wires into class bodies.
LIFECYCLE_HOOKS: frozenset[str] = frozenset(
    {
        "__init_subclass__",
        "__subclasshook__",
        "__class_getitem__",
        "__set_name__",
        "__new__",
    }
)


class ClassNotFoundError(ValueError):
    pass


def get_visibility(name: str) -> Visibility:
    if name.startswith("__") and name.endswith("__") and len(name) > 4:
        return "dunder"
    if name.startswith("_"):
        return "private"
    return "public"


def is_constant_value(value: Any) -> bool:
    if isinstance(value, (classmethod, staticmethod, property, type)):
        return False
    return not inspect.isroutine(value)


def is_class_level_method(value: Any) -> bool:
    return isinstance(value, (classmethod, staticmethod))


def is_root_type(klass: type) -> bool:
    return klass is object or klass.__module__ == "builtins"


class ClassIntrospector(ABC):
    """
    The only place that touches Python's reflection machinery.

    Everything above this seam works with names, owners and thunks, so the
    collectors and resolvers can be driven by a fake in tests.
    """

    @abstractmethod
    def name_of(self, klass: type) -> str:
        """Display name of ``klass`` (qualified for nested classes)."""

    @abstractmethod
    def own_constants(self, klass: type) -> set[str]:
        """Public constants declared directly on ``klass``."""

    @abstractmethod
    def own_methods(self, klass: type) -> set[str]:
        """Public class-level methods declared directly on ``klass``."""

    @abstractmethod
    def private_methods(self, klass: type) -> set[str]:
        """Private class-level methods declared directly on ``klass``."""

    @abstractmethod
    def superclass_of(self, klass: type) -> type | None: ...

    @abstractmethod
    def mixed_in_modules(self, klass: type) -> list[type]: ...

    @abstractmethod
    def declares(self, owner: type, name: str, kind: MemberKind) -> bool:
        """True if ``owner``'s own namespace holds ``name`` as a ``kind`` member."""

    @abstractmethod
    def read_constant(self, owner: type, name: str) -> Any: ...

    @abstractmethod
    def invoke(self, owner: type, name: str) -> Any: ...

    @abstractmethod
    def lookup(self, klass: type, name: str) -> Any:
        """Plain attribute access through the full MRO."""

    @abstractmethod
    def responds_to(self, klass: type, name: str, kind: MemberKind) -> bool:
        """Unscoped lookup: is ``name`` reachable from ``klass`` at all?"""

    def ancestors(self, klass: type) -> list[type]:
        chain: list[type] = []
        parent = self.superclass_of(klass)
        while parent is not None:
            chain.append(parent)
            parent = self.superclass_of(parent)
        return chain

    def own_members(self, klass: type, kind: MemberKind) -> set[str]:
        if kind == "constant":
            return self.own_constants(klass)
        return self.own_methods(klass)


class PythonIntrospector(ClassIntrospector):
    """
    Reflection over real Python classes.

    Constants are upper-case, non-callable entries of a class ``__dict__``;
    class-level methods are ``classmethod``/``staticmethod`` entries. The
    superclass chain follows the rightmost base (mixins go on the left),
    stopping before builtin root types.
    """

    def name_of(self, klass: type) -> str:
        return describe(klass)

    def own_constants(self, klass: type) -> set[str]:
        return {
            name
            for name, value in self._namespace(klass)
            if get_visibility(name) == "public"
            and CONSTANT_NAME.match(name)
            and is_constant_value(value)
        }

    def own_methods(self, klass: type) -> set[str]:
        return self._methods(klass, "public")

    def private_methods(self, klass: type) -> set[str]:
        return self._methods(klass, "private")

    def superclass_of(self, klass: type) -> type | None:
        bases = getattr(klass, "__bases__", ())
        if not bases:
            return None
        parent = bases[-1]
        return None if is_root_type(parent) else parent

    def mixed_in_modules(self, klass: type) -> list[type]:
        chain = {klass, *self.ancestors(klass)}
        modules: list[type] = []
        for base in getattr(klass, "__bases__", ())[:-1]:
            for entry in base.__mro__:
                if is_root_type(entry) or entry in chain or entry in modules:
                    continue
                modules.append(entry)
        return modules

    def declares(self, owner: type, name: str, kind: MemberKind) -> bool:
        namespace = vars(owner)
        if name not in namespace:
            return False
        return self._matches_kind(namespace[name], kind)

    def read_constant(self, owner: type, name: str) -> Any:
        return vars(owner)[name]

    def invoke(self, owner: type, name: str) -> Any:
        return getattr(owner, name)()

    def lookup(self, klass: type, name: str) -> Any:
        return getattr(klass, name)

    def responds_to(self, klass: type, name: str, kind: MemberKind) -> bool:
        try:
            static = inspect.getattr_static(klass, name)
        except AttributeError:
            return False
        return self._matches_kind(static, kind)

    @staticmethod
    def _matches_kind(value: Any, kind: MemberKind) -> bool:
        if kind == "method":
            return is_class_level_method(value)
        return is_constant_value(value)

    def _namespace(self, klass: type) -> Iterable[tuple[str, Any]]:
        return list(vars(klass).items())

    def _methods(self, klass: type, visibility: Visibility) -> set[str]:
        return {
            name
            for name, value in self._namespace(klass)
            if is_class_level_method(value)
            and name not in LIFECYCLE_HOOKS
            and get_visibility(name) == visibility
        }


class ClassResolver:
    """Turns class handles or dotted names into classes."""

    @staticmethod
    def normalize_classes(classes: Any) -> list[type]:
        if isinstance(classes, (str, type)):
            classes = [classes]
        return [ClassResolver.resolve(ref) for ref in classes]

    @staticmethod
    def resolve(ref: Any) -> type:
        if isinstance(ref, type):
            return ref
        if not isinstance(ref, str):
            raise TypeError(f"Invalid class: {ref!r}")

        obj = ClassResolver._lookup(ref.strip())
        if not isinstance(obj, type):
            raise TypeError(f"Invalid class: {ref!r} resolved to {type(obj).__name__}")
        return obj

    @staticmethod
    def _lookup(dotted: str) -> Any:
        parts = dotted.split(".")
        if not dotted or not all(parts):
            raise ClassNotFoundError(f"Class not found: {dotted!r}")

        if len(parts) == 1:
            for module in (sys.modules.get("__main__"), builtins):
                if module is not None and hasattr(module, dotted):
                    return getattr(module, dotted)
            raise ClassNotFoundError(f"Class not found: {dotted!r}")

        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                obj: Any = importlib.import_module(module_name)
            except ModuleNotFoundError:
                continue
            try:
                for attr in parts[split:]:
                    obj = getattr(obj, attr)
            except AttributeError:
                raise ClassNotFoundError(
                    f"Class not found: {dotted!r} (no attribute {attr!r})"
                )
            return obj

        raise ClassNotFoundError(f"Class not found: {dotted!r} (no importable module)")


def describe(klass: type | types.ModuleType) -> str:
    return getattr(klass, "__qualname__", None) or getattr(klass, "__name__", repr(klass))
