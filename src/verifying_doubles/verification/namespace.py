"""
Namespace containers and the root of every type name.

A container is anything that keeps its own bindings in an attribute
dictionary: classes, modules, synthesized containers and class doubles.
Only own bindings count, so inherited class attributes and module-level
``__getattr__`` hooks are never mistaken for a defined name.
"""

import abc
import sys
import types
from typing import Any, List, MutableMapping, Optional


class NamespaceContainer(abc.ABC):
    """Marker for values that can hold nested constants."""


NamespaceContainer.register(type)
NamespaceContainer.register(types.ModuleType)


class ModuleRoot:
    """
    The top-level container: modules that are already loaded.

    Lookups never import anything. Tests can pass their own mapping to
    keep a resolver away from the real ``sys.modules``.
    """

    def __init__(self, modules: Optional[MutableMapping[str, Any]] = None):
        self._modules = sys.modules if modules is None else modules

    def defines(self, name: str) -> bool:
        return name in self._modules

    def get(self, name: str) -> Any:
        return self._modules[name]

    def bind(self, name: str, value: Any) -> None:
        self._modules[name] = value

    def unbind(self, name: str) -> None:
        del self._modules[name]

    def __repr__(self) -> str:
        return "<module root>"


ROOT = ModuleRoot()


def is_namespace(value: Any) -> bool:
    """Return True if ``value`` can host nested constants."""
    return isinstance(value, NamespaceContainer)


def defines(container: Any, name: str) -> bool:
    """Check whether ``name`` is an own binding of ``container``."""
    if isinstance(container, ModuleRoot):
        return container.defines(name)
    try:
        return name in vars(container)
    except TypeError:
        # No __dict__: ints, strings, slotted instances...
        return False


def get_defined(container: Any, name: str) -> Any:
    if isinstance(container, ModuleRoot):
        return container.get(name)
    return vars(container)[name]


def bind(container: Any, name: str, value: Any) -> None:
    if isinstance(container, ModuleRoot):
        container.bind(name, value)
    else:
        setattr(container, name, value)


def unbind(container: Any, name: str) -> None:
    if isinstance(container, ModuleRoot):
        container.unbind(name)
    else:
        delattr(container, name)


def nested_constant_names(container: Any) -> List[str]:
    """Own bindings of ``container`` that are named like constants."""
    try:
        names = list(vars(container))
    except TypeError:
        return []
    return [name for name in names if name[:1].isupper()]


def new_container(qualified_name: str) -> types.ModuleType:
    """Create an empty container for a synthesized namespace segment."""
    return types.ModuleType(qualified_name)
