"""
Public method surfaces of real types.

A double either stands in for an instance of a type (instance surface)
or for the type itself (static surface). This module lists the methods
each surface exposes, finds their signatures for arity checks, and
verifies that stubbed names are really there.
"""

import inspect
import types
from enum import Enum
from typing import Any, Dict, FrozenSet, Hashable, Iterable, Optional, Set, Tuple

from ..errors import MethodNotImplementedError
from ..logging import get_logger

logger = get_logger(__name__)


class Surface(Enum):
    """Which methods of a doubled type are considered."""
    INSTANCE = "instance"
    STATIC = "static"


def _is_public(name: str) -> bool:
    return not name.startswith("_")


_MISSING = object()


def _static_attr(obj: Any, name: str) -> Any:
    try:
        return inspect.getattr_static(obj, name)
    except AttributeError:
        return _MISSING


_CLASS_LEVEL = (staticmethod, classmethod, types.ClassMethodDescriptorType)

_RECEIVER_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _is_instance_member(attr: Any) -> bool:
    if isinstance(attr, type):
        # Nested classes are constants, not methods
        return False
    if isinstance(attr, _CLASS_LEVEL + (property,)):
        return True
    return callable(attr) or inspect.ismethoddescriptor(attr) or inspect.isdatadescriptor(attr)


def _is_static_member(cls: type, name: str) -> bool:
    """
    Class-level callables: static and class methods, including the
    ``classmethod_descriptor`` and bound builtins of types written in C
    (``dict.fromkeys``, ``datetime.now``).
    """
    attr = _static_attr(cls, name)
    if attr is _MISSING or isinstance(attr, type):
        return False
    if isinstance(attr, _CLASS_LEVEL):
        return True
    try:
        bound = getattr(cls, name)
    except AttributeError:
        return False
    return getattr(bound, "__self__", None) is cls


def _instance_surface(target: Any) -> Set[str]:
    cls = target if isinstance(target, type) else type(target)
    return {
        name for name in dir(cls)
        if _is_public(name) and _is_instance_member(_static_attr(cls, name))
    }


def _static_surface(target: Any) -> Set[str]:
    if not isinstance(target, type):
        names = set()
        for name in dir(target):
            if not _is_public(name):
                continue
            attr = _static_attr(target, name)
            if isinstance(attr, (staticmethod, classmethod)) or (callable(attr) and not isinstance(attr, type)):
                names.add(name)
        return names

    names = {
        name for name in dir(target)
        if _is_public(name) and _is_static_member(target, name)
    }
    metaclass = type(target)
    names.update(
        name for name in dir(metaclass)
        if _is_public(name) and callable(_static_attr(metaclass, name))
    )
    return names


def public_methods(target: Any, surface: Surface) -> FrozenSet[str]:
    """
    List the public method names ``target`` exposes on a surface.

    Args:
        target: Class, module or object being doubled
        surface: Surface.INSTANCE for instances of a class, Surface.STATIC
            for the class (or module) itself

    Returns:
        Frozen set of method names
    """
    if surface is Surface.INSTANCE:
        return frozenset(_instance_surface(target))
    return frozenset(_static_surface(target))


def _drop_receiver(signature: inspect.Signature) -> inspect.Signature:
    params = list(signature.parameters.values())
    if not params or params[0].kind not in _RECEIVER_KINDS:
        # (*args, **kwargs) wrappers take the receiver through *args
        return signature
    return signature.replace(parameters=params[1:])


def find_signature(target: Any, method_name: str, surface: Surface) -> Optional[inspect.Signature]:
    """
    Find the call signature of a method as a caller would see it.

    The receiver (``self`` or ``cls``) is not part of the returned
    signature. Returns None when the member is missing, is not callable
    (a property, for instance) or cannot be introspected.
    """
    try:
        if surface is Surface.INSTANCE:
            cls = target if isinstance(target, type) else type(target)
            attr = inspect.getattr_static(cls, method_name)
            if isinstance(attr, staticmethod):
                return inspect.signature(attr.__func__)
            if isinstance(attr, classmethod):
                return _drop_receiver(inspect.signature(attr.__func__))
            if isinstance(attr, types.ClassMethodDescriptorType):
                return inspect.signature(getattr(cls, method_name))
            if isinstance(attr, property) or not callable(attr):
                return None
            return _drop_receiver(inspect.signature(attr))
        return inspect.signature(getattr(target, method_name))
    except AttributeError:
        return None
    except (TypeError, ValueError) as exc:
        logger.debug(f"No signature available for {method_name} on {target!r}: {exc}")
        return None


class MethodSetCache:
    """
    Method surfaces memoized per (type, surface).

    Types are not expected to gain or lose methods during a run, so
    entries never expire on their own; ``clear()`` drops them all.
    """

    def __init__(self):
        self._entries: Dict[Tuple[Hashable, Surface], FrozenSet[str]] = {}

    def methods(self, target: Any, surface: Surface) -> FrozenSet[str]:
        try:
            key = (target, surface)
            cached = self._entries.get(key)
        except TypeError:
            # Unhashable target, nothing to key on
            return public_methods(target, surface)
        if cached is None:
            logger.debug(f"Method set cache miss for {target!r} ({surface.value})")
            cached = public_methods(target, surface)
            self._entries[key] = cached
        return cached

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


method_cache = MethodSetCache()


def describe_target(target: Any) -> str:
    if isinstance(target, type):
        return target.__qualname__
    name = getattr(target, "__name__", None)
    return name if isinstance(name, str) else repr(target)


def implements(target: Any, names: Iterable[str], surface: Surface,
               cache: Optional[MethodSetCache] = None) -> Set[str]:
    """Return the subset of ``names`` that ``target`` does not implement."""
    cache = method_cache if cache is None else cache
    return set(names) - cache.methods(target, surface)


def ensure_implemented(target: Any, names: Iterable[str], surface: Surface,
                       cache: Optional[MethodSetCache] = None,
                       label: Optional[str] = None) -> None:
    """
    Raises:
        MethodNotImplementedError: Listing every missing name, sorted
    """
    missing = implements(target, names, surface, cache)
    if missing:
        listing = "\n".join(f"  {name}" for name in sorted(missing))
        raise MethodNotImplementedError(
            f"{label or describe_target(target)} does not implement:\n{listing}"
        )
