"""
Reflective checks against live types.

Resolves type names without side effects, lists the public method
surface of a type and validates call arity against real signatures.
"""

from .namespace import ModuleRoot, NamespaceContainer, ROOT, is_namespace
from .resolver import ResolvedType, is_defined, resolve, split_name
from .arity import ArityRange, accepted_range, ensure_arity, supports
from .surface import MethodSetCache, Surface, ensure_implemented, find_signature, implements, method_cache

__all__ = [
    "ModuleRoot",
    "NamespaceContainer",
    "ROOT",
    "is_namespace",
    "ResolvedType",
    "is_defined",
    "resolve",
    "split_name",
    "ArityRange",
    "accepted_range",
    "ensure_arity",
    "supports",
    "MethodSetCache",
    "Surface",
    "ensure_implemented",
    "find_signature",
    "implements",
    "method_cache",
]
