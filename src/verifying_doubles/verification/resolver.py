"""
Resolution of ``::``-separated type names against live namespaces.

Names are walked strictly left to right from the root. Each segment has
to be an own binding of the container found so far; nothing is imported
and nothing is looked up through inheritance.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..errors import NotFoundError
from .namespace import ROOT, ModuleRoot, defines, get_defined

SEPARATOR = "::"

_SPLIT = re.compile(r"::|\.")


@dataclass(frozen=True)
class ResolvedType:
    """A live value together with the name used to find it."""
    name: str
    value: Any


def split_name(name: str) -> List[str]:
    """
    Split a type name into its segments.

    Both ``::`` and ``.`` separate segments, so ``"pkg.mod::Outer"`` and
    ``"pkg.mod.Outer"`` name the same thing.

    Raises:
        ValueError: If the name is empty or has an empty segment
    """
    segments = _SPLIT.split(name)
    if not name or any(not segment for segment in segments):
        raise ValueError(f"Invalid type name: {name!r}")
    return segments


def join_name(segments: List[str]) -> str:
    return SEPARATOR.join(segments)


def resolve(name: str, root: Optional[ModuleRoot] = None) -> ResolvedType:
    """
    Resolve a type name to the value currently bound to it.

    Args:
        name: Type name such as ``"sample_types::TestClass::Nested"``
        root: Root container, the loaded-module table by default

    Returns:
        ResolvedType holding the value

    Raises:
        NotFoundError: If any segment is missing
    """
    container: Any = ROOT if root is None else root
    walked: List[str] = []
    for segment in split_name(name):
        if not defines(container, segment):
            prefix = join_name(walked) if walked else "<root>"
            raise NotFoundError(f"{segment} is not defined in {prefix} (resolving {name})")
        container = get_defined(container, segment)
        walked.append(segment)
    return ResolvedType(name=name, value=container)


def is_defined(name: str, root: Optional[ModuleRoot] = None) -> bool:
    try:
        resolve(name, root)
    except NotFoundError:
        return False
    return True
