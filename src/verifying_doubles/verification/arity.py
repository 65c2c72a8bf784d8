"""
Argument-count rules for real method signatures.

Only positional parameters count. Keyword-only and ``**kwargs``
parameters are ignored, and a ``*args`` parameter lifts the maximum.
"""

import inspect
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..errors import ArityMismatchError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class ArityRange:
    """Accepted number of positional arguments; ``maximum=None`` means unbounded."""
    minimum: int
    maximum: Optional[int]

    @property
    def unbounded(self) -> bool:
        return self.maximum is None

    def includes(self, arity: int) -> bool:
        if arity < self.minimum:
            return False
        return self.unbounded or arity <= self.maximum

    def describe(self) -> str:
        if self.minimum == self.maximum:
            return str(self.minimum)
        if self.unbounded:
            return f"{self.minimum} or more"
        return f"{self.minimum} to {self.maximum}"


def accepted_range(signature: inspect.Signature) -> ArityRange:
    minimum = 0
    maximum: Optional[int] = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            maximum = None
        elif param.kind in _POSITIONAL:
            if param.default is inspect.Parameter.empty:
                minimum += 1
            if maximum is not None:
                maximum += 1
    return ArityRange(minimum, maximum)


def supports(signature: inspect.Signature, arity: int) -> bool:
    return accepted_range(signature).includes(arity)


def call_arity(signature: inspect.Signature, positional: int, keywords: Iterable[str] = ()) -> int:
    """
    Count the positional slots a call would fill.

    Keyword arguments that name a positional parameter fill a slot just
    like a positional value does.
    """
    positional_names = {
        name for name, param in signature.parameters.items()
        if param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
    }
    return positional + sum(1 for keyword in keywords if keyword in positional_names)


def unexpected_keywords(signature: inspect.Signature, keywords: Iterable[str]) -> list:
    """Keyword names the signature cannot accept, sorted."""
    params = signature.parameters
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values()):
        return []
    accepted = {
        name for name, param in params.items()
        if param.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
    }
    return sorted(set(keywords) - accepted)


def ensure_arity(method_name: str, signature: inspect.Signature, arity: int) -> None:
    """
    Raises:
        ArityMismatchError: If ``arity`` is outside the accepted range
    """
    accepted = accepted_range(signature)
    if not accepted.includes(arity):
        raise ArityMismatchError(
            f"Wrong number of arguments for {method_name}. "
            f"Expected {accepted.describe()}, got {arity}."
        )


def ensure_keywords(method_name: str, signature: inspect.Signature, keywords: Iterable[str]) -> None:
    unexpected = unexpected_keywords(signature, keywords)
    if unexpected:
        raise ArityMismatchError(
            f"Wrong keyword arguments for {method_name}. "
            f"Unexpected: {', '.join(unexpected)}."
        )


def block_arity(block: Callable) -> int:
    """Number of positional parameters a block declares."""
    signature = inspect.signature(block)
    return sum(1 for param in signature.parameters.values() if param.kind in _POSITIONAL)
