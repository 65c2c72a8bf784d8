"""
Constant stubbing: swap named bindings for the duration of a test and
put them back afterwards.
"""

from .stubber import ConstantStubber, StubBinding, stub_const, stubber

__all__ = [
    "ConstantStubber",
    "StubBinding",
    "stub_const",
    "stubber",
]
