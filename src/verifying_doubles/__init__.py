"""
verifying_doubles – test doubles that check themselves against real types.

Doubles refuse to stub methods the real class does not have, or to expect
calls with an argument count the real method would reject. Constants can
be stubbed for the duration of a test and are restored afterwards.
"""

from .config import Settings, configure, get_settings, reset_settings
from .constants import ConstantStubber, StubBinding, stub_const
from .doubles import (
    ANY_ARGS,
    NO_ARGS,
    ClassDouble,
    ExpiredDoubleError,
    InstanceDouble,
    MockExpectationError,
    UnexpectedMessageError,
    VerifyingDouble,
    class_double,
    fire_class_double,
    fire_double,
    fire_replaced_class_double,
    instance_double,
)
from .errors import (
    ArgumentError,
    ArityMismatchError,
    ConstantTransferError,
    DoubleError,
    MethodNotImplementedError,
    NotFoundError,
    UndefinedConstantError,
    VerificationError,
)
from .lifecycle import Space, space
from .verification import Surface, is_defined, resolve

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "configure",
    "get_settings",
    "reset_settings",
    "ConstantStubber",
    "StubBinding",
    "stub_const",
    "ANY_ARGS",
    "NO_ARGS",
    "ClassDouble",
    "ExpiredDoubleError",
    "InstanceDouble",
    "MockExpectationError",
    "UnexpectedMessageError",
    "VerifyingDouble",
    "class_double",
    "fire_class_double",
    "fire_double",
    "fire_replaced_class_double",
    "instance_double",
    "ArgumentError",
    "ArityMismatchError",
    "ConstantTransferError",
    "DoubleError",
    "MethodNotImplementedError",
    "NotFoundError",
    "UndefinedConstantError",
    "VerificationError",
    "Space",
    "space",
    "Surface",
    "is_defined",
    "resolve",
]
