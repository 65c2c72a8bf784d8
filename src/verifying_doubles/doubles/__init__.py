"""
Verifying doubles and the unittest.mock based engine answering their calls.
"""

from .engine import (
    ANY_ARGS,
    NO_ARGS,
    BareDouble,
    ExpiredDoubleError,
    MessageExpectation,
    MockExpectationError,
    UnexpectedMessageError,
)
from .model import (
    ArityCheckingExpectation,
    ClassDouble,
    DoubleState,
    InstanceDouble,
    VerifyingDouble,
    class_double,
    fire_class_double,
    fire_double,
    fire_replaced_class_double,
    instance_double,
)

__all__ = [
    "ANY_ARGS",
    "NO_ARGS",
    "BareDouble",
    "ExpiredDoubleError",
    "MessageExpectation",
    "MockExpectationError",
    "UnexpectedMessageError",
    "ArityCheckingExpectation",
    "ClassDouble",
    "DoubleState",
    "InstanceDouble",
    "VerifyingDouble",
    "class_double",
    "fire_class_double",
    "fire_double",
    "fire_replaced_class_double",
    "instance_double",
]
