"""Errors raised while verifying doubles against real types."""


class DoubleError(Exception):
    """Base class for every error raised by verifying_doubles."""


class NotFoundError(DoubleError, LookupError):
    """Raised when a segment of a type name is not defined."""


class UndefinedConstantError(DoubleError, NameError):
    """Raised when strict mode is on and a doubled name does not resolve."""


class VerificationError(DoubleError, AssertionError):
    """A double was configured in a way the real type does not support."""


class MethodNotImplementedError(VerificationError):
    """Raised when a doubled type does not expose a stubbed method."""


class ArityMismatchError(VerificationError):
    """Raised when declared call arguments do not fit the real signature."""


class ArgumentError(DoubleError, ValueError):
    """Raised when the doubling API itself is called incorrectly."""


class ConstantTransferError(ArgumentError):
    """Raised when nested constants cannot be transferred onto a stub."""
