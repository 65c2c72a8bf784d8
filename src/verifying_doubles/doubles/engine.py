"""
Bare test doubles and message expectations built on unittest.mock.

Every declared method of a double is backed by a ``mock.Mock`` recorder
whose side effect dispatches to the declared expectations and stubs, so
the usual ``call_args_list`` style assertions keep working next to the
expectation counts checked by ``verify()``.
"""

from typing import Any, Callable, Dict, List, Optional
from unittest import mock

from ..logging import get_logger

logger = get_logger(__name__)


class MockExpectationError(AssertionError):
    """Raised when a double receives a call it was not set up for."""


class UnexpectedMessageError(AttributeError):
    """Raised when a double is sent a message that was never declared."""


class ExpiredDoubleError(UnexpectedMessageError):
    """Raised when a double is used after the test that created it was reset."""


class _ArgsSentinel:
    def __init__(self, label: str):
        self._label = label

    def __repr__(self) -> str:
        return self._label


ANY_ARGS = _ArgsSentinel("ANY_ARGS")
NO_ARGS = _ArgsSentinel("NO_ARGS")


def _plural(count: int) -> str:
    return f"{count} time" if count == 1 else f"{count} times"


def _format_args(args: tuple, kwargs: dict) -> str:
    parts = [repr(arg) for arg in args]
    parts.extend(f"{key}={value!r}" for key, value in kwargs.items())
    return "(" + ", ".join(parts) + ")"


class MessageExpectation:
    """
    One declared message: argument constraint, behaviour and call count.

    ``expected_count=None`` accepts any number of calls (a stub).
    """

    def __init__(self, double_label: str, method_name: str, expected_count: Optional[int] = None):
        self.double_label = double_label
        self.method_name = method_name
        self.expected_count = expected_count
        self.received = 0
        self._arguments: Any = ANY_ARGS
        self._values: List[Any] = []
        self._error: Optional[BaseException] = None
        self._implementation: Optional[Callable] = None

    @property
    def prohibited(self) -> bool:
        return self.expected_count == 0

    def with_args(self, *args, **kwargs) -> "MessageExpectation":
        if args and args[0] is ANY_ARGS:
            self._arguments = ANY_ARGS
        elif args and args[0] is NO_ARGS:
            self._arguments = mock.call()
        else:
            self._arguments = mock.call(*args, **kwargs)
        return self

    def with_block(self, block: Callable) -> "MessageExpectation":
        self._implementation = block
        return self

    def and_return(self, *values) -> "MessageExpectation":
        self._values = list(values)
        return self

    def and_raise(self, error: BaseException) -> "MessageExpectation":
        self._error = error
        return self

    def and_call(self, implementation: Callable) -> "MessageExpectation":
        self._implementation = implementation
        return self

    def times(self, count: int) -> "MessageExpectation":
        self.expected_count = count
        return self

    def once(self) -> "MessageExpectation":
        return self.times(1)

    def twice(self) -> "MessageExpectation":
        return self.times(2)

    def never(self) -> "MessageExpectation":
        return self.times(0)

    def any_number_of_times(self) -> "MessageExpectation":
        self.expected_count = None
        return self

    def matches(self, args: tuple, kwargs: dict) -> bool:
        if self._arguments is ANY_ARGS:
            return True
        return self._arguments == mock.call(*args, **kwargs)

    def describe_arguments(self) -> str:
        if self._arguments is ANY_ARGS:
            return "(any args)"
        return _format_args(self._arguments.args, self._arguments.kwargs)

    def invoke(self, args: tuple, kwargs: dict) -> Any:
        self.received += 1
        if self.prohibited:
            raise MockExpectationError(self._count_message())
        if self._error is not None:
            raise self._error
        if self._implementation is not None:
            return self._implementation(*args, **kwargs)
        if not self._values:
            return None
        index = min(self.received, len(self._values)) - 1
        return self._values[index]

    def verify(self) -> None:
        if self.expected_count is not None and self.received != self.expected_count:
            raise MockExpectationError(self._count_message())

    def _count_message(self) -> str:
        return (
            f"({self.double_label}).{self.method_name}{self.describe_arguments()}\n"
            f"    expected: {_plural(self.expected_count)}\n"
            f"    received: {_plural(self.received)}"
        )


class MethodProxy:
    """Dispatches calls of one method to its declared expectations and stubs."""

    def __init__(self, double_label: str, method_name: str):
        self.double_label = double_label
        self.method_name = method_name
        self.expectations: List[MessageExpectation] = []
        self.stubs: List[MessageExpectation] = []
        self.recorder = mock.Mock(name=f"{double_label}.{method_name}", side_effect=self._dispatch)

    def _dispatch(self, *args, **kwargs) -> Any:
        for expectation in reversed(self.expectations):
            if expectation.matches(args, kwargs):
                return expectation.invoke(args, kwargs)
        for stub in reversed(self.stubs):
            if stub.matches(args, kwargs):
                return stub.invoke(args, kwargs)

        declared = self.expectations + self.stubs
        expected = "\n".join(f"    {d.describe_arguments()}" for d in declared)
        raise MockExpectationError(
            f"{self.double_label} received {self.method_name} with unexpected arguments\n"
            f"  expected:\n{expected}\n"
            f"       got: {_format_args(args, kwargs)}"
        )

    def verify(self) -> None:
        for expectation in self.expectations:
            expectation.verify()


class BareDouble:
    """
    Strict stand-in that only answers declared messages.

    Each declared method is answered by its ``mock.Mock`` recorder.
    Anything else raises UnexpectedMessageError.
    """

    def __init__(self, name: str, declared_as: str = "Double"):
        self._name = name
        self._declared_as = declared_as
        self._proxies: Dict[str, MethodProxy] = {}
        self._expired = False

    @property
    def label(self) -> str:
        return f"{self._declared_as}({self._name})"

    @property
    def expired(self) -> bool:
        return self._expired

    def _proxy_for(self, method_name: str) -> MethodProxy:
        if self._expired:
            raise ExpiredDoubleError(
                f"{self.label} was used after the test that created it was reset"
            )
        proxy = self._proxies.get(method_name)
        if proxy is None:
            proxy = MethodProxy(self.label, method_name)
            self._proxies[method_name] = proxy
        return proxy

    def add_expectation(self, method_name: str) -> MessageExpectation:
        expectation = MessageExpectation(self.label, method_name, expected_count=1)
        self._proxy_for(method_name).expectations.append(expectation)
        return expectation

    def add_prohibition(self, method_name: str) -> MessageExpectation:
        expectation = MessageExpectation(self.label, method_name, expected_count=0)
        self._proxy_for(method_name).expectations.append(expectation)
        return expectation

    def add_stub(self, method_name: str) -> MessageExpectation:
        stub = MessageExpectation(self.label, method_name)
        self._proxy_for(method_name).stubs.append(stub)
        return stub

    def verify(self) -> None:
        for proxy in self._proxies.values():
            proxy.verify()

    def reset(self) -> None:
        self._proxies.clear()
        self._expired = True
        logger.debug(f"Reset {self.label}")

    def message(self, name: str) -> mock.Mock:
        """Return the recorder answering ``name``, as a caller of the double sees it."""
        proxy = self._proxies.get(name)
        if proxy is not None:
            return proxy.recorder
        if self._expired:
            raise ExpiredDoubleError(
                f"{self.label} received {name} after the test that created it was reset"
            )
        raise UnexpectedMessageError(f"{self.label} received unexpected message {name}")

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("__") or "_proxies" not in self.__dict__:
            raise AttributeError(name)
        return self.message(name)

    def __repr__(self) -> str:
        return f"<{self.label}>"
