"""
Verifying doubles: test doubles that check every stub and expectation
against the real type they stand in for.

The real type is looked up lazily, each time something is declared. If
it is not loaded yet the declaration goes through unchecked, which lets
a test double a dependency before that dependency exists.
"""

import functools
import inspect
import warnings
from enum import Enum
from typing import Any, Callable, Optional

from ..config import get_settings
from ..constants.stubber import ConstantStubber, TransferOption, stubber as default_stubber
from ..errors import ArgumentError, UndefinedConstantError
from ..lifecycle import Space, space as default_space
from ..logging import get_logger
from ..verification.arity import block_arity, call_arity, ensure_arity, ensure_keywords
from ..verification.namespace import NamespaceContainer
from ..verification.resolver import is_defined, resolve
from ..verification.surface import MethodSetCache, Surface, ensure_implemented, find_signature
from .engine import ANY_ARGS, NO_ARGS, BareDouble, ExpiredDoubleError, MessageExpectation

logger = get_logger(__name__)


class DoubleState(Enum):
    """Lifecycle of a verifying double. There is no way back from RESET."""
    UNINITIALIZED = "uninitialized"
    BOUND = "bound"
    ACTIVE = "active"
    RESET = "reset"


class ArityCheckingExpectation:
    """
    Wraps an engine expectation so argument constraints are checked
    against the real method signature before they are recorded.

    Everything else is forwarded to the wrapped expectation; chained
    calls keep returning the wrapper.
    """

    def __init__(self, double: "VerifyingDouble", method_name: str, backing: MessageExpectation):
        self._double = double
        self._method_name = method_name
        self._backing = backing

    def with_args(self, *args, **kwargs) -> "ArityCheckingExpectation":
        if not (args and args[0] is ANY_ARGS):
            if args and args[0] is NO_ARGS:
                self._ensure_arity(0)
            elif args or kwargs:
                self._ensure_arity(len(args), kwargs)
            else:
                raise ArgumentError("No arguments nor block given.")
        self._backing.with_args(*args, **kwargs)
        return self

    def with_block(self, block: Callable) -> "ArityCheckingExpectation":
        self._ensure_arity(block_arity(block))
        self._backing.with_block(block)
        return self

    def _ensure_arity(self, positional: int, keywords: Optional[dict] = None) -> None:
        signature = self._double._find_signature(self._method_name)
        if signature is None:
            return
        keywords = keywords or {}
        ensure_keywords(self._method_name, signature, keywords)
        ensure_arity(self._method_name, signature, call_arity(signature, positional, keywords))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        attr = getattr(self._backing, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def chained(*args, **kwargs):
            result = attr(*args, **kwargs)
            return self if result is self._backing else result

        return chained

    def __repr__(self) -> str:
        return f"<ArityCheckingExpectation {self._method_name} on {self._double!r}>"


class VerifyingDouble:
    """
    Base for doubles bound to the name of a real type.

    Subclasses pick the surface that is verified. Calls of declared
    methods are answered by the wrapped BareDouble.
    """

    surface = Surface.INSTANCE
    declared_as = "VerifyingDouble"

    def __init__(self, doubled_name: str, stubs: Optional[dict] = None, /, *,
                 space: Optional[Space] = None,
                 stubber: Optional[ConstantStubber] = None,
                 cache: Optional[MethodSetCache] = None):
        self._state = DoubleState.UNINITIALIZED
        self._doubled_name = doubled_name
        self._space = default_space if space is None else space
        self._stubber = default_stubber if stubber is None else stubber
        self._cache = cache

        if get_settings().verify_constant_names:
            self._verify_constant_name()

        self._backing = BareDouble(doubled_name, declared_as=self.declared_as)
        self._space.register(self._backing)
        self._state = DoubleState.BOUND

        if stubs:
            self.stub(**stubs)

    @property
    def state(self) -> DoubleState:
        if self._state is not DoubleState.UNINITIALIZED and self._backing.expired:
            return DoubleState.RESET
        return self._state

    def _verify_constant_name(self) -> None:
        if not is_defined(self._doubled_name, self._stubber.root):
            raise UndefinedConstantError(f"{self._doubled_name} is not a defined constant.")

    def _doubled_type(self) -> Optional[Any]:
        """
        The real type to verify against, or None when it is not loaded.

        While the name is stubbed the original value is used, not the
        stub that currently occupies the name.
        """
        binding = self._stubber.find_original(self._doubled_name)
        if binding is not None:
            return binding.original if binding.existed else None
        root = self._stubber.root
        if is_defined(self._doubled_name, root):
            return resolve(self._doubled_name, root).value
        return None

    def _ensure_implemented(self, *method_names: str) -> None:
        doubled = self._doubled_type()
        if doubled is None:
            logger.debug(f"{self._doubled_name} is not loaded, skipping verification of {method_names}")
            return
        ensure_implemented(doubled, method_names, self.surface, cache=self._cache, label=self._doubled_name)

    def _find_signature(self, method_name: str) -> Optional[inspect.Signature]:
        doubled = self._doubled_type()
        if doubled is None:
            return None
        return find_signature(doubled, method_name, self.surface)

    def _activate(self) -> None:
        if self.state is DoubleState.RESET:
            raise ExpiredDoubleError(
                f"{self._backing.label} was used after the test that created it was reset"
            )
        self._state = DoubleState.ACTIVE

    def should_receive(self, method_name: str) -> ArityCheckingExpectation:
        self._activate()
        self._ensure_implemented(method_name)
        return ArityCheckingExpectation(self, method_name, self._backing.add_expectation(method_name))

    def should_not_receive(self, method_name: str) -> MessageExpectation:
        self._activate()
        self._ensure_implemented(method_name)
        return self._backing.add_prohibition(method_name)

    def stub(self, method_name: Optional[str] = None, /, **stubs) -> Optional[MessageExpectation]:
        """
        Stub one method, or several at once with their return values.

        ``double.stub("name")`` returns the stub for further configuration;
        ``double.stub(a=1, b=2)`` verifies every name before stubbing any.
        """
        self._activate()
        if (method_name is None) == (not stubs):
            raise ArgumentError("Pass either a method name or keyword stubs to stub().")
        if method_name is not None:
            self._ensure_implemented(method_name)
            return self._backing.add_stub(method_name)

        self._ensure_implemented(*stubs)
        for name, value in stubs.items():
            self._backing.add_stub(name).and_return(value)
        return None

    def __getattr__(self, name: str) -> Any:
        backing = self.__dict__.get("_backing")
        if backing is None or name.startswith("__"):
            raise AttributeError(name)
        return backing.message(name)

    def __repr__(self) -> str:
        return repr(self._backing)


class InstanceDouble(VerifyingDouble):
    """Stands in for an instance of the named class."""

    surface = Surface.INSTANCE
    declared_as = "InstanceDouble"


class ClassDouble(VerifyingDouble):
    """
    Stands in for the named class (or module) itself.

    Like a real class it can hold nested constants, and it can take the
    place of the real class with ``as_stubbed_const``.
    """

    surface = Surface.STATIC
    declared_as = "ClassDouble"

    def __init__(self, doubled_name: str, stubs: Optional[dict] = None, /, **kwargs):
        self._replaced = False
        self._original_type = None
        super().__init__(doubled_name, stubs, **kwargs)

    @property
    def __name__(self) -> str:
        return self._doubled_name

    def _doubled_type(self) -> Optional[Any]:
        if self._replaced:
            return self._original_type
        return super()._doubled_type()

    def as_stubbed_const(self, transfer_nested: TransferOption = False) -> "ClassDouble":
        """Replace the real class with this double until the test is reset."""
        self._stubber.stub(self._doubled_name, self, transfer_nested=transfer_nested)
        binding = self._stubber.find_original(self._doubled_name)
        self._original_type = binding.original if binding.existed else None
        self._replaced = True
        return self

    def as_replaced_constant(self, transfer_nested: TransferOption = False) -> "ClassDouble":
        _deprecated("as_replaced_constant is deprecated, use as_stubbed_const instead.")
        return self.as_stubbed_const(transfer_nested=transfer_nested)

    def __str__(self) -> str:
        return f"{self._doubled_name} (class double)"

    __repr__ = __str__


NamespaceContainer.register(ClassDouble)


def instance_double(doubled_name: str, /, **stubs) -> InstanceDouble:
    """Create a double for an instance of ``doubled_name``."""
    return InstanceDouble(doubled_name, stubs)


def class_double(doubled_name: str, /, **stubs) -> ClassDouble:
    """Create a double for the class (or module) ``doubled_name``."""
    return ClassDouble(doubled_name, stubs)


def _deprecated(message: str) -> None:
    warnings.warn(message, DeprecationWarning, stacklevel=3)


def fire_double(doubled_name: str, /, **stubs) -> InstanceDouble:
    _deprecated("fire_double is deprecated, use instance_double instead.")
    return instance_double(doubled_name, **stubs)


def fire_class_double(doubled_name: str, /, **stubs) -> ClassDouble:
    _deprecated("fire_class_double is deprecated, use class_double instead.")
    return class_double(doubled_name, **stubs)


def fire_replaced_class_double(doubled_name: str, /, **stubs) -> ClassDouble:
    _deprecated("fire_replaced_class_double is deprecated, use class_double with as_stubbed_const instead.")
    return class_double(doubled_name, **stubs).as_stubbed_const()
