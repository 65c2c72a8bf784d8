"""
Temporary replacement of named constants for the duration of a test.

A stub either replaces a binding that already exists or synthesizes the
missing part of its path out of empty containers. Every stub is recorded
so it can be undone exactly, in reverse order, when the test is reset.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from ..errors import ConstantTransferError
from ..lifecycle import Space, space as default_space
from ..logging import get_logger
from ..verification.namespace import (
    ROOT,
    ModuleRoot,
    bind,
    defines,
    get_defined,
    is_namespace,
    nested_constant_names,
    new_container,
    unbind,
)
from ..verification.resolver import is_defined, join_name, resolve, split_name

logger = get_logger(__name__)

TransferOption = Union[bool, Sequence[str]]


@dataclass
class StubBinding:
    """
    One installed constant stub.

    ``anchor`` is the container that received the first new binding:
    the leaf itself when the name already existed, otherwise the
    shallowest synthesized segment. Restoring only ever touches
    ``anchor.<anchor_name>``.
    """
    name: str
    value: Any
    original: Any
    existed: bool
    anchor: Any
    anchor_name: str
    synthesized: List[str] = field(default_factory=list)
    transferred: List[str] = field(default_factory=list)
    restored: bool = False


def _transferable_names(name: str, original: Any, value: Any, transfer_nested: TransferOption) -> List[str]:
    """Validate a transfer request before anything is mutated."""
    for candidate, description in ((original, "the original value"), (value, "the stubbed value")):
        if not is_namespace(candidate):
            raise ConstantTransferError(
                f"Cannot transfer nested constants for {name} since {description} "
                f"is not a class or module and only classes and modules support nested constants."
            )

    available = nested_constant_names(original)
    if transfer_nested is True:
        return available

    requested = [transfer_nested] if isinstance(transfer_nested, str) else list(transfer_nested)
    undefined = [constant for constant in requested if not defines(original, constant)]
    if undefined:
        alternatives = [constant for constant in available if constant not in requested]
        raise ConstantTransferError(
            f"Cannot transfer nested constant(s) {' and '.join(undefined)} for {name} "
            f"since they are not defined. Did you mean {' or '.join(alternatives)}?"
        )
    return requested


class ConstantStubber:
    """Installs constant stubs and restores them, last in first out."""

    def __init__(self, root: Optional[ModuleRoot] = None, space: Optional[Space] = None):
        self._root = ROOT if root is None else root
        self._space = default_space if space is None else space
        self._bindings: List[StubBinding] = []

    @property
    def root(self) -> ModuleRoot:
        return self._root

    @property
    def bindings(self) -> List[StubBinding]:
        return list(self._bindings)

    def stub(self, name: str, value: Any, transfer_nested: TransferOption = False) -> Any:
        """
        Bind ``value`` to ``name`` until the test is reset.

        Args:
            name: Type name, e.g. ``"sample_types::TestClass"``
            value: Substitute value
            transfer_nested: Copy nested constants of the original onto
                ``value``; True copies all of them, a list copies only
                the named ones. Ignored when the name was undefined.

        Returns:
            The original value, or None if the name was not defined

        Raises:
            ConstantTransferError: If nested constants cannot be transferred
        """
        segments = split_name(name)
        full_name = join_name(segments)

        container: Any = self._root
        depth = 0
        for segment in segments[:-1]:
            if not defines(container, segment):
                break
            container = get_defined(container, segment)
            depth += 1

        leaf = segments[-1]
        if depth == len(segments) - 1 and defines(container, leaf):
            binding = self._replace(full_name, container, leaf, value, transfer_nested)
        else:
            binding = self._synthesize(full_name, segments, depth, container, value)

        self._bindings.append(binding)
        self._space.register(self)
        return binding.original

    def _replace(self, full_name: str, container: Any, leaf: str, value: Any,
                 transfer_nested: TransferOption) -> StubBinding:
        original = get_defined(container, leaf)
        transferred: List[str] = []
        if transfer_nested:
            transferred = _transferable_names(full_name, original, value, transfer_nested)
            for constant in transferred:
                setattr(value, constant, get_defined(original, constant))

        bind(container, leaf, value)
        logger.debug(f"Stubbed {full_name} (replaced existing value)")
        return StubBinding(
            name=full_name,
            value=value,
            original=original,
            existed=True,
            anchor=container,
            anchor_name=leaf,
            transferred=transferred,
        )

    def _synthesize(self, full_name: str, segments: List[str], depth: int, container: Any,
                    value: Any) -> StubBinding:
        anchor = container
        anchor_name = segments[depth]
        synthesized = []
        for index in range(depth, len(segments) - 1):
            qualified = join_name(segments[:index + 1])
            created = new_container(qualified)
            bind(container, segments[index], created)
            synthesized.append(qualified)
            container = created

        bind(container, segments[-1], value)
        logger.debug(f"Stubbed {full_name} (synthesized {synthesized or 'leaf only'})")
        return StubBinding(
            name=full_name,
            value=value,
            original=None,
            existed=False,
            anchor=anchor,
            anchor_name=anchor_name,
            synthesized=synthesized,
        )

    def find_original(self, name: str) -> Optional[StubBinding]:
        """The earliest active binding for ``name``, holding its true original."""
        full_name = join_name(split_name(name))
        for binding in self._bindings:
            if binding.name == full_name:
                return binding
        return None

    def is_stubbed(self, name: str) -> bool:
        return self.find_original(name) is not None

    def restore(self, binding: StubBinding) -> None:
        """
        Undo one binding unless someone else rebound the name since.

        Calling it again for the same binding does nothing.
        """
        if binding.restored:
            return
        binding.restored = True
        self._bindings = [b for b in self._bindings if b is not binding]

        if not is_defined(binding.name, self._root) or resolve(binding.name, self._root).value is not binding.value:
            logger.debug(f"Not restoring {binding.name}: it was rebound after being stubbed")
            return

        if binding.existed:
            bind(binding.anchor, binding.anchor_name, binding.original)
        else:
            unbind(binding.anchor, binding.anchor_name)
        logger.debug(f"Restored {binding.name}")

    def restore_all(self) -> None:
        for binding in reversed(list(self._bindings)):
            self.restore(binding)

    def verify(self) -> None:
        pass

    def reset(self) -> None:
        self.restore_all()


stubber = ConstantStubber()


def stub_const(name: str, value: Any, transfer_nested: TransferOption = False) -> Any:
    """Stub a constant on the process-wide stubber; see ConstantStubber.stub."""
    return stubber.stub(name, value, transfer_nested=transfer_nested)
