import datetime
import types

import pytest

import sample_types
from verifying_doubles.errors import MethodNotImplementedError
from verifying_doubles.verification.arity import ArityRange, accepted_range
from verifying_doubles.verification.surface import (
    MethodSetCache,
    Surface,
    ensure_implemented,
    find_signature,
    implements,
    public_methods,
)

OBJECT_METHODS = {
    "defined_method",
    "defined_method_one_arg",
    "defined_method_optional",
    "defined_method_splat",
    "defined_method_keywords",
    "size",
}


class TestPublicMethods:
    def test_instance_surface_of_a_class(self):
        assert public_methods(sample_types.TestObject, Surface.INSTANCE) == OBJECT_METHODS

    def test_instance_surface_of_an_instance(self):
        assert public_methods(sample_types.TestObject(), Surface.INSTANCE) == OBJECT_METHODS

    def test_private_methods_are_excluded(self):
        assert "_private_method" not in public_methods(sample_types.TestObject, Surface.INSTANCE)

    def test_static_surface_of_a_class(self):
        """Class and static methods plus what the metaclass offers, never instance methods."""
        methods = public_methods(sample_types.TestClass, Surface.STATIC)
        assert {"defined_method", "defined_method_one_arg", "static_helper", "mro"} == methods
        assert "instance_only" not in methods

    def test_nested_classes_are_not_methods(self):
        assert "Nested" not in public_methods(sample_types.TestClass, Surface.INSTANCE)
        assert "Nested" not in public_methods(sample_types.TestClass, Surface.STATIC)

    def test_inherited_methods_count(self):
        assert public_methods(sample_types.ChildClass, Surface.STATIC) == \
            public_methods(sample_types.TestClass, Surface.STATIC)

    def test_static_surface_of_a_module(self):
        module = types.ModuleType("fake_module")
        module.helper = lambda value: value
        module.Klass = type("Klass", (), {})
        module.VALUE = 3
        assert public_methods(module, Surface.STATIC) == {"helper"}


class TestFindSignature:
    def test_instance_method_drops_self(self):
        signature = find_signature(sample_types.TestObject, "defined_method_one_arg", Surface.INSTANCE)
        assert list(signature.parameters) == ["arg1"]

    def test_static_method_keeps_all_parameters(self):
        signature = find_signature(sample_types.TestClass, "static_helper", Surface.INSTANCE)
        assert list(signature.parameters) == ["arg1", "arg2"]

    def test_class_method_drops_cls(self):
        signature = find_signature(sample_types.TestClass, "defined_method_one_arg", Surface.STATIC)
        assert list(signature.parameters) == ["arg1"]

    def test_property_has_no_signature(self):
        assert find_signature(sample_types.TestObject, "size", Surface.INSTANCE) is None

    def test_missing_method_has_no_signature(self):
        assert find_signature(sample_types.TestObject, "undefined_method", Surface.INSTANCE) is None
        assert find_signature(sample_types.TestClass, "undefined_method", Surface.STATIC) is None


class TestMethodSetCache:
    def test_memoizes_per_type_and_surface(self):
        cache = MethodSetCache()
        first = cache.methods(sample_types.TestClass, Surface.STATIC)
        second = cache.methods(sample_types.TestClass, Surface.STATIC)
        cache.methods(sample_types.TestClass, Surface.INSTANCE)

        assert first is second
        assert len(cache) == 2

    def test_unhashable_targets_are_not_cached(self):
        cache = MethodSetCache()
        assert "append" in cache.methods([], Surface.INSTANCE)
        assert len(cache) == 0

    def test_clear(self):
        cache = MethodSetCache()
        cache.methods(sample_types.TestObject, Surface.INSTANCE)
        cache.clear()
        assert len(cache) == 0


class TestEnsureImplemented:
    def test_implemented_names_pass(self):
        ensure_implemented(sample_types.TestObject, ["defined_method", "size"], Surface.INSTANCE)

    def test_missing_names(self):
        missing = implements(sample_types.TestObject, ["defined_method", "b_missing", "a_missing"], Surface.INSTANCE)
        assert missing == {"a_missing", "b_missing"}

    def test_message_lists_missing_names_sorted(self):
        with pytest.raises(MethodNotImplementedError) as excinfo:
            ensure_implemented(
                sample_types.TestObject,
                ["zeta", "alpha"],
                Surface.INSTANCE,
                label="sample_types::TestObject",
            )
        assert str(excinfo.value) == "sample_types::TestObject does not implement:\n  alpha\n  zeta"

    def test_instance_methods_are_not_on_the_static_surface(self):
        with pytest.raises(MethodNotImplementedError, match="instance_only"):
            ensure_implemented(sample_types.TestClass, ["instance_only"], Surface.STATIC)


class TestBuiltinTypes:
    """Class-level methods of types written in C belong to the static surface."""

    def test_builtin_class_methods_are_static(self):
        assert "fromkeys" in public_methods(dict, Surface.STATIC)
        assert "from_bytes" in public_methods(int, Surface.STATIC)
        assert "now" in public_methods(datetime.datetime, Surface.STATIC)

    def test_builtin_instance_methods_are_not_static(self):
        methods = public_methods(dict, Surface.STATIC)
        assert "keys" not in methods
        assert "get" not in methods

    def test_builtin_static_method(self):
        assert "maketrans" in public_methods(str, Surface.STATIC)

    def test_builtin_class_method_signature(self):
        signature = find_signature(dict, "fromkeys", Surface.STATIC)
        assert accepted_range(signature) == ArityRange(1, 2)

    def test_builtin_class_method_reachable_from_instances(self):
        assert "fromkeys" in public_methods(dict, Surface.INSTANCE)
        signature = find_signature(dict, "fromkeys", Surface.INSTANCE)
        assert list(signature.parameters) == ["iterable", "value"]


class TestWrappedMethods:
    def test_variadic_wrapper_keeps_its_parameters(self):
        """A (*args, **kwargs) wrapper has no receiver parameter to drop."""
        signature = find_signature(sample_types.Decorated, "save", Surface.INSTANCE)
        assert accepted_range(signature) == ArityRange(0, None)

    def test_wrapped_class_method(self):
        signature = find_signature(sample_types.Decorated, "load", Surface.STATIC)
        assert accepted_range(signature).unbounded
