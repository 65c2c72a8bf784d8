"""Tests for type name resolution."""

import pytest

import sample_types
from verifying_doubles.errors import NotFoundError
from verifying_doubles.verification.namespace import ModuleRoot
from verifying_doubles.verification.resolver import is_defined, resolve, split_name


class TestSplitName:
    def test_double_colon_segments(self):
        assert split_name("A::B::C") == ["A", "B", "C"]

    def test_dots_are_equivalent(self):
        assert split_name("pkg.mod::Outer") == ["pkg", "mod", "Outer"]

    @pytest.mark.parametrize("name", ["", "A::", "::A", "A::::B", "A..B"])
    def test_empty_segments_rejected(self, name):
        with pytest.raises(ValueError):
            split_name(name)


class TestResolve:
    def test_resolves_top_level_module(self):
        resolved = resolve("sample_types")
        assert resolved.value is sample_types
        assert resolved.name == "sample_types"

    def test_resolves_nested_path(self):
        resolved = resolve("sample_types::TestClass::Nested::NestedEvenMore")
        assert resolved.value is sample_types.TestClass.Nested.NestedEvenMore

    def test_dotted_path_resolves_the_same_value(self):
        assert resolve("sample_types.TestClass").value is sample_types.TestClass

    def test_missing_segment_raises_not_found(self):
        with pytest.raises(NotFoundError, match="Missing"):
            resolve("sample_types::TestClass::Missing")

    def test_not_found_is_a_lookup_error(self):
        with pytest.raises(LookupError):
            resolve("no_such_module_anywhere")

    def test_does_not_import_modules(self):
        """Resolution never imports; an unloaded module is simply undefined."""
        root = ModuleRoot({})
        assert not is_defined("json", root)

    def test_inherited_attributes_do_not_count(self):
        """Only own bindings resolve, never ones found through the MRO."""
        assert sample_types.ChildClass.M == "m"
        assert not is_defined("sample_types::ChildClass::M")

    def test_builtins_do_not_leak_into_nested_paths(self):
        assert not is_defined("sample_types::TestClass::dict")
        assert not is_defined("sample_types::len")

    def test_values_without_namespace_are_leaves(self):
        assert is_defined("sample_types::TOP_LEVEL_VALUE_CONST")
        assert not is_defined("sample_types::TOP_LEVEL_VALUE_CONST::real")


class TestIsDefined:
    def test_defined_name(self):
        assert is_defined("sample_types::TestClass") is True

    def test_undefined_name_returns_false(self):
        assert is_defined("sample_types::Undefined::Deeper") is False

    def test_custom_root(self):
        root = ModuleRoot({"app": sample_types})
        assert is_defined("app::TestClass", root)
        assert not is_defined("sample_types", root)
