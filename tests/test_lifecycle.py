import pytest

import sample_types
from verifying_doubles.lifecycle import Space
from verifying_doubles.pytest_plugin import finish_test


class Recorder:
    def __init__(self, name, log, fail_verify=False, fail_reset=False):
        self.name = name
        self.log = log
        self.fail_verify = fail_verify
        self.fail_reset = fail_reset

    def verify(self):
        self.log.append(("verify", self.name))
        if self.fail_verify:
            raise AssertionError(f"{self.name} unmet")

    def reset(self):
        self.log.append(("reset", self.name))
        if self.fail_reset:
            raise RuntimeError(f"{self.name} reset failed")


class TestSpace:
    def test_register_is_idempotent(self):
        registry = Space()
        entry = Recorder("a", [])
        registry.register(entry)
        registry.register(entry)
        assert len(registry) == 1
        assert registry.is_registered(entry)

    def test_verifies_in_registration_order(self):
        log = []
        registry = Space()
        for name in "abc":
            registry.register(Recorder(name, log))
        registry.verify_all()
        assert log == [("verify", "a"), ("verify", "b"), ("verify", "c")]

    def test_resets_most_recent_first(self):
        log = []
        registry = Space()
        for name in "abc":
            registry.register(Recorder(name, log))
        registry.reset_all()
        assert log == [("reset", "c"), ("reset", "b"), ("reset", "a")]
        assert len(registry) == 0

    def test_reset_continues_past_failures(self):
        """Every entry is reset even if an earlier reset raised; the first error wins."""
        log = []
        registry = Space()
        registry.register(Recorder("a", log))
        registry.register(Recorder("b", log, fail_reset=True))
        registry.register(Recorder("c", log, fail_reset=True))

        with pytest.raises(RuntimeError, match="c reset failed"):
            registry.reset_all()
        assert [name for _, name in log] == ["c", "b", "a"]
        assert len(registry) == 0


class TestFinishTest:
    def test_verifies_then_resets(self):
        log = []
        registry = Space()
        registry.register(Recorder("a", log))
        finish_test(registry)
        assert log == [("verify", "a"), ("reset", "a")]

    def test_resets_even_when_verification_fails(self):
        log = []
        registry = Space()
        registry.register(Recorder("a", log, fail_verify=True))
        with pytest.raises(AssertionError, match="a unmet"):
            finish_test(registry)
        assert ("reset", "a") in log
        assert len(registry) == 0


class TestPytestPlugin:
    """The plugin as pytest loads it: teardown fixture, ini option."""

    def test_unmet_expectation_fails_at_teardown(self, pytester):
        pytester.makepyfile(
            """
            from verifying_doubles import instance_double

            def test_forgets_to_call():
                doubled = instance_double("sample_types::TestObject")
                doubled.should_receive("defined_method")
            """
        )
        result = pytester.runpytest()

        result.assert_outcomes(passed=1, errors=1)
        result.stdout.fnmatch_lines(["*expected: 1 time*"])

    def test_stubbed_constant_is_restored_after_each_test(self, pytester):
        pytester.makepyfile(
            """
            import sample_types
            from verifying_doubles import stub_const

            def test_stubs():
                stub_const("sample_types::TOP_LEVEL_VALUE_CONST", 99)
                assert sample_types.TOP_LEVEL_VALUE_CONST == 99

            def test_sees_the_original():
                assert sample_types.TOP_LEVEL_VALUE_CONST == 7
            """
        )
        result = pytester.runpytest()

        result.assert_outcomes(passed=2)
        assert sample_types.TOP_LEVEL_VALUE_CONST == 7

    def test_verify_constant_names_ini_option(self, pytester):
        pytester.makeini(
            """
            [pytest]
            verify_constant_names = true
            """
        )
        pytester.makepyfile(
            """
            import pytest
            from verifying_doubles import UndefinedConstantError, instance_double

            def test_strict():
                with pytest.raises(UndefinedConstantError, match="Nope is not a defined constant."):
                    instance_double("Nope")
            """
        )
        result = pytester.runpytest()

        result.assert_outcomes(passed=1)
