"""Tests for formlets.values — plain, function, error and deferred values."""

import pytest

from formlets.errors import ApplyError, ArityError, InvalidAccessError
from formlets.values import (
    DeferredValue,
    ErrorValue,
    FunctionValue,
    PlainValue,
    error,
    fn,
    guard_has_arity,
    val,
)


class TestPlainValue:
    def test_get_returns_payload(self) -> None:
        assert val(42).get() == 42

    def test_origin(self) -> None:
        assert val("x", "field").origin == "field"
        assert val("x").origin is None

    def test_capabilities(self) -> None:
        v = val(1)
        assert not v.is_error()
        assert not v.is_applicable()

    def test_apply_fails_fast(self) -> None:
        with pytest.raises(ApplyError):
            val(1).apply(val(2))

    def test_error_access_fails(self) -> None:
        with pytest.raises(InvalidAccessError):
            val(1).error()

    def test_val_passes_values_through(self) -> None:
        v = val(1, "a")
        assert val(v) is v

    def test_force_is_identity(self) -> None:
        v = val(1)
        assert v.force() is v


class TestFunctionValue:
    def test_arity_from_signature(self) -> None:
        assert fn(lambda a, b: a).arity == 2

    def test_defaults_do_not_count(self) -> None:
        assert fn(lambda a, b=1: a).arity == 1

    def test_var_positional_needs_explicit_arity(self) -> None:
        with pytest.raises(ArityError):
            fn(lambda *args: args)
        assert fn(lambda *args: args, 3).arity == 3

    def test_zero_arity_rejected(self) -> None:
        with pytest.raises(ArityError):
            fn(lambda: 1)

    def test_is_applicable(self) -> None:
        assert fn(lambda a: a).is_applicable()

    def test_partial_application_accumulates(self) -> None:
        f = fn(lambda a, b, c: a + b + c)
        partial = f.apply(val(1))
        assert isinstance(partial, FunctionValue)
        assert partial.remaining == 2
        assert partial.apply(val(2)).apply(val(3)).get() == 6

    def test_saturated_application_is_deferred(self) -> None:
        calls = []

        def record(a: int) -> int:
            calls.append(a)
            return a * 2

        res = fn(record).apply(val(21))
        assert isinstance(res, DeferredValue)
        assert calls == []
        assert res.get() == 42
        assert res.get() == 42
        assert calls == [21]

    def test_force_flattens(self) -> None:
        res = fn(lambda a: val(a, "inner")).apply(val(1)).force()
        assert isinstance(res, PlainValue)
        assert res.origin == "inner"

    def test_returning_function_stays_applicable(self) -> None:
        curried = fn(lambda a: fn(lambda b: a - b))
        res = curried.apply(val(10)).force()
        assert res.is_applicable()
        assert res.apply(val(3)).get() == 7

    def test_wrapped_arguments(self) -> None:
        origin_of = fn(lambda v: v.origin, unwrap=False)
        assert origin_of.apply(val(1, "a")).get() == "a"

    def test_get_without_args_returns_callable(self) -> None:
        def double(a: int) -> int:
            return a * 2

        assert fn(double).get() is double

    def test_get_with_bound_args(self) -> None:
        add = fn(lambda a, b: a + b).apply(val(1))
        assert add.get()(2) == 3

    def test_guard_has_arity(self) -> None:
        guard_has_arity(fn(lambda a, b: a), 2)
        with pytest.raises(ArityError):
            guard_has_arity(fn(lambda a: a), 2)
        with pytest.raises(ArityError):
            guard_has_arity(val(1), 1)

    def test_guard_counts_remaining_arguments(self) -> None:
        guard_has_arity(fn(lambda a, b: a).apply(val(1)), 1)


class TestErrorValue:
    def test_copies_caller_mapping(self) -> None:
        errors = {"a": "bad"}
        e = ErrorValue("bad", "a", errors)
        errors["b"] = "later"
        assert e.to_dict() == {"a": "bad"}

    def test_errors_are_read_only(self) -> None:
        e = error("bad", "a")
        with pytest.raises(TypeError):
            e.errors["c"] = "sneaky"  # type: ignore[index]
        assert e.to_dict() == {"a": "bad"}

    def test_to_dict_returns_a_copy(self) -> None:
        e = error("bad", "a")
        e.to_dict()["c"] = "x"
        assert e.to_dict() == {"a": "bad"}

    def test_to_dict_on_success_is_invalid_access(self) -> None:
        with pytest.raises(InvalidAccessError, match="has no errors"):
            val(1).to_dict()

    def test_mapping(self) -> None:
        e = error("bad", "a")
        assert e.is_error()
        assert e.error() == "bad"
        assert e.origin == "a"
        assert e.to_dict() == {"a": "bad"}

    def test_get_is_invalid_access(self) -> None:
        with pytest.raises(InvalidAccessError, match="Invalid access"):
            error("bad", "a").get()

    def test_errors_union(self) -> None:
        res = error("bad", "a").apply(error("worse", "b"))
        assert isinstance(res, ErrorValue)
        assert res.to_dict() == {"a": "bad", "b": "worse"}

    def test_left_wins_on_shared_origin(self) -> None:
        res = error("first", "a").apply(error("second", "a"))
        assert res.to_dict() == {"a": "first"}

    def test_error_absorbs_success(self) -> None:
        e = error("bad", "a")
        assert e.apply(val(1)) is e

    def test_function_applied_to_error_is_error(self) -> None:
        res = fn(lambda a: a).apply(error("bad", "a"))
        assert res.is_error()
        assert res.to_dict() == {"a": "bad"}

    def test_all_errors_surface_through_curried_application(self) -> None:
        f = fn(lambda a, b, c: (a, b, c))
        res = f.apply(error("bad a", "a")).apply(val(2, "b")).apply(error("bad c", "c"))
        assert res.to_dict() == {"a": "bad a", "c": "bad c"}

    def test_function_is_not_called_on_error(self) -> None:
        calls = []
        f = fn(lambda a, b: calls.append((a, b)))
        f.apply(val(1)).apply(error("bad", "b")).force()
        assert calls == []


class TestDeferredValue:
    def test_queries_force(self) -> None:
        d = DeferredValue(lambda: error("bad", "a"))
        assert d.is_error()
        assert d.origin == "a"
        assert d.error() == "bad"

    def test_force_is_idempotent(self) -> None:
        calls = []

        def thunk() -> PlainValue:
            calls.append(1)
            return PlainValue(1)

        d = DeferredValue(thunk)
        first = d.force()
        assert d.force() is first
        assert calls == [1]

    def test_apply_delegates(self) -> None:
        d = DeferredValue(lambda: fn(lambda a: a + 1))
        assert d.apply(val(1)).get() == 2

    def test_to_dict_delegates(self) -> None:
        d = DeferredValue(lambda: error("bad", "a"))
        assert d.to_dict() == {"a": "bad"}

    def test_thunk_released_after_force(self) -> None:
        d = DeferredValue(lambda: PlainValue(None))
        assert repr(d) == "DeferredValue(<pending>)"
        assert d.force().get() is None
        assert repr(d) == "DeferredValue(PlainValue(payload=None, origin=None))"
        assert d.force().get() is None
