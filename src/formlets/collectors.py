"""Collectors — the parse half of a formlet.

A collector is a tree that extracts its value from the submitted input
mapping. Collection is applicative: both sides of an ``ApplyCollector``
are always evaluated, so every invalid field is reported in one pass.

A missing input is not a validation error. It means the input does not
belong to this form (stale page, tampering, or a bug), so it raises
``MissingInputError`` instead of producing an ``ErrorValue``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from formlets.errors import ConfigurationError, MissingInputError, NullaryCollectError
from formlets.values import FunctionValue, Value, error, fn, guard_has_arity, val

logger = logging.getLogger("formlets.collect")

type Inputs = Mapping[str, Any]


class Collector(ABC):
    """Base for all collectors."""

    __slots__ = ()

    @abstractmethod
    def collect(self, inputs: Inputs) -> Value:
        """Collect this collector's value from *inputs*.

        Raises:
            MissingInputError: If a field this collector reads is absent.
        """

    @abstractmethod
    def is_nullary_collector(self) -> bool:
        """True if this collector collects nothing."""

    def map(self, transformation: FunctionValue) -> Collector:
        """Map *transformation* over the collected value.

        Errors pass through untouched. A plain result keeps the origin of
        the value it was computed from.
        """

        def mapped(collector: Collector, inputs: Inputs) -> Value:
            res = collector.collect(inputs).force()
            if res.is_error():
                return res
            res2 = transformation.apply(res).force()
            if not res2.is_error() and not res2.is_applicable():
                return val(res2.get(), res.origin)
            return res2

        return self.wrap(fn(mapped))

    def wrap(self, wrapper: FunctionValue) -> Collector:
        """Wrap *wrapper* around the collect call.

        The wrapper gets this collector and the inputs and returns a value.
        """
        return WrappedCollector(self, wrapper)

    def satisfies(self, predicate: FunctionValue, message: str) -> Collector:
        """Only let values through that match *predicate*.

        Values failing it become an error carrying *message* at the
        value's origin.
        """
        if not isinstance(message, str):
            msg = f"Expected an error message, got {message!r}"
            raise TypeError(msg)
        guard_has_arity(predicate, 1)

        def check(value: Value) -> Value:
            if not predicate.apply(value).get():
                return error(message, value.origin)
            return value

        return self.map(fn(check, unwrap=False))

    def check(self, rule: Callable[[Any], str | None]) -> Collector:
        """Validate with a rule returning an error message or ``None``."""

        def checked(value: Value) -> Value:
            message = rule(value.get())
            if message is not None:
                return error(message, value.origin)
            return value

        return self.map(fn(checked, unwrap=False))


class NullaryCollector(Collector):
    """Collects nothing. Dropped when combined with other collectors."""

    __slots__ = ()

    def collect(self, inputs: Inputs) -> Value:
        msg = "NullaryCollector.collect: this should never be called."
        raise NullaryCollectError(msg)

    def is_nullary_collector(self) -> bool:
        return True


class ConstCollector(Collector):
    """Always returns the same value, ignoring the inputs."""

    __slots__ = ("_value",)

    def __init__(self, value: Value) -> None:
        self._value = value

    def collect(self, inputs: Inputs) -> Value:
        return self._value

    def is_nullary_collector(self) -> bool:
        return False


class ApplyCollector(Collector):
    """Applies the value of its left collector to the value of its right one."""

    __slots__ = ("_left", "_right")

    def __init__(self, left: Collector, right: Collector) -> None:
        self._left = left
        self._right = right

    def collect(self, inputs: Inputs) -> Value:
        left = self._left.collect(inputs)
        right = self._right.collect(inputs)
        return left.apply(right)

    def is_nullary_collector(self) -> bool:
        return False


class WrappedCollector(Collector):
    """A collector with a wrapper around its collect call."""

    __slots__ = ("_collector", "_wrapper")

    def __init__(self, collector: Collector, wrapper: FunctionValue) -> None:
        guard_has_arity(wrapper, 2)
        if collector.is_nullary_collector():
            msg = "It makes no sense to wrap around a nullary collector."
            raise ConfigurationError(msg)
        self._collector = collector
        self._wrapper = wrapper

    def collect(self, inputs: Inputs) -> Value:
        wrapped = self._wrapper.apply(val(self._collector)).apply(val(inputs))
        return wrapped.force()

    def is_nullary_collector(self) -> bool:
        return False


class AnyCollector(Collector):
    """Collects the input named *name*, whatever it is."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        if not isinstance(name, str):
            msg = f"Expected a field name, got {name!r}"
            raise TypeError(msg)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def collect(self, inputs: Inputs) -> Value:
        if self._name not in inputs:
            logger.debug("missing input %s", self._name)
            raise MissingInputError(self._name)
        return val(inputs[self._name], self._name)

    def is_nullary_collector(self) -> bool:
        return False


def combine_collectors(left: Collector, right: Collector) -> Collector:
    """Apply *left* to *right*, pruning nullary collectors."""
    left_empty = left.is_nullary_collector()
    right_empty = right.is_nullary_collector()
    if left_empty and right_empty:
        return NullaryCollector()
    if right_empty:
        return left
    if left_empty:
        return right
    return ApplyCollector(left, right)
