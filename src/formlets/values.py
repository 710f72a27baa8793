"""Values — the results flowing through collectors.

A value is one of:

- ``PlainValue``: a successful payload tagged with its origin.
- ``FunctionValue``: a curried callable that is fed other values via
  ``apply`` until its arity is met.
- ``ErrorValue``: a validation failure, mapping origins to messages.
- ``DeferredValue``: a saturated application that is only evaluated
  on ``force()``.

The origin is the field name a value traces back to. It is how an
error message finds its way back to the field that produced it::

    add = fn(lambda a, b: a + b)
    add.apply(val(1, "a")).apply(val(2, "b")).get()      # 3
    add.apply(error("bad", "a")).apply(error("worse", "b")).to_dict()
    # {"a": "bad", "b": "worse"}
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from functools import partial
from types import MappingProxyType
from typing import Any

from formlets.errors import ApplyError, ArityError, InvalidAccessError


class Value(ABC):
    """Base for all values. Subclasses carry an ``origin`` attribute."""

    __slots__ = ()

    origin: str | None

    def force(self) -> Value:
        """Evaluate deferred work. Idempotent; plain values return themselves."""
        return self

    @abstractmethod
    def apply(self, other: Value) -> Value:
        """Applicative application of this value to *other*."""

    @abstractmethod
    def get(self) -> Any:
        """Return the raw payload."""

    def error(self) -> str:
        """Return the message of an error value."""
        msg = f"Invalid access: {self!r} is not an error."
        raise InvalidAccessError(msg)

    def to_dict(self) -> dict[str | None, str]:
        """Return the origin → message mapping of an error value."""
        msg = f"Invalid access: {self!r} has no errors."
        raise InvalidAccessError(msg)

    def is_error(self) -> bool:
        return False

    def is_applicable(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class PlainValue(Value):
    """A successfully collected payload."""

    payload: Any
    origin: str | None = None

    def apply(self, other: Value) -> Value:
        msg = f"Cannot apply plain value {self.payload!r}; only functions can be applied."
        raise ApplyError(msg)

    def get(self) -> Any:
        return self.payload


@dataclass(frozen=True, slots=True)
class FunctionValue(Value):
    """A curried callable.

    With ``unwrap`` set (the default) the callable receives payloads.
    Without it, it receives the ``Value`` objects, which lets it read
    their origins.
    """

    function: Callable[..., Any]
    arity: int
    args: tuple[Value, ...] = ()
    origin: str | None = None
    unwrap: bool = True

    def __post_init__(self) -> None:
        if self.arity < 1:
            msg = f"Function values need an arity of at least 1, got {self.arity}."
            raise ArityError(msg)

    @property
    def remaining(self) -> int:
        """Number of arguments still missing."""
        return self.arity - len(self.args)

    def apply(self, other: Value) -> Value:
        other = other.force()
        if other.is_error():
            return other
        args = (*self.args, other)
        if len(args) == self.arity:
            return DeferredValue(partial(self._invoke, args))
        return replace(self, args=args)

    def get(self) -> Any:
        if not self.args:
            return self.function
        return partial(self.function, *self._params(self.args))

    def is_applicable(self) -> bool:
        return True

    def _params(self, args: tuple[Value, ...]) -> list[Any]:
        if self.unwrap:
            return [a.get() for a in args]
        return list(args)

    def _invoke(self, args: tuple[Value, ...]) -> Value:
        return val(self.function(*self._params(args))).force()


@dataclass(frozen=True, slots=True)
class ErrorValue(Value):
    """A validation failure.

    ``errors`` maps origins to messages. A fresh error maps its own
    origin to its own message; applying one error to another unions
    their mappings, the left side winning on a shared origin.
    """

    message: str
    origin: str | None = None
    errors: Mapping[str | None, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        errors = dict(self.errors or {self.origin: self.message})
        object.__setattr__(self, "errors", MappingProxyType(errors))

    def apply(self, other: Value) -> Value:
        other = other.force()
        if not other.is_error():
            return self
        merged = {**other.to_dict(), **self.errors}
        return ErrorValue(self.message, self.origin, merged)

    def get(self) -> Any:
        msg = f"Invalid access: value from {self.origin!r} is an error: {self.message}"
        raise InvalidAccessError(msg)

    def error(self) -> str:
        return self.message

    def is_error(self) -> bool:
        return True

    def to_dict(self) -> dict[str | None, str]:
        """Return the origin → message mapping."""
        return dict(self.errors)


class DeferredValue(Value):
    """A value computed on first ``force()`` and cached afterwards."""

    __slots__ = ("_forced", "_thunk")

    def __init__(self, thunk: Callable[[], Value]) -> None:
        self._thunk: Callable[[], Value] | None = thunk
        self._forced: Value | None = None

    def force(self) -> Value:
        if self._thunk is not None:
            self._forced = self._thunk().force()
            self._thunk = None
        return self._forced

    @property
    def origin(self) -> str | None:  # type: ignore[override]
        return self.force().origin

    def apply(self, other: Value) -> Value:
        return self.force().apply(other)

    def get(self) -> Any:
        return self.force().get()

    def error(self) -> str:
        return self.force().error()

    def to_dict(self) -> dict[str | None, str]:
        return self.force().to_dict()

    def is_error(self) -> bool:
        return self.force().is_error()

    def is_applicable(self) -> bool:
        return self.force().is_applicable()

    def __repr__(self) -> str:
        if self._thunk is not None:
            return "DeferredValue(<pending>)"
        return f"DeferredValue({self._forced!r})"


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def val(payload: Any, origin: str | None = None) -> Value:
    """Wrap *payload* as a plain value. Existing values pass through."""
    if isinstance(payload, Value):
        return payload
    return PlainValue(payload, origin)


def fn(
    function: Callable[..., Any],
    arity: int | None = None,
    *,
    unwrap: bool = True,
) -> FunctionValue:
    """Wrap a callable as a function value.

    The arity defaults to the number of required positional parameters.
    Pass it explicitly for callables taking ``*args``.
    """
    if arity is None:
        arity = _arity_of(function)
    return FunctionValue(function, arity, unwrap=unwrap)


def error(message: str, origin: str | None = None) -> ErrorValue:
    """Create an error value for *origin*."""
    return ErrorValue(message, origin)


def guard_has_arity(function: Value, arity: int) -> None:
    """Raise ``ArityError`` unless *function* still takes *arity* arguments."""
    if not isinstance(function, FunctionValue):
        msg = f"Expected a function value, got {function!r}."
        raise ArityError(msg)
    if function.remaining != arity:
        msg = f"Expected a function of arity {arity}, got arity {function.remaining}."
        raise ArityError(msg)


def _arity_of(function: Callable[..., Any]) -> int:
    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    )
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        msg = f"Cannot infer the arity of {function!r}; pass it explicitly."
        raise ArityError(msg) from None
    arity = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            msg = f"Cannot infer the arity of {function!r}; pass it explicitly."
            raise ArityError(msg)
        if param.kind in positional and param.default is inspect.Parameter.empty:
            arity += 1
    return arity
