"""Builders — the render half of a formlet.

A builder is a tree that turns a ``RenderDict`` into HTML. The dict
holds the previously submitted inputs and the errors attached to them,
so a re-rendered form shows what the user typed and what was wrong.

Builders never collect anything; they only need the field names they
were instantiated with.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Protocol

from formlets.html import HTML, guard_is_html, html_concat, html_nop, html_tag, html_text
from formlets.values import FunctionValue, Value, guard_has_arity, val


class RenderDict:
    """Immutable snapshot of prior inputs and their errors for one render.

    Built from the raw inputs and the value the collector produced for
    them. If that value is an error, its origin → message mapping is the
    error mapping; otherwise there are no errors.
    """

    __slots__ = ("_empty", "_errors", "_values")

    def __init__(
        self,
        inputs: Mapping[str, Any],
        value: Value,
        empty: bool = False,
    ) -> None:
        self._values = MappingProxyType(dict(inputs))
        forced = value.force()
        if forced.is_error():
            self._errors = MappingProxyType(forced.to_dict())
        else:
            self._errors = MappingProxyType({})
        self._empty = empty

    @classmethod
    def empty(cls) -> RenderDict:
        """A fresh dict for the first render, before anything was submitted."""
        return cls({}, val(0), empty=True)

    def is_empty(self) -> bool:
        return self._empty

    def value(self, name: str | None) -> Any:
        """Prior input for *name*, or ``None``."""
        return self._values.get(name) if name is not None else None

    def value_exists(self, name: str | None) -> bool:
        return name is not None and name in self._values

    def errors(self, name: str | None) -> str | None:
        """Prior error message for *name*, or ``None``."""
        return self._errors.get(name)

    @property
    def values(self) -> Mapping[str, Any]:
        return self._values

    @property
    def all_errors(self) -> Mapping[str | None, str]:
        return self._errors

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RenderDict):
            return NotImplemented
        return (
            self._values == other._values
            and self._errors == other._errors
            and self._empty == other._empty
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RenderDict(values={dict(self._values)!r}, errors={dict(self._errors)!r})"


class Builder(ABC):
    """Base for all builders."""

    __slots__ = ()

    @abstractmethod
    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        """Render with prior inputs and errors."""

    def build(self) -> HTML:
        """Render for the first time, with nothing submitted yet."""
        return self.build_with_dict(RenderDict.empty())

    def map(self, transformation: FunctionValue) -> MappedBuilder:
        """Map *transformation* over the result.

        The transformation gets the ``RenderDict`` used and the HTML this
        builder produced, and must return new HTML.
        """
        return MappedBuilder(self, transformation)


class CombinedBuilder(Builder):
    """Renders its left builder, then its right builder."""

    __slots__ = ("_left", "_right")

    def __init__(self, left: Builder, right: Builder) -> None:
        self._left = left
        self._right = right

    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        return html_concat(
            self._left.build_with_dict(render_dict),
            self._right.build_with_dict(render_dict),
        )


class MappedBuilder(Builder):
    """A builder whose output is passed through a transformation."""

    __slots__ = ("_builder", "_transformation")

    def __init__(self, builder: Builder, transformation: FunctionValue) -> None:
        guard_has_arity(transformation, 2)
        self._builder = builder
        self._transformation = transformation

    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        base = self._builder.build_with_dict(render_dict)
        res = self._transformation.apply(val(render_dict)).apply(val(base)).get()
        guard_is_html(res)
        return res


class NopBuilder(Builder):
    """Renders nothing."""

    __slots__ = ()

    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        return html_nop()


class TextBuilder(Builder):
    """Renders constant text."""

    __slots__ = ("_content",)

    def __init__(self, content: str) -> None:
        self._content = html_text(content)

    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        return self._content


class TagBuilderCallbacks(Protocol):
    """What a ``TagBuilder`` asks for when it renders.

    Implemented by the concrete widgets (text inputs, checkboxes, ...).
    """

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> Mapping[str, Any]:
        """Attributes of the tag, as a name → value mapping."""
        ...

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        """Content of the tag, or ``None`` for a self-closing tag."""
        ...


class TagBuilder(Builder):
    """Renders a single tag, asking *callbacks* for attributes and content."""

    __slots__ = ("_callbacks", "_name", "_tag_name")

    def __init__(
        self,
        tag_name: str,
        callbacks: TagBuilderCallbacks,
        name: str | None = None,
    ) -> None:
        if not isinstance(tag_name, str) or not tag_name:
            msg = f"Expected a tag name, got {tag_name!r}"
            raise TypeError(msg)
        if name is not None and not isinstance(name, str):
            msg = f"Expected a field name, got {name!r}"
            raise TypeError(msg)
        self._tag_name = tag_name
        self._callbacks = callbacks
        self._name = name

    @property
    def name(self) -> str | None:
        return self._name

    def build_with_dict(self, render_dict: RenderDict) -> HTML:
        attributes = self._callbacks.get_attributes(render_dict, self._name)
        content = self._callbacks.get_content(render_dict, self._name)
        return html_tag(self._tag_name, attributes, content)


def combine_builders(left: Builder, right: Builder) -> Builder:
    """Concatenate two builders, dropping ``NopBuilder`` operands."""
    if isinstance(left, NopBuilder):
        return right
    if isinstance(right, NopBuilder):
        return left
    return CombinedBuilder(left, right)
