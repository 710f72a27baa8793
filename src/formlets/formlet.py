"""Formlets — a builder and a collector declared together.

A ``Formlet`` is a recipe. Nothing is named until it is instantiated
with a ``NameSource``; instantiation creates the builder and the
collector of every field from the same name, so the rendered form and
the code reading it back cannot drift apart.

Usage::

    name_and_age = (
        pure(fn(lambda name, age: (name, int(age))))
        * with_label("Name", text_input())
        * with_label("Age", text_input()).validate(integer)
    )
    instance = name_and_age.instantiate(NameSource.instantiate("person"))
    instance.builder.build()                      # the empty form
    instance.collector.collect(submitted_inputs)  # Value with the tuple
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from formlets.builders import Builder, combine_builders
from formlets.collectors import Collector, combine_collectors
from formlets.html import HTML, html_tag
from formlets.names import NameSource
from formlets.values import FunctionValue, fn, guard_has_arity, val

type Factory = Callable[[NameSource], FormletInstance]


@dataclass(frozen=True, slots=True)
class FormletInstance:
    """A formlet after instantiation.

    ``names`` lists the field names created for this instance, in the
    order they were drawn from ``name_source``.
    """

    builder: Builder
    collector: Collector
    name_source: NameSource
    names: tuple[str, ...] = ()

    @property
    def name(self) -> str | None:
        """The field name of a single-field instance, else ``None``."""
        if len(self.names) == 1:
            return self.names[0]
        return None


class Formlet:
    """Declarative description of a form fragment and how to read it back."""

    __slots__ = ("_factory",)

    def __init__(self, factory: Factory) -> None:
        self._factory = factory

    def instantiate(self, name_source: NameSource) -> FormletInstance:
        """Create the builder and collector, drawing names from *name_source*."""
        return self._factory(name_source)

    # -- Mapping --

    def map(self, transformation: FunctionValue) -> Formlet:
        """Map *transformation* over the collected value."""
        return self._map_instance(lambda inst: replace(inst, collector=inst.collector.map(transformation)))

    def map_html(self, transformation: FunctionValue) -> Formlet:
        """Map *transformation* over the rendered HTML.

        It gets the ``RenderDict`` and the HTML and returns new HTML.
        """
        guard_has_arity(transformation, 2)
        return self._map_instance(lambda inst: replace(inst, builder=inst.builder.map(transformation)))

    def map_bc(self, builder_fn: FunctionValue, collector_fn: FunctionValue) -> Formlet:
        """Replace builder and collector by *builder_fn(builder)* and *collector_fn(collector)*."""
        guard_has_arity(builder_fn, 1)
        guard_has_arity(collector_fn, 1)

        def transform(inst: FormletInstance) -> FormletInstance:
            builder = builder_fn.apply(val(inst.builder)).get()
            collector = collector_fn.apply(val(inst.collector)).get()
            if not isinstance(builder, Builder):
                msg = f"map_bc: builder function returned {builder!r}, not a Builder."
                raise TypeError(msg)
            if not isinstance(collector, Collector):
                msg = f"map_bc: collector function returned {collector!r}, not a Collector."
                raise TypeError(msg)
            return replace(inst, builder=builder, collector=collector)

        return self._map_instance(transform)

    def wrap_html(self, tag_name: str, attributes: dict[str, Any] | None = None) -> Formlet:
        """Render this formlet inside a *tag_name* element."""

        def surround(render_dict: Any, html: HTML) -> HTML:
            return html_tag(tag_name, attributes, html)

        return self.map_html(fn(surround))

    # -- Validation --

    def satisfies(self, predicate: FunctionValue, message: str) -> Formlet:
        """Turn values failing *predicate* into an error with *message*."""
        return self._map_instance(
            lambda inst: replace(inst, collector=inst.collector.satisfies(predicate, message))
        )

    def validate(self, *rules: Callable[[Any], str | None]) -> Formlet:
        """Check the value with each rule in turn; the first message wins."""

        def checked(inst: FormletInstance) -> FormletInstance:
            collector = inst.collector
            for rule in rules:
                collector = collector.check(rule)
            return replace(inst, collector=collector)

        return self._map_instance(checked)

    # -- Combination --

    def cmb(self, other: Formlet) -> Formlet:
        """Apply this formlet's value to *other*'s, rendering both in order.

        Names are drawn left to right from the same source, so siblings
        never share a name.
        """

        def factory(name_source: NameSource) -> FormletInstance:
            left = self.instantiate(name_source)
            right = other.instantiate(left.name_source)
            return FormletInstance(
                builder=combine_builders(left.builder, right.builder),
                collector=combine_collectors(left.collector, right.collector),
                name_source=right.name_source,
                names=left.names + right.names,
            )

        return Formlet(factory)

    __mul__ = cmb

    def _map_instance(self, transform: Callable[[FormletInstance], FormletInstance]) -> Formlet:
        return Formlet(lambda name_source: transform(self.instantiate(name_source)))
