"""Primitive formlets — the pieces forms are assembled from.

Each input primitive draws one name from the ``NameSource`` and uses it
for both its ``TagBuilder`` and its collector. Decorators such as
``with_label`` and ``with_errors`` find those names on the instance.

Usage::

    login = collect(
        lambda user, password: (user, password),
        with_errors(with_label("User", text_input().validate(required))),
        with_errors(with_label("Password", password_input())),
    )
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from typing import Any

from formlets.builders import Builder, NopBuilder, RenderDict, TagBuilder, TextBuilder, combine_builders
from formlets.collectors import AnyCollector, Collector, ConstCollector, NullaryCollector, combine_collectors
from formlets.errors import ConfigurationError
from formlets.formlet import Formlet, FormletInstance
from formlets.html import HTML, html_concat, html_tag, html_text
from formlets.names import NameSource
from formlets.validation import one_of
from formlets.values import Value, fn, val

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------


def pure(value: Any) -> Formlet:
    """Renders nothing and always collects *value*."""
    constant = val(value)
    return Formlet(lambda names: FormletInstance(NopBuilder(), ConstCollector(constant), names))


def text(content: str) -> Formlet:
    """Renders *content* and collects nothing."""
    return Formlet(lambda names: FormletInstance(TextBuilder(content), NullaryCollector(), names))


def collect(function: Callable[..., Any], *formlets: Formlet) -> Formlet:
    """Apply *function* to the values of *formlets*.

    Text-only formlets collect nothing and are skipped when counting
    arguments, so *function* takes one argument per value-carrying field.
    """

    def factory(names: NameSource) -> FormletInstance:
        instances = [formlet.instantiate(names) for formlet in formlets]
        arity = sum(not inst.collector.is_nullary_collector() for inst in instances)
        builder: Builder = NopBuilder()
        collector: Collector = ConstCollector(val(fn(function, arity) if arity else function()))
        for inst in instances:
            builder = combine_builders(builder, inst.builder)
            collector = combine_collectors(collector, inst.collector)
        return FormletInstance(builder, collector, names, tuple(n for inst in instances for n in inst.names))

    return Formlet(factory)


# ---------------------------------------------------------------------------
# Tag callbacks
# ---------------------------------------------------------------------------


class InputCallbacks:
    """Attributes for an ``<input>``, refilled from the previous submit."""

    __slots__ = ("_attributes", "_default", "_refill")

    def __init__(
        self,
        attributes: Mapping[str, Any],
        default: Any = None,
        refill: bool = True,
    ) -> None:
        self._attributes = dict(attributes)
        self._default = default
        self._refill = refill

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> dict[str, Any]:
        attrs = dict(self._attributes)
        if name is not None:
            attrs["id"] = name
            attrs["name"] = name
        if self._refill and render_dict.value_exists(name):
            attrs["value"] = render_dict.value(name)
        elif self._default is not None:
            attrs["value"] = self._default
        return attrs

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        return None


class TextareaCallbacks:
    __slots__ = ("_attributes", "_default")

    def __init__(self, attributes: Mapping[str, Any], default: str | None = None) -> None:
        self._attributes = dict(attributes)
        self._default = default

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> dict[str, Any]:
        return {**self._attributes, "id": name, "name": name}

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        if render_dict.value_exists(name):
            return html_text(str(render_dict.value(name)))
        return html_text(self._default or "")


class CheckboxCallbacks:
    """Checked from the default on first render, from the input afterwards."""

    __slots__ = ("_attributes", "_checked")

    def __init__(self, attributes: Mapping[str, Any], checked: bool) -> None:
        self._attributes = dict(attributes)
        self._checked = checked

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> dict[str, Any]:
        if render_dict.is_empty():
            checked = self._checked
        else:
            checked = render_dict.value_exists(name)
        return {**self._attributes, "type": "checkbox", "id": name, "name": name, "checked": checked}

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        return None


class SelectCallbacks:
    __slots__ = ("_attributes", "_default", "_options")

    def __init__(
        self,
        options: Mapping[str, str],
        attributes: Mapping[str, Any],
        default: str | None = None,
    ) -> None:
        self._options = dict(options)
        self._attributes = dict(attributes)
        self._default = default

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> dict[str, Any]:
        return {**self._attributes, "id": name, "name": name}

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        selected = render_dict.value(name) if render_dict.value_exists(name) else self._default
        return html_concat(
            *(
                html_tag("option", {"value": value, "selected": value == selected}, html_text(label))
                for value, label in self._options.items()
            )
        )


class LabelCallbacks:
    __slots__ = ("_label",)

    def __init__(self, label: str) -> None:
        self._label = label

    def get_attributes(self, render_dict: RenderDict, name: str | None) -> dict[str, Any]:
        return {"for": name}

    def get_content(self, render_dict: RenderDict, name: str | None) -> HTML | None:
        return html_text(self._label)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


def _field(tag_name: str, callbacks: Any, collector: Callable[[str], Collector] = AnyCollector) -> Formlet:
    def factory(names: NameSource) -> FormletInstance:
        name = names.next()
        return FormletInstance(TagBuilder(tag_name, callbacks, name), collector(name), names, (name,))

    return Formlet(factory)


def input_field(
    input_type: str,
    attributes: Mapping[str, Any] | None = None,
    default: Any = None,
    *,
    refill: bool = True,
) -> Formlet:
    """An ``<input type=input_type>`` collecting its submitted string."""
    callbacks = InputCallbacks({"type": input_type, **(attributes or {})}, default, refill)
    return _field("input", callbacks)


def text_input(default: str | None = None, attributes: Mapping[str, Any] | None = None) -> Formlet:
    return input_field("text", attributes, default)


def email_input(default: str | None = None, attributes: Mapping[str, Any] | None = None) -> Formlet:
    return input_field("email", attributes, default)


def password_input(attributes: Mapping[str, Any] | None = None) -> Formlet:
    """A password field. Never echoes the submitted value back."""
    return input_field("password", attributes, refill=False)


def hidden_input(value: str) -> Formlet:
    """A hidden field that always renders *value*."""
    return input_field("hidden", default=value, refill=False)


def textarea(default: str | None = None, attributes: Mapping[str, Any] | None = None) -> Formlet:
    return _field("textarea", TextareaCallbacks(attributes or {}, default))


class CheckboxCollector(Collector):
    """Collects whether the box was ticked.

    Browsers omit unticked checkboxes, so an absent field is ``False``
    rather than a missing input.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def collect(self, inputs: Mapping[str, Any]) -> Value:
        return val(self._name in inputs, self._name)

    def is_nullary_collector(self) -> bool:
        return False


def checkbox(checked: bool = False, attributes: Mapping[str, Any] | None = None) -> Formlet:
    """A checkbox collecting ``True`` or ``False``."""
    return _field("input", CheckboxCallbacks(attributes or {}, checked), CheckboxCollector)


def select(
    options: Sequence[str] | Mapping[str, str],
    default: str | None = None,
    attributes: Mapping[str, Any] | None = None,
) -> Formlet:
    """A ``<select>`` collecting one of *options*.

    *options* maps submitted values to labels; a plain sequence uses
    each option as its own label. Anything else submitted is an error.
    """
    if not isinstance(options, Mapping):
        options = {option: option for option in options}
    if not options:
        msg = "A select needs at least one option."
        raise ConfigurationError(msg)
    field = _field("select", SelectCallbacks(options, attributes or {}, default))
    return field.validate(one_of(*options))


def submit(label: str, attributes: Mapping[str, Any] | None = None) -> Formlet:
    """A submit button. Collects nothing."""
    callbacks = InputCallbacks({"type": "submit", **(attributes or {})}, label, refill=False)

    def factory(names: NameSource) -> FormletInstance:
        return FormletInstance(TagBuilder("input", callbacks), NullaryCollector(), names)

    return Formlet(factory)


# ---------------------------------------------------------------------------
# Decorations
# ---------------------------------------------------------------------------


def with_label(label: str, formlet: Formlet) -> Formlet:
    """Put a ``<label>`` for the single field of *formlet* in front of it."""

    def factory(names: NameSource) -> FormletInstance:
        inst = formlet.instantiate(names)
        if inst.name is None:
            msg = f"with_label({label!r}) needs a formlet with exactly one field, got {len(inst.names)}."
            raise ConfigurationError(msg)
        label_builder = TagBuilder("label", LabelCallbacks(label), inst.name)
        return replace(inst, builder=combine_builders(label_builder, inst.builder))

    return Formlet(factory)


def with_errors(formlet: Formlet, error_class: str = "error") -> Formlet:
    """Render the previous errors of *formlet*'s fields after it."""

    def factory(names: NameSource) -> FormletInstance:
        inst = formlet.instantiate(names)

        def show(render_dict: RenderDict, html: HTML) -> HTML:
            spans = [
                html_tag("span", {"class": error_class}, html_text(message))
                for message in (render_dict.errors(name) for name in inst.names)
                if message is not None
            ]
            return html_concat(html, *spans)

        return replace(inst, builder=inst.builder.map(fn(show)))

    return Formlet(factory)


def fieldset(legend: str, formlet: Formlet) -> Formlet:
    """Group *formlet* in a ``<fieldset>`` with a ``<legend>``."""

    def surround(render_dict: RenderDict, html: HTML) -> HTML:
        return html_tag("fieldset", {}, html_concat(html_tag("legend", {}, html_text(legend)), html))

    return formlet.map_html(fn(surround))
