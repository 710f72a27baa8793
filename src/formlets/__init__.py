"""Formlets — HTML forms whose rendering and parsing come from one description.

A formlet pairs a builder (renders HTML) with a collector (reads the
submitted values back). Both are created from the same field names at
instantiation, so they cannot drift apart.

Basic usage::

    from formlets import Form, collect, text_input, with_errors, with_label
    from formlets.validation import integer, required

    person = collect(
        lambda name, age: (name, int(age)),
        with_errors(with_label("Name", text_input().validate(required))),
        with_errors(with_label("Age", text_input().validate(integer))),
    )

    form = Form(person, action="/people", form_id="person")
    form.render()                   # first render
    value = form.process(post_data)
    if value.is_error():
        form.render()               # inputs refilled, errors shown
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AnyCollector",
    "ApplyCollector",
    "Builder",
    "Collector",
    "CombinedBuilder",
    "ConstCollector",
    "ErrorValue",
    "Form",
    "FormletConfig",
    "Formlet",
    "FormletError",
    "FormletInstance",
    "FunctionValue",
    "MappedBuilder",
    "MissingInputError",
    "NameSource",
    "NopBuilder",
    "NullaryCollector",
    "PlainValue",
    "RenderDict",
    "TagBuilder",
    "TextBuilder",
    "Value",
    "WrappedCollector",
    "checkbox",
    "collect",
    "combine_collectors",
    "error",
    "fieldset",
    "fn",
    "pure",
    "select",
    "submit",
    "text",
    "text_input",
    "textarea",
    "val",
    "with_errors",
    "with_label",
]

# Public name → defining module. Keeps ``import formlets`` cheap.
_LAZY_IMPORTS: dict[str, str] = {
    "AnyCollector": "formlets.collectors",
    "ApplyCollector": "formlets.collectors",
    "Builder": "formlets.builders",
    "Collector": "formlets.collectors",
    "CombinedBuilder": "formlets.builders",
    "ConstCollector": "formlets.collectors",
    "ErrorValue": "formlets.values",
    "Form": "formlets.form",
    "FormletConfig": "formlets.config",
    "Formlet": "formlets.formlet",
    "FormletError": "formlets.errors",
    "FormletInstance": "formlets.formlet",
    "FunctionValue": "formlets.values",
    "MappedBuilder": "formlets.builders",
    "MissingInputError": "formlets.errors",
    "NameSource": "formlets.names",
    "NopBuilder": "formlets.builders",
    "NullaryCollector": "formlets.collectors",
    "PlainValue": "formlets.values",
    "RenderDict": "formlets.builders",
    "TagBuilder": "formlets.builders",
    "TextBuilder": "formlets.builders",
    "Value": "formlets.values",
    "WrappedCollector": "formlets.collectors",
    "checkbox": "formlets.primitives",
    "collect": "formlets.primitives",
    "combine_collectors": "formlets.collectors",
    "error": "formlets.values",
    "fieldset": "formlets.primitives",
    "fn": "formlets.values",
    "pure": "formlets.primitives",
    "select": "formlets.primitives",
    "submit": "formlets.primitives",
    "text": "formlets.primitives",
    "text_input": "formlets.primitives",
    "textarea": "formlets.primitives",
    "val": "formlets.values",
    "with_errors": "formlets.primitives",
    "with_label": "formlets.primitives",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API."""
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
