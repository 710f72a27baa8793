"""Tests for formlets.formlet — instantiation, mapping and combination."""

from typing import Any

import pytest

from formlets.builders import Builder, RenderDict
from formlets.collectors import Collector
from formlets.errors import ArityError, MissingInputError
from formlets.formlet import Formlet, FormletInstance
from formlets.html import HTML, HTMLNop, HTMLText, html_nop, html_text
from formlets.names import NameSource
from formlets.primitives import pure, text, text_input
from formlets.validation import integer, required
from formlets.values import error, fn, val


def _instantiate(formlet: Formlet) -> FormletInstance:
    return formlet.instantiate(NameSource.instantiate("test"))


_id = fn(lambda a: a)
_id2 = fn(lambda _, a: a)

FORMLETS = [
    pure(val(42)).map(_id),
    pure(val(42)).map_html(_id2),
    pure(val(42)).map_bc(_id, _id),
    text("foo"),
    text_input(),
    pure(fn(lambda a: a)) * text_input(),
    pure(val(1)).wrap_html("div"),
]


@pytest.mark.parametrize("formlet", FORMLETS)
class TestInstantiation:
    def test_has_formlet_class(self, formlet: Formlet) -> None:
        assert isinstance(formlet, Formlet)

    def test_builder_has_builder_class(self, formlet: Formlet) -> None:
        assert isinstance(_instantiate(formlet).builder, Builder)

    def test_collector_has_collector_class(self, formlet: Formlet) -> None:
        assert isinstance(_instantiate(formlet).collector, Collector)

    def test_name_source_has_name_source_class(self, formlet: Formlet) -> None:
        assert isinstance(_instantiate(formlet).name_source, NameSource)


class TestMapped:
    def test_map(self) -> None:
        inst = _instantiate(pure(val(21)).map(fn(lambda a: a * 2)))
        assert inst.collector.collect({}).get() == 42

    def test_map_bc(self) -> None:
        seen: list[Any] = []

        def on_builder(builder: Builder) -> Builder:
            seen.append(builder)
            return builder

        inst = _instantiate(pure(val(1)).map_bc(fn(on_builder), _id))
        assert seen == [inst.builder]
        assert inst.collector.collect({}).get() == 1

    def test_map_bc_checks_results(self) -> None:
        with pytest.raises(TypeError):
            _instantiate(pure(val(1)).map_bc(fn(lambda b: "nope"), _id))

    def test_map_html_arity(self) -> None:
        with pytest.raises(ArityError):
            pure(val(1)).map_html(_id)

    def test_mapped_once(self) -> None:
        d = RenderDict({"foo": "bar"}, val(0))
        recorded: dict[str, Any] = {}

        def transformation(render_dict: RenderDict, html: HTML) -> HTML:
            recorded["dict"] = render_dict
            recorded["html"] = html
            return html_nop()

        inst = text("foobar").map_html(fn(transformation)).instantiate(NameSource.instantiate("test"))

        r1 = inst.builder.build()
        assert isinstance(recorded["dict"], RenderDict)
        assert isinstance(recorded["html"], HTMLText)
        assert str(recorded["html"].render()) == "foobar"
        assert isinstance(r1, HTMLNop)

        r2 = inst.builder.build_with_dict(d)
        assert recorded["dict"] == d
        assert isinstance(recorded["html"], HTMLText)
        assert str(recorded["html"].render()) == "foobar"
        assert isinstance(r2, HTMLNop)

    def test_mapped_twice(self) -> None:
        d = RenderDict({"foo": "bar"}, val(0))
        first: dict[str, Any] = {}
        second: dict[str, Any] = {}

        def transformation(render_dict: RenderDict, html: HTML) -> HTML:
            first["dict"] = render_dict
            first["html"] = html
            return html_nop()

        def transformation2(render_dict: RenderDict, html: HTML) -> HTML:
            second["dict"] = render_dict
            second["html"] = html
            return html_text("baz")

        formlet = text("foobar").map_html(fn(transformation)).map_html(fn(transformation2))
        inst = formlet.instantiate(NameSource.instantiate("test"))

        for render_dict in (None, d):
            res = inst.builder.build() if render_dict is None else inst.builder.build_with_dict(render_dict)
            assert isinstance(first["dict"], RenderDict)
            assert isinstance(second["dict"], RenderDict)
            if render_dict is not None:
                assert first["dict"] == d
                assert second["dict"] == d
            assert isinstance(first["html"], HTMLText)
            assert isinstance(second["html"], HTMLNop)
            assert str(first["html"].render()) == "foobar"
            assert str(second["html"].render()) == ""
            assert isinstance(res, HTMLText)
            assert str(res.render()) == "baz"


class TestCombination:
    def test_names_are_distinct_and_ordered(self) -> None:
        inst = _instantiate(pure(fn(lambda a, b: (a, b))) * text_input() * text_input())
        assert inst.names == ("test_0", "test_1")
        assert inst.collector.collect({"test_0": "a", "test_1": "b"}).get() == ("a", "b")

    def test_name_source_is_threaded(self) -> None:
        names = NameSource.instantiate("test")
        inst = (text_input().cmb(text_input())).instantiate(names)
        assert inst.name_source is names
        assert names.next() == "test_2"

    def test_text_is_pruned_from_collection(self) -> None:
        formlet = pure(fn(lambda a: a)) * text("Name: ") * text_input()
        inst = _instantiate(formlet)
        assert inst.collector.collect({"test_0": "Ada"}).get() == "Ada"
        assert "Name: " in str(inst.builder.build().render())

    def test_builders_render_in_order(self) -> None:
        inst = _instantiate(text("a") * text("b") * text("c"))
        assert str(inst.builder.build().render()) == "abc"
        assert inst.collector.is_nullary_collector()

    def test_all_errors_reported(self) -> None:
        field = text_input().validate(required)
        inst = _instantiate(pure(fn(lambda a, b: (a, b))) * field * field)
        res = inst.collector.collect({"test_0": "", "test_1": ""})
        assert res.to_dict() == {
            "test_0": "This field is required",
            "test_1": "This field is required",
        }

    def test_stable_names_across_renders(self) -> None:
        inst = _instantiate(pure(fn(lambda a, b: (a, b))) * text_input() * text_input())
        assert str(inst.builder.build().render()) == str(inst.builder.build().render())

    def test_missing_field_is_fatal(self) -> None:
        inst = _instantiate(pure(fn(lambda a, b: (a, b))) * text_input() * text_input())
        with pytest.raises(MissingInputError):
            inst.collector.collect({"test_0": "a"})


class TestValidation:
    def test_satisfies(self) -> None:
        inst = _instantiate(text_input().satisfies(fn(lambda v: v.isdigit()), "digits only"))
        assert inst.collector.collect({"test_0": "12"}).get() == "12"
        assert inst.collector.collect({"test_0": "x"}).to_dict() == {"test_0": "digits only"}

    def test_validate_first_rule_wins(self) -> None:
        inst = _instantiate(text_input().validate(required, integer))
        assert inst.collector.collect({"test_0": ""}).error() == "This field is required"
        assert inst.collector.collect({"test_0": "x"}).error() == "Must be a whole number"
        assert inst.collector.collect({"test_0": "7"}).get() == "7"

    def test_error_origin_routes_to_field(self) -> None:
        inst = _instantiate(text_input().validate(integer))
        value = inst.collector.collect({"test_0": "x"})
        assert RenderDict({"test_0": "x"}, value).errors("test_0") == "Must be a whole number"

    def test_map_after_validate_keeps_errors(self) -> None:
        inst = _instantiate(text_input().validate(integer).map(fn(int, 1)))
        assert inst.collector.collect({"test_0": "5"}).get() == 5
        assert inst.collector.collect({"test_0": "x"}).is_error()

    def test_error_values_pass_through_pure(self) -> None:
        inst = _instantiate(pure(error("always", "nowhere")))
        assert inst.collector.collect({}).to_dict() == {"nowhere": "always"}


class TestWrapHtml:
    def test_surrounds_output(self) -> None:
        inst = _instantiate(text("x").wrap_html("div", {"class": "row"}))
        assert str(inst.builder.build().render()) == '<div class="row">x</div>'
