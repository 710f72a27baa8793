"""Minimal HTML tree with an escaping printer.

Builders produce these trees; ``render()`` prints them to kida
``Markup`` so the output can be handed to a kida template without
being escaped a second time::

    html_tag("input", {"type": "text", "name": "f_0", "value": "<b>"}).render()
    # Markup('<input type="text" name="f_0" value="&lt;b&gt;"/>')
"""

from __future__ import annotations

import html
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from kida.template import Markup


class HTML(ABC):
    """Base for all HTML nodes."""

    __slots__ = ()

    @abstractmethod
    def render(self) -> Markup:
        """Print this node."""

    def __html__(self) -> str:
        return str(self.render())


@dataclass(frozen=True, slots=True)
class HTMLNop(HTML):
    """Renders to nothing."""

    def render(self) -> Markup:
        return Markup("")


@dataclass(frozen=True, slots=True)
class HTMLText(HTML):
    """Plain text, escaped on render."""

    text: str

    def render(self) -> Markup:
        return Markup(html.escape(self.text, quote=False))


@dataclass(frozen=True, slots=True)
class HTMLRaw(HTML):
    """Trusted markup, rendered verbatim."""

    markup: str

    def render(self) -> Markup:
        return Markup(self.markup)


@dataclass(frozen=True, slots=True)
class HTMLTag(HTML):
    """A single element. ``content=None`` renders a self-closing tag."""

    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)
    content: HTML | None = None

    def render(self) -> Markup:
        attrs = render_attributes(self.attributes)
        if self.content is None:
            return Markup(f"<{self.name}{attrs}/>")
        return Markup(f"<{self.name}{attrs}>{self.content.render()}</{self.name}>")


@dataclass(frozen=True, slots=True)
class HTMLConcat(HTML):
    """Siblings rendered left to right."""

    items: tuple[HTML, ...]

    def render(self) -> Markup:
        return Markup("".join(str(item.render()) for item in self.items))


def render_attributes(attributes: Mapping[str, Any]) -> str:
    """Print attributes with a leading space each.

    ``None`` and ``False`` drop the attribute, ``True`` prints it bare.
    """
    parts: list[str] = []
    for name, value in attributes.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value), quote=True)}"')
    return "".join(parts)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def html_nop() -> HTMLNop:
    return HTMLNop()


def html_text(text: str) -> HTMLText:
    return HTMLText(str(text))


def html_raw(markup: str) -> HTMLRaw:
    return HTMLRaw(str(markup))


def html_tag(
    name: str,
    attributes: Mapping[str, Any] | None = None,
    content: HTML | None = None,
) -> HTMLTag:
    if not name:
        msg = "An HTML tag needs a name."
        raise ValueError(msg)
    if content is not None:
        guard_is_html(content)
    return HTMLTag(name, dict(attributes or {}), content)


def html_concat(*items: HTML) -> HTML:
    """Concatenate nodes, dropping nops and flattening nested concats."""
    flat: list[HTML] = []
    for item in items:
        guard_is_html(item)
        if isinstance(item, HTMLNop):
            continue
        if isinstance(item, HTMLConcat):
            flat.extend(item.items)
        else:
            flat.append(item)
    if not flat:
        return HTMLNop()
    if len(flat) == 1:
        return flat[0]
    return HTMLConcat(tuple(flat))


def guard_is_html(obj: Any) -> None:
    """Raise ``TypeError`` unless *obj* is an HTML node."""
    if not isinstance(obj, HTML):
        msg = f"Expected HTML, got {type(obj).__name__}: {obj!r}"
        raise TypeError(msg)
