"""Forms — a formlet bound to a form id, with a display/process cycle.

The formlet is instantiated once, when the ``Form`` is created, so its
field names are fixed for the lifetime of the form. Typical use in a
request handler::

    form = Form(signup, action="/signup", form_id="signup")
    if not form.was_submitted(request_form):
        return page(form.display())
    value = form.process(request_form)
    if value.is_error():
        return page(form.display())  # shows inputs and errors
    create_user(form.result())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from formlets.builders import RenderDict
from formlets.config import FormletConfig
from formlets.errors import InvalidAccessError
from formlets.formlet import Formlet, FormletInstance
from formlets.html import HTML, html_concat, html_tag
from formlets.names import NameSource
from formlets.values import Value, val

logger = logging.getLogger("formlets.form")


class Form:
    """One instantiated formlet plus the state of its last submission."""

    __slots__ = ("_action", "_config", "_form_id", "_inputs", "_instance", "_marker", "_result")

    def __init__(
        self,
        formlet: Formlet,
        action: str = "",
        *,
        form_id: str | None = None,
        config: FormletConfig | None = None,
    ) -> None:
        self._config = config or FormletConfig()
        self._form_id = form_id or self._config.name_prefix
        self._action = action
        names = NameSource.instantiate(self._form_id)
        self._instance = formlet.instantiate(names)
        # Drawn after the fields, so it never collides with one
        self._marker = names.next()
        self._inputs: dict[str, Any] = {}
        self._result: Value | None = None

    @property
    def form_id(self) -> str:
        return self._form_id

    @property
    def instance(self) -> FormletInstance:
        return self._instance

    def was_submitted(self, inputs: Mapping[str, Any]) -> bool:
        """True if *inputs* were posted by this form."""
        return self._marker in inputs

    def process(self, inputs: Mapping[str, Any]) -> Value:
        """Collect *inputs* and remember them for the next ``display()``.

        Raises:
            MissingInputError: If *inputs* lack a field of this form.
        """
        collector = self._instance.collector
        if collector.is_nullary_collector():
            result = val(None)
        else:
            result = collector.collect(inputs).force()
        self._inputs = dict(inputs)
        self._result = result
        if result.is_error():
            logger.debug(
                "form %s has errors on %s",
                self._form_id,
                ", ".join(sorted(str(origin) for origin in result.to_dict())),
            )
        else:
            logger.debug("form %s processed", self._form_id)
        return result

    def display(self) -> HTML:
        """Render the ``<form>``, with prior inputs and errors once processed."""
        if self._result is None:
            render_dict = RenderDict.empty()
        else:
            render_dict = RenderDict(self._inputs, self._result)
        parts = [
            self._instance.builder.build_with_dict(render_dict),
            html_tag("input", {"type": "hidden", "name": self._marker, "value": "1"}),
        ]
        if self._config.submit_label is not None:
            parts.append(html_tag("input", {"type": "submit", "value": self._config.submit_label}))
        attributes = {"id": self._form_id, "method": self._config.method, "action": self._action}
        return html_tag("form", attributes, html_concat(*parts))

    def render(self) -> str:
        """Shorthand for ``display().render()``."""
        return self.display().render()

    def result(self) -> Any:
        """Payload of the last successful ``process``.

        Raises:
            InvalidAccessError: If nothing was processed yet or it failed.
        """
        if self._result is None:
            msg = f"Invalid access: form {self._form_id!r} was not processed."
            raise InvalidAccessError(msg)
        return self._result.get()

    def errors(self) -> dict[str | None, str]:
        """Origin → message mapping of the last ``process``."""
        if self._result is None or not self._result.is_error():
            return {}
        return self._result.to_dict()
