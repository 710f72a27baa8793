"""Form configuration.

Settings for ``Form``. A frozen dataclass, so the way a form renders
cannot change once it is created.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormletConfig:
    """Form configuration. Immutable after creation.

    Override what you need::

        config = FormletConfig(method="get", submit_label="Save")
    """

    # Naming
    name_prefix: str = "formlet"  # Used when a form has no explicit id

    # Rendering
    method: str = "post"
    submit_label: str | None = None  # Append a submit button when set
