"""Formlets exception hierarchy.

Only structural faults are raised. User-facing validation failures are
``ErrorValue`` results, never exceptions, so a form can show every
invalid field at once.
"""

from dataclasses import dataclass


class FormletError(Exception):
    """Base for all formlets-specific errors."""


class ConfigurationError(FormletError):
    """Raised when a formlet piece is constructed with invalid arguments.

    Typically raised while a form is being declared, before any input
    is collected.
    """


@dataclass(frozen=True, slots=True)
class MissingInputError(FormletError):
    """A field the collector was instantiated with is absent from the input.

    Points at a mismatch between the form definition and the submitted
    request (stale or forged form), not at a user mistake.
    """

    name: str

    def __str__(self) -> str:
        return f"Missing input {self.name}."


class NullaryCollectError(FormletError):
    """``collect`` was called on the nullary collector."""


class InvalidAccessError(FormletError):
    """A payload was requested from a value that does not carry one."""


class ApplyError(FormletError):
    """``apply`` was called on a value that is not a function."""


class ArityError(FormletError):
    """A function value has the wrong number of parameters for its use."""
