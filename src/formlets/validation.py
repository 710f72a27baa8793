"""Built-in validation rules for formlets.

A rule takes the collected value and returns an error message, or
``None`` if the value is fine::

    def rule(value: Any) -> str | None: ...

Parameterized rules are factories returning a rule. Rules plug into
``Formlet.validate``; a returned message becomes an ``ErrorValue`` at
the field the value came from::

    text_input().validate(required, max_length(200))

Collected values are usually strings. Rules compare their text form so
they also accept the booleans of a checkbox or an already mapped value.
"""

import re
from collections.abc import Callable
from typing import Any

type Validator = Callable[[Any], str | None]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def rule(predicate: Callable[[Any], bool], message: str) -> Validator:
    """Build a rule from a boolean *predicate* and its failure *message*."""

    def check(value: Any) -> str | None:
        if not predicate(value):
            return message
        return None

    return check


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: Any) -> str | None:
    """Field must be non-empty (``False`` counts as empty)."""
    if value is False or not _as_text(value).strip():
        return "This field is required"
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int) -> Validator:
    """Text must be at most *n* characters."""

    def check(value: Any) -> str | None:
        if len(_as_text(value)) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Validator:
    """Text must be at least *n* characters."""

    def check(value: Any) -> str | None:
        if len(_as_text(value)) < n:
            return f"Must be at least {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def email(value: Any) -> str | None:
    """Value must look like an email address."""
    if not _EMAIL_RE.match(_as_text(value)):
        return "Must be a valid email address"
    return None


def url(value: Any) -> str | None:
    """Value must be an http or https URL."""
    if not _URL_RE.match(_as_text(value)):
        return "Must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Validator:
    """Value must match *pattern* from its start."""
    compiled = re.compile(pattern)
    return rule(
        lambda value: compiled.match(_as_text(value)) is not None,
        message or f"Must match pattern: {pattern}",
    )


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: str) -> Validator:
    """Value must be one of *choices*."""
    allowed = frozenset(choices)
    options = ", ".join(sorted(allowed))
    return rule(lambda value: _as_text(value) in allowed, f"Must be one of: {options}")


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def integer(value: Any) -> str | None:
    """Value must parse as an integer."""
    try:
        int(_as_text(value))
    except ValueError:
        return "Must be a whole number"
    return None


def number(value: Any) -> str | None:
    """Value must parse as a number (int or float)."""
    try:
        float(_as_text(value))
    except ValueError:
        return "Must be a number"
    return None
