"""Name sources — unique field names for one formlet instantiation.

The builder and the collector of a field are created from the same
``next()`` call, so they agree on the field name by construction::

    names = NameSource.instantiate("signup")
    names.next()  # "signup_0"
    names.next()  # "signup_1"
"""

from __future__ import annotations

from formlets.errors import ConfigurationError


class NameSource:
    """Counter-backed generator of ``<prefix>_<n>`` names.

    Scoped to one instantiation; never shared between forms.
    """

    __slots__ = ("_count", "_prefix")

    def __init__(self, prefix: str) -> None:
        if not prefix:
            msg = "A name source needs a non-empty prefix."
            raise ConfigurationError(msg)
        self._prefix = prefix
        self._count = 0

    @classmethod
    def instantiate(cls, prefix: str) -> NameSource:
        """Create a root name source."""
        return cls(prefix)

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def count(self) -> int:
        """Number of names handed out so far."""
        return self._count

    def next(self) -> str:
        """Return a fresh name. Never repeats within this source."""
        name = f"{self._prefix}_{self._count}"
        self._count += 1
        return name

    def __repr__(self) -> str:
        return f"NameSource({self._prefix!r}, count={self._count})"
