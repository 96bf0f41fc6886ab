"""Bag base, the data container carried from step to step."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Self


@dataclass(frozen=True)
class Bag:
    """Frozen base for application bags.

    The pipeline never reads a bag's fields, so any non-``None`` object is
    accepted.  Subclassing ``Bag`` is a convenience: applications add named
    fields, and steps call ``.replace()`` to produce the next bag instead of
    mutating the one they were handed.
    """

    def replace(self, **changes: Any) -> Self:
        """Return a new bag with the given fields replaced."""
        return dataclasses.replace(self, **changes)
