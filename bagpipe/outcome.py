"""Step outcomes: exactly one of continue, halt or failed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import StepError

ErrorT = TypeVar("ErrorT", bound=StepError)


@dataclass(frozen=True, slots=True)
class Continue:
    """The pipeline moves on to the next step."""


@dataclass(frozen=True, slots=True)
class Halt:
    """The pipeline stops scanning and reports success."""


@dataclass(frozen=True, slots=True)
class Failed(Generic[ErrorT]):
    """The pipeline stops scanning and reports ``error``."""

    error: ErrorT


StepOutcome = Union[Continue, Halt, Failed]
