"""Outcome snapshot of a single pipeline run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import StepError

BagT = TypeVar("BagT")
ErrorT = TypeVar("ErrorT", bound=StepError)


@dataclass(frozen=True)
class ExecutionResult(Generic[BagT, ErrorT]):
    """Immutable result of ``Pipeline.execute_async``.

    Attributes:
        success: False only when a step failed (explicitly or through an
            unhandled exception).  An explicit halt is a success.
        bag: The bag as of the point where the run stopped.
        error: The failing step's error, or *None*.
    """

    success: bool
    bag: BagT
    error: Optional[ErrorT] = None

    @property
    def failed_step(self) -> Optional[str]:
        """Identifier of the step the error is attributed to, if any."""
        return self.error.step if self.error is not None else None
