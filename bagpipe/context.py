"""Immutable run context handed to a step on every invocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Tuple

from .config import PipelineConfig

if TYPE_CHECKING:
    from .pipeline import Pipeline
    from .step import Step


@dataclass(frozen=True)
class RunContext:
    """Snapshot of the pipeline's cursor at the moment a step is invoked.

    Steps use it to resolve which step the pipeline considers active when an
    error has to be attributed, instead of reading live pipeline state.
    """

    pipeline: "Pipeline[Any]"
    steps: Tuple["Step[Any, Any]", ...]
    index: int
    config: PipelineConfig

    @property
    def active_step(self) -> "Step[Any, Any]":
        return self.steps[self.index]

    @property
    def active_step_name(self) -> str:
        return self.active_step.step_name
