"""Step errors and engine exceptions."""

from __future__ import annotations

from typing import Optional, TypeVar

from pydantic import BaseModel, ConfigDict

ErrorT = TypeVar("ErrorT", bound="StepError")

BASE_FIELDS = frozenset({"step", "message", "is_unhandled"})


class StepError(BaseModel):
    """Structured failure reported by a step.

    Applications subclass this to carry extra fields (codes, severity, ...).
    Extra fields must have defaults: errors synthesized from unhandled
    exceptions are built from the base fields alone.

    Attributes:
        step: Identifier of the step that was active when the error was
            recorded.  Stamped by the engine, never by the step author.
        message: Human-readable description.
        is_unhandled: True when the error was synthesized from an exception
            that escaped ``Step.process`` rather than passed to ``Step.fail``.
    """

    model_config = ConfigDict(frozen=True)

    step: Optional[str] = None
    message: str = ""
    is_unhandled: bool = False


def stamp_step(error: ErrorT, step: str) -> ErrorT:
    """Return a copy of *error* attributed to *step*, all other fields kept."""
    return error.model_copy(update={"step": step})


def required_extra_fields(error_type: type[StepError]) -> list[str]:
    """Names of fields *error_type* adds on top of the base ones without a default."""
    return sorted(
        name
        for name, info in error_type.model_fields.items()
        if name not in BASE_FIELDS and info.is_required()
    )


def project_base_fields(error: StepError, error_type: type[ErrorT]) -> ErrorT:
    """Project *error* onto the base fields as an instance of *error_type*.

    Only ``step``, ``message`` and ``is_unhandled`` are carried over; every
    field *error_type* adds is left at its default.
    """
    return error_type.model_validate(error.model_dump(include=set(BASE_FIELDS)))


class PipelineError(Exception):
    """Base error for misuse of the pipeline engine."""


class MissingBagError(PipelineError, ValueError):
    """Raised when a pipeline is constructed without an initial bag."""


class StepAttachmentError(PipelineError):
    """Raised when a step is bound to, or run by, the wrong pipeline."""
