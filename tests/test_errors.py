"""Tests for StepError, stamping and base-field projection."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bagpipe import (
    MissingBagError,
    PipelineError,
    StepAttachmentError,
    StepError,
    project_base_fields,
    required_extra_fields,
    stamp_step,
)


class CustomError(StepError):
    code: str = ""
    severity: int = 0


# ------------------------------------------------------------------ #
# StepError
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestStepError:
    def test_defaults(self):
        err = StepError()
        assert err.step is None
        assert err.message == ""
        assert err.is_unhandled is False

    def test_is_frozen(self):
        err = StepError(message="boom")
        with pytest.raises(ValidationError):
            err.step = "other"

    def test_subclass_keeps_base_fields(self):
        err = CustomError(message="Users not found", code="A1", severity=1)
        assert err.message == "Users not found"
        assert err.code == "A1"
        assert err.step is None
        assert err.is_unhandled is False


# ------------------------------------------------------------------ #
# stamp_step
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestStampStep:
    def test_sets_step_and_keeps_custom_fields(self):
        err = CustomError(message="bad", code="A1", severity=2)
        stamped = stamp_step(err, "validate")

        assert isinstance(stamped, CustomError)
        assert stamped.step == "validate"
        assert stamped.message == "bad"
        assert stamped.code == "A1"
        assert stamped.severity == 2

    def test_returns_copy(self):
        err = CustomError(message="bad")
        stamped = stamp_step(err, "validate")
        assert stamped is not err
        assert err.step is None


# ------------------------------------------------------------------ #
# project_base_fields
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestProjectBaseFields:
    def test_drops_custom_fields(self):
        rich = CustomError(
            step="load", message="boom", is_unhandled=True, code="A1", severity=3
        )
        bare = project_base_fields(rich, CustomError)

        assert isinstance(bare, CustomError)
        assert bare.step == "load"
        assert bare.message == "boom"
        assert bare.is_unhandled is True
        assert bare.code == ""
        assert bare.severity == 0

    def test_base_error_into_subclass(self):
        base = StepError(step="load", message="boom", is_unhandled=True)
        projected = project_base_fields(base, CustomError)

        assert type(projected) is CustomError
        assert projected.code == ""

    def test_into_base_type(self):
        rich = CustomError(step="load", message="boom", code="A1")
        projected = project_base_fields(rich, StepError)

        assert type(projected) is StepError
        assert projected.model_dump() == {
            "step": "load",
            "message": "boom",
            "is_unhandled": False,
        }


# ------------------------------------------------------------------ #
# Engine exceptions
# ------------------------------------------------------------------ #


@pytest.mark.unit
class TestEngineExceptions:
    def test_missing_bag_is_value_error(self):
        assert issubclass(MissingBagError, PipelineError)
        assert issubclass(MissingBagError, ValueError)

    def test_attachment_error_is_pipeline_error(self):
        assert issubclass(StepAttachmentError, PipelineError)


@pytest.mark.unit
class TestRequiredExtraFields:
    def test_defaults_everywhere(self):
        assert required_extra_fields(StepError) == []
        assert required_extra_fields(CustomError) == []

    def test_reports_required_fields(self):
        class StrictError(StepError):
            code: str
            region: str
            severity: int = 0

        assert required_extra_fields(StrictError) == ["code", "region"]
