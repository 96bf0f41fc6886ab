"""Sequential step pipeline over a shared bag, with no domain concepts.

Public surface::

    from bagpipe import (
        Pipeline,
        PipelineConfig,
        Step,
        Bag,
        RunContext,
        ExecutionResult,
        StepError,
        Continue,
        Halt,
        Failed,
        StepOutcome,
        PipelineError,
        MissingBagError,
        StepAttachmentError,
    )
"""

from .bag import Bag
from .config import PipelineConfig
from .context import RunContext
from .errors import (
    MissingBagError,
    PipelineError,
    StepAttachmentError,
    StepError,
    project_base_fields,
    required_extra_fields,
    stamp_step,
)
from .outcome import Continue, Failed, Halt, StepOutcome
from .pipeline import Pipeline
from .result import ExecutionResult
from .step import Step

__all__ = [
    "Pipeline",
    "PipelineConfig",
    "Step",
    "Bag",
    "RunContext",
    "ExecutionResult",
    "StepError",
    "project_base_fields",
    "required_extra_fields",
    "stamp_step",
    "Continue",
    "Halt",
    "Failed",
    "StepOutcome",
    "PipelineError",
    "MissingBagError",
    "StepAttachmentError",
]
