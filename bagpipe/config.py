"""Configuration for pipeline runs."""

from dataclasses import dataclass


@dataclass
class PipelineConfig:
    """Settings shared by a pipeline and the steps it drives.

    Attributes:
        name: Label used in log lines (default: "pipeline")
        include_traceback: Append the formatted traceback to the message of
            errors synthesized from unhandled exceptions (default: False)
    """

    name: str = "pipeline"
    include_traceback: bool = False
