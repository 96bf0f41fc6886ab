"""Step base: one unit of processing with a three-way outcome.

Authors subclass :class:`Step`, implement :meth:`Step.process`, and end it by
returning one of the outcome helpers::

    class ValidateStep(Step[OrderBag, OrderError]):
        name = "validate"
        error_type = OrderError

        async def process(self, bag: OrderBag) -> OrderBag:
            if not bag.items:
                return self.fail(OrderError(message="empty order", code="A1"))
            return self.proceed(bag)

A ``process`` that returns without calling a helper leaves the outcome at
:class:`~bagpipe.outcome.Halt`, so a forgotten helper never lets the
pipeline run on.
"""

from __future__ import annotations

import inspect
import logging
import traceback
from abc import ABC, abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Generic,
    Optional,
    TypeVar,
)

from .context import RunContext
from .errors import (
    PipelineError,
    StepAttachmentError,
    StepError,
    project_base_fields,
    required_extra_fields,
    stamp_step,
)
from .outcome import Continue, Failed, Halt, StepOutcome

if TYPE_CHECKING:
    from .pipeline import Pipeline

logger = logging.getLogger(__name__)

BagT = TypeVar("BagT")
ErrorT = TypeVar("ErrorT", bound=StepError)


class Step(ABC, Generic[BagT, ErrorT]):
    """Abstract pipeline step.

    Attributes:
        name: Identifier used for error attribution, set on the class or the
            instance.  Defaults to the class name when left unset.
        error_type: ``StepError`` subclass this step reports (class only).
            Errors built from unhandled exceptions are projected onto it, so
            every field it adds must have a default; a subclass declaring
            one without raises ``PipelineError``.
    """

    name: Optional[str] = None
    error_type: ClassVar[type[StepError]] = StepError

    # Per-instance state, assigned on first use so subclasses need not call
    # ``super().__init__()``.
    _pipeline: Optional["Pipeline[Any]"] = None
    _outcome: StepOutcome = Halt()
    _bag: Any = None
    _context: Optional[RunContext] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        missing = required_extra_fields(cls.error_type)
        if missing:
            raise PipelineError(
                f"{cls.__name__}.error_type {cls.error_type.__name__} has fields "
                f"without defaults: {', '.join(missing)}"
            )

    # ------------------------------------------------------------------
    # Author-facing API
    # ------------------------------------------------------------------

    @abstractmethod
    def process(self, bag: BagT) -> BagT:
        """Transform *bag* and declare an outcome via one of the helpers.

        May be a plain method or a coroutine function.
        """
        ...

    def proceed(self, bag: BagT) -> BagT:
        """Let the pipeline continue with the next step."""
        self._outcome = Continue()
        self._bag = bag
        return bag

    def halt(self, bag: BagT) -> BagT:
        """Stop the pipeline without an error."""
        self._outcome = Halt()
        self._bag = bag
        return bag

    def fail(self, error: ErrorT) -> BagT:
        """Stop the pipeline with *error*.

        Every field set on *error* is kept; only ``step`` is stamped.
        Returns the bag this step was handed.
        """
        if not isinstance(error, StepError):
            raise TypeError(
                f"fail() expects a StepError, got {type(error).__name__}"
            )
        stamped = stamp_step(error, self._active_step_name())
        self._outcome = Failed(stamped)
        logger.warning(
            "Step %s failed: %s", stamped.step, stamped.message
        )
        return self._bag

    # ------------------------------------------------------------------
    # Pipeline-facing API
    # ------------------------------------------------------------------

    @property
    def step_name(self) -> str:
        return self.name or type(self).__name__

    @property
    def outcome(self) -> StepOutcome:
        """Outcome of the most recent execution."""
        return self._outcome

    @property
    def error(self) -> Optional[ErrorT]:
        if isinstance(self._outcome, Failed):
            return self._outcome.error
        return None

    @property
    def pipeline(self) -> Optional["Pipeline[Any]"]:
        return self._pipeline

    def attach(self, pipeline: "Pipeline[Any]") -> None:
        """Bind this step to *pipeline*.  A step belongs to one pipeline."""
        if self._pipeline is not None and self._pipeline is not pipeline:
            raise StepAttachmentError(
                f"Step {self.step_name} is already attached to another pipeline"
            )
        self._pipeline = pipeline

    async def execute(self, bag: BagT, context: RunContext) -> BagT:
        """Run :meth:`process` and record its outcome.

        Exceptions raised by ``process`` are not propagated: they become a
        ``Failed`` outcome carrying a bare ``error_type`` instance flagged
        as unhandled.  Returns the last bag produced before the outcome was
        declared or the exception was raised.
        """
        if self._pipeline is None or self._pipeline is not context.pipeline:
            raise StepAttachmentError(
                f"Step {self.step_name} is not attached to the running pipeline"
            )

        self._bag = bag
        self._context = context
        self._outcome = Halt()

        try:
            result = self.process(bag)
            if inspect.isawaitable(result):
                result = await result
            if result is None:
                logger.debug(
                    "Step %s returned None, keeping the last declared bag",
                    self.step_name,
                )
            else:
                self._bag = result
        except Exception as exc:
            self._outcome = Failed(self._unhandled_error(exc, context))
            logger.warning(
                "Unhandled error in step %s: %s",
                context.active_step_name,
                exc,
                exc_info=True,
            )
        finally:
            self._context = None

        return self._bag

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _active_step_name(self) -> str:
        if self._context is not None:
            return self._context.active_step_name
        return self.step_name

    def _unhandled_error(self, exc: Exception, context: RunContext) -> StepError:
        message = f"{type(exc).__name__}: {exc}"
        if context.config.include_traceback:
            message += "\n" + "".join(traceback.format_exception(exc))
        error = StepError(
            step=context.active_step_name,
            message=message,
            is_unhandled=True,
        )
        return project_base_fields(error, self.error_type)
