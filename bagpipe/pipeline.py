"""Pipeline that drives steps in registration order over a single bag."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Generic, Iterable, List, Optional, Self, Tuple, TypeVar

from .config import PipelineConfig
from .context import RunContext
from .errors import MissingBagError, StepError
from .outcome import Failed, Halt
from .result import ExecutionResult
from .step import Step

logger = logging.getLogger(__name__)

BagT = TypeVar("BagT")


class Pipeline(Generic[BagT]):
    """Ordered, resumable sequence of steps sharing one bag.

    The cursor (:attr:`index`) only moves past steps that declared
    ``Continue``.  Once a step fails or halts, later calls to
    :meth:`execute_async` re-report that terminal outcome without running
    anything again; build a fresh pipeline to retry.

    Not safe for concurrent ``execute_async`` calls on the same instance.

    Args:
        bag: Initial bag.  Must not be *None*.
        config: Run settings (defaults to :class:`PipelineConfig`).
    """

    def __init__(
        self, bag: Optional[BagT], *, config: Optional[PipelineConfig] = None
    ) -> None:
        if bag is None:
            raise MissingBagError("Pipeline requires an initial bag")
        self.config = config or PipelineConfig()
        self._bag: BagT = bag
        self._steps: List[Step[BagT, Any]] = []
        self._index = 0
        self._current_step: Optional[Step[BagT, Any]] = None

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def add_step(self, step: Step[BagT, Any]) -> Self:
        """Attach *step* to this pipeline and append it.  Returns self."""
        step.attach(self)
        self._steps.append(step)
        return self

    def add_steps(self, steps: Iterable[Step[BagT, Any]]) -> Self:
        """Attach and append each of *steps*, in order.  Returns self."""
        for step in steps:
            self.add_step(step)
        return self

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def steps(self) -> Tuple[Step[BagT, Any], ...]:
        return tuple(self._steps)

    @property
    def index(self) -> int:
        """Position of the next step to run."""
        return self._index

    @property
    def current_step(self) -> Optional[Step[BagT, Any]]:
        """Most recently executed step, if any."""
        return self._current_step

    @property
    def bag(self) -> BagT:
        return self._bag

    def __len__(self) -> int:
        return len(self._steps)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute_async(self) -> ExecutionResult[BagT, StepError]:
        """Run the remaining steps and return the outcome."""
        last = self._current_step
        if last is not None:
            if isinstance(last.outcome, Failed):
                logger.debug(
                    "%s: re-reporting failure of step %s",
                    self.config.name,
                    last.outcome.error.step,
                )
                return ExecutionResult(False, self._bag, last.outcome.error)
            if isinstance(last.outcome, Halt):
                logger.debug(
                    "%s: re-reporting halt at step %s",
                    self.config.name,
                    last.step_name,
                )
                return ExecutionResult(True, self._bag, None)

        steps = tuple(self._steps)
        while self._index < len(steps):
            step = steps[self._index]
            context = RunContext(
                pipeline=self,
                steps=steps,
                index=self._index,
                config=self.config,
            )
            logger.debug(
                "%s: running step %d/%d (%s)",
                self.config.name,
                self._index + 1,
                len(steps),
                step.step_name,
            )

            self._bag = await step.execute(self._bag, context)
            self._current_step = step
            outcome = step.outcome
            logger.debug(
                "%s: step %s finished with %s",
                self.config.name,
                step.step_name,
                type(outcome).__name__,
            )

            if isinstance(outcome, Failed):
                logger.info(
                    "%s: failed at step %s", self.config.name, outcome.error.step
                )
                return ExecutionResult(False, self._bag, outcome.error)

            if isinstance(outcome, Halt):
                logger.info(
                    "%s: halted at step %s", self.config.name, step.step_name
                )
                return ExecutionResult(True, self._bag, None)

            logger.debug(
                "%s: cursor advanced to %d", self.config.name, self._index + 1
            )
            self._index += 1

        logger.info(
            "%s: completed %d step(s)", self.config.name, len(steps)
        )
        return ExecutionResult(True, self._bag, None)

    def execute(self) -> ExecutionResult[BagT, StepError]:
        """Synchronous wrapper around :meth:`execute_async`.

        Runs on a fresh event loop, so it cannot be called from inside one.
        """
        return asyncio.run(self.execute_async())
