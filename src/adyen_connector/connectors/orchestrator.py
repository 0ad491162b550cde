"""Sequencing of primitive operations into composite operations.

A composite operation (purchase, verify) is a list of steps run strictly in
order. Each step receives the running authorization token produced by the
steps before it. A failed step stops every later step that is not marked
``ignore_result``. Ignore-result steps always run and never affect the
reported outcome.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from ..errors import PreconditionError
from .models import CanonicalOutcome

logger = logging.getLogger(__name__)

MISSING_REFERENCE_MESSAGE = "Transaction reference missing from successful response"


class ResultSelection(str, Enum):
    """Which step's outcome a composite operation reports."""
    LAST_STEP = "last_step"
    FIRST_STEP = "first_step"


@dataclass
class Step:
    """One primitive call within a composite operation."""
    call: Callable[[str], CanonicalOutcome]
    ignore_result: bool = False


class MultiStepRun:
    """Runs a list of steps and keeps the policy-selected outcome."""

    def __init__(self, selection: ResultSelection = ResultSelection.LAST_STEP):
        self.selection = selection
        self.outcomes: List[CanonicalOutcome] = []
        self.primary: Optional[CanonicalOutcome] = None

    @property
    def authorization(self) -> str:
        """Running authorization token handed to the next step."""
        return self.primary.authorization if self.primary else ""

    @property
    def success(self) -> bool:
        return self.primary is not None and self.primary.success

    def run(self, steps: Sequence[Step]) -> CanonicalOutcome:
        """Run ``steps`` in order and return the selected outcome.

        Raises:
            ValueError: If no step reports a result.
        """
        halted = False
        for index, step in enumerate(steps):
            if step.ignore_result:
                self._run_ignored(step)
                continue
            if halted:
                logger.debug(f"Skipping step {index} after an earlier failure")
                continue

            outcome = step.call(self.authorization)
            self.outcomes.append(outcome)
            self._select(outcome)

            if not outcome.success:
                halted = True
            elif not outcome.authorization and self._has_dependent_step(steps, index):
                logger.warning(
                    f"Step {index} succeeded without a transaction reference; "
                    "halting dependent steps"
                )
                self.primary = outcome.model_copy(
                    update={"success": False, "message": MISSING_REFERENCE_MESSAGE}
                )
                halted = True

        if self.primary is None:
            raise ValueError("A composite operation needs at least one reported step")
        return self.primary

    def _select(self, outcome: CanonicalOutcome) -> None:
        if self.selection == ResultSelection.FIRST_STEP and self.primary is not None:
            return
        self.primary = outcome

    def _run_ignored(self, step: Step) -> None:
        try:
            outcome = step.call(self.authorization)
        except PreconditionError as e:
            logger.warning(f"Ignore-result step not sent: {e}")
            outcome = CanonicalOutcome(success=False, message=str(e))
        except Exception as e:
            logger.exception("Ignore-result step failed")
            outcome = CanonicalOutcome(success=False, message=str(e) or type(e).__name__)
        self.outcomes.append(outcome)

    @staticmethod
    def _has_dependent_step(steps: Sequence[Step], index: int) -> bool:
        return any(not step.ignore_result for step in steps[index + 1:])
