"""Step bookkeeping for the setup wizard.

``WizardStateMachine`` only answers "which step comes next for this event"
using the ``TRANSITIONS`` table.  Whether a step is complete enough to leave,
and which country is being configured, is decided by ``CampaignWizard``.
"""

from __future__ import annotations

import structlog

from campaign_planner.domain.errors import InvalidTransitionError
from campaign_planner.domain.types import WizardStep
from campaign_planner.wizard.transitions import TERMINAL_STEPS, TRANSITIONS

logger = structlog.get_logger()

Transition = tuple[WizardStep, str, WizardStep]


class WizardStateMachine:
    """Current wizard step plus the log of events that led to it.

    Usage::

        steps = WizardStateMachine()
        steps.trigger("next")       # COUNTRIES -> BUDGET
        steps.trigger("previous")   # BUDGET -> COUNTRIES
    """

    def __init__(self, initial_step: WizardStep = WizardStep.COUNTRIES) -> None:
        self._step: WizardStep = initial_step
        self._history: list[Transition] = []

    @classmethod
    def from_snapshot(cls, step: WizardStep, history: list[Transition]) -> WizardStateMachine:
        """Resume a wizard saved mid-setup at *step* with its past transitions."""
        machine = cls(initial_step=step)
        machine._history = list(history)
        return machine

    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def is_terminal(self) -> bool:
        """True once the last country is finished."""
        return self._step in TERMINAL_STEPS

    @property
    def history(self) -> list[Transition]:
        """``(from_step, event, to_step)`` entries, oldest first."""
        return list(self._history)

    def trigger(self, event: str) -> WizardStep:
        """Move to the step *event* leads to from the current one.

        Raises:
            InvalidTransitionError: If the table has no edge for *event* here,
                or the wizard is already complete.
        """
        if self.is_terminal:
            raise InvalidTransitionError(self._step, event)

        target = TRANSITIONS.get((self._step, event))
        if target is None:
            raise InvalidTransitionError(self._step, event)

        source = self._step
        self._history.append((source, event, target))
        self._step = target
        logger.debug("wizard_transition", from_step=source.value, event=event, to_step=target.value)
        return target

    def can_trigger(self, event: str) -> bool:
        return not self.is_terminal and (self._step, event) in TRANSITIONS

    def get_valid_events(self) -> list[str]:
        """Events with an edge out of the current step, alphabetically; none when complete."""
        if self.is_terminal:
            return []
        return sorted(event for step, event in TRANSITIONS if step == self._step)
