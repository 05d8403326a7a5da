"""Step graph of the setup wizard as a (step, event) -> step table."""

from enum import StrEnum

from campaign_planner.domain.types import WIZARD_STEPS, WizardStep


class WizardEvent(StrEnum):
    """Events that move the setup wizard between steps."""

    NEXT = "next"
    PREVIOUS = "previous"
    NEXT_COUNTRY = "next_country"
    FINISH = "finish"


def _build_transitions() -> dict[tuple[WizardStep, str], WizardStep]:
    transitions: dict[tuple[WizardStep, str], WizardStep] = {}
    for index, step in enumerate(WIZARD_STEPS):
        if step is not WizardStep.REVIEW:
            transitions[(step, WizardEvent.NEXT)] = WIZARD_STEPS[index + 1]
        transitions[(step, WizardEvent.PREVIOUS)] = WIZARD_STEPS[max(index - 1, 0)]
    # Loop back to platform selection for the next country of a multi-country campaign
    transitions[(WizardStep.REVIEW, WizardEvent.NEXT_COUNTRY)] = WizardStep.PLATFORMS
    transitions[(WizardStep.REVIEW, WizardEvent.FINISH)] = WizardStep.COMPLETE
    return transitions


# Pairs missing from this table are rejected.  NEXT from REVIEW is absent:
# leaving REVIEW is either NEXT_COUNTRY or FINISH.
TRANSITIONS: dict[tuple[WizardStep, str], WizardStep] = _build_transitions()

# No event leaves these steps.
TERMINAL_STEPS: frozenset[WizardStep] = frozenset({WizardStep.COMPLETE})
