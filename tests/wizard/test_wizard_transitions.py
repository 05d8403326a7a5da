"""Tests for the wizard transition map."""

import pytest

from campaign_planner.domain.types import WIZARD_STEPS, WizardStep
from campaign_planner.wizard.transitions import TERMINAL_STEPS, TRANSITIONS, WizardEvent

FORWARD: list[tuple[WizardStep, WizardStep]] = list(zip(WIZARD_STEPS[:-1], WIZARD_STEPS[1:], strict=True))


class TestTransitionMap:
    @pytest.mark.parametrize(
        ("from_step", "to_step"),
        FORWARD,
        ids=[f"{a.value}->{b.value}" for a, b in FORWARD],
    )
    def test_next_moves_forward(self, from_step: WizardStep, to_step: WizardStep) -> None:
        assert TRANSITIONS[(from_step, WizardEvent.NEXT)] == to_step

    @pytest.mark.parametrize(
        ("to_step", "from_step"),
        FORWARD,
        ids=[f"{b.value}->{a.value}" for a, b in FORWARD],
    )
    def test_previous_moves_back(self, to_step: WizardStep, from_step: WizardStep) -> None:
        assert TRANSITIONS[(from_step, WizardEvent.PREVIOUS)] == to_step

    def test_previous_on_first_step_stays(self) -> None:
        assert TRANSITIONS[(WizardStep.COUNTRIES, WizardEvent.PREVIOUS)] == WizardStep.COUNTRIES

    def test_review_has_no_plain_next(self) -> None:
        assert (WizardStep.REVIEW, WizardEvent.NEXT) not in TRANSITIONS

    def test_review_exits(self) -> None:
        assert TRANSITIONS[(WizardStep.REVIEW, WizardEvent.NEXT_COUNTRY)] == WizardStep.PLATFORMS
        assert TRANSITIONS[(WizardStep.REVIEW, WizardEvent.FINISH)] == WizardStep.COMPLETE

    def test_loop_and_finish_only_from_review(self) -> None:
        sources = {
            step
            for step, event in TRANSITIONS
            if event in (WizardEvent.NEXT_COUNTRY, WizardEvent.FINISH)
        }
        assert sources == {WizardStep.REVIEW}

    def test_complete_is_terminal_without_outgoing_edges(self) -> None:
        assert TERMINAL_STEPS == frozenset({WizardStep.COMPLETE})
        assert not any(step is WizardStep.COMPLETE for step, _ in TRANSITIONS)
