"""Step-gated campaign setup wizard with a multi-country loop.

The wizard owns one draft ``CampaignSetup`` plus the list of countries already
finished.  Countries, budget and duration are chosen once; the platform tree
(steps PLATFORMS through REVIEW) is then filled in per country.  Finishing a
country that is not the last follows the named ``next_country`` edge back to
PLATFORMS for the next country instead of completing.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from pydantic import BaseModel, ConfigDict, Field

from campaign_planner.allocation.models import (
    HUNDRED,
    CampaignSetup,
    CampaignSubmission,
    CountryCampaign,
    PlatformAllocation,
)
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.domain.errors import InvalidMutationError, InvalidTransitionError
from campaign_planner.domain.models import EstimationResult
from campaign_planner.domain.types import WIZARD_STEPS, CampaignOrigin, WizardStep
from campaign_planner.estimation.config import DEFAULT_ESTIMATION_CONFIG, EstimationConfig
from campaign_planner.estimation.engine import estimate
from campaign_planner.observability.metrics import COUNTRIES_FINISHED
from campaign_planner.wizard.machine import WizardStateMachine
from campaign_planner.wizard.transitions import WizardEvent

logger = structlog.get_logger()


def _campaign_types_filled(platform: PlatformAllocation) -> bool:
    return all(p > 0 for p in platform.campaign_types.values()) and (
        platform.campaign_type_total == HUNDRED
    )


# Per-step completion gates.  Each is narrower than CampaignSetup.is_complete().
STEP_GATES: dict[WizardStep, Callable[[CampaignSetup], bool]] = {
    WizardStep.COUNTRIES: lambda s: len(s.countries) > 0,
    WizardStep.BUDGET: lambda s: s.total_budget > 0,
    WizardStep.DURATION: lambda s: s.duration > 0,
    WizardStep.PLATFORMS: lambda s: len(s.platforms) > 0,
    WizardStep.PLATFORM_BUDGETS: lambda s: bool(s.platforms) and s.total_platform_percent() == HUNDRED,
    WizardStep.CAMPAIGN_TYPES: lambda s: bool(s.platforms) and all(p.campaign_types for p in s.platforms),
    WizardStep.CAMPAIGN_TYPE_BUDGETS: lambda s: bool(s.platforms)
    and all(_campaign_types_filled(p) for p in s.platforms if p.campaign_types),
    WizardStep.CONTENT: lambda s: s.content_count > 0,
    WizardStep.REVIEW: lambda s: s.is_complete(),
}


class WizardSnapshot(BaseModel):
    """Saved position of a wizard run, enough to resume it later."""

    model_config = ConfigDict(frozen=True)

    step: WizardStep = WizardStep.COUNTRIES
    history: tuple[tuple[WizardStep, str, WizardStep], ...] = ()
    country_index: int = 0
    origin: CampaignOrigin = CampaignOrigin.CUSTOMIZED
    setup: CampaignSetup = Field(default_factory=CampaignSetup)
    completed: tuple[CountryCampaign, ...] = ()


class CampaignWizard:
    """Drives a campaign setup through its steps, one country at a time.

    Args:
        benchmarks: Benchmark table for live previews and for the estimate
            attached to each finished country.  Without one, ``preview()``
            returns None and finished countries carry no estimate.
        config: Estimation constants.
        setup: Optional starting setup (defaults to an empty one).
    """

    def __init__(
        self,
        benchmarks: BenchmarkTable | None = None,
        config: EstimationConfig = DEFAULT_ESTIMATION_CONFIG,
        setup: CampaignSetup | None = None,
    ) -> None:
        self._benchmarks = benchmarks
        self._config = config
        self._machine = WizardStateMachine()
        self._setup = setup if setup is not None else CampaignSetup()
        self._country_index = 0
        self._current_origin = CampaignOrigin.CUSTOMIZED
        self._completed: list[CountryCampaign] = []

    @classmethod
    def restore(
        cls,
        snapshot: WizardSnapshot,
        benchmarks: BenchmarkTable | None = None,
        config: EstimationConfig = DEFAULT_ESTIMATION_CONFIG,
    ) -> CampaignWizard:
        """Rebuild a wizard from :meth:`snapshot` output.

        Raises:
            InvalidMutationError: If the snapshot's country index or finished
                countries do not fit its setup.
        """
        countries = snapshot.setup.countries
        if countries and not 0 <= snapshot.country_index < len(countries):
            raise InvalidMutationError(
                f"Country index {snapshot.country_index} is outside "
                f"the {len(countries)} selected countries"
            )
        if len(snapshot.completed) > len(countries):
            raise InvalidMutationError("Snapshot has more finished countries than selected ones")

        wizard = cls(benchmarks=benchmarks, config=config, setup=snapshot.setup)
        wizard._machine = WizardStateMachine.from_snapshot(snapshot.step, list(snapshot.history))
        wizard._country_index = snapshot.country_index
        wizard._current_origin = snapshot.origin
        wizard._completed = list(snapshot.completed)
        logger.info(
            "wizard_restored",
            step=snapshot.step.value,
            country_index=snapshot.country_index,
            finished=len(snapshot.completed),
        )
        return wizard

    def snapshot(self) -> WizardSnapshot:
        """Freeze the wizard's position so it can be stored and resumed."""
        return WizardSnapshot(
            step=self.step,
            history=tuple(self._machine.history),
            country_index=self._country_index,
            origin=self._current_origin,
            setup=self._setup,
            completed=tuple(self._completed),
        )

    # -- State -----------------------------------------------------------------

    @property
    def step(self) -> WizardStep:
        """The step currently shown."""
        return self._machine.step

    @property
    def country_index(self) -> int:
        """Index into ``setup.countries`` of the country being configured."""
        return self._country_index

    @property
    def setup(self) -> CampaignSetup:
        """The draft setup, with all selected countries."""
        return self._setup

    @property
    def completed(self) -> list[CountryCampaign]:
        """Countries finished so far, in order."""
        return list(self._completed)

    @property
    def history(self) -> list[tuple[WizardStep, str, WizardStep]]:
        """Step transitions taken so far."""
        return self._machine.history

    @property
    def is_terminal(self) -> bool:
        """True once the last country has been finished."""
        return self._machine.is_terminal

    @property
    def is_multi_country(self) -> bool:
        """True when more than one country is selected."""
        return len(self._setup.countries) > 1

    @property
    def current_country(self) -> str | None:
        """The country being configured, or None before any is selected."""
        if self._country_index < len(self._setup.countries):
            return self._setup.countries[self._country_index]
        return None

    def active_setup(self) -> CampaignSetup:
        """The draft narrowed to the country being configured."""
        country = self.current_country
        if country is None:
            return self._setup
        return self._setup.model_copy(update={"countries": (country,)})

    def remaining_countries(self) -> list[str]:
        """Countries after the current one that still need a setup."""
        if self.is_terminal:
            return []
        return list(self._setup.countries[self._country_index + 1 :])

    def progress_percent(self) -> int:
        """Position of the current step as a whole percentage."""
        if self.is_terminal:
            return 100
        position = WIZARD_STEPS.index(self.step) + 1
        return position * 100 // len(WIZARD_STEPS)

    def valid_events(self) -> list[str]:
        """Events the current step has an edge for, alphabetically.

        On REVIEW only the way out that applies is listed: ``next_country``
        while countries remain, ``finish`` for the last one.
        """
        events = self._machine.get_valid_events()
        if self.step is WizardStep.REVIEW:
            unused = WizardEvent.FINISH if self.remaining_countries() else WizardEvent.NEXT_COUNTRY
            events = [e for e in events if e != unused]
        return events

    def can_proceed(self) -> bool:
        """Return True if the current step's completion gate holds."""
        gate = STEP_GATES.get(self.step)
        return gate is not None and gate(self.active_setup())

    def preview(self) -> EstimationResult | None:
        """Live estimate for the country being configured.

        Raises:
            BenchmarkUnavailableError: Never for a table passed to the
                constructor; only if the table object is unusable.
        """
        if self._benchmarks is None:
            return None
        return estimate(self.active_setup(), self._benchmarks, self._config)

    # -- Editing ---------------------------------------------------------------

    def edit(self, mutation: Callable[[CampaignSetup], CampaignSetup]) -> CampaignSetup:
        """Apply an edit to the draft setup.

        Usage::

            wizard.edit(lambda s: s.toggle_platform("meta"))
            wizard.edit(lambda s: s.set_platform_budget_percent("meta", 60))

        Args:
            mutation: Function from the current draft to the edited draft.

        Returns:
            The edited draft.

        Raises:
            InvalidMutationError: If the wizard is complete, the mutation does
                not return a setup, the country list changes after a country
                has been finished, or the mutation itself rejects the edit.
        """
        if self.is_terminal:
            raise InvalidMutationError("The wizard is complete; start a new setup to edit")
        updated = mutation(self._setup)
        if not isinstance(updated, CampaignSetup):
            raise InvalidMutationError("An edit must return a CampaignSetup")
        if self._completed and updated.countries != self._setup.countries:
            raise InvalidMutationError(
                "Countries cannot change after a country has been finished"
            )
        self._setup = updated
        return updated

    # -- Transitions -----------------------------------------------------------

    def next(self) -> WizardStep:
        """Advance one step if the current step is complete.

        On REVIEW this finishes the current country (see :meth:`finish_country`).

        Returns:
            The step after the call; unchanged when the gate does not hold.

        Raises:
            InvalidTransitionError: If the wizard is complete.
        """
        if self.is_terminal:
            raise InvalidTransitionError(self.step, WizardEvent.NEXT)
        if self.step is WizardStep.REVIEW:
            return self.finish_country()
        if not self.can_proceed():
            logger.info(
                "wizard_step_blocked",
                step=self.step.value,
                country_index=self._country_index,
            )
            return self.step
        return self._machine.trigger(WizardEvent.NEXT)

    def previous(self) -> WizardStep:
        """Go back one step; stays put on the first step.

        Raises:
            InvalidTransitionError: If the wizard is complete.
        """
        return self._machine.trigger(WizardEvent.PREVIOUS)

    def copy_previous_country_setup(self) -> CampaignSetup:
        """Copy the previous country's platform tree onto the current country.

        Budget percentages and campaign-type splits are copied verbatim.
        Countries, budget, duration and content are left as they are.

        Returns:
            The updated draft.

        Raises:
            InvalidMutationError: If this is the first country or the wizard
                is complete.
        """
        if self.is_terminal:
            raise InvalidMutationError("The wizard is complete; start a new setup to edit")
        if self._country_index == 0:
            raise InvalidMutationError("There is no previous country to copy from")

        previous = self._completed[self._country_index - 1]
        cloned = previous.setup.clone_for_country(self.current_country or previous.country_code)
        self._setup = self._setup.with_platforms(cloned.platforms)
        self._current_origin = CampaignOrigin.COPIED
        logger.info(
            "country_setup_copied",
            source=previous.country_code,
            target=self.current_country,
        )
        return self._setup

    def finish_country(self) -> WizardStep:
        """Record the current country and move on.

        Loops back to PLATFORMS for the next country when one remains,
        otherwise completes the wizard.  Does nothing while the current
        country's setup is incomplete.

        Returns:
            The step after the call.

        Raises:
            InvalidTransitionError: If not on the REVIEW step.
        """
        if not self._machine.can_trigger(WizardEvent.FINISH):
            raise InvalidTransitionError(self.step, WizardEvent.FINISH)

        active = self.active_setup()
        if not active.is_complete():
            logger.info(
                "wizard_step_blocked",
                step=self.step.value,
                country_index=self._country_index,
                issues=active.validation_issues(),
            )
            return self.step

        self._record(active, self._current_origin)
        if self._country_index < len(self._setup.countries) - 1:
            return self._advance_country()
        return self._machine.trigger(WizardEvent.FINISH)

    def apply_to_remaining_countries(self) -> WizardStep:
        """Finish the current country and reuse its setup for every remaining one.

        Returns:
            The step after the call: COMPLETE, or REVIEW if the current
            country's setup is incomplete.

        Raises:
            InvalidTransitionError: If not on the REVIEW step.
        """
        if not self._machine.can_trigger(WizardEvent.FINISH):
            raise InvalidTransitionError(self.step, WizardEvent.FINISH)

        active = self.active_setup()
        if not active.is_complete():
            logger.info(
                "wizard_step_blocked",
                step=self.step.value,
                country_index=self._country_index,
                issues=active.validation_issues(),
            )
            return self.step

        self._record(active, self._current_origin)
        for country in self.remaining_countries():
            self._record(active.clone_for_country(country), CampaignOrigin.COPIED)
        self._country_index = len(self._setup.countries) - 1
        return self._machine.trigger(WizardEvent.FINISH)

    def submission(self) -> CampaignSubmission:
        """Hand-off value for persistence once every country is finished.

        Raises:
            InvalidTransitionError: If the wizard is not complete yet.
        """
        if not self.is_terminal:
            raise InvalidTransitionError(self.step, "submit")
        return CampaignSubmission(campaigns=tuple(self._completed))

    # -- Internals -------------------------------------------------------------

    def _advance_country(self) -> WizardStep:
        self._country_index += 1
        self._current_origin = CampaignOrigin.CUSTOMIZED
        self._setup = self._setup.with_platforms(())
        return self._machine.trigger(WizardEvent.NEXT_COUNTRY)

    def _record(self, setup: CampaignSetup, origin: CampaignOrigin) -> None:
        country = setup.countries[0]
        result = (
            estimate(setup, self._benchmarks, self._config)
            if self._benchmarks is not None
            else None
        )
        self._completed.append(
            CountryCampaign(country_code=country, setup=setup, origin=origin, estimate=result)
        )
        COUNTRIES_FINISHED.labels(origin=origin.value).inc()
        logger.info(
            "country_finished",
            country=country,
            origin=origin.value,
            finished=len(self._completed),
            total=len(self._setup.countries),
        )
