"""Domain-specific exception classes for the campaign planning engine."""

from campaign_planner.domain.types import WizardStep


class PlanningError(Exception):
    """Base class for all domain errors in the campaign planning engine."""


class InvalidMutationError(PlanningError):
    """Raised when an edit cannot be applied to a campaign setup.

    Recoverable by the caller: the setup is left unchanged.
    """


class UnknownPlatformError(InvalidMutationError):
    """Raised when an edit targets a platform that is not selected.

    Attributes:
        platform_id: The platform that was not found in the setup.
    """

    def __init__(self, platform_id: str) -> None:
        self.platform_id = platform_id
        super().__init__(f"Platform '{platform_id}' is not selected")


class UnknownCampaignTypeError(InvalidMutationError):
    """Raised when a percentage is set for a campaign type that was never selected.

    Attributes:
        platform_id: The platform the campaign type was looked up under.
        type_id: The campaign type that was not found.
    """

    def __init__(self, platform_id: str, type_id: str) -> None:
        self.platform_id = platform_id
        self.type_id = type_id
        super().__init__(
            f"Campaign type '{type_id}' is not selected for platform '{platform_id}'"
        )


class InvalidTransitionError(PlanningError):
    """Raised when a wizard event is not allowed from the current step.

    Attributes:
        current_step: The step the wizard was on when the event was rejected.
        event: The event that was rejected.
    """

    def __init__(self, current_step: WizardStep, event: str) -> None:
        self.current_step = current_step
        self.event = event
        super().__init__(f"Cannot apply event '{event}' in step '{current_step}'")


class BenchmarkUnavailableError(PlanningError):
    """Raised when the benchmark table is missing or malformed."""
