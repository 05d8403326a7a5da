"""Domain types and errors for the campaign planning engine."""

from campaign_planner.domain.errors import (
    BenchmarkUnavailableError,
    InvalidMutationError,
    InvalidTransitionError,
    PlanningError,
    UnknownCampaignTypeError,
    UnknownPlatformError,
)
from campaign_planner.domain.models import BenchmarkFallback, EstimationResult, PairEstimate
from campaign_planner.domain.types import (
    GCC_COUNTRIES,
    PER_COUNTRY_STEPS,
    PLATFORM_ROLES,
    WIZARD_STEPS,
    CampaignOrigin,
    Confidence,
    InsightKind,
    LookupTier,
    PlatformRole,
    WizardStep,
    get_platform_role,
)

__all__ = [
    "GCC_COUNTRIES",
    "PER_COUNTRY_STEPS",
    "PLATFORM_ROLES",
    "WIZARD_STEPS",
    "BenchmarkFallback",
    "BenchmarkUnavailableError",
    "CampaignOrigin",
    "Confidence",
    "EstimationResult",
    "PairEstimate",
    "InsightKind",
    "InvalidMutationError",
    "InvalidTransitionError",
    "LookupTier",
    "PlanningError",
    "PlatformRole",
    "UnknownCampaignTypeError",
    "UnknownPlatformError",
    "WizardStep",
    "get_platform_role",
]
