"""Domain enumerations shared across the campaign planning engine."""

from enum import StrEnum


class Confidence(StrEnum):
    """Qualitative rating of how much real benchmark data backs an estimate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LookupTier(StrEnum):
    """Benchmark resolution tier, from most to least specific."""

    EXACT = "exact"
    PLATFORM = "platform"
    GLOBAL = "global"


class PlatformRole(StrEnum):
    """Funnel role a platform plays in a campaign mix."""

    REACH = "reach"
    PERFORMANCE = "performance"


class InsightKind(StrEnum):
    """Which output list an insight rule contributes to."""

    INSIGHT = "insight"
    RECOMMENDATION = "recommendation"


class CampaignOrigin(StrEnum):
    """How a per-country campaign tree was produced."""

    CUSTOMIZED = "customized"
    COPIED = "copied"


class WizardStep(StrEnum):
    """Ordered steps of the campaign setup wizard."""

    COUNTRIES = "countries"
    BUDGET = "budget"
    DURATION = "duration"
    PLATFORMS = "platforms"
    PLATFORM_BUDGETS = "platform_budgets"
    CAMPAIGN_TYPES = "campaign_types"
    CAMPAIGN_TYPE_BUDGETS = "campaign_type_budgets"
    CONTENT = "content"
    REVIEW = "review"
    COMPLETE = "complete"


# Data-collection steps in display order (COMPLETE is terminal, not a step the user fills in)
WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep.COUNTRIES,
    WizardStep.BUDGET,
    WizardStep.DURATION,
    WizardStep.PLATFORMS,
    WizardStep.PLATFORM_BUDGETS,
    WizardStep.CAMPAIGN_TYPES,
    WizardStep.CAMPAIGN_TYPE_BUDGETS,
    WizardStep.CONTENT,
    WizardStep.REVIEW,
)

# Steps repeated once per country in a multi-country setup
PER_COUNTRY_STEPS: tuple[WizardStep, ...] = WIZARD_STEPS[WIZARD_STEPS.index(WizardStep.PLATFORMS):]

# Platforms grouped by their funnel role, used by the platform-mix insight
PLATFORM_ROLES: dict[str, PlatformRole] = {
    "meta": PlatformRole.REACH,
    "instagram": PlatformRole.REACH,
    "tiktok": PlatformRole.REACH,
    "youtube": PlatformRole.REACH,
    "snapchat": PlatformRole.REACH,
    "twitter": PlatformRole.REACH,
    "pinterest": PlatformRole.REACH,
    "google": PlatformRole.PERFORMANCE,
    "linkedin": PlatformRole.PERFORMANCE,
}

GCC_COUNTRIES: frozenset[str] = frozenset({"AE", "SA", "BH", "KW", "QA", "OM"})


def get_platform_role(platform_id: str) -> PlatformRole | None:
    """Look up the funnel role of a platform.

    Args:
        platform_id: The platform identifier (case-insensitive).

    Returns:
        The platform's role, or None for platforms without a known role.
    """
    return PLATFORM_ROLES.get(platform_id.strip().lower())
