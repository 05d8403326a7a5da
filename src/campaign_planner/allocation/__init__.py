"""Campaign allocation tree with relaxed editing and strict completion checks."""

from campaign_planner.allocation.models import (
    CampaignSetup,
    CampaignSubmission,
    ContentItem,
    CountryCampaign,
    PlatformAllocation,
    to_decimal,
)

__all__ = [
    "CampaignSetup",
    "CampaignSubmission",
    "ContentItem",
    "CountryCampaign",
    "PlatformAllocation",
    "to_decimal",
]
