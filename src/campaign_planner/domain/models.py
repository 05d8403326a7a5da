"""Pydantic v2 models for estimation output shared across the planning engine."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_planner.domain.types import Confidence, LookupTier


class BenchmarkFallback(BaseModel):
    """A (platform, country) pair that did not resolve to exact benchmark data."""

    model_config = ConfigDict(frozen=True)

    platform: str
    country: str
    tier: LookupTier


class PairEstimate(BaseModel):
    """Resolved rates and spend for one funded (platform, country) pair.

    ``benchmark_platform`` and ``market`` are the keys the benchmark data is
    filed under after alias mapping; ``platform`` and ``country`` are as
    selected in the setup.
    """

    model_config = ConfigDict(frozen=True)

    platform: str
    country: str
    benchmark_platform: str
    market: str
    tier: LookupTier
    spend: Decimal
    cpm: Decimal
    cpc: Decimal | None = None
    ctr: Decimal
    conversion_rate: Decimal


class EstimationResult(BaseModel):
    """Predicted campaign performance for a setup.

    Volumes are whole numbers; rates and costs are Decimals quantized to two
    decimal places.  CTR and conversion rate are percentages (2 means 2%).
    """

    model_config = ConfigDict(frozen=True)

    estimated_reach: int = 0
    estimated_impressions: int = 0
    estimated_clicks: int = 0
    estimated_conversions: int = 0
    cost_per_click: Decimal = Decimal("0.00")
    cost_per_conversion: Decimal = Decimal("0.00")
    average_cpm: Decimal = Decimal("0.00")
    average_cpc: Decimal = Decimal("0.00")
    average_ctr: Decimal = Decimal("0.00")
    average_conversion_rate: Decimal = Decimal("0.00")
    confidence: Confidence = Confidence.LOW
    data_points: int = 0
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    fallbacks: list[BenchmarkFallback] = Field(default_factory=list)
    breakdown: list[PairEstimate] = Field(default_factory=list)
    markets: list[str] = Field(default_factory=list)

    @field_validator(
        "estimated_reach",
        "estimated_impressions",
        "estimated_clicks",
        "estimated_conversions",
        "data_points",
    )
    @classmethod
    def counts_must_not_be_negative(cls, v: int) -> int:
        """Ensure volume counts are non-negative."""
        if v < 0:
            raise ValueError("counts must not be negative")
        return v

    @property
    def used_fallback(self) -> bool:
        """Return True if any pair resolved below the exact tier."""
        return bool(self.fallbacks)
