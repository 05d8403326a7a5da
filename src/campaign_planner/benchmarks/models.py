"""Historical benchmark rates keyed by platform and country.

CTR and conversion rate are percentages (``Decimal("2")`` means 2%).  CPM and
CPC are currency amounts.  Float inputs, as produced by YAML parsing, are
converted through ``str()`` so ``2.30`` becomes ``Decimal("2.3")`` exactly.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_planner.domain.types import LookupTier


class BenchmarkRates(BaseModel):
    """Observed delivery rates for one benchmark cell.

    Attributes:
        cpm: Cost per thousand impressions.
        cpc: Cost per click, when the source reported it.
        ctr: Click-through rate in percent.
        conversion_rate: Conversions per click in percent.
        cost_per_install: Cost per app install, when the source reported it.
    """

    model_config = ConfigDict(frozen=True)

    cpm: Decimal
    cpc: Decimal | None = None
    ctr: Decimal
    conversion_rate: Decimal
    cost_per_install: Decimal | None = None

    @field_validator("cpm", "cpc", "ctr", "conversion_rate", "cost_per_install", mode="before")
    @classmethod
    def floats_via_str(cls, v: object) -> object:
        """Convert float inputs via ``str()`` to keep the published digits."""
        if isinstance(v, float):
            return Decimal(str(v))
        return v

    @field_validator("cpm")
    @classmethod
    def cpm_must_be_positive(cls, v: Decimal) -> Decimal:
        """A zero CPM would make impressions unbounded."""
        if v <= 0:
            raise ValueError("cpm must be positive")
        return v

    @field_validator("cpc")
    @classmethod
    def cpc_must_be_positive(cls, v: Decimal | None) -> Decimal | None:
        """Treat a reported CPC as usable only when positive."""
        if v is not None and v <= 0:
            raise ValueError("cpc must be positive when given")
        return v

    @field_validator("ctr", "conversion_rate", "cost_per_install")
    @classmethod
    def rates_must_not_be_negative(cls, v: Decimal | None) -> Decimal | None:
        """Ensure percentage and cost rates are non-negative."""
        if v is not None and v < 0:
            raise ValueError("rates must not be negative")
        return v


class BenchmarkRow(BenchmarkRates):
    """One historical observation for a (platform, country) pair."""

    platform: str
    country: str
    objective: str | None = None

    @property
    def rates(self) -> BenchmarkRates:
        """The rate fields of this row without its key."""
        return BenchmarkRates(
            cpm=self.cpm,
            cpc=self.cpc,
            ctr=self.ctr,
            conversion_rate=self.conversion_rate,
            cost_per_install=self.cost_per_install,
        )


class BenchmarkLookup(BaseModel):
    """Rates resolved for a (platform, country) pair and the tier that supplied them.

    Attributes:
        rates: The resolved (possibly averaged) rates.
        tier: Which fallback level produced the rates.
        row_ids: Indices of the exact-match rows used; empty for fallback tiers.
    """

    model_config = ConfigDict(frozen=True)

    rates: BenchmarkRates
    tier: LookupTier
    row_ids: tuple[int, ...] = ()


class BenchmarkDocument(BaseModel):
    """Schema of a benchmark YAML file."""

    global_default: BenchmarkRates
    platform_aliases: dict[str, str] = Field(default_factory=dict)
    country_aliases: dict[str, str] = Field(default_factory=dict)
    rows: list[BenchmarkRow] = Field(default_factory=list)
