"""Immutable campaign allocation tree: countries -> platforms -> campaign types.

Every edit returns a new ``CampaignSetup`` instead of mutating in place, so a
country's tree can be cloned or kept as a snapshot without aliasing.  Campaign-type
splits are held in read-only mappings; item assignment raises ``TypeError``.

Percentages are stored verbatim while the user is typing.  Range and sum-to-100
checks happen only in ``validation_issues()`` / ``is_complete()``, never in the setters.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from campaign_planner.domain.errors import (
    InvalidMutationError,
    UnknownCampaignTypeError,
    UnknownPlatformError,
)
from campaign_planner.domain.models import EstimationResult
from campaign_planner.domain.types import CampaignOrigin

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value: object) -> Decimal:
    """Convert a user-supplied number to Decimal without losing what was typed.

    Floats go through ``str()`` so ``37.1`` is stored as ``Decimal("37.1")``
    rather than its binary expansion.

    Args:
        value: A Decimal, int, float, or numeric string.

    Returns:
        The value as a finite Decimal.

    Raises:
        InvalidMutationError: If the value is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidMutationError(f"Expected a number, got {value!r}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidMutationError(f"Expected a number, got {value!r}") from exc
    if not number.is_finite():
        raise InvalidMutationError(f"Expected a finite number, got {value!r}")
    return number


def _coerce_float(v: object) -> object:
    if isinstance(v, float):
        return Decimal(str(v))
    return v


class ContentItem(BaseModel):
    """A planned content piece.  Only the count feeds into estimation."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    note: str = ""


class PlatformAllocation(BaseModel):
    """Budget share of one platform plus its split across campaign types.

    Attributes:
        platform_id: Platform identifier, unique within a setup.
        budget_percent: Share of the total budget (0-100 once valid).
        campaign_types: Campaign-type id -> share of this platform's budget.
    """

    model_config = ConfigDict(frozen=True)

    platform_id: str
    budget_percent: Decimal = ZERO
    campaign_types: Mapping[str, Decimal] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("budget_percent", mode="before")
    @classmethod
    def keep_typed_percent(cls, v: object) -> object:
        """Store float input by its decimal representation."""
        return _coerce_float(v)

    @field_validator("campaign_types", mode="before")
    @classmethod
    def keep_typed_type_percents(cls, v: object) -> object:
        """Store float campaign-type percentages by their decimal representation."""
        if isinstance(v, Mapping):
            return {k: _coerce_float(p) for k, p in v.items()}
        return v

    @field_validator("campaign_types")
    @classmethod
    def freeze_campaign_types(cls, v: Mapping[str, Decimal]) -> Mapping[str, Decimal]:
        return MappingProxyType(dict(v))

    @field_serializer("campaign_types")
    def dump_campaign_types(self, v: Mapping[str, Decimal]) -> dict[str, Decimal]:
        return dict(v)

    @property
    def campaign_type_total(self) -> Decimal:
        """Sum of campaign-type percentages under this platform."""
        return sum(self.campaign_types.values(), ZERO)

    def budget_amount(self, total_budget: Decimal) -> Decimal:
        """Absolute spend for this platform given the campaign total."""
        return total_budget * self.budget_percent / HUNDRED

    def with_campaign_types(self, campaign_types: Mapping[str, Decimal]) -> PlatformAllocation:
        """Return a copy with a new campaign-type split."""
        return PlatformAllocation(
            platform_id=self.platform_id,
            budget_percent=self.budget_percent,
            campaign_types=campaign_types,
        )


class CampaignSetup(BaseModel):
    """Root aggregate for one planning session.

    Built empty when the wizard starts and edited step by step.  The setters
    accept transient values (41%, negative numbers while typing); only
    ``validation_issues()`` enforces the completion invariants.
    """

    model_config = ConfigDict(frozen=True)

    countries: tuple[str, ...] = ()
    total_budget: Decimal = ZERO
    duration: int = 0
    platforms: tuple[PlatformAllocation, ...] = ()
    content: tuple[ContentItem, ...] = ()

    @field_validator("total_budget", mode="before")
    @classmethod
    def keep_typed_budget(cls, v: object) -> object:
        """Store float budgets by their decimal representation."""
        return _coerce_float(v)

    @field_validator("countries")
    @classmethod
    def countries_must_be_unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Drop duplicate country codes, keeping first-seen order."""
        return tuple(dict.fromkeys(v))

    @field_validator("platforms")
    @classmethod
    def platforms_must_be_unique(
        cls, v: tuple[PlatformAllocation, ...]
    ) -> tuple[PlatformAllocation, ...]:
        """Ensure no platform appears twice."""
        ids = [p.platform_id for p in v]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate platform ids: {ids}")
        return v

    # -- Queries ---------------------------------------------------------------

    @property
    def platform_ids(self) -> list[str]:
        """Selected platform ids in selection order."""
        return [p.platform_id for p in self.platforms]

    @property
    def content_count(self) -> int:
        """Number of distinct content types planned."""
        return len(self.content)

    def get_platform(self, platform_id: str) -> PlatformAllocation:
        """Return the allocation for *platform_id*.

        Raises:
            UnknownPlatformError: If the platform is not selected.
        """
        for platform in self.platforms:
            if platform.platform_id == platform_id:
                return platform
        raise UnknownPlatformError(platform_id)

    def has_platform(self, platform_id: str) -> bool:
        """Return True if *platform_id* is selected."""
        return any(p.platform_id == platform_id for p in self.platforms)

    def total_platform_percent(self) -> Decimal:
        """Sum of all platform budget percentages."""
        return sum((p.budget_percent for p in self.platforms), ZERO)

    def campaign_type_total_percent(self, platform_id: str) -> Decimal:
        """Sum of campaign-type percentages within one platform.

        Raises:
            UnknownPlatformError: If the platform is not selected.
        """
        return self.get_platform(platform_id).campaign_type_total

    def validation_issues(self) -> list[str]:
        """List every reason this setup is not yet complete.

        Returns:
            Human-readable problems in a fixed order; empty when complete.
        """
        problems: list[str] = []
        if not self.countries:
            problems.append("select at least one country")
        if self.total_budget <= 0:
            problems.append("total budget must be positive")
        if self.duration <= 0:
            problems.append("duration must be positive")
        if not self.platforms:
            problems.append("select at least one platform")
        else:
            total = self.total_platform_percent()
            if total != HUNDRED:
                problems.append(f"platform budgets total {total}%, expected 100%")
        for platform in self.platforms:
            if platform.campaign_types and platform.campaign_type_total != HUNDRED:
                problems.append(
                    f"{platform.platform_id} campaign types total "
                    f"{platform.campaign_type_total}%, expected 100%"
                )
        return problems

    def is_complete(self) -> bool:
        """Return True when the setup satisfies every completion invariant."""
        return not self.validation_issues()

    # -- Edits -----------------------------------------------------------------

    def toggle_country(self, country_code: str) -> CampaignSetup:
        """Add *country_code* if absent, remove it if present."""
        if country_code in self.countries:
            countries = tuple(c for c in self.countries if c != country_code)
        else:
            countries = (*self.countries, country_code)
        return self.model_copy(update={"countries": countries})

    def set_total_budget(self, amount: object) -> CampaignSetup:
        """Store the total budget verbatim (positivity is checked on completion)."""
        return self.model_copy(update={"total_budget": to_decimal(amount)})

    def set_duration(self, days: int) -> CampaignSetup:
        """Store the campaign duration in days verbatim."""
        if isinstance(days, bool) or not isinstance(days, int):
            raise InvalidMutationError(f"Duration must be a whole number of days, got {days!r}")
        return self.model_copy(update={"duration": days})

    def toggle_platform(self, platform_id: str) -> CampaignSetup:
        """Add a zero-budget platform, or remove it together with its campaign types."""
        if self.has_platform(platform_id):
            platforms = tuple(p for p in self.platforms if p.platform_id != platform_id)
        else:
            platforms = (*self.platforms, PlatformAllocation(platform_id=platform_id))
        return self.model_copy(update={"platforms": platforms})

    def set_platform_budget_percent(self, platform_id: str, percent: object) -> CampaignSetup:
        """Store a platform's budget share verbatim.

        Raises:
            UnknownPlatformError: If the platform is not selected.
            InvalidMutationError: If *percent* is not a finite number.
        """
        value = to_decimal(percent)
        platform = self.get_platform(platform_id)
        return self._replace_platform(platform.model_copy(update={"budget_percent": value}))

    def toggle_campaign_type(self, platform_id: str, type_id: str) -> CampaignSetup:
        """Add a zero-percent campaign type under a platform, or remove it.

        Raises:
            UnknownPlatformError: If the platform is not selected.
        """
        platform = self.get_platform(platform_id)
        types = dict(platform.campaign_types)
        if type_id in types:
            del types[type_id]
        else:
            types[type_id] = ZERO
        return self._replace_platform(platform.with_campaign_types(types))

    def set_campaign_type_percent(
        self, platform_id: str, type_id: str, percent: object
    ) -> CampaignSetup:
        """Store a campaign type's share of its platform budget verbatim.

        Raises:
            UnknownPlatformError: If the platform is not selected.
            UnknownCampaignTypeError: If the campaign type was never toggled on.
            InvalidMutationError: If *percent* is not a finite number.
        """
        value = to_decimal(percent)
        platform = self.get_platform(platform_id)
        if type_id not in platform.campaign_types:
            raise UnknownCampaignTypeError(platform_id, type_id)
        types = {**platform.campaign_types, type_id: value}
        return self._replace_platform(platform.with_campaign_types(types))

    def toggle_content(self, content_type: str) -> CampaignSetup:
        """Add a content type with an empty note, or remove it."""
        if any(c.content_type == content_type for c in self.content):
            content = tuple(c for c in self.content if c.content_type != content_type)
        else:
            content = (*self.content, ContentItem(content_type=content_type))
        return self.model_copy(update={"content": content})

    def set_content_note(self, content_type: str, note: str) -> CampaignSetup:
        """Attach a free-text note to a selected content type.

        Raises:
            InvalidMutationError: If the content type is not selected.
        """
        if not any(c.content_type == content_type for c in self.content):
            raise InvalidMutationError(f"Content type '{content_type}' is not selected")
        content = tuple(
            c.model_copy(update={"note": note}) if c.content_type == content_type else c
            for c in self.content
        )
        return self.model_copy(update={"content": content})

    def with_platforms(self, platforms: tuple[PlatformAllocation, ...]) -> CampaignSetup:
        """Replace the whole platform tree, e.g. with one cloned from another country.

        Raises:
            InvalidMutationError: If a platform id appears more than once.
        """
        ids = [p.platform_id for p in platforms]
        if len(ids) != len(set(ids)):
            raise InvalidMutationError(f"Duplicate platform ids: {ids}")
        return self.model_copy(update={"platforms": _copy_platforms(platforms)})

    def clone_for_country(self, country_code: str) -> CampaignSetup:
        """Deep-copy this setup's platform tree for another country.

        Percentages are copied as-is, not re-normalized: the new country gets
        the same split.  Budget, duration and content are carried along so the
        clone is a complete setup on its own; callers that only want the tree
        use ``.platforms``.

        Args:
            country_code: The country the clone is for.

        Returns:
            A new setup for *country_code* sharing no mutable state with this one.
        """
        return CampaignSetup(
            countries=(country_code,),
            total_budget=self.total_budget,
            duration=self.duration,
            platforms=_copy_platforms(self.platforms),
            content=self.content,
        )

    def _replace_platform(self, updated: PlatformAllocation) -> CampaignSetup:
        platforms = tuple(
            updated if p.platform_id == updated.platform_id else p for p in self.platforms
        )
        return self.model_copy(update={"platforms": platforms})


def _copy_platforms(
    platforms: tuple[PlatformAllocation, ...],
) -> tuple[PlatformAllocation, ...]:
    return tuple(
        PlatformAllocation(
            platform_id=p.platform_id,
            budget_percent=p.budget_percent,
            campaign_types=dict(p.campaign_types),
        )
        for p in platforms
    )


class CountryCampaign(BaseModel):
    """A finished per-country setup in a multi-country campaign.

    ``estimate`` is filled in when a benchmark table was available at the time
    the country was finished.
    """

    model_config = ConfigDict(frozen=True)

    country_code: str
    setup: CampaignSetup
    origin: CampaignOrigin = CampaignOrigin.CUSTOMIZED
    estimate: EstimationResult | None = None


class CampaignSubmission(BaseModel):
    """Every finished country of a wizard run, ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    campaigns: tuple[CountryCampaign, ...]

    @property
    def countries(self) -> list[str]:
        """Country codes in the order they were finished."""
        return [c.country_code for c in self.campaigns]

    @property
    def copied_countries(self) -> list[str]:
        """Countries whose tree was copied rather than configured by hand."""
        return [c.country_code for c in self.campaigns if c.origin is CampaignOrigin.COPIED]
