"""Benchmark-driven performance estimation for a campaign setup.

All arithmetic uses Decimal so identical inputs give bit-identical results.
Volumes are rounded half-up to whole numbers; rates and costs are quantized to
two decimal places with ROUND_HALF_UP rounding.

Click reconciliation: when every funded (platform, country) pair has an
observed CPC, clicks come from ``budget / blended CPC`` and the reported CTR is
back-derived from clicks and impressions.  Otherwise clicks come from
``impressions * blended CTR`` and the reported CPC is back-derived.  Either
way the reported CTR, CPC and click count agree with each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import structlog

from campaign_planner.allocation.models import CampaignSetup
from campaign_planner.benchmarks.models import BenchmarkLookup
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.domain.errors import BenchmarkUnavailableError
from campaign_planner.domain.models import BenchmarkFallback, EstimationResult, PairEstimate
from campaign_planner.domain.types import Confidence, LookupTier
from campaign_planner.estimation.config import DEFAULT_ESTIMATION_CONFIG, EstimationConfig
from campaign_planner.estimation.insights import (
    DEFAULT_PAIR_RULES,
    DEFAULT_RULES,
    InsightRule,
    PairRule,
    evaluate_rules,
)

logger = structlog.get_logger()

# Precision: all rates and costs quantized to 2 decimal places
TWO_PLACES = Decimal("0.01")
# Per-pair rates keep one more place so sub-cent CPCs stay visible
RATE_PLACES = Decimal("0.001")
WHOLE = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
THOUSAND = Decimal("1000")


@dataclass(frozen=True)
class PairAllocation:
    """Spend and resolved benchmark for one (platform, country) pair.

    Attributes:
        platform_id: Platform id as selected in the setup.
        country: Country code as selected in the setup.
        spend: Budget assigned to the pair (never negative).
        lookup: Benchmark rates and the tier they came from.
        frequency: Assumed average frequency for the platform.
        benchmark_platform: Platform key after alias mapping.
        market: Country code after alias mapping.
    """

    platform_id: str
    country: str
    spend: Decimal
    lookup: BenchmarkLookup
    frequency: Decimal
    benchmark_platform: str = ""
    market: str = ""


@dataclass(frozen=True)
class BlendedRates:
    """Spend-weighted averages across all funded pairs."""

    cpm: Decimal
    ctr: Decimal
    conversion_rate: Decimal
    frequency: Decimal
    cpc: Decimal | None


def _round_count(value: Decimal) -> int:
    return int(value.quantize(WHOLE, rounding=ROUND_HALF_UP))


def _money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _rate(value: Decimal) -> Decimal:
    return value.quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def _pair_estimate(pair: PairAllocation) -> PairEstimate:
    rates = pair.lookup.rates
    return PairEstimate(
        platform=pair.platform_id,
        country=pair.country,
        benchmark_platform=pair.benchmark_platform,
        market=pair.market,
        tier=pair.lookup.tier,
        spend=_money(pair.spend),
        cpm=_rate(rates.cpm),
        cpc=_rate(rates.cpc) if rates.cpc is not None else None,
        ctr=_rate(rates.ctr),
        conversion_rate=_rate(rates.conversion_rate),
    )


def _weighted(values: list[tuple[Decimal, Decimal]]) -> Decimal:
    """Weighted mean of ``(value, weight)`` pairs; 0 when total weight is 0."""
    total_weight = sum((w for _, w in values), ZERO)
    if total_weight <= 0:
        return ZERO
    return sum((v * w for v, w in values), ZERO) / total_weight


def allocate_pairs(
    setup: CampaignSetup,
    table: BenchmarkTable,
    config: EstimationConfig = DEFAULT_ESTIMATION_CONFIG,
) -> list[PairAllocation]:
    """Resolve benchmarks and spend for every (platform, country) pair.

    Each platform's budget share is split evenly across the selected
    countries.  Negative percentages (possible mid-edit) count as no spend.

    Args:
        setup: The campaign setup, complete or not.
        table: Benchmark table to resolve rates from.
        config: Estimation constants (for per-platform frequency).

    Returns:
        One entry per pair in platform-then-country order.
    """
    if not setup.countries:
        return []

    country_count = Decimal(len(setup.countries))
    pairs: list[PairAllocation] = []
    for platform in setup.platforms:
        platform_spend = max(platform.budget_amount(setup.total_budget), ZERO)
        for country in setup.countries:
            lookup = table.resolve(platform.platform_id, country)
            if lookup.tier is not LookupTier.EXACT:
                logger.debug(
                    "benchmark_fallback_used",
                    platform=platform.platform_id,
                    country=country,
                    tier=lookup.tier.value,
                )
            pairs.append(
                PairAllocation(
                    platform_id=platform.platform_id,
                    country=country,
                    spend=platform_spend / country_count,
                    lookup=lookup,
                    frequency=config.frequency_for(platform.platform_id),
                    benchmark_platform=table.platform_key(platform.platform_id),
                    market=table.country_key(country),
                )
            )
    return pairs


def blend_rates(pairs: list[PairAllocation]) -> BlendedRates:
    """Compute spend-weighted average rates across funded pairs.

    Platforms with more spend dominate the blend; pairs with zero spend do not
    contribute.  The CPC is only blended when every funded pair reports one.

    Args:
        pairs: Pair allocations from :func:`allocate_pairs`.

    Returns:
        The blended rates (all zero when nothing is funded).
    """
    funded = [p for p in pairs if p.spend > 0]
    cpc: Decimal | None = None
    if funded and all(p.lookup.rates.cpc is not None for p in funded):
        cpc = _weighted([(p.lookup.rates.cpc, p.spend) for p in funded])  # type: ignore[misc]
    return BlendedRates(
        cpm=_weighted([(p.lookup.rates.cpm, p.spend) for p in funded]),
        ctr=_weighted([(p.lookup.rates.ctr, p.spend) for p in funded]),
        conversion_rate=_weighted([(p.lookup.rates.conversion_rate, p.spend) for p in funded]),
        frequency=_weighted([(p.frequency, p.spend) for p in funded]),
        cpc=cpc,
    )


def score_confidence(
    pairs: list[PairAllocation],
    data_points: int,
    total_budget: Decimal,
    min_data_points: int,
) -> Confidence:
    """Rate how much real data backs an estimate.

    Only funded pairs are considered; a platform left at 0% says nothing
    about the estimate.  Rules (evaluated in order):
    1. No budget or no funded pair: LOW
    2. Any funded pair resolved from the global default: LOW
    3. Any funded pair resolved from the platform average: MEDIUM
    4. All funded pairs exact with at least *min_data_points* rows: HIGH
    5. All funded pairs exact but too few rows: MEDIUM

    A fallback can therefore only lower confidence, never raise it.
    """
    funded = [p for p in pairs if p.spend > 0]
    if not funded or total_budget <= 0:
        return Confidence.LOW
    tiers = {p.lookup.tier for p in funded}
    if LookupTier.GLOBAL in tiers:
        return Confidence.LOW
    if LookupTier.PLATFORM in tiers:
        return Confidence.MEDIUM
    if data_points >= min_data_points:
        return Confidence.HIGH
    return Confidence.MEDIUM


def estimate(
    setup: CampaignSetup,
    table: BenchmarkTable | None,
    config: EstimationConfig = DEFAULT_ESTIMATION_CONFIG,
    rules: tuple[InsightRule, ...] = DEFAULT_RULES,
    pair_rules: tuple[PairRule, ...] = DEFAULT_PAIR_RULES,
) -> EstimationResult:
    """Predict reach, impressions, clicks and conversions for a setup.

    Never raises for incomplete setups: missing countries, platforms or
    budget produce an all-zero result with LOW confidence, so the function is
    safe to call as a live preview on every edit.

    Args:
        setup: The campaign setup to estimate.
        table: The benchmark table.
        config: Estimation constants.
        rules: Ordered insight rules to evaluate.
        pair_rules: Ordered per-pair rules, evaluated before *rules*.

    Returns:
        The estimation result, including insights and recommendations.

    Raises:
        BenchmarkUnavailableError: If *table* is missing or not a benchmark table.
    """
    if not isinstance(table, BenchmarkTable):
        raise BenchmarkUnavailableError("Benchmark table is not available")

    pairs = allocate_pairs(setup, table, config)
    funded = [p for p in pairs if p.spend > 0]
    data_points = len({row_id for p in funded for row_id in p.lookup.row_ids})
    fallbacks = [
        BenchmarkFallback(platform=p.platform_id, country=p.country, tier=p.lookup.tier)
        for p in funded
        if p.lookup.tier is not LookupTier.EXACT
    ]
    confidence = score_confidence(funded, data_points, setup.total_budget, config.min_data_points)

    budget = setup.total_budget
    blended = blend_rates(funded)

    if budget > 0 and blended.cpm > 0:
        impressions = budget / blended.cpm * THOUSAND
        if blended.cpc is not None and blended.cpc > 0:
            clicks = budget / blended.cpc
            average_cpc = blended.cpc
            average_ctr = clicks / impressions * HUNDRED
        else:
            clicks = impressions * blended.ctr / HUNDRED
            average_ctr = blended.ctr
            average_cpc = budget / clicks if clicks > 0 else ZERO
        reach = impressions / blended.frequency if blended.frequency > 0 else impressions
        conversions = clicks * blended.conversion_rate / HUNDRED
        average_cpm = blended.cpm
        average_conversion_rate = blended.conversion_rate
    else:
        impressions = clicks = reach = conversions = ZERO
        average_cpm = average_cpc = average_ctr = average_conversion_rate = ZERO

    estimated_clicks = _round_count(clicks)
    estimated_conversions = _round_count(conversions)
    cost_per_click = budget / estimated_clicks if estimated_clicks > 0 else ZERO
    cost_per_conversion = budget / estimated_conversions if estimated_conversions > 0 else ZERO

    result = EstimationResult(
        estimated_reach=_round_count(reach),
        estimated_impressions=_round_count(impressions),
        estimated_clicks=estimated_clicks,
        estimated_conversions=estimated_conversions,
        cost_per_click=_money(cost_per_click),
        cost_per_conversion=_money(cost_per_conversion),
        average_cpm=_money(average_cpm),
        average_cpc=_money(average_cpc),
        average_ctr=_money(average_ctr),
        average_conversion_rate=_money(average_conversion_rate),
        confidence=confidence,
        data_points=data_points,
        fallbacks=fallbacks,
        breakdown=[_pair_estimate(p) for p in funded],
        markets=[table.country_key(c) for c in setup.countries],
    )

    insights, recommendations = evaluate_rules(setup, result, config, rules, pair_rules)
    logger.debug(
        "estimate_computed",
        platforms=len(setup.platforms),
        countries=len(setup.countries),
        confidence=confidence.value,
        data_points=data_points,
    )
    return result.model_copy(update={"insights": insights, "recommendations": recommendations})
