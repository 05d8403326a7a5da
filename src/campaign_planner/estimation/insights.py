"""Rule-based insights and recommendations for an estimate.

Each rule is a pure function of the setup, the numeric estimate and the
estimation config that returns a short message or None.  Rules are evaluated
independently in ``DEFAULT_RULES`` order; every rule that fires contributes
its message, so several can fire for the same estimate.

Pair rules look at one funded (platform, country) pair of the estimate
breakdown at a time and only see pairs backed by exact benchmark rows.  Their
messages come first, in breakdown order.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from campaign_planner.domain.models import EstimationResult, PairEstimate
from campaign_planner.domain.types import (
    GCC_COUNTRIES,
    InsightKind,
    LookupTier,
    PlatformRole,
    get_platform_role,
)

if TYPE_CHECKING:
    from campaign_planner.allocation.models import CampaignSetup
    from campaign_planner.estimation.config import EstimationConfig

RuleFn = Callable[["CampaignSetup", EstimationResult, "EstimationConfig"], str | None]
PairRuleFn = Callable[[PairEstimate, "EstimationConfig"], str | None]

SEARCH_PLATFORMS: frozenset[str] = frozenset({"google", "google_ads"})
CTR_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class InsightRule:
    """A named predicate producing one insight or recommendation.

    Attributes:
        name: Stable identifier, useful in tests and logs.
        kind: Which output list the message goes to.
        evaluate: Returns the message when the rule fires, else None.
    """

    name: str
    kind: InsightKind
    evaluate: RuleFn


@dataclass(frozen=True)
class PairRule:
    """Like :class:`InsightRule`, but judged on a single breakdown pair."""

    name: str
    kind: InsightKind
    evaluate: PairRuleFn


def _daily_budget(setup: CampaignSetup) -> Decimal | None:
    if setup.duration <= 0 or setup.total_budget <= 0:
        return None
    return setup.total_budget / Decimal(setup.duration)


def _has_pairs(setup: CampaignSetup) -> bool:
    return bool(setup.platforms) and bool(setup.countries)


def low_daily_budget(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    daily = _daily_budget(setup)
    if daily is not None and daily < config.low_daily_budget:
        return "Low daily budget may limit reach potential"
    return None


def extend_low_budget(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    if low_daily_budget(setup, result, config):
        return "Consider extending campaign duration or increasing budget"
    return None


def high_daily_budget(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    daily = _daily_budget(setup)
    if daily is not None and daily > config.high_daily_budget:
        return "High daily budget enables aggressive market penetration"
    return None


def monitor_high_budget(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    if high_daily_budget(setup, result, config):
        return "Monitor performance closely and optimize for best-performing ad sets"
    return None


def balanced_platform_mix(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    """Fires for a well-funded mix of reach and performance platforms."""
    if setup.total_budget < config.balanced_mix_min_budget:
        return None
    roles = {
        get_platform_role(p.platform_id) for p in setup.platforms if p.budget_percent > 0
    }
    if {PlatformRole.REACH, PlatformRole.PERFORMANCE} <= roles:
        return (
            "Mix of reach and performance platforms supports consistent delivery "
            "across the funnel"
        )
    return None


def single_market_cost(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    """Fires when the only selected market buys impressions expensively."""
    if len(setup.countries) != 1 or result.average_cpm <= config.high_cpm_threshold:
        return None
    return (
        f"{setup.countries[0]} is a high-cost market (${result.average_cpm} CPM); "
        "the budget will buy fewer impressions than in lower-cost markets"
    )


def gcc_markets(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    """Fires when any market is a GCC country, by code or by aliased name."""
    markets = result.markets or [c.strip().upper() for c in setup.countries]
    if any(m in GCC_COUNTRIES for m in markets):
        return "GCC markets typically show higher engagement and conversion rates"
    return None


def gcc_premium_content(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    if gcc_markets(setup, result, config):
        return "Leverage premium content for affluent GCC audiences"
    return None


def data_strength(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    """Describe how much historical data backs the estimate."""
    if not _has_pairs(setup):
        return None
    if result.data_points >= config.strong_data_points:
        return "Strong historical data available for accurate predictions"
    if result.data_points >= config.moderate_data_points:
        return "Moderate historical data - predictions based on available metrics"
    return "Limited historical data - estimates include industry benchmarks"


def run_test_campaigns(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    if _has_pairs(setup) and result.data_points < config.moderate_data_points:
        return "Consider running test campaigns to gather more data"
    return None


def fallback_benchmarks(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    count = len(result.fallbacks)
    if count == 0:
        return None
    noun = "pair uses" if count == 1 else "pairs use"
    return (
        f"{count} platform/market {noun} broader benchmarks; "
        "actual performance may vary"
    )


def search_allocation(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    if any(
        p.platform_id.lower() in SEARCH_PLATFORMS
        and p.budget_percent > config.search_dominance_percent
        for p in setup.platforms
    ):
        return "Strong Google Ads allocation will drive high-intent traffic"
    return None


def landing_pages(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    if search_allocation(setup, result, config):
        return "Focus on conversion-optimized landing pages"
    return None


def content_diversity(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    if setup.content_count < config.content_diversity_min:
        return (
            f"Plan at least {config.content_diversity_min} content types "
            "to keep creatives fresh across the campaign"
        )
    return None


def diverse_portfolio(
    setup: CampaignSetup, result: EstimationResult, config: EstimationConfig
) -> str | None:
    if setup.content_count > config.diverse_content_count:
        return "Diverse content portfolio will improve audience engagement"
    return None


def ab_test_content(setup: CampaignSetup, result: EstimationResult, config: EstimationConfig) -> str | None:
    if diverse_portfolio(setup, result, config):
        return "A/B test different content types to identify top performers"
    return None


DEFAULT_RULES: tuple[InsightRule, ...] = (
    InsightRule("low_daily_budget", InsightKind.INSIGHT, low_daily_budget),
    InsightRule("extend_low_budget", InsightKind.RECOMMENDATION, extend_low_budget),
    InsightRule("high_daily_budget", InsightKind.INSIGHT, high_daily_budget),
    InsightRule("monitor_high_budget", InsightKind.RECOMMENDATION, monitor_high_budget),
    InsightRule("balanced_platform_mix", InsightKind.INSIGHT, balanced_platform_mix),
    InsightRule("single_market_cost", InsightKind.INSIGHT, single_market_cost),
    InsightRule("gcc_markets", InsightKind.INSIGHT, gcc_markets),
    InsightRule("gcc_premium_content", InsightKind.RECOMMENDATION, gcc_premium_content),
    InsightRule("data_strength", InsightKind.INSIGHT, data_strength),
    InsightRule("run_test_campaigns", InsightKind.RECOMMENDATION, run_test_campaigns),
    InsightRule("fallback_benchmarks", InsightKind.INSIGHT, fallback_benchmarks),
    InsightRule("search_allocation", InsightKind.INSIGHT, search_allocation),
    InsightRule("landing_pages", InsightKind.RECOMMENDATION, landing_pages),
    InsightRule("content_diversity", InsightKind.RECOMMENDATION, content_diversity),
    InsightRule("diverse_portfolio", InsightKind.INSIGHT, diverse_portfolio),
    InsightRule("ab_test_content", InsightKind.RECOMMENDATION, ab_test_content),
)


def meta_engagement(pair: PairEstimate, config: EstimationConfig) -> str | None:
    if pair.benchmark_platform == "meta" and pair.ctr > config.meta_engagement_ctr:
        ctr = pair.ctr.quantize(CTR_PLACES, rounding=ROUND_HALF_UP)
        return f"Meta campaigns in {pair.country} show high engagement ({ctr}% CTR)"
    return None


def meta_cost_effective_clicks(pair: PairEstimate, config: EstimationConfig) -> str | None:
    if (
        pair.benchmark_platform == "meta"
        and pair.cpc is not None
        and pair.cpc < config.meta_cost_effective_cpc
    ):
        return f"Meta offers cost-effective clicks in {pair.country} (~${pair.cpc} CPC)"
    return None


def google_intent(pair: PairEstimate, config: EstimationConfig) -> str | None:
    if pair.benchmark_platform == "google" and pair.ctr > config.google_intent_ctr:
        return f"Google campaigns in {pair.country} show excellent intent-driven performance"
    return None


def google_app_installs(pair: PairEstimate, config: EstimationConfig) -> str | None:
    if pair.benchmark_platform == "google":
        return f"Focus on app install campaigns for Google in {pair.country}"
    return None


def linkedin_professional_cpc(pair: PairEstimate, config: EstimationConfig) -> str | None:
    if (
        pair.benchmark_platform == "linkedin"
        and pair.cpc is not None
        and pair.cpc > config.linkedin_high_cpc
    ):
        return (
            f"LinkedIn has higher CPC in {pair.country} "
            "but targets professional audience"
        )
    return None


DEFAULT_PAIR_RULES: tuple[PairRule, ...] = (
    PairRule("meta_engagement", InsightKind.INSIGHT, meta_engagement),
    PairRule("meta_cost_effective_clicks", InsightKind.INSIGHT, meta_cost_effective_clicks),
    PairRule("google_intent", InsightKind.INSIGHT, google_intent),
    PairRule("google_app_installs", InsightKind.RECOMMENDATION, google_app_installs),
    PairRule("linkedin_professional_cpc", InsightKind.INSIGHT, linkedin_professional_cpc),
)


def evaluate_rules(
    setup: CampaignSetup,
    result: EstimationResult,
    config: EstimationConfig,
    rules: tuple[InsightRule, ...] = DEFAULT_RULES,
    pair_rules: tuple[PairRule, ...] = DEFAULT_PAIR_RULES,
) -> tuple[list[str], list[str]]:
    """Run every rule in order and split the messages by kind.

    Args:
        setup: The campaign setup that was estimated.
        result: The numeric estimate (insight lists are ignored).
        config: Thresholds for the rules.
        rules: Rules to evaluate, in output order.
        pair_rules: Rules run against each exact pair of ``result.breakdown``
            before *rules*.

    Returns:
        ``(insights, recommendations)`` in rule order.
    """
    insights: list[str] = []
    recommendations: list[str] = []

    def _add(kind: InsightKind, message: str | None) -> None:
        if message is None:
            return
        if kind is InsightKind.INSIGHT:
            insights.append(message)
        else:
            recommendations.append(message)

    for pair in result.breakdown:
        if pair.tier is not LookupTier.EXACT:
            continue
        for pair_rule in pair_rules:
            _add(pair_rule.kind, pair_rule.evaluate(pair, config))
    for rule in rules:
        _add(rule.kind, rule.evaluate(setup, result, config))
    return insights, recommendations
