"""Shared pytest fixtures for the campaign planner test suite."""

from decimal import Decimal

import pytest

from campaign_planner.allocation.models import CampaignSetup, ContentItem, PlatformAllocation
from campaign_planner.benchmarks.loader import DEFAULT_BENCHMARKS_PATH, load_benchmark_table
from campaign_planner.benchmarks.models import BenchmarkRates, BenchmarkRow
from campaign_planner.benchmarks.table import BenchmarkTable


@pytest.fixture
def flat_rates() -> BenchmarkRates:
    """Round-number rates: $5 CPM, 2% CTR, 0.1% conversion rate."""
    return BenchmarkRates(
        cpm=Decimal("5"),
        ctr=Decimal("2"),
        conversion_rate=Decimal("0.1"),
    )


@pytest.fixture
def flat_table(flat_rates: BenchmarkRates) -> BenchmarkTable:
    """A table with one exact row for meta in AE at the flat rates."""
    row = BenchmarkRow(platform="meta", country="AE", **flat_rates.model_dump())
    return BenchmarkTable(rows=[row], global_default=flat_rates)


@pytest.fixture
def gcc_table() -> BenchmarkTable:
    """The benchmark table shipped in ``config/benchmarks.yaml``."""
    return load_benchmark_table(DEFAULT_BENCHMARKS_PATH)


@pytest.fixture
def complete_setup() -> CampaignSetup:
    """A complete single-country, single-platform setup."""
    return CampaignSetup(
        countries=("AE",),
        total_budget=Decimal("10000"),
        duration=30,
        platforms=(
            PlatformAllocation(
                platform_id="meta",
                budget_percent=Decimal("100"),
                campaign_types={"awareness": Decimal("100")},
            ),
        ),
        content=(ContentItem(content_type="reel"),),
    )
