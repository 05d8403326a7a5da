"""Tests for BenchmarkTable lookup, fallback tiers and listing queries."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from campaign_planner.benchmarks.models import BenchmarkRates, BenchmarkRow
from campaign_planner.benchmarks.table import BenchmarkTable, average_rates
from campaign_planner.domain.errors import BenchmarkUnavailableError
from campaign_planner.domain.types import LookupTier

GLOBAL = BenchmarkRates(cpm=Decimal("5"), ctr=Decimal("2"), conversion_rate=Decimal("5"))


def _row(platform: str, country: str, cpm: str, ctr: str = "2", cpc: str | None = None) -> BenchmarkRow:
    return BenchmarkRow(
        platform=platform,
        country=country,
        cpm=Decimal(cpm),
        ctr=Decimal(ctr),
        conversion_rate=Decimal("5"),
        cpc=Decimal(cpc) if cpc is not None else None,
    )


@pytest.fixture
def table() -> BenchmarkTable:
    return BenchmarkTable(
        rows=[
            _row("meta", "AE", "2", cpc="0.10"),
            _row("meta", "AE", "4"),
            _row("meta", "SA", "6", cpc="0.30"),
            _row("google", "KW", "7"),
        ],
        global_default=GLOBAL,
        platform_aliases={"instagram": "meta"},
        country_aliases={"united arab emirates": "AE"},
    )


class TestBenchmarkRates:
    def test_float_input_keeps_published_digits(self) -> None:
        rates = BenchmarkRates(cpm=2.30, ctr=0.28, conversion_rate=5.0)
        assert rates.cpm == Decimal("2.3")
        assert rates.ctr == Decimal("0.28")

    @pytest.mark.parametrize(
        "fields",
        [
            {"cpm": "0", "ctr": "1", "conversion_rate": "1"},
            {"cpm": "1", "ctr": "-1", "conversion_rate": "1"},
            {"cpm": "1", "ctr": "1", "conversion_rate": "1", "cpc": "0"},
        ],
        ids=["zero_cpm", "negative_ctr", "zero_cpc"],
    )
    def test_invalid_rates_rejected(self, fields: dict[str, str]) -> None:
        with pytest.raises(ValidationError):
            BenchmarkRates(**fields)


class TestAverageRates:
    def test_optional_fields_averaged_over_reporting_rows(self) -> None:
        averaged = average_rates([_row("m", "AE", "2", cpc="0.10"), _row("m", "AE", "4")])
        assert averaged.cpm == Decimal("3")
        assert averaged.cpc == Decimal("0.10")
        assert averaged.cost_per_install is None


class TestResolve:
    def test_exact_match_averages_rows(self, table: BenchmarkTable) -> None:
        lookup = table.resolve("meta", "AE")
        assert lookup.tier is LookupTier.EXACT
        assert lookup.rates.cpm == Decimal("3")
        assert lookup.row_ids == (0, 1)

    def test_platform_fallback_averages_all_countries(self, table: BenchmarkTable) -> None:
        lookup = table.resolve("meta", "QA")
        assert lookup.tier is LookupTier.PLATFORM
        assert lookup.rates.cpm == Decimal("4")
        assert lookup.row_ids == ()

    def test_global_fallback(self, table: BenchmarkTable) -> None:
        lookup = table.resolve("tiktok", "AE")
        assert lookup.tier is LookupTier.GLOBAL
        assert lookup.rates == GLOBAL

    @pytest.mark.parametrize(
        ("platform", "country"),
        [("META", "ae"), ("instagram", "AE"), ("meta", "United Arab Emirates"), (" meta ", " AE ")],
        ids=["case", "platform_alias", "country_alias", "whitespace"],
    )
    def test_keys_are_normalized(self, table: BenchmarkTable, platform: str, country: str) -> None:
        assert table.resolve(platform, country).tier is LookupTier.EXACT

    def test_missing_global_default_is_unavailable(self) -> None:
        with pytest.raises(BenchmarkUnavailableError):
            BenchmarkTable(rows=[], global_default=None)  # type: ignore[arg-type]


class TestListing:
    def test_platforms_and_countries(self, table: BenchmarkTable) -> None:
        assert table.platforms() == ["google", "meta"]
        assert table.countries() == ["AE", "KW", "SA"]

    @pytest.mark.parametrize(
        ("platform", "country", "expected"),
        [
            (None, None, 4),
            ("meta", None, 3),
            ("instagram", "AE", 2),
            (None, "KW", 1),
            ("tiktok", None, 0),
        ],
        ids=["all", "platform", "alias_and_country", "country", "unknown"],
    )
    def test_filter(
        self, table: BenchmarkTable, platform: str | None, country: str | None, expected: int
    ) -> None:
        assert len(table.filter(platform=platform, country=country)) == expected

    def test_rows_returns_copy(self, table: BenchmarkTable) -> None:
        table.rows.clear()
        assert len(table.rows) == 4


class TestShippedTable:
    def test_gcc_markets_resolve_exactly(self, gcc_table: BenchmarkTable) -> None:
        for country in ("AE", "SA", "KW", "QA", "OM", "BH"):
            assert gcc_table.resolve("meta", country).tier is LookupTier.EXACT

    def test_instagram_reports_under_meta(self, gcc_table: BenchmarkTable) -> None:
        assert gcc_table.resolve("instagram", "SA") == gcc_table.resolve("meta", "SA")

    def test_unknown_country_falls_back_to_platform(self, gcc_table: BenchmarkTable) -> None:
        assert gcc_table.resolve("meta", "GB").tier is LookupTier.PLATFORM
