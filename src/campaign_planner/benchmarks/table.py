"""In-memory benchmark table with exact -> platform -> global fallback lookup.

The table is built once (usually by :func:`load_benchmark_table`) and only
read afterwards; :meth:`BenchmarkTable.resolve` does no I/O so the estimator
can call it on every keystroke.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from campaign_planner.benchmarks.models import BenchmarkLookup, BenchmarkRates, BenchmarkRow
from campaign_planner.domain.errors import BenchmarkUnavailableError
from campaign_planner.domain.types import LookupTier


def average_rates(rows: Sequence[BenchmarkRates]) -> BenchmarkRates:
    """Arithmetic mean of several rate observations.

    CPC and cost-per-install are averaged only over rows that report them and
    stay None when no row does.

    Args:
        rows: At least one set of rates.

    Returns:
        The averaged rates.
    """
    count = Decimal(len(rows))

    def _mean_optional(values: list[Decimal | None]) -> Decimal | None:
        present = [v for v in values if v is not None]
        if not present:
            return None
        return sum(present, Decimal("0")) / Decimal(len(present))

    return BenchmarkRates(
        cpm=sum((r.cpm for r in rows), Decimal("0")) / count,
        cpc=_mean_optional([r.cpc for r in rows]),
        ctr=sum((r.ctr for r in rows), Decimal("0")) / count,
        conversion_rate=sum((r.conversion_rate for r in rows), Decimal("0")) / count,
        cost_per_install=_mean_optional([r.cost_per_install for r in rows]),
    )


class BenchmarkTable:
    """Queryable historical rates keyed by (platform, country).

    Platform ids are matched case-insensitively after alias mapping (e.g.
    ``instagram`` is reported under ``meta``).  Countries may be given as
    codes or as names listed in *country_aliases*.

    Args:
        rows: Historical observations.  Several rows may share a key (one per
            objective); they are averaged on lookup.
        global_default: Rates used when a platform has no data at all.
        platform_aliases: Platform id -> platform id the data is filed under.
        country_aliases: Country name -> country code.

    Raises:
        BenchmarkUnavailableError: If *global_default* is missing.
    """

    def __init__(
        self,
        rows: Iterable[BenchmarkRow],
        global_default: BenchmarkRates,
        platform_aliases: dict[str, str] | None = None,
        country_aliases: dict[str, str] | None = None,
    ) -> None:
        if not isinstance(global_default, BenchmarkRates):
            raise BenchmarkUnavailableError("Benchmark table has no global default rates")

        self._platform_aliases = {
            k.strip().lower(): v.strip().lower() for k, v in (platform_aliases or {}).items()
        }
        self._country_aliases = {
            k.strip().lower(): v.strip().upper() for k, v in (country_aliases or {}).items()
        }
        self._rows: list[BenchmarkRow] = list(rows)
        self._global_default = global_default

        self._by_key: dict[tuple[str, str], list[int]] = {}
        self._by_platform: dict[str, list[int]] = {}
        for index, row in enumerate(self._rows):
            platform = self.platform_key(row.platform)
            country = self.country_key(row.country)
            self._by_key.setdefault((platform, country), []).append(index)
            self._by_platform.setdefault(platform, []).append(index)

        self._platform_averages: dict[str, BenchmarkRates] = {
            platform: average_rates([self._rows[i] for i in ids])
            for platform, ids in self._by_platform.items()
        }

    @property
    def rows(self) -> list[BenchmarkRow]:
        """Return a copy of all rows in load order."""
        return list(self._rows)

    @property
    def global_default(self) -> BenchmarkRates:
        """Rates used when nothing more specific is known."""
        return self._global_default

    def platform_key(self, platform: str) -> str:
        """Normalize a platform id and apply aliases."""
        key = platform.strip().lower()
        return self._platform_aliases.get(key, key)

    def country_key(self, country: str) -> str:
        """Normalize a country code or name to the code the data is keyed by."""
        stripped = country.strip()
        return self._country_aliases.get(stripped.lower(), stripped.upper())

    def resolve(self, platform: str, country: str) -> BenchmarkLookup:
        """Look up rates for a (platform, country) pair with fallback.

        Resolution order:
        1. Exact rows for the pair (averaged if there are several).
        2. Average of the platform's rows across all countries.
        3. The table's global default.

        Args:
            platform: Platform id as used in the campaign setup.
            country: Country code or name.

        Returns:
            The resolved rates, the tier that supplied them, and the ids of
            exact rows used.
        """
        platform_key = self.platform_key(platform)
        ids = self._by_key.get((platform_key, self.country_key(country)))
        if ids:
            return BenchmarkLookup(
                rates=average_rates([self._rows[i] for i in ids]),
                tier=LookupTier.EXACT,
                row_ids=tuple(ids),
            )

        platform_average = self._platform_averages.get(platform_key)
        if platform_average is not None:
            return BenchmarkLookup(rates=platform_average, tier=LookupTier.PLATFORM)

        return BenchmarkLookup(rates=self._global_default, tier=LookupTier.GLOBAL)

    def platforms(self) -> list[str]:
        """Sorted platform keys that have at least one row."""
        return sorted(self._by_platform)

    def countries(self) -> list[str]:
        """Sorted country codes that have at least one row."""
        return sorted({country for _, country in self._by_key})

    def filter(self, platform: str | None = None, country: str | None = None) -> list[BenchmarkRow]:
        """Return rows matching the given platform and/or country.

        Unknown values simply match nothing; ``None`` means no constraint.
        """
        platform_key = self.platform_key(platform) if platform else None
        country_key = self.country_key(country) if country else None
        return [
            row
            for row in self._rows
            if (platform_key is None or self.platform_key(row.platform) == platform_key)
            and (country_key is None or self.country_key(row.country) == country_key)
        ]
