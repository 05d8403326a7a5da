"""Historical benchmark data and fallback lookup.

Re-exports key types for convenient access:
    from campaign_planner.benchmarks import BenchmarkTable, load_benchmark_table
"""

from campaign_planner.benchmarks.loader import (
    DEFAULT_BENCHMARKS_PATH,
    build_benchmark_table,
    load_benchmark_table,
)
from campaign_planner.benchmarks.models import (
    BenchmarkDocument,
    BenchmarkLookup,
    BenchmarkRates,
    BenchmarkRow,
)
from campaign_planner.benchmarks.table import BenchmarkTable, average_rates

__all__ = [
    "DEFAULT_BENCHMARKS_PATH",
    "BenchmarkDocument",
    "BenchmarkLookup",
    "BenchmarkRates",
    "BenchmarkRow",
    "BenchmarkTable",
    "average_rates",
    "build_benchmark_table",
    "load_benchmark_table",
]
