"""Load the benchmark table from a YAML file.

Unlike the tunable estimation constants, benchmark data has no safe default:
a missing or malformed file raises :class:`BenchmarkUnavailableError` so the
caller can show an "estimates unavailable" state.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from campaign_planner.benchmarks.models import BenchmarkDocument
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.domain.errors import BenchmarkUnavailableError

logger = structlog.get_logger()

# Resolve from src/campaign_planner/benchmarks/ up 3 levels to project root, then into config/
DEFAULT_BENCHMARKS_PATH = Path(__file__).resolve().parents[3] / "config" / "benchmarks.yaml"


def build_benchmark_table(document: BenchmarkDocument) -> BenchmarkTable:
    """Build a table from an already-validated benchmark document."""
    return BenchmarkTable(
        rows=document.rows,
        global_default=document.global_default,
        platform_aliases=document.platform_aliases,
        country_aliases=document.country_aliases,
    )


def load_benchmark_table(path: Path = DEFAULT_BENCHMARKS_PATH) -> BenchmarkTable:
    """Load and validate benchmark data from YAML.

    Args:
        path: Path to the benchmark YAML file.

    Returns:
        The populated benchmark table.

    Raises:
        BenchmarkUnavailableError: If the file is missing, is not valid YAML,
            is empty, or does not match the benchmark schema.
    """
    if not path.exists():
        raise BenchmarkUnavailableError(f"Benchmark file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise BenchmarkUnavailableError(f"Invalid YAML in benchmark file {path}") from exc

    if not raw:
        raise BenchmarkUnavailableError(f"Benchmark file is empty: {path}")

    try:
        document = BenchmarkDocument.model_validate(raw)
    except ValidationError as exc:
        logger.error("benchmark_validation_failed", path=str(path), errors=exc.errors())
        raise BenchmarkUnavailableError(f"Malformed benchmark file {path}") from exc

    table = build_benchmark_table(document)
    logger.info(
        "benchmark_table_loaded",
        path=str(path),
        rows=len(document.rows),
        platforms=len(table.platforms()),
    )
    return table
