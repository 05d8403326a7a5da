"""Tunable constants for the estimation engine.

Frequencies and insight thresholds are retuned whenever the historical data
is refreshed, so they live in ``config/estimation.yaml`` rather than inline.
Missing, empty or invalid YAML falls back to the defaults below.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = structlog.get_logger()

DEFAULT_ESTIMATION_CONFIG_PATH = (
    Path(__file__).resolve().parents[3] / "config" / "estimation.yaml"
)

# Average impressions per reached user, by platform.  Feed-heavy social
# platforms show the same user more ads than search.
DEFAULT_PLATFORM_FREQUENCY: dict[str, Decimal] = {
    "meta": Decimal("2.8"),
    "instagram": Decimal("2.8"),
    "tiktok": Decimal("2.5"),
    "youtube": Decimal("2.5"),
    "snapchat": Decimal("2.5"),
    "twitter": Decimal("2.0"),
    "pinterest": Decimal("2.0"),
    "linkedin": Decimal("1.8"),
    "google": Decimal("1.5"),
}


class EstimationConfig(BaseModel):
    """Thresholds and assumptions used by the estimator and its insight rules."""

    model_config = ConfigDict(frozen=True)

    # -- Confidence ------------------------------------------------------------
    min_data_points: int = 3

    # -- Reach -----------------------------------------------------------------
    default_frequency: Decimal = Decimal("2.0")
    platform_frequency: dict[str, Decimal] = Field(
        default_factory=lambda: dict(DEFAULT_PLATFORM_FREQUENCY)
    )

    # -- Insight thresholds ----------------------------------------------------
    low_daily_budget: Decimal = Decimal("50")
    high_daily_budget: Decimal = Decimal("500")
    balanced_mix_min_budget: Decimal = Decimal("5000")
    high_cpm_threshold: Decimal = Decimal("5")
    search_dominance_percent: Decimal = Decimal("40")
    strong_data_points: int = 5
    moderate_data_points: int = 2
    content_diversity_min: int = 3
    diverse_content_count: int = 8

    # -- Per-pair thresholds ---------------------------------------------------
    meta_engagement_ctr: Decimal = Decimal("2")
    meta_cost_effective_cpc: Decimal = Decimal("0.15")
    google_intent_ctr: Decimal = Decimal("4")
    linkedin_high_cpc: Decimal = Decimal("1.0")

    def frequency_for(self, platform_id: str) -> Decimal:
        """Return the assumed average frequency for a platform."""
        return self.platform_frequency.get(platform_id.strip().lower(), self.default_frequency)


DEFAULT_ESTIMATION_CONFIG = EstimationConfig()


def load_estimation_config(
    path: Path = DEFAULT_ESTIMATION_CONFIG_PATH,
) -> EstimationConfig:
    """Load and validate estimation constants from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        Validated config.  Falls back to all-defaults if the file is missing,
        empty, or contains invalid YAML or values.
    """
    if not path.exists():
        return EstimationConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError:
        logger.warning("estimation_config_invalid_yaml", path=str(path))
        return EstimationConfig()

    if raw is None:
        return EstimationConfig()

    try:
        return EstimationConfig.model_validate(raw)
    except ValidationError as exc:
        logger.warning("estimation_config_invalid", path=str(path), errors=exc.errors())
        return EstimationConfig()
