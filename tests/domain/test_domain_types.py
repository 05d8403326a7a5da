"""Tests for domain enums, step ordering and EstimationResult."""

import pytest
from pydantic import ValidationError

from campaign_planner.domain.models import BenchmarkFallback, EstimationResult
from campaign_planner.domain.types import (
    PER_COUNTRY_STEPS,
    WIZARD_STEPS,
    Confidence,
    LookupTier,
    PlatformRole,
    WizardStep,
    get_platform_role,
)


class TestWizardSteps:
    def test_steps_in_display_order(self) -> None:
        assert [s.value for s in WIZARD_STEPS] == [
            "countries",
            "budget",
            "duration",
            "platforms",
            "platform_budgets",
            "campaign_types",
            "campaign_type_budgets",
            "content",
            "review",
        ]

    def test_complete_is_not_a_data_step(self) -> None:
        assert WizardStep.COMPLETE not in WIZARD_STEPS

    def test_per_country_steps_start_at_platforms(self) -> None:
        assert PER_COUNTRY_STEPS[0] is WizardStep.PLATFORMS
        assert PER_COUNTRY_STEPS[-1] is WizardStep.REVIEW
        assert WizardStep.BUDGET not in PER_COUNTRY_STEPS


class TestPlatformRole:
    @pytest.mark.parametrize(
        ("platform_id", "role"),
        [
            ("meta", PlatformRole.REACH),
            ("TikTok", PlatformRole.REACH),
            ("google", PlatformRole.PERFORMANCE),
            (" linkedin ", PlatformRole.PERFORMANCE),
            ("carrier_pigeon", None),
        ],
        ids=["meta", "case_insensitive", "google", "whitespace", "unknown"],
    )
    def test_get_platform_role(self, platform_id: str, role: PlatformRole | None) -> None:
        assert get_platform_role(platform_id) == role


class TestEstimationResult:
    def test_defaults_are_zero_and_low(self) -> None:
        result = EstimationResult()
        assert result.estimated_impressions == 0
        assert result.confidence is Confidence.LOW
        assert result.insights == []
        assert result.used_fallback is False

    def test_negative_counts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EstimationResult(estimated_clicks=-1)

    def test_used_fallback(self) -> None:
        result = EstimationResult(
            fallbacks=[BenchmarkFallback(platform="tiktok", country="AE", tier=LookupTier.GLOBAL)]
        )
        assert result.used_fallback is True

    def test_frozen(self) -> None:
        result = EstimationResult()
        with pytest.raises(ValidationError):
            result.estimated_reach = 5  # type: ignore[misc]
