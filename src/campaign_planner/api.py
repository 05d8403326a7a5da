"""HTTP surface for live estimates and benchmark browsing.

Routes are plain ``def`` handlers: estimation is pure in-process computation.
The benchmark table and estimation config are read from ``app.state``, where
:func:`campaign_planner.app.create_app` puts them at startup.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError

from campaign_planner.allocation.models import CampaignSetup, ContentItem, PlatformAllocation
from campaign_planner.benchmarks.models import BenchmarkRow
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.domain.errors import BenchmarkUnavailableError, InvalidMutationError
from campaign_planner.domain.models import EstimationResult
from campaign_planner.estimation.engine import estimate
from campaign_planner.observability.metrics import record_estimate

logger = structlog.get_logger()

router = APIRouter()


class PlatformRequest(BaseModel):
    """One platform of an estimate request."""

    platform_id: str
    budget_percent: Decimal = Decimal("0")
    campaign_types: dict[str, Decimal] = Field(default_factory=dict)


class EstimateRequest(BaseModel):
    """Body of ``POST /estimates``: a campaign setup in wire form."""

    countries: list[str] = Field(default_factory=list)
    total_budget: Decimal = Decimal("0")
    duration: int = 0
    platforms: list[PlatformRequest] = Field(default_factory=list)
    content: list[str] = Field(default_factory=list)

    def to_setup(self) -> CampaignSetup:
        """Build the domain setup this request describes."""
        return CampaignSetup(
            countries=tuple(self.countries),
            total_budget=self.total_budget,
            duration=self.duration,
            platforms=tuple(
                PlatformAllocation(
                    platform_id=p.platform_id,
                    budget_percent=p.budget_percent,
                    campaign_types=p.campaign_types,
                )
                for p in self.platforms
            ),
            content=tuple(ContentItem(content_type=c) for c in dict.fromkeys(self.content)),
        )


def _benchmark_table(request: Request) -> BenchmarkTable:
    table = getattr(request.app.state, "benchmarks", None)
    if not isinstance(table, BenchmarkTable):
        logger.warning("benchmarks_unavailable", path=request.url.path)
        raise HTTPException(status_code=503, detail="estimates unavailable")
    return table


@router.post("/estimates")
def create_estimate(body: EstimateRequest, request: Request) -> EstimationResult:
    """Estimate performance for the posted setup.

    Raises:
        HTTPException: 503 when no benchmark table is loaded, 422 when the
            setup cannot be built (e.g. duplicate platform ids).
    """
    table = _benchmark_table(request)
    try:
        setup = body.to_setup()
    except (InvalidMutationError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        result = estimate(setup, table, request.app.state.estimation_config)
    except BenchmarkUnavailableError as exc:
        logger.warning("estimate_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail="estimates unavailable") from exc
    record_estimate(result)
    return result


@router.get("/benchmarks")
def list_benchmarks(
    request: Request, platform: str | None = None, country: str | None = None
) -> list[BenchmarkRow]:
    """Benchmark rows, optionally filtered by platform and/or country."""
    return _benchmark_table(request).filter(platform=platform, country=country)


@router.get("/benchmarks/platforms")
def list_platforms(request: Request) -> dict[str, list[str]]:
    return {"platforms": _benchmark_table(request).platforms()}


@router.get("/benchmarks/countries")
def list_countries(request: Request) -> dict[str, list[str]]:
    return {"countries": _benchmark_table(request).countries()}
