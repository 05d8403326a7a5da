"""Health and readiness endpoints.

- ``GET /health`` -- Liveness check.  Returns 200 while the process is alive.
- ``GET /ready``  -- Readiness check.  Returns 200 only when the benchmark
  table loaded; 503 with per-check details otherwise.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campaign_planner.benchmarks.table import BenchmarkTable


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/ready`` endpoints on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness check -- always returns 200 if the process is running."""
        return {"status": "healthy"}

    @app.get("/ready")
    def ready(request: Request) -> JSONResponse:
        """Readiness check -- checks that benchmark data is available."""
        table = getattr(request.app.state, "benchmarks", None)
        checks = {"benchmarks": "ok" if isinstance(table, BenchmarkTable) else "fail"}

        all_ok = all(v == "ok" for v in checks.values())
        status = "ready" if all_ok else "not_ready"
        code = 200 if all_ok else 503
        return JSONResponse(content={"status": status, "checks": checks}, status_code=code)
