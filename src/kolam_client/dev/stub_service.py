"""Local stand-in for the remote kolam generation service.

Implements the health and generate wire contract with a placeholder image so
the client can be exercised end to end without the real backend. It does not
generate patterns.

Usage:
  kolam-client serve-stub --port 8080
"""

from __future__ import annotations

import asyncio
import time

from fastapi import FastAPI
from pydantic import BaseModel, Field

from kolam_client.schemas.generation import BoundaryType, Theme


# 1x1 transparent PNG
PLACEHOLDER_IMAGE = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8"
    "AAAAASUVORK5CYII="
)

MAX_STUB_DENSITY = 50


class GenerateRequest(BaseModel):
    """Generate endpoint body, using the service's wire names."""

    ND: int
    sigmaref: float
    boundary_type: str
    theme: str = Theme.LIGHT.value
    kolam_color: str = Field(pattern=r"^#[0-9a-fA-F]{6}$")
    one_stroke: bool = False


def create_stub_app(*, delay_seconds: float = 0.0) -> FastAPI:
    """Build the stub app; `delay_seconds` simulates a slow generation."""
    app = FastAPI(
        title="Kolam Stub Service",
        description="Placeholder implementation of the kolam generation API",
        version="0.1.0",
    )

    @app.get("/api/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint for client connectivity probes."""
        return {"status": "healthy", "message": "Kolam stub service is running"}

    @app.post("/api/generate")
    async def generate(body: GenerateRequest) -> dict[str, object]:
        started = time.perf_counter()
        if delay_seconds:
            await asyncio.sleep(delay_seconds)

        # Service-level rejections travel with a 200 status
        if body.boundary_type not in {b.value for b in BoundaryType}:
            return {
                "success": False,
                "error": f"Unsupported boundary type: {body.boundary_type}",
            }
        if not 1 <= body.ND <= MAX_STUB_DENSITY:
            return {
                "success": False,
                "error": f"ND must be between 1 and {MAX_STUB_DENSITY}",
            }

        path_count = 1 if body.one_stroke else max(1, body.ND // 3)
        return {
            "success": True,
            "image": PLACEHOLDER_IMAGE,
            "boundary_type": body.boundary_type,
            "path_count": path_count,
            "is_one_stroke": body.one_stroke,
            "generation_time": round(time.perf_counter() - started, 3),
            "message": "Stub kolam generated",
        }

    return app


app = create_stub_app()
