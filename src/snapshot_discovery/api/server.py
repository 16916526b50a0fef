"""
HTTP API for snapshot discovery.

    GET /api/snapshots/{url}   archived captures of a page (url may be percent-encoded)
    GET /api/health            liveness check
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from starlette import status

from ..config import DiscoveryConfig
from ..exceptions import ArchiveClientError
from ..pipelines.discovery_pipeline import SnapshotDiscoveryPipeline, error_result
from ..pipelines.synthetic import apply_synthetic_fallback
from ..utils.logging_config import get_logger

logger = get_logger("api")


def create_app(
    config: Optional[DiscoveryConfig] = None,
    pipeline: Optional[SnapshotDiscoveryPipeline] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Discovery configuration; read from the environment if omitted
        pipeline: Pre-built pipeline, mainly for tests
    """
    config = config or DiscoveryConfig.from_env()
    pipeline = pipeline or SnapshotDiscoveryPipeline(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        pipeline.close()

    app = FastAPI(
        title="Snapshot Discovery",
        description="Discover and classify Wayback Machine captures of a page",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.pipeline = pipeline

    @app.get("/api/health", status_code=status.HTTP_200_OK)
    def health():
        return {"status": "OK", "message": "Snapshot discovery API server is running"}

    @app.get("/api/snapshots/{url:path}", summary="Archived captures of a page")
    def get_snapshots(
        url: str,
        analyze: bool = Query(False, description="Also infer experiment windows"),
    ):
        """
        Query the archive for captures of ``url``.

        The target URL is taken from the path. A target URL's own query string
        must be percent-encoded, otherwise it is read as this endpoint's
        parameters.
        """
        try:
            result = pipeline.discover(url, analyze=analyze)
        except ArchiveClientError as e:
            logger.error(f"Archive query failed for {url}: {e}")
            return JSONResponse(
                error_result(url, e).to_dict(),
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        result = apply_synthetic_fallback(result, config)
        return result.to_dict()

    return app
