"""
FastAPI application for the property appraisal service.

Exposes the valuation calculator and the two comparable search paths.
Production deployment configuration via environment variables.
"""

import logging
import os
from typing import List, Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AliasChoices, BaseModel, Field

from appraisal import (
    ComparableSearchService,
    PropertyAttributes,
    SalesHistoryService,
    SearchTarget,
    ValuationStrategy,
    calculate,
)
from scraper import PortalScraper
from utils.config import Config

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

# Production mode detection
IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:8080", "http://127.0.0.1:8080"]

APP_VERSION = "1.0.0"


# =============================================================================
# Request Models
# =============================================================================

# Raw form numbers; sanitized to >= 0 downstream rather than rejected
FormNumber = Union[float, str, None]


class ValuationRequest(BaseModel):
    """
    Valuation form payload.

    Built areas come either as ``built_areas`` or as the per-level fields.
    """
    property_type: Optional[str] = None
    built_areas: Optional[List[FormNumber]] = None
    basement_area: FormNumber = None
    floor1_area: FormNumber = None
    floor2_area: FormNumber = None
    floor3_area: FormNumber = None
    floor4_area: FormNumber = None
    land_area: FormNumber = 0.0
    location_quality: Optional[str] = None
    stratum: Optional[str] = None
    general_condition: Optional[str] = None
    topography: Optional[str] = None
    valuation_purpose: Optional[str] = None
    country_code: Optional[str] = None
    strategy: str = ValuationStrategy.QUALITY_TIER.value


class ComparablesRequest(BaseModel):
    """Comparable search payload. Accepts the legacy ``target_*`` names."""
    lat: float = Field(ge=-90, le=90, validation_alias=AliasChoices("lat", "target_lat"))
    lng: float = Field(ge=-180, le=180, validation_alias=AliasChoices("lng", "target_lng"))
    property_type: str = Field(
        validation_alias=AliasChoices("property_type", "target_property_type")
    )
    area: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("area", "target_area")
    )
    country: Optional[str] = None

    def to_target(self) -> SearchTarget:
        return SearchTarget(
            latitude=self.lat,
            longitude=self.lng,
            property_type=self.property_type,
            area=self.area,
            country=self.country,
        )


def build_search_service(config: Config) -> ComparableSearchService:
    """Wire the sales history and portal scraper from configuration."""
    sales_history = SalesHistoryService.from_json_file(config.sales_data_path)
    scraper = None
    if config.portal_search_enabled:
        scraper = PortalScraper(timeout_seconds=config.portal_timeout_seconds)
    return ComparableSearchService(sales_history, scraper=scraper, config=config)


def create_app(
    config: Optional[Config] = None,
    search_service: Optional[ComparableSearchService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    search_service = search_service or build_search_service(config)

    app = FastAPI(
        title="Property Appraisal Engine",
        description="Deterministic property valuation and comparable sales search",
        version=APP_VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )
    app.state.config = config
    app.state.search_service = search_service

    # Healthchecks: no dependencies, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.post("/api/valuation")
    def valuation(request: ValuationRequest):
        """
        Value a property.

        Unknown enum values and malformed numbers never fail the request;
        they fall back to neutral factors.
        """
        attrs = PropertyAttributes.from_dict(request.model_dump())
        strategy = ValuationStrategy.from_string(request.strategy)
        result = calculate(attrs, strategy)
        logger.info(
            "Valuation (%s) for %s: %.2f USD",
            strategy.value,
            attrs.property_type.value if attrs.property_type else "unknown type",
            result.estimated_value_usd,
        )
        return result.to_dict()

    @app.post("/api/comparables/by-location")
    async def comparables_by_location(request: ComparablesRequest):
        """Top 5 comparables from sales history."""
        return await search_service.find_by_location(request.to_target())

    @app.post("/api/comparables/portals")
    async def comparables_with_portals(request: ComparablesRequest):
        """Top 3 comparables from sales history and listing portals."""
        return await search_service.search_with_portals(request.to_target())

    @app.get("/api/health")
    async def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": APP_VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    return app


# Create app instance for uvicorn
app = create_app()
