import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trip_planner.config import settings
from trip_planner.exceptions import ConfigurationError, PlacesError, RoutingError
from trip_planner.models.request import TripPlanRequest
from trip_planner.models.response import SuggestResponse, TripPlanResponse
from trip_planner.services.map.google_map_service import GoogleMapService
from trip_planner.services.trip_planner_service import TripPlannerService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Trip Planner API",
    description="Driving trip planning with optional stop discovery",
    version=settings.api_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_trip_planner_service() -> TripPlannerService:
    """Build the planner per request so a missing API key fails the call, not startup"""
    try:
        return TripPlannerService(GoogleMapService(settings), settings)
    except ConfigurationError as e:
        logger.error("Trip planner is not configured: %s", e)
        raise HTTPException(
            status_code=500,
            detail=f"{e} Contact an administrator to configure the mapping service.",
        )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "message": "Invalid request body for trip planner.",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.post(
    "/api/v1/trip-planner/plan",
    response_model=TripPlanResponse,
    response_model_exclude_none=True,
)
async def plan_trip(
    request: TripPlanRequest,
    service: TripPlannerService = Depends(get_trip_planner_service),
):
    """Plan a driving trip with must stops and discovered optional stops"""
    try:
        return await service.plan_trip(request)
    except RoutingError as e:
        logger.error("Trip planning failed: %s", e)
        raise HTTPException(
            status_code=502,
            detail=f"Trip planning failed: {e}. The mapping service may be unavailable, try again.",
        )


@app.get("/api/v1/trip-planner/suggest", response_model=SuggestResponse)
async def suggest_addresses(
    q: str = "",
    service: TripPlannerService = Depends(get_trip_planner_service),
):
    """Address autocomplete for the trip planner form"""
    try:
        suggestions = await service.suggest_addresses(q)
    except PlacesError as e:
        logger.error("Address lookup failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Address lookup failed: {e}")
    return SuggestResponse(suggestions=suggestions)


@app.get("/health")
async def health_check():
    """Health check"""
    return {"status": "healthy", "version": settings.api_version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
