from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query

from app.core.security import verify_jwt
from app.models.weather import DailySprayingAdvice, SprayingAdviceRequest, WeatherReport
from app.services.weather_service import get_spraying_advice, get_weather_report

router = APIRouter(prefix="/weather", tags=["Weather"], dependencies=[Depends(verify_jwt)])


@router.get(
    "/report",
    response_model=WeatherReport,
    response_model_exclude_none=True,
)
async def get_weather_report_data(
    location: Optional[str] = Query(default=None, description="City or village name"),
    lat: Optional[float] = Query(default=None, description="Latitude"),
    lon: Optional[float] = Query(default=None, description="Longitude"),
    language: Optional[str] = Query(default=None),
    x_request_id: Optional[str] = Header(default=None),
    user_payload: dict = Depends(verify_jwt),
):
    """
    5-day forecast with a per-day spraying index and an AI spraying advisory.
    """
    return await get_weather_report(
        location_query=location,
        lat=lat,
        lon=lon,
        language=language or user_payload.get("language", "English"),
        user_id=user_payload.get("sub"),
        request_id=x_request_id,
    )


@router.post("/spraying-advice", response_model=List[DailySprayingAdvice])
async def get_spraying_advice_data(request: SprayingAdviceRequest):
    return await get_spraying_advice(request)
