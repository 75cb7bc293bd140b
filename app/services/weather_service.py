import logging
import re
from datetime import datetime
from typing import List, Optional

import httpx
from fastapi import HTTPException, status
from pydantic import ValidationError

from app.core.config import settings
from app.models.ai_workflow import WorkflowType
from app.models.weather import (
    CurrentWeather,
    DailyForecast,
    DailySprayingAdvice,
    DailyWeatherCondition,
    SprayingAdviceRequest,
    SprayingAdviceResult,
    SprayingAdvisory,
    SprayingIndex,
    WeatherApiResponse,
    WeatherCondition,
    WeatherReport,
)
from app.prompts.weather_system_prompt import (
    SPRAYING_ADVICE_SYSTEM_PROMPT,
    SPRAYING_ADVISORY_SYSTEM_PROMPT,
)
from app.services.ai_workflow_runtime import WorkflowRuntime, sanitize_http_error_message
from app.services.structured_flow import run_structured_flow

logger = logging.getLogger(__name__)

FORECAST_DAYS = 5
ADVISORY_FALLBACK = (
    "Could not generate AI advisory. Please check weather conditions manually before spraying."
)

MAX_OPTIMAL_WIND_KPH = 10
MAX_MODERATE_WIND_KPH = 20
MAX_OPTIMAL_RAIN_CHANCE = 15
MAX_MODERATE_RAIN_CHANCE = 40
MIN_OPTIMAL_TEMP_C = 10
MAX_OPTIMAL_TEMP_C = 35

_CONDITION_KEYWORDS = [
    (WeatherCondition.THUNDERSTORM, ("thunder",)),
    (WeatherCondition.SNOWY, ("snow", "sleet", "blizzard", "ice")),
    (WeatherCondition.RAINY, ("rain", "drizzle", "shower")),
    (WeatherCondition.CLOUDY, ("cloud", "overcast", "mist", "fog", "haze")),
]


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def normalize_condition(text: str) -> WeatherCondition:
    lowered = (text or "").lower()
    for condition, keywords in _CONDITION_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return condition
    return WeatherCondition.SUNNY


def _parse_temperature(value) -> Optional[float]:
    if isinstance(value, (int, float)):
        return float(value)
    match = re.search(r"-?\d+(?:\.\d+)?", str(value or ""))
    return float(match.group()) if match else None


def spraying_index(
    wind_kph: float,
    chance_of_rain: float,
    condition: WeatherCondition,
    temp_c: Optional[float] = None,
) -> SprayingIndex:
    """Rule-based spraying suitability; an unknown temperature counts as not extreme."""
    if (
        wind_kph > MAX_MODERATE_WIND_KPH
        or chance_of_rain > MAX_MODERATE_RAIN_CHANCE
        or condition in (WeatherCondition.RAINY, WeatherCondition.THUNDERSTORM)
    ):
        return SprayingIndex.UNFAVOURABLE

    temperature_ok = temp_c is None or MIN_OPTIMAL_TEMP_C <= temp_c <= MAX_OPTIMAL_TEMP_C
    if (
        wind_kph < MAX_OPTIMAL_WIND_KPH
        and chance_of_rain < MAX_OPTIMAL_RAIN_CHANCE
        and temperature_ok
    ):
        return SprayingIndex.OPTIMAL
    return SprayingIndex.MODERATE


def _rule_reasoning(day: DailyWeatherCondition, index: SprayingIndex) -> str:
    if index == SprayingIndex.OPTIMAL:
        return "Low wind and little chance of rain. Good day to spray."

    reasons = []
    if day.condition in (WeatherCondition.RAINY, WeatherCondition.THUNDERSTORM):
        reasons.append(f"{day.condition.value} weather will wash the spray away")
    if day.wind_kph > MAX_MODERATE_WIND_KPH:
        reasons.append(f"high wind ({day.wind_kph:g} km/h) will cause spray drift")
    elif day.wind_kph >= MAX_OPTIMAL_WIND_KPH:
        reasons.append(f"moderate wind ({day.wind_kph:g} km/h)")
    if day.chance_of_rain > MAX_MODERATE_RAIN_CHANCE:
        reasons.append(f"high chance of rain ({day.chance_of_rain:g}%)")
    elif day.chance_of_rain >= MAX_OPTIMAL_RAIN_CHANCE:
        reasons.append(f"some chance of rain ({day.chance_of_rain:g}%)")
    if not reasons:
        reasons.append(f"temperature ({day.temp}) is not ideal")

    reason_text = "; ".join(reasons)
    if index == SprayingIndex.UNFAVOURABLE:
        return f"Avoid spraying: {reason_text}."
    return f"Spray with care: {reason_text}."


def rule_based_spraying_advice(
    forecast: List[DailyWeatherCondition],
) -> List[DailySprayingAdvice]:
    advice = []
    for day in forecast:
        index = spraying_index(
            wind_kph=day.wind_kph,
            chance_of_rain=day.chance_of_rain,
            condition=day.condition,
            temp_c=_parse_temperature(day.temp),
        )
        advice.append(
            DailySprayingAdvice(day=day.day, index=index, reasoning=_rule_reasoning(day, index))
        )
    return advice


async def get_spraying_advice(request: SprayingAdviceRequest) -> List[DailySprayingAdvice]:
    """Per-day spraying index; falls back to the rule table when the model is unavailable."""
    try:
        result = await run_structured_flow(
            flow_name="Spraying advice",
            system_prompt=SPRAYING_ADVICE_SYSTEM_PROMPT,
            input_data=request.model_dump(mode="json"),
            output_model=SprayingAdviceResult,
            failure_detail="AI model could not generate spraying advice.",
        )
    except HTTPException as exc:
        logger.warning("Spraying advice falls back to rules: %s", exc.detail)
        result = None

    if result is None or len(result.days) != len(request.forecast):
        return rule_based_spraying_advice(request.forecast)
    return result.days


def _require_api_key() -> str:
    if not settings.WEATHERAPI_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="WEATHERAPI_API_KEY is not set in the environment variables.",
        )
    return settings.WEATHERAPI_API_KEY


def _build_query(
    location_query: Optional[str], lat: Optional[float], lon: Optional[float]
) -> str:
    if location_query and location_query.strip():
        return location_query.strip()
    if lat is not None and lon is not None:
        return f"{lat},{lon}"
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Location not specified. Please provide a city or coordinates.",
    )


async def fetch_forecast(query: str) -> WeatherApiResponse:
    """Calls WeatherAPI.com forecast.json for the next 5 days."""
    params = {
        "key": _require_api_key(),
        "q": query,
        "days": FORECAST_DAYS,
        "aqi": "no",
        "alerts": "no",
    }
    try:
        async with _http_client() as client:
            response = await client.get(
                f"{settings.WEATHERAPI_BASE_URL.rstrip('/')}/forecast.json", params=params
            )
    except httpx.HTTPError as exc:
        logger.exception("Weather request failed for %s", query)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not fetch weather data. Please try again later.",
        ) from exc

    if response.is_error:
        try:
            message = response.json().get("error", {}).get("message")
        except (ValueError, AttributeError):
            message = None
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=message
            or "Could not fetch weather data. Please check the location and try again.",
        )

    try:
        return WeatherApiResponse.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.warning("Unexpected weather payload for %s: %s", query, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The weather service returned data in an unexpected format.",
        ) from exc


def build_daily_forecast(data: WeatherApiResponse) -> List[DailyForecast]:
    forecast = []
    for forecast_day in data.forecast.forecastday:
        day = forecast_day.day
        normalized = normalize_condition(day.condition.text)
        forecast.append(
            DailyForecast(
                day=datetime.strptime(forecast_day.date, "%Y-%m-%d").strftime("%a"),
                date=forecast_day.date,
                avgtemp_c=day.avgtemp_c,
                condition=day.condition.text,
                normalized_condition=normalized,
                daily_chance_of_rain=day.daily_chance_of_rain,
                maxwind_kph=day.maxwind_kph,
                avghumidity=day.avghumidity,
                spraying_index=spraying_index(
                    wind_kph=day.maxwind_kph,
                    chance_of_rain=day.daily_chance_of_rain,
                    condition=normalized,
                    temp_c=day.avgtemp_c,
                ),
            )
        )
    return forecast


async def generate_spraying_advisory(forecast: List[DailyForecast], language: str) -> str:
    try:
        result = await run_structured_flow(
            flow_name="Spraying advisory",
            system_prompt=SPRAYING_ADVISORY_SYSTEM_PROMPT,
            input_data={
                "forecast": [
                    item.model_dump(mode="json", exclude={"spraying_index"})
                    for item in forecast
                ],
            },
            output_model=SprayingAdvisory,
            language=language,
            failure_detail=ADVISORY_FALLBACK,
        )
    except HTTPException as exc:
        logger.warning("Spraying advisory falls back to default text: %s", exc.detail)
        return ADVISORY_FALLBACK

    if result is None or not result.advisory.strip():
        return ADVISORY_FALLBACK
    return result.advisory.strip()


async def get_weather_report(
    location_query: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    language: str = "English",
    *,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> WeatherReport:
    query = _build_query(location_query, lat, lon)
    _require_api_key()

    workflow = WorkflowRuntime(
        action="weather_report",
        workflow_type=WorkflowType.WEATHER_REPORT,
        user_id=user_id,
        request_id=request_id,
        metadata={"query": query, "language": language},
    )
    await workflow.start()
    try:
        await workflow.start_step("fetch_forecast")
        data = await fetch_forecast(query)
        forecast = build_daily_forecast(data)
        await workflow.complete_step("fetch_forecast", {"days": len(forecast)})

        await workflow.start_step("generate_spraying_advisory")
        advisory = await generate_spraying_advisory(forecast, language)
        await workflow.complete_step("generate_spraying_advisory")

        report = WeatherReport(
            location=f"{data.location.name}, {data.location.region}",
            current=CurrentWeather(
                temp_c=data.current.temp_c,
                condition=data.current.condition.text,
                humidity=data.current.humidity,
                wind_kph=data.current.wind_kph,
            ),
            forecast=forecast,
            spraying_advisory=advisory,
        )
        await workflow.complete({"location": report.location})
        return report
    except HTTPException as exc:
        await workflow.fail(
            error_message=sanitize_http_error_message(exc.detail),
            step=workflow.current_step,
            payload={"status_code": exc.status_code},
        )
        raise
    except Exception:
        logger.exception("Unexpected weather report failure for %s", query)
        await workflow.fail(
            error_message="Internal server error in weather report",
            step=workflow.current_step,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error in weather report",
        )
