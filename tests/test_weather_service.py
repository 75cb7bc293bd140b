import httpx
import pytest
from fastapi import HTTPException

from app.core.config import settings
from app.models.weather import (
    DailyWeatherCondition,
    SprayingAdviceRequest,
    SprayingIndex,
    WeatherCondition,
)
from app.services import structured_flow, weather_service
from app.services.weather_service import (
    ADVISORY_FALLBACK,
    get_spraying_advice,
    get_weather_report,
    normalize_condition,
    rule_based_spraying_advice,
    spraying_index,
)


def _forecast_payload() -> dict:
    days = [
        ("2024-06-03", "Sunny", 5.0, 0),
        ("2024-06-04", "Patchy rain nearby", 12.0, 70),
        ("2024-06-05", "Moderate or heavy rain with thunder", 30.0, 90),
        ("2024-06-06", "Overcast", 14.0, 20),
        ("2024-06-07", "Mist", 8.0, 10),
    ]
    return {
        "location": {"name": "Nashik", "region": "Maharashtra", "country": "India"},
        "current": {
            "temp_c": 29.0,
            "condition": {"text": "Partly cloudy"},
            "humidity": 60,
            "wind_kph": 9.4,
        },
        "forecast": {
            "forecastday": [
                {
                    "date": date,
                    "day": {
                        "avgtemp_c": 27.5,
                        "maxwind_kph": wind,
                        "avghumidity": 70,
                        "daily_chance_of_rain": rain,
                        "condition": {"text": text},
                    },
                }
                for date, text, wind, rain in days
            ]
        },
    }


@pytest.fixture
def weather_key(monkeypatch):
    monkeypatch.setattr(settings, "WEATHERAPI_API_KEY", "weather-key")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Sunny", WeatherCondition.SUNNY),
        ("Clear", WeatherCondition.SUNNY),
        ("Partly cloudy", WeatherCondition.CLOUDY),
        ("Fog", WeatherCondition.CLOUDY),
        ("Light drizzle", WeatherCondition.RAINY),
        ("Patchy light rain with thunder", WeatherCondition.THUNDERSTORM),
        ("Blizzard", WeatherCondition.SNOWY),
    ],
)
def test_normalize_condition(text, expected):
    assert normalize_condition(text) == expected


def test_spraying_index_rules():
    assert spraying_index(5, 10, WeatherCondition.SUNNY, 25) == SprayingIndex.OPTIMAL
    assert spraying_index(15, 10, WeatherCondition.SUNNY, 25) == SprayingIndex.MODERATE
    assert spraying_index(5, 30, WeatherCondition.CLOUDY, 25) == SprayingIndex.MODERATE
    assert spraying_index(5, 10, WeatherCondition.SUNNY, 40) == SprayingIndex.MODERATE
    assert spraying_index(25, 0, WeatherCondition.SUNNY, 25) == SprayingIndex.UNFAVOURABLE
    assert spraying_index(5, 50, WeatherCondition.CLOUDY, 25) == SprayingIndex.UNFAVOURABLE
    assert spraying_index(5, 0, WeatherCondition.RAINY, 25) == SprayingIndex.UNFAVOURABLE
    assert spraying_index(5, 0, WeatherCondition.THUNDERSTORM) == SprayingIndex.UNFAVOURABLE


@pytest.mark.parametrize(
    "wind_kph, chance_of_rain, temp_c, expected",
    [
        (20, 0, 25, SprayingIndex.MODERATE),
        (10, 0, 25, SprayingIndex.MODERATE),
        (5, 40, 25, SprayingIndex.MODERATE),
        (5, 15, 25, SprayingIndex.MODERATE),
        (5, 0, 10, SprayingIndex.OPTIMAL),
        (5, 0, 35, SprayingIndex.OPTIMAL),
        (5, 0, 9.9, SprayingIndex.MODERATE),
        (5, 0, 35.1, SprayingIndex.MODERATE),
    ],
)
def test_spraying_index_thresholds(wind_kph, chance_of_rain, temp_c, expected):
    assert spraying_index(wind_kph, chance_of_rain, WeatherCondition.SUNNY, temp_c) == expected


def test_unknown_temperature_is_not_extreme():
    advice = rule_based_spraying_advice(
        [
            DailyWeatherCondition(
                day="Mon", temp="unknown", condition=WeatherCondition.SUNNY,
                wind_kph=4, chance_of_rain=5,
            )
        ]
    )
    assert advice[0].index == SprayingIndex.OPTIMAL


def _spraying_request() -> SprayingAdviceRequest:
    return SprayingAdviceRequest(
        forecast=[
            DailyWeatherCondition(
                day="Mon", temp="28°C", condition=WeatherCondition.SUNNY,
                wind_kph=6, chance_of_rain=5,
            ),
            DailyWeatherCondition(
                day="Tue", temp="26°C", condition=WeatherCondition.RAINY,
                wind_kph=12, chance_of_rain=80,
            ),
        ]
    )


async def test_spraying_advice_uses_model_output(fake_llm):
    fake_llm.queue(
        {
            "days": [
                {"day": "Mon", "index": "Optimal", "reasoning": "Calm and dry."},
                {"day": "Tue", "index": "Unfavourable", "reasoning": "Rain expected."},
            ]
        }
    )

    advice = await get_spraying_advice(_spraying_request())

    assert [item.reasoning for item in advice] == ["Calm and dry.", "Rain expected."]


async def test_spraying_advice_falls_back_to_rules_when_model_fails(fake_llm):
    fake_llm.error = RuntimeError("quota exceeded")

    advice = await get_spraying_advice(_spraying_request())

    assert [item.index for item in advice] == [
        SprayingIndex.OPTIMAL,
        SprayingIndex.UNFAVOURABLE,
    ]
    assert advice[1].reasoning.startswith("Avoid spraying")


async def test_spraying_advice_falls_back_when_days_are_missing(fake_llm):
    fake_llm.queue({"days": [{"day": "Mon", "index": "Optimal", "reasoning": "ok"}]})

    advice = await get_spraying_advice(_spraying_request())

    assert len(advice) == 2
    assert advice[1].index == SprayingIndex.UNFAVOURABLE


async def test_weather_report(weather_key, mock_http, fake_llm, fake_db):
    fake_llm.queue({"advisory": "Spray on Monday morning; avoid Tuesday and Wednesday."})
    captured = mock_http(
        weather_service, lambda request: httpx.Response(200, json=_forecast_payload())
    )

    report = await get_weather_report(location_query="Nashik", user_id="user-1")

    assert report.location == "Nashik, Maharashtra"
    assert report.current.condition == "Partly cloudy"
    assert [day.day for day in report.forecast] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
    assert [day.normalized_condition for day in report.forecast] == [
        WeatherCondition.SUNNY,
        WeatherCondition.RAINY,
        WeatherCondition.THUNDERSTORM,
        WeatherCondition.CLOUDY,
        WeatherCondition.CLOUDY,
    ]
    assert report.forecast[0].spraying_index == SprayingIndex.OPTIMAL
    assert report.forecast[2].spraying_index == SprayingIndex.UNFAVOURABLE
    assert report.spraying_advisory.startswith("Spray on Monday")

    params = captured[0].url.params
    assert params["q"] == "Nashik"
    assert params["days"] == "5"
    assert params["aqi"] == "no"
    assert params["alerts"] == "no"

    runs = fake_db["ai_workflow"].documents
    assert runs[0]["status"] == "completed"
    assert runs[0]["workflow_type"] == "weather_report"


async def test_weather_report_with_coordinates(weather_key, mock_http, fake_llm, fake_db):
    captured = mock_http(
        weather_service, lambda request: httpx.Response(200, json=_forecast_payload())
    )

    report = await get_weather_report(lat=19.99, lon=73.78)

    assert captured[0].url.params["q"] == "19.99,73.78"
    # No advisory from the model
    assert report.spraying_advisory == ADVISORY_FALLBACK


async def test_weather_report_advisory_falls_back_on_model_error(
    weather_key, mock_http, fake_llm, fake_db
):
    fake_llm.error = RuntimeError("model down")
    mock_http(weather_service, lambda request: httpx.Response(200, json=_forecast_payload()))

    report = await get_weather_report(location_query="Nashik")

    assert report.spraying_advisory == ADVISORY_FALLBACK


async def test_weather_report_requires_location(weather_key):
    with pytest.raises(HTTPException) as exc_info:
        await get_weather_report(location_query="  ", lat=19.99)
    assert exc_info.value.status_code == 400


async def test_weather_report_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "WEATHERAPI_API_KEY", "")
    with pytest.raises(HTTPException) as exc_info:
        await get_weather_report(location_query="Nashik")
    assert exc_info.value.status_code == 500


async def test_weather_api_error_message_is_surfaced(weather_key, mock_http, fake_db):
    mock_http(
        weather_service,
        lambda request: httpx.Response(
            400, json={"error": {"code": 1006, "message": "No matching location found."}}
        ),
    )

    with pytest.raises(HTTPException) as exc_info:
        await get_weather_report(location_query="Atlantis")

    assert exc_info.value.status_code == 502
    assert exc_info.value.detail == "No matching location found."
    assert fake_db["ai_workflow"].documents[0]["status"] == "failed"


@pytest.fixture
def unbuildable_model(monkeypatch):
    def _broken(*args, **kwargs):
        raise ValueError("GEMINI_API_KEY is not set")

    monkeypatch.setattr(structured_flow, "get_chat_model", _broken)


async def test_model_that_cannot_be_built_is_service_unavailable(unbuildable_model):
    with pytest.raises(HTTPException) as exc_info:
        await structured_flow.run_structured_flow(
            flow_name="Spraying advice",
            system_prompt="prompt",
            input_data={},
            output_model=SprayingAdviceRequest,
            failure_detail="AI model could not generate spraying advice.",
        )
    assert exc_info.value.status_code == 503


async def test_spraying_advice_uses_rules_when_model_cannot_be_built(unbuildable_model):
    advice = await get_spraying_advice(_spraying_request())

    assert [item.index for item in advice] == [
        SprayingIndex.OPTIMAL,
        SprayingIndex.UNFAVOURABLE,
    ]


async def test_weather_report_advisory_falls_back_when_model_cannot_be_built(
    weather_key, mock_http, unbuildable_model, fake_db
):
    mock_http(weather_service, lambda request: httpx.Response(200, json=_forecast_payload()))

    report = await get_weather_report(location_query="Nashik")

    assert report.spraying_advisory == ADVISORY_FALLBACK
    assert fake_db["ai_workflow"].documents[0]["status"] == "completed"


async def test_unexpected_report_error_fails_the_workflow(
    weather_key, mock_http, fake_llm, fake_db, monkeypatch
):
    mock_http(weather_service, lambda request: httpx.Response(200, json=_forecast_payload()))

    def _broken_forecast(data):
        raise KeyError("forecastday")

    monkeypatch.setattr(weather_service, "build_daily_forecast", _broken_forecast)

    with pytest.raises(HTTPException) as exc_info:
        await get_weather_report(location_query="Nashik")

    assert exc_info.value.status_code == 500
    run = fake_db["ai_workflow"].documents[0]
    assert run["status"] == "failed"
    assert run["steps"]["fetch_forecast"]["status"] == "failed"
