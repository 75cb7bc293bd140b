from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

# --- WeatherAPI.com forecast.json Models ---


class WeatherApiCondition(BaseModel):
    """Describes the weather condition (e.g., 'Partly cloudy', 'Patchy rain nearby')."""

    text: str
    code: Optional[int] = None
    icon: Optional[str] = None


class WeatherApiLocation(BaseModel):
    """Resolved location of the forecast."""

    name: str
    region: str = ""
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class WeatherApiCurrent(BaseModel):
    """Current conditions at the resolved location."""

    temp_c: float
    condition: WeatherApiCondition
    humidity: int
    wind_kph: float


class WeatherApiDay(BaseModel):
    """Daily aggregates of a forecast day."""

    avgtemp_c: float
    maxwind_kph: float
    avghumidity: float
    daily_chance_of_rain: int = 0
    condition: WeatherApiCondition


class WeatherApiForecastDay(BaseModel):
    date: str = Field(description="Forecast date in YYYY-MM-DD format.")
    day: WeatherApiDay


class WeatherApiForecast(BaseModel):
    forecastday: List[WeatherApiForecastDay]


class WeatherApiResponse(BaseModel):
    """Model for the subset of the forecast.json response used by the app."""

    location: WeatherApiLocation
    current: WeatherApiCurrent
    forecast: WeatherApiForecast


# --- App Models ---


class WeatherCondition(str, Enum):
    SUNNY = "Sunny"
    CLOUDY = "Cloudy"
    RAINY = "Rainy"
    THUNDERSTORM = "Thunderstorm"
    SNOWY = "Snowy"


class SprayingIndex(str, Enum):
    OPTIMAL = "Optimal"
    MODERATE = "Moderate"
    UNFAVOURABLE = "Unfavourable"


class CurrentWeather(BaseModel):
    temp_c: float
    condition: str
    humidity: int
    wind_kph: float


class DailyForecast(BaseModel):
    """A single forecast day as shown on the weather screen."""

    day: str = Field(description="Short weekday name (e.g., 'Mon').")
    date: str
    avgtemp_c: float
    condition: str = Field(description="Condition text as reported by the provider.")
    normalized_condition: WeatherCondition
    daily_chance_of_rain: int
    maxwind_kph: float
    avghumidity: float
    spraying_index: SprayingIndex


class WeatherReport(BaseModel):
    location: str = Field(description="Resolved location, 'Name, Region'.")
    current: CurrentWeather
    forecast: List[DailyForecast]
    spraying_advisory: str


class SprayingAdvisory(BaseModel):
    advisory: str = Field(
        description=(
            "A concise 1-2 sentence spraying advisory for the farmer."
            " Must be in the requested language."
        )
    )


# --- Spraying Advice Models ---


class DailyWeatherCondition(BaseModel):
    day: str = Field(description="The day of the week (e.g., 'Mon').")
    temp: str = Field(description="The forecasted temperature in Celsius.")
    condition: WeatherCondition
    wind_kph: float = Field(ge=0)
    chance_of_rain: float = Field(ge=0, le=100)


class SprayingAdviceRequest(BaseModel):
    forecast: List[DailyWeatherCondition] = Field(..., min_length=1)
    language: str = Field(default="English")


class DailySprayingAdvice(BaseModel):
    day: str = Field(description="The day of the week, matching the input.")
    index: SprayingIndex = Field(description="The suitability index for spraying crops.")
    reasoning: str = Field(
        description="A brief, clear explanation for the index, in the requested language."
    )


class SprayingAdviceResult(BaseModel):
    days: List[DailySprayingAdvice]
