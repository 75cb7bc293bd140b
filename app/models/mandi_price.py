from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class MandiPriceRecord(BaseModel):
    """A single arrival record as published by Agmarknet on data.gov.in."""

    state: str
    district: str
    market: str
    commodity: str
    variety: str
    grade: str
    arrival_date: str = Field(description="Arrival date in dd/mm/yyyy format.")
    min_price: str
    max_price: str
    modal_price: str

    @field_validator("min_price", "max_price", "modal_price", mode="before")
    @classmethod
    def _price_as_string(cls, value):
        # The API returns prices as numbers for some resources and strings for others.
        if isinstance(value, (int, float)):
            return str(value)
        return value


class MandiPriceTrend(int, Enum):
    DOWN = -1
    STABLE = 0
    UP = 1


class MandiPriceSummary(BaseModel):
    commodity: str = Field(description="The name of the commodity.")
    price: float = Field(description="The modal price per quintal.")
    region: str = Field(description="The state where the market is located.")
    market: str = Field(description="The name of the market (mandi).")
    trend: MandiPriceTrend = Field(
        description="The price trend indicator (-1 for down, 0 for stable, 1 for up)."
    )


class OfficialMandiPrice(BaseModel):
    message: str


class PriceTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MandiPricePredictionRequest(BaseModel):
    crop_type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    language: str = Field(default="English")


class WeeklyPriceForecast(BaseModel):
    week: str = Field(description='The forecast week, e.g. "Week 1", "Week 2".')
    price: float = Field(description="The predicted modal price per quintal for that week.")
    trend: PriceTrend = Field(description="The predicted price trend for that week.")
    reasoning: str = Field(
        description=(
            "A brief explanation for the predicted trend. Must be in the requested language."
        )
    )


class MandiPricePrediction(BaseModel):
    crop_type: str
    location: str
    overall_trend: str = Field(
        description=(
            "A 1-2 sentence summary of the overall 4-week trend."
            " Must be in the requested language."
        )
    )
    forecast: List[WeeklyPriceForecast] = Field(
        min_length=4, max_length=4, description="A 4-week price forecast."
    )
