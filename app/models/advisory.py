from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class SellingAdviceRequest(BaseModel):
    crop_type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    language: str = Field(default="English")


class SellingAdvice(BaseModel):
    advice: str = Field(
        description=(
            "Detailed advice on the best time and place to sell the crop for maximum"
            " profit, including potential markets and pricing strategies."
        )
    )


class IrrigationAdviceRequest(BaseModel):
    crop_type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    soil_type: str = Field(..., min_length=1, description='e.g. "Sandy", "Clay", "Loam".')
    current_weather: str = Field(
        ..., min_length=1, description='e.g. "Sunny", "Recent heavy rain".'
    )
    language: str = Field(default="English")


class IrrigationAdvice(BaseModel):
    recommendation: str = Field(
        description=(
            'A clear, direct recommendation, such as "Irrigate Now", "Wait 2 Days",'
            ' or "No Irrigation Needed".'
        )
    )
    reasoning: str = Field(
        description="A detailed explanation for the recommendation, considering all input factors."
    )
    amount: str = Field(
        description=(
            'The suggested amount of water to use (e.g., "Light watering",'
            ' "Deep watering for 1 hour", "1 inch of water").'
        )
    )


class InsuranceRecommendation(str, Enum):
    PMFBY = "PMFBY"
    PRIVATE = "Private Insurance"


class InsuranceAdviceRequest(BaseModel):
    crop_type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    land_area: float = Field(..., gt=0, description="Land area in acres.")
    sum_insured: float = Field(..., gt=0)
    language: str = Field(default="English")


class InsuranceAdvice(BaseModel):
    recommendation: InsuranceRecommendation = Field(
        description='A clear recommendation for either "PMFBY" or "Private Insurance".'
    )
    reasoning: str = Field(
        description=(
            "A detailed explanation for the recommendation, considering the benefits"
            " and drawbacks of each scheme for the given inputs. MUST be in the requested language."
        )
    )
    pmfby_details: str = Field(
        description="A brief summary of the PMFBY benefits relevant to the farmer."
    )
    private_details: str = Field(
        description="A brief summary of what to look for in a private insurance scheme."
    )


class LoanStatus(str, Enum):
    APPROVED = "approved"
    REJECTED = "rejected"
    PENDING_REVIEW = "pending_review"


class LoanEligibilityRequest(BaseModel):
    purpose: str = Field(..., min_length=1, description='e.g. "Seeds", "Fertilizers".')
    amount: float = Field(..., gt=0, description="Requested amount in rupees.")
    language: str = Field(default="English")


class LoanEligibilityMessages(BaseModel):
    recommendation: str = Field(
        description=(
            "A concise, encouraging message to the farmer about their loan eligibility."
            " MUST be in the requested language."
        )
    )
    reasoning: str = Field(
        description=(
            "A simple, empathetic explanation for why this amount was recommended."
            " MUST be in the requested language."
        )
    )


class LoanEligibility(LoanEligibilityMessages):
    status: LoanStatus
    approved_amount: float


class RiskType(str, Enum):
    PEST = "pest"
    WEATHER = "weather"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskAlertRequest(BaseModel):
    location: str = Field(..., min_length=1)
    crop_type: str = Field(..., min_length=1)


class RiskAlert(BaseModel):
    risk_type: RiskType
    risk_level: RiskLevel
    predicted_date: str = Field(
        description="The ISO 8601 date when the risk is predicted to be highest."
    )
    advisory: str = Field(
        description="A concise, actionable advisory on how to mitigate the risk."
    )
    crop_affected: str


class RiskAlertList(BaseModel):
    alerts: List[RiskAlert] = Field(default_factory=list)
