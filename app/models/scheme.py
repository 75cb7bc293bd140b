from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FarmerCategory(str, Enum):
    LAND_OWNER = "land_owner"
    TENANT_FARMER = "tenant_farmer"
    SHARECROPPER = "sharecropper"


class SchemeEligibility(BaseModel):
    land_owner: bool = False
    tenant_farmer: bool = False
    sharecropper: bool = False
    max_land_area_acres: Optional[float] = None

    def allows(self, category: FarmerCategory) -> bool:
        return bool(getattr(self, category.value))


class GovernmentScheme(BaseModel):
    """A scheme entry of the static scheme table."""

    id: str
    name: str
    keywords: List[str]
    eligibility: SchemeEligibility
    description: str
    benefits: str
    how_to_apply: str
    application_url: str


class HasLand(str, Enum):
    YES = "yes"
    NO = "no"


class SchemeFinderRequest(BaseModel):
    help_type: str = Field(
        ..., min_length=1, description="e.g. 'Crop Insurance', 'Financial Support'."
    )
    state: str = Field(..., min_length=1)
    farmer_type: str = Field(..., min_length=1, description="e.g. 'Landholder', 'Tenant'.")
    has_land: HasLand
    land_area: Optional[str] = Field(default=None, description="e.g. '2 acres'.")
    crop_type: Optional[str] = None
    language: str = Field(default="English")


class SchemeRecommendation(BaseModel):
    scheme_name: str = Field(description="The official name of the recommended scheme.")
    description: str = Field(
        description=(
            "A brief, simple description of the scheme and its purpose."
            " MUST be in the requested language."
        )
    )
    eligibility: str = Field(
        description=(
            "A summary of the key eligibility criteria for the scheme."
            " MUST be in the requested language."
        )
    )
    benefits: str = Field(
        description="The primary benefits provided by the scheme. MUST be in the requested language."
    )
    how_to_apply: str = Field(
        description=(
            "Simple, step-by-step instructions on how to apply for the scheme."
            " MUST be in the requested language."
        )
    )
    application_url: str = Field(
        description="The official URL of the application portal, copied from the scheme database."
    )


class SchemeRecommendationList(BaseModel):
    recommendations: List[SchemeRecommendation] = Field(default_factory=list)
