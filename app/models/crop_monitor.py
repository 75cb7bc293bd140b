from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field


class RegisterCropRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Crop name, e.g. 'Tomato'.")
    variety: Optional[str] = None
    planting_date: date


class MonitoredCrop(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str
    name: str
    variety: Optional[str] = Field(default=None)
    planting_date: date
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CropGrowthRequest(BaseModel):
    photo: str = Field(..., description="Data URI or blob reference of the crop photo.")
    crop_type: str = Field(..., min_length=1)
    days_since_planting: int = Field(..., ge=0)
    language: str = Field(default="English")
    previous_photo: Optional[str] = None


class CropGrowthAnalysis(BaseModel):
    growth_stage: str = Field(
        description=(
            'The identified growth stage (e.g., "Germination", "Vegetative", "Flowering",'
            ' "Fruiting"). MUST be in the requested language.'
        )
    )
    growth_rating: int = Field(
        ge=1,
        le=5,
        description=(
            "How well the crop is growing compared to the ideal benchmark"
            " (1=very poor, 5=excellent)."
        ),
    )
    observations: str = Field(
        description=(
            "Observations about the plant's health, size and development visible in the"
            " photo, compared to the ideal state. MUST be in the requested language."
        )
    )
    recommendations: str = Field(
        description=(
            "Actionable recommendations based on the growth stage and observations."
            " MUST be in the requested language."
        )
    )


class RecordSnapRequest(BaseModel):
    photo: str = Field(..., description="Blob reference returned by /files.")
    language: str = Field(default="English")


class CropSnap(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    crop_id: str
    user_id: str
    photo: str
    days_since_planting: int
    analysis: CropGrowthAnalysis
    workflow_id: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
