from datetime import datetime
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field

HEALTHY = "Healthy"


class DiagnoseCropDiseaseRequest(BaseModel):
    photo: str = Field(
        ...,
        description=(
            "Photo of the plant, either a data URI ('data:<mimetype>;base64,<data>')"
            " or a '<container>/<path>' blob reference returned by /files."
        ),
    )
    crop_type: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    language: str = Field(default="English")


class CropDiseaseDiagnosis(BaseModel):
    disease: str = Field(
        description=(
            'The identified disease, if any. If no disease is detected, state "Healthy".'
            " This field MUST be in the requested language."
        )
    )
    remedies: str = Field(
        description=(
            "Suggested general, non-pesticide remedies for the identified disease."
            " If healthy, provide general care tips. MUST be in the requested language."
        )
    )
    treatment: str = Field(
        description=(
            "Specific, actionable treatment steps for the identified disease."
            ' If healthy, state "No treatment needed". MUST be in the requested language.'
        )
    )
    confidence: float = Field(
        ge=0.0, le=1.0, description="The confidence level of the diagnosis (0-1)."
    )


class DiagnosisRecord(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    user_id: str
    crop_type: str
    location: str
    disease: str
    remedies: str
    treatment: str
    confidence: float
    photo: Optional[str] = Field(
        default=None, description="Blob reference of the photo, data URIs are not stored."
    )
    workflow_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class TreatmentRequest(BaseModel):
    crop_type: str = Field(..., min_length=1)
    disease: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    language: str = Field(default="English")


class TreatmentSuggestion(BaseModel):
    treatment_suggestions: str = Field(
        description=(
            "Suggested treatments for the disease, considering the crop type and"
            " location. Prefer affordable and locally available options."
        )
    )


class DiagnosisHistoryItem(BaseModel):
    date: str = Field(description="The date of the diagnosis (YYYY-MM-DD).")
    crop_type: str = Field(description="The type of crop diagnosed.")
    disease: str = Field(description='The diagnosed disease. "Healthy" if no disease.')
    confidence: float = Field(ge=0.0, le=1.0)


class CropHealthAnalyticsRequest(BaseModel):
    diagnosis_history: Optional[List[DiagnosisHistoryItem]] = Field(
        default=None,
        description="History to analyse. When omitted the stored history of the user is used.",
    )
    language: str = Field(default="English")


class CropHealthSummary(BaseModel):
    overall_assessment: str = Field(
        description=(
            "A brief, 1-2 sentence overall assessment of the crop health based on"
            " the provided history. Must be in the requested language."
        )
    )
    trends: str = Field(
        description=(
            "Identified trends or recurring issues, e.g. recurring fungal infections"
            " in tomato during monsoon. Must be in the requested language."
        )
    )
    preventative_advice: str = Field(
        description=(
            "Actionable, preventative advice to improve future crop health based on"
            " the identified trends. Must be in the requested language."
        )
    )


class CropHealthStats(BaseModel):
    total_scans: int
    healthy_scans: int
    disease_frequency: Dict[str, int]
    most_common_issue: str


class CropHealthAnalytics(CropHealthSummary):
    stats: CropHealthStats
