from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status

from app.core.security import verify_jwt
from app.models.disease_diagnosis import (
    CropHealthAnalytics,
    CropHealthAnalyticsRequest,
    DiagnoseCropDiseaseRequest,
    DiagnosisRecord,
    TreatmentRequest,
    TreatmentSuggestion,
)
from app.services.disease_diagnosis_service import (
    crop_health_analytics,
    diagnose_crop_disease,
    get_diagnosis_history,
    suggest_treatment,
)

router = APIRouter(
    prefix="/diagnosis",
    tags=["Disease Diagnosis"],
    dependencies=[Depends(verify_jwt)],
)


@router.post(
    "/",
    response_model=DiagnosisRecord,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def diagnose(
    request: DiagnoseCropDiseaseRequest,
    x_request_id: Optional[str] = Header(default=None),
    user_payload: dict = Depends(verify_jwt),
) -> DiagnosisRecord:
    """
    Diagnoses a crop disease from a photo (data URI or uploaded blob reference)
    and stores the result in the farmer's history.
    """
    return await diagnose_crop_disease(
        request, user_id=user_payload.get("sub"), request_id=x_request_id
    )


@router.get("/", response_model=list[DiagnosisRecord], response_model_exclude_none=True)
async def diagnosis_history(
    limit: int = Query(default=100, ge=1, le=500),
    user_payload: dict = Depends(verify_jwt),
) -> list[DiagnosisRecord]:
    return await get_diagnosis_history(user_payload.get("sub"), limit=limit)


@router.post("/treatment", response_model=TreatmentSuggestion)
async def treatment(request: TreatmentRequest) -> TreatmentSuggestion:
    return await suggest_treatment(request)


@router.post("/analytics", response_model=CropHealthAnalytics)
async def analytics(
    request: CropHealthAnalyticsRequest,
    user_payload: dict = Depends(verify_jwt),
) -> CropHealthAnalytics:
    """
    Summarises crop health over the given history, or over the stored
    diagnoses when no history is sent.
    """
    return await crop_health_analytics(request, user_id=user_payload.get("sub"))
