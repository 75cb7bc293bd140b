import logging
from collections import Counter
from typing import List, Optional

from fastapi import HTTPException, status

from app.collections.diagnosis import get_diagnoses_for_user, save_diagnosis
from app.models.ai_workflow import WorkflowType
from app.models.disease_diagnosis import (
    HEALTHY,
    CropDiseaseDiagnosis,
    CropHealthAnalytics,
    CropHealthAnalyticsRequest,
    CropHealthStats,
    CropHealthSummary,
    DiagnoseCropDiseaseRequest,
    DiagnosisHistoryItem,
    DiagnosisRecord,
    TreatmentRequest,
    TreatmentSuggestion,
)
from app.prompts.disease_diagnosis_system_prompt import (
    CROP_HEALTH_ANALYTICS_SYSTEM_PROMPT,
    DISEASE_DIAGNOSIS_SYSTEM_PROMPT,
    TREATMENT_SUGGESTION_SYSTEM_PROMPT,
)
from app.services.ai_workflow_runtime import WorkflowRuntime, sanitize_http_error_message
from app.services.files import build_media_content_block, is_data_uri
from app.services.structured_flow import require_output, run_structured_flow

logger = logging.getLogger(__name__)

NO_ISSUE = "N/A"


async def diagnose_crop_disease(
    request: DiagnoseCropDiseaseRequest,
    *,
    user_id: str,
    request_id: Optional[str] = None,
) -> DiagnosisRecord:
    workflow = WorkflowRuntime(
        action="diagnose_crop_disease",
        workflow_type=WorkflowType.DISEASE_DIAGNOSIS,
        user_id=user_id,
        request_id=request_id,
        metadata={"crop_type": request.crop_type, "language": request.language},
    )
    await workflow.start()

    try:
        await workflow.start_step("prepare_input_media")
        media_block = await build_media_content_block(request.photo, user_id=user_id)
        await workflow.complete_step("prepare_input_media", {"media_type": media_block["type"]})

        await workflow.start_step("generate_diagnosis")
        diagnosis = require_output(
            await run_structured_flow(
                flow_name="Disease diagnosis",
                system_prompt=DISEASE_DIAGNOSIS_SYSTEM_PROMPT,
                input_data={
                    "crop_type": request.crop_type,
                    "location": request.location,
                    "language": request.language,
                },
                output_model=CropDiseaseDiagnosis,
                media_blocks=[media_block],
                failure_detail=(
                    "AI model could not diagnose the crop. "
                    "Please retry with a clear, close-up photo of the affected leaves."
                ),
            ),
            "AI did not return a diagnosis. The photo may be unclear or not a plant.",
        )
        await workflow.complete_step(
            "generate_diagnosis",
            {"disease": diagnosis.disease, "confidence": diagnosis.confidence},
        )

        await workflow.start_step("save_diagnosis")
        record = DiagnosisRecord(
            user_id=user_id,
            crop_type=request.crop_type,
            location=request.location,
            photo=None if is_data_uri(request.photo) else request.photo.strip(),
            workflow_id=workflow.id,
            **diagnosis.model_dump(),
        )
        await save_diagnosis(record)
        await workflow.complete_step("save_diagnosis", {"diagnosis_id": record.id})

        await workflow.complete({"diagnosis_id": record.id})
        return record

    except HTTPException as exc:
        await workflow.fail(
            error_message=sanitize_http_error_message(exc.detail),
            step=workflow.current_step,
            payload={"status_code": exc.status_code},
        )
        raise
    except Exception:
        logger.exception("Unexpected diagnosis failure for user_id=%s", user_id)
        await workflow.fail(
            error_message="Internal server error in disease diagnosis",
            step=workflow.current_step,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error in disease diagnosis",
        )


async def get_diagnosis_history(user_id: str, limit: int = 100) -> List[DiagnosisRecord]:
    return await get_diagnoses_for_user(user_id, limit=limit)


async def suggest_treatment(request: TreatmentRequest) -> TreatmentSuggestion:
    result = await run_structured_flow(
        flow_name="Treatment suggestion",
        system_prompt=TREATMENT_SUGGESTION_SYSTEM_PROMPT,
        input_data=request.model_dump(),
        output_model=TreatmentSuggestion,
        failure_detail="AI model could not suggest treatments right now. Please retry.",
    )
    return require_output(result, "AI did not return treatment suggestions.")


def _is_healthy(disease: str) -> bool:
    return disease.strip().lower() == HEALTHY.lower()


def compute_health_stats(history: List[DiagnosisHistoryItem]) -> CropHealthStats:
    healthy_scans = sum(1 for item in history if _is_healthy(item.disease))
    disease_frequency = Counter(
        item.disease.strip() for item in history if not _is_healthy(item.disease)
    )
    most_common_issue = (
        disease_frequency.most_common(1)[0][0] if disease_frequency else NO_ISSUE
    )
    return CropHealthStats(
        total_scans=len(history),
        healthy_scans=healthy_scans,
        disease_frequency=dict(disease_frequency),
        most_common_issue=most_common_issue,
    )


def _history_from_records(records: List[DiagnosisRecord]) -> List[DiagnosisHistoryItem]:
    return [
        DiagnosisHistoryItem(
            date=record.created_at.date().isoformat(),
            crop_type=record.crop_type,
            disease=record.disease,
            confidence=record.confidence,
        )
        for record in records
    ]


async def crop_health_analytics(
    request: CropHealthAnalyticsRequest,
    *,
    user_id: str,
) -> CropHealthAnalytics:
    history = request.diagnosis_history
    if history is None:
        history = _history_from_records(await get_diagnoses_for_user(user_id))

    if not history:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No diagnosis history to analyse yet. Diagnose a crop first.",
        )

    summary = require_output(
        await run_structured_flow(
            flow_name="Crop health analytics",
            system_prompt=CROP_HEALTH_ANALYTICS_SYSTEM_PROMPT,
            input_data={
                "diagnosis_history": [item.model_dump() for item in history],
                "language": request.language,
            },
            output_model=CropHealthSummary,
            failure_detail="AI model could not analyse your crop health right now. Please retry.",
        ),
        "AI did not return a crop health analysis.",
    )
    return CropHealthAnalytics(**summary.model_dump(), stats=compute_health_stats(history))
