import logging
from datetime import date
from typing import List, Optional

from fastapi import HTTPException, status

from app.collections.crop_monitor import (
    delete_monitored_crop,
    get_crop_snaps,
    get_monitored_crop_from_id,
    get_monitored_crops_for_user,
    save_crop_snap,
    save_monitored_crop,
)
from app.models.ai_workflow import WorkflowType
from app.models.crop_monitor import (
    CropGrowthAnalysis,
    CropGrowthRequest,
    CropSnap,
    MonitoredCrop,
    RecordSnapRequest,
    RegisterCropRequest,
)
from app.prompts.crop_growth_system_prompt import CROP_GROWTH_SYSTEM_PROMPT
from app.services.ai_workflow_runtime import WorkflowRuntime, sanitize_http_error_message
from app.services.files import (
    build_media_content_block,
    delete_user_data_files,
    ensure_user_owns_blob,
)
from app.services.growth_benchmarks import get_growth_benchmark
from app.services.structured_flow import require_output, run_structured_flow

logger = logging.getLogger(__name__)


async def monitor_crop_growth(
    request: CropGrowthRequest,
    *,
    user_id: Optional[str] = None,
) -> CropGrowthAnalysis:
    media_blocks = [await build_media_content_block(request.photo, user_id=user_id)]
    if request.previous_photo:
        media_blocks.append(
            await build_media_content_block(request.previous_photo, user_id=user_id)
        )

    result = await run_structured_flow(
        flow_name="Crop growth monitoring",
        system_prompt=CROP_GROWTH_SYSTEM_PROMPT,
        input_data={
            "crop_type": request.crop_type,
            "days_since_planting": request.days_since_planting,
            "ideal_benchmark": get_growth_benchmark(
                request.crop_type, request.days_since_planting
            ),
            "language": request.language,
            "has_previous_photo": request.previous_photo is not None,
        },
        output_model=CropGrowthAnalysis,
        media_blocks=media_blocks,
        failure_detail="AI model could not analyse crop growth. Please retry with a clear photo.",
    )
    return require_output(result, "AI did not return a growth analysis.")


async def register_crop(request: RegisterCropRequest, *, user_id: str) -> MonitoredCrop:
    crop = MonitoredCrop(user_id=user_id, **request.model_dump())
    return await save_monitored_crop(crop)


async def list_crops(user_id: str) -> List[MonitoredCrop]:
    return await get_monitored_crops_for_user(user_id)


async def get_crop(crop_id: str, *, user_id: str) -> MonitoredCrop:
    crop = await get_monitored_crop_from_id(crop_id)
    if crop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Crop not found.")
    if crop.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own crops.",
        )
    return crop


async def delete_crop(crop_id: str, *, user_id: str) -> None:
    crop = await get_crop(crop_id, user_id=user_id)
    deleted_files = await delete_user_data_files(user_id, crop.id)
    await delete_monitored_crop(crop.id)
    logger.info("Deleted crop %s of user %s with %s files", crop.id, user_id, deleted_files)


def days_since_planting(planting_date: date, today: Optional[date] = None) -> int:
    return max(0, ((today or date.today()) - planting_date).days)


async def record_snap(
    crop_id: str,
    request: RecordSnapRequest,
    *,
    user_id: str,
    request_id: Optional[str] = None,
    today: Optional[date] = None,
) -> CropSnap:
    crop = await get_crop(crop_id, user_id=user_id)
    photo = ensure_user_owns_blob(request.photo, user_id)
    age = days_since_planting(crop.planting_date, today)

    workflow = WorkflowRuntime(
        action="record_crop_snap",
        workflow_type=WorkflowType.CROP_GROWTH_MONITORING,
        user_id=user_id,
        request_id=request_id,
        crop_id=crop.id,
        metadata={"days_since_planting": age},
    )
    await workflow.start()
    try:
        await workflow.start_step("load_previous_snap")
        previous = await get_crop_snaps(crop.id, limit=1)
        previous_photo = previous[0].photo if previous else None
        await workflow.complete_step(
            "load_previous_snap", {"has_previous_photo": previous_photo is not None}
        )

        await workflow.start_step("analyse_growth")
        analysis = await monitor_crop_growth(
            CropGrowthRequest(
                photo=photo,
                crop_type=crop.name,
                days_since_planting=age,
                language=request.language,
                previous_photo=previous_photo,
            ),
            user_id=user_id,
        )
        await workflow.complete_step(
            "analyse_growth",
            {"growth_stage": analysis.growth_stage, "growth_rating": analysis.growth_rating},
        )

        await workflow.start_step("save_snap")
        snap = await save_crop_snap(
            CropSnap(
                crop_id=crop.id,
                user_id=user_id,
                photo=photo,
                days_since_planting=age,
                analysis=analysis,
                workflow_id=workflow.id,
            )
        )
        await workflow.complete_step("save_snap", {"snap_id": snap.id})
        await workflow.complete({"snap_id": snap.id})
        return snap
    except HTTPException as exc:
        await workflow.fail(
            error_message=sanitize_http_error_message(exc.detail),
            step=workflow.current_step,
            payload={"status_code": exc.status_code},
        )
        raise
    except Exception:
        logger.exception("Unexpected crop snap failure for crop_id=%s", crop.id)
        await workflow.fail(
            error_message="Internal server error in crop monitoring",
            step=workflow.current_step,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error in crop monitoring",
        )


async def list_snaps(crop_id: str, *, user_id: str) -> List[CropSnap]:
    crop = await get_crop(crop_id, user_id=user_id)
    return await get_crop_snaps(crop.id)
