from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from app.core.security import verify_jwt
from app.models.crop_monitor import (
    CropGrowthAnalysis,
    CropGrowthRequest,
    CropSnap,
    MonitoredCrop,
    RecordSnapRequest,
    RegisterCropRequest,
)
from app.services import crop_monitor_service

router = APIRouter(
    prefix="/crop-monitor",
    tags=["Crop Monitoring"],
    dependencies=[Depends(verify_jwt)],
)


@router.post("/growth", response_model=CropGrowthAnalysis)
async def analyse_growth(
    request: CropGrowthRequest,
    user_payload: dict = Depends(verify_jwt),
) -> CropGrowthAnalysis:
    """
    One-off growth check of a photo against the ideal benchmark for the
    crop's age, without storing a snap.
    """
    return await crop_monitor_service.monitor_crop_growth(
        request, user_id=user_payload.get("sub")
    )


@router.post(
    "/crops",
    response_model=MonitoredCrop,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_crop(
    request: RegisterCropRequest,
    user_payload: dict = Depends(verify_jwt),
) -> MonitoredCrop:
    return await crop_monitor_service.register_crop(request, user_id=user_payload.get("sub"))


@router.get("/crops", response_model=list[MonitoredCrop], response_model_exclude_none=True)
async def list_crops(user_payload: dict = Depends(verify_jwt)) -> list[MonitoredCrop]:
    return await crop_monitor_service.list_crops(user_payload.get("sub"))


@router.get("/crops/{crop_id}", response_model=MonitoredCrop, response_model_exclude_none=True)
async def get_crop(crop_id: str, user_payload: dict = Depends(verify_jwt)) -> MonitoredCrop:
    return await crop_monitor_service.get_crop(crop_id, user_id=user_payload.get("sub"))


@router.delete("/crops/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(crop_id: str, user_payload: dict = Depends(verify_jwt)):
    """
    Deletes the crop with its snaps and the photos uploaded under its id.
    """
    await crop_monitor_service.delete_crop(crop_id, user_id=user_payload.get("sub"))
    return None


@router.post(
    "/crops/{crop_id}/snaps",
    response_model=CropSnap,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def record_snap(
    crop_id: str,
    request: RecordSnapRequest,
    x_request_id: Optional[str] = Header(default=None),
    user_payload: dict = Depends(verify_jwt),
) -> CropSnap:
    return await crop_monitor_service.record_snap(
        crop_id, request, user_id=user_payload.get("sub"), request_id=x_request_id
    )


@router.get(
    "/crops/{crop_id}/snaps",
    response_model=list[CropSnap],
    response_model_exclude_none=True,
)
async def list_snaps(crop_id: str, user_payload: dict = Depends(verify_jwt)) -> list[CropSnap]:
    return await crop_monitor_service.list_snaps(crop_id, user_id=user_payload.get("sub"))
