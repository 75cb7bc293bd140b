import logging
from typing import List, Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.mongodb import get_crop_snap_collection, get_monitored_crop_collection
from app.models.crop_monitor import CropSnap, MonitoredCrop

logger = logging.getLogger(__name__)


async def save_monitored_crop(crop: MonitoredCrop) -> MonitoredCrop:
    crop_collection: AsyncIOMotorCollection = get_monitored_crop_collection()
    try:
        payload = crop.model_dump(mode="json", exclude_none=True, by_alias=True)
        await crop_collection.replace_one({"_id": crop.id}, payload, upsert=True)
        response = await crop_collection.find_one({"_id": crop.id})
        return MonitoredCrop.model_validate(response)
    except PyMongoError as exc:
        logger.exception("Could not save monitored crop %s", crop.id)
        raise HTTPException(status_code=500, detail="Could not save crop.") from exc


async def get_monitored_crop_from_id(crop_id: str) -> Optional[MonitoredCrop]:
    crop_collection: AsyncIOMotorCollection = get_monitored_crop_collection()
    try:
        response = await crop_collection.find_one({"_id": crop_id})
        return MonitoredCrop.model_validate(response) if response else None
    except PyMongoError as exc:
        logger.exception("Could not load monitored crop %s", crop_id)
        raise HTTPException(status_code=500, detail="Could not load crop.") from exc


async def get_monitored_crops_for_user(user_id: str) -> List[MonitoredCrop]:
    crop_collection: AsyncIOMotorCollection = get_monitored_crop_collection()
    try:
        items = crop_collection.find({"user_id": user_id}).sort("created_at", -1)
        return [MonitoredCrop.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list monitored crops for user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not load crops.") from exc


async def delete_monitored_crop(crop_id: str) -> bool:
    """Deletes the crop together with its snaps."""
    crop_collection: AsyncIOMotorCollection = get_monitored_crop_collection()
    snap_collection: AsyncIOMotorCollection = get_crop_snap_collection()
    try:
        result = await crop_collection.delete_one({"_id": crop_id})
        await snap_collection.delete_many({"crop_id": crop_id})
        return result.deleted_count > 0
    except PyMongoError as exc:
        logger.exception("Could not delete monitored crop %s", crop_id)
        raise HTTPException(status_code=500, detail="Could not delete crop.") from exc


async def save_crop_snap(snap: CropSnap) -> CropSnap:
    snap_collection: AsyncIOMotorCollection = get_crop_snap_collection()
    try:
        payload = snap.model_dump(mode="json", exclude_none=True, by_alias=True)
        await snap_collection.replace_one({"_id": snap.id}, payload, upsert=True)
        return snap
    except PyMongoError as exc:
        logger.exception("Could not save snap %s of crop %s", snap.id, snap.crop_id)
        raise HTTPException(status_code=500, detail="Could not save crop snap.") from exc


async def get_crop_snaps(crop_id: str, limit: int = 100) -> List[CropSnap]:
    snap_collection: AsyncIOMotorCollection = get_crop_snap_collection()
    try:
        items = snap_collection.find({"crop_id": crop_id}).sort("created_at", -1).limit(limit)
        return [CropSnap.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list snaps of crop %s", crop_id)
        raise HTTPException(status_code=500, detail="Could not load crop snaps.") from exc
