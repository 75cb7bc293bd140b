import logging
from typing import List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.mongodb import get_diagnosis_collection
from app.models.disease_diagnosis import DiagnosisRecord

logger = logging.getLogger(__name__)


async def save_diagnosis(record: DiagnosisRecord) -> DiagnosisRecord:
    diagnosis_collection: AsyncIOMotorCollection = get_diagnosis_collection()
    try:
        payload = record.model_dump(mode="json", exclude_none=True, by_alias=True)
        await diagnosis_collection.replace_one({"_id": record.id}, payload, upsert=True)
        return record
    except PyMongoError as exc:
        logger.exception("Could not save diagnosis %s", record.id)
        raise HTTPException(status_code=500, detail="Could not save diagnosis.") from exc


async def get_diagnoses_for_user(user_id: str, limit: int = 100) -> List[DiagnosisRecord]:
    diagnosis_collection: AsyncIOMotorCollection = get_diagnosis_collection()
    try:
        items = (
            diagnosis_collection.find({"user_id": user_id})
            .sort("created_at", -1)
            .limit(limit)
        )
        return [DiagnosisRecord.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not load diagnoses for user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not load diagnosis history.") from exc
