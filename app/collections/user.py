import logging
from typing import Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.mongodb import get_user_collection
from app.models.user import User

logger = logging.getLogger(__name__)


async def get_user_from_id(
    user_id: str,
) -> Optional[User]:
    user_collection: AsyncIOMotorCollection = get_user_collection()
    try:
        response = await user_collection.find_one({"_id": user_id})
        return User.model_validate(response) if response else None
    except PyMongoError as exc:
        logger.exception("Could not load user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not load user.") from exc


async def get_user_from_phone(phone: str) -> Optional[User]:
    user_collection: AsyncIOMotorCollection = get_user_collection()
    try:
        item = await user_collection.find_one({"phone": phone})
        return User.model_validate(item) if item else None
    except PyMongoError as exc:
        logger.exception("Could not look up user by phone")
        raise HTTPException(status_code=500, detail="Could not load user.") from exc


async def save_user(
    user: User,
) -> User:
    user_collection: AsyncIOMotorCollection = get_user_collection()
    try:
        payload = user.model_dump(mode="json", exclude_none=True, by_alias=True)
        await user_collection.replace_one({"_id": user.id}, payload, upsert=True)
        response = await user_collection.find_one({"_id": user.id})
        return User.model_validate(response)
    except PyMongoError as exc:
        logger.exception("Could not save user %s", user.id)
        raise HTTPException(status_code=500, detail="Could not save user.") from exc


async def delete_user(
    user_id: str,
) -> bool:
    user_collection: AsyncIOMotorCollection = get_user_collection()
    try:
        result = await user_collection.delete_one({"_id": user_id})
        return result.deleted_count > 0
    except PyMongoError as exc:
        logger.exception("Could not delete user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not delete user.") from exc
