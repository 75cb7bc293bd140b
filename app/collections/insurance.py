import logging
from typing import List, Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.mongodb import (
    get_insurance_claim_collection,
    get_insurance_policy_collection,
)
from app.models.insurance import InsuranceClaim, InsurancePolicy, PolicyStatus

logger = logging.getLogger(__name__)


async def save_policy(policy: InsurancePolicy) -> InsurancePolicy:
    policy_collection: AsyncIOMotorCollection = get_insurance_policy_collection()
    try:
        payload = policy.model_dump(mode="json", exclude_none=True, by_alias=True)
        await policy_collection.replace_one({"_id": policy.id}, payload, upsert=True)
        response = await policy_collection.find_one({"_id": policy.id})
        return InsurancePolicy.model_validate(response)
    except PyMongoError as exc:
        logger.exception("Could not save policy %s", policy.id)
        raise HTTPException(status_code=500, detail="Could not save policy.") from exc


async def get_policy_from_id(policy_id: str) -> Optional[InsurancePolicy]:
    policy_collection: AsyncIOMotorCollection = get_insurance_policy_collection()
    try:
        response = await policy_collection.find_one({"_id": policy_id})
        return InsurancePolicy.model_validate(response) if response else None
    except PyMongoError as exc:
        logger.exception("Could not load policy %s", policy_id)
        raise HTTPException(status_code=500, detail="Could not load policy.") from exc


async def get_policies_for_user(
    user_id: str,
    policy_status: Optional[PolicyStatus] = PolicyStatus.ACTIVE,
) -> List[InsurancePolicy]:
    policy_collection: AsyncIOMotorCollection = get_insurance_policy_collection()
    query = {"user_id": user_id}
    if policy_status is not None:
        query["status"] = policy_status.value
    try:
        items = policy_collection.find(query).sort("created_at", -1)
        return [InsurancePolicy.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list policies for user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not load policies.") from exc


async def save_claim(claim: InsuranceClaim) -> InsuranceClaim:
    claim_collection: AsyncIOMotorCollection = get_insurance_claim_collection()
    try:
        payload = claim.model_dump(mode="json", exclude_none=True, by_alias=True)
        await claim_collection.replace_one({"_id": claim.id}, payload, upsert=True)
        response = await claim_collection.find_one({"_id": claim.id})
        return InsuranceClaim.model_validate(response)
    except PyMongoError as exc:
        logger.exception("Could not save claim %s", claim.id)
        raise HTTPException(status_code=500, detail="Could not save claim.") from exc


async def get_claims_for_user(user_id: str) -> List[InsuranceClaim]:
    claim_collection: AsyncIOMotorCollection = get_insurance_claim_collection()
    try:
        items = claim_collection.find({"user_id": user_id}).sort("created_at", -1)
        return [InsuranceClaim.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list claims for user %s", user_id)
        raise HTTPException(status_code=500, detail="Could not load claims.") from exc
