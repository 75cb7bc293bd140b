from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from app.core.config import settings

_client: AsyncIOMotorClient = None
_database: AsyncIOMotorDatabase = None


async def init_mongo_client() -> None:
    global _client, _database
    if _client is None:
        mongo_uri = settings.MONGO_DIRECT_URI or settings.MONGO_URI
        _client = AsyncIOMotorClient(mongo_uri, uuidRepresentation="standard")
    if _database is None:
        _database = _client[settings.MONGO_DB_NAME]


async def close_mongo_client() -> None:
    global _client, _database
    if _client is not None:
        _client.close()
    _client = None
    _database = None


def _get_collection(collection_name: str) -> AsyncIOMotorCollection:
    global _client, _database
    if _client is None:
        mongo_uri = settings.MONGO_DIRECT_URI or settings.MONGO_URI
        _client = AsyncIOMotorClient(mongo_uri, uuidRepresentation="standard")
    if _database is None:
        _database = _client[settings.MONGO_DB_NAME]
    return _database[collection_name]


def get_user_collection() -> AsyncIOMotorCollection:
    return _get_collection("user")


def get_ai_workflow_collection() -> AsyncIOMotorCollection:
    return _get_collection("ai_workflow")


def get_ai_workflow_event_collection() -> AsyncIOMotorCollection:
    return _get_collection("ai_workflow_event")


def get_post_collection() -> AsyncIOMotorCollection:
    return _get_collection("posts")


def get_comment_collection() -> AsyncIOMotorCollection:
    return _get_collection("comments")


def get_insurance_policy_collection() -> AsyncIOMotorCollection:
    return _get_collection("insurance_policies")


def get_insurance_claim_collection() -> AsyncIOMotorCollection:
    return _get_collection("insurance_claims")


def get_monitored_crop_collection() -> AsyncIOMotorCollection:
    return _get_collection("monitored_crops")


def get_crop_snap_collection() -> AsyncIOMotorCollection:
    return _get_collection("crop_snaps")


def get_diagnosis_collection() -> AsyncIOMotorCollection:
    return _get_collection("diagnoses")
