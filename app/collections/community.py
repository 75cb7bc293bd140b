import logging
from typing import List, Optional

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from app.core.mongodb import get_comment_collection, get_post_collection
from app.models.community import CommunityPost, PostComment, PostTag

logger = logging.getLogger(__name__)


async def save_post(post: CommunityPost) -> CommunityPost:
    post_collection: AsyncIOMotorCollection = get_post_collection()
    try:
        payload = post.model_dump(mode="json", exclude_none=True, by_alias=True)
        await post_collection.replace_one({"_id": post.id}, payload, upsert=True)
        response = await post_collection.find_one({"_id": post.id})
        return CommunityPost.model_validate(response)
    except PyMongoError as exc:
        logger.exception("Could not save post %s", post.id)
        raise HTTPException(status_code=500, detail="Could not save post.") from exc


async def get_post_from_id(post_id: str) -> Optional[CommunityPost]:
    post_collection: AsyncIOMotorCollection = get_post_collection()
    try:
        response = await post_collection.find_one({"_id": post_id})
        return CommunityPost.model_validate(response) if response else None
    except PyMongoError as exc:
        logger.exception("Could not load post %s", post_id)
        raise HTTPException(status_code=500, detail="Could not load post.") from exc


async def get_posts(tag: Optional[PostTag] = None, limit: int = 50) -> List[CommunityPost]:
    post_collection: AsyncIOMotorCollection = get_post_collection()
    query = {"tag": tag.value} if tag else {}
    try:
        items = post_collection.find(query).sort("created_at", -1).limit(limit)
        return [CommunityPost.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list posts (tag=%s)", tag)
        raise HTTPException(status_code=500, detail="Could not load posts.") from exc


async def add_like(post_id: str, user_id: str) -> bool:
    """
    Adds a like in one atomic update. Returns False when the post does not
    exist or the user already liked it.
    """
    post_collection: AsyncIOMotorCollection = get_post_collection()
    try:
        result = await post_collection.update_one(
            {"_id": post_id, "liked_by": {"$ne": user_id}},
            {"$inc": {"like_count": 1}, "$addToSet": {"liked_by": user_id}},
        )
        return result.modified_count > 0
    except PyMongoError as exc:
        logger.exception("Could not like post %s", post_id)
        raise HTTPException(status_code=500, detail="Could not like post.") from exc


async def delete_post(post_id: str) -> bool:
    post_collection: AsyncIOMotorCollection = get_post_collection()
    comment_collection: AsyncIOMotorCollection = get_comment_collection()
    try:
        result = await post_collection.delete_one({"_id": post_id})
        await comment_collection.delete_many({"post_id": post_id})
        return result.deleted_count > 0
    except PyMongoError as exc:
        logger.exception("Could not delete post %s", post_id)
        raise HTTPException(status_code=500, detail="Could not delete post.") from exc


async def save_comment(comment: PostComment) -> PostComment:
    """Stores the comment and increments the post's comment count."""
    post_collection: AsyncIOMotorCollection = get_post_collection()
    comment_collection: AsyncIOMotorCollection = get_comment_collection()
    try:
        payload = comment.model_dump(mode="json", exclude_none=True, by_alias=True)
        await comment_collection.insert_one(payload)
        await post_collection.update_one(
            {"_id": comment.post_id}, {"$inc": {"comment_count": 1}}
        )
        return comment
    except PyMongoError as exc:
        logger.exception("Could not save comment on post %s", comment.post_id)
        raise HTTPException(status_code=500, detail="Could not save comment.") from exc


async def get_comments_for_post(post_id: str, limit: int = 200) -> List[PostComment]:
    comment_collection: AsyncIOMotorCollection = get_comment_collection()
    try:
        items = comment_collection.find({"post_id": post_id}).sort("created_at", 1).limit(limit)
        return [PostComment.model_validate(item) async for item in items]
    except PyMongoError as exc:
        logger.exception("Could not list comments of post %s", post_id)
        raise HTTPException(status_code=500, detail="Could not load comments.") from exc
