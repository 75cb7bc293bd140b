import logging
from typing import List, Optional

from fastapi import HTTPException, status

from app.collections.community import (
    add_like,
    delete_post as delete_post_document,
    get_comments_for_post,
    get_post_from_id,
    get_posts,
    save_comment,
    save_post,
)
from app.collections.user import get_user_from_id
from app.models.community import (
    CommunityPost,
    CreateCommentRequest,
    CreatePostRequest,
    PostComment,
    PostTag,
)
from app.models.user import User

logger = logging.getLogger(__name__)


async def _get_author(user_id: str) -> User:
    user = await get_user_from_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


async def create_post(request: CreatePostRequest, *, user_id: str) -> CommunityPost:
    author = await _get_author(user_id)
    post = CommunityPost(
        author_id=author.id,
        author_name=author.name,
        author_photo_url=author.photo_url,
        content=request.content,
        tag=request.tag,
    )
    return await save_post(post)


async def list_posts(tag: Optional[PostTag] = None, limit: int = 50) -> List[CommunityPost]:
    return await get_posts(tag=tag, limit=limit)


async def get_post(post_id: str) -> CommunityPost:
    post = await get_post_from_id(post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
    return post


async def like_post(post_id: str, *, user_id: str) -> CommunityPost:
    if not await add_like(post_id, user_id):
        # Either the post is gone or this user already liked it.
        await get_post(post_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already liked this post.",
        )
    return await get_post(post_id)


async def delete_post(post_id: str, *, user_id: str) -> None:
    post = await get_post(post_id)
    if post.author_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own posts.",
        )
    await delete_post_document(post.id)
    logger.info("Post %s deleted by its author", post.id)


async def add_comment(
    post_id: str,
    request: CreateCommentRequest,
    *,
    user_id: str,
) -> PostComment:
    post = await get_post(post_id)
    author = await _get_author(user_id)
    comment = PostComment(
        post_id=post.id,
        author_id=author.id,
        author_name=author.name,
        author_photo_url=author.photo_url,
        content=request.content,
    )
    return await save_comment(comment)


async def list_comments(post_id: str) -> List[PostComment]:
    post = await get_post(post_id)
    return await get_comments_for_post(post.id)
