from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.security import verify_jwt
from app.models.community import (
    CommunityPost,
    CreateCommentRequest,
    CreatePostRequest,
    PostComment,
    PostTag,
)
from app.services import community_service

router = APIRouter(
    prefix="/community",
    tags=["Community"],
    dependencies=[Depends(verify_jwt)],
)


@router.post(
    "/posts",
    response_model=CommunityPost,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    request: CreatePostRequest,
    user_payload: dict = Depends(verify_jwt),
) -> CommunityPost:
    return await community_service.create_post(request, user_id=user_payload.get("sub"))


@router.get("/posts", response_model=list[CommunityPost], response_model_exclude_none=True)
async def list_posts(
    tag: Optional[PostTag] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
) -> list[CommunityPost]:
    """
    Newest posts first, optionally only those with the given tag.
    """
    return await community_service.list_posts(tag=tag, limit=limit)


@router.get("/posts/{post_id}", response_model=CommunityPost, response_model_exclude_none=True)
async def get_post(post_id: str) -> CommunityPost:
    return await community_service.get_post(post_id)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, user_payload: dict = Depends(verify_jwt)):
    await community_service.delete_post(post_id, user_id=user_payload.get("sub"))
    return None


@router.post(
    "/posts/{post_id}/like",
    response_model=CommunityPost,
    response_model_exclude_none=True,
)
async def like_post(post_id: str, user_payload: dict = Depends(verify_jwt)) -> CommunityPost:
    return await community_service.like_post(post_id, user_id=user_payload.get("sub"))


@router.post(
    "/posts/{post_id}/comments",
    response_model=PostComment,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    request: CreateCommentRequest,
    user_payload: dict = Depends(verify_jwt),
) -> PostComment:
    return await community_service.add_comment(
        post_id, request, user_id=user_payload.get("sub")
    )


@router.get(
    "/posts/{post_id}/comments",
    response_model=list[PostComment],
    response_model_exclude_none=True,
)
async def list_comments(post_id: str) -> list[PostComment]:
    return await community_service.list_comments(post_id)
