from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, StringConstraints


class PostTag(str, Enum):
    HELP = "Help"
    DISCUSSION = "Discussion"
    SELL_TOGETHER = "Sell Together"
    ADVICE = "Advice"


class CommunityPost(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    author_id: str
    author_name: str
    author_photo_url: Optional[str] = Field(default=None)
    content: str
    tag: PostTag
    like_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    liked_by: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)


class PostComment(BaseModel):
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="_id",
    )
    post_id: str
    author_id: str
    author_name: str
    author_photo_url: Optional[str] = Field(default=None)
    content: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


class CreatePostRequest(BaseModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
    tag: PostTag


class CreateCommentRequest(BaseModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=1000)]
