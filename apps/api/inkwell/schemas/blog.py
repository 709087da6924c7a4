"""Blog post API schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from inkwell.domain.forms import BODY_MAX_LENGTH, BODY_MIN_LENGTH, TITLE_MIN_LENGTH, widest_title_max_length
from inkwell.domain.sanitizer import SanitizationPolicyName

BlogTitle = Annotated[str, StringConstraints(min_length=TITLE_MIN_LENGTH, max_length=widest_title_max_length())]
BlogBody = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=BODY_MIN_LENGTH, max_length=BODY_MAX_LENGTH),
]


class CreateBlogRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blog_title: BlogTitle = Field(alias="blogTitle")
    blog_post: BlogBody = Field(alias="blogPost")
    is_private: bool = Field(default=False, alias="isPrivate")
    content_policy: SanitizationPolicyName | None = Field(default=None, alias="contentPolicy")


class UpdateBlogRequest(CreateBlogRequest):
    blog_id: str = Field(min_length=1, alias="blogId")


class BlogPost(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    blog_title: str = Field(alias="blogTitle")
    blog_post: str = Field(alias="blogPost")
    is_private: bool = Field(alias="isPrivate")
    author_id: str = Field(alias="authorId")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
