"""
Inkwell: Post Schemas
======================

What:  The Post record held by the volatile blog store, and the raw form
       submission the blog handlers receive.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Post(BaseModel):
    """
    A blog post.

    `id` is assigned once by PostStore and never changes; `title`/`content`
    and `updated_at` are mutated in place on edit.
    """
    id: str = Field(description="Store-assigned identifier (counter rendered as text)")
    title: str = Field(description="Non-empty trimmed title")
    content: str = Field(description="Non-empty trimmed body")
    created_at: datetime = Field(description="When the post was created (UTC)")
    updated_at: datetime = Field(description="Last create or edit time (UTC)")


class PostForm(BaseModel):
    """Raw form input, kept verbatim so a rejected form can be re-rendered."""
    title: str = ""
    content: str = ""
