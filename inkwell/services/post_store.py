"""
Inkwell: Post Store (volatile)
===============================

What:  Process-local keyed collection of blog posts.
How:   A dict keyed by id plus a monotonically increasing counter.
Who:   Constructed by `create_blog_app()` (or a test) and handed to the blog
       routes through the `get_post_store` dependency.

Concurrency:
    Unsynchronized. Overlapping edits of the same post are last-write-wins
    with no detection.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import Request

from inkwell.schemas.post import Post

logger = logging.getLogger(__name__)


class PostStore:
    """
    In-memory store for Post records.

    Invariants:
        - ids are "1", "2", ... in creation order and are never reused,
          even after the post holding one is deleted
        - list() always returns posts newest-edit first
        - callers validate input before calling create/update
    """

    def __init__(self) -> None:
        self._posts: Dict[str, Post] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._posts)

    def list(self) -> List[Post]:
        # Ties on updated_at fall back to the newer id
        return sorted(
            self._posts.values(),
            key=lambda p: (p.updated_at, int(p.id)),
            reverse=True,
        )

    def find(self, post_id: str) -> Optional[Post]:
        return self._posts.get(post_id)

    def create(self, title: str, content: str) -> Post:
        now = datetime.now(timezone.utc)
        post = Post(
            id=str(self._next_id),
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._next_id += 1
        self._posts[post.id] = post
        logger.info("Post %s created", post.id)
        return post

    def update(self, post_id: str, title: str, content: str) -> Optional[Post]:
        """Mutate an existing post in place. Returns None when the id is absent."""
        post = self._posts.get(post_id)
        if post is None:
            return None
        post.title = title
        post.content = content
        post.updated_at = datetime.now(timezone.utc)
        logger.info("Post %s updated", post.id)
        return post

    def delete(self, post_id: str) -> None:
        """Remove a post. Deleting an absent id is a no-op."""
        if self._posts.pop(post_id, None) is not None:
            logger.info("Post %s deleted", post_id)


def get_post_store(request: Request) -> PostStore:
    """FastAPI dependency returning the store owned by the running app."""
    return request.app.state.post_store
