"""
Inkwell: Blog Route Handlers
=============================

What:  HTML routes of the Blog app.
How:   Reads go straight to the PostStore; create/edit submissions go through
       services/submissions.py and the handler branches on the outcome.

Route Inventory:
    GET  /                    list + create form (newest edit first)
    POST /posts               create → 303 /posts/{id} | 400 list + error
    GET  /posts/{id}          show | 404
    GET  /posts/{id}/edit     edit form | 404
    POST /posts/{id}/edit     update → 303 /posts/{id} | 400 edit + error | 404
    POST /posts/{id}/delete   delete → 303 /  (absent ids included)
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from inkwell.exceptions import NotFoundError
from inkwell.schemas.post import PostForm
from inkwell.services.post_store import PostStore, get_post_store
from inkwell.services.submissions import Accepted, submit_new_post, submit_post_edit
from inkwell.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Blog"])

PAGE_TITLE = "My Blog"


def _index(request: Request, store: PostStore, error=None, values=None, status_code=200):
    return render(
        request,
        "blog/index.html",
        {
            "page_title": PAGE_TITLE,
            "posts": store.list(),
            "error": error,
            "values": values or {},
        },
        status_code=status_code,
    )


def _require_post(store: PostStore, post_id: str):
    post = store.find(post_id)
    if post is None:
        raise NotFoundError(resource="post", resource_id=post_id)
    return post


@router.get("/")
async def list_posts(request: Request, store: PostStore = Depends(get_post_store)):
    return _index(request, store)


@router.post("/posts")
async def create_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    store: PostStore = Depends(get_post_store),
):
    outcome = submit_new_post(store, PostForm(title=title, content=content))
    if isinstance(outcome, Accepted):
        return RedirectResponse(f"/posts/{outcome.record.id}", status_code=303)
    return _index(request, store, error=outcome.message, values=outcome.values, status_code=400)


@router.get("/posts/{post_id}")
async def show_post(post_id: str, request: Request, store: PostStore = Depends(get_post_store)):
    post = _require_post(store, post_id)
    return render(request, "blog/show.html", {"page_title": post.title, "post": post})


@router.get("/posts/{post_id}/edit")
async def edit_post_form(post_id: str, request: Request, store: PostStore = Depends(get_post_store)):
    post = _require_post(store, post_id)
    return render(
        request,
        "blog/edit.html",
        {
            "page_title": f"Edit: {post.title}",
            "post": post,
            "values": {"title": post.title, "content": post.content},
            "error": None,
        },
    )


@router.post("/posts/{post_id}/edit")
async def update_post(
    post_id: str,
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    store: PostStore = Depends(get_post_store),
):
    post = _require_post(store, post_id)
    outcome = submit_post_edit(store, post_id, PostForm(title=title, content=content))
    if isinstance(outcome, Accepted):
        return RedirectResponse(f"/posts/{post_id}", status_code=303)
    return render(
        request,
        "blog/edit.html",
        {
            "page_title": f"Edit: {post.title}",
            "post": post,
            "values": outcome.values,
            "error": outcome.message,
        },
        status_code=400,
    )


@router.post("/posts/{post_id}/delete")
async def delete_post(post_id: str, store: PostStore = Depends(get_post_store)):
    store.delete(post_id)
    return RedirectResponse("/", status_code=303)
