"""
Inkwell: View Rendering
========================

What:  The shared Jinja2 environment and the render helper every HTML route
       uses to turn a view state into a response.
How:   Templates live in inkwell/templates/{blog,books}/ plus a shared
       layout; each app passes its own `app_name` so the layout can title
       and link itself.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M")


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


templates.env.filters["timestamp"] = format_timestamp
templates.env.filters["isodate"] = format_date


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render `name` with the app's display name merged into the context."""
    ctx = {"app_name": getattr(request.app.state, "display_name", "Inkwell")}
    ctx.update(context or {})
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
