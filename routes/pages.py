"""
Server-rendered pages: create, gallery and single-app view
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
import logging

from services.generation_service import GenerationService, get_generation_service

router = APIRouter(tags=["Pages"])
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

PROMPT_PREVIEW_LENGTH = 30


def format_date(timestamp_ms: int) -> str:
    """Format epoch milliseconds like 'Oct 18, 2026, 05:20 PM'"""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%b %d, %Y, %I:%M %p")


def truncate_prompt(prompt: str, length: int = PROMPT_PREVIEW_LENGTH) -> str:
    return f"{prompt[:length]}..." if len(prompt) > length else prompt


templates.env.filters["format_date"] = format_date
templates.env.filters["truncate_prompt"] = truncate_prompt


def render_not_found(request: Request, message: str = "The page you're looking for doesn't exist or has been moved."):
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"message": message},
        status_code=404
    )


@router.get("/", response_class=HTMLResponse)
async def create_page(
    request: Request,
    id: Optional[str] = None,
    generation_service: GenerationService = Depends(get_generation_service)
):
    """Prompt form; ?id= preloads a saved prompt for remixing"""
    prompt = ""
    is_remixed = False
    if id:
        record = await generation_service.get_generation_by_id(id)
        if record:
            prompt = record.prompt
            is_remixed = True
        else:
            logger.info(f"Remix requested for unknown app {id}")
    return templates.TemplateResponse(
        request,
        "create.html",
        {"prompt": prompt, "is_remixed": is_remixed}
    )


@router.get("/gallery", response_class=HTMLResponse)
async def gallery_page(
    request: Request,
    generation_service: GenerationService = Depends(get_generation_service)
):
    apps = await generation_service.list_generations()
    return templates.TemplateResponse(request, "gallery.html", {"apps": apps})


@router.get("/view/{generation_id}", response_class=HTMLResponse)
async def view_page(
    request: Request,
    generation_id: str,
    generation_service: GenerationService = Depends(get_generation_service)
):
    record = await generation_service.get_generation_by_id(generation_id)
    if not record:
        return render_not_found(request, "App not found")
    return templates.TemplateResponse(request, "view.html", {"app": record})
