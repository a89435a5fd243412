"""
Live preview and unsaved-code export routes
"""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
import logging

from config.settings import get_settings
from models.generation import ExportRequest, PreviewRequest, PreviewResponse
from services.errors import NotFoundError
from services.export_service import ExportService, get_export_service
from services.preview_service import PreviewManager, get_preview_manager

router = APIRouter(tags=["Preview"])
logger = logging.getLogger(__name__)


@router.post("/api/previews", response_model=PreviewResponse)
async def create_preview(
    request: PreviewRequest,
    preview_manager: PreviewManager = Depends(get_preview_manager)
):
    """
    Publish code as the owner's live preview, replacing the previous one
    """
    token = preview_manager.acquire(request.owner, request.code)
    return PreviewResponse(token=token, url=f"/preview/{token}")


@router.post("/api/previews/{owner}/release")
async def release_preview(
    owner: str,
    preview_manager: PreviewManager = Depends(get_preview_manager)
):
    return {"released": preview_manager.release(owner)}


@router.get("/preview/{token}", response_class=HTMLResponse)
async def show_preview(
    token: str,
    preview_manager: PreviewManager = Depends(get_preview_manager)
):
    html = preview_manager.get(token)
    if html is None:
        raise NotFoundError("Preview not found")
    return HTMLResponse(
        content=html,
        headers={"Content-Security-Policy": get_settings().preview_csp}
    )


@router.post("/api/export")
async def export_code(
    request: ExportRequest,
    export_service: ExportService = Depends(get_export_service)
):
    """
    Download code that has not been saved yet as a zip
    """
    archive = export_service.export_generation(request.code)
    return Response(
        content=archive,
        media_type=export_service.get_content_type(),
        headers=export_service.get_download_headers()
    )
