"""
Gallery routes for Prompt2App: list, fetch, delete, preview and export saved apps
"""
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, Response
import logging

from config.settings import get_settings
from models.generation import DeleteResponse, ErrorResponse, GalleryResponse, GenerationRecord
from services.errors import NotFoundError
from services.export_service import ExportService, get_export_service
from services.generation_service import GenerationService, get_generation_service

router = APIRouter(prefix="/api/apps", tags=["Gallery"])
logger = logging.getLogger(__name__)

NOT_FOUND_RESPONSES = {404: {"model": ErrorResponse, "description": "App not found"}}


async def _get_or_404(generation_id: str, generation_service: GenerationService) -> GenerationRecord:
    record = await generation_service.get_generation_by_id(generation_id)
    if not record:
        raise NotFoundError()
    return record


@router.get("", response_model=GalleryResponse)
async def list_apps(generation_service: GenerationService = Depends(get_generation_service)):
    """
    Get all saved apps, newest first
    """
    apps = await generation_service.list_generations()
    return GalleryResponse(apps=apps)


@router.get("/{generation_id}", response_model=GenerationRecord, responses=NOT_FOUND_RESPONSES)
async def get_app(
    generation_id: str,
    generation_service: GenerationService = Depends(get_generation_service)
):
    return await _get_or_404(generation_id, generation_service)


@router.delete("/{generation_id}", response_model=DeleteResponse)
async def delete_app(
    generation_id: str,
    generation_service: GenerationService = Depends(get_generation_service)
):
    """
    Delete a saved app. Unknown ids are accepted and leave the gallery unchanged.
    """
    deleted = await generation_service.delete_generation(generation_id)
    return DeleteResponse(deleted=deleted)


@router.get("/{generation_id}/preview", response_class=HTMLResponse, responses=NOT_FOUND_RESPONSES)
async def preview_app(
    generation_id: str,
    generation_service: GenerationService = Depends(get_generation_service)
):
    """Serve the stored document inside a sandbox so it cannot reach this origin"""
    record = await _get_or_404(generation_id, generation_service)
    return HTMLResponse(
        content=record.code,
        headers={"Content-Security-Policy": get_settings().preview_csp}
    )


@router.get("/{generation_id}/export", responses=NOT_FOUND_RESPONSES)
async def export_app(
    generation_id: str,
    generation_service: GenerationService = Depends(get_generation_service),
    export_service: ExportService = Depends(get_export_service)
):
    """
    Download a saved app as a zip of index.html, style.css and script.js
    """
    record = await _get_or_404(generation_id, generation_service)
    archive = export_service.export_generation(record.code)
    logger.info(f"Exported app {generation_id}")
    return Response(
        content=archive,
        media_type=export_service.get_content_type(),
        headers=export_service.get_download_headers()
    )
