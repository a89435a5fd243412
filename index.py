import asyncio
import logging
from datetime import datetime

from fastapi import FastAPI, Request, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import get_settings
from models.generation import ErrorResponse, GenerateRequest, GenerateResponse
from routes.apps import router as apps_router
from routes.pages import router as pages_router, render_not_found
from routes.previews import router as previews_router
from services.errors import AppError, ValidationError
from services.gemini_client import GeminiClient, get_gemini_client
from services.generation_service import GenerationService, get_generation_service
from services.preview_service import get_preview_manager, reaper_task
from services.prompt_service import compose, is_update_request

settings = get_settings()

# Configure logging
log_handlers = [logging.StreamHandler()]
if settings.log_file:
    log_handlers.append(logging.FileHandler(settings.log_file))

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=log_handlers
)
logger = logging.getLogger(__name__)

PROMPT_REQUIRED_MESSAGE = "Prompt is required and must be a string"
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid prompt"},
    500: {"model": ErrorResponse, "description": "Generation or save failed"},
}

_background_tasks = set()

# Initialize FastAPI app
app = FastAPI(
    title="Prompt2App",
    description="Turn a text description into a single-page web app with Gemini",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["content-disposition"]
)

app.include_router(apps_router)
app.include_router(previews_router)
app.include_router(pages_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    path = request.url.path
    if exc.status_code == 404 and not (path.startswith("/api/") or path.startswith("/preview/")):
        return render_not_found(request)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None)
    )


@app.on_event("startup")
async def startup_event():
    logger.info("✅ Prompt2App started")
    logger.info(f"✅ Model: {settings.gemini_model}")
    logger.info(f"✅ Storage backend: {settings.storage_backend}")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY not set. Generation requests will fail until it is provided.")

    task = asyncio.create_task(
        reaper_task(get_preview_manager(), settings.preview_sweep_interval_seconds)
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)


@app.on_event("shutdown")
async def shutdown_event():
    for task in list(_background_tasks):
        task.cancel()
    get_preview_manager().release_all()
    logger.info("Prompt2App stopped")


@app.get("/health")
async def health_check(generation_service: GenerationService = Depends(get_generation_service)):
    """Health check endpoint."""
    apps = await generation_service.list_generations()
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "model": settings.gemini_model,
        "saved_apps": len(apps)
    }


async def _read_generate_request(http_request: Request) -> GenerateRequest:
    try:
        body = await http_request.json()
    except ValueError:
        raise ValidationError(PROMPT_REQUIRED_MESSAGE)
    if not isinstance(body, dict):
        raise ValidationError(PROMPT_REQUIRED_MESSAGE)
    return GenerateRequest.model_validate(body)


@app.post("/api/generate", response_model=GenerateResponse, responses=ERROR_RESPONSES)
async def generate_app(
    http_request: Request,
    gemini_client: GeminiClient = Depends(get_gemini_client),
    generation_service: GenerationService = Depends(get_generation_service)
):
    """
    Generates a web app from a prompt, or updates one when both updatePrompt
    and currentCode are given. Every success is saved as a new gallery entry.
    """
    request = await _read_generate_request(http_request)
    prompt = request.prompt
    if not prompt or not isinstance(prompt, str):
        raise ValidationError(PROMPT_REQUIRED_MESSAGE)

    if is_update_request(request.currentCode, request.updatePrompt):
        update_prompt = str(request.updatePrompt)
        logger.info(f"Processing update: {update_prompt}")
        full_prompt = compose(prompt, str(request.currentCode), update_prompt)
        saved_prompt = f"{prompt} (Updated: {update_prompt})"
    else:
        logger.info(f"Processing prompt: {prompt}")
        full_prompt = compose(prompt)
        saved_prompt = prompt

    try:
        code = await gemini_client.generate(full_prompt)
        record = await generation_service.create_generation(saved_prompt, code)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error generating app: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Error generating code with Gemini API"}
        )

    return GenerateResponse(code=code, id=record.id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("index:app", host="0.0.0.0", port=8000)
