"""
Environment-driven settings for Prompt2App
"""
import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()

DEFAULT_STORAGE_KEY = "prompt2app_gallery"
DEFAULT_PREVIEW_CSP = "sandbox allow-scripts allow-forms allow-modals allow-popups"


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-pro"

    storage_backend: str = Field(default="file", description="file, memory or supabase")
    storage_path: str = "data/gallery.json"
    storage_key: str = DEFAULT_STORAGE_KEY

    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_kv_table: str = "kv_store"

    log_level: str = "INFO"
    log_file: Optional[str] = None
    cors_origins: List[str] = ["*"]
    preview_csp: str = DEFAULT_PREVIEW_CSP
    preview_max_age_seconds: float = 3600
    preview_max_slots: int = 256
    preview_sweep_interval_seconds: float = 60


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-pro"),
        storage_backend=os.getenv("STORAGE_BACKEND", "file").lower(),
        storage_path=os.getenv("STORAGE_PATH", "data/gallery.json"),
        storage_key=os.getenv("STORAGE_KEY", DEFAULT_STORAGE_KEY),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY"),
        supabase_kv_table=os.getenv("SUPABASE_KV_TABLE", "kv_store"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("LOG_FILE") or None,
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")) or ["*"],
        preview_csp=os.getenv("PREVIEW_CSP", DEFAULT_PREVIEW_CSP),
        preview_max_age_seconds=float(os.getenv("PREVIEW_MAX_AGE_SECONDS", "3600")),
        preview_max_slots=int(os.getenv("PREVIEW_MAX_SLOTS", "256")),
        preview_sweep_interval_seconds=float(os.getenv("PREVIEW_SWEEP_INTERVAL_SECONDS", "60")),
    )


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings instance"""
    return load_settings()
