"""
Generation models for Prompt2App: saved gallery records and API payloads.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional


class GenerationRecord(BaseModel):
    """
    A saved generation as it is stored in the gallery list.

    The JSON layout keeps the camelCase ``createdAt`` name used by the
    persisted gallery so existing data stays readable.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    prompt: str
    code: str
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds")

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


class GenerateRequest(BaseModel):
    """
    Body of POST /api/generate. Fields stay loosely typed here; the endpoint
    does its own checks so it can answer with the exact 400 message.
    """
    prompt: Optional[Any] = None
    updatePrompt: Optional[Any] = None
    currentCode: Optional[Any] = None


class GenerateResponse(BaseModel):
    code: str
    id: str


class ErrorResponse(BaseModel):
    error: str


class GalleryResponse(BaseModel):
    apps: List[GenerationRecord]


class DeleteResponse(BaseModel):
    deleted: bool


class ExportRequest(BaseModel):
    code: str = Field(..., description="Complete HTML document to export")


class PreviewRequest(BaseModel):
    owner: str = Field(..., min_length=1, description="Client-chosen preview slot")
    code: str


class PreviewResponse(BaseModel):
    token: str
    url: str
