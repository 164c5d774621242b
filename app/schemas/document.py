from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.models.document import DocumentStatus


class DocumentCreate(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict, description="Field values of the first locale.")
    locale: Optional[str] = Field(None, description="Locale of the data (the canonical locale when omitted).")
    status: DocumentStatus = Field(DocumentStatus.draft, description="Initial status of the document.")

    class Config:
        json_schema_extra = {
            "example": {
                "data": {
                    "title": "Hello",
                    "meta": {"title": "Hello", "description": "A first post"},
                },
                "locale": "en",
                "status": "published",
            }
        }


class DocumentUpdate(BaseModel):
    data: Dict[str, Any] = Field(..., description="Fields to change; groups are merged, other values replaced.")
    locale: Optional[str] = None
    draft: bool = Field(False, description="Write the locale's draft slot instead of its live copy.")


class DocumentPublish(BaseModel):
    locale: Optional[str] = None


class LocaleOutcomeResponse(BaseModel):
    locale: str
    state: str
    translated_fields: List[str] = []
    failed_fields: List[str] = []
    written: bool = False
    error: Optional[str] = None


class TranslationRunResponse(BaseModel):
    success: bool
    message: str
    collection: str
    document_id: Any
    locales: Dict[str, LocaleOutcomeResponse] = {}
    retryable: bool = False


class TranslationQueuedResponse(BaseModel):
    queued: bool = True
    job_id: str
    collection: str
    document_id: int


class DocumentLanguagesResponse(BaseModel):
    collection: str
    document_id: int
    languages: List[str]
