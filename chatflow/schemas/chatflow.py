from pydantic import BaseModel, Field, AliasChoices
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum

from chatflow.schemas.field import FieldSchema

PLACEHOLDER_NAME = "Untitled Chatflow"

class ChatflowStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

class GenerationStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"

class GenerationState(str, Enum):
    """What a poller sees."""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

class ChatflowGenerateRequest(BaseModel):
    description: str = Field(..., min_length=10, description="Free-text description of the form to build")

class ChatflowGenerateResponse(BaseModel):
    chatflow_id: str

class GenerationStatusResponse(BaseModel):
    state: GenerationState
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

class ChatflowUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    definition: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("schema", "definition"),
        serialization_alias="schema",
    )
    status: Optional[ChatflowStatus] = None

class ChatflowSummary(BaseModel):
    id: str
    name: str
    status: ChatflowStatus
    generation_status: GenerationStatus
    share_url: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ChatflowInDB(ChatflowSummary):
    description: str
    definition: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("definition", "schema"),
        serialization_alias="schema",
    )
    generation_error: Optional[str] = None

class ChatflowDetail(ChatflowInDB):
    submissions: int = 0

class PublishResponse(BaseModel):
    id: str
    share_url: str
    status: ChatflowStatus

class PublicChatflow(BaseModel):
    id: str
    name: str
    fields: List[FieldSchema]

class SchemaValidationResult(BaseModel):
    valid: bool
    errors: List[Dict[str, Any]] = []
