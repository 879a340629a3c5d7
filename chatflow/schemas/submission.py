from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum

class SubmissionStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"

class SubmissionFieldUpdate(BaseModel):
    submission_id: Optional[str] = None
    chatflow_id: str
    field_name: str = Field(..., min_length=1)
    field_value: Any = None

class SubmissionFinalize(BaseModel):
    submission_id: Optional[str] = None
    chatflow_id: str
    data: Dict[str, Any]
    status: SubmissionStatus = SubmissionStatus.COMPLETED

class SubmissionSaved(BaseModel):
    success: bool = True
    submission_id: str
    data: Dict[str, Any]
    status: SubmissionStatus

class SubmissionInDB(BaseModel):
    id: str
    chatflow_id: str
    data: Dict[str, Any]
    status: SubmissionStatus
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ChatMessage(BaseModel):
    id: str
    role: str  # "assistant" | "user"
    content: str
    affordance: Optional[str] = None
    field_id: Optional[str] = None
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None
    helper_text: Optional[str] = None

class ConversationAnswer(BaseModel):
    submission_id: Optional[str] = None
    value: Any = None

class ConversationTurn(BaseModel):
    submission_id: Optional[str] = None
    state: str
    cursor: int
    messages: List[ChatMessage]
