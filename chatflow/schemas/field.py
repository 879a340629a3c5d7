from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Literal, Dict, Any


class FieldValidationRules(BaseModel):
    minLength: Optional[int] = None
    maxLength: Optional[int] = None
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None


class FieldSchema(BaseModel):
    """One question of a chatflow. `type` is checked against the field type registry
    by ValidationService, not here."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    label: str
    type: str
    required: bool
    placeholder: Optional[str] = None
    helperText: Optional[str] = None
    options: Optional[List[str]] = None
    validation: Optional[FieldValidationRules] = None


class ChatflowSettings(BaseModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    submitButtonText: Optional[str] = None
    successMessage: Optional[str] = None


class ChatflowSchema(BaseModel):
    fields: List[FieldSchema]
    settings: Optional[ChatflowSettings] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]
