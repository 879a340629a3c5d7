from dataclasses import dataclass
from typing import Any, Dict, Optional

from chatflow.schemas.field import ChatflowSchema


@dataclass
class GenerationContext:
    """Values handed from one pipeline step to the next."""

    chatflow_id: str
    description: str
    analysis: Optional[str] = None
    suggested_name: Optional[str] = None
    raw_schema: Optional[Dict[str, Any]] = None
    schema: Optional[ChatflowSchema] = None
    used_fallback: bool = False
