from abc import ABC
from enum import Enum
from typing import Any, List, Optional

from chatflow.core.exceptions import InvalidAnswerError
from chatflow.schemas.field import FieldSchema


class Affordance(str, Enum):
    INPUT = "input"
    MULTILINE = "multiline"
    CHOICE = "select"
    DATE = "date"
    FILE = "file"


class BaseFieldType(ABC):
    type_name: str = ""
    affordance: Affordance = Affordance.INPUT

    def normalize(self, value: Any) -> Any:
        """
        Turn a raw answer into the value that gets stored.
        Blank answers are rejected so the cursor stays put.
        """
        if value is None:
            raise InvalidAnswerError("An answer is required")
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise InvalidAnswerError("An answer is required")
        return value

    def display(self, value: Any) -> str:
        """Text echoed back into the chat transcript for a stored answer."""
        return str(value)

    def choices(self, field: FieldSchema) -> Optional[List[str]]:
        return None
