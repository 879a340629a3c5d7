from typing import Any, List, Optional
from chatflow.engine.fields.base import BaseFieldType, Affordance
from chatflow.engine.fields.registry import register_field_type
from chatflow.schemas.field import FieldSchema

BOOLEAN_CHOICES = ["Yes", "No"]

@register_field_type("select")
class SelectFieldType(BaseFieldType):
    affordance = Affordance.CHOICE

    def choices(self, field: FieldSchema) -> Optional[List[str]]:
        # Answers outside `options` are stored as plain strings
        return list(field.options or [])

@register_field_type("boolean")
class BooleanFieldType(BaseFieldType):
    affordance = Affordance.CHOICE

    def display(self, value: Any) -> str:
        if isinstance(value, bool):
            return "Yes" if value else "No"
        return str(value)

    def choices(self, field: FieldSchema) -> Optional[List[str]]:
        return list(BOOLEAN_CHOICES)
