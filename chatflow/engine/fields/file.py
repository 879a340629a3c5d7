from typing import Any
from chatflow.engine.fields.base import BaseFieldType, Affordance
from chatflow.engine.fields.registry import register_field_type

@register_field_type("file")
class FileFieldType(BaseFieldType):
    affordance = Affordance.FILE

    def display(self, value: Any) -> str:
        # Uploads arrive as a reference document ({"name": ..., "url": ...}) or a plain URL
        if isinstance(value, dict):
            return str(value.get("name") or value.get("url") or value)
        return str(value)
