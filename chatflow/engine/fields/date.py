from datetime import date, datetime
from typing import Any
from chatflow.engine.fields.base import BaseFieldType, Affordance
from chatflow.engine.fields.registry import register_field_type

@register_field_type("date")
class DateFieldType(BaseFieldType):
    affordance = Affordance.DATE

    def display(self, value: Any) -> str:
        """
        Long form for the transcript, e.g. '2024-03-05' -> 'March 5, 2024'.
        Unparseable values are echoed unchanged.
        """
        parsed = None
        if isinstance(value, datetime):
            parsed = value.date()
        elif isinstance(value, date):
            parsed = value
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.replace("Z", "+00:00")).date()
            except ValueError:
                parsed = None
        if parsed is None:
            return str(value)
        return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"
