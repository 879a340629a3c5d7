import json
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict

from chatflow.core.exceptions import TransientServiceError
from chatflow.core.logging import get_logger
from chatflow.engine.fields import all_field_types
from chatflow.engine.generation import prompts
from chatflow.engine.generation.context import GenerationContext
from chatflow.schemas.chatflow import PLACEHOLDER_NAME
from chatflow.services.validation_service import ValidationService

logger = get_logger("generation")

CompletionFn = Callable[..., Awaitable[str]]

CODE_FENCE = re.compile(r"```(?:json)?\n?|\n?```")

# Type tokens older prompts produced; only registry tokens leave the generate step
LEGACY_TYPE_ALIASES = {
    "long_text": "textarea",
}

# Errors a model call or its output can fail with; all of them trigger the fallback
RECOVERABLE_ERRORS = (TransientServiceError, ValueError, TypeError, KeyError)


def mock_analysis(description: str) -> Dict[str, str]:
    return {
        "analysis": "Mock analysis: " + description,
        "suggestedName": PLACEHOLDER_NAME,
    }


def mock_schema() -> Dict[str, Any]:
    return {
        "fields": [
            {"id": "f1", "name": "field1", "label": "Mock Question 1", "type": "text", "required": True},
            {"id": "f2", "name": "field2", "label": "Mock Question 2", "type": "select", "required": False, "options": ["Option A", "Option B"]},
        ]
    }


def parse_json_object(text: str) -> Dict[str, Any]:
    """Strip markdown code fences and parse; anything but a JSON object is a ValueError."""
    cleaned = CODE_FENCE.sub("", text or "").strip()
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError("Model output is not a JSON object")
    return data


def _text_or(value: Any, default: str) -> str:
    """Model output is untyped; keep only non-blank strings."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def apply_type_aliases(schema: Dict[str, Any]) -> Dict[str, Any]:
    fields = schema.get("fields")
    if not isinstance(fields, list):
        return schema
    mapped = []
    for field in fields:
        if isinstance(field, dict) and field.get("type") in LEGACY_TYPE_ALIASES:
            field = {**field, "type": LEGACY_TYPE_ALIASES[field["type"]]}
        mapped.append(field)
    return {**schema, "fields": mapped}


class BaseStep(ABC):
    name: str = "step"

    def __init__(self, complete: CompletionFn):
        self.complete = complete

    @abstractmethod
    async def execute(self, context: GenerationContext) -> None:
        """Read from and write to the shared context."""
        pass


class AnalyzeStep(BaseStep):
    name = "analyze"

    async def execute(self, context: GenerationContext) -> None:
        try:
            text = await self.complete(
                user_prompt=prompts.analyze_user_prompt(context.description),
                system_prompt=prompts.ANALYZE_SYSTEM_PROMPT,
                temperature=0.0,
                max_tokens=500,
            )
            result = parse_json_object(text)
            context.analysis = _text_or(result.get("analysis"), text)
            context.suggested_name = _text_or(result.get("suggestedName"), PLACEHOLDER_NAME)
        except RECOVERABLE_ERRORS as e:
            logger.warning(f"Analysis failed for chatflow {context.chatflow_id}, using mock: {e}")
            fallback = mock_analysis(context.description)
            context.analysis = fallback["analysis"]
            context.suggested_name = fallback["suggestedName"]
            context.used_fallback = True


class GenerateSchemaStep(BaseStep):
    name = "generate"

    async def execute(self, context: GenerationContext) -> None:
        try:
            text = await self.complete(
                user_prompt=prompts.generate_user_prompt(context.description, context.analysis or ""),
                system_prompt=prompts.generate_system_prompt(all_field_types()),
                temperature=0.0,
                max_tokens=2048,
            )
            context.raw_schema = apply_type_aliases(parse_json_object(text))
        except RECOVERABLE_ERRORS as e:
            logger.warning(f"Schema generation failed for chatflow {context.chatflow_id}, using mock: {e}")
            context.raw_schema = mock_schema()
            context.used_fallback = True


class ValidateSchemaStep(BaseStep):
    name = "validate"

    async def execute(self, context: GenerationContext) -> None:
        # SchemaValidationError propagates: a malformed schema is never persisted
        context.schema = ValidationService.validate_schema(context.raw_schema)
