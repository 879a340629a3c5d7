from .registry import get_field_type, is_registered, all_field_types, register_field_type
from .base import Affordance, BaseFieldType
from .text import (
    TextFieldType,
    EmailFieldType,
    PhoneFieldType,
    UrlFieldType,
    NumberFieldType,
    TextareaFieldType,
)
from .choice import SelectFieldType, BooleanFieldType
from .date import DateFieldType
from .file import FileFieldType

__all__ = [
    "get_field_type",
    "is_registered",
    "all_field_types",
    "register_field_type",
    "Affordance",
    "BaseFieldType",
    "TextFieldType",
    "EmailFieldType",
    "PhoneFieldType",
    "UrlFieldType",
    "NumberFieldType",
    "TextareaFieldType",
    "SelectFieldType",
    "BooleanFieldType",
    "DateFieldType",
    "FileFieldType",
]
