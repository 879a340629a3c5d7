from typing import Dict, List, Type, Any
from chatflow.core.exceptions import UnknownFieldType
from chatflow.core.logging import get_logger

logger = get_logger("fields")

_FIELD_TYPE_REGISTRY: Dict[str, Type[Any]] = {}

def register_field_type(field_type: str):
    """Decorator to register field type handlers"""
    def decorator(cls):
        cls.type_name = field_type
        _FIELD_TYPE_REGISTRY[field_type] = cls
        logger.debug(f"Registered field type: {field_type} -> {cls.__name__}")
        return cls
    return decorator

def get_field_type(field_type: str):
    """Return a handler instance for `field_type`; never falls back to a default."""
    cls = _FIELD_TYPE_REGISTRY.get(field_type) if isinstance(field_type, str) else None
    if cls is None:
        raise UnknownFieldType(field_type)
    return cls()

def is_registered(field_type: Any) -> bool:
    return isinstance(field_type, str) and field_type in _FIELD_TYPE_REGISTRY

def all_field_types() -> List[str]:
    return list(_FIELD_TYPE_REGISTRY.keys())
