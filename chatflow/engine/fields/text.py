from chatflow.engine.fields.base import BaseFieldType, Affordance
from chatflow.engine.fields.registry import register_field_type

@register_field_type("text")
class TextFieldType(BaseFieldType):
    affordance = Affordance.INPUT

@register_field_type("email")
class EmailFieldType(BaseFieldType):
    affordance = Affordance.INPUT

@register_field_type("phone")
class PhoneFieldType(BaseFieldType):
    affordance = Affordance.INPUT

@register_field_type("url")
class UrlFieldType(BaseFieldType):
    affordance = Affordance.INPUT

@register_field_type("number")
class NumberFieldType(BaseFieldType):
    affordance = Affordance.INPUT

@register_field_type("textarea")
class TextareaFieldType(BaseFieldType):
    affordance = Affordance.MULTILINE
