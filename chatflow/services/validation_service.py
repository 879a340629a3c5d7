import re
from typing import List, Dict, Any, Set
from pydantic import ValidationError

from chatflow.core.exceptions import SchemaIssue, SchemaValidationError
from chatflow.engine.fields import is_registered
from chatflow.schemas.field import ChatflowSchema

FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

REQUIRED_PROPERTIES = (
    ("id", str),
    ("name", str),
    ("label", str),
    ("type", str),
    ("required", bool),
)
OPTIONAL_TEXT_PROPERTIES = ("placeholder", "helperText")
VALIDATION_RULE_TYPES = {
    "minLength": int,
    "maxLength": int,
    "min": (int, float),
    "max": (int, float),
    "pattern": str,
}
THEMES = ("light", "dark", "system")


def _is_instance(value: Any, expected) -> bool:
    # bool is an int subclass; never accept it where a number or string is expected
    if isinstance(value, bool) and expected is not bool:
        return False
    return isinstance(value, expected)


class ValidationService:
    @staticmethod
    def collect_issues(value: Any) -> List[SchemaIssue]:
        """Check a JSON-like value against the ChatflowSchema rules, reporting every problem."""
        issues: List[SchemaIssue] = []

        if not isinstance(value, dict):
            issues.append(SchemaIssue(path="$", rule="not_an_object", message="Schema must be an object"))
            return issues

        if "fields" not in value or value["fields"] is None:
            issues.append(SchemaIssue(path="fields", rule="missing", message="'fields' is required"))
            return issues

        fields = value["fields"]
        if not isinstance(fields, list):
            issues.append(SchemaIssue(path="fields", rule="not_a_list", message="'fields' must be a list"))
            return issues

        seen_names: Set[str] = set()
        seen_ids: Set[str] = set()

        for index, field in enumerate(fields):
            path = f"fields[{index}]"
            if not isinstance(field, dict):
                issues.append(SchemaIssue(path=path, rule="not_an_object", message="Field must be an object", field_index=index))
                continue

            field_name = field.get("name") if isinstance(field.get("name"), str) else None

            def add(prop: str, rule: str, message: str):
                issues.append(SchemaIssue(
                    path=f"{path}.{prop}",
                    rule=rule,
                    message=message,
                    field_index=index,
                    field_name=field_name,
                ))

            # 1. Required properties and their primitive types
            for prop, expected in REQUIRED_PROPERTIES:
                if prop not in field:
                    add(prop, "missing_property", f"'{prop}' is required")
                elif not _is_instance(field[prop], expected):
                    add(prop, "wrong_type", f"'{prop}' must be of type {expected.__name__}")

            # 2. Type must be known to the registry
            field_type = field.get("type")
            if isinstance(field_type, str) and not is_registered(field_type):
                add("type", "unknown_field_type", f"Unknown field type '{field_type}'")

            # 3. Name is a storage key
            if field_name is not None:
                if not FIELD_NAME_PATTERN.match(field_name):
                    add("name", "invalid_name", "'name' may only contain letters, digits and underscores")
                elif field_name in seen_names:
                    add("name", "duplicate_name", f"Duplicate field name '{field_name}'")
                seen_names.add(field_name)

            field_id = field.get("id")
            if isinstance(field_id, str):
                if field_id in seen_ids:
                    add("id", "duplicate_id", f"Duplicate field id '{field_id}'")
                seen_ids.add(field_id)

            # 4. Optional metadata, shape only
            for prop in OPTIONAL_TEXT_PROPERTIES:
                if field.get(prop) is not None and not isinstance(field[prop], str):
                    add(prop, "wrong_type", f"'{prop}' must be a string")

            options = field.get("options")
            if options is not None:
                if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
                    add("options", "invalid_options", "'options' must be a list of strings")

            rules = field.get("validation")
            if rules is not None:
                if not isinstance(rules, dict):
                    add("validation", "invalid_validation", "'validation' must be an object")
                else:
                    for rule_name, rule_value in rules.items():
                        expected = VALIDATION_RULE_TYPES.get(rule_name)
                        if expected is None or (rule_value is not None and not _is_instance(rule_value, expected)):
                            add(f"validation.{rule_name}", "invalid_validation", f"Invalid validation rule '{rule_name}'")

        settings = value.get("settings")
        if settings is not None:
            if not isinstance(settings, dict):
                issues.append(SchemaIssue(path="settings", rule="wrong_type", message="'settings' must be an object"))
            elif settings.get("theme") is not None and settings["theme"] not in THEMES:
                issues.append(SchemaIssue(path="settings.theme", rule="invalid_setting", message=f"'theme' must be one of {', '.join(THEMES)}"))

        return issues

    @staticmethod
    def validate_schema(value: Any) -> ChatflowSchema:
        """Return the typed schema or raise SchemaValidationError listing every issue."""
        issues = ValidationService.collect_issues(value)
        if issues:
            raise SchemaValidationError(issues)
        try:
            return ChatflowSchema.model_validate(value)
        except ValidationError as e:
            raise SchemaValidationError([
                SchemaIssue(
                    path=".".join(str(p) for p in err["loc"]),
                    rule="invalid",
                    message=err["msg"],
                )
                for err in e.errors()
            ]) from e

    @staticmethod
    def issues_as_dicts(issues: List[SchemaIssue]) -> List[Dict[str, Any]]:
        return [issue.to_dict() for issue in issues]
