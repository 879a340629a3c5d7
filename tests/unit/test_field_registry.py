import pytest
from chatflow.core.exceptions import InvalidAnswerError, UnknownFieldType
from chatflow.engine.fields import Affordance, all_field_types, get_field_type, is_registered
from chatflow.schemas.field import FieldSchema

SUPPORTED_TYPES = ["text", "email", "phone", "url", "textarea", "number", "date", "select", "boolean", "file"]

def test_registry_holds_the_closed_set():
    assert sorted(all_field_types()) == sorted(SUPPORTED_TYPES)
    for field_type in SUPPORTED_TYPES:
        assert is_registered(field_type)

@pytest.mark.parametrize("field_type", ["long_text", "image", "", "TEXT"])
def test_unknown_type_raises(field_type):
    with pytest.raises(UnknownFieldType):
        get_field_type(field_type)
    assert not is_registered(field_type)

def test_non_string_type_raises():
    with pytest.raises(UnknownFieldType):
        get_field_type(None)

def test_affordances():
    assert get_field_type("text").affordance == Affordance.INPUT
    assert get_field_type("email").affordance == Affordance.INPUT
    assert get_field_type("textarea").affordance == Affordance.MULTILINE
    assert get_field_type("select").affordance == Affordance.CHOICE
    assert get_field_type("boolean").affordance == Affordance.CHOICE
    assert get_field_type("date").affordance == Affordance.DATE
    assert get_field_type("file").affordance == Affordance.FILE

def test_date_display_is_long_form():
    handler = get_field_type("date")
    assert handler.display("2024-03-05") == "March 5, 2024"
    assert handler.display("2024-12-25T10:30:00Z") == "December 25, 2024"

def test_date_display_keeps_unparseable_values():
    assert get_field_type("date").display("next tuesday") == "next tuesday"

def test_boolean_display_and_choices():
    handler = get_field_type("boolean")
    field = FieldSchema(id="b", name="subscribe", label="Subscribe?", type="boolean", required=False)
    assert handler.display(True) == "Yes"
    assert handler.display(False) == "No"
    assert handler.display("Yes") == "Yes"
    assert handler.choices(field) == ["Yes", "No"]

def test_select_choices_follow_options_order():
    field = FieldSchema(id="s", name="plan", label="Plan?", type="select", required=True, options=["Pro", "Basic"])
    assert get_field_type("select").choices(field) == ["Pro", "Basic"]
    assert get_field_type("text").choices(field) is None

def test_file_display_uses_name():
    assert get_field_type("file").display({"name": "cv.pdf", "url": "https://x/cv.pdf"}) == "cv.pdf"
    assert get_field_type("file").display("https://x/cv.pdf") == "https://x/cv.pdf"

def test_normalize_strips_and_rejects_blank():
    handler = get_field_type("text")
    assert handler.normalize("  Jane Doe ") == "Jane Doe"
    with pytest.raises(InvalidAnswerError):
        handler.normalize("   ")
    with pytest.raises(InvalidAnswerError):
        handler.normalize(None)
