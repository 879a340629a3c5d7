import json
import pytest
from chatflow.core.exceptions import NotFoundError, SchemaValidationError, TransientServiceError
from chatflow.engine.generation import GenerationOrchestrator, mock_schema
from chatflow.engine.generation.steps import apply_type_aliases, parse_json_object
from chatflow.schemas.chatflow import ChatflowInDB, GenerationStatus, PLACEHOLDER_NAME

ANALYSIS = json.dumps({"suggestedName": "Customer Feedback", "analysis": "Collect ratings and comments"})

GENERATED = {
    "fields": [
        {"id": "f1", "name": "fullName", "label": "What is your full name?", "type": "text", "required": True},
        {"id": "f2", "name": "rating", "label": "How was it?", "type": "select", "required": True, "options": ["Good", "Bad"]},
        {"id": "f3", "name": "comments", "label": "Anything else?", "type": "long_text", "required": False},
    ]
}


def fenced(value):
    return "```json\n" + json.dumps(value) + "\n```"


def test_parse_json_object_strips_fences():
    assert parse_json_object(fenced({"fields": []})) == {"fields": []}
    assert parse_json_object('{"a": 1}') == {"a": 1}
    with pytest.raises(ValueError):
        parse_json_object("[1, 2]")
    with pytest.raises(ValueError):
        parse_json_object("not json")


def test_apply_type_aliases_maps_long_text_only():
    mapped = apply_type_aliases(GENERATED)
    assert [f["type"] for f in mapped["fields"]] == ["text", "select", "textarea"]
    assert GENERATED["fields"][2]["type"] == "long_text"


@pytest.mark.asyncio
async def test_generation_persists_schema_and_name(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("customer feedback form")
    llm = make_llm([ANALYSIS, fenced(GENERATED)])

    schema = await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "customer feedback form")

    stored = await chatflow_store.get(chatflow.id)
    assert stored.name == "Customer Feedback"
    assert stored.generation_status == GenerationStatus.SUCCEEDED.value
    assert stored.definition == schema.to_document()
    assert [f["type"] for f in stored.definition["fields"]] == ["text", "select", "textarea"]
    assert len(llm.calls) == 2
    assert llm.calls[0]["temperature"] == 0.0
    assert "Collect ratings and comments" in llm.calls[1]["user_prompt"]
    assert '"textarea"' in llm.calls[1]["system_prompt"]


@pytest.mark.asyncio
async def test_unavailable_model_falls_back_to_mock(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("anything at all here")
    llm = make_llm([TransientServiceError("no api key")])

    schema = await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "anything at all here")

    stored = await chatflow_store.get(chatflow.id)
    assert stored.name == PLACEHOLDER_NAME
    assert stored.definition == mock_schema()
    assert stored.generation_status == GenerationStatus.SUCCEEDED.value
    assert schema.field_names() == ["field1", "field2"]


@pytest.mark.asyncio
async def test_fallback_is_deterministic(chatflow_service, chatflow_store, make_llm):
    first = await chatflow_service.create_placeholder("one description text")
    second = await chatflow_service.create_placeholder("another description text")
    orchestrator = GenerationOrchestrator(chatflow_store, complete=make_llm([TransientServiceError("down")]))

    await orchestrator.run(first.id, "one description text")
    await orchestrator.run(second.id, "another description text")

    assert (await chatflow_store.get(first.id)).definition == (await chatflow_store.get(second.id)).definition


@pytest.mark.asyncio
async def test_failed_analysis_feeds_mock_analysis_to_generate(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("job application form")
    llm = make_llm(["this is not json", json.dumps(GENERATED)])

    await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "job application form")

    assert "Mock analysis: job application form" in llm.calls[1]["user_prompt"]
    stored = await chatflow_store.get(chatflow.id)
    assert stored.name == PLACEHOLDER_NAME
    assert stored.definition["fields"][0]["name"] == "fullName"


@pytest.mark.asyncio
async def test_invalid_model_schema_is_never_persisted(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("photo contest entry")
    bad = {"fields": [{"id": "f1", "name": "photo", "label": "Your photo", "type": "image", "required": True}]}
    llm = make_llm([ANALYSIS, json.dumps(bad)])

    with pytest.raises(SchemaValidationError):
        await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "photo contest entry")

    stored = await chatflow_store.get(chatflow.id)
    assert stored.definition == {}
    assert stored.name == PLACEHOLDER_NAME
    assert stored.generation_status == GenerationStatus.FAILED.value
    assert "image" in stored.generation_error


@pytest.mark.asyncio
async def test_unknown_chatflow(chatflow_store, make_llm):
    with pytest.raises(NotFoundError):
        await GenerationOrchestrator(chatflow_store, complete=make_llm([ANALYSIS])).run("missing", "whatever text")


@pytest.mark.asyncio
async def test_non_string_analysis_values_are_ignored(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("customer feedback form")
    reply = json.dumps({"suggestedName": 42, "analysis": ["not", "text"]})
    llm = make_llm([reply, json.dumps(GENERATED)])

    await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "customer feedback form")

    stored = await chatflow_store.get(chatflow.id)
    assert stored.name == PLACEHOLDER_NAME
    assert ChatflowInDB.model_validate(stored).name == PLACEHOLDER_NAME
    assert reply in llm.calls[1]["user_prompt"]


@pytest.mark.asyncio
async def test_blank_suggested_name_uses_placeholder(chatflow_service, chatflow_store, make_llm):
    chatflow = await chatflow_service.create_placeholder("customer feedback form")
    llm = make_llm([json.dumps({"suggestedName": "   ", "analysis": "ok"}), json.dumps(GENERATED)])

    await GenerationOrchestrator(chatflow_store, complete=llm).run(chatflow.id, "customer feedback form")

    assert (await chatflow_store.get(chatflow.id)).name == PLACEHOLDER_NAME
