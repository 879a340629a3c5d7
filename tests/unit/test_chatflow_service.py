import pytest
from chatflow.core.exceptions import ChatflowNotReadyError, NotFoundError, SchemaValidationError
from chatflow.schemas.chatflow import (
    ChatflowStatus,
    ChatflowUpdate,
    GenerationState,
    GenerationStatus,
    PLACEHOLDER_NAME,
)


@pytest.mark.asyncio
async def test_create_placeholder(chatflow_service):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    assert chatflow.name == PLACEHOLDER_NAME
    assert chatflow.definition == {}
    assert chatflow.status == ChatflowStatus.DRAFT.value
    assert chatflow.generation_status == GenerationStatus.PENDING.value
    assert len(chatflow.share_url) == 8


@pytest.mark.asyncio
async def test_generation_status_mapping(chatflow_service, chatflow_store, contact_schema):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    assert (await chatflow_service.get_generation_status(chatflow.id)).state == GenerationState.RUNNING

    await chatflow_store.update(chatflow.id, {"generation_status": GenerationStatus.RUNNING.value})
    assert (await chatflow_service.get_generation_status(chatflow.id)).state == GenerationState.RUNNING

    await chatflow_store.update(chatflow.id, {
        "generation_status": GenerationStatus.SUCCEEDED.value,
        "definition": contact_schema,
        "name": "Contact",
    })
    status = await chatflow_service.get_generation_status(chatflow.id)
    assert status.state == GenerationState.COMPLETED
    assert status.result["name"] == "Contact"
    assert status.result["fields"] == contact_schema["fields"]

    await chatflow_store.update(chatflow.id, {
        "generation_status": GenerationStatus.FAILED.value,
        "generation_error": "boom",
    })
    status = await chatflow_service.get_generation_status(chatflow.id)
    assert status.state == GenerationState.FAILED
    assert status.error == "boom"


@pytest.mark.asyncio
async def test_generation_status_unknown_id(chatflow_service):
    with pytest.raises(NotFoundError):
        await chatflow_service.get_generation_status("nope")


@pytest.mark.asyncio
async def test_update_rejects_invalid_schema(chatflow_service):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    bad = {"fields": [{"id": "f1", "name": "x", "label": "X", "type": "long_text", "required": True}]}
    with pytest.raises(SchemaValidationError):
        await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(schema=bad))
    assert (await chatflow_service.get(chatflow.id)).definition == {}


@pytest.mark.asyncio
async def test_update_name_and_schema(chatflow_service, contact_schema):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    updated = await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(name="Renamed", schema=contact_schema))
    assert updated.name == "Renamed"
    assert updated.definition == contact_schema
    assert updated.description == "collect feedback from users"


@pytest.mark.asyncio
async def test_publish_requires_a_schema(chatflow_service):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    with pytest.raises(ChatflowNotReadyError):
        await chatflow_service.publish(chatflow.id)
    with pytest.raises(ChatflowNotReadyError):
        await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(status=ChatflowStatus.PUBLISHED))
    assert (await chatflow_service.get(chatflow.id)).status == ChatflowStatus.DRAFT.value


@pytest.mark.asyncio
async def test_publish_requires_fields(chatflow_service, chatflow_store):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    await chatflow_store.update(chatflow.id, {"definition": {"fields": []}})
    with pytest.raises(ChatflowNotReadyError):
        await chatflow_service.publish(chatflow.id)


@pytest.mark.asyncio
async def test_publish_keeps_existing_share_url(chatflow_service, contact_schema):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    share_url = chatflow.share_url
    await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(schema=contact_schema))

    published = await chatflow_service.publish(chatflow.id)

    assert published.status == ChatflowStatus.PUBLISHED.value
    assert published.share_url == share_url


@pytest.mark.asyncio
async def test_publish_fills_missing_share_url(chatflow_service, chatflow_store, contact_schema):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    await chatflow_store.update(chatflow.id, {"share_url": None, "definition": contact_schema})

    published = await chatflow_service.publish(chatflow.id)

    assert published.share_url
    assert len(published.share_url) == 8


@pytest.mark.asyncio
async def test_public_chatflow_only_when_published(chatflow_service, published_chatflow):
    public = await chatflow_service.get_public_chatflow(published_chatflow.share_url)
    assert public.name == "Contact Form"
    assert [f.name for f in public.fields] == ["fullName", "email"]

    await chatflow_service.update_chatflow(published_chatflow.id, ChatflowUpdate(status=ChatflowStatus.ARCHIVED))
    with pytest.raises(NotFoundError):
        await chatflow_service.get_public_chatflow(published_chatflow.share_url)
    with pytest.raises(NotFoundError):
        await chatflow_service.get_public_chatflow("unknown")


@pytest.mark.asyncio
async def test_list_filters_by_status(chatflow_service, published_chatflow):
    await chatflow_service.create_placeholder("another draft chatflow")
    assert len(await chatflow_service.list()) == 2
    published = await chatflow_service.list(status=ChatflowStatus.PUBLISHED.value)
    assert [c.id for c in published] == [published_chatflow.id]


@pytest.mark.asyncio
async def test_published_chatflow_rejects_empty_schema(chatflow_service, published_chatflow):
    with pytest.raises(ChatflowNotReadyError):
        await chatflow_service.update_chatflow(published_chatflow.id, ChatflowUpdate(schema={"fields": []}))

    stored = await chatflow_service.get(published_chatflow.id)
    assert stored.status == ChatflowStatus.PUBLISHED.value
    assert len(stored.definition["fields"]) == 2
    public = await chatflow_service.get_public_chatflow(published_chatflow.share_url)
    assert len(public.fields) == 2


@pytest.mark.asyncio
async def test_draft_accepts_empty_schema(chatflow_service):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    updated = await chatflow_service.update_chatflow(chatflow.id, ChatflowUpdate(schema={"fields": []}))
    assert updated.definition == {"fields": []}


@pytest.mark.asyncio
async def test_archiving_with_empty_schema_is_allowed(chatflow_service, published_chatflow):
    updated = await chatflow_service.update_chatflow(
        published_chatflow.id, ChatflowUpdate(schema={"fields": []}, status=ChatflowStatus.ARCHIVED)
    )
    assert updated.status == ChatflowStatus.ARCHIVED.value


@pytest.mark.asyncio
async def test_mark_generation_failed(chatflow_service):
    chatflow = await chatflow_service.create_placeholder("collect feedback from users")
    await chatflow_service.mark_generation_failed(chatflow.id, "broker down")
    status = await chatflow_service.get_generation_status(chatflow.id)
    assert status.state == GenerationState.FAILED
    assert status.error == "broker down"
    with pytest.raises(NotFoundError):
        await chatflow_service.mark_generation_failed("missing", "x")
