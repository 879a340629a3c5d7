import pytest
from chatflow.core.exceptions import NotFoundError, SubmissionClosedError
from chatflow.schemas.submission import SubmissionStatus


@pytest.mark.asyncio
async def test_first_answer_creates_submission(submission_service, published_chatflow):
    submission = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "Jane Doe")
    assert submission.status == SubmissionStatus.IN_PROGRESS.value
    assert submission.data == {"fullName": "Jane Doe"}
    assert submission.completed_at is None


@pytest.mark.asyncio
async def test_answers_merge_without_dropping_keys(submission_service, published_chatflow):
    first = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "Jane Doe")
    second = await submission_service.upsert_submission_field(first.id, published_chatflow.id, "email", "jane@x.com")
    assert second.id == first.id
    assert second.data == {"fullName": "Jane Doe", "email": "jane@x.com"}

    third = await submission_service.upsert_submission_field(first.id, published_chatflow.id, "fullName", "Jane Q. Doe")
    assert third.data == {"fullName": "Jane Q. Doe", "email": "jane@x.com"}


@pytest.mark.asyncio
async def test_finalize_sets_completed_at_once(submission_service, published_chatflow):
    draft = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "Jane Doe")
    data = {"fullName": "Jane Doe", "email": "jane@x.com"}

    done = await submission_service.finalize_submission(draft.id, published_chatflow.id, data)
    assert done.status == SubmissionStatus.COMPLETED.value
    assert done.completed_at is not None
    completed_at = done.completed_at

    again = await submission_service.finalize_submission(draft.id, published_chatflow.id, data)
    assert again.completed_at == completed_at
    assert again.data == data


@pytest.mark.asyncio
async def test_terminal_submission_rejects_changes(submission_service, published_chatflow):
    draft = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "Jane Doe")
    await submission_service.finalize_submission(draft.id, published_chatflow.id, {"email": "jane@x.com"})

    with pytest.raises(SubmissionClosedError):
        await submission_service.upsert_submission_field(draft.id, published_chatflow.id, "email", "other@x.com")
    with pytest.raises(SubmissionClosedError):
        await submission_service.finalize_submission(draft.id, published_chatflow.id, {"email": "other@x.com"})
    with pytest.raises(SubmissionClosedError):
        await submission_service.finalize_submission(
            draft.id, published_chatflow.id, {}, SubmissionStatus.ABANDONED
        )


@pytest.mark.asyncio
async def test_finalize_without_id_creates_record(submission_service, published_chatflow):
    submission = await submission_service.finalize_submission(None, published_chatflow.id, {"fullName": "A", "email": "a@b.c"})
    assert submission.status == SubmissionStatus.COMPLETED.value
    assert submission.completed_at is not None


@pytest.mark.asyncio
async def test_abandon_leaves_completed_at_empty(submission_service, published_chatflow):
    draft = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "Jane Doe")
    abandoned = await submission_service.finalize_submission(
        draft.id, published_chatflow.id, {}, SubmissionStatus.ABANDONED
    )
    assert abandoned.status == SubmissionStatus.ABANDONED.value
    assert abandoned.completed_at is None
    assert abandoned.data == {"fullName": "Jane Doe"}


@pytest.mark.asyncio
async def test_unknown_ids(submission_service, published_chatflow, chatflow_service):
    with pytest.raises(NotFoundError):
        await submission_service.upsert_submission_field(None, "missing", "fullName", "x")
    with pytest.raises(NotFoundError):
        await submission_service.upsert_submission_field("missing", published_chatflow.id, "fullName", "x")

    other = await chatflow_service.create_placeholder("some other chatflow")
    draft = await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "x")
    with pytest.raises(NotFoundError):
        await submission_service.get_submission(draft.id, other.id)


@pytest.mark.asyncio
async def test_drafts_do_not_accept_submissions(submission_service, chatflow_service):
    draft = await chatflow_service.create_placeholder("still a draft chatflow")
    with pytest.raises(NotFoundError):
        await submission_service.upsert_submission_field(None, draft.id, "fullName", "x")
    with pytest.raises(NotFoundError):
        await submission_service.finalize_submission(None, draft.id, {"fullName": "x"})


@pytest.mark.asyncio
async def test_list_and_count(submission_service, published_chatflow):
    assert await submission_service.count_submissions(published_chatflow.id) == 0
    await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "A")
    await submission_service.upsert_submission_field(None, published_chatflow.id, "fullName", "B")
    assert await submission_service.count_submissions(published_chatflow.id) == 2
    submissions = await submission_service.list_submissions(published_chatflow.id)
    assert sorted(s.data["fullName"] for s in submissions) == ["A", "B"]
    with pytest.raises(NotFoundError):
        await submission_service.list_submissions("missing")
