from fastapi import APIRouter, Depends
from chatflow.api.deps import get_submission_service
from chatflow.services.submission_service import SubmissionService
from chatflow.schemas.submission import SubmissionFieldUpdate, SubmissionFinalize, SubmissionSaved

router = APIRouter()

@router.post("/update", response_model=SubmissionSaved)
async def update_submission_field(
    request: SubmissionFieldUpdate,
    service: SubmissionService = Depends(get_submission_service),
):
    submission = await service.upsert_submission_field(
        request.submission_id,
        request.chatflow_id,
        request.field_name,
        request.field_value,
    )
    return SubmissionSaved(submission_id=submission.id, data=submission.data, status=submission.status)

@router.post("/submit", response_model=SubmissionSaved)
async def submit_submission(
    request: SubmissionFinalize,
    service: SubmissionService = Depends(get_submission_service),
):
    submission = await service.finalize_submission(
        request.submission_id,
        request.chatflow_id,
        request.data,
        request.status,
    )
    return SubmissionSaved(submission_id=submission.id, data=submission.data, status=submission.status)
