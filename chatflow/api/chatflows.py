from fastapi import APIRouter, Depends, status
from kombu.exceptions import OperationalError
from chatflow.api.deps import get_chatflow_service, get_submission_service
from chatflow.services.chatflow_service import ChatflowService
from chatflow.services.submission_service import SubmissionService
from chatflow.services.validation_service import ValidationService
from chatflow.schemas.chatflow import (
    ChatflowDetail,
    ChatflowGenerateRequest,
    ChatflowGenerateResponse,
    ChatflowInDB,
    ChatflowStatus,
    ChatflowSummary,
    ChatflowUpdate,
    GenerationStatusResponse,
    PublishResponse,
    SchemaValidationResult,
)
from chatflow.schemas.submission import SubmissionInDB
from celery_app.tasks import generate_chatflow_task
from chatflow.core.exceptions import JobEnqueueError
from chatflow.core.logging import get_logger
from typing import List, Optional

logger = get_logger("api.chatflows")
router = APIRouter()

@router.get("/", response_model=List[ChatflowSummary])
async def get_chatflows(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ChatflowStatus] = None,
    service: ChatflowService = Depends(get_chatflow_service),
):
    return await service.list(skip=skip, limit=limit, status=status.value if status else None)

@router.post("/generate", response_model=ChatflowGenerateResponse, status_code=status.HTTP_202_ACCEPTED)
async def generate_chatflow(
    request: ChatflowGenerateRequest,
    service: ChatflowService = Depends(get_chatflow_service),
):
    chatflow = await service.create_placeholder(request.description)

    # Trigger Celery task; the poller watches /generate/{id}
    try:
        generate_chatflow_task.delay(chatflow.id, request.description)
    except OperationalError as e:
        # Never leave the row PENDING without a job
        await service.mark_generation_failed(chatflow.id, f"Could not queue generation: {e}")
        raise JobEnqueueError(f"Could not queue generation for chatflow {chatflow.id}") from e
    logger.info(f"Queued generation for chatflow {chatflow.id}")

    return ChatflowGenerateResponse(chatflow_id=chatflow.id)

@router.get("/generate/{chatflow_id}", response_model=GenerationStatusResponse, response_model_exclude_none=True)
async def get_generation_status(
    chatflow_id: str,
    service: ChatflowService = Depends(get_chatflow_service),
):
    return await service.get_generation_status(chatflow_id)

@router.get("/{chatflow_id}", response_model=ChatflowDetail)
async def get_chatflow(
    chatflow_id: str,
    service: ChatflowService = Depends(get_chatflow_service),
    submission_service: SubmissionService = Depends(get_submission_service),
):
    chatflow = await service.get(chatflow_id)
    detail = ChatflowDetail.model_validate(chatflow)
    detail.submissions = await submission_service.count_submissions(chatflow_id)
    return detail

@router.patch("/{chatflow_id}", response_model=ChatflowInDB)
async def update_chatflow(
    chatflow_id: str,
    chatflow_in: ChatflowUpdate,
    service: ChatflowService = Depends(get_chatflow_service),
):
    return await service.update_chatflow(chatflow_id, chatflow_in)

@router.post("/{chatflow_id}/publish", response_model=PublishResponse)
async def publish_chatflow(
    chatflow_id: str,
    service: ChatflowService = Depends(get_chatflow_service),
):
    chatflow = await service.publish(chatflow_id)
    return PublishResponse(id=chatflow.id, share_url=chatflow.share_url, status=chatflow.status)

@router.post("/{chatflow_id}/validate", response_model=SchemaValidationResult)
async def validate_chatflow(
    chatflow_id: str,
    service: ChatflowService = Depends(get_chatflow_service),
):
    chatflow = await service.get(chatflow_id)
    issues = ValidationService.collect_issues(chatflow.definition)
    return SchemaValidationResult(valid=len(issues) == 0, errors=ValidationService.issues_as_dicts(issues))

@router.get("/{chatflow_id}/submissions", response_model=List[SubmissionInDB])
async def get_chatflow_submissions(
    chatflow_id: str,
    submission_service: SubmissionService = Depends(get_submission_service),
):
    return await submission_service.list_submissions(chatflow_id)
