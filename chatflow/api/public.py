from fastapi import APIRouter, Depends
from chatflow.api.deps import get_chatflow_service, get_submission_service
from chatflow.engine.conversation import ConversationSession
from chatflow.services.chatflow_service import ChatflowService
from chatflow.services.submission_service import SubmissionService
from chatflow.schemas.chatflow import PublicChatflow
from chatflow.schemas.submission import ConversationAnswer, ConversationTurn

router = APIRouter()

@router.get("/{share_url}", response_model=PublicChatflow, response_model_exclude_none=True)
async def get_public_chatflow(
    share_url: str,
    service: ChatflowService = Depends(get_chatflow_service),
):
    return await service.get_public_chatflow(share_url)

@router.post("/{share_url}/conversation/start", response_model=ConversationTurn)
async def start_conversation(
    share_url: str,
    service: ChatflowService = Depends(get_chatflow_service),
    submission_service: SubmissionService = Depends(get_submission_service),
):
    chatflow = await service.get_public_chatflow(share_url)
    session = ConversationSession.from_public_chatflow(chatflow, submission_service)
    messages = session.start()
    return ConversationTurn(state=session.state.value, cursor=session.cursor, messages=messages)

@router.post("/{share_url}/conversation/answer", response_model=ConversationTurn)
async def answer_conversation(
    share_url: str,
    request: ConversationAnswer,
    service: ChatflowService = Depends(get_chatflow_service),
    submission_service: SubmissionService = Depends(get_submission_service),
):
    chatflow = await service.get_public_chatflow(share_url)
    submission = None
    if request.submission_id:
        submission = await submission_service.get_submission(request.submission_id, chatflow.id)

    # Stateless turn: rebuild the session from what is persisted, then apply one answer
    session = ConversationSession.resume(chatflow, submission_service, submission)
    messages = await session.answer(request.value)
    return ConversationTurn(
        submission_id=session.submission_id,
        state=session.state.value,
        cursor=session.cursor,
        messages=messages,
    )
