from fastapi import APIRouter, Depends

from oriento.api.dependencies import get_current_user, get_oriento_service
from oriento.models.user import User
from oriento.schemas.ask import AskRequest, AskResponse
from oriento.services.oriento_service import OrientoService

router = APIRouter()


@router.post("/ask", response_model=AskResponse, response_model_by_alias=True)
async def ask(
    payload: AskRequest,
    caller: User = Depends(get_current_user),
    service: OrientoService = Depends(get_oriento_service),
) -> AskResponse:
    """
    Send a prompt to Oriento. Omit `conversationId` to start a new conversation;
    the returned id continues it.
    """
    return await service.ask(payload.prompt, payload.conversation_id, caller)
