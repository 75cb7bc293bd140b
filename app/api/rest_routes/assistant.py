from fastapi import APIRouter, Depends

from app.core.security import verify_jwt
from app.models.assistant import (
    AgriGptRequest,
    AgriGptResponse,
    SupportChatRequest,
    SupportChatResponse,
)
from app.services.assistant_service import agrigpt, support_chat

router = APIRouter(
    prefix="/assistant",
    tags=["Assistant"],
    dependencies=[Depends(verify_jwt)],
)


@router.post("/agrigpt", response_model=AgriGptResponse, response_model_exclude_none=True)
async def ask_agrigpt(request: AgriGptRequest) -> AgriGptResponse:
    """
    Voice assistant turn: intent, what the app should do next and the
    spoken answer in English and the farmer's language.
    """
    return await agrigpt(request)


@router.post("/support-chat", response_model=SupportChatResponse)
async def ask_support(request: SupportChatRequest) -> SupportChatResponse:
    return await support_chat(request)
