import logging

from app.core.langchain_message_adapter import history_to_langchain
from app.models.assistant import (
    AgriGptRequest,
    AgriGptResponse,
    SupportChatRequest,
    SupportChatResponse,
)
from app.prompts.assistant_system_prompt import (
    AGRIGPT_SYSTEM_PROMPT,
    SUPPORT_CHAT_SYSTEM_PROMPT,
)
from app.services.structured_flow import require_output, run_structured_flow

logger = logging.getLogger(__name__)

SUPPORT_CHAT_FALLBACK = "I'm sorry, I had trouble generating a response. Please try again."


async def agrigpt(request: AgriGptRequest) -> AgriGptResponse:
    result = await run_structured_flow(
        flow_name="AgriGPT",
        system_prompt=AGRIGPT_SYSTEM_PROMPT,
        input_data={
            "transcribed_query": request.transcribed_query,
            "current_screen": request.current_screen,
        },
        output_model=AgriGptResponse,
        history=history_to_langchain(request.conversation_history),
        language=request.language,
        failure_detail="AgriGPT is not available right now. Please try again.",
    )
    response = require_output(result, "AgriGPT did not return an answer. Please try again.")
    logger.info(
        "AgriGPT intent=%s action=%s on %s",
        response.intent,
        response.action_code.value,
        request.current_screen,
    )
    return response


async def support_chat(request: SupportChatRequest) -> SupportChatResponse:
    result = await run_structured_flow(
        flow_name="Support chat",
        system_prompt=SUPPORT_CHAT_SYSTEM_PROMPT,
        input_data={"message": request.message},
        output_model=SupportChatResponse,
        history=history_to_langchain(request.history),
        language=request.language,
        failure_detail=SUPPORT_CHAT_FALLBACK,
    )
    if result is None or not result.reply.strip():
        return SupportChatResponse(reply=SUPPORT_CHAT_FALLBACK)
    return result
