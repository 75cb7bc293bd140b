import json
import logging
from typing import Any, Iterable, Optional, Sequence, Type, TypeVar

from fastapi import HTTPException, status
from langchain_core.messages import BaseMessage, HumanMessage
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, ValidationError

from app.core.genai_client import get_chat_model

logger = logging.getLogger(__name__)

OutputModel = TypeVar("OutputModel", bound=BaseModel)


def build_flow_messages(
    system_prompt: str,
    input_data: dict[str, Any],
    media_blocks: Optional[Iterable[dict[str, Any]]] = None,
    history: Optional[Sequence[BaseMessage]] = None,
    language: Optional[str] = None,
) -> list[BaseMessage]:
    if language:
        prompt = ChatPromptTemplate.from_messages(
            [("system", "{system_prompt}\n\nUser specified language: {language}")]
        )
        messages = prompt.format_messages(system_prompt=system_prompt, language=language)
    else:
        prompt = ChatPromptTemplate.from_messages([("system", "{system_prompt}")])
        messages = prompt.format_messages(system_prompt=system_prompt)

    if history:
        messages.extend(history)

    user_content = [{"type": "text", "text": json.dumps(input_data, default=str)}]
    user_content.extend(media_blocks or [])
    messages.append(HumanMessage(content=user_content))
    return messages


async def run_structured_flow(
    *,
    flow_name: str,
    system_prompt: str,
    input_data: dict[str, Any],
    output_model: Type[OutputModel],
    failure_detail: str,
    media_blocks: Optional[Iterable[dict[str, Any]]] = None,
    history: Optional[Sequence[BaseMessage]] = None,
    language: Optional[str] = None,
) -> Optional[OutputModel]:
    """
    Invokes the chat model with output bound to `output_model`.

    Returns None when the model produced nothing; any model failure is
    raised as 503 with `failure_detail`.
    """
    messages = build_flow_messages(
        system_prompt=system_prompt,
        input_data=input_data,
        media_blocks=media_blocks,
        history=history,
        language=language,
    )
    try:
        model = get_chat_model().with_structured_output(output_model, method="json_schema")
        result = await model.ainvoke(messages)
    except Exception as model_exc:
        logger.exception("%s model invocation failed", flow_name)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=failure_detail,
        ) from model_exc

    if result is None:
        logger.warning("%s model returned no output", flow_name)
        return None
    if isinstance(result, dict):
        try:
            return output_model.model_validate(result)
        except ValidationError as exc:
            logger.warning("%s model output did not match schema: %s", flow_name, exc)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="AI returned an unexpected response. Please try again.",
            ) from exc
    return result


def require_output(result: Optional[OutputModel], detail: str) -> OutputModel:
    if result is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
    return result
