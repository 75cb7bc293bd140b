from __future__ import annotations

from typing import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from app.models.assistant import HistoryMessage, Role


def history_message_to_langchain_content(message: HistoryMessage) -> str:
    return "\n".join(part.text for part in message.parts if part.text)


def history_message_to_langchain_message(message: HistoryMessage) -> BaseMessage:
    content = history_message_to_langchain_content(message)

    if message.role == Role.MODEL:
        return AIMessage(content=content)
    if message.role == Role.SYSTEM:
        return SystemMessage(content=content)
    return HumanMessage(content=content)


def history_to_langchain(messages: Sequence[HistoryMessage]) -> list[BaseMessage]:
    """Converts client-held conversation history, skipping empty turns."""
    return [
        history_message_to_langchain_message(message)
        for message in messages
        if history_message_to_langchain_content(message)
    ]
