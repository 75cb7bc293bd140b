from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


class MessagePart(BaseModel):
    text: str


class HistoryMessage(BaseModel):
    role: Role
    parts: List[MessagePart] = Field(default_factory=list)


class ActionCode(str, Enum):
    SPEAK_ONLY = "SPEAK_ONLY"  # Answer directly
    SPEAK_AND_NAVIGATE = "SPEAK_AND_NAVIGATE"  # Answer and open a feature screen
    REQUEST_IMAGE = "REQUEST_IMAGE"  # A photo is needed, e.g. for diagnosis
    CLARIFY = "CLARIFY"  # Ask a follow-up question


class AgriGptStatus(str, Enum):
    SUCCESS = "success"
    CLARIFICATION_NEEDED = "clarification_needed"
    ERROR = "error"


class AgriGptRequest(BaseModel):
    transcribed_query: str = Field(..., min_length=1)
    conversation_history: List[HistoryMessage] = Field(default_factory=list)
    current_screen: str = Field(default="/dashboard")
    language: str = Field(default="English")


class KisanMitraResponse(BaseModel):
    english: str = Field(description="The response in English.")
    localized: str = Field(
        description="The response translated into the user's preferred language."
    )


class AgriGptResponse(BaseModel):
    intent: str = Field(
        description="The recognized intent (e.g., get_mandi_price, diagnose_disease)."
    )
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description='Extracted parameters from the query (e.g., {"crop_type": "tomato"}).',
    )
    action_code: ActionCode = Field(description="The action the app should take.")
    navigation_target: Optional[str] = Field(
        default=None,
        description="The screen to navigate to, if action_code is SPEAK_AND_NAVIGATE.",
    )
    response: KisanMitraResponse = Field(description="The final, user-facing response.")
    status: AgriGptStatus
    follow_up_question_localized: Optional[str] = Field(
        default=None, description="A question to ask the user if more information is needed."
    )


class SupportChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[HistoryMessage] = Field(default_factory=list)
    language: str = Field(default="English")


class SupportChatResponse(BaseModel):
    reply: str = Field(description="The response to the user's message.")
