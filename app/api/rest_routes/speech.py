from fastapi import APIRouter, Depends

from app.core.security import verify_jwt
from app.models.speech import TextToSpeechRequest, TextToSpeechResponse
from app.services.speech_service import text_to_speech

router = APIRouter(prefix="/speech", tags=["Speech"])


@router.post(
    "/text-to-speech",
    response_model=TextToSpeechResponse,
    response_model_exclude_none=True,
)
async def convert_text_to_speech(
    request: TextToSpeechRequest,
    user_payload: dict = Depends(verify_jwt),
) -> TextToSpeechResponse:
    """
    Converts text to WAV speech. Returns a data URI, or the blob reference of
    the uploaded audio when `store` is set.
    """
    return await text_to_speech(request, user_id=user_payload.get("sub"))
