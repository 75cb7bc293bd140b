import base64
import binascii
import io
import logging
import wave
from typing import Optional
from uuid import uuid4

from fastapi import HTTPException, status

from app.core.config import settings
from app.core.genai_client import get_chat_model
from app.models.speech import TextToSpeechRequest, TextToSpeechResponse
from app.services.files import build_user_scoped_path_prefix, file_upload_to_blob_storage

logger = logging.getLogger(__name__)

# Gemini TTS returns raw 16-bit mono PCM at 24 kHz
PCM_CHANNELS = 1
PCM_SAMPLE_RATE = 24000
PCM_SAMPLE_WIDTH = 2

VOICE_NAME = "Algenib"

TTS_LANGUAGE_CODES = {
    "en": "en-IN",
    "hi": "hi-IN",
    "te": "te-IN",
    "ta": "ta-IN",
    "kn": "kn-IN",
    "mr": "mr-IN",
    "bn": "bn-IN",
    "gu": "gu-IN",
    "ml": "ml-IN",
    "pa": "pa-IN",
}

LANGUAGE_NAMES = {
    "english": "en",
    "hindi": "hi",
    "telugu": "te",
    "tamil": "ta",
    "kannada": "kn",
    "marathi": "mr",
    "bengali": "bn",
    "gujarati": "gu",
    "malayalam": "ml",
    "punjabi": "pa",
}


def get_tts_language_code(language: str) -> str:
    """'hi', 'Hindi' and 'hi-IN' all map to 'hi-IN'; unknown languages and locales use en-IN."""
    cleaned = (language or "").strip()
    if "-" in cleaned:
        short_code = cleaned.split("-", 1)[0].lower()
    else:
        short_code = LANGUAGE_NAMES.get(cleaned.lower(), cleaned.lower())
    return TTS_LANGUAGE_CODES.get(short_code, TTS_LANGUAGE_CODES["en"])


def pcm_to_wav(
    pcm_data: bytes,
    channels: int = PCM_CHANNELS,
    rate: int = PCM_SAMPLE_RATE,
    sample_width: int = PCM_SAMPLE_WIDTH,
) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(rate)
        wav_file.writeframes(pcm_data)
    return buffer.getvalue()


def _audio_bytes(audio) -> bytes:
    if isinstance(audio, (bytes, bytearray)):
        return bytes(audio)
    try:
        return base64.b64decode(audio, validate=True)
    except (binascii.Error, TypeError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="TTS response had unreadable audio data.",
        ) from exc


async def synthesize_wav(text: str, language: str) -> bytes:
    try:
        tts_response = await get_chat_model(
            model=settings.GEMINI_TTS_MODEL,
            response_modalities=["AUDIO"],
        ).ainvoke(
            text,
            speech_config={
                "language_code": get_tts_language_code(language),
                "voice_config": {"prebuilt_voice_config": {"voice_name": VOICE_NAME}},
            },
        )
    except Exception as exc:
        logger.exception("Text to speech model invocation failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Text to speech is not available right now. Please try again.",
        ) from exc

    audio = tts_response.additional_kwargs.get("audio")
    if not audio:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="TTS generation failed. No audio was returned.",
        )

    data = _audio_bytes(audio)
    if data.startswith(b"RIFF"):
        return data
    return pcm_to_wav(data)


async def text_to_speech(
    request: TextToSpeechRequest,
    *,
    user_id: Optional[str] = None,
) -> TextToSpeechResponse:
    wav_data = await synthesize_wav(request.text, request.language)

    if not request.store:
        encoded = base64.b64encode(wav_data).decode("ascii")
        return TextToSpeechResponse(audio_data_uri=f"data:audio/wav;base64,{encoded}")

    blob_reference = await file_upload_to_blob_storage(
        file_stream=wav_data,
        blob_name=request.blob_name or uuid4().hex,
        path_prefix=build_user_scoped_path_prefix(user_id, request.path_prefix),
        mime_type="audio/wav",
    )
    return TextToSpeechResponse(url=blob_reference)
