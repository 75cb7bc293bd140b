from typing import Optional

from pydantic import BaseModel, Field


class TextToSpeechRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    language: str = Field(
        default="en", description="Short code ('hi') or BCP-47 code ('hi-IN')."
    )
    store: bool = Field(
        default=False,
        description="Upload the audio to user content and return the blob reference.",
    )
    blob_name: Optional[str] = Field(default=None)
    path_prefix: Optional[str] = Field(
        default=None, description="'<data_id>' under the user's folder, required when storing."
    )


class TextToSpeechResponse(BaseModel):
    audio_data_uri: Optional[str] = Field(
        default=None, description="'data:audio/wav;base64,<data>' when the audio is not stored."
    )
    url: Optional[str] = Field(default=None, description="Blob reference of the stored audio.")
