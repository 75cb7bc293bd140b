import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_CHAT_MODEL: str = "gemini-2.5-flash"
    GEMINI_TTS_MODEL: str = "gemini-2.5-flash-preview-tts"
    DATA_GOV_API_KEY: str = os.environ.get("DATA_GOV_API_KEY", "")
    DATA_GOV_BASE_URL: str = "https://api.data.gov.in/resource"
    MANDI_PRICE_RESOURCE_ID: str = "9ef84268-d588-465a-a308-a864a43d0070"
    MANDI_PRICE_HISTORY_RESOURCE_ID: str = "35985678-0d79-46b4-9ed6-6f13308a1d24"
    WEATHERAPI_API_KEY: str = os.environ.get("WEATHERAPI_API_KEY", "")
    WEATHERAPI_BASE_URL: str = "https://api.weatherapi.com/v1"
    HTTP_TIMEOUT_SECONDS: float = 15.0
    AZURE_STORAGE_CONNECTION_STRING: str = os.environ.get(
        "AZURE_STORAGE_CONNECTION_STRING", ""
    )
    AZURE_STORAGE_USER_CONTENT_CONTAINER_NAME: str = "user-content"
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    MONGO_URI: str = os.environ.get("MONGO_URI", "")
    MONGO_DIRECT_URI: str = os.environ.get("MONGO_DIRECT_URI", "")
    MONGO_DB_NAME: str = "kisan_rakshak"
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


settings = Settings()
