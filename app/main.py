import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from app.api.rest_routes.advisory import router as advisory_router
from app.api.rest_routes.assistant import router as assistant_router
from app.api.rest_routes.auth import router as auth_router
from app.api.rest_routes.community import router as community_router
from app.api.rest_routes.crop_monitor import router as crop_monitor_router
from app.api.rest_routes.diagnosis import router as diagnosis_router
from app.api.rest_routes.files import router as files_router
from app.api.rest_routes.insurance import router as insurance_router
from app.api.rest_routes.mandi_prices import router as mandi_prices_router
from app.api.rest_routes.schemes import router as schemes_router
from app.api.rest_routes.speech import router as speech_router
from app.api.rest_routes.weather import router as weather_router
from app.api.rest_routes.workflows import router as workflows_router
from app.core.config import settings
from app.core.mongodb import close_mongo_client, init_mongo_client
from app.services.azure_blob import close_blob_service_client

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_mongo_client()
    yield
    await close_mongo_client()
    await close_blob_service_client()


app = FastAPI(title="Kisan Rakshak API", lifespan=lifespan)

app.include_router(auth_router)
app.include_router(diagnosis_router)
app.include_router(mandi_prices_router)
app.include_router(weather_router)
app.include_router(advisory_router)
app.include_router(schemes_router)
app.include_router(community_router)
app.include_router(insurance_router)
app.include_router(crop_monitor_router)
app.include_router(assistant_router)
app.include_router(speech_router)
app.include_router(files_router)
app.include_router(workflows_router)


@app.get("/")
async def root():
    return {"message": "Welcome to Kisan Rakshak, your farming assistant!"}


@app.get("/health")
async def health():
    return {"status": "ok"}
