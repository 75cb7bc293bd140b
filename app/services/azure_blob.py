import logging
from typing import Optional

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from app.core.config import settings

logger = logging.getLogger(__name__)

_blob_service_client: Optional[BlobServiceClient] = None
_ready_containers: set[str] = set()


def get_blob_service_client() -> BlobServiceClient:
    global _blob_service_client
    if _blob_service_client is None:
        if not settings.AZURE_STORAGE_CONNECTION_STRING:
            raise ValueError("AZURE_STORAGE_CONNECTION_STRING environment variable not set.")
        _blob_service_client = BlobServiceClient.from_connection_string(
            settings.AZURE_STORAGE_CONNECTION_STRING
        )
    return _blob_service_client


async def get_container_client(container_name: str) -> ContainerClient:
    """
    Returns a ContainerClient for the container, creating the container on
    first use in this process.
    """
    container_client = get_blob_service_client().get_container_client(container_name)
    if container_name not in _ready_containers:
        try:
            await container_client.create_container()
            logger.info("Created blob container %s", container_name)
        except ResourceExistsError:
            logger.debug("Blob container %s already exists", container_name)
        _ready_containers.add(container_name)
    return container_client


async def get_user_content_container_client() -> ContainerClient:
    """Returns a client for the user uploads container (photos, proofs, audio)."""
    return await get_container_client(settings.AZURE_STORAGE_USER_CONTENT_CONTAINER_NAME)


async def close_blob_service_client() -> None:
    global _blob_service_client
    if _blob_service_client is not None:
        await _blob_service_client.close()
    _blob_service_client = None
    _ready_containers.clear()
