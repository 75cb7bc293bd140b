import base64
import binascii
import io
import logging
import mimetypes
import re
from enum import Enum
from typing import IO, Any, Union

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from fastapi import HTTPException, status

from app.core.genai_client import get_raw_google_client
from app.services.azure_blob import get_user_content_container_client

logger = logging.getLogger(__name__)


class FileType(str, Enum):
    USER_CONTENT = "user-content"


CONTAINER_PREFIXES = {file_type.value for file_type in FileType}

DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime_type>[\w.+-]+/[\w.+-]+)(?:;[\w.+-]+=[\w.+-]+)*;base64,(?P<data>.+)$",
    re.DOTALL,
)


def _clean_path_segment(value: str | None) -> str:
    if not value:
        return ""
    return value.strip().strip("/")


def _split_clean_path_segments(value: str | None) -> list[str]:
    cleaned = _clean_path_segment(value)
    if not cleaned:
        return []
    return [segment.strip() for segment in cleaned.split("/") if segment.strip()]


def _reject_relative_segments(segments: list[str], detail: str) -> None:
    if any(segment in {".", ".."} for segment in segments):
        raise HTTPException(status_code=400, detail=detail)


def build_user_scoped_path_prefix(user_id: str | None, path_prefix: str | None) -> str:
    """
    Normalizes a user-provided path prefix so uploads are scoped to:
    '<user_id>/<data_id>[/*]'.
    """
    cleaned_user_id = _clean_path_segment(user_id)
    if not cleaned_user_id:
        raise HTTPException(status_code=401, detail="Could not validate credentials")

    path_segments = _split_clean_path_segments(path_prefix)
    if path_segments and path_segments[0] == cleaned_user_id:
        path_segments = path_segments[1:]

    if not path_segments:
        raise HTTPException(
            status_code=400,
            detail="path_prefix is required and must include data_id.",
        )
    _reject_relative_segments(path_segments, "Invalid path_prefix.")

    return "/".join([cleaned_user_id, *path_segments])


def is_blob_reference(value: str | None) -> bool:
    if not value:
        return False
    cleaned = _clean_path_segment(value)
    if "/" not in cleaned:
        return False
    container = cleaned.split("/", 1)[0]
    return container in CONTAINER_PREFIXES


def normalize_blob_reference(blob_reference: str) -> str:
    value = _clean_path_segment(blob_reference)
    if not value:
        raise HTTPException(status_code=400, detail="Blob reference is required.")

    if is_blob_reference(value):
        _reject_relative_segments(
            [segment.strip() for segment in value.split("/")], "Invalid blob reference."
        )
        return value

    raise HTTPException(
        status_code=400,
        detail="Blob value must be in '<container>/<path>' format.",
    )


def _split_blob_reference(blob_reference: str) -> tuple[str, str]:
    normalized = normalize_blob_reference(blob_reference)
    container_name, blob_name = normalized.split("/", 1)
    return container_name, blob_name


def ensure_user_owns_blob(blob_reference: str, user_id: str) -> str:
    """Rejects references outside '<container>/<user_id>/'."""
    _, blob_name = _split_blob_reference(blob_reference)
    owner = blob_name.split("/", 1)[0]
    if owner != _clean_path_segment(user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only use files you uploaded.",
        )
    return normalize_blob_reference(blob_reference)


def is_data_uri(value: str | None) -> bool:
    return bool(value) and value.startswith("data:")


def parse_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Returns (mime_type, raw bytes) of a 'data:<mimetype>;base64,<data>' URI."""
    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise HTTPException(
            status_code=400,
            detail="Photo must be a data URI in 'data:<mimetype>;base64,<data>' format.",
        )
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail="Photo data is not valid base64.") from exc
    return match.group("mime_type"), data


async def convert_file_uri(blob_reference: str) -> tuple[str, str]:
    """
    Downloads a user-content blob and hands it to the Gemini Files API.
    Returns (file_uri, mime_type) usable in a 'media' content block.
    """
    container_name, blob_name = _split_blob_reference(blob_reference)
    try:
        container_client = await container_map[FileType(container_name)]()
        downloader = await container_client.get_blob_client(blob_name).download_blob()
        content = await downloader.readall()
        mime_type = (
            downloader.properties.content_settings.content_type
            or mimetypes.guess_type(blob_name)[0]
            or _guess_mime_type(content[:2048])
        )

        genai_file = await get_raw_google_client().aio.files.upload(
            file=io.BytesIO(content), config={"mime_type": mime_type}
        )
        return genai_file.uri, genai_file.mime_type
    except ResourceNotFoundError as exc:
        raise HTTPException(
            status_code=404, detail=f"File '{blob_reference}' not found."
        ) from exc
    except Exception as exc:
        logger.exception("Could not hand '%s' to the Files API", blob_reference)
        raise HTTPException(
            status_code=500, detail="Could not prepare the uploaded file for analysis."
        ) from exc


async def build_media_content_block(photo: str, user_id: str | None = None) -> dict[str, Any]:
    """
    Builds a langchain content block for a photo given either as a data URI
    or as a blob reference returned by /files.
    """
    if is_data_uri(photo):
        mime_type, _ = parse_data_uri(photo)
        if not mime_type.startswith("image/"):
            raise HTTPException(status_code=400, detail="Photo must be an image.")
        return {"type": "image_url", "image_url": photo.strip()}

    if user_id is not None:
        photo = ensure_user_owns_blob(photo, user_id)
    uri, mime_type = await convert_file_uri(photo)
    return {"type": "media", "file_uri": uri, "mime_type": mime_type}


container_map = {
    FileType.USER_CONTENT: get_user_content_container_client,
}


def _guess_mime_type(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if data.startswith(b"RIFF") and data[8:12] == b"WAVE":
        return "audio/wav"
    if data.startswith(b"%PDF"):
        return "application/pdf"
    return "application/octet-stream"


def _normalize_blob_name(blob_name: str) -> str:
    cleaned = _clean_path_segment(blob_name)
    if not cleaned:
        return ""

    # Whitespace inside a segment becomes '-'; separators are kept.
    segments = [segment.strip() for segment in cleaned.split("/") if segment.strip()]
    _reject_relative_segments(segments, "Invalid blob_name.")
    normalized_segments = [re.sub(r"\s+", "-", segment) for segment in segments]
    return "/".join(normalized_segments)


async def file_upload_to_blob_storage(
    file_stream: Union[bytes, IO[bytes]],
    blob_name: str,
    path_prefix: str,
    file_type: FileType = FileType.USER_CONTENT,
    mime_type: str | None = None,
) -> str:
    """
    Uploads a file stream or bytes to Azure Blob Storage and returns
    '<container>/<user_id>/<data_id>/<file.ext>' blob reference.
    """
    blob_name = _normalize_blob_name(blob_name)
    if not blob_name:
        raise HTTPException(status_code=400, detail="blob_name cannot be empty.")

    if mime_type is None:
        header = b""
        if isinstance(file_stream, bytes):
            header = file_stream[:2048]
        elif hasattr(file_stream, "read") and hasattr(file_stream, "seek"):
            pos = file_stream.tell()
            header = file_stream.read(2048)
            file_stream.seek(pos)
        mime_type = _guess_mime_type(header)

    ext = mimetypes.guess_extension(mime_type) if mime_type else None
    if ext:
        if mime_type == "image/jpeg" and ext in [".jpe", ".jpeg"]:
            ext = ".jpg"
        if not blob_name.lower().endswith(ext):
            blob_name = f"{blob_name}{ext}"

    blob_name_in_container = "/".join(
        part for part in [_clean_path_segment(path_prefix), blob_name] if part
    )
    try:
        container_client = await container_map[file_type]()
        blob_client = container_client.get_blob_client(blob_name_in_container)
        await blob_client.upload_blob(
            file_stream,
            overwrite=True,
            content_settings=ContentSettings(content_type=mime_type),
        )
    except AzureError as exc:
        logger.exception("Upload of '%s' failed", blob_name_in_container)
        raise HTTPException(
            status_code=500,
            detail="Failed to upload file to blob storage.",
        ) from exc

    return f"{file_type.value}/{blob_name_in_container}"


async def delete_file_from_blob_storage(blob_reference: str) -> None:
    """
    Deletes a file from Azure Blob Storage using
    '<container>/<path>' blob reference.
    """
    container_name, blob_name = _split_blob_reference(blob_reference)
    try:
        container_client = await container_map[FileType(container_name)]()
        await container_client.get_blob_client(blob_name).delete_blob()
    except ResourceNotFoundError as exc:
        raise HTTPException(
            status_code=404, detail=f"File '{blob_reference}' not found."
        ) from exc
    except AzureError as exc:
        logger.exception("Delete of '%s' failed", blob_reference)
        raise HTTPException(
            status_code=500,
            detail="Failed to delete file from blob storage.",
        ) from exc


async def delete_user_data_files(user_id: str, data_id: str) -> int:
    """
    Deletes every blob under '<user_id>/<data_id>/' in user content.
    Returns the number of deleted blobs.
    """
    cleaned_user_id = _clean_path_segment(user_id)
    cleaned_data_id = _clean_path_segment(data_id)
    if not cleaned_user_id or not cleaned_data_id:
        raise HTTPException(
            status_code=400,
            detail="user_id and data_id are required.",
        )

    try:
        container_client = await container_map[FileType.USER_CONTENT]()
        prefix = f"{cleaned_user_id}/{cleaned_data_id}/"
        blob_names = [
            blob.name
            async for blob in container_client.list_blobs(name_starts_with=prefix)
            if getattr(blob, "name", "")
        ]

        deleted_count = 0
        batch_size = 256
        for i in range(0, len(blob_names), batch_size):
            batch = blob_names[i : i + batch_size]
            await container_client.delete_blobs(*batch)
            deleted_count += len(batch)
        return deleted_count
    except AzureError as exc:
        logger.exception(
            "Bulk delete failed for user_id=%s data_id=%s", user_id, data_id
        )
        raise HTTPException(
            status_code=500,
            detail="Failed to delete files from blob storage.",
        ) from exc
