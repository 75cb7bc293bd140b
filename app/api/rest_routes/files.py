from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from app.core.security import verify_jwt
from app.services.files import (
    build_user_scoped_path_prefix,
    delete_file_from_blob_storage,
    ensure_user_owns_blob,
    file_upload_to_blob_storage,
)

router = APIRouter(prefix="/files", tags=["Files"])


class FileUploadResponse(BaseModel):
    url: str


@router.post("/", response_model=FileUploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    blob_name: str = Form(...),
    path_prefix: str = Form(...),
    user_payload: dict = Depends(verify_jwt),
) -> FileUploadResponse:
    """
    Uploads a photo or document as multipart/form-data and returns its blob
    reference ('user-content/<user_id>/<data_id>/<name>').
    """
    blob_reference = await file_upload_to_blob_storage(
        file_stream=file.file,
        blob_name=blob_name,
        path_prefix=build_user_scoped_path_prefix(
            user_id=user_payload.get("sub"),
            path_prefix=path_prefix,
        ),
        mime_type=file.content_type,
    )

    return FileUploadResponse(url=blob_reference)


class FileDeleteRequest(BaseModel):
    url: str


@router.delete("/", status_code=204)
async def delete_file(
    request: FileDeleteRequest,
    user_payload: dict = Depends(verify_jwt),
):
    blob_reference = ensure_user_owns_blob(request.url, user_payload.get("sub"))
    await delete_file_from_blob_storage(blob_reference=blob_reference)
    return
