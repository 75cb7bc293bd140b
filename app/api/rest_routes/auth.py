from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.collections.user import (
    delete_user as db_delete_user,
)
from app.collections.user import get_user_from_id, get_user_from_phone, save_user
from app.core.security import (
    create_access_token,
    get_otp,
    validate_otp,
    verify_jwt,
)
from app.models.user import User
from app.services.files import ensure_user_owns_blob

router = APIRouter(prefix="/auth", tags=["Authentication"])


class OTPStatusResponse(BaseModel):
    message: str
    phone: str


class Token(BaseModel):
    access_token: str
    user: User


class OTPSendRequest(BaseModel):
    phone: str = Field(..., min_length=10, max_length=15)
    name: str | None = None
    language: str | None = None
    state: str | None = None
    district: str | None = None


class OTPVerifyRequest(BaseModel):
    phone: str
    otp: str


class UpdateUserRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    language: str | None = Field(default=None, min_length=1)
    state: str | None = None
    district: str | None = None
    photo_url: str | None = Field(
        default=None, description="Blob reference of a profile photo uploaded through /files."
    )


@router.post("/send-otp", response_model=OTPStatusResponse)
async def send_otp(request_data: OTPSendRequest):
    """
    Sends an OTP to the farmer's phone. Creates the farmer on first use, so
    this endpoint serves both signup and login.
    """
    user = await get_user_from_phone(request_data.phone)
    message = "OTP sent successfully."

    if user and request_data.name and request_data.language:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists.",
        )

    if not user:
        if not request_data.name or not request_data.language:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name and language are required for new users.",
            )
        new_user = User(
            phone=request_data.phone,
            name=request_data.name,
            language=request_data.language,
            state=request_data.state,
            district=request_data.district,
        )
        await save_user(new_user)
        message = "User created. OTP sent successfully."

    await get_otp(request_data.phone)
    return OTPStatusResponse(message=message, phone=request_data.phone)


@router.post("/verify-otp", response_model=Token, response_model_exclude_none=True)
async def verify_otp(verify_data: OTPVerifyRequest):
    user = await get_user_from_phone(verify_data.phone)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )

    if not await validate_otp(verify_data.phone, verify_data.otp):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid OTP"
        )

    if not user.is_verified:
        user.is_verified = True
        await save_user(user)

    access_token = create_access_token(
        data={"sub": user.id, "role": user.role, "language": user.language}
    )
    return {"access_token": access_token, "user": user}


@router.delete("/delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_current_user(user_payload: dict = Depends(verify_jwt)):
    if not await db_delete_user(user_payload.get("sub")):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )
    return


@router.get(
    "/user",
    status_code=status.HTTP_200_OK,
    response_model=User,
    response_model_exclude_none=True,
)
async def get_current_user(user_payload: dict = Depends(verify_jwt)):
    user = await get_user_from_id(user_payload.get("sub"))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )
    return user


@router.patch("/user", response_model=User, response_model_exclude_none=True)
async def update_current_user(
    request: UpdateUserRequest,
    user_payload: dict = Depends(verify_jwt),
):
    """
    Updates the farmer's profile. Routes that default to the token's
    language pick up a new language after the next login.
    """
    user_id = user_payload.get("sub")
    user = await get_user_from_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found."
        )

    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    if "photo_url" in changes:
        changes["photo_url"] = ensure_user_owns_blob(changes["photo_url"], user_id)
    return await save_user(user.model_copy(update=changes))
