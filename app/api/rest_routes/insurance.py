from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.security import verify_jwt
from app.models.insurance import (
    FileClaimRequest,
    InsuranceClaim,
    InsurancePolicy,
    PolicyStatus,
    PremiumBreakdown,
    PremiumRequest,
    RegisterPolicyRequest,
)
from app.services import insurance_service

router = APIRouter(
    prefix="/insurance",
    tags=["Crop Insurance"],
    dependencies=[Depends(verify_jwt)],
)


@router.post("/premium", response_model=PremiumBreakdown)
async def premium(request: PremiumRequest) -> PremiumBreakdown:
    return insurance_service.calculate_premium(request)


@router.post(
    "/policies",
    response_model=InsurancePolicy,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def register_policy(
    request: RegisterPolicyRequest,
    user_payload: dict = Depends(verify_jwt),
) -> InsurancePolicy:
    """
    Registers a policy; the premium is computed server-side.
    """
    return await insurance_service.register_policy(request, user_id=user_payload.get("sub"))


@router.get(
    "/policies",
    response_model=list[InsurancePolicy],
    response_model_exclude_none=True,
)
async def list_policies(
    policy_status: Optional[PolicyStatus] = Query(default=PolicyStatus.ACTIVE, alias="status"),
    user_payload: dict = Depends(verify_jwt),
) -> list[InsurancePolicy]:
    return await insurance_service.list_policies(
        user_payload.get("sub"), policy_status=policy_status
    )


@router.post(
    "/claims",
    response_model=InsuranceClaim,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def file_claim(
    request: FileClaimRequest,
    user_payload: dict = Depends(verify_jwt),
) -> InsuranceClaim:
    return await insurance_service.file_claim(request, user_id=user_payload.get("sub"))


@router.get(
    "/claims",
    response_model=list[InsuranceClaim],
    response_model_exclude_none=True,
)
async def list_claims(user_payload: dict = Depends(verify_jwt)) -> list[InsuranceClaim]:
    return await insurance_service.list_claims(user_payload.get("sub"))
