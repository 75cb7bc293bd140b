import logging
from typing import List, Optional

from fastapi import HTTPException, status

from app.collections.insurance import (
    get_claims_for_user,
    get_policies_for_user,
    get_policy_from_id,
    save_claim,
    save_policy,
)
from app.models.insurance import (
    CropSeason,
    FileClaimRequest,
    InsuranceClaim,
    InsurancePolicy,
    InsuranceScheme,
    PolicyStatus,
    PremiumBreakdown,
    PremiumRequest,
    RegisterPolicyRequest,
)
from app.services.files import ensure_user_owns_blob

logger = logging.getLogger(__name__)

TOTAL_PREMIUM_RATE = 0.05
PMFBY_FARMER_RATES = {
    CropSeason.KHARIF: 0.02,
    CropSeason.RABI: 0.015,
}


def calculate_premium(request: PremiumRequest) -> PremiumBreakdown:
    """
    Total premium is 5% of the sum insured. Under PMFBY the farmer pays 2%
    (kharif) or 1.5% (rabi) and the government covers the rest; private
    schemes charge the farmer the full premium.
    """
    total = request.sum_insured * TOTAL_PREMIUM_RATE
    if request.scheme == InsuranceScheme.PMFBY:
        farmer_share = request.sum_insured * PMFBY_FARMER_RATES[request.season]
    else:
        farmer_share = total
    return PremiumBreakdown(
        total_premium=round(total, 2),
        farmer_share=round(farmer_share, 2),
        government_subsidy=round(max(0.0, total - farmer_share), 2),
    )


async def register_policy(request: RegisterPolicyRequest, *, user_id: str) -> InsurancePolicy:
    land_proof = ensure_user_owns_blob(request.land_proof, user_id)
    id_proof = ensure_user_owns_blob(request.id_proof, user_id)
    premium = calculate_premium(
        PremiumRequest(
            scheme=request.scheme,
            season=request.season,
            sum_insured=request.sum_insured,
        )
    )
    policy = InsurancePolicy(
        user_id=user_id,
        premium=premium,
        **request.model_dump(exclude={"land_proof", "id_proof"}),
        land_proof=land_proof,
        id_proof=id_proof,
    )
    saved = await save_policy(policy)
    logger.info("Registered %s policy %s for user %s", policy.scheme.value, saved.id, user_id)
    return saved


async def list_policies(
    user_id: str,
    policy_status: Optional[PolicyStatus] = PolicyStatus.ACTIVE,
) -> List[InsurancePolicy]:
    return await get_policies_for_user(user_id, policy_status=policy_status)


async def file_claim(request: FileClaimRequest, *, user_id: str) -> InsuranceClaim:
    policy = await get_policy_from_id(request.policy_id)
    if policy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found.")
    if policy.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only file claims on your own policies.",
        )
    if policy.status != PolicyStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Claims can only be filed on active policies (policy is {policy.status.value}).",
        )

    damage_proof = ensure_user_owns_blob(request.damage_proof, user_id)
    claim = InsuranceClaim(
        user_id=user_id,
        crop_name=policy.crop_name,
        **request.model_dump(exclude={"damage_proof"}),
        damage_proof=damage_proof,
    )
    saved = await save_claim(claim)
    logger.info("Filed claim %s on policy %s", saved.id, policy.id)
    return saved


async def list_claims(user_id: str) -> List[InsuranceClaim]:
    return await get_claims_for_user(user_id)
