from datetime import date

import pytest
from fastapi import HTTPException

from app.collections.insurance import save_policy
from app.models.insurance import (
    ClaimLocation,
    ClaimStatus,
    CropSeason,
    FileClaimRequest,
    InsuranceScheme,
    PolicyStatus,
    PremiumRequest,
    RegisterPolicyRequest,
)
from app.services.insurance_service import (
    calculate_premium,
    file_claim,
    list_claims,
    list_policies,
    register_policy,
)

USER_ID = "user-1"


@pytest.mark.parametrize(
    "scheme, season, farmer_share, subsidy",
    [
        (InsuranceScheme.PMFBY, CropSeason.KHARIF, 2000.0, 3000.0),
        (InsuranceScheme.PMFBY, CropSeason.RABI, 1500.0, 3500.0),
        (InsuranceScheme.PRIVATE, CropSeason.KHARIF, 5000.0, 0.0),
    ],
)
def test_premium_breakdown(scheme, season, farmer_share, subsidy):
    premium = calculate_premium(PremiumRequest(scheme=scheme, season=season, sum_insured=100000))

    assert premium.total_premium == 5000.0
    assert premium.farmer_share == farmer_share
    assert premium.government_subsidy == subsidy


def _policy_request(**overrides) -> RegisterPolicyRequest:
    values = {
        "crop_name": "Soybean",
        "location": "Indore",
        "land_area": 2.5,
        "sowing_date": date(2024, 6, 20),
        "harvest_date": date(2024, 10, 15),
        "scheme": InsuranceScheme.PMFBY,
        "season": CropSeason.KHARIF,
        "sum_insured": 80000,
        "land_proof": f"user-content/{USER_ID}/policy-1/land.pdf",
        "id_proof": f"user-content/{USER_ID}/policy-1/aadhaar.jpg",
    }
    values.update(overrides)
    return RegisterPolicyRequest(**values)


def test_harvest_before_sowing_is_rejected():
    with pytest.raises(ValueError):
        _policy_request(harvest_date=date(2024, 5, 1))


async def test_register_policy_computes_premium(fake_db):
    policy = await register_policy(_policy_request(), user_id=USER_ID)

    assert policy.status == PolicyStatus.ACTIVE
    assert policy.premium.total_premium == 4000.0
    assert policy.premium.farmer_share == 1600.0
    assert [item.id for item in await list_policies(USER_ID)] == [policy.id]


async def test_register_policy_rejects_foreign_proof(fake_db):
    with pytest.raises(HTTPException) as exc_info:
        await register_policy(
            _policy_request(id_proof="user-content/user-2/docs/aadhaar.jpg"), user_id=USER_ID
        )
    assert exc_info.value.status_code == 403
    assert fake_db["insurance_policies"].documents == []


async def test_list_policies_filters_by_status(fake_db):
    active = await register_policy(_policy_request(), user_id=USER_ID)
    expired = await register_policy(_policy_request(crop_name="Wheat"), user_id=USER_ID)
    expired.status = PolicyStatus.EXPIRED
    await save_policy(expired)

    assert [item.id for item in await list_policies(USER_ID)] == [active.id]
    assert [
        item.id for item in await list_policies(USER_ID, policy_status=PolicyStatus.EXPIRED)
    ] == [expired.id]
    assert len(await list_policies(USER_ID, policy_status=None)) == 2


def _claim_request(policy_id: str, **overrides) -> FileClaimRequest:
    values = {
        "policy_id": policy_id,
        "reason": "Flood",
        "description": "Field under water for 4 days.",
        "location": ClaimLocation(lat=22.7, lon=75.8),
        "damage_proof": f"user-content/{USER_ID}/claim-1/field.jpg",
    }
    values.update(overrides)
    return FileClaimRequest(**values)


async def test_file_claim_on_active_policy(fake_db):
    policy = await register_policy(_policy_request(), user_id=USER_ID)

    claim = await file_claim(_claim_request(policy.id), user_id=USER_ID)

    assert claim.status == ClaimStatus.PENDING
    assert claim.crop_name == "Soybean"
    assert [item.id for item in await list_claims(USER_ID)] == [claim.id]


async def test_claim_on_unknown_policy(fake_db):
    with pytest.raises(HTTPException) as exc_info:
        await file_claim(_claim_request("missing"), user_id=USER_ID)
    assert exc_info.value.status_code == 404


async def test_claim_on_someone_elses_policy(fake_db):
    policy = await register_policy(_policy_request(), user_id=USER_ID)

    with pytest.raises(HTTPException) as exc_info:
        await file_claim(
            _claim_request(policy.id, damage_proof="user-content/user-2/claim/field.jpg"),
            user_id="user-2",
        )
    assert exc_info.value.status_code == 403


async def test_claim_on_inactive_policy(fake_db):
    policy = await register_policy(_policy_request(), user_id=USER_ID)
    policy.status = PolicyStatus.CLAIMED
    await save_policy(policy)

    with pytest.raises(HTTPException) as exc_info:
        await file_claim(_claim_request(policy.id), user_id=USER_ID)
    assert exc_info.value.status_code == 409
