from fastapi import APIRouter, Depends

from app.core.security import verify_jwt
from app.models.advisory import (
    InsuranceAdvice,
    InsuranceAdviceRequest,
    IrrigationAdvice,
    IrrigationAdviceRequest,
    LoanEligibility,
    LoanEligibilityRequest,
    RiskAlert,
    RiskAlertRequest,
    SellingAdvice,
    SellingAdviceRequest,
)
from app.services.advisory_service import (
    assess_loan_eligibility,
    get_insurance_advice,
    get_irrigation_advice,
    get_risk_alerts,
    get_selling_advice,
)

router = APIRouter(
    prefix="/advisory",
    tags=["Advisory"],
    dependencies=[Depends(verify_jwt)],
)


@router.post("/irrigation", response_model=IrrigationAdvice)
async def irrigation(request: IrrigationAdviceRequest) -> IrrigationAdvice:
    return await get_irrigation_advice(request)


@router.post("/selling", response_model=SellingAdvice)
async def selling(request: SellingAdviceRequest) -> SellingAdvice:
    return await get_selling_advice(request)


@router.post("/insurance", response_model=InsuranceAdvice)
async def insurance(request: InsuranceAdviceRequest) -> InsuranceAdvice:
    """
    Compares PMFBY with private crop insurance for the farmer's situation.
    """
    return await get_insurance_advice(request)


@router.post("/loan-eligibility", response_model=LoanEligibility)
async def loan_eligibility(
    request: LoanEligibilityRequest,
    user_payload: dict = Depends(verify_jwt),
) -> LoanEligibility:
    return await assess_loan_eligibility(request, user_id=user_payload.get("sub"))


@router.post("/risk-alerts", response_model=list[RiskAlert])
async def risk_alerts(request: RiskAlertRequest) -> list[RiskAlert]:
    return await get_risk_alerts(request)
