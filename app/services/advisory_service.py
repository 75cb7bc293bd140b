import logging
from datetime import date
from typing import List, Optional

from app.models.advisory import (
    InsuranceAdvice,
    InsuranceAdviceRequest,
    IrrigationAdvice,
    IrrigationAdviceRequest,
    LoanEligibility,
    LoanEligibilityMessages,
    LoanEligibilityRequest,
    LoanStatus,
    RiskAlert,
    RiskAlertList,
    RiskAlertRequest,
    SellingAdvice,
    SellingAdviceRequest,
)
from app.prompts.advisory_system_prompt import (
    INSURANCE_ADVICE_SYSTEM_PROMPT,
    IRRIGATION_ADVICE_SYSTEM_PROMPT,
    LOAN_ELIGIBILITY_SYSTEM_PROMPT,
    RISK_ALERTS_SYSTEM_PROMPT,
)
from app.prompts.market_system_prompt import SELLING_ADVICE_SYSTEM_PROMPT
from app.services.structured_flow import require_output, run_structured_flow

logger = logging.getLogger(__name__)

LOAN_REVIEW_THRESHOLD = 50_000
LOAN_FULL_APPROVAL_THRESHOLD = 10_000
LOAN_PARTIAL_APPROVAL_RATIO = 0.8
MAX_RISK_ALERTS = 3


async def get_selling_advice(request: SellingAdviceRequest) -> SellingAdvice:
    result = await run_structured_flow(
        flow_name="Selling advice",
        system_prompt=SELLING_ADVICE_SYSTEM_PROMPT,
        input_data=request.model_dump(),
        output_model=SellingAdvice,
        failure_detail="AI model could not generate selling advice right now. Please retry.",
    )
    return require_output(result, "AI did not return selling advice.")


async def get_irrigation_advice(request: IrrigationAdviceRequest) -> IrrigationAdvice:
    result = await run_structured_flow(
        flow_name="Irrigation advice",
        system_prompt=IRRIGATION_ADVICE_SYSTEM_PROMPT,
        input_data=request.model_dump(),
        output_model=IrrigationAdvice,
        failure_detail="AI model could not generate irrigation advice right now. Please retry.",
    )
    return require_output(result, "AI did not return irrigation advice.")


async def get_insurance_advice(request: InsuranceAdviceRequest) -> InsuranceAdvice:
    result = await run_structured_flow(
        flow_name="Insurance advice",
        system_prompt=INSURANCE_ADVICE_SYSTEM_PROMPT,
        input_data=request.model_dump(),
        output_model=InsuranceAdvice,
        failure_detail="AI model could not generate insurance advice right now. Please retry.",
    )
    return require_output(result, "AI did not return insurance advice.")


def assess_loan_amount(amount: float) -> tuple[LoanStatus, float]:
    """
    Simulated credit decision:
    above 50,000 goes to manual review, below 10,000 is approved in full,
    anything in between is approved at 80%.
    """
    if amount > LOAN_REVIEW_THRESHOLD:
        return LoanStatus.PENDING_REVIEW, 0.0
    if amount < LOAN_FULL_APPROVAL_THRESHOLD:
        return LoanStatus.APPROVED, round(amount, 2)
    return LoanStatus.APPROVED, round(amount * LOAN_PARTIAL_APPROVAL_RATIO, 2)


async def assess_loan_eligibility(
    request: LoanEligibilityRequest,
    *,
    user_id: str,
) -> LoanEligibility:
    loan_status, approved_amount = assess_loan_amount(request.amount)
    logger.info(
        "Loan assessment for user %s: %s of %.2f -> %s %.2f",
        user_id,
        request.purpose,
        request.amount,
        loan_status.value,
        approved_amount,
    )

    messages = require_output(
        await run_structured_flow(
            flow_name="Loan eligibility",
            system_prompt=LOAN_ELIGIBILITY_SYSTEM_PROMPT,
            input_data={
                "purpose": request.purpose,
                "amount": request.amount,
                "status": loan_status.value,
                "approved_amount": approved_amount,
                "language": request.language,
            },
            output_model=LoanEligibilityMessages,
            failure_detail="AI model could not assess the loan right now. Please retry.",
        ),
        "AI did not return a loan assessment.",
    )
    return LoanEligibility(
        status=loan_status,
        approved_amount=approved_amount,
        recommendation=messages.recommendation,
        reasoning=messages.reasoning,
    )


async def get_risk_alerts(
    request: RiskAlertRequest,
    today: Optional[date] = None,
) -> List[RiskAlert]:
    result = await run_structured_flow(
        flow_name="Risk alerts",
        system_prompt=RISK_ALERTS_SYSTEM_PROMPT,
        input_data={
            "location": request.location,
            "crop_type": request.crop_type,
            "current_date": (today or date.today()).isoformat(),
        },
        output_model=RiskAlertList,
        failure_detail="AI model could not check risks right now. Please retry.",
    )
    if result is None:
        return []
    return result.alerts[:MAX_RISK_ALERTS]
