import logging
import re
from typing import List, Optional

from fastapi import HTTPException, status

from app.models.ai_workflow import WorkflowType
from app.models.scheme import (
    FarmerCategory,
    GovernmentScheme,
    HasLand,
    SchemeEligibility,
    SchemeFinderRequest,
    SchemeRecommendation,
    SchemeRecommendationList,
)
from app.prompts.scheme_advisor_system_prompt import SCHEME_ADVISOR_SYSTEM_PROMPT
from app.services.ai_workflow_runtime import WorkflowRuntime, sanitize_http_error_message
from app.services.structured_flow import run_structured_flow

logger = logging.getLogger(__name__)

ACRES_PER_HECTARE = 2.471

SCHEMES_DATABASE: List[GovernmentScheme] = [
    GovernmentScheme(
        id="pm-kisan",
        name="PM-KISAN Samman Nidhi",
        keywords=["financialSupport", "generalSupport", "dbt"],
        eligibility=SchemeEligibility(land_owner=True, max_land_area_acres=5),
        description=(
            "Supplements the financial needs of landholding farmers' families in procuring"
            " inputs for proper crop health and appropriate yields. Provides income support"
            " of ₹6,000 per year in three equal installments."
        ),
        benefits="Direct cash transfer of ₹6,000 per year.",
        how_to_apply=(
            "Register through the official PM-KISAN portal or contact the local"
            " patwari/revenue officer or a Common Service Centre (CSC)."
        ),
        application_url="https://pmkisan.gov.in/",
    ),
    GovernmentScheme(
        id="pmfby",
        name="Pradhan Mantri Fasal Bima Yojana (PMFBY)",
        keywords=["cropInsurance", "financialSupport"],
        eligibility=SchemeEligibility(land_owner=True, tenant_farmer=True, sharecropper=True),
        description=(
            "Comprehensive insurance coverage against failure of the crop, helping to"
            " stabilise the income of farmers."
        ),
        benefits=(
            "Insurance cover against crop loss due to natural calamities, pests, or diseases."
            " Low premium rates for farmers (2% for Kharif, 1.5% for Rabi, 5% for commercial crops)."
        ),
        how_to_apply=(
            "Enroll through banks, cooperative societies, or the National Crop Insurance"
            " Portal (NCIP) before the cut-off date for the season."
        ),
        application_url="https://pmfby.gov.in/",
    ),
    GovernmentScheme(
        id="pmksy",
        name="Pradhan Mantri Krishi Sinchayee Yojana (PMKSY)",
        keywords=["irrigation", "water", "equipmentSubsidy"],
        eligibility=SchemeEligibility(land_owner=True, tenant_farmer=True),
        description=(
            "'Har Khet Ko Pani': expands cultivated area with assured irrigation, reduces"
            " wastage of water and improves water use efficiency ('Per Drop, More Crop')."
        ),
        benefits=(
            "Financial assistance for micro-irrigation systems like drip and sprinkler"
            " irrigation. Promotes water conservation and efficient use."
        ),
        how_to_apply=(
            "Contact the District Agriculture Office or the State Agriculture Department."
            " Applications are often processed through state-specific portals."
        ),
        application_url="https://pmksy.gov.in/",
    ),
    GovernmentScheme(
        id="shc",
        name="Soil Health Card (SHC) Scheme",
        keywords=["soilHealth", "generalSupport"],
        eligibility=SchemeEligibility(land_owner=True, tenant_farmer=True),
        description=(
            "Provides every farmer a Soil Health Card with the status of the soil on 12"
            " parameters, as a basis for nutrient and fertilizer recommendations."
        ),
        benefits=(
            "A detailed report on soil nutrient status with recommendations on fertilizer"
            " dosage and soil amendments."
        ),
        how_to_apply=(
            "Soil samples are collected by State Agriculture Department officials and the"
            " cards are distributed to farmers. Contact your local agriculture office."
        ),
        application_url="https://soilhealth.dac.gov.in/",
    ),
    GovernmentScheme(
        id="kvk",
        name="Kisan Credit Card (KCC)",
        keywords=["financialSupport", "loan", "generalSupport"],
        eligibility=SchemeEligibility(land_owner=True, tenant_farmer=True, sharecropper=True),
        description=(
            "Adequate and timely credit support from the banking system under a single"
            " window with a flexible and simplified procedure for cultivation and other needs."
        ),
        benefits=(
            "Short-term formal credit for crop cultivation, post-harvest expenses and"
            " consumption requirements at lower interest rates, often with government subvention."
        ),
        how_to_apply=(
            "Apply at any commercial bank, regional rural bank, or cooperative bank by"
            " filling out a simple application form."
        ),
        application_url="https://www.myscheme.gov.in/schemes/kcc",
    ),
]


def list_schemes() -> List[GovernmentScheme]:
    return list(SCHEMES_DATABASE)


def normalize_help_type(help_type: str) -> str:
    """'Crop Insurance', 'crop_insurance' and 'cropInsurance' all become 'cropInsurance'."""
    tokens = [token for token in re.split(r"[\s_\-]+", help_type.strip()) if token]
    if not tokens:
        return ""
    if len(tokens) == 1:
        token = tokens[0]
        return token[0].lower() + token[1:]
    return tokens[0].lower() + "".join(token.capitalize() for token in tokens[1:])


def map_farmer_type(farmer_type: str) -> Optional[FarmerCategory]:
    lowered = farmer_type.strip().lower()
    if "tenant" in lowered:
        return FarmerCategory.TENANT_FARMER
    if "share" in lowered:
        return FarmerCategory.SHARECROPPER
    if any(word in lowered for word in ("land", "owner", "holder")):
        return FarmerCategory.LAND_OWNER
    return None


def parse_land_area_acres(land_area: Optional[str]) -> Optional[float]:
    """'2 acres' -> 2.0, '1.5 hectare' -> 3.7; None when no number is present."""
    if not land_area:
        return None
    match = re.search(r"\d+(?:\.\d+)?", land_area)
    if not match:
        return None
    value = float(match.group())
    if re.search(r"hect|\bha\b", land_area.lower()):
        value *= ACRES_PER_HECTARE
    return value


def _candidate_categories(request: SchemeFinderRequest) -> set[FarmerCategory]:
    category = map_farmer_type(request.farmer_type)
    if request.has_land == HasLand.NO:
        if category in (FarmerCategory.TENANT_FARMER, FarmerCategory.SHARECROPPER):
            return {category}
        return {FarmerCategory.TENANT_FARMER, FarmerCategory.SHARECROPPER}
    if category is None:
        return set(FarmerCategory)
    return {category}


def filter_candidate_schemes(
    request: SchemeFinderRequest,
    schemes: Optional[List[GovernmentScheme]] = None,
) -> List[GovernmentScheme]:
    schemes = SCHEMES_DATABASE if schemes is None else schemes
    wanted_keyword = normalize_help_type(request.help_type).lower()
    categories = _candidate_categories(request)
    land_area = (
        parse_land_area_acres(request.land_area) if request.has_land == HasLand.YES else None
    )

    candidates = []
    for scheme in schemes:
        if wanted_keyword not in {keyword.lower() for keyword in scheme.keywords}:
            continue
        if not any(scheme.eligibility.allows(category) for category in categories):
            continue
        max_area = scheme.eligibility.max_land_area_acres
        if max_area is not None and land_area is not None and land_area > max_area:
            continue
        candidates.append(scheme)
    return candidates


async def get_scheme_recommendations(
    request: SchemeFinderRequest,
    *,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> List[SchemeRecommendation]:
    workflow = WorkflowRuntime(
        action="scheme_advisor",
        workflow_type=WorkflowType.SCHEME_ADVISOR,
        user_id=user_id,
        request_id=request_id,
        metadata={"help_type": request.help_type, "language": request.language},
    )
    await workflow.start()
    try:
        await workflow.start_step("filter_candidate_schemes")
        candidates = filter_candidate_schemes(request)
        if not candidates:
            # The model explains that nothing fits when given the full table.
            candidates = list(SCHEMES_DATABASE)
            logger.info("No pre-filtered scheme for help_type=%s", request.help_type)
        await workflow.complete_step(
            "filter_candidate_schemes",
            {"candidates": [scheme.id for scheme in candidates]},
        )

        await workflow.start_step("generate_recommendations")
        result = await run_structured_flow(
            flow_name="Scheme advisor",
            system_prompt=SCHEME_ADVISOR_SYSTEM_PROMPT,
            input_data={
                "profile": request.model_dump(mode="json"),
                "schemes": [scheme.model_dump(mode="json") for scheme in candidates],
            },
            output_model=SchemeRecommendationList,
            failure_detail="AI model could not find schemes right now. Please retry.",
        )
        recommendations = result.recommendations if result is not None else []
        await workflow.complete_step(
            "generate_recommendations", {"count": len(recommendations)}
        )
        await workflow.complete({"count": len(recommendations)})
        return recommendations
    except HTTPException as exc:
        await workflow.fail(
            error_message=sanitize_http_error_message(exc.detail),
            step=workflow.current_step,
            payload={"status_code": exc.status_code},
        )
        raise
    except Exception:
        logger.exception("Unexpected scheme advisor failure")
        await workflow.fail(
            error_message="Internal server error in scheme advisor",
            step=workflow.current_step,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error in scheme advisor",
        )
