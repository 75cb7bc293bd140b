from typing import Optional

from fastapi import APIRouter, Depends, Header

from app.core.security import verify_jwt
from app.models.scheme import GovernmentScheme, SchemeFinderRequest, SchemeRecommendation
from app.services.scheme_service import get_scheme_recommendations, list_schemes

router = APIRouter(
    prefix="/schemes",
    tags=["Government Schemes"],
    dependencies=[Depends(verify_jwt)],
)


@router.get("/", response_model=list[GovernmentScheme], response_model_exclude_none=True)
async def get_schemes() -> list[GovernmentScheme]:
    return list_schemes()


@router.post("/recommendations", response_model=list[SchemeRecommendation])
async def recommend_schemes(
    request: SchemeFinderRequest,
    x_request_id: Optional[str] = Header(default=None),
    user_payload: dict = Depends(verify_jwt),
) -> list[SchemeRecommendation]:
    """
    Recommends the schemes the farmer is eligible for; an empty list when
    nothing fits.
    """
    return await get_scheme_recommendations(
        request, user_id=user_payload.get("sub"), request_id=x_request_id
    )
