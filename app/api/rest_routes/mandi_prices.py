from fastapi import APIRouter, Depends, Query

from app.core.security import verify_jwt
from app.models.mandi_price import (
    MandiPricePrediction,
    MandiPricePredictionRequest,
    MandiPriceRecord,
    MandiPriceSummary,
    OfficialMandiPrice,
)
from app.services.mandi_price_service import (
    get_live_mandi_prices,
    get_mandi_price_board,
    get_official_mandi_price,
    predict_mandi_price,
)

router = APIRouter(
    prefix="/mandi-prices",
    tags=["Mandi Prices"],
    dependencies=[Depends(verify_jwt)],
)


@router.get("/live", response_model=list[MandiPriceRecord])
async def live_prices(
    state: str = Query(..., min_length=1),
    district: str = Query(..., min_length=1),
    commodity: str = Query(..., min_length=1),
) -> list[MandiPriceRecord]:
    """
    Latest arrivals first; for the same day the highest modal price first.
    """
    return await get_live_mandi_prices(state, district, commodity)


@router.get("/board", response_model=list[MandiPriceSummary])
async def price_board() -> list[MandiPriceSummary]:
    return await get_mandi_price_board()


@router.get("/official", response_model=OfficialMandiPrice)
async def official_price(
    crop: str = Query(..., min_length=1),
    state: str = Query(..., min_length=1),
    district: str = Query(..., min_length=1),
    market: str = Query(..., min_length=1),
) -> OfficialMandiPrice:
    return await get_official_mandi_price(crop, state, district, market)


@router.post("/predict", response_model=MandiPricePrediction)
async def predict_price(request: MandiPricePredictionRequest) -> MandiPricePrediction:
    return await predict_mandi_price(request)
