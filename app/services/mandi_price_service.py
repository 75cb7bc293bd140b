import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from fastapi import HTTPException, status
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.models.mandi_price import (
    MandiPricePrediction,
    MandiPricePredictionRequest,
    MandiPriceRecord,
    MandiPriceSummary,
    MandiPriceTrend,
    OfficialMandiPrice,
)
from app.prompts.market_system_prompt import MANDI_PRICE_PREDICTION_SYSTEM_PROMPT
from app.services.structured_flow import require_output, run_structured_flow

logger = logging.getLogger(__name__)

LIVE_PRICE_LIMIT = 50
PRICE_BOARD_FETCH_LIMIT = 20
PRICE_BOARD_SIZE = 10
OFFICIAL_PRICE_LIMIT = 10

_records_adapter = TypeAdapter(List[MandiPriceRecord])


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)


def _resource_url(resource_id: str) -> str:
    return f"{settings.DATA_GOV_BASE_URL.rstrip('/')}/{resource_id}"


def _require_api_key() -> str:
    if not settings.DATA_GOV_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="The government API key is not configured. Please add it to the backend.",
        )
    return settings.DATA_GOV_API_KEY


def parse_arrival_date(value: str) -> Optional[datetime]:
    """Parses Agmarknet 'dd/mm/yyyy' dates; None when malformed."""
    try:
        return datetime.strptime(value.strip(), "%d/%m/%Y")
    except (AttributeError, ValueError):
        return None


def _price_value(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def rank_mandi_records(records: List[MandiPriceRecord]) -> List[MandiPriceRecord]:
    """
    Orders records newest arrival first and, for the same day, highest modal
    price first. Records with an unreadable date go last.
    """

    def _key(record: MandiPriceRecord):
        arrival = parse_arrival_date(record.arrival_date) or datetime.min
        return arrival, _price_value(record.modal_price)

    return sorted(records, key=_key, reverse=True)


def _api_error_detail(response: httpx.Response) -> str:
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        error = None
    if error:
        return f"The data.gov.in API returned an error: {error}"
    return (
        f"The data.gov.in API returned a server error ({response.status_code}). "
        "Please check your filters or try again later."
    )


async def get_live_mandi_prices(
    state: str,
    district: str,
    commodity: str,
) -> List[MandiPriceRecord]:
    api_key = _require_api_key()
    params = {
        "api-key": api_key,
        "format": "json",
        "filters[State]": state,
        "filters[District]": district,
        "filters[Commodity]": commodity,
        "limit": LIVE_PRICE_LIMIT,
    }
    try:
        async with _http_client() as client:
            response = await client.get(
                _resource_url(settings.MANDI_PRICE_HISTORY_RESOURCE_ID), params=params
            )
    except httpx.HTTPError as exc:
        logger.exception("Mandi price request failed for %s/%s/%s", state, district, commodity)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=(
                "Failed to fetch data from data.gov.in. The service might be down "
                "or your filters may not have returned results."
            ),
        ) from exc

    if response.is_error:
        logger.error(
            "data.gov.in API error response (%s): %s", response.status_code, response.text
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=_api_error_detail(response)
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The data received from the server was in an unexpected format.",
        ) from exc

    raw_records = data.get("records") if isinstance(data, dict) else None
    if not raw_records:
        return []

    try:
        records = _records_adapter.validate_python(raw_records)
    except ValidationError as exc:
        logger.warning("Mandi price records failed validation: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="The data received from the server was in an unexpected format.",
        ) from exc

    return rank_mandi_records(records)


def placeholder_trend(commodity: str) -> MandiPriceTrend:
    """Stand-in trend until historical prices are compared; stable per commodity name."""
    remainder = ord(commodity[0]) % 3
    if remainder == 0:
        return MandiPriceTrend.UP
    if remainder == 1:
        return MandiPriceTrend.DOWN
    return MandiPriceTrend.STABLE


def build_price_board(raw_records: List[Dict[str, Any]]) -> List[MandiPriceSummary]:
    best_by_commodity: Dict[str, MandiPriceSummary] = {}
    for record in raw_records:
        commodity = str(record.get("commodity") or "").strip()
        price = _price_value(record.get("modal_price"))
        if not commodity or price <= 0:
            continue

        existing = best_by_commodity.get(commodity)
        if existing is None or price > existing.price:
            best_by_commodity[commodity] = MandiPriceSummary(
                commodity=commodity,
                price=price,
                region=str(record.get("state") or ""),
                market=str(record.get("market") or ""),
                trend=placeholder_trend(commodity),
            )

    return list(best_by_commodity.values())[:PRICE_BOARD_SIZE]


async def get_mandi_price_board() -> List[MandiPriceSummary]:
    """Latest prices for the dashboard; never fails, returns [] instead."""
    if not settings.DATA_GOV_API_KEY:
        logger.warning("DATA_GOV_API_KEY is not set; mandi price board is empty")
        return []

    params = {
        "api-key": settings.DATA_GOV_API_KEY,
        "format": "json",
        "limit": PRICE_BOARD_FETCH_LIMIT,
    }
    try:
        async with _http_client() as client:
            response = await client.get(
                _resource_url(settings.MANDI_PRICE_RESOURCE_ID), params=params
            )
            response.raise_for_status()
            data = response.json()
        return build_price_board(data.get("records") or [])
    except (httpx.HTTPError, ValueError, AttributeError):
        logger.exception("Error fetching or processing mandi price board data")
        return []


def format_official_price(record: Dict[str, Any]) -> str:
    return (
        f"The mandi price for {record.get('commodity')} in {record.get('market')}, "
        f"{record.get('district')}, {record.get('state')} on {record.get('arrival_date')} is:\n"
        f"- Modal: ₹{record.get('modal_price')}\n"
        f"- Min: ₹{record.get('min_price')}\n"
        f"- Max: ₹{record.get('max_price')}"
    )


async def get_official_mandi_price(
    crop: str,
    state: str,
    district: str,
    market: str,
) -> OfficialMandiPrice:
    api_key = _require_api_key()
    params = {
        "api-key": api_key,
        "format": "json",
        "limit": OFFICIAL_PRICE_LIMIT,
        "filters[commodity]": crop,
        "filters[state]": state,
        "filters[district]": district,
        "filters[market]": market,
    }
    try:
        async with _http_client() as client:
            response = await client.get(
                _resource_url(settings.MANDI_PRICE_RESOURCE_ID), params=params
            )
            response.raise_for_status()
            data = response.json()
        records = data.get("records") or []
    except (httpx.HTTPError, ValueError, AttributeError):
        logger.exception("Failed to fetch official mandi price for %s in %s", crop, state)
        return OfficialMandiPrice(message="Could not connect to the market price service.")

    if not records:
        return OfficialMandiPrice(message=f"No mandi price data available for {crop} in {state}.")

    latest = max(
        records,
        key=lambda record: parse_arrival_date(str(record.get("arrival_date") or ""))
        or datetime.min,
    )
    return OfficialMandiPrice(message=format_official_price(latest))


async def predict_mandi_price(request: MandiPricePredictionRequest) -> MandiPricePrediction:
    prediction = require_output(
        await run_structured_flow(
            flow_name="Mandi price prediction",
            system_prompt=MANDI_PRICE_PREDICTION_SYSTEM_PROMPT,
            input_data=request.model_dump(),
            output_model=MandiPricePrediction,
            failure_detail="AI model could not forecast prices right now. Please retry.",
        ),
        "AI did not return a valid price prediction.",
    )
    prediction.crop_type = request.crop_type
    prediction.location = request.location
    return prediction
