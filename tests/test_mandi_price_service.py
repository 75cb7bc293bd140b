import httpx
import pytest
from fastapi import HTTPException

from app.core.config import settings
from app.models.mandi_price import (
    MandiPricePredictionRequest,
    MandiPriceRecord,
    MandiPriceTrend,
)
from app.services import mandi_price_service
from app.services.mandi_price_service import (
    build_price_board,
    get_live_mandi_prices,
    get_mandi_price_board,
    get_official_mandi_price,
    parse_arrival_date,
    placeholder_trend,
    predict_mandi_price,
    rank_mandi_records,
)


def _record(arrival_date: str, modal_price, market: str = "Azadpur") -> dict:
    return {
        "state": "Delhi",
        "district": "North Delhi",
        "market": market,
        "commodity": "Tomato",
        "variety": "Local",
        "grade": "FAQ",
        "arrival_date": arrival_date,
        "min_price": "1000",
        "max_price": "2000",
        "modal_price": modal_price,
    }


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "DATA_GOV_API_KEY", "test-key")


def test_parse_arrival_date():
    assert parse_arrival_date("05/03/2024").month == 3
    assert parse_arrival_date("2024-03-05") is None
    assert parse_arrival_date("") is None


def test_rank_orders_by_date_then_modal_price():
    records = [
        MandiPriceRecord(**_record("01/03/2024", "1500", market="A")),
        MandiPriceRecord(**_record("02/03/2024", "1200", market="B")),
        MandiPriceRecord(**_record("02/03/2024", "1800", market="C")),
        MandiPriceRecord(**_record("not a date", "9000", market="D")),
    ]

    ranked = rank_mandi_records(records)

    assert [record.market for record in ranked] == ["C", "B", "A", "D"]


def test_numeric_prices_are_kept_as_strings():
    record = MandiPriceRecord(**_record("01/03/2024", 1500))
    assert record.modal_price == "1500"


def test_placeholder_trend_uses_first_letter():
    # ord("T") % 3 == 0, ord("O") % 3 == 1, ord("P") % 3 == 2
    assert placeholder_trend("Tomato") == MandiPriceTrend.UP
    assert placeholder_trend("Onion") == MandiPriceTrend.DOWN
    assert placeholder_trend("Potato") == MandiPriceTrend.STABLE


def test_price_board_keeps_highest_price_per_commodity():
    raw = [
        {"commodity": "Onion", "modal_price": "1800", "state": "Maharashtra", "market": "Lasalgaon"},
        {"commodity": "Onion", "modal_price": "2100", "state": "Karnataka", "market": "Hubli"},
        {"commodity": "Tomato", "modal_price": "0", "state": "Delhi", "market": "Azadpur"},
        {"commodity": "", "modal_price": "500", "state": "Delhi", "market": "Azadpur"},
        {"commodity": "Potato", "modal_price": 950, "state": "Punjab", "market": "Jalandhar"},
    ]

    board = build_price_board(raw)

    assert [item.commodity for item in board] == ["Onion", "Potato"]
    assert board[0].price == 2100
    assert board[0].region == "Karnataka"
    assert board[0].market == "Hubli"


def test_price_board_is_capped_at_ten():
    raw = [
        {"commodity": f"Crop{index}", "modal_price": "100", "state": "S", "market": "M"}
        for index in range(15)
    ]
    assert len(build_price_board(raw)) == 10


async def test_live_prices_are_ranked_and_filtered(api_key, mock_http):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "records": [
                    _record("01/03/2024", "1500", market="Old"),
                    _record("03/03/2024", "1400", market="New"),
                ]
            },
        )

    captured = mock_http(mandi_price_service, handler)

    records = await get_live_mandi_prices("Delhi", "North Delhi", "Tomato")

    assert [record.market for record in records] == ["New", "Old"]
    params = captured[0].url.params
    assert params["filters[State]"] == "Delhi"
    assert params["filters[District]"] == "North Delhi"
    assert params["filters[Commodity]"] == "Tomato"
    assert params["limit"] == "50"
    assert params["api-key"] == "test-key"


async def test_live_prices_without_records_is_empty(api_key, mock_http):
    mock_http(mandi_price_service, lambda request: httpx.Response(200, json={"total": 0}))
    assert await get_live_mandi_prices("Delhi", "North Delhi", "Tomato") == []


async def test_live_prices_report_api_error_verbatim(api_key, mock_http):
    mock_http(
        mandi_price_service,
        lambda request: httpx.Response(403, json={"error": "Invalid API key"}),
    )

    with pytest.raises(HTTPException) as exc_info:
        await get_live_mandi_prices("Delhi", "North Delhi", "Tomato")

    assert exc_info.value.status_code == 502
    assert "Invalid API key" in exc_info.value.detail


async def test_live_prices_reject_malformed_records(api_key, mock_http):
    mock_http(
        mandi_price_service,
        lambda request: httpx.Response(200, json={"records": [{"commodity": "Tomato"}]}),
    )

    with pytest.raises(HTTPException) as exc_info:
        await get_live_mandi_prices("Delhi", "North Delhi", "Tomato")

    assert exc_info.value.status_code == 502
    assert "unexpected format" in exc_info.value.detail


async def test_live_prices_require_api_key(monkeypatch):
    monkeypatch.setattr(settings, "DATA_GOV_API_KEY", "")

    with pytest.raises(HTTPException) as exc_info:
        await get_live_mandi_prices("Delhi", "North Delhi", "Tomato")

    assert exc_info.value.status_code == 500


async def test_price_board_is_empty_on_failure(api_key, mock_http):
    mock_http(mandi_price_service, lambda request: httpx.Response(500, text="down"))
    assert await get_mandi_price_board() == []


async def test_price_board_is_empty_without_key(monkeypatch):
    monkeypatch.setattr(settings, "DATA_GOV_API_KEY", "")
    assert await get_mandi_price_board() == []


async def test_official_price_uses_latest_record(api_key, mock_http):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "records": [
                    _record("28/02/2024", "1300"),
                    _record("02/03/2024", "1650"),
                    _record("15/01/2024", "1100"),
                ]
            },
        )

    captured = mock_http(mandi_price_service, handler)

    result = await get_official_mandi_price("Tomato", "Delhi", "North Delhi", "Azadpur")

    assert result.message.startswith(
        "The mandi price for Tomato in Azadpur, North Delhi, Delhi on 02/03/2024 is:"
    )
    assert "- Modal: ₹1650" in result.message
    assert captured[0].url.params["filters[commodity]"] == "Tomato"
    assert captured[0].url.params["filters[market]"] == "Azadpur"


async def test_official_price_without_records(api_key, mock_http):
    mock_http(mandi_price_service, lambda request: httpx.Response(200, json={"records": []}))

    result = await get_official_mandi_price("Tomato", "Delhi", "North Delhi", "Azadpur")

    assert result.message == "No mandi price data available for Tomato in Delhi."


async def test_official_price_on_connection_failure(api_key, mock_http):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    mock_http(mandi_price_service, handler)

    result = await get_official_mandi_price("Tomato", "Delhi", "North Delhi", "Azadpur")

    assert result.message == "Could not connect to the market price service."


async def test_prediction_keeps_requested_crop_and_location(fake_llm):
    fake_llm.queue(
        {
            "crop_type": "tomatoes",
            "location": "somewhere",
            "overall_trend": "Prices will rise",
            "forecast": [
                {"week": f"Week {week}", "price": 2000, "trend": "up", "reasoning": "r"}
                for week in range(1, 5)
            ],
        }
    )

    prediction = await predict_mandi_price(
        MandiPricePredictionRequest(crop_type="Tomato", location="Nashik")
    )

    assert prediction.crop_type == "Tomato"
    assert prediction.location == "Nashik"
    assert len(prediction.forecast) == 4


async def test_prediction_with_wrong_week_count_is_rejected(fake_llm):
    fake_llm.queue(
        {
            "crop_type": "Tomato",
            "location": "Nashik",
            "overall_trend": "Stable",
            "forecast": [{"week": "Week 1", "price": 1800, "trend": "up", "reasoning": "r"}],
        }
    )

    with pytest.raises(HTTPException) as exc_info:
        await predict_mandi_price(MandiPricePredictionRequest(crop_type="Tomato", location="Nashik"))

    assert exc_info.value.status_code == 502
