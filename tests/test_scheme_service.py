import json

import pytest

from app.models.scheme import FarmerCategory, HasLand, SchemeFinderRequest
from app.services.scheme_service import (
    SCHEMES_DATABASE,
    filter_candidate_schemes,
    get_scheme_recommendations,
    map_farmer_type,
    normalize_help_type,
    parse_land_area_acres,
)


def _request(**overrides) -> SchemeFinderRequest:
    values = {
        "help_type": "Financial Support",
        "state": "Maharashtra",
        "farmer_type": "Landholder",
        "has_land": HasLand.YES,
        "land_area": "2 acres",
    }
    values.update(overrides)
    return SchemeFinderRequest(**values)


def _ids(schemes) -> list[str]:
    return [scheme.id for scheme in schemes]


@pytest.mark.parametrize(
    "help_type", ["Crop Insurance", "crop_insurance", "cropInsurance", "crop-insurance"]
)
def test_help_type_normalization(help_type):
    assert normalize_help_type(help_type) == "cropInsurance"


def test_farmer_type_mapping():
    assert map_farmer_type("Landholder") == FarmerCategory.LAND_OWNER
    assert map_farmer_type("land owner") == FarmerCategory.LAND_OWNER
    assert map_farmer_type("Tenant Farmer") == FarmerCategory.TENANT_FARMER
    assert map_farmer_type("Sharecropper") == FarmerCategory.SHARECROPPER
    assert map_farmer_type("Labourer") is None


def test_land_area_parsing():
    assert parse_land_area_acres("2 acres") == 2.0
    assert parse_land_area_acres("1 hectare") == pytest.approx(2.471)
    assert parse_land_area_acres("about 3.5") == 3.5
    assert parse_land_area_acres("some") is None
    assert parse_land_area_acres(None) is None


def test_small_landholder_gets_financial_schemes():
    assert _ids(filter_candidate_schemes(_request())) == ["pm-kisan", "pmfby", "kvk"]


def test_land_area_above_limit_excludes_pm_kisan():
    candidates = filter_candidate_schemes(_request(land_area="10 acres"))
    assert "pm-kisan" not in _ids(candidates)


def test_farmer_without_land_is_never_a_land_owner_candidate():
    candidates = filter_candidate_schemes(
        _request(farmer_type="Landholder", has_land=HasLand.NO, land_area=None)
    )
    assert _ids(candidates) == ["pmfby", "kvk"]


def test_sharecropper_irrigation_has_no_candidate():
    candidates = filter_candidate_schemes(
        _request(help_type="Irrigation", farmer_type="Sharecropper", has_land=HasLand.NO)
    )
    assert candidates == []


def test_tenant_soil_health():
    candidates = filter_candidate_schemes(
        _request(help_type="soil_health", farmer_type="Tenant", has_land=HasLand.YES)
    )
    assert _ids(candidates) == ["shc"]


def _recommendation(name: str) -> dict:
    return {
        "scheme_name": name,
        "description": "d",
        "eligibility": "e",
        "benefits": "b",
        "how_to_apply": "h",
        "application_url": "https://pmfby.gov.in/",
    }


async def test_recommendations_send_only_candidates(fake_llm, fake_db):
    fake_llm.queue({"recommendations": [_recommendation("PMFBY")]})

    recommendations = await get_scheme_recommendations(
        _request(help_type="Crop Insurance"), user_id="user-1"
    )

    assert [item.scheme_name for item in recommendations] == ["PMFBY"]
    sent = json.loads(fake_llm.last_input_text())
    assert [scheme["id"] for scheme in sent["schemes"]] == ["pmfby"]
    assert sent["profile"]["state"] == "Maharashtra"
    assert fake_db["ai_workflow"].documents[0]["status"] == "completed"


async def test_recommendations_pass_full_table_when_nothing_matches(fake_llm, fake_db):
    fake_llm.queue({"recommendations": []})

    await get_scheme_recommendations(_request(help_type="Solar Pumps"))

    sent = json.loads(fake_llm.last_input_text())
    assert len(sent["schemes"]) == len(SCHEMES_DATABASE)


async def test_recommendations_empty_when_model_returns_nothing(fake_llm, fake_db):
    assert await get_scheme_recommendations(_request()) == []
