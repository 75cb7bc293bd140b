import json
from datetime import date, datetime

import pytest
from fastapi import HTTPException

from app.collections.crop_monitor import save_crop_snap
from app.models.crop_monitor import CropGrowthAnalysis, CropSnap, RecordSnapRequest, RegisterCropRequest
from app.services import crop_monitor_service, files

USER_ID = "user-1"
TODAY = date(2024, 8, 4)


@pytest.fixture
def uploaded_files(monkeypatch) -> list[str]:
    converted: list[str] = []

    async def _convert(blob_reference: str):
        converted.append(blob_reference)
        return f"https://files.example/{len(converted)}", "image/jpeg"

    monkeypatch.setattr(files, "convert_file_uri", _convert)
    return converted


def _analysis(stage: str = "Flowering") -> dict:
    return {
        "growth_stage": stage,
        "growth_rating": 4,
        "observations": "Healthy canopy.",
        "recommendations": "Stake the plants.",
    }


def test_days_since_planting_is_never_negative():
    assert crop_monitor_service.days_since_planting(date(2024, 6, 20), TODAY) == 45
    assert crop_monitor_service.days_since_planting(date(2024, 9, 1), TODAY) == 0


async def _register(name: str = "Tomato"):
    return await crop_monitor_service.register_crop(
        RegisterCropRequest(name=name, planting_date=date(2024, 6, 20)), user_id=USER_ID
    )


async def test_first_snap_has_no_previous_photo(fake_db, fake_llm, uploaded_files):
    crop = await _register()
    fake_llm.queue(_analysis())
    photo = f"user-content/{USER_ID}/{crop.id}/day45.jpg"

    snap = await crop_monitor_service.record_snap(
        crop.id, RecordSnapRequest(photo=photo), user_id=USER_ID, today=TODAY
    )

    assert snap.days_since_planting == 45
    assert snap.analysis.growth_stage == "Flowering"
    assert uploaded_files == [photo]
    sent = json.loads(fake_llm.last_input_text())
    assert sent["has_previous_photo"] is False
    assert sent["ideal_benchmark"].startswith("Flowering begins")
    assert fake_db["ai_workflow"].documents[0]["status"] == "completed"


async def test_snap_compares_with_previous_photo(fake_db, fake_llm, uploaded_files):
    crop = await _register()
    previous_photo = f"user-content/{USER_ID}/{crop.id}/day30.jpg"
    await save_crop_snap(
        CropSnap(
            crop_id=crop.id,
            user_id=USER_ID,
            photo=previous_photo,
            days_since_planting=30,
            analysis=CropGrowthAnalysis(**_analysis("Vegetative")),
            created_at=datetime(2024, 7, 20),
        )
    )
    fake_llm.queue(_analysis())
    photo = f"user-content/{USER_ID}/{crop.id}/day45.jpg"

    await crop_monitor_service.record_snap(
        crop.id, RecordSnapRequest(photo=photo), user_id=USER_ID, today=TODAY
    )

    assert uploaded_files == [photo, previous_photo]
    assert json.loads(fake_llm.last_input_text())["has_previous_photo"] is True
    snaps = await crop_monitor_service.list_snaps(crop.id, user_id=USER_ID)
    assert [snap.days_since_planting for snap in snaps] == [45, 30]


async def test_snap_with_foreign_photo_is_rejected(fake_db, fake_llm, uploaded_files):
    crop = await _register()

    with pytest.raises(HTTPException) as exc_info:
        await crop_monitor_service.record_snap(
            crop.id,
            RecordSnapRequest(photo="user-content/user-2/x/photo.jpg"),
            user_id=USER_ID,
            today=TODAY,
        )

    assert exc_info.value.status_code == 403
    assert fake_llm.calls == []


async def test_crop_of_another_user_is_forbidden(fake_db):
    crop = await _register()

    with pytest.raises(HTTPException) as exc_info:
        await crop_monitor_service.get_crop(crop.id, user_id="user-2")
    assert exc_info.value.status_code == 403

    with pytest.raises(HTTPException) as exc_info:
        await crop_monitor_service.get_crop("missing", user_id=USER_ID)
    assert exc_info.value.status_code == 404


async def test_delete_crop_removes_snaps_and_files(fake_db, monkeypatch):
    crop = await _register()
    await save_crop_snap(
        CropSnap(
            crop_id=crop.id,
            user_id=USER_ID,
            photo=f"user-content/{USER_ID}/{crop.id}/day30.jpg",
            days_since_planting=30,
            analysis=CropGrowthAnalysis(**_analysis()),
        )
    )
    deleted = []

    async def _delete_files(user_id, data_id):
        deleted.append((user_id, data_id))
        return 1

    monkeypatch.setattr(crop_monitor_service, "delete_user_data_files", _delete_files)

    await crop_monitor_service.delete_crop(crop.id, user_id=USER_ID)

    assert deleted == [(USER_ID, crop.id)]
    assert fake_db["monitored_crops"].documents == []
    assert fake_db["crop_snaps"].documents == []
    assert await crop_monitor_service.list_crops(USER_ID) == []
