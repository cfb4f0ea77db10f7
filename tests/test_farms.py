from __future__ import annotations

from datetime import UTC, date, datetime
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient

from app.auth.dependencies import AuthContext
from app.models.enums import FarmTypeEnum, UserRoleEnum
from app.schemas.farm import FarmSummaryRead, FarmUpdate
from app.services.farm_service import FarmService
from tests.helpers import scalar_result


def _farm_obj(owner_id: UUID, **overrides: object) -> SimpleNamespace:
    now = datetime.now(UTC)
    values: dict[str, object] = {
        "id": uuid4(),
        "owner_id": owner_id,
        "name": "Green Valley",
        "farm_type": FarmTypeEnum.layers,
        "location_district": "Wakiso",
        "location_subcounty": None,
        "location_parish": None,
        "location_village": "Kira",
        "size_acres": None,
        "bird_capacity": 2000,
        "start_date": date(2024, 1, 15),
        "description": None,
        "is_active": True,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_create_and_get_farm(
    client: AsyncClient,
    auth_user_id: UUID,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    farm = _farm_obj(auth_user_id)
    seen: dict[str, object] = {}

    async def fake_create(self: FarmService, owner_id: UUID, payload: object) -> object:
        seen["owner_id"] = owner_id
        seen["payload"] = payload
        return farm

    async def fake_get(self: FarmService, farm_id: UUID, owner_id: UUID) -> object:
        return farm

    monkeypatch.setattr(FarmService, "create_farm", fake_create)
    monkeypatch.setattr(FarmService, "get_owned_farm", fake_get)

    created = await client.post(
        "/api/v1/farms",
        json={
            "name": "Green Valley",
            "farm_type": "layers",
            "location_district": "Wakiso",
            "location_village": "Kira",
            "size_acres": "",
            "bird_capacity": 2000,
            "start_date": "2024-01-15",
        },
    )
    assert created.status_code == 201
    assert created.json()["name"] == "Green Valley"
    assert created.json()["size_acres"] is None
    assert seen["owner_id"] == auth_user_id
    assert seen["payload"].size_acres is None  # type: ignore[attr-defined]

    fetched = await client.get(f"/api/v1/farms/{farm.id}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == str(farm.id)


@pytest.mark.asyncio
async def test_create_farm_validation_error(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/farms",
        json={"name": "G", "farm_type": "ducks", "location_district": "Wakiso"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_farms(client: AsyncClient, auth_user_id: UUID, monkeypatch: pytest.MonkeyPatch) -> None:
    farms = [_farm_obj(auth_user_id), _farm_obj(auth_user_id, name="Hilltop")]

    async def fake_list(self: FarmService, owner_id: UUID) -> list[object]:
        return farms

    monkeypatch.setattr(FarmService, "list_farms", fake_list)

    response = await client.get("/api/v1/farms")
    assert response.status_code == 200
    assert [item["name"] for item in response.json()["items"]] == ["Green Valley", "Hilltop"]


@pytest.mark.asyncio
async def test_get_other_owners_farm_forbidden(
    client: AsyncClient,
    fake_db_session: object,
) -> None:
    farm = _farm_obj(uuid4())
    fake_db_session.execute.return_value = scalar_result(farm)  # type: ignore[attr-defined]

    response = await client.get(f"/api/v1/farms/{farm.id}")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_missing_farm_not_found(client: AsyncClient, fake_db_session: object) -> None:
    fake_db_session.execute.return_value = scalar_result(None)  # type: ignore[attr-defined]

    response = await client.get(f"/api/v1/farms/{uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_farm_applies_only_sent_fields(
    fake_db_session: object,
    auth_user_id: UUID,
) -> None:
    farm = _farm_obj(auth_user_id)
    fake_db_session.execute.return_value = scalar_result(farm)  # type: ignore[attr-defined]

    service = FarmService(fake_db_session)  # type: ignore[arg-type]
    updated = await service.update_farm(
        farm.id,
        auth_user_id,
        FarmUpdate.model_validate({"bird_capacity": 2500, "location_village": ""}),
    )

    assert updated.bird_capacity == 2500
    assert updated.location_village is None
    assert updated.name == "Green Valley"


@pytest.mark.asyncio
async def test_update_farm_rejects_clearing_required_field(
    fake_db_session: object,
    auth_user_id: UUID,
) -> None:
    farm = _farm_obj(auth_user_id)
    fake_db_session.execute.return_value = scalar_result(farm)  # type: ignore[attr-defined]

    service = FarmService(fake_db_session)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        await service.update_farm(farm.id, auth_user_id, FarmUpdate.model_validate({"name": None}))


@pytest.mark.asyncio
async def test_delete_farm_deactivates(
    client: AsyncClient,
    fake_db_session: object,
    auth_user_id: UUID,
) -> None:
    farm = _farm_obj(auth_user_id)
    fake_db_session.execute.return_value = scalar_result(farm)  # type: ignore[attr-defined]

    response = await client.delete(f"/api/v1/farms/{farm.id}")
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert farm.is_active is False


@pytest.mark.asyncio
async def test_worker_may_access_only_own_farm(fake_db_session: object) -> None:
    farm_id = uuid4()
    worker = AuthContext(kind=UserRoleEnum.worker, subject_id=uuid4(), farm_id=farm_id)

    service = FarmService(fake_db_session)  # type: ignore[arg-type]
    with pytest.raises(PermissionError):
        await service.ensure_farm_access(worker, uuid4())


@pytest.mark.asyncio
async def test_summary_route(client: AsyncClient, auth_user_id: UUID, monkeypatch: pytest.MonkeyPatch) -> None:
    farm_id = uuid4()

    async def fake_summary(self: FarmService, _farm_id: UUID, owner_id: UUID) -> FarmSummaryRead:
        assert owner_id == auth_user_id
        return FarmSummaryRead(
            farm_id=farm_id,
            period_start=date(2024, 3, 1),
            period_end=date(2024, 3, 14),
            team_members=4,
            trays_collected=120,
            eggs_collected=3600,
            feed_used_kg=350.5,
            deaths=3,
        )

    monkeypatch.setattr(FarmService, "summarize", fake_summary)

    response = await client.get(f"/api/v1/farms/{farm_id}/summary")
    assert response.status_code == 200
    body = response.json()
    assert body["team_members"] == 4
    assert body["eggs_collected"] == 3600
    assert body["notes"] == 0


@pytest.mark.asyncio
async def test_summarize_uses_month_to_date_window(
    fake_db_session: object,
    auth_user_id: UUID,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    farm = _farm_obj(auth_user_id)

    async def fake_owned(self: FarmService, _farm_id: UUID, _owner_id: UUID) -> object:
        return farm

    egg_totals = SimpleNamespace(one=lambda: (10, 300, 4))
    scalars = [scalar_result(3), egg_totals, scalar_result(42.5), scalar_result(2), scalar_result(500), scalar_result(1)]
    fake_db_session.execute.side_effect = scalars  # type: ignore[attr-defined]
    monkeypatch.setattr(FarmService, "get_owned_farm", fake_owned)

    service = FarmService(fake_db_session)  # type: ignore[arg-type]
    summary = await service.summarize(farm.id, auth_user_id, today=date(2024, 3, 14))

    assert summary.period_start == date(2024, 3, 1)
    assert summary.period_end == date(2024, 3, 14)
    assert summary.team_members == 3
    assert (summary.trays_collected, summary.eggs_collected, summary.damaged_eggs) == (10, 300, 4)
    assert summary.feed_used_kg == 42.5
    assert summary.deaths == 2
    assert summary.birds_vaccinated == 500
    assert summary.notes == 1
