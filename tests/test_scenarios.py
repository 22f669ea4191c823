from datetime import datetime
from uuid import UUID, uuid4

import pytest
from fastapi import HTTPException

from lco_api.catalog import service as catalog_service
from lco_api.computation.objectives import Objective
from lco_api.computation.schemas import OptimizationParameters, RepairCategory
from lco_api.scenarios import service
from lco_api.scenarios.schemas import ScenarioUpdate

BRIDGE = UUID("5f1c8a0e-2b7d-4a44-9d0c-3c1e7a9b6f10")
USER = "7d3f2a10-1c4b-4f0e-9e55-2b8a6c4d1e90"


def _row(**overrides):
    now = datetime(2026, 1, 1)
    row = dict(
        id=uuid4(), bridge_id=BRIDGE, user_id=UUID(USER), name="Baseline", description=None,
        is_baseline=True, parameters={}, created_at=now, updated_at=now,
    )
    row.update(overrides)
    return row


class TestMergeParameters:
    def test_keeps_what_is_not_sent(self, selections):
        current = OptimizationParameters(component_id=2, min_rating=5, selections=selections)
        merged = service.merge_parameters(current, {"objective": 11})

        assert merged.objective is Objective.COST
        assert merged.component_id == 2
        assert merged.min_rating == 5
        assert [s.repair_id for s in merged.selections] == [5, 8]
        assert merged.improvement_coefficients == {4: 0.15, 5: 0.10, 6: 0.05}

    def test_overrides_survive_the_json_round(self):
        current = OptimizationParameters(category_overrides={"two": [5]})
        merged = service.merge_parameters(current, {"min_rating": 6})
        assert merged.category_overrides == {RepairCategory.TWO: [5]}

    def test_invalid_floor_is_unprocessable(self):
        with pytest.raises(HTTPException) as exc:
            service.merge_parameters(OptimizationParameters(), {"min_rating": 8})
        assert exc.value.status_code == 422

    def test_overlapping_overrides_are_rejected(self):
        current = OptimizationParameters(category_overrides={"two": [5]})
        with pytest.raises(HTTPException):
            service.merge_parameters(current, {"category_overrides": {"two": [5], "three": [5]}})


class TestScenarioService:
    def test_baseline_is_created_once(self, monkeypatch):
        created = []
        monkeypatch.setattr(service.repo, "get_baseline_scenario", lambda b, u: None)
        monkeypatch.setattr(
            service.repo, "create_scenario",
            lambda b, u, payload: created.append(payload) or _row(parameters=payload["parameters"]),
        )

        baseline = service.get_or_create_baseline(BRIDGE, USER)

        assert baseline.is_baseline
        assert created[0]["name"] == "Baseline"
        assert created[0]["parameters"]["min_rating"] == 4

    def test_update_writes_merged_parameters(self, monkeypatch):
        stored = _row(parameters={"component_id": 4, "objective": 1})
        written = {}
        monkeypatch.setattr(service.repo, "get_scenario", lambda b, s, u: stored)

        def update(b, s, u, changes):
            written.update(changes)
            return _row(parameters=changes["parameters"])

        monkeypatch.setattr(service.repo, "update_scenario", update)

        result = service.update_scenario(BRIDGE, stored["id"], USER, ScenarioUpdate(parameters={"objective": 9}))

        assert set(written) == {"parameters"}
        assert written["parameters"]["component_id"] == 4
        assert result.parameters.objective is Objective.ENERGY_RESOURCES

    def test_baseline_cannot_be_deleted(self, monkeypatch):
        monkeypatch.setattr(service.repo, "get_scenario", lambda b, s, u: _row())
        monkeypatch.setattr(service.repo, "delete_scenario", lambda b, s, u: pytest.fail("deleted"))

        with pytest.raises(HTTPException) as exc:
            service.delete_scenario(BRIDGE, uuid4(), USER)
        assert exc.value.status_code == 409

    def test_duplicate_copies_parameters(self, monkeypatch):
        source = _row(name="Cheap", is_baseline=False, parameters={"objective": 11, "min_rating": 5})
        monkeypatch.setattr(service.repo, "get_scenario", lambda b, s, u: source)
        monkeypatch.setattr(
            service.repo, "create_scenario",
            lambda b, u, payload: _row(name=payload["name"], is_baseline=payload["is_baseline"],
                                       parameters=payload["parameters"]),
        )

        copy = service.duplicate_scenario(BRIDGE, source["id"], USER)

        assert copy.name == "Copy of Cheap"
        assert not copy.is_baseline
        assert copy.parameters.objective is Objective.COST
        assert copy.parameters.min_rating == 5


class TestCatalogPreview:
    def test_preview_of_coefficients_sheet(self, monkeypatch):
        payload = {
            "basic_info": [],
            "coefficients": [
                {"coefficient_set": "GW", "repair_id": n, "repair_mean": 1.0, "traffic_mean": 0.0}
                for n in range(1, 8)
            ],
        }
        monkeypatch.setattr(
            catalog_service.repository, "fetch_last_catalog_upload",
            lambda b, u, with_payload=False: {"status": "validated", "workbook_payload": payload},
        )

        preview = catalog_service.get_catalog_preview_service(BRIDGE, USER, "coefficients", limit=3)

        assert preview.total_rows == 7
        assert [row["repair_id"] for row in preview.preview_data] == [1, 2, 3]
        assert preview.columns == ["coefficient_set", "repair_id", "repair_mean", "traffic_mean"]

        empty = catalog_service.get_catalog_preview_service(BRIDGE, USER, "basic_info")
        assert empty.total_rows == 0
        assert "improvement" in empty.columns

    def test_unparsed_upload_has_nothing_to_preview(self, monkeypatch):
        monkeypatch.setattr(
            catalog_service.repository, "fetch_last_catalog_upload",
            lambda b, u, with_payload=False: {"status": "failed", "workbook_payload": None},
        )
        with pytest.raises(HTTPException) as exc:
            catalog_service.get_catalog_preview_service(BRIDGE, USER)
        assert exc.value.status_code == 404
