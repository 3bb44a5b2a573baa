"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""

import inspect
from unittest.mock import patch

from fastapi.routing import APIRoute

from dayblocks.api.app import app
from dayblocks.database.planner_state_repository import PlannerStateRepository


def _add_deep_work(test_client):
    response = test_client.post("/blocks/from-template/bt-deep")
    assert response.status_code == 201
    return response.json()["block"]["id"]


class TestGridEndpoints:
    """Test read-only layout endpoints."""

    def test_grid(self, test_client):
        response = test_client.get("/grid")

        assert response.status_code == 200
        data = response.json()
        assert data["snap_unit_minutes"] == 30
        assert len(data["slots"]) == 32
        assert data["slots"][0] == {"minute": 480, "label": "8:00 AM", "fraction": 0.0}

    def test_goals_and_templates(self, test_client):
        assert [g["id"] for g in test_client.get("/goals").json()][0] == "g-identity"
        assert len(test_client.get("/templates").json()) == 6


class TestBlockEndpoints:
    """Test block mutation endpoints."""

    def test_create_from_template(self, test_client, db_session):
        response = test_client.post("/blocks/from-template/bt-deep")

        assert response.status_code == 201
        data = response.json()
        assert data["block"]["start_minute"] == 480
        assert data["block"]["duration_minutes"] == 90
        assert data["block"]["goal_id"] == "g-identity"
        assert data["block"]["date"] == "2024-01-01"
        assert data["start_label"] == "8:00 AM"
        assert data["end_label"] == "9:30 AM"
        assert len(PlannerStateRepository(db_session).get_blocks()) == 1

    def test_create_from_template_with_start(self, test_client):
        response = test_client.post("/blocks/from-template/bt-ex", json={"start_minute": 500})
        assert response.json()["block"]["start_minute"] == 510

    def test_create_from_unknown_template(self, test_client):
        assert test_client.post("/blocks/from-template/missing").status_code == 404

    def test_create_ad_hoc(self, test_client):
        response = test_client.post(
            "/blocks",
            json={"date": "2024-01-01", "duration_minutes": 45, "note": "Walk"},
        )
        assert response.status_code == 201
        assert response.json()["block"]["duration_minutes"] == 60

    def test_create_ad_hoc_invalid_duration(self, test_client):
        response = test_client.post("/blocks", json={"date": "2024-01-01", "duration_minutes": 0})
        assert response.status_code == 422

    def test_move(self, test_client, db_session):
        block_id = _add_deep_work(test_client)

        response = test_client.post(f"/blocks/{block_id}/move", json={"fraction": 20 / 960})

        assert response.status_code == 200
        assert response.json()["block"]["start_minute"] == 510
        assert PlannerStateRepository(db_session).get_blocks()[0].start_minute == 510

    def test_move_missing_block(self, test_client):
        response = test_client.post("/blocks/missing/move", json={"fraction": 0.5})
        assert response.status_code == 404

    def test_move_fraction_out_of_range(self, test_client):
        block_id = _add_deep_work(test_client)
        response = test_client.post(f"/blocks/{block_id}/move", json={"fraction": 1.5})
        assert response.status_code == 422

    def test_resize_end(self, test_client):
        block_id = _add_deep_work(test_client)

        response = test_client.post(f"/blocks/{block_id}/resize-end", json={"fraction": 0.25})

        assert response.status_code == 200
        assert response.json()["block"]["duration_minutes"] == 240

    def test_resize_start(self, test_client):
        block_id = _add_deep_work(test_client)
        test_client.post(f"/blocks/{block_id}/move", json={"fraction": 0.25})

        response = test_client.post(f"/blocks/{block_id}/resize-start", json={"fraction": 0.0})

        block = response.json()["block"]
        assert (block["start_minute"], block["duration_minutes"]) == (480, 330)

    def test_patch(self, test_client):
        block_id = _add_deep_work(test_client)

        response = test_client.patch(f"/blocks/{block_id}", json={"note": "Writing", "goal_id": None})

        assert response.status_code == 200
        assert response.json()["block"]["note"] == "Writing"
        assert response.json()["block"]["goal_id"] is None

    def test_patch_rejects_temporal_fields(self, test_client):
        block_id = _add_deep_work(test_client)
        response = test_client.patch(f"/blocks/{block_id}", json={"start_minute": 600})
        assert response.status_code == 422

    def test_delete_is_idempotent(self, test_client, db_session):
        block_id = _add_deep_work(test_client)

        assert test_client.delete(f"/blocks/{block_id}").status_code == 204
        assert test_client.delete(f"/blocks/{block_id}").status_code == 204
        assert PlannerStateRepository(db_session).get_blocks() == []



class TestSaveFailure:
    """Test that a failed save leaves the in-memory session unchanged."""

    def test_saving_handlers_are_sync(self):
        """Handlers that commit run in the threadpool, not on the event loop."""
        saving = [
            route for route in app.routes
            if isinstance(route, APIRoute) and route.methods & {"POST", "PATCH", "DELETE"}
        ]

        assert len(saving) == 7
        assert not any(inspect.iscoroutinefunction(route.endpoint) for route in saving)

    def test_failed_create_is_undone(self, test_client, planner_session):
        with patch.object(PlannerStateRepository, "save_blocks", side_effect=RuntimeError("disk full")):
            response = test_client.post("/blocks/from-template/bt-deep")

        assert response.status_code == 500
        assert "disk full" in response.json()["detail"]
        assert planner_session.blocks() == []

    def test_failed_move_restores_start(self, test_client, planner_session, db_session):
        block_id = _add_deep_work(test_client)

        with patch.object(PlannerStateRepository, "save_blocks", side_effect=RuntimeError("disk full")):
            response = test_client.post(f"/blocks/{block_id}/move", json={"fraction": 0.5})

        assert response.status_code == 500
        assert planner_session.store.get(block_id).start_minute == 480
        assert PlannerStateRepository(db_session).get_blocks()[0].start_minute == 480

    def test_failed_delete_keeps_block(self, test_client, planner_session):
        block_id = _add_deep_work(test_client)

        with patch.object(PlannerStateRepository, "save_blocks", side_effect=RuntimeError("disk full")):
            response = test_client.delete(f"/blocks/{block_id}")

        assert response.status_code == 500
        assert block_id in planner_session.store


class TestDayEndpoints:
    """Test active date, listing and totals."""

    def test_list_blocks_for_active_date(self, test_client):
        _add_deep_work(test_client)
        data = test_client.get("/blocks").json()
        assert data["date"] == "2024-01-01"
        assert len(data["blocks"]) == 1

    def test_switch_active_date(self, test_client):
        _add_deep_work(test_client)

        response = test_client.put("/active-date", json={"date": "2024-01-02"})

        assert response.status_code == 200
        assert response.json()["blocks"] == []
        assert len(test_client.get("/blocks", params={"date": "2024-01-01"}).json()["blocks"]) == 1

    def test_totals(self, test_client):
        _add_deep_work(test_client)
        test_client.post("/blocks/from-template/bt-lunch")

        data = test_client.get("/totals").json()

        assert data["totals"] == {"g-identity": 90, "unassigned": 30}
        assert data["summaries"][-1]["title"] == "Unassigned"
        assert sum(data["weekly_target_shares"].values()) == 100
