"""Tests for lineup API routes."""

import httpx
import pytest

from conftest import TEAM_ID
from match_fit.api.routes.lineups import (
    SESSION_TTL_SECONDS,
    _session_locks,
    _sessions,
    _sessions_lock,
)
from match_fit.main import app
from match_fit.repositories.lineup_repository import LineupRepository
from match_fit.repositories.team_repository import TeamRepository
from match_fit.services.lineup_service import LineupService

pytestmark = pytest.mark.anyio

FULL_4_4_2 = ["GK", "LB", "CB1", "CB2", "RB", "LM", "CM1", "CM2", "RM", "ST1", "ST2"]


@pytest.fixture(autouse=True)
def lineup_service(db_path, clock):
    """Point the app at the seeded database and reset sessions."""
    service = LineupService(LineupRepository(db_path), TeamRepository(db_path), clock=clock)
    app.state.lineup_service = service
    with _sessions_lock:
        _sessions.clear()
        _session_locks.clear()
    yield service
    with _sessions_lock:
        _sessions.clear()
        _session_locks.clear()


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _open(client, event_id="evt_future"):
    response = await client.post(
        "/api/lineups/sessions", json={"team_id": TEAM_ID, "event_id": event_id}
    )
    assert response.status_code == 201
    return response.json()["session_id"]


async def _fill(client, session_id, positions=FULL_4_4_2):
    for i, position in enumerate(positions, start=1):
        response = await client.put(
            f"/api/lineups/sessions/{session_id}/starters/{position}", json={"player": f"p{i}"}
        )
        assert response.status_code == 200


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_list_formations(client):
    response = await client.get("/api/lineups/formations")
    formations = response.json()["formations"]
    assert [f["key"] for f in formations] == ["4-4-2", "4-3-3", "3-5-2", "4-2-3-1", "3-4-3"]
    assert all(len(f["positions"]) == 11 for f in formations)
    assert formations[0]["positions"][0] == {
        "name": "GK", "label": "Goalkeeper", "top": "85%", "left": "50%",
    }


async def test_upcoming_events_and_roster(client):
    events = (await client.get(f"/api/lineups/teams/{TEAM_ID}/events")).json()["events"]
    assert [e["id"] for e in events] == ["evt_today", "evt_future", "evt_later"]

    players = (await client.get(f"/api/lineups/teams/{TEAM_ID}/roster")).json()["players"]
    assert len(players) == 13
    assert players[0]["display_name"] == "First1 Last1"


async def test_open_session_returns_empty_draft(client):
    response = await client.post(
        "/api/lineups/sessions", json={"team_id": TEAM_ID, "event_id": "evt_future"}
    )
    data = response.json()

    assert data["session_id"].startswith("lu_")
    assert data["state"] == "draft"
    assert data["is_editable"] is True
    assert data["lineup"] is None
    draft = data["draft"]
    assert draft["formation"] == "4-4-2"
    assert draft["bench_slot_count"] == 10
    assert len(draft["positions"]) == 11
    assert all(p["player"] is None for p in draft["positions"])


async def test_open_session_for_unknown_event_is_404(client):
    response = await client.post(
        "/api/lineups/sessions", json={"team_id": TEAM_ID, "event_id": "evt_other"}
    )
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


async def test_open_session_for_practice_is_400(client):
    response = await client.post(
        "/api/lineups/sessions", json={"team_id": TEAM_ID, "event_id": "evt_practice"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_event"


async def test_unknown_session_is_404(client):
    response = await client.get("/api/lineups/sessions/lu_missing")
    assert response.status_code == 404


async def test_assign_starter_resolves_player(client):
    session_id = await _open(client)
    response = await client.put(
        f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"}
    )
    draft = response.json()["draft"]
    gk = next(p for p in draft["positions"] if p["name"] == "GK")
    assert gk["player"]["id"] == "p1"
    assert gk["player"]["display_name"] == "First1 Last1"
    assert draft["assigned_players"] == ["p1"]


async def test_assign_invalid_position_is_400(client):
    session_id = await _open(client)
    response = await client.put(
        f"/api/lineups/sessions/{session_id}/starters/LW", json={"player": "p1"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_position"


async def test_unknown_substitute_renders_raw_reference(client):
    session_id = await _open(client)
    response = await client.post(
        f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "left@example.com"}
    )
    substitute = response.json()["draft"]["substitutes"][0]
    assert substitute["ref"] == "left@example.com"
    assert substitute["player"] == {
        "id": None, "ref": "left@example.com", "display_name": "left@example.com", "resolved": False,
    }


async def test_available_players_exclude_assigned(client):
    session_id = await _open(client)
    await client.put(f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"})
    await client.post(f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "p13"})

    data = (await client.get(f"/api/lineups/sessions/{session_id}/available-players")).json()
    assert data["count"] == 11
    assert data["groups"]["goalkeeper"] == []
    assert [p["id"] for p in data["groups"]["forward"]] == ["p11", "p12"]

    data = (await client.get(
        f"/api/lineups/sessions/{session_id}/available-players", params={"search": "last5"}
    )).json()
    assert data["count"] == 1


async def test_bench_slot_endpoints(client):
    session_id = await _open(client)
    await client.post(f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "p12"})

    response = await client.delete(f"/api/lineups/sessions/{session_id}/bench-slots/0")
    assert response.status_code == 409
    assert response.json()["error"] == "bench_slot_occupied"

    response = await client.delete(f"/api/lineups/sessions/{session_id}/bench-slots/10")
    assert response.status_code == 400

    response = await client.post(f"/api/lineups/sessions/{session_id}/bench-slots")
    assert response.json()["draft"]["bench_slot_count"] == 11
    response = await client.delete(f"/api/lineups/sessions/{session_id}/bench-slots/10")
    assert response.json()["draft"]["bench_slot_count"] == 10


async def test_change_formation_reports_orphans(client):
    session_id = await _open(client)
    await client.put(f"/api/lineups/sessions/{session_id}/starters/LM", json={"player": "p7"})
    response = await client.put(
        f"/api/lineups/sessions/{session_id}/formation", json={"formation": "4-3-3"}
    )
    draft = response.json()["draft"]
    assert draft["formation"] == "4-3-3"
    assert draft["orphaned_positions"] == ["LM"]
    assert draft["starter_count"] == 1

    response = await client.put(
        f"/api/lineups/sessions/{session_id}/formation", json={"formation": "9-0-1"}
    )
    assert response.status_code == 400


async def test_publish_incomplete_lineup_is_400(client):
    session_id = await _open(client)
    await _fill(client, session_id, FULL_4_4_2[:10])
    response = await client.post(f"/api/lineups/sessions/{session_id}/publish")
    assert response.status_code == 400
    assert response.json()["error"] == "incomplete_lineup"
    assert "10/11" in response.json()["detail"]


async def test_publish_edit_and_republish_flow(client):
    session_id = await _open(client)
    await _fill(client, session_id)

    response = await client.post(f"/api/lineups/sessions/{session_id}/publish")
    assert response.status_code == 200
    data = response.json()
    assert data["state"] == "published"
    assert data["is_editable"] is False
    assert data["lineup"]["published"] is True

    response = await client.post(f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "p12"})
    assert response.status_code == 400
    assert response.json()["error"] == "lineup_not_editable"

    response = await client.post(f"/api/lineups/sessions/{session_id}/edit")
    assert response.json()["state"] == "editing_published"
    await client.post(f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "p12"})

    response = await client.post(f"/api/lineups/sessions/{session_id}/cancel-edit")
    assert response.json()["state"] == "published"
    assert response.json()["draft"]["substitutes"] == []

    await client.post(f"/api/lineups/sessions/{session_id}/edit")
    await client.post(f"/api/lineups/sessions/{session_id}/substitutes", json={"player": "p13"})
    response = await client.post(f"/api/lineups/sessions/{session_id}/publish")
    assert response.json()["state"] == "published"

    published = (await client.get(
        f"/api/lineups/teams/{TEAM_ID}/published", params={"player_id": "p13"}
    )).json()["lineups"]
    assert len(published) == 1
    assert published[0]["in_lineup"] is True
    assert published[0]["substitutes"][0]["id"] == "p13"
    assert published[0]["positions"][0]["player"]["id"] == "p1"


async def test_save_draft_then_reopen(client):
    session_id = await _open(client)
    await client.put(f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"})
    response = await client.post(f"/api/lineups/sessions/{session_id}/save")
    assert response.status_code == 200
    assert response.json()["lineup"]["published"] is False

    other_id = await _open(client)
    data = (await client.get(f"/api/lineups/sessions/{other_id}")).json()
    assert data["draft"]["starting"] == [{"position": "GK", "player_id": "p1"}]


async def test_switch_event_discards_edits(client):
    session_id = await _open(client)
    await client.put(f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"})
    response = await client.put(
        f"/api/lineups/sessions/{session_id}/event", json={"event_id": "evt_later"}
    )
    data = response.json()
    assert data["event"]["id"] == "evt_later"
    assert data["draft"]["starting"] == []


async def test_past_event_is_read_only(client, lineup_service):
    session_id = await _open(client, "evt_past")
    data = (await client.get(f"/api/lineups/sessions/{session_id}")).json()
    assert data["is_event_past"] is True
    assert data["is_editable"] is False

    response = await client.put(
        f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "past_event_locked"
    assert "already passed" in response.json()["detail"]


async def test_delete_lineup_and_close_session(client, lineup_service):
    session_id = await _open(client)
    await client.put(f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "p1"})
    await client.post(f"/api/lineups/sessions/{session_id}/save")

    response = await client.delete(f"/api/lineups/sessions/{session_id}/lineup")
    assert response.json()["lineup"] is None
    assert response.json()["draft"]["starting"] == []
    assert lineup_service.lineup_repository.load(TEAM_ID, "evt_future") is None

    response = await client.delete(f"/api/lineups/sessions/{session_id}")
    assert response.status_code == 204
    response = await client.get(f"/api/lineups/sessions/{session_id}")
    assert response.status_code == 404


async def test_blank_player_reference_is_rejected(client):
    session_id = await _open(client)

    response = await client.put(
        f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": ""}
    )
    assert response.status_code == 422
    response = await client.post(
        f"/api/lineups/sessions/{session_id}/substitutes", json={"player": ""}
    )
    assert response.status_code == 422

    response = await client.put(
        f"/api/lineups/sessions/{session_id}/starters/GK", json={"player": "   "}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_player"

    data = (await client.get(f"/api/lineups/sessions/{session_id}")).json()
    assert data["draft"]["starting"] == []
    assert data["draft"]["substitutes"] == []


async def test_idle_session_expires(client):
    session_id = await _open(client)
    with _sessions_lock:
        _sessions[session_id].last_access -= SESSION_TTL_SECONDS + 1

    response = await client.get(f"/api/lineups/sessions/{session_id}")
    assert response.status_code == 404
    # Pruning may drop the session before the expiry check sees it
    assert response.json()["detail"] in ("Session expired", "Session not found")
