"""REST endpoints for lineup building and viewing."""

import threading
import time
import uuid
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from match_fit.config import settings
from match_fit.models.lineup import Lineup, StartingAssignment
from match_fit.models.session import LineupSession
from match_fit.models.team import DisplayFallback, EventRecord, PlayerRecord
from match_fit.services.lineup_service import LineupService
from match_fit.utils.formations import FORMATION_KEYS, get_positions
from match_fit.utils.player_identity import (
    available_players,
    display_name,
    group_by_position,
    resolve,
)

SESSION_TTL_SECONDS = settings.session_ttl_seconds
SESSION_CLEANUP_INTERVAL_SECONDS = 60

router = APIRouter(prefix="/api/lineups", tags=["lineups"])

# In-memory session storage with thread-safe access
_sessions: dict[str, LineupSession] = {}
_sessions_lock = threading.Lock()
_session_locks: dict[str, threading.Lock] = {}
_cleanup_lock = threading.Lock()
_last_cleanup = 0.0


def _is_session_expired(session: LineupSession, now: float) -> bool:
    return (now - session.last_access) >= SESSION_TTL_SECONDS


def _touch_session(session: LineupSession, now: float) -> None:
    session.last_access = now


def _prune_expired_sessions(now: float | None = None) -> None:
    """Remove expired sessions opportunistically."""
    global _last_cleanup
    now = now or time.time()
    if now - _last_cleanup < SESSION_CLEANUP_INTERVAL_SECONDS:
        return

    with _cleanup_lock:
        if now - _last_cleanup < SESSION_CLEANUP_INTERVAL_SECONDS:
            return

        expired: list[str] = []
        with _sessions_lock:
            for session_id, session in _sessions.items():
                lock = _session_locks.get(session_id)
                if lock and lock.locked():
                    continue
                if _is_session_expired(session, now):
                    expired.append(session_id)

            for session_id in expired:
                _sessions.pop(session_id, None)
                _session_locks.pop(session_id, None)

        _last_cleanup = now


def _get_session_with_lock(session_id: str) -> tuple[LineupSession, threading.Lock]:
    """Fetch session and its lock, creating the lock if needed."""
    _prune_expired_sessions()
    with _sessions_lock:
        session = _sessions.get(session_id)
        if not session:
            raise HTTPException(status_code=404, detail="Session not found")
        lock = _session_locks.get(session_id)
        if lock is None:
            lock = threading.Lock()
            _session_locks[session_id] = lock

    return session, lock


def _check_session_alive(session: LineupSession) -> None:
    now = time.time()
    if _is_session_expired(session, now):
        raise HTTPException(status_code=404, detail="Session expired")
    _touch_session(session, now)


def _get_service(request: Request) -> LineupService:
    return request.app.state.lineup_service


class OpenSessionRequest(BaseModel):
    team_id: str
    event_id: str


class SelectEventRequest(BaseModel):
    event_id: str


class FormationRequest(BaseModel):
    formation: str


class PlayerRequest(BaseModel):
    player: str = Field(min_length=1)


# =============================================================================
# Read-only endpoints
# =============================================================================


@router.get("/formations")
async def list_formations():
    """All formations with their slots, in picker order."""
    return {
        "formations": [
            {"key": key, "positions": [asdict(slot) for slot in get_positions(key)]}
            for key in FORMATION_KEYS
        ]
    }


@router.get("/teams/{team_id}/events")
async def list_upcoming_games(request: Request, team_id: str):
    """Game events that can still receive a lineup."""
    service = _get_service(request)
    return {"events": [_serialize_event(e) for e in service.get_upcoming_games(team_id)]}


@router.get("/teams/{team_id}/roster")
async def get_roster(request: Request, team_id: str):
    service = _get_service(request)
    return {"players": [_serialize_player(p) for p in service.get_roster(team_id)]}


@router.get("/teams/{team_id}/published")
async def list_published_lineups(
    request: Request,
    team_id: str,
    player_id: Optional[str] = None,
    player_email: Optional[str] = None,
):
    """Published lineups of upcoming games, as seen by players."""
    service = _get_service(request)
    roster = service.get_roster(team_id)
    views = service.get_published_lineups(team_id, player_id=player_id, player_email=player_email)
    return {
        "lineups": [
            {
                "event": _serialize_event(view.event),
                "lineup_id": view.lineup.id,
                "formation": view.lineup.formation,
                "positions": _serialize_positions(
                    view.lineup.formation, view.lineup.starting_lineup, roster
                ),
                "substitutes": [
                    _serialize_player(resolve(ref, roster)) for ref in view.lineup.substitutes
                ],
                "in_lineup": view.in_lineup,
            }
            for view in views
        ]
    }


# =============================================================================
# Editing sessions
# =============================================================================


@router.post("/sessions", status_code=201)
async def open_session(request: Request, body: OpenSessionRequest):
    """Open an editing session on a game's lineup."""
    _prune_expired_sessions()
    service = _get_service(request)

    machine = service.open_editor(body.team_id, body.event_id)
    session = LineupSession(
        session_id=f"lu_{uuid.uuid4().hex[:12]}",
        team_id=body.team_id,
        machine=machine,
    )

    now = time.time()
    _touch_session(session, now)
    with _sessions_lock:
        _sessions[session.session_id] = session
        _session_locks[session.session_id] = threading.Lock()

    return _serialize_session(service, session)


@router.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    """Get current session state."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        return _serialize_session(_get_service(request), session)


@router.delete("/sessions/{session_id}", status_code=204)
async def close_session(session_id: str):
    """Drop an editing session; unsaved edits are lost."""
    _, lock = _get_session_with_lock(session_id)
    with lock:
        with _sessions_lock:
            _sessions.pop(session_id, None)
            _session_locks.pop(session_id, None)


@router.put("/sessions/{session_id}/event")
async def select_event(request: Request, session_id: str, body: SelectEventRequest):
    """Switch the session to another game, replacing the draft."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        service = _get_service(request)
        service.switch_event(session.machine, session.team_id, body.event_id)
        return _serialize_session(service, session)


@router.put("/sessions/{session_id}/formation")
async def change_formation(request: Request, session_id: str, body: FormationRequest):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.change_formation(body.formation)
        return _serialize_session(_get_service(request), session)


@router.put("/sessions/{session_id}/starters/{position}")
async def assign_starter(request: Request, session_id: str, position: str, body: PlayerRequest):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.assign_starter(position, body.player)
        return _serialize_session(_get_service(request), session)


@router.delete("/sessions/{session_id}/starters/{position}")
async def remove_starter(request: Request, session_id: str, position: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.remove_starter(position)
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/substitutes")
async def add_substitute(request: Request, session_id: str, body: PlayerRequest):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.add_substitute(body.player)
        return _serialize_session(_get_service(request), session)


@router.delete("/sessions/{session_id}/substitutes/{player}")
async def remove_substitute(request: Request, session_id: str, player: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.remove_substitute(player)
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/bench-slots")
async def add_bench_slot(request: Request, session_id: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.add_bench_slot()
        return _serialize_session(_get_service(request), session)


@router.delete("/sessions/{session_id}/bench-slots/{index}")
async def remove_bench_slot(request: Request, session_id: str, index: int):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.remove_bench_slot(index)
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/clear")
async def clear_lineup(request: Request, session_id: str):
    """Empty starters and bench, keeping the formation."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.clear()
        return _serialize_session(_get_service(request), session)


@router.get("/sessions/{session_id}/available-players")
async def get_available_players(request: Request, session_id: str, search: str = ""):
    """Roster players not yet placed anywhere in the draft, grouped by position."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        roster = _get_service(request).get_roster(session.team_id)
        players = available_players(roster, session.store.assigned_players(), search)
        groups = group_by_position(players)
        return {
            "count": sum(len(group) for group in groups.values()),
            "groups": {
                position: [_serialize_player(p) for p in group]
                for position, group in groups.items()
            },
        }


@router.post("/sessions/{session_id}/save")
async def save_draft(request: Request, session_id: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.save_draft()
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/publish")
async def publish(request: Request, session_id: str):
    """Publish the lineup (or publish its update) and notify players."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.publish()
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/edit")
async def enter_edit(request: Request, session_id: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.enter_edit()
        return _serialize_session(_get_service(request), session)


@router.post("/sessions/{session_id}/cancel-edit")
async def cancel_edit(request: Request, session_id: str):
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.cancel_edit()
        return _serialize_session(_get_service(request), session)


@router.delete("/sessions/{session_id}/lineup")
async def delete_lineup(request: Request, session_id: str):
    """Delete the stored lineup of the session's game."""
    session, lock = _get_session_with_lock(session_id)
    with lock:
        _check_session_alive(session)
        session.machine.delete()
        return _serialize_session(_get_service(request), session)


# =============================================================================
# Serialization
# =============================================================================


def _serialize_event(event: EventRecord) -> dict:
    return asdict(event)


def _serialize_player(player: PlayerRecord | DisplayFallback) -> dict:
    if isinstance(player, DisplayFallback):
        return {"id": None, "ref": player.raw, "display_name": player.display_name, "resolved": False}
    return {**asdict(player), "display_name": display_name(player), "resolved": True}


def _serialize_positions(
    formation: str,
    starting: list[StartingAssignment],
    roster: list[PlayerRecord],
) -> list[dict]:
    by_position = {a.position: a for a in starting}
    positions = []
    for slot in get_positions(formation):
        assignment = by_position.get(slot.name)
        player = None
        if assignment and assignment.player:
            player = _serialize_player(resolve(assignment.player, roster))
        positions.append({**asdict(slot), "player": player})
    return positions


def _serialize_lineup_record(lineup: Lineup | None) -> dict | None:
    return lineup.to_dict() if lineup else None


def _serialize_session(service: LineupService, session: LineupSession) -> dict:
    machine = session.machine
    store = session.store
    draft = store.draft
    roster = service.get_roster(session.team_id)

    return {
        "session_id": session.session_id,
        "team_id": session.team_id,
        "event": _serialize_event(store.event) if store.event else None,
        "state": machine.state.value,
        "is_event_past": machine.is_event_past,
        "is_editable": machine.is_editable,
        "lineup": _serialize_lineup_record(store.record),
        "draft": {
            "formation": draft.formation,
            "positions": _serialize_positions(draft.formation, draft.starting, roster),
            "starting": [a.to_dict() for a in draft.starting],
            "starter_count": draft.starter_count,
            "substitutes": [
                {"ref": ref, "player": _serialize_player(resolve(ref, roster))}
                for ref in draft.substitutes
            ],
            "bench_slot_count": draft.bench_slot_count,
            "assigned_players": sorted(store.assigned_players()),
            "orphaned_positions": store.orphaned_positions(),
        },
    }
