"""Pytest fixtures: temporary SQLite store, seeded players/games, API client.

Provides fixtures for testing including:
- Database setup (schema applied, per-test file under tmp_path)
- Seeded players and a Scheduled game
- FastAPI TestClient wired to the same database
"""

import pytest

import state
from game_repo import GameRepo
from games import service as g_service

PLAYER_IDS = [f"p{i}" for i in range(1, 15)]


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture
def db_path(tmp_path):
    """Path to a fresh, initialized database."""
    path = tmp_path / "squad.sqlite3"
    with GameRepo(path) as repo:
        repo.init_db()
    return str(path)


@pytest.fixture
def repo(db_path):
    """Open GameRepo on the test database (closed after the test)."""
    r = GameRepo(db_path)
    yield r
    r.close()


@pytest.fixture
def players(repo):
    """Fourteen registered players p1..p14 with kit numbers."""
    for n, pid in enumerate(PLAYER_IDS, start=1):
        repo.upsert_player(pid, full_name=f"Player {n}", team_id="t1", kit_number=n)
    return list(PLAYER_IDS)


@pytest.fixture
def game(repo, players):
    """A Scheduled game for team t1."""
    return g_service.create_game(repo, team_id="t1", opponent="Rivals FC", game_date="2026-05-02")


@pytest.fixture
def played_game(repo, game):
    """A game moved to Played with an 11-player starting lineup."""
    g_service.start_game(repo, game.game_id, full_lineup())
    return g_service.get_game(repo, game.game_id)


@pytest.fixture
def done_game(repo, played_game):
    g_service.submit_report(repo, played_game.game_id, full_report())
    return g_service.get_game(repo, played_game.game_id)


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
def client(db_path, monkeypatch):
    """TestClient with startup run against the temporary database."""
    from fastapi.testclient import TestClient

    from app.main import app

    monkeypatch.setenv("SQUAD_DB_PATH", db_path)
    monkeypatch.delenv("SQUAD_ADMIN_TOKEN", raising=False)
    with TestClient(app) as c:
        yield c
    state.reset_db_path()


# ============================================================================
# PAYLOAD HELPERS
# ============================================================================

def full_lineup(starting=11, formation_type="1-4-3-3"):
    rosters = {pid: "Starting Lineup" for pid in PLAYER_IDS[:starting]}
    rosters.update({pid: "Bench" for pid in PLAYER_IDS[starting:]})
    return {
        "rosters": rosters,
        "formation": {"gk": "p1", "lines": [4, 3, 3]},
        "formationType": formation_type,
    }


def full_report(our=2, opponent=1):
    return {
        "finalScore": {"ourScore": our, "opponentScore": opponent},
        "teamSummary": {
            "defenseSummary": "Solid back line.",
            "midfieldSummary": "Won the second balls.",
            "attackSummary": "Clinical on the break.",
            "generalSummary": "Deserved win.",
        },
    }
