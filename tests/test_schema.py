"""SQLite schema: tables, columns and idempotent re-application."""

from game_repo import GameRepo
from games import service as g_service


def columns(repo, table):
    with repo.transaction() as cur:
        return {r["name"]: r for r in cur.execute(f"PRAGMA table_info({table});").fetchall()}


def test_games_table_carries_match_type(repo):
    cols = columns(repo, "games")
    assert "match_type" in cols
    assert cols["match_type"]["notnull"] == 1
    assert cols["match_type"]["dflt_value"] == "'league'"


def test_match_type_defaults_to_league(repo):
    with repo.transaction() as cur:
        cur.execute(
            "INSERT INTO games(game_id, team_id, opponent, created_at, updated_at) VALUES (?, ?, ?, ?, ?);",
            ("raw", "t1", "X", "2026-01-01T00:00:00Z", "2026-01-01T00:00:00Z"),
        )
    assert g_service.get_game(repo, "raw").match_type == "league"


def test_init_db_is_idempotent(db_path, repo, players):
    before = columns(repo, "games")
    with GameRepo(db_path) as again:
        again.init_db()
        again.init_db()
    assert columns(repo, "games").keys() == before.keys()
    with repo.transaction() as cur:
        indexes = {r["name"] for r in cur.execute("SELECT name FROM sqlite_master WHERE type='index';").fetchall()}
        assert cur.execute("SELECT COUNT(*) FROM players;").fetchone()[0] == len(players)
    assert {"idx_games_team_id", "idx_games_status", "idx_game_rosters_player"} <= indexes
