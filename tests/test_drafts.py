"""Draft store: slot selection, shallow merge, status guard, clear."""

import pytest

from games.drafts import clear_draft, merge_draft, read_draft, write_draft
from games.errors import INVALID_DRAFT, INVALID_STATUS, GameEngineError
from games.lifecycle import check_draft_invariant
from games.types import DraftKind, DraftSlot, Game


def make_game(status="Scheduled", draft=None):
    return Game(game_id="g1", team_id="t1", opponent="Rivals FC", status=status, draft=draft or DraftSlot.empty())


class TestMergeDraft:
    def test_sibling_key_preserved_target_replaced(self):
        assert merge_draft({"A": "y", "B": "z"}, {"A": "x"}) == {"A": "x", "B": "z"}

    def test_nested_map_replaced_wholesale(self):
        existing = {"playerMatchStats": {"p1": {"shots": 2}, "p2": {"shots": 1}}}
        merged = merge_draft(existing, {"playerMatchStats": {"p1": {"shots": 3}}})
        assert merged == {"playerMatchStats": {"p1": {"shots": 3}}}

    def test_inputs_not_aliased(self):
        existing = {"rosters": {"p1": "Bench"}}
        partial = {"formation": {"lines": [4, 4, 2]}}
        merged = merge_draft(existing, partial)
        merged["rosters"]["p1"] = "Starting Lineup"
        merged["formation"]["lines"].append(9)
        assert existing == {"rosters": {"p1": "Bench"}}
        assert partial == {"formation": {"lines": [4, 4, 2]}}

    def test_none_existing(self):
        assert merge_draft(None, {"A": 1}) == {"A": 1}


class TestReadDraft:
    def test_scheduled_reads_lineup_slot(self):
        game = make_game(draft=DraftSlot.lineup({"formation": "1-4-4-2"}))
        slot = read_draft(game)
        assert slot.kind is DraftKind.LINEUP
        assert slot.data == {"formation": "1-4-4-2"}

    def test_empty_slot_reads_as_empty_object(self):
        slot = read_draft(make_game(status="Played"))
        assert slot.kind is DraftKind.REPORT
        assert slot.data == {}

    @pytest.mark.parametrize("status", ["Done", "Postponed"])
    def test_no_slot_for_closed_statuses(self, status):
        draft = DraftSlot.lineup({"formation": "1-4-4-2"}) if status == "Postponed" else None
        slot = read_draft(make_game(status=status, draft=draft))
        assert slot.kind is DraftKind.NONE
        assert slot.to_api() == {"slot": "none", "data": {}}


class TestWriteDraft:
    def test_autosave_scenario(self):
        game = make_game()
        game = write_draft(game, {"rosters": {"p1": "Starting Lineup"}})
        game = write_draft(game, {"formation": "1-4-3-3"})
        assert game.lineup_draft == {"rosters": {"p1": "Starting Lineup"}, "formation": "1-4-3-3"}
        assert game.report_draft is None
        check_draft_invariant(game)

    def test_played_writes_report_slot_only(self):
        game = write_draft(make_game(status="Played"), {"finalScore": {"ourScore": 1}})
        assert game.report_draft == {"finalScore": {"ourScore": 1}}
        assert game.lineup_draft is None
        check_draft_invariant(game)

    def test_input_game_not_mutated(self):
        game = make_game(draft=DraftSlot.lineup({"A": 1}))
        write_draft(game, {"A": 2})
        assert game.lineup_draft == {"A": 1}

    @pytest.mark.parametrize("status", ["Done", "Postponed"])
    def test_rejected_for_closed_statuses(self, status):
        game = make_game(status=status)
        with pytest.raises(GameEngineError) as exc:
            write_draft(game, {"A": 1})
        assert exc.value.code == INVALID_STATUS
        assert status in exc.value.message
        assert game.draft == DraftSlot.empty()

    @pytest.mark.parametrize("payload", [{}, ["not", "a", "map"], "text"])
    def test_invalid_payload(self, payload):
        with pytest.raises(GameEngineError) as exc:
            write_draft(make_game(), payload)
        assert exc.value.code == INVALID_DRAFT


class TestClearDraft:
    def test_clears_held_slot(self):
        game = clear_draft(make_game(draft=DraftSlot.lineup({"A": 1})), DraftKind.LINEUP)
        assert game.draft == DraftSlot.empty()

    def test_idempotent_and_ignores_other_slot(self):
        game = make_game(draft=DraftSlot.lineup({"A": 1}))
        assert clear_draft(game, "report") is game
        once = clear_draft(game, "lineup")
        assert clear_draft(once, "lineup") == once


class TestDraftSlot:
    def test_empty_slot_rejects_data(self):
        with pytest.raises(ValueError):
            DraftSlot(DraftKind.NONE, {"A": 1})

    def test_union_exposes_at_most_one_slot(self):
        api = make_game(draft=DraftSlot.lineup({"A": 1})).to_api()
        assert api["lineupDraft"] == {"A": 1}
        assert api["reportDraft"] is None
