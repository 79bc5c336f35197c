"""Card service: persistence, eligibility and job enqueue in one transaction."""

from unittest.mock import patch

import pytest

from games.errors import INVALID_CARD, NOT_FOUND, GameEngineError
from jobs import repo as j_repo
from match_events import service as m_service


def jobs_for(repo, game_id):
    with repo.transaction() as cur:
        return j_repo.list_jobs(cur, game_id=game_id)


class TestCreateCard:
    def test_red_enqueues_exactly_one_job(self, repo, played_game):
        result = m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="red", minute=55)
        jobs = jobs_for(repo, played_game.game_id)
        assert len(jobs) == 1
        assert jobs[0].job_type == "recalc-minutes"
        assert jobs[0].payload == {"gameId": played_game.game_id}
        assert jobs[0].status == "pending"
        assert result.job.job_id == jobs[0].job_id

    def test_yellow_enqueues_nothing(self, repo, played_game):
        result = m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="yellow", minute=12)
        assert result.job is None
        assert jobs_for(repo, played_game.game_id) == []
        assert [c.card_id for c in m_service.list_cards(repo, played_game.game_id)] == [result.card.card_id]

    def test_second_yellow_requires_yellow(self, repo, played_game):
        with pytest.raises(GameEngineError) as exc:
            m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="second-yellow", minute=70)
        assert exc.value.code == INVALID_CARD
        assert m_service.list_cards(repo, played_game.game_id) == []

        m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="yellow", minute=20)
        m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="second-yellow", minute=70)
        with pytest.raises(GameEngineError) as exc:
            m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="red", minute=80)
        assert exc.value.code == INVALID_CARD

    @pytest.mark.parametrize("game_id,player_id", [("missing", "p3"), (None, "ghost")])
    def test_not_found(self, repo, played_game, game_id, player_id):
        with pytest.raises(GameEngineError) as exc:
            m_service.create_card(
                repo, game_id or played_game.game_id, player_id=player_id, card_type="red", minute=5
            )
        assert exc.value.code == NOT_FOUND

    def test_job_insert_failure_rolls_back_card(self, repo, played_game):
        with patch.object(j_repo, "enqueue_job", side_effect=RuntimeError("queue down")):
            with pytest.raises(RuntimeError):
                m_service.create_card(repo, played_game.game_id, player_id="p3", card_type="red", minute=5)
        assert m_service.list_cards(repo, played_game.game_id) == []
        assert jobs_for(repo, played_game.game_id) == []


class TestUpdateCard:
    def test_yellow_to_second_yellow_enqueues(self, repo, played_game):
        gid = played_game.game_id
        m_service.create_card(repo, gid, player_id="p3", card_type="yellow", minute=10)
        second = m_service.create_card(repo, gid, player_id="p4", card_type="yellow", minute=30)

        # p4's yellow is reassigned to p3, who already holds one yellow
        result = m_service.update_card(repo, gid, second.card.card_id, player_id="p3", card_type="second-yellow")
        assert result.card.card_type == "second-yellow"
        assert result.card.player_id == "p3"
        assert len(jobs_for(repo, gid)) == 1

    def test_yellow_minute_change_enqueues_nothing(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="yellow", minute=10).card
        result = m_service.update_card(repo, gid, card.card_id, minute=15)
        assert result.card.minute == 15
        assert result.job is None
        assert jobs_for(repo, gid) == []

    def test_red_minute_change_enqueues(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="red", minute=10).card
        m_service.update_card(repo, gid, card.card_id, minute=40)
        assert len(jobs_for(repo, gid)) == 2

    def test_invalid_type_change(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="yellow", minute=10).card
        with pytest.raises(GameEngineError) as exc:
            m_service.update_card(repo, gid, card.card_id, card_type="second-yellow")
        assert exc.value.code == INVALID_CARD
        assert m_service.list_cards(repo, gid)[0].card_type == "yellow"

    def test_unknown_card(self, repo, played_game):
        with pytest.raises(GameEngineError) as exc:
            m_service.update_card(repo, played_game.game_id, "nope", minute=3)
        assert exc.value.code == NOT_FOUND


class TestDeleteCard:
    def test_delete_red_enqueues(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="red", minute=10).card
        result = m_service.delete_card(repo, gid, card.card_id)
        assert result.job is not None
        assert len(jobs_for(repo, gid)) == 2
        assert m_service.list_cards(repo, gid) == []

    def test_delete_yellow_enqueues_nothing(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="yellow", minute=10).card
        assert m_service.delete_card(repo, gid, card.card_id).job is None
        assert jobs_for(repo, gid) == []

    def test_delete_twice(self, repo, played_game):
        gid = played_game.game_id
        card = m_service.create_card(repo, gid, player_id="p3", card_type="yellow", minute=10).card
        m_service.delete_card(repo, gid, card.card_id)
        with pytest.raises(GameEngineError) as exc:
            m_service.delete_card(repo, gid, card.card_id)
        assert exc.value.code == NOT_FOUND
