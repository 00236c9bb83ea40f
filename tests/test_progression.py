"""
Unit tests for reporting results and advancing winners.
"""
import pytest

from conftest import player_names
from brackets.elimination import build_bracket, find_match, get_champion, playable_matches
from brackets.errors import (
    AlreadyReported,
    CorruptBracket,
    InvalidScore,
    MatchNotFound,
    MatchNotReady,
    TiedScore,
)
from brackets.models import TBD
from brackets.progression import apply_score_report, report_score
from brackets.scoring import ScoreReport

SCORING = {'max_score': 10}


def slot_names(bracket):
    return {
        (m.id, side): m.slot(side).name
        for m in bracket.iter_matches()
        for side in ('top', 'bottom')
    }


def slot_scores(bracket):
    return {
        (m.id, side): m.slot(side).score
        for m in bracket.iter_matches()
        for side in ('top', 'bottom')
    }


class TestReportScore:
    """Tests for recording a single result."""

    def test_two_player_final(self):
        bracket = build_bracket(["Ana", "Ben"])
        report_score(bracket, 1, 3, 1, SCORING)
        final = bracket.final_match
        assert (final.top.score, final.bottom.score) == (3, 1)
        assert final.winner == "Ana"
        assert get_champion(bracket) == "Ana"

    def test_bottom_winner(self):
        bracket = build_bracket(["Ana", "Ben"])
        report_score(bracket, 1, 0, 2, SCORING)
        assert get_champion(bracket) == "Ben"

    def test_tie_leaves_bracket_unchanged(self, eight_players):
        bracket = build_bracket(eight_players)
        before = bracket.to_dict()
        with pytest.raises(TiedScore):
            report_score(bracket, 1, 5, 5, SCORING)
        assert bracket.to_dict() == before

    def test_invalid_score_leaves_bracket_unchanged(self, eight_players):
        bracket = build_bracket(eight_players)
        before = bracket.to_dict()
        with pytest.raises(InvalidScore):
            report_score(bracket, 1, 11, 2, SCORING)
        assert bracket.to_dict() == before

    def test_unknown_match(self, eight_players):
        bracket = build_bracket(eight_players)
        with pytest.raises(MatchNotFound):
            report_score(bracket, 42, 2, 1, SCORING)

    def test_already_reported(self, eight_players):
        bracket = build_bracket(eight_players)
        report_score(bracket, 1, 2, 1, SCORING)
        before = bracket.to_dict()
        with pytest.raises(AlreadyReported):
            report_score(bracket, 1, 0, 3, SCORING)
        assert bracket.to_dict() == before

    def test_match_waiting_for_competitors(self, five_players):
        bracket = build_bracket(five_players)
        # Semifinal 5 still waits for the play-in winner.
        with pytest.raises(MatchNotReady):
            report_score(bracket, 5, 2, 1, SCORING)

    def test_bye_match_needs_no_result(self, five_players):
        bracket = build_bracket(five_players)
        with pytest.raises(MatchNotReady):
            report_score(bracket, 1, 2, 1, SCORING)

    def test_filled_target_slot_is_corruption(self, five_players):
        bracket = build_bracket(five_players)
        bracket.rounds[1].matches[0].bottom.name = "Intruder"
        play_in = find_match(bracket, 2)
        with pytest.raises(CorruptBracket):
            apply_score_report(bracket, ScoreReport(2, 'top', 3, 1))
        assert play_in.winner is None
        assert play_in.top.score is None and play_in.bottom.score is None


class TestPropagation:
    """Tests for moving winners into the next round."""

    @pytest.mark.parametrize("index, side", [(0, 'top'), (1, 'bottom'), (2, 'top'), (3, 'bottom')])
    def test_winner_lands_in_parity_slot(self, eight_players, index, side):
        bracket = build_bracket(eight_players)
        match = bracket.rounds[0].matches[index]
        names_before = slot_names(bracket)
        scores_before = slot_scores(bracket)

        report_score(bracket, match.id, 1, 4, SCORING)

        target = bracket.rounds[1].matches[index // 2]
        assert target.slot(side).name == match.bottom.name

        names_after = slot_names(bracket)
        changed = {key for key in names_after if names_after[key] != names_before[key]}
        assert changed == {(target.id, side)}

        scores_after = slot_scores(bracket)
        changed_scores = {key for key in scores_after if scores_after[key] != scores_before[key]}
        assert changed_scores == {(match.id, 'top'), (match.id, 'bottom')}

    def test_play_in_winner_meets_top_seed(self, five_players):
        bracket = build_bracket(five_players)
        report_score(bracket, 2, 3, 1, SCORING)
        semifinal = find_match(bracket, 5)
        assert (semifinal.top.name, semifinal.bottom.name) == ("Player 1", "Player 4")
        assert semifinal.is_playable

    def test_final_result_crowns_champion(self, five_players):
        bracket = build_bracket(five_players)
        report_score(bracket, 2, 3, 1, SCORING)
        report_score(bracket, 5, 1, 2, SCORING)
        report_score(bracket, 6, 2, 0, SCORING)
        assert get_champion(bracket) == TBD

        final = bracket.final_match
        assert (final.top.name, final.bottom.name) == ("Player 4", "Player 2")
        report_score(bracket, final.id, 4, 6, SCORING)

        assert get_champion(bracket) == "Player 2"
        assert playable_matches(bracket) == []

    def test_full_bracket_plays_out(self):
        """Top slot always wins; the top seed becomes champion."""
        for n in (2, 3, 5, 6, 9, 13, 16):
            bracket = build_bracket(player_names(n))
            while playable_matches(bracket):
                match = playable_matches(bracket)[0]
                report_score(bracket, match.id, 2, 1, SCORING)
            assert get_champion(bracket) == "Player 1", f"n={n}"
            assert all(m.winner for m in bracket.iter_matches())
