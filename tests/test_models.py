"""
Unit tests for the data models (Seed, Slot, Match, Bracket).
"""
import pytest

from brackets.elimination import build_bracket
from brackets.models import BYE, TBD, Bracket, Match, Seed, Slot


class TestSlot:
    """Tests for the Slot model."""

    def test_default_slot_is_tbd(self):
        slot = Slot()
        assert slot.name == TBD
        assert slot.score is None
        assert slot.is_tbd
        assert not slot.is_resolved

    def test_avatar_round_trip(self):
        slot = Slot("Ana", 3, avatar="ana.png")
        assert slot.to_dict() == {'name': "Ana", 'score': 3, 'avatar': "ana.png"}
        assert Slot.from_dict(slot.to_dict()).avatar == "ana.png"
        assert Slot.from_dict({'name': "Ben"}).avatar is None

    def test_bye_slot(self):
        slot = Slot(BYE)
        assert slot.is_bye
        assert slot.is_resolved


class TestMatch:
    """Tests for the Match model."""

    def test_playable_when_both_real(self):
        match = Match(1, 0, 0, Slot("Ana"), Slot("Ben"))
        assert match.is_playable
        assert not match.is_bye
        assert not match.is_reported

    def test_not_playable_with_bye_or_tbd(self):
        assert not Match(1, 0, 0, Slot("Ana"), Slot(BYE)).is_playable
        assert not Match(1, 0, 0, Slot("Ana"), Slot()).is_playable

    def test_not_playable_once_decided(self):
        match = Match(1, 0, 0, Slot("Ana", 2), Slot("Ben", 1), winner="Ana")
        assert match.is_reported
        assert not match.is_playable

    def test_slot_lookup(self):
        match = Match(1, 0, 0, Slot("Ana"), Slot("Ben"))
        assert match.slot('top').name == "Ana"
        assert match.slot('bottom').name == "Ben"
        with pytest.raises(ValueError):
            match.slot('left')

    def test_repr(self):
        assert "Ana vs Ben" in repr(Match(1, 0, 0, Slot("Ana"), Slot("Ben")))


class TestBracket:
    """Tests for the Bracket model."""

    def test_from_dict_restores_addresses(self):
        original = build_bracket(["A", "B", "C", "D", "E", "F"])
        restored = Bracket.from_dict(original.to_dict())
        assert restored.to_dict() == original.to_dict()
        match = restored.match_at(1, 1)
        assert (match.round_index, match.index) == (1, 1)
        assert restored.participant_count == 6
        assert [s.name for s in restored.seeds] == ["A", "B", "C", "D", "E", "F"]

    def test_seed_repr(self):
        assert "Ana" in repr(Seed("Ana", 1))
