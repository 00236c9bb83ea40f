"""
Tournament lifecycle: scheduled -> live -> finished, with reset back to scheduled.

The Tournament owns its bracket. Seeding happens only while scheduled,
results are accepted only while live, and a reset discards the bracket
so the next start reseeds from scratch.
"""
import logging
from typing import Dict, Iterable, List, Optional, Union

from .elimination import build_bracket, get_champion, normalize_seeds
from .errors import CorruptBracket, InsufficientParticipants, InvalidTransition
from .formats import GameMode
from .models import TBD, Bracket, Seed, TournamentState
from .progression import report_score

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    TournamentState.SCHEDULED: {TournamentState.LIVE},
    TournamentState.LIVE: {TournamentState.FINISHED, TournamentState.SCHEDULED},
    TournamentState.FINISHED: {TournamentState.SCHEDULED},
}


class Tournament:
    def __init__(self, name, participants=None, state=TournamentState.SCHEDULED,
                 bracket=None, seeded_names=None):
        if state not in TournamentState.ALL:
            raise ValueError(f"Unknown tournament state: {state}")
        self.name = name
        self.participants: List[Seed] = normalize_seeds(participants or [])
        self.state = state
        self.bracket: Optional[Bracket] = bracket
        self.seeded_names = list(seeded_names) if seeded_names else None

    @property
    def champion(self) -> str:
        return get_champion(self.bracket)

    @property
    def is_live(self) -> bool:
        return self.state == TournamentState.LIVE

    def _transition(self, new_state: str) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransition(f"Tournament '{self.name}' cannot go from {self.state} to {new_state}")
        logger.info("Tournament '%s': %s -> %s", self.name, self.state, new_state)
        self.state = new_state

    def _participant_names(self) -> List[str]:
        return [s.name for s in self.participants]

    def set_participants(self, participants: Iterable[Union[str, Dict, Seed]]) -> None:
        """Replace the accepted participant list. Only allowed while scheduled."""
        if self.state != TournamentState.SCHEDULED:
            raise InvalidTransition(f"Participants of '{self.name}' can only change while scheduled")
        seeds = normalize_seeds(participants)
        if [s.name for s in seeds] != self._participant_names():
            if self.bracket is not None:
                logger.info("Tournament '%s': participants changed, dropping seeded bracket", self.name)
            self.bracket = None
            self.seeded_names = None
        self.participants = seeds

    def seed(self) -> Bracket:
        """Build (or rebuild) the bracket from the current participants while scheduled."""
        if self.state != TournamentState.SCHEDULED:
            raise InvalidTransition(f"Tournament '{self.name}' can only be seeded while scheduled")
        self.bracket = build_bracket(self.participants)
        self.seeded_names = self._participant_names()
        return self.bracket

    def needs_reseed(self) -> bool:
        return self.bracket is None or self.seeded_names != self._participant_names()

    def start(self) -> Bracket:
        if self.state != TournamentState.SCHEDULED:
            raise InvalidTransition(f"Tournament '{self.name}' cannot go from {self.state} to {TournamentState.LIVE}")
        if len(self.participants) < 2:
            raise InsufficientParticipants(len(self.participants))
        if self.needs_reseed():
            self.seed()
        self._transition(TournamentState.LIVE)
        return self.bracket

    def report_score(self, match_id: int, top_score, bottom_score,
                     scoring: Union[GameMode, Dict, int]) -> Bracket:
        if not self.is_live:
            raise InvalidTransition(f"Scores can only be reported while '{self.name}' is live")
        if self.bracket is None:
            raise CorruptBracket(f"Tournament '{self.name}' is live but has no bracket")
        report_score(self.bracket, match_id, top_score, bottom_score, scoring)
        return self.bracket

    def finish(self) -> None:
        # Allowed with matches still open; organizers may close a tournament early.
        self._transition(TournamentState.FINISHED)
        if self.champion == TBD:
            logger.warning("Tournament '%s' finished without a champion", self.name)
        else:
            logger.info("Tournament '%s' finished, champion %s", self.name, self.champion)

    def reset(self) -> None:
        """Discard the bracket and seeding. Accepted participants are kept."""
        self._transition(TournamentState.SCHEDULED)
        self.bracket = None
        self.seeded_names = None

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'state': self.state,
            'participants': [s.to_dict() for s in self.participants],
            'seeded_names': self.seeded_names,
            'bracket': self.bracket.to_dict() if self.bracket else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tournament':
        bracket = data.get('bracket')
        return cls(
            name=data['name'],
            participants=data.get('participants') or [],
            state=data.get('state', TournamentState.SCHEDULED),
            bracket=Bracket.from_dict(bracket) if bracket else None,
            seeded_names=data.get('seeded_names'),
        )

    def __repr__(self):
        return f"Tournament(name={self.name}, state={self.state}, participants={len(self.participants)})"
