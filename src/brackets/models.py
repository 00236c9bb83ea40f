"""
Bracket data model: seeds, slots, matches, rounds and the bracket itself.
"""

TBD = 'TBD'
BYE = 'BYE'
RESERVED_NAMES = {TBD, BYE}


class TournamentState:
    SCHEDULED = 'scheduled'
    LIVE = 'live'
    FINISHED = 'finished'

    ALL = (SCHEDULED, LIVE, FINISHED)


class Seed:
    def __init__(self, name, seed, avatar=None):
        self.name = name
        self.seed = seed
        self.avatar = avatar

    def to_dict(self):
        return {'name': self.name, 'seed': self.seed, 'avatar': self.avatar}

    @classmethod
    def from_dict(cls, data):
        return cls(name=data['name'], seed=data['seed'], avatar=data.get('avatar'))

    def __repr__(self):
        return f"Seed(name={self.name}, seed={self.seed})"


class Slot:
    def __init__(self, name=TBD, score=None, avatar=None):
        self.name = name
        self.score = score
        self.avatar = avatar

    @property
    def is_bye(self):
        return self.name == BYE

    @property
    def is_tbd(self):
        return self.name == TBD

    @property
    def is_resolved(self):
        return self.name != TBD

    def to_dict(self):
        return {'name': self.name, 'score': self.score, 'avatar': self.avatar}

    @classmethod
    def from_dict(cls, data):
        return cls(name=data.get('name', TBD), score=data.get('score'), avatar=data.get('avatar'))

    def __repr__(self):
        return f"Slot(name={self.name}, score={self.score})"


class Match:
    def __init__(self, id, round_index, index, top=None, bottom=None, winner=None):
        self.id = id
        self.round_index = round_index  # 0-based
        self.index = index  # position within the round, 0-based
        self.top = top if top else Slot()
        self.bottom = bottom if bottom else Slot()
        self.winner = winner

    @property
    def code(self):
        return f"W{self.round_index + 1}-M{self.index + 1}"

    @property
    def is_bye(self):
        return self.top.is_bye or self.bottom.is_bye

    @property
    def is_reported(self):
        return self.top.score is not None and self.bottom.score is not None

    @property
    def is_playable(self):
        """Both competitors known, neither is a bye, and no winner yet."""
        return (self.top.is_resolved and self.bottom.is_resolved
                and not self.is_bye and self.winner is None)

    def slot(self, side):
        if side == 'top':
            return self.top
        if side == 'bottom':
            return self.bottom
        raise ValueError(f"Unknown slot side: {side}")

    def to_dict(self):
        return {
            'id': self.id,
            'code': self.code,
            'top': self.top.to_dict(),
            'bottom': self.bottom.to_dict(),
            'winner': self.winner,
            'is_bye': self.is_bye,
            'is_playable': self.is_playable,
        }

    @classmethod
    def from_dict(cls, data, round_index, index):
        return cls(
            id=data['id'],
            round_index=round_index,
            index=index,
            top=Slot.from_dict(data.get('top', {})),
            bottom=Slot.from_dict(data.get('bottom', {})),
            winner=data.get('winner'),
        )

    def __repr__(self):
        return f"Match(id={self.id}, {self.top.name} vs {self.bottom.name}, winner={self.winner})"


class Round:
    def __init__(self, name, matches):
        self.name = name
        self.matches = matches

    def to_dict(self):
        return {'name': self.name, 'matches': [m.to_dict() for m in self.matches]}

    @classmethod
    def from_dict(cls, data, round_index):
        matches = [Match.from_dict(m, round_index, i) for i, m in enumerate(data.get('matches', []))]
        return cls(name=data['name'], matches=matches)

    def __repr__(self):
        return f"Round(name={self.name}, matches={len(self.matches)})"


class Bracket:
    """All rounds of a single elimination bracket, addressed by (round, match) index."""

    def __init__(self, rounds, bracket_size, bye_count, seeds=None):
        self.rounds = rounds
        self.bracket_size = bracket_size
        self.bye_count = bye_count
        self.seeds = seeds if seeds else []

    @property
    def participant_count(self):
        return self.bracket_size - self.bye_count

    @property
    def final_match(self):
        return self.rounds[-1].matches[0] if self.rounds else None

    def match_at(self, round_index, index):
        return self.rounds[round_index].matches[index]

    def iter_matches(self):
        for round_ in self.rounds:
            for match in round_.matches:
                yield match

    def to_dict(self):
        return {
            'bracket_size': self.bracket_size,
            'bye_count': self.bye_count,
            'seeds': [s.to_dict() for s in self.seeds],
            'rounds': [r.to_dict() for r in self.rounds],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            rounds=[Round.from_dict(r, i) for i, r in enumerate(data.get('rounds', []))],
            bracket_size=data['bracket_size'],
            bye_count=data['bye_count'],
            seeds=[Seed.from_dict(s) for s in data.get('seeds', [])],
        )

    def __repr__(self):
        return f"Bracket(size={self.bracket_size}, byes={self.bye_count}, rounds={len(self.rounds)})"
