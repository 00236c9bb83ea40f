"""
Errors raised by bracket construction, score reporting and the tournament lifecycle.
"""


class BracketError(Exception):
    """Base class for all bracket engine errors."""
    recoverable = True


class InsufficientParticipants(BracketError):
    def __init__(self, count):
        super().__init__(f"At least 2 participants are required, got {count}")
        self.count = count


class InvalidSeed(BracketError):
    pass


class InvalidScore(BracketError):
    pass


class TiedScore(BracketError):
    def __init__(self, score):
        super().__init__(f"Scores cannot be equal ({score}-{score}); draws are not allowed")
        self.score = score


class MatchNotFound(BracketError):
    def __init__(self, match_id):
        super().__init__(f"No match with id {match_id}")
        self.match_id = match_id


class MatchNotReady(BracketError):
    pass


class AlreadyReported(BracketError):
    def __init__(self, match_id):
        super().__init__(f"A result for match {match_id} has already been reported")
        self.match_id = match_id


class CorruptBracket(BracketError):
    """A bracket invariant was violated; indicates a bug, not bad input."""
    recoverable = False


class InvalidTransition(BracketError):
    pass


class UnknownGameMode(BracketError):
    def __init__(self, key):
        super().__init__(f"Unknown game mode: {key}")
        self.key = key
