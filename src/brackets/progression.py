"""
Applying reported results and advancing winners through the bracket.
"""
import logging
from typing import Dict, Union

from .elimination import assign_slot, find_match, next_slot, resolve_byes
from .errors import AlreadyReported, CorruptBracket, MatchNotReady
from .formats import GameMode
from .models import Bracket
from .scoring import ScoreReport, validate_score_report

logger = logging.getLogger(__name__)


def apply_score_report(bracket: Bracket, report: ScoreReport) -> Bracket:
    """
    Record a validated result and move the winner into the next round.

    The winner of round k match j goes to round k+1 match j // 2, top slot
    for even j and bottom slot for odd j. Nothing is changed if the report
    is rejected.
    """
    match = find_match(bracket, report.match_id)

    if match.winner is not None and match.is_reported:
        raise AlreadyReported(match.id)
    if match.is_bye:
        raise MatchNotReady(f"Match {match.id} is a bye and needs no result")
    if match.top.is_tbd or match.bottom.is_tbd:
        raise MatchNotReady(f"Match {match.id} is still waiting for both competitors")
    if match.winner is not None:
        raise CorruptBracket(f"Match {match.id} has winner '{match.winner}' but no scores")

    winning_slot = match.slot(report.winner_slot)
    winner = winning_slot.name
    target = next_slot(bracket, match)
    if target is not None and not target[0].slot(target[1]).is_tbd:
        next_match, side = target
        logger.error("Match %s feeds %s slot of %s, which already holds %s",
                     match.code, side, next_match.code, next_match.slot(side).name)
        raise CorruptBracket(
            f"{side.capitalize()} slot of match {next_match.id} is already filled"
        )

    match.top.score = report.top_score
    match.bottom.score = report.bottom_score
    match.winner = winner
    logger.info("Match %s: %s %d-%d %s, winner %s", match.code, match.top.name,
                report.top_score, report.bottom_score, match.bottom.name, winner)

    if target is None:
        logger.info("Champion decided: %s", winner)
        return bracket

    assign_slot(target[0], target[1], winner, winning_slot.avatar)
    resolve_byes(bracket)
    return bracket


def report_score(bracket: Bracket, match_id: int, top_score, bottom_score,
                 scoring: Union[GameMode, Dict, int]) -> Bracket:
    """Validate a result and apply it to the bracket in place."""
    report = validate_score_report(match_id, top_score, bottom_score, scoring)
    return apply_score_report(bracket, report)
