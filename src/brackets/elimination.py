"""
Single elimination bracket generation and bye resolution.
"""
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import CorruptBracket, InsufficientParticipants, InvalidSeed, MatchNotFound
from .models import BYE, RESERVED_NAMES, TBD, Bracket, Match, Round, Seed, Slot

logger = logging.getLogger(__name__)


def get_round_name(matches_in_round: int, round_number: int) -> str:
    """Get the name of a round based on number of matches in it."""
    if matches_in_round == 1:
        return "Final"
    elif matches_in_round == 2:
        return "Semifinals"
    else:
        return f"Round {round_number}"


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_participants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_participants)
    return bracket_size - num_participants


def normalize_seeds(participants: Iterable[Union[str, Dict, Seed]]) -> List[Seed]:
    """
    Turn the accepted participant list into an ordered seed list.

    Entries may be plain names, dicts with 'name' and optional 'avatar'/'seed',
    or Seed objects. List order is the seed order; explicit seed ranks are
    renumbered to 1..n by that order.
    """
    seeds = []
    seen = set()
    for position, entry in enumerate(participants, start=1):
        if isinstance(entry, Seed):
            name, avatar = entry.name, entry.avatar
        elif isinstance(entry, dict):
            name, avatar = entry.get('name'), entry.get('avatar')
        else:
            name, avatar = entry, None

        name = str(name).strip() if name is not None else ''
        if not name:
            raise InvalidSeed(f"Participant #{position} has no name")
        if name in RESERVED_NAMES:
            raise InvalidSeed(f"'{name}' is a reserved name and cannot be used by a participant")
        if name in seen:
            raise InvalidSeed(f"Duplicate participant name: {name}")
        seen.add(name)
        seeds.append(Seed(name=name, seed=position, avatar=avatar))
    return seeds


def _generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 positions: [1, 8, 4, 5, 2, 7, 3, 6]
    """
    if bracket_size == 1:
        return [1]
    if bracket_size == 2:
        return [1, 2]

    # Recursive generation
    half_size = bracket_size // 2
    upper_half = _generate_bracket_order(half_size)

    # Create lower half as complement
    lower_half = [bracket_size + 1 - seed for seed in upper_half]

    # Interleave: pair each upper seed with its complement
    result = []
    for u, l in zip(upper_half, lower_half):
        result.extend([u, l])

    return result


def create_first_round_pairings(seeds: List[Seed], bracket_size: int) -> List[Tuple[str, str]]:
    """
    Pair seeds for the first round.

    The top seeds (one per bye) each get a walkover. Their matches sit where
    the standard bracket order puts match-seeds 1..byes, so bye holders are
    spread over the bracket instead of clustered. The remaining seeds are
    paired consecutively (3v4, 5v6, ...) into the free positions, left to right.
    The bye alternates between the bottom and top slot by seed order.

    Returns list of (top_name, bottom_name) tuples in bracket order.
    """
    num_matches = bracket_size // 2
    num_byes = bracket_size - len(seeds)
    bye_seeds = seeds[:num_byes]
    play_in_seeds = seeds[num_byes:]

    pairings: List[Optional[Tuple[str, str]]] = [None] * num_matches
    for position, match_seed in enumerate(_generate_bracket_order(num_matches)):
        if match_seed <= num_byes:
            i = match_seed - 1
            name = bye_seeds[i].name
            pairings[position] = (name, BYE) if i % 2 == 0 else (BYE, name)

    play_in_pairs = iter(zip(play_in_seeds[0::2], play_in_seeds[1::2]))
    for position in range(num_matches):
        if pairings[position] is None:
            top, bottom = next(play_in_pairs)
            pairings[position] = (top.name, bottom.name)

    return pairings


def build_bracket(participants: Iterable[Union[str, Dict, Seed]]) -> Bracket:
    """
    Build a full single elimination bracket from an ordered participant list.

    Round 1 holds the seeded pairings (byes included), later rounds start with
    every slot set to TBD. Bye winners are pushed forward before returning.
    The same input always yields the same bracket.
    """
    seeds = normalize_seeds(participants)
    if len(seeds) < 2:
        raise InsufficientParticipants(len(seeds))

    bracket_size = calculate_bracket_size(len(seeds))
    total_rounds = int(math.log2(bracket_size))

    rounds = []
    match_id = 1
    num_matches = bracket_size // 2
    for round_index in range(total_rounds):
        matches = []
        for index in range(num_matches):
            matches.append(Match(id=match_id, round_index=round_index, index=index))
            match_id += 1
        rounds.append(Round(get_round_name(num_matches, round_index + 1), matches))
        num_matches //= 2

    avatars = {s.name: s.avatar for s in seeds}
    for match, (top, bottom) in zip(rounds[0].matches, create_first_round_pairings(seeds, bracket_size)):
        match.top = Slot(top, avatar=avatars.get(top))
        match.bottom = Slot(bottom, avatar=avatars.get(bottom))

    bracket = Bracket(rounds, bracket_size, bracket_size - len(seeds), seeds)
    resolve_byes(bracket)

    logger.info("Built bracket for %d participants: size %d, %d byes, %d rounds",
                len(seeds), bracket_size, bracket.bye_count, total_rounds)
    return bracket


def next_slot(bracket: Bracket, match: Match) -> Optional[Tuple[Match, str]]:
    """
    Return (next_match, 'top'|'bottom') fed by this match's winner,
    or None when the match is the final.
    """
    next_round = match.round_index + 1
    if next_round >= len(bracket.rounds):
        return None
    target = bracket.match_at(next_round, match.index // 2)
    side = 'top' if match.index % 2 == 0 else 'bottom'
    return target, side


def assign_slot(target: Match, side: str, name: str, avatar: Optional[str] = None) -> None:
    """Write a competitor into a slot that must still be TBD."""
    slot = target.slot(side)
    if not slot.is_tbd:
        logger.error("Refusing to overwrite %s slot of match %s (%s) with %s",
                     side, target.id, slot.name, name)
        raise CorruptBracket(
            f"{side.capitalize()} slot of match {target.id} already holds '{slot.name}', cannot place '{name}'"
        )
    slot.name = name
    slot.avatar = avatar


def _winner_avatar(match: Match) -> Optional[str]:
    for slot in (match.top, match.bottom):
        if slot.name == match.winner:
            return slot.avatar
    return None


def _bye_winner(match: Match) -> Optional[str]:
    if match.top.is_bye and match.bottom.is_resolved and not match.bottom.is_bye:
        return match.bottom.name
    if match.bottom.is_bye and match.top.is_resolved and not match.top.is_bye:
        return match.top.name
    return None


def resolve_byes(bracket: Bracket) -> int:
    """
    Declare bye winners and push every decided winner into its TBD slot in the
    next round, repeating until a full pass changes nothing.

    Returns the number of changes made; a second call on the same bracket
    always returns 0.
    """
    total_changes = 0
    changed = True
    while changed:
        changed = False
        for match in bracket.iter_matches():
            if match.winner is None:
                walkover = _bye_winner(match)
                if walkover is None:
                    continue
                match.winner = walkover
                changed = True
                total_changes += 1
                logger.debug("Match %s: %s advances on a bye", match.code, walkover)

            target = next_slot(bracket, match)
            if target is None:
                continue
            next_match, side = target
            slot = next_match.slot(side)
            if slot.name == match.winner:
                continue
            assign_slot(next_match, side, match.winner, _winner_avatar(match))
            changed = True
            total_changes += 1
            logger.debug("Match %s: %s placed in %s slot of %s",
                         match.code, match.winner, side, next_match.code)
    return total_changes


def find_match(bracket: Bracket, match_id: int) -> Match:
    for match in bracket.iter_matches():
        if match.id == match_id:
            return match
    raise MatchNotFound(match_id)


def playable_matches(bracket: Bracket) -> List[Match]:
    """Matches with two known, real competitors and no result yet."""
    return [m for m in bracket.iter_matches() if m.is_playable]


def get_champion(bracket: Optional[Bracket]) -> str:
    """Winner of the final, or TBD while undecided."""
    if bracket is None or bracket.final_match is None:
        return TBD
    return bracket.final_match.winner or TBD


def get_standings(bracket: Bracket) -> List[Dict]:
    """
    Per-competitor record: wins, losses and game wins from reported matches.

    Byes are not wins. Competitors are ranked by the furthest round reached
    (the champion counts one past the final), then wins, then game wins;
    equal records share a rank.
    """
    total_rounds = len(bracket.rounds)
    records = {}
    for seed in bracket.seeds:
        records[seed.name] = {
            'name': seed.name,
            'seed': seed.seed,
            'avatar': seed.avatar,
            'wins': 0,
            'losses': 0,
            'game_wins': 0,
            'round_reached': 0,
            'eliminated': False,
        }

    for match in bracket.iter_matches():
        for slot in (match.top, match.bottom):
            record = records.get(slot.name)
            if record is None:
                continue
            record['round_reached'] = max(record['round_reached'], match.round_index + 1)
            if not match.is_reported or match.is_bye:
                continue
            record['game_wins'] += slot.score
            if match.winner == slot.name:
                record['wins'] += 1
            else:
                record['losses'] += 1
                record['eliminated'] = True

    champion = get_champion(bracket)
    if champion in records:
        records[champion]['round_reached'] = total_rounds + 1

    def sort_key(record):
        return (-record['round_reached'], -record['wins'], -record['game_wins'])

    standings = sorted(records.values(), key=lambda r: (sort_key(r), r['seed']))
    previous = None
    for position, record in enumerate(standings, start=1):
        key = sort_key(record)
        record['rank'] = standings[position - 2]['rank'] if key == previous else position
        previous = key
    return standings


def get_bracket_display(bracket: Bracket) -> Dict:
    """
    Get bracket data with progress statistics for the API.
    """
    total_matches = sum(len(r.matches) for r in bracket.rounds)
    completed_matches = sum(1 for m in bracket.iter_matches() if m.winner)
    active_matches = len(playable_matches(bracket))
    progress = round(completed_matches * 100 / total_matches) if total_matches else 0

    matches_per_round = {}
    for round_ in bracket.rounds:
        matches_per_round[round_.name] = len([m for m in round_.matches if not m.is_bye])

    return {
        'rounds': [r.to_dict() for r in bracket.rounds],
        'bracket_size': bracket.bracket_size,
        'total_rounds': len(bracket.rounds),
        'total_participants': bracket.participant_count,
        'byes': bracket.bye_count,
        'matches_per_round': matches_per_round,
        'total_matches': total_matches,
        'completed_matches': completed_matches,
        'active_matches': active_matches,
        'progress': progress,
        'champion': get_champion(bracket),
        'standings': get_standings(bracket),
    }
