import logging
import random
from typing import Optional, Sequence

from buzzer.models import Bracket, BRACKET_SIZE, FinalMatch, Match

logger = logging.getLogger(__name__)


def initialize_bracket(bracket: Bracket, team_names: Sequence[str], rng: Optional[random.Random] = None) -> bool:
    """Seed the quarterfinals from a random pairing of exactly eight teams.

    Returns False and leaves the bracket untouched for any other count.
    """
    if len(team_names) != BRACKET_SIZE or len(set(team_names)) != BRACKET_SIZE:
        return False
    rng = rng or random
    order = list(team_names)
    rng.shuffle(order)

    bracket.quarterfinals = [Match(team1=order[i * 2], team2=order[i * 2 + 1]) for i in range(4)]
    bracket.semifinals = [Match() for _ in range(2)]
    bracket.final = FinalMatch()
    logger.info(f"[bracket-init] pairs={[(m.team1, m.team2) for m in bracket.quarterfinals]}")
    return True


def _feed(target: Match, left: Match, right: Match) -> None:
    if left.winner is None or right.winner is None:
        return
    target.team1 = left.winner
    target.team2 = right.winner


def advance_winners(bracket: Bracket) -> None:
    """Move decided winners into the next round.

    Safe to call after every result: a slot is only filled once both of
    its feeding matches are decided.
    """
    qf = bracket.quarterfinals
    sf = bracket.semifinals
    _feed(sf[0], qf[0], qf[1])
    _feed(sf[1], qf[2], qf[3])
    _feed(bracket.final, sf[0], sf[1])
