"""Per-match round lifecycle.

Each transition takes the session, checks the state it needs beyond the
dispatcher's role/phase gates, mutates tournament and round state, and sends
the targeted notifications. It returns True when state changed so the
caller knows to broadcast a snapshot.
"""
import logging

from buzzer.models import FinalMatch, GENRES, FINAL_WINNING_SCORE, MatchRef, Phase
from .bracket import advance_winners

logger = logging.getLogger(__name__)


def select_match(session, ref: MatchRef) -> bool:
    tournament = session.tournament
    if not tournament.started:
        return False
    match = tournament.bracket.get(ref)
    if match is None or match.is_resolved or not match.is_ready:
        return False

    previous = tournament.get_current_match()
    if previous is not None and previous is not match:
        previous.active = False

    tournament.current_match = ref
    tournament.phase = Phase.WHEEL
    match.active = True
    session.round.clear()
    logger.info(f"[select-match] round={ref.round.value} index={ref.index} teams={match.team1},{match.team2}")
    return True


def spin_wheel(session) -> bool:
    genre = session.rng.choice(GENRES)
    session.round.genre = genre
    session.notifier.broadcast_all('wheel-result', {'genre': genre})
    logger.info(f"[spin] genre={genre}")
    return True


def start_round(session) -> bool:
    match = session.tournament.get_current_match()
    if match is None:
        return False
    state = session.round
    state.buzzed_team = None
    state.buzz_time_ms = None
    state.current_answerer = None
    state.can_buzz = match.teams()
    state.started_at = session.clock()
    session.tournament.phase = Phase.BUZZER

    for team in state.can_buzz:
        session.notifier.notify_team(team, 'show-button')
    session.notifier.notify_admin('round-started')
    logger.info(f"[round-start] teams={state.can_buzz} genre={state.genre}")
    return True


def buzz(session, team: str) -> bool:
    state = session.round
    if team not in state.can_buzz or state.buzzed_team is not None:
        return False
    match = session.tournament.get_current_match()
    if match is None:
        return False

    state.buzzed_team = team
    state.buzz_time_ms = int(round((session.clock() - state.started_at) * 1000))
    state.current_answerer = team
    session.tournament.phase = Phase.ANSWERING

    notifier = session.notifier
    notifier.notify_team(team, 'you-answer', {'time': state.buzz_time_ms})
    notifier.notify_team(match.other_team(team), 'opponent-answers', {'opponent': team})
    notifier.notify_admin('buzzed', {'team': team, 'time': state.buzz_time_ms})
    logger.info(f"[buzz] team={team} time={state.buzz_time_ms}ms")
    return True


def wrong_answer(session) -> bool:
    tournament = session.tournament
    state = session.round
    match = tournament.get_current_match()
    wrong_team = state.current_answerer
    if match is None or wrong_team is None:
        return False
    other = match.other_team(wrong_team)
    state.can_buzz = [t for t in state.can_buzz if t != wrong_team]
    notifier = session.notifier

    if other is not None and other in state.can_buzz:
        state.current_answerer = other
        notifier.notify_team(wrong_team, 'you-wrong-wait')
        notifier.notify_team(other, 'your-turn-answer')
        notifier.notify_admin('wrong-other-answers', {'team': other})
        logger.info(f"[wrong] team={wrong_team} passes to {other}")
        return True

    state.clear()
    tournament.phase = Phase.WHEEL
    for team in match.teams():
        notifier.notify_team(team, 'both-wrong-new-song')
    notifier.notify_admin('both-wrong')
    logger.info("[wrong] both teams missed; back to wheel")
    return True


def correct_answer(session) -> bool:
    tournament = session.tournament
    match = tournament.get_current_match()
    winner = session.round.current_answerer
    if match is None or winner is None:
        return False
    if isinstance(match, FinalMatch):
        return _final_point(session, match, winner)

    loser = match.other_team(winner)
    match.winner = winner
    match.active = False
    tournament.current_match = None
    tournament.phase = Phase.WAITING
    session.round.clear()
    advance_winners(tournament.bracket)

    notifier = session.notifier
    notifier.notify_team(winner, 'you-won-match')
    notifier.notify_team(loser, 'you-lost-match', {'winner': winner, 'isFinal': False})
    notifier.notify_admin('match-winner', {'winner': winner, 'isFinal': False})
    logger.info(f"[match-winner] winner={winner} loser={loser}")
    return True


def _final_point(session, match: FinalMatch, scorer: str) -> bool:
    tournament = session.tournament
    notifier = session.notifier
    match.add_point(scorer)
    scores = {'score1': match.score1, 'score2': match.score2}

    champion = match.leader_at(FINAL_WINNING_SCORE)
    if champion is not None:
        runner_up = match.other_team(champion)
        match.winner = champion
        match.active = False
        tournament.current_match = None
        tournament.phase = Phase.WAITING
        session.round.clear()
        notifier.notify_team(champion, 'you-won-tournament')
        notifier.notify_team(runner_up, 'you-lost-match', {'winner': champion, 'isFinal': True})
        notifier.notify_admin('match-winner', {'winner': champion, 'isFinal': True})
        logger.info(f"[champion] team={champion} score={match.score1}-{match.score2}")
        return True

    tournament.phase = Phase.WHEEL
    session.round.clear()
    notifier.notify_team(scorer, 'correct-next-round', scores)
    notifier.notify_team(match.other_team(scorer), 'opponent-correct-next-round', scores)
    notifier.notify_admin('final-point', dict(scores, team=scorer))
    logger.info(f"[final-point] team={scorer} score={match.score1}-{match.score2}")
    return True
