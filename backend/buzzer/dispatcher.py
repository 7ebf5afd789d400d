import logging
from typing import Callable, Dict, Type

from .messages import (
    AdminJoin, Buzz, CorrectAnswer, KickTeam, Message, MESSAGE_TYPES, Ping,
    ResetTournament, SelectMatch, SpinWheel, StartRound, StartTournament,
    TeamJoin, WrongAnswer,
)
from .models import GENRES, Phase
from .services import rounds
from .services.bracket import initialize_bracket
from .session import TournamentSession

logger = logging.getLogger(__name__)

ADMIN_ONLY = frozenset({
    StartTournament, ResetTournament, SelectMatch, SpinWheel, StartRound,
    CorrectAnswer, WrongAnswer, KickTeam,
})

# Phases in which a message may be handled; absent means any phase
ALLOWED_PHASES: Dict[Type, frozenset] = {
    SpinWheel: frozenset({Phase.WHEEL}),
    Buzz: frozenset({Phase.BUZZER}),
    CorrectAnswer: frozenset({Phase.ANSWERING}),
    WrongAnswer: frozenset({Phase.ANSWERING}),
}


class Dispatcher:
    """Route parsed messages from a connection to session transitions.

    Role and phase gates are checked here from the tables above; a message
    that fails them, or that its transition declines, is dropped without
    a reply.
    """

    def __init__(self, session: TournamentSession):
        self.session = session
        self._handlers: Dict[Type, Callable[[str, Message], None]] = {
            AdminJoin: self._admin_join,
            TeamJoin: self._team_join,
            StartTournament: self._start_tournament,
            ResetTournament: self._reset_tournament,
            SelectMatch: self._select_match,
            SpinWheel: self._spin_wheel,
            StartRound: self._start_round,
            Buzz: self._buzz,
            CorrectAnswer: self._correct_answer,
            WrongAnswer: self._wrong_answer,
            KickTeam: self._kick_team,
            Ping: self._ping,
        }
        missing = set(MESSAGE_TYPES.values()) - set(self._handlers)
        if missing:
            raise TypeError(f"no handler for {sorted(cls.TAG for cls in missing)}")

    def dispatch(self, sid: str, message: Message) -> None:
        session = self.session
        kind = type(message)
        with session.lock:
            if kind in ADMIN_ONLY and not session.registry.is_admin(sid):
                logger.debug(f"[ignored] {kind.TAG} from non-admin sid={sid}")
                return
            allowed = ALLOWED_PHASES.get(kind)
            if allowed is not None and session.tournament.phase not in allowed:
                logger.debug(f"[ignored] {kind.TAG} in phase={session.tournament.phase.value}")
                return
            self._handlers[kind](sid, message)

    def connection_closed(self, sid: str) -> None:
        session = self.session
        with session.lock:
            pending = session.registry.disconnect(sid)
        if pending is None:
            return
        name, token = pending
        logger.info(f"[disconnect] team={name} grace={session.registry.grace_sec}s")
        session.scheduler.schedule(session.registry.grace_sec, self.purge, name, token)

    def purge(self, name: str, token: int) -> None:
        session = self.session
        with session.lock:
            if session.registry.purge(name, token):
                session.notifier.broadcast_roster()

    # ---- handlers ----
    def _ping(self, sid, message):
        self.session.notifier.reply(sid, 'pong')

    def _admin_join(self, sid, message):
        session = self.session
        previous = session.registry.set_admin(sid)
        if previous is not None:
            logger.info(f"[admin-join] replacing admin sid={previous}")
        notifier = session.notifier
        notifier.reply(sid, 'teams', notifier.roster())
        notifier.reply(sid, 'genres', {'genres': list(GENRES)})
        notifier.reply(sid, 'tournament-state', session.snapshot())

    def _team_join(self, sid, message):
        session = self.session
        displaced = session.registry.join(message.name, sid)
        if displaced is not None:
            logger.info(f"[team-join] team={message.name} took over from sid={displaced}")
            session.transport.close(displaced)
        logger.info(f"[team-join] team={message.name} sid={sid}")
        session.notifier.reply(sid, 'joined', {'name': message.name})
        session.notifier.broadcast_roster()
        session.broadcast_snapshot()

    def _start_tournament(self, sid, message):
        session = self.session
        names = session.registry.names()
        if not initialize_bracket(session.tournament.bracket, names, session.rng):
            logger.debug(f"[ignored] start-tournament with {len(names)} teams")
            return
        session.tournament.started = True
        session.tournament.current_match = None
        session.tournament.phase = Phase.WAITING
        session.round.clear()
        session.broadcast_snapshot()

    def _reset_tournament(self, sid, message):
        self.session.reset()
        logger.info("[reset] tournament cleared")
        self.session.broadcast_snapshot()

    def _select_match(self, sid, message):
        if rounds.select_match(self.session, message.ref):
            self.session.broadcast_snapshot()

    def _spin_wheel(self, sid, message):
        if rounds.spin_wheel(self.session):
            self.session.broadcast_snapshot()

    def _start_round(self, sid, message):
        if rounds.start_round(self.session):
            self.session.broadcast_snapshot()

    def _buzz(self, sid, message):
        team = self.session.registry.team_for_sid(sid)
        if team is None:
            return
        if rounds.buzz(self.session, team):
            self.session.broadcast_snapshot()

    def _correct_answer(self, sid, message):
        if rounds.correct_answer(self.session):
            self.session.broadcast_snapshot()

    def _wrong_answer(self, sid, message):
        if rounds.wrong_answer(self.session):
            self.session.broadcast_snapshot()

    def _kick_team(self, sid, message):
        session = self.session
        team = session.registry.remove(message.name)
        if team is None:
            return
        if team.is_connected:
            session.transport.send(team.sid, 'kicked')
            session.transport.close(team.sid)
        logger.info(f"[kick] team={message.name}")
        session.notifier.broadcast_roster()
