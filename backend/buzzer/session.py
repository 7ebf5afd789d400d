import random
import threading
import time
from typing import Callable, Optional

from .models import RoundState, Tournament
from .notifier import Notifier
from .registry import ConnectionRegistry


class TournamentSession:
    """All mutable server state for one running tournament.

    Holds the tournament, the current round, the connection registry and
    the notifier built on top of it. ``lock`` serialises every mutation:
    Socket.IO handlers and purge timers may run on different threads.
    """

    def __init__(
        self,
        transport,
        scheduler,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        grace_sec: float = 60.0,
    ):
        self.transport = transport
        self.scheduler = scheduler
        self.clock = clock
        self.rng = rng or random.Random()
        self.lock = threading.RLock()
        self.registry = ConnectionRegistry(clock, grace_sec)
        self.notifier = Notifier(transport, self.registry)
        self.tournament = Tournament()
        self.round = RoundState()

    def reset(self) -> None:
        """Discard all match results; registered teams stay."""
        self.tournament.reset()
        self.round.clear()

    def snapshot(self):
        return {
            'tournament': self.tournament.to_dict(),
            'gameState': self.round.to_dict(self.tournament.phase),
        }

    def broadcast_snapshot(self) -> None:
        self.notifier.broadcast_all('tournament-state', self.snapshot())
