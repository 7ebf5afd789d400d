import itertools
import logging
from typing import Callable, Dict, List, Optional, Tuple

from .models import Team

logger = logging.getLogger(__name__)

# A purge firing this close to the deadline still counts as elapsed
PURGE_TOLERANCE_SEC = 1.0


class ConnectionRegistry:
    """Live team connections by name plus the single admin connection.

    The registry only tracks identities; closing sockets and scheduling the
    deferred purge are left to the caller, which gets back what it needs
    from ``join`` and ``disconnect``.
    """

    def __init__(self, clock: Callable[[], float], grace_sec: float = 60.0):
        self._clock = clock
        self.grace_sec = grace_sec
        self._teams: Dict[str, Team] = {}
        self._sid_to_name: Dict[str, str] = {}
        self._purge_tokens: Dict[str, int] = {}
        self._token_seq = itertools.count(1)
        self.admin_sid: Optional[str] = None

    # ---- queries ----
    def names(self) -> List[str]:
        return list(self._teams.keys())

    def count(self) -> int:
        return len(self._teams)

    def get(self, name: str) -> Optional[Team]:
        return self._teams.get(name)

    def sid_for(self, name: str) -> Optional[str]:
        team = self._teams.get(name)
        if team is None or not team.is_connected:
            return None
        return team.sid

    def team_for_sid(self, sid: str) -> Optional[str]:
        """Name of the team whose live connection is ``sid``."""
        name = self._sid_to_name.get(sid)
        if name is None:
            return None
        team = self._teams.get(name)
        if team is None or team.sid != sid:
            return None
        return name

    def is_admin(self, sid: str) -> bool:
        return self.admin_sid is not None and self.admin_sid == sid

    # ---- admin ----
    def set_admin(self, sid: str) -> Optional[str]:
        """Make ``sid`` the administrator; returns the replaced sid, if any."""
        previous = self.admin_sid if self.admin_sid != sid else None
        self.admin_sid = sid
        return previous

    # ---- teams ----
    def join(self, name: str, sid: str) -> Optional[str]:
        """Bind ``name`` to ``sid``.

        Returns the sid of a prior live connection under the same name that
        the caller must close, or None.
        """
        # A connection rejoining under a new name gives up its old one
        old_name = self.team_for_sid(sid)
        if old_name is not None and old_name != name:
            self._teams.pop(old_name, None)
            self._purge_tokens.pop(old_name, None)

        displaced = None
        existing = self._teams.get(name)
        if existing is not None:
            if existing.sid != sid and existing.is_connected:
                displaced = existing.sid
            self._sid_to_name.pop(existing.sid, None)
            existing.sid = sid
            existing.joined_at = self._clock()
            existing.disconnected_at = None
        else:
            self._teams[name] = Team(name=name, sid=sid, joined_at=self._clock())
        self._sid_to_name[sid] = name
        self._purge_tokens.pop(name, None)
        return displaced

    def disconnect(self, sid: str) -> Optional[Tuple[str, int]]:
        """Handle a closed channel.

        Returns ``(name, token)`` when a purge should be scheduled for the
        team that owned ``sid``.
        """
        if self.admin_sid == sid:
            self.admin_sid = None
        name = self.team_for_sid(sid)
        self._sid_to_name.pop(sid, None)
        if name is None:
            return None
        team = self._teams[name]
        team.disconnected_at = self._clock()
        token = next(self._token_seq)
        self._purge_tokens[name] = token
        return name, token

    def purge(self, name: str, token: int) -> bool:
        """Drop ``name`` if it is still the same stale disconnection."""
        team = self._teams.get(name)
        if team is None or team.disconnected_at is None:
            return False
        if self._purge_tokens.get(name) != token:
            return False
        elapsed = self._clock() - team.disconnected_at
        if elapsed + PURGE_TOLERANCE_SEC < self.grace_sec:
            return False
        del self._teams[name]
        self._purge_tokens.pop(name, None)
        logger.info(f"[purge] team={name} after {elapsed:.1f}s")
        return True

    def remove(self, name: str) -> Optional[Team]:
        team = self._teams.pop(name, None)
        if team is not None:
            self._sid_to_name.pop(team.sid, None)
            self._purge_tokens.pop(name, None)
        return team
