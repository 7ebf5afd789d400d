from typing import Any, Dict, Optional

from .registry import ConnectionRegistry


class Notifier:
    """Fan-out of events to teams, the admin and everyone connected.

    Targets are resolved through the registry at send time; a target with
    no live connection is skipped without error.
    """

    def __init__(self, transport, registry: ConnectionRegistry):
        self.transport = transport
        self.registry = registry

    def broadcast_all(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self.transport.broadcast(event, payload)

    def reply(self, sid: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        self.transport.send(sid, event, payload)

    def notify_team(self, name: Optional[str], event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        if name is None:
            return
        sid = self.registry.sid_for(name)
        if sid is None:
            return
        self.transport.send(sid, event, payload)

    def notify_admin(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        if self.registry.admin_sid is None:
            return
        self.transport.send(self.registry.admin_sid, event, payload)

    def roster(self) -> Dict[str, Any]:
        names = self.registry.names()
        return {'teams': names, 'count': len(names)}

    def broadcast_roster(self) -> None:
        self.broadcast_all('teams', self.roster())
