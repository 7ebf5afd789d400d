import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

NAMESPACE = '/ws'


class SocketIOTransport:
    """Best-effort delivery over a Flask-SocketIO server.

    Sends and closes never raise: a connection that went away between the
    lookup and the emit simply misses the event.
    """

    def __init__(self, socketio, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, sid: str, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        try:
            self.socketio.emit(event, payload or {}, to=sid, namespace=self.namespace)
        except Exception as exc:
            logger.warning(f"[send-failed] sid={sid} event={event} error={exc}")

    def broadcast(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        try:
            self.socketio.emit(event, payload or {}, namespace=self.namespace)
        except Exception as exc:
            logger.warning(f"[broadcast-failed] event={event} error={exc}")

    def close(self, sid: str) -> None:
        try:
            self.socketio.server.disconnect(sid, namespace=self.namespace)
        except Exception as exc:
            logger.warning(f"[close-failed] sid={sid} error={exc}")
