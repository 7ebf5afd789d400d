import logging
from typing import Callable

logger = logging.getLogger(__name__)


class SocketIOScheduler:
    """Run a callback after a delay on a Socket.IO background task.

    Uses ``socketio.sleep`` so the wait cooperates with eventlet/gevent as
    well as plain threads. There is no handle to cancel: callbacks must
    re-check state when they fire.
    """

    def __init__(self, socketio):
        self.socketio = socketio

    def schedule(self, delay: float, callback: Callable, *args) -> None:
        def _runner():
            self.socketio.sleep(max(0.0, delay))
            try:
                callback(*args)
            except Exception:
                logger.exception(f"[timer-error] callback={getattr(callback, '__name__', callback)}")

        self.socketio.start_background_task(_runner)
