from flask import current_app, request

from buzzer import socketio
from buzzer.errors import MalformedMessage
from buzzer.messages import MESSAGE_TYPES, parse_message
from buzzer.transport import NAMESPACE


def _dispatcher():
    return current_app.extensions['buzzer']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.debug(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    _dispatcher().connection_closed(_get_sid())


def _make_handler(tag: str):
    def _handler(data=None):
        try:
            message = parse_message(tag, data)
        except MalformedMessage as exc:
            current_app.logger.warning(f"[malformed] sid={_get_sid()} {exc.message}")
            return
        _dispatcher().dispatch(_get_sid(), message)

    _handler.__name__ = f"handle_{tag.replace('-', '_')}"
    return _handler


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers.

    Every inbound message tag becomes an event of the same name on
    namespace '/ws'.
    """
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    for tag in MESSAGE_TYPES:
        socketio.on_event(tag, _make_handler(tag), namespace=NAMESPACE)
