import os
import random
import sys
import pytest

# Ensure the backend root (containing the `buzzer` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from buzzer import create_app, socketio
from buzzer.dispatcher import Dispatcher
from buzzer.messages import parse_message
from buzzer.session import TournamentSession

TEAM_NAMES = ['A', 'B', 'C', 'D', 'E', 'F', 'G', 'H']


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    CORS_ORIGINS = '*'
    DISCONNECT_GRACE_SEC = 60
    LOG_LEVEL = 'DEBUG'
    PORT = 3000


class FakeTransport:
    """Records every delivery instead of touching a socket."""

    def __init__(self):
        self.sent = []
        self.broadcasts = []
        self.closed = []

    def send(self, sid, event, payload=None):
        self.sent.append((sid, event, payload or {}))

    def broadcast(self, event, payload=None):
        self.broadcasts.append((event, payload or {}))

    def close(self, sid):
        self.closed.append(sid)

    def events_for(self, sid):
        return [event for to, event, _ in self.sent if to == sid]

    def last_payload(self, sid, event):
        for to, name, payload in reversed(self.sent):
            if to == sid and name == event:
                return payload
        return None

    def broadcast_events(self):
        return [event for event, _ in self.broadcasts]

    def clear(self):
        self.sent.clear()
        self.broadcasts.clear()
        self.closed.clear()


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ManualScheduler:
    """Holds scheduled callbacks until a test fires them."""

    def __init__(self):
        self.pending = []

    def schedule(self, delay, callback, *args):
        self.pending.append((delay, callback, args))

    def run_all(self):
        pending, self.pending = self.pending, []
        for _, callback, args in pending:
            callback(*args)


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def session(transport, scheduler, clock):
    return TournamentSession(transport, scheduler, clock=clock, rng=random.Random(7), grace_sec=60)


@pytest.fixture()
def dispatcher(session):
    return Dispatcher(session)


@pytest.fixture()
def send(dispatcher):
    def _send(sid, tag, data=None):
        dispatcher.dispatch(sid, parse_message(tag, data))
    return _send


@pytest.fixture()
def started(send, session, transport):
    """Admin connected, teams A..H joined and the bracket seeded."""
    send('admin', 'admin-join')
    for name in TEAM_NAMES:
        send(f'sid-{name}', 'team-join', {'name': name})
    send('admin', 'start-tournament')
    assert session.tournament.started
    transport.clear()
    return session


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
