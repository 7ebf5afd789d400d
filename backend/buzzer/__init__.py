import socket

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _origins(value):
    if not value or value == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


def lan_addresses():
    """Best-effort list of this host's non-loopback IPv4 addresses."""
    addresses = set()
    try:
        for info in socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET):
            addresses.add(info[4][0])
    except OSError:
        pass
    # The routing table knows the outward-facing address even when the
    # hostname resolves to loopback; UDP connect sends nothing
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        probe.connect(('10.255.255.255', 1))
        addresses.add(probe.getsockname()[0])
    except OSError:
        pass
    finally:
        probe.close()
    return sorted(a for a in addresses if not a.startswith('127.'))


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from buzzer.main import main
    flask_app.register_blueprint(main)

    # One tournament per process; handlers reach it through the app
    from buzzer.dispatcher import Dispatcher
    from buzzer.services.scheduler import SocketIOScheduler
    from buzzer.session import TournamentSession
    from buzzer.transport import SocketIOTransport
    session = TournamentSession(
        transport=SocketIOTransport(socketio),
        scheduler=SocketIOScheduler(socketio),
        grace_sec=float(flask_app.config.get('DISCONNECT_GRACE_SEC', 60)),
    )
    flask_app.extensions['buzzer'] = Dispatcher(session)

    from buzzer.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('urls')
    def urls_command():
        """Print the addresses players and the admin should open."""
        port = flask_app.config.get('PORT', 3000)
        click.echo(f'Admin panel: http://localhost:{port}/admin')
        for address in lan_addresses():
            click.echo(f'Players can connect via: http://{address}:{port}/')

    flask_app.cli.add_command(urls_command)

    return flask_app
