import os

from flask import Blueprint, abort, current_app, send_from_directory

main = Blueprint('main', __name__)

PAGES_DIR = os.path.join(os.path.dirname(__file__), 'pages')


def _page(filename):
    if not os.path.isfile(os.path.join(PAGES_DIR, filename)):
        current_app.logger.error(f"[page-missing] {filename}")
        abort(500)
    return send_from_directory(PAGES_DIR, filename, mimetype='text/html')


@main.route('/')
@main.route('/index.html')
def index():
    return _page('index.html')


@main.route('/admin')
def admin():
    return _page('admin.html')


@main.app_errorhandler(404)
def not_found(error):
    return 'Not found', 404


@main.app_errorhandler(500)
def server_error(error):
    return 'Error loading page', 500
