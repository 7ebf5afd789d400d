from buzzer import create_app, lan_addresses, socketio

app = create_app()

if __name__ == '__main__':
    port = app.config['PORT']
    app.logger.info(f"Server running on http://{app.config['HOST']}:{port}")
    app.logger.info(f"Admin panel: http://localhost:{port}/admin")
    for address in lan_addresses():
        app.logger.info(f"Players can connect via: http://{address}:{port}/")
    # Use SocketIO server to enable websockets
    socketio.run(app, host=app.config['HOST'], port=port, allow_unsafe_werkzeug=True)
