from draftroom import create_app, socketio

app = create_app()

if __name__ == '__main__':
    try:
        # Use SocketIO server to enable websockets in dev
        socketio.run(app, debug=True)
    finally:
        app.extensions['draft_directory'].shutdown()
