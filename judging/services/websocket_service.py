# judging/services/websocket_service.py
from flask import current_app
from judging.extension.extensions import socketio


def notify_data_changed(scope, **extra):
    """Tell connected dashboards to re-fetch GET /api/data."""
    payload = {"scope": scope}
    payload.update(extra)
    try:
        socketio.emit("data_changed", payload)
    except Exception:
        # mutation is already committed
        current_app.logger.exception("data_changed emit failed for %s", scope)
