# judging/controllers/admin_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required
from judging.services.finalization_service import reset_finalization
from judging.services.maintenance_service import reset_all
from judging.services.payload_formatters import clean_str
from judging.services.websocket_service import notify_data_changed

bp_admin = Blueprint('admin', __name__, url_prefix='/api/admin')

@bp_admin.post('/reset')
@admin_required
def post_reset():
    counts = reset_all()
    notify_data_changed("all")
    return jsonify({"ok": True, "removed": counts}), 200

@bp_admin.post('/finalization/reset')
@admin_required
def post_finalization_reset():
    """Body: {"evaluatorId": "EVAL-..."} for one evaluator, or {} for everyone."""
    payload = request.get_json(silent=True) or {}
    count = reset_finalization(clean_str(payload.get("evaluatorId")) or None)
    notify_data_changed("evaluatorState")
    return jsonify({"ok": True, "reset": count}), 200
