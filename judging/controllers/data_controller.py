# judging/controllers/data_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required, is_admin_request
from judging.services.setting_service import update_settings
from judging.services.snapshot_service import snapshot
from judging.services.websocket_service import notify_data_changed

bp_data = Blueprint('data', __name__, url_prefix='/api')

@bp_data.get('/data')
def get_data():
    # access codes only go to admins
    return jsonify(snapshot(include_codes=is_admin_request())), 200

@bp_data.put('/settings')
@admin_required
def put_settings():
    settings = update_settings(request.get_json(silent=True))
    notify_data_changed("settings")
    return jsonify({"ok": True, "settings": settings.to_dict()}), 200
