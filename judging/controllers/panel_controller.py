# judging/controllers/panel_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required
from judging.services.panel_service import create_panel, upsert_panel, delete_panel, claimed_elsewhere
from judging.services.websocket_service import notify_data_changed

bp_panels = Blueprint('panels', __name__, url_prefix='/api/panels')

@bp_panels.get('/claimed')
@admin_required
def get_claimed():
    """Evaluators/projects already sitting on another panel, for the panel editor."""
    return jsonify(claimed_elsewhere(request.args.get("panelId"))), 200

@bp_panels.post('')
@admin_required
def post_panel():
    panel, warnings = create_panel(request.get_json(silent=True))
    notify_data_changed("panels")
    return jsonify({"ok": True, "panel": panel.to_dict(), "warnings": warnings}), 201

@bp_panels.put('/<string:panel_id>')
@admin_required
def put_panel(panel_id):
    panel, warnings = upsert_panel(panel_id, request.get_json(silent=True))
    notify_data_changed("panels")
    return jsonify({"ok": True, "panel": panel.to_dict(), "warnings": warnings}), 200

@bp_panels.delete('/<string:panel_id>')
@admin_required
def remove_panel(panel_id):
    delete_panel(panel_id)
    notify_data_changed("panels")
    return jsonify({"ok": True}), 200
