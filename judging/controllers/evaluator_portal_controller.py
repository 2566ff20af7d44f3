# judging/controllers/evaluator_portal_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import evaluator_required, current_evaluator_id, ensure_self
from judging.services.evaluator_service import update_profile
from judging.services.finalization_service import worklist, finalize
from judging.services.payload_formatters import clean_str
from judging.services.websocket_service import notify_data_changed

bp_portal = Blueprint('evaluator_portal', __name__, url_prefix='/api/evaluator')

@bp_portal.get('/assignments')
@evaluator_required
def get_assignments():
    return jsonify(worklist(current_evaluator_id())), 200

@bp_portal.post('/finalize')
@evaluator_required
def post_finalize():
    payload = request.get_json(silent=True) or {}
    evaluator_id = ensure_self(clean_str(payload.get("evaluatorId")) or current_evaluator_id())
    state = finalize(evaluator_id)
    notify_data_changed("evaluatorState", evaluatorId=evaluator_id)
    return jsonify({"ok": True, **state}), 200

@bp_portal.post('/profile')
@evaluator_required
def post_profile():
    payload = request.get_json(silent=True) or {}
    evaluator = update_profile(current_evaluator_id(), payload.get("evaluator"))
    notify_data_changed("evaluators")
    return jsonify({"ok": True, "evaluator": evaluator.to_dict()}), 200
