# judging/controllers/result_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required, evaluator_required, current_evaluator_id
from judging.services.result_service import submit_result, clear_results
from judging.services.websocket_service import notify_data_changed

bp_results = Blueprint('results', __name__, url_prefix='/api/results')

@bp_results.post('')
@evaluator_required
def post_result():
    result, created = submit_result(current_evaluator_id(), request.get_json(silent=True))
    notify_data_changed("results", evaluatorId=result.evaluator_id)
    return jsonify({"ok": True, "created": created, "result": result.to_dict()}), 200

@bp_results.delete('')
@admin_required
def delete_results():
    removed = clear_results()
    notify_data_changed("results")
    return jsonify({"ok": True, "removed": removed}), 200
