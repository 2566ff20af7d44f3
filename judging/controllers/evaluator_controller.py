# judging/controllers/evaluator_controller.py
from flask import Blueprint, request, jsonify
from judging.middleware.auth_guard import admin_required
from judging.services.evaluator_service import (
    create_evaluator, upsert_evaluator, delete_evaluator, bulk_upsert_evaluators
)
from judging.services.websocket_service import notify_data_changed

bp_evaluators = Blueprint('evaluators', __name__, url_prefix='/api/evaluators')

@bp_evaluators.post('')
@admin_required
def post_evaluator():
    evaluator = create_evaluator(request.get_json(silent=True))
    notify_data_changed("evaluators")
    return jsonify({"ok": True, "evaluator": evaluator.to_dict()}), 201

@bp_evaluators.post('/bulk')
@admin_required
def post_evaluators_bulk():
    outcome = bulk_upsert_evaluators(request.get_json(silent=True))
    notify_data_changed("evaluators")
    return jsonify(outcome), 200

@bp_evaluators.put('/<string:evaluator_id>')
@admin_required
def put_evaluator(evaluator_id):
    evaluator = upsert_evaluator(evaluator_id, request.get_json(silent=True))
    notify_data_changed("evaluators")
    return jsonify({"ok": True, "evaluator": evaluator.to_dict()}), 200

@bp_evaluators.delete('/<string:evaluator_id>')
@admin_required
def remove_evaluator(evaluator_id):
    delete_evaluator(evaluator_id)
    notify_data_changed("evaluators")
    return jsonify({"ok": True}), 200
