# judging/controllers/auth_controller.py
from flask import Blueprint, request, jsonify
from judging.services.auth_service import authenticate_admin, authenticate_evaluator

bp_auth = Blueprint('auth', __name__, url_prefix='/api/auth')

@bp_auth.post('/admin-login')
def admin_login():
    data = request.get_json(silent=True) or {}
    token = authenticate_admin(data.get("email"), data.get("password"))
    return jsonify({"ok": True, "token": token}), 200

@bp_auth.post('/eval-login')
def eval_login():
    data = request.get_json(silent=True) or {}
    token, evaluator = authenticate_evaluator(data.get("email"), data.get("code"))
    return jsonify({"ok": True, "token": token, "evaluator": evaluator.to_dict()}), 200
