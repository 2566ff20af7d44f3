# judging/services/auth_service.py
from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy import func
from werkzeug.security import check_password_hash

from judging.exceptions import AuthError
from judging.models.evaluator import Evaluator
from judging.services.payload_formatters import clean_str
from judging.services.setting_service import get_settings

ROLE_ADMIN = "admin"
ROLE_EVALUATOR = "evaluator"


def issue_token(role, identity):
    return create_access_token(identity=str(identity), additional_claims={"role": role})


def authenticate_admin(email, password):
    email = (clean_str(email) or "").lower()
    if not email or not password:
        raise AuthError("Invalid credentials")

    settings = get_settings()
    if email != (settings.admin_email or "").lower() or \
            not check_password_hash(settings.admin_password_hash, str(password)):
        current_app.logger.warning("Failed admin login for %s", email)
        raise AuthError("Invalid credentials")

    return issue_token(ROLE_ADMIN, ROLE_ADMIN)


def authenticate_evaluator(email, code):
    email = (clean_str(email) or "").lower()
    code = clean_str(code)
    if not email or not code:
        raise AuthError("Invalid email or access code")

    evaluator = (Evaluator.query
                 .filter(func.lower(Evaluator.email) == email, Evaluator.code == code)
                 .order_by(Evaluator.created_at.asc(), Evaluator.id.asc())
                 .first())
    if not evaluator:
        current_app.logger.warning("Failed evaluator login for %s", email)
        raise AuthError("Invalid email or access code")

    return issue_token(ROLE_EVALUATOR, evaluator.id), evaluator
